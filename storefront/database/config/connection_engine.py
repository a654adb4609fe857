"""
Connection Engine (SQLAlchemy)

Purpose
-------
Centralizes database bootstrap for host applications:
- Builds a SQLAlchemy connection URL from environment-backed settings.
- Creates the Engine (connection pool + SQL execution entry point).
- Defines shared MetaData for the shop tables.
- Exposes a Declarative Base class for the ORM models in `entities`.

Notes
-----
- The query wrapper and the account provider never create engines or
  connections themselves; the host application opens a `Connection` (or
  `Session`) from the engine built here and passes it in.
- Uses `URL.create(...)` to keep credentials out of source code.
"""

from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import URL, Engine
from sqlalchemy.orm import declarative_base
from sqlalchemy.schema import MetaData

from storefront.database.config.config import Settings, settings as default_settings


def connection_url(settings: Optional[Settings] = None) -> URL:
    """
    Construct the SQLAlchemy connection URL from the given settings
    (the module singleton by default).
    """
    settings = settings or default_settings
    return URL.create(
        drivername=settings.DB_DRIVER_NAME,
        username=settings.DB_USERNAME,
        password=settings.DB_PASSWORD,
        host=settings.DB_HOST,
        port=settings.DB_PORT,
        database=settings.DB_DATABASE_NAME,
    )


def create_connection_engine(settings: Optional[Settings] = None, **kwargs) -> Engine:
    """
    Create an Engine for the configured database.

    Parameters
    ----------
    settings : Settings, optional
        Settings to read; defaults to the module singleton.
    **kwargs
        Passed through to `sqlalchemy.create_engine` (pool tuning, SSL, ...).

    Returns
    -------
    Engine
        A lazily connecting SQLAlchemy engine.
    """
    settings = settings or default_settings
    kwargs.setdefault("echo", settings.DB_ECHO)
    return create_engine(connection_url(settings), **kwargs)


# --------------------------------------------------------------------
# Metadata object: stores schema-level information about the shop
# tables. Shared across all models.
# --------------------------------------------------------------------
metadata = MetaData()
"""
Metadata object: Stores schema-level information about tables, constraints, indexes, etc. Shared across all models.
"""

declarativeBase = declarative_base(metadata=metadata)
"""Declarative Base: Root class for the ORM models of the fixed account schema."""
