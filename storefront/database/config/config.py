"""
Configuration — Pydantic v2 Settings (env / .env)
=================================================

Purpose
-------
Centralized, strongly-typed configuration for the data-access layer using:
- Pydantic v2 `BaseSettings` for environment-driven values
- `pydantic-settings` v2 for `.env` loading and model config

Load Order & Behavior
---------------------
- Values are read from the environment; if not present, `.env` is used.
- Every field has a default, so the package imports without any `.env`
  (an in-memory SQLite database is assumed).
- `extra="ignore"`: unknown env vars are ignored (not an error).
- List values (``ACCOUNT_FIELDS``) are given as JSON in the environment,
  e.g. ``ACCOUNT_FIELDS='["nickname", "company"]'``.

Usage
-----
from storefront.database.config.config import settings

db_host = settings.DB_HOST
extra_fields = settings.ACCOUNT_FIELDS

Security
--------
- Never commit secrets or the `.env` file to source control.
"""

from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Settings for the database connection and the account provider, loaded
    from environment variables or a `.env` file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    DB_DRIVER_NAME: str = Field("sqlite", description="SQLAlchemy driver name (e.g., `postgresql+psycopg`, `mysql+pymysql`, `sqlite`).")
    DB_USERNAME: Optional[str] = Field(None, description="Database username credential.")
    DB_PASSWORD: Optional[str] = Field(None, description="Database password credential.")
    DB_HOST: Optional[str] = Field(None, description="Hostname or IP address of the database server.")
    DB_PORT: Optional[int] = Field(None, description="Port of the database server.")
    DB_DATABASE_NAME: str = Field(":memory:", description="Name of the shop database (file path for SQLite).")
    DB_ECHO: bool = Field(False, description="Echo every SQL statement through SQLAlchemy's engine logger.")
    ACCOUNT_FIELDS: List[str] = Field(default_factory=list, description="Extra `users` columns copied into the account record on login.")
    ACCOUNT_INACTIVE_FIELD: Optional[str] = Field(None, description="`users` column flagging a disabled account.")
    LOG_LEVEL: str = Field("WARNING", description="Level of the `storefront` package logger.")

    @field_validator("LOG_LEVEL")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        return value.upper()


# Singleton instance of Settings, ready to be imported across the package
settings = Settings()
"""Settings object built from the environment and the .env file"""
