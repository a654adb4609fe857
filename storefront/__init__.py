"""
Data-access layer for a storefront: a query wrapper over SQLAlchemy Core and
an account provider for login, roles and permissions.
"""

import logging
from typing import Optional, Union

from storefront.database.config.config import settings

logging.getLogger(__name__).addHandler(logging.NullHandler())


def configure_logging(level: Optional[Union[int, str]] = None) -> logging.Logger:
    """Set the level of the package logger, `settings.LOG_LEVEL` by default."""
    logger = logging.getLogger(__name__)
    logger.setLevel(level if level is not None else settings.LOG_LEVEL)
    return logger
