"""
User ORM Model
==============

The ``User`` ORM model maps the ``users`` table the account provider
authenticates against.

Key features
~~~~~~~~~~~~
- Integer primary key (``uid``)
- Login name (``username``) and login address (``email``)
- Stored credential (``password``), always a hash produced by the injected
  password crypt

Host applications may add further columns (extra account fields, an
inactive flag); the account provider reads them by name.
"""

from sqlalchemy import Integer, TEXT, VARCHAR
from sqlalchemy.orm import Mapped, mapped_column

from storefront.database.config.connection_engine import declarativeBase


class User(declarativeBase):
    """
    ORM model for the `users` table.

    Attributes
    ----------
    uid : int
        Primary key. User identifier.
    username : str
        Unique username (max 255 chars).
    email : str
        Email address; `login` matches the supplied username against it.
    password : str
        Hashed password.
    """

    __tablename__ = "users"

    uid: Mapped[int] = mapped_column(Integer, primary_key=True)
    """Primary key. User identifier."""

    username: Mapped[str] = mapped_column(VARCHAR(255), nullable=False, unique=True)
    """Username of the user (max length 255)."""

    email: Mapped[str] = mapped_column(VARCHAR(255), nullable=False)
    """Email address of the user (max length 255)."""

    password: Mapped[str] = mapped_column(TEXT, nullable=False)
    """Hashed password of the user."""

    def __str__(self) -> str:
        return f"User: uid:{self.uid}, username: {self.username}, email: {self.email}"
