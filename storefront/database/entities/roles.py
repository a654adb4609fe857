"""
Role and Permission ORM Models
==============================

- ``Role`` (``roles``): role identifier and name.
- ``UserRole`` (``user_roles``): assignment of roles to users.
- ``Permission`` (``permissions``): a permission string granted either to a
  single user (``uid``) or to every member of a role (``rid``).

A user's permissions are the union of the rows matching its uid and the rows
matching any of its role ids.
"""

from typing import Optional

from sqlalchemy import ForeignKey, Integer, VARCHAR
from sqlalchemy.orm import Mapped, mapped_column

from storefront.database.config.connection_engine import declarativeBase


class Role(declarativeBase):
    """ORM model for the `roles` table."""

    __tablename__ = "roles"

    rid: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(VARCHAR(255), nullable=False)


class UserRole(declarativeBase):
    """
    ORM model for the `user_roles` table.

    Every ``rid`` stored here must resolve to a row in `roles`.
    """

    __tablename__ = "user_roles"

    uid: Mapped[int] = mapped_column(Integer, ForeignKey("users.uid"), primary_key=True)
    """User holding the role."""

    rid: Mapped[int] = mapped_column(Integer, ForeignKey("roles.rid"), primary_key=True)
    """Role held by the user."""


class Permission(declarativeBase):
    """
    ORM model for the `permissions` table.

    Attributes
    ----------
    id : int
        Surrogate primary key.
    uid : int | None
        User the permission is granted to, if granted per user.
    rid : int | None
        Role the permission is granted to, if granted per role.
    perm : str
        Permission string, e.g. ``"view_orders"``.
    """

    __tablename__ = "permissions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    uid: Mapped[Optional[int]] = mapped_column(Integer, ForeignKey("users.uid"), nullable=True)
    rid: Mapped[Optional[int]] = mapped_column(Integer, ForeignKey("roles.rid"), nullable=True)
    perm: Mapped[str] = mapped_column(VARCHAR(255), nullable=False)
