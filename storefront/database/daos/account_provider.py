"""
Account Provider

Purpose
-------
Authentication and authorization lookups for shop accounts, built on the
`Query` wrapper:
- Login with username (matched against ``users.email``) and password
- Roles of a user, as an id → name mapping, ids or names
- Permissions of a user and its roles
- Lookup of a user id, reading/writing single user columns, password change

Design
------
- The provider holds its configuration (connection, password crypt, extra
  fields, inactive field) and nothing else; every call is a stateless set of
  sequential queries on the caller's connection.
- Passwords are only ever verified through the injected crypt
  (``check(stored, candidate)``) and written through
  ``hash_password(text)``.
- Rejected credentials (unknown user, disabled account, wrong password) are
  a ``False`` result. Database failures propagate as `QueryError`s.

Schema
------
users(uid, username, email, password, ...), user_roles(uid, rid),
roles(rid, name), permissions(uid, rid, perm)

Usage
-----
.. code-block:: python

    from storefront.crypt import PasswordCrypt
    from storefront.database.daos.account_provider import AccountProvider

    with engine.begin() as connection:
        provider = AccountProvider(connection, PasswordCrypt(),
                                   fields=["nickname"], inactive="disabled")
        account = provider.login("racke@example.com", "nevairbe")
        if account:
            print(account["uid"], account["roles"], account["permissions"])
"""

import logging
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Protocol, Union

from storefront.database.config.config import Settings
from storefront.database.query import Query

logger = logging.getLogger(__name__)

ROLES_JOIN = ["user_roles", "rid=rid", "roles"]


class PasswordChecker(Protocol):
    """Structural type of the injected password crypt."""

    def check(self, stored: str, candidate: str) -> bool:
        ...

    def hash_password(self, text: str) -> str:
        ...


class RoleMode(str, Enum):
    """Shape of the result of `AccountProvider.roles`."""

    MAP = "map"
    NUMERIC = "numeric"
    NAMES = "names"


class AccountProvider:
    """
    Account provider over the fixed `users` / `roles` / `permissions` schema.

    Parameters
    ----------
    connection : Connection | Session
        Open SQLAlchemy connection or session, borrowed for every call.
    crypt : PasswordChecker
        Password crypt used to verify and hash passwords.
    fields : iterable of str, optional
        Extra `users` columns copied into the account record on login.
    inactive : str, optional
        `users` column that marks an account as disabled when truthy.
    """

    def __init__(self, connection, crypt: PasswordChecker,
                 fields: Iterable[str] = (), inactive: Optional[str] = None):
        if crypt is None:
            raise ValueError("AccountProvider needs a password crypt")
        self.sql = Query(connection)
        self.crypt = crypt
        self.fields = tuple(fields)
        self.inactive = inactive

    @classmethod
    def from_settings(cls, connection, crypt: PasswordChecker, settings: Settings) -> "AccountProvider":
        """Build a provider with the account options of ``settings``."""
        return cls(connection, crypt,
                   fields=settings.ACCOUNT_FIELDS,
                   inactive=settings.ACCOUNT_INACTIVE_FIELD)

    def login(self, username: str, password: str) -> Union[Dict[str, Any], bool]:
        """
        Check username and password.

        Parameters
        ----------
        username : str
            Login name, matched against the ``email`` column.
        password : str
            Plaintext candidate password.

        Returns
        -------
        dict | bool
            On success the account record::

                {"uid": ..., "username": ..., <extra fields>...,
                 "roles": [role names], "permissions": [permission strings]}

            ``False`` for an unknown user, a disabled account or a wrong
            password.
        """
        fields = ["uid", "username", "password"]
        fields.extend(self.fields)
        if self.inactive:
            fields.append(self.inactive)

        records = self.sql.select(table="users",
                                  fields=list(dict.fromkeys(fields)),
                                  where={"email": username},
                                  limit=1)
        if not records:
            logger.debug("Login failed for %s: no such user", username)
            return False

        record = records[0]
        if self.inactive and record.get(self.inactive):
            logger.info("Login refused for %s: account disabled", username)
            return False

        if not self.crypt.check(record["password"], password):
            logger.debug("Login failed for %s: wrong password", username)
            return False

        roles_map = self.roles(record["uid"], RoleMode.MAP)
        account = {field: record[field] for field in self.fields}
        account["uid"] = record["uid"]
        account["username"] = record["username"]
        account["roles"] = list(roles_map.values())
        account["permissions"] = self.permissions(record["uid"], list(roles_map))
        return account

    def roles(self, uid: int, mode: Union[RoleMode, str] = RoleMode.NAMES):
        """
        Roles held by the user ``uid``.

        Parameters
        ----------
        uid : int
            User identifier.
        mode : RoleMode
            - ``MAP``: dict role id → role name. Rows sharing a role id
              collapse into one entry; distinct ids with equal names are
              all kept.
            - ``NUMERIC``: list of role ids.
            - ``NAMES`` (default): list of role names.
        """
        mode = RoleMode(mode)

        if mode is RoleMode.MAP:
            records = self.sql.select(fields=["roles.rid", "roles.name"],
                                      join=ROLES_JOIN,
                                      where={"user_roles.uid": uid})
            return {record["rid"]: record["name"] for record in records}

        if mode is RoleMode.NUMERIC:
            return self.sql.select_list_field(table="user_roles",
                                              fields=["rid"],
                                              where={"uid": uid})

        return self.sql.select_list_field(fields=["roles.name"],
                                          join=ROLES_JOIN,
                                          where={"user_roles.uid": uid})

    def permissions(self, uid: int, role_ids: Iterable[int] = ()) -> List[str]:
        """
        Permissions granted to ``uid`` directly or to any of ``role_ids``.

        Duplicates are not removed.
        """
        return self.sql.select_list_field(table="permissions",
                                          fields=["perm"],
                                          where=[{"uid": uid},
                                                 {"rid": {"-in": list(role_ids)}}])

    def exists(self, username: str) -> Optional[int]:
        """Return the uid of ``username``, or None if there is no such user."""
        return self.sql.select_field(table="users",
                                     field="uid",
                                     where={"username": username})

    def value(self, username: str, name: str) -> Any:
        """Value of column ``name`` for ``username``; None for unknown users."""
        uid = self.exists(username)
        if uid is None:
            return None
        return self.sql.select_field(table="users",
                                     field=name,
                                     where={"uid": uid})

    def set_value(self, username: str, name: str, value: Any) -> bool:
        """Set column ``name`` for ``username``; False for unknown users."""
        uid = self.exists(username)
        if uid is None:
            return False
        self.sql.update(table="users", set={name: value}, where={"uid": uid})
        return True

    def password(self, password: str, username: Optional[str] = None) -> bool:
        """
        Store a new password for ``username``, hashed with the crypt.

        Returns False when no username is given or the user does not exist.
        """
        if not username:
            return False
        uid = self.exists(username)
        if uid is None:
            return False
        self.sql.update("users", {"password": self.crypt.hash_password(password)}, {"uid": uid})
        logger.info("Password changed for %s", username)
        return True
