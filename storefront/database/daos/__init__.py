"""
DAOs Package — Data Access Layer
================================

Conventions
-----------
- DAOs build on `storefront.database.query.Query` (SQLAlchemy Core)
- Connection / transaction lifecycle is handled by callers
- DAOs surface exceptions so upper layers decide error policy

Contents
--------
- AccountProvider
    Handles shop accounts:
    * Login with disabled-account short-circuit and injected password crypt
    * Roles (id → name map, ids, names) and permissions lookups
    * User lookup, single-column reads/writes, password changes
"""

from storefront.database.daos.account_provider import AccountProvider, PasswordChecker, RoleMode

__all__ = ["AccountProvider", "PasswordChecker", "RoleMode"]
