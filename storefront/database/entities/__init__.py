"""
Entities Package — SQLAlchemy 2.0 ORM Models
============================================

The `entities` package declares the fixed account schema the account
provider reads from. The models register themselves on the shared
`metadata`, so host applications (and the test-suite) can create the
tables with ``metadata.create_all(engine)``.

Contents
--------
- User        → ``users`` (uid, username, email, password)
- Role        → ``roles`` (rid, name)
- UserRole    → ``user_roles`` (uid, rid)
- Permission  → ``permissions`` (uid nullable, rid nullable, perm)
"""

from storefront.database.entities.user import User
from storefront.database.entities.roles import Permission, Role, UserRole

__all__ = ["User", "Role", "UserRole", "Permission"]
