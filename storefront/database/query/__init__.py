"""
The `query` package turns structured query arguments into SQL through
SQLAlchemy Core and runs them on a caller-owned connection.

Contents
--------
- query
    `Query` — select / select_field / select_list_field / insert / update /
    delete, plus `ReturnValue` result shaping modes and `Statement`.
- clauses
    Translation of fields, where conditions, joins and ordering into
    SQLAlchemy clause elements.
"""

from storefront.database.query.query import Query, ReturnValue, Statement

__all__ = ["Query", "ReturnValue", "Statement"]
