"""
Query Wrapper

Purpose
-------
Thin query layer over a caller-owned SQLAlchemy `Connection` (or ORM
`Session`). Structured arguments are turned into SQLAlchemy Core statements
by `clauses`, compiled for the connection's dialect, executed, and the
result is shaped according to ``return_value``.

Design
------
- The wrapper holds the connection handle only. It never begins, commits or
  rolls back transactions and never closes the handle; that is the caller's
  job.
- Every call issues its statement synchronously on the caller's thread.
  There are no retries and no timeouts.
- Build, prepare and execute failures raise `QueryBuildError`,
  `PrepareError` and `ExecuteError`; they are logged once here and then
  propagated.

Usage
-----
.. code-block:: python

    from storefront.database.config.connection_engine import create_connection_engine
    from storefront.database.query import Query

    engine = create_connection_engine()
    with engine.begin() as connection:
        query = Query(connection)
        query.insert("products", {"sku": "9780977920150", "name": "Modern Perl"})

        cheap = query.select(table="products",
                             fields=["sku", "name", "price"],
                             where={"price": {"<": 5}})

        name = query.select_field(table="products", field="name",
                                  where={"sku": "9780977920150"})

        dvd_skus = query.select_list_field(table="products", fields="sku",
                                           where={"media_type": "DVD"})

        query.update("products", {"media_format": "CD"}, {"media_format": "CDROM"})
        query.delete("products", {"inactive": 1})

Return values
-------------
- ``"execute"``     → number of affected rows
- ``"array_first"`` → list with the first column of every row
- ``"value_first"`` → first column of the first row, or None
- ``None`` / ``""`` → list of dicts (column name → value)

Errors
------
SQLAlchemy compiles a statement without consulting the database, so
`PrepareError` only covers compile failures. A missing table or an unknown
column is reported by the driver when the statement runs and surfaces as
`ExecuteError`.
"""

import logging
from enum import Enum
from typing import Any, Dict, List, NamedTuple, Optional, Union

from sqlalchemy import delete as sql_delete
from sqlalchemy import insert as sql_insert
from sqlalchemy import select as sql_select
from sqlalchemy import column, table
from sqlalchemy import update as sql_update
from sqlalchemy.dialects import sqlite
from sqlalchemy.exc import ArgumentError, CompileError, DBAPIError, SQLAlchemyError

from storefront.database.errors import (
    ExecuteError,
    InvalidModeError,
    PrepareError,
    QueryBuildError,
)
from storefront.database.query import clauses

logger = logging.getLogger(__name__)


class ReturnValue(str, Enum):
    """Result shaping modes accepted as ``return_value``."""

    EXECUTE = "execute"
    ARRAY_FIRST = "array_first"
    VALUE_FIRST = "value_first"


class Statement(NamedTuple):
    """SQL text and bound parameters of a built statement."""

    sql: str
    params: Dict[str, Any]


class Query:
    """
    Query wrapper bound to one connection handle.

    Parameters
    ----------
    connection : Connection | Session
        Open SQLAlchemy connection or ORM session. Borrowed, not owned.
    """

    def __init__(self, connection):
        self.connection = connection

    # ------------------------------------------------------------------
    # SELECT
    # ------------------------------------------------------------------

    def select(
        self,
        table: Optional[str] = None,
        fields: Union[str, List[str], None] = None,
        where: Any = None,
        join: Union[str, List[str], None] = None,
        order: Union[str, List[str], None] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        distinct: bool = False,
        return_value: Union[ReturnValue, str, None] = None,
    ):
        """
        Run a SELECT and return its records.

        Parameters
        ----------
        table : str, optional
            Table to select from (``table|alias`` accepted). Ignored when
            ``join`` is given.
        fields : list[str] | str, optional
            Columns to return; a whitespace/comma separated string is split.
            Defaults to ``*``.
        where : dict | list, optional
            Filter conditions, see `clauses`.
        join : list[str] | str, optional
            Ordered join specification, e.g. ``["user_roles", "rid=rid", "roles"]``.
        order : list[str] | str, optional
            ORDER BY columns, ``-col`` for descending.
        limit, offset : int, optional
            Row window.
        distinct : bool
            Return distinct rows only.
        return_value : ReturnValue | str, optional
            Result shaping mode; records as dicts by default.

        Returns
        -------
        list[dict] | list | Any
            Shaped according to ``return_value``.

        Raises
        ------
        QueryBuildError, PrepareError, ExecuteError, InvalidModeError
        """
        mode = self._mode(return_value)
        stmt = self._select_statement(
            table=table, fields=fields, where=where, join=join, order=order,
            limit=limit, offset=offset, distinct=distinct,
        )
        return self._run(stmt, mode)

    def select_field(self, field: Optional[str] = None, **kwargs):
        """
        Run a SELECT and return the value of the first field of the first
        record, or None when nothing matches.

        ``field`` is shorthand for a one-element ``fields`` list.
        """
        if field:
            kwargs["fields"] = [field]
        kwargs["return_value"] = ReturnValue.VALUE_FIRST
        return self.select(**kwargs)

    def select_list_field(self, field: Optional[str] = None, **kwargs) -> list:
        """Run a SELECT and return the first field of every matching record."""
        if field:
            kwargs["fields"] = [field]
        kwargs["return_value"] = ReturnValue.ARRAY_FIRST
        return self.select(**kwargs)

    def build_select(self, **kwargs) -> Statement:
        """
        Build a SELECT without running it.

        Accepts the same arguments as `select` (``return_value`` excluded)
        and returns the SQL rendered for the connection's dialect together
        with its bound parameters.
        """
        stmt = self._select_statement(**kwargs)
        compiled = self._prepare(stmt)
        return Statement(str(compiled), dict(compiled.params))

    # ------------------------------------------------------------------
    # INSERT / UPDATE / DELETE
    # ------------------------------------------------------------------

    def insert(self, table: str, data: Dict[str, Any]) -> int:
        """
        Insert one record.

        Returns
        -------
        int
            Number of inserted rows.
        """
        if not isinstance(data, dict) or not data:
            raise QueryBuildError(f"Insert into {table!r} needs a non-empty mapping of values")
        target = self._dml_table(table, data)
        return self._run(sql_insert(target).values(data), ReturnValue.EXECUTE)

    def update(self, table: str, set: Dict[str, Any], where: Any = None) -> int:
        """
        Update matching records, e.g.::

            query.update("products", {"media_format": "CD"}, {"media_format": "CDROM"})
            query.update(table="products", set={"media_format": "CD"},
                         where={"media_format": "CDROM"})

        Returns the number of matched/updated records.
        """
        if not isinstance(set, dict) or not set:
            raise QueryBuildError(f"Update of {table!r} needs a non-empty mapping of values")
        stmt = sql_update(self._dml_table(table, set)).values(set)
        condition = clauses.where_clause(where)
        if condition is not None:
            stmt = stmt.where(condition)
        return self._run(stmt, ReturnValue.EXECUTE)

    def delete(self, table: str, where: Any = None) -> int:
        """Delete matching records and return how many were removed."""
        stmt = sql_delete(self._dml_table(table))
        condition = clauses.where_clause(where)
        if condition is not None:
            stmt = stmt.where(condition)
        return self._run(stmt, ReturnValue.EXECUTE)

    # ------------------------------------------------------------------
    # internals
    # ------------------------------------------------------------------

    @staticmethod
    def _mode(return_value) -> Optional[ReturnValue]:
        # any falsy mode ("" included) means records as dicts
        if not return_value:
            return None
        try:
            return ReturnValue(return_value)
        except ValueError:
            raise InvalidModeError(return_value) from None

    def _select_statement(self, table=None, fields=None, where=None, join=None,
                          order=None, limit=None, offset=None, distinct=False):
        try:
            stmt = sql_select(*clauses.select_columns(fields))
            if join:
                # extended form: FROM built from the join specification
                stmt = stmt.select_from(clauses.join_clause(join))
            else:
                stmt = stmt.select_from(clauses.from_clause(table))

            condition = clauses.where_clause(where)
            if condition is not None:
                stmt = stmt.where(condition)
            order_by = clauses.order_clauses(order)
            if order_by:
                stmt = stmt.order_by(*order_by)
            if distinct:
                stmt = stmt.distinct()
            if limit is not None:
                stmt = stmt.limit(limit)
            if offset is not None:
                stmt = stmt.offset(offset)
        except QueryBuildError as e:
            logger.error("Failed to build select on %s: %s", join or table, e)
            raise
        except (ArgumentError, TypeError, ValueError) as e:
            logger.error("Failed to build select on %s: %s", join or table, e)
            raise QueryBuildError(str(e)) from e
        return stmt

    @staticmethod
    def _dml_table(name: str, values: Optional[Dict[str, Any]] = None):
        from_table, _ = clauses.table_ref(name)
        if from_table.name != name:
            raise QueryBuildError(f"Aliases are not supported for {name!r}")
        columns = []
        for key in values or ():
            if not isinstance(key, str) or not clauses.IDENTIFIER.match(key) or "." in key:
                raise QueryBuildError(f"Invalid column name {key!r}")
            columns.append(column(key))
        return table(name, *columns)

    def _dialect(self):
        dialect = getattr(self.connection, "dialect", None)
        if dialect is None and hasattr(self.connection, "get_bind"):
            dialect = self.connection.get_bind().dialect
        return dialect or sqlite.dialect()

    def _prepare(self, stmt):
        try:
            # IN lists are expanded so every value gets its own placeholder
            return stmt.compile(dialect=self._dialect(),
                                compile_kwargs={"render_postcompile": True})
        except SQLAlchemyError as e:
            logger.error("Failed to prepare statement: %s", e)
            raise PrepareError(None, str(e)) from e

    def _run(self, stmt, mode: Optional[ReturnValue]):
        # the statement is compiled once, inside execute (and its cache)
        logger.debug("Running %s", stmt)

        try:
            result = self.connection.execute(stmt)
        except CompileError as e:
            logger.error("Failed to prepare statement: %s", e)
            raise PrepareError(None, str(e)) from e
        except DBAPIError as e:
            logger.error("Failed to execute %s: %s", e.statement, e.orig)
            raise ExecuteError(e.statement, str(e.orig)) from e
        except SQLAlchemyError as e:
            sql = getattr(e, "statement", None)
            logger.error("Failed to execute %s: %s", sql, e)
            raise ExecuteError(sql, str(e)) from e

        if mode is ReturnValue.EXECUTE:
            count = result.rowcount
            result.close()
            return count
        if mode is ReturnValue.ARRAY_FIRST:
            return list(result.scalars().all())
        if mode is ReturnValue.VALUE_FIRST:
            return result.scalar()
        return [dict(row) for row in result.mappings()]
