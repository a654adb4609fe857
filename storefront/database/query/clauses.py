"""
Clause Builders
===============

Translate the structured arguments accepted by `Query` into SQLAlchemy Core
constructs. Nothing here touches a connection; every function either returns
a clause element or raises `QueryBuildError`.

Where conditions
----------------
- ``{"sku": "978", "price": {"<": 5}}``           → ``sku = ? AND price < ?``
- ``{"media_type": ["CD", "DVD"]}``               → ``media_type IN (?, ?)``
- ``{"inactive": None}``                          → ``inactive IS NULL``
- ``[{"uid": 1}, {"rid": {"-in": [2, 3]}}]``      → ``uid = ? OR rid IN (?, ?)``
- ``{"-or": [{"a": 1}, {"b": 2}], "c": 3}``       → ``(a = ? OR b = ?) AND c = ?``

Operators: ``=``, ``!=`` / ``<>``, ``<``, ``<=``, ``>``, ``>=``, ``like``,
``not_like``, ``-in``, ``-not_in``, ``-between``.

Joins
-----
An ordered sequence (or whitespace separated string) alternating tables and
join operators, e.g. ``["user_roles", "rid=rid", "roles"]``. A condition
``a=b`` compares ``<left table>.a`` with ``<right table>.b``; prefix it with
``=>`` for a LEFT OUTER join or ``<=>`` for an explicit inner join. Several
column pairs are separated by commas. Tables accept an alias as
``table|alias``.
"""

import operator
import re
from typing import Any, Iterable, List, Optional, Tuple

from sqlalchemy import and_, bindparam, column, literal_column, or_, table
from sqlalchemy.sql.elements import ColumnElement
from sqlalchemy.sql.selectable import FromClause

from storefront.database.errors import QueryBuildError

IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)?$")
"""Plain or table-qualified column name."""

TABLE_STAR = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*\.\*$")

JOIN_OPERATOR = re.compile(r"^(?P<kind><=>|=>)?(?P<condition>.*)$")

COMPARISONS = {
    "<": operator.lt,
    "<=": operator.le,
    ">": operator.gt,
    ">=": operator.ge,
}


def split_names(value: Any, separators: str = r"[\s,]+") -> List[str]:
    """
    Normalize a field/order/join specification to a list of names.

    Lists and tuples are taken as-is, strings are split on ``separators``
    (whitespace and commas by default), ``None`` yields an empty list.
    """
    if value is None:
        return []
    if isinstance(value, str):
        return [name for name in re.split(separators, value.strip()) if name]
    if isinstance(value, (list, tuple)):
        for name in value:
            if not isinstance(name, str):
                raise QueryBuildError(f"Expected a name, got {name!r}")
        return list(value)
    raise QueryBuildError(f"Expected a list or a string of names, got {value!r}")


def column_ref(name: Any) -> ColumnElement:
    """Return a column element for a plain or table-qualified column name."""
    if not isinstance(name, str) or not IDENTIFIER.match(name):
        raise QueryBuildError(f"Invalid column name {name!r}")
    if "." in name:
        # qualified names stay textual so they bind to the tables of the FROM clause
        return literal_column(name)
    return column(name)


def select_columns(fields: Any) -> List[ColumnElement]:
    """
    Columns for the SELECT list. Defaults to ``*``.

    Qualified columns are labelled with their bare name, so ``roles.name``
    comes back under the ``name`` key. Two fields ending up under the same
    key are rejected.
    """
    columns = []
    keys = set()
    for name in split_names(fields) or ["*"]:
        if name == "*" or TABLE_STAR.match(name):
            columns.append(literal_column(name))
            continue
        key = name.split(".", 1)[-1]
        if key in keys:
            raise QueryBuildError(f"Field {name!r} duplicates the result key {key!r}")
        keys.add(key)
        if "." in name:
            columns.append(column_ref(name).label(key))
        else:
            columns.append(column_ref(name))
    return columns


def table_ref(spec: Any) -> Tuple[FromClause, str]:
    """
    Parse ``table`` or ``table|alias``.

    Returns
    -------
    tuple
        The FROM element and the name columns of that table are qualified
        with (the alias when one is given).
    """
    if not isinstance(spec, str):
        raise QueryBuildError(f"Invalid table name {spec!r}")
    name, _, alias = spec.partition("|")
    for part in filter(None, (name, alias)):
        if "." in part or not IDENTIFIER.match(part):
            raise QueryBuildError(f"Invalid table name {spec!r}")
    if not name:
        raise QueryBuildError(f"Invalid table name {spec!r}")
    from_table = table(name)
    if alias:
        return from_table.alias(alias), alias
    return from_table, name


def join_clause(join: Any) -> FromClause:
    """Build the FROM clause for an ordered join specification."""
    # commas separate column pairs inside a join condition
    items = split_names(join, separators=r"\s+")
    if len(items) < 3 or len(items) % 2 == 0:
        raise QueryBuildError(f"Join needs alternating tables and conditions, got {items!r}")

    current, left_name = table_ref(items[0])
    for position in range(1, len(items), 2):
        spec, right_spec = items[position], items[position + 1]
        right, right_name = table_ref(right_spec)
        match = JOIN_OPERATOR.match(spec)
        condition = match.group("condition")
        if not condition:
            raise QueryBuildError(f"Join between {left_name} and {right_name} has no condition")
        onclause = and_(
            *[_join_pair(pair, left_name, right_name) for pair in condition.split(",")]
        )
        current = current.join(right, onclause, isouter=match.group("kind") == "=>")
        left_name = right_name
    return current


def _join_pair(pair: str, left_name: str, right_name: str) -> ColumnElement:
    left, sep, right = pair.partition("=")
    if not sep or not left or not right:
        raise QueryBuildError(f"Invalid join condition {pair!r}")
    if "." not in left:
        left = f"{left_name}.{left}"
    if "." not in right:
        right = f"{right_name}.{right}"
    return column_ref(left) == column_ref(right)


def from_clause(table_name: Optional[str], join: Any = None) -> FromClause:
    """FROM element for a select: the join when given, otherwise the table."""
    if join:
        return join_clause(join)
    if table_name is None:
        raise QueryBuildError("Query needs a table or a join")
    return table_ref(table_name)[0]


def where_clause(where: Any) -> Optional[ColumnElement]:
    """
    Translate a where specification; ``None`` when there is nothing to filter.

    A mapping is an AND of its entries, a list is an OR of its groups.
    """
    if where is None:
        return None
    if isinstance(where, dict):
        clauses = [_entry(key, value) for key, value in where.items()]
        return and_(*clauses) if clauses else None
    if isinstance(where, (list, tuple)):
        groups = []
        for group in where:
            if not isinstance(group, (dict, list, tuple)):
                raise QueryBuildError(f"Invalid condition group {group!r}")
            clause = where_clause(group)
            if clause is not None:
                groups.append(clause)
        return or_(*groups) if groups else None
    raise QueryBuildError(f"Invalid where specification {where!r}")


def _entry(key: Any, value: Any) -> ColumnElement:
    if key in ("-or", "-and"):
        if not isinstance(value, (list, tuple)):
            raise QueryBuildError(f"{key} expects a list of conditions")
        clauses = [clause for clause in map(where_clause, value) if clause is not None]
        if not clauses:
            raise QueryBuildError(f"{key} expects at least one condition")
        return or_(*clauses) if key == "-or" else and_(*clauses)

    col = column_ref(key)
    bind_key = key.replace(".", "_")
    if isinstance(value, dict):
        if not value:
            raise QueryBuildError(f"Empty operator mapping for {key!r}")
        return and_(*[_compare(col, bind_key, op, operand) for op, operand in value.items()])
    return _equals(col, bind_key, value)


def _equals(col: ColumnElement, bind_key: str, value: Any) -> ColumnElement:
    if value is None:
        return col.is_(None)
    if isinstance(value, (list, tuple)):
        return col.in_(_expanding(bind_key, value))
    return col == bindparam(bind_key, value, unique=True)


def _expanding(bind_key: str, values: Iterable[Any]):
    return bindparam(bind_key, list(values), expanding=True, unique=True)


def _compare(col: ColumnElement, bind_key: str, op: Any, operand: Any) -> ColumnElement:
    if not isinstance(op, str):
        raise QueryBuildError(f"Invalid operator {op!r}")
    op = op.lower()

    if op in ("=", "==", "-eq"):
        return _equals(col, bind_key, operand)
    if op in ("!=", "<>", "-ne"):
        if operand is None:
            return col.is_not(None)
        if isinstance(operand, (list, tuple)):
            return col.not_in(_expanding(bind_key, operand))
        return col != bindparam(bind_key, operand, unique=True)
    if op in COMPARISONS:
        if operand is None or isinstance(operand, (list, tuple, dict)):
            raise QueryBuildError(f"Operator {op} needs a single value")
        return COMPARISONS[op](col, bindparam(bind_key, operand, unique=True))
    if op in ("like", "-like"):
        return col.like(bindparam(bind_key, operand, unique=True))
    if op in ("not_like", "not like", "-not_like"):
        return col.not_like(bindparam(bind_key, operand, unique=True))
    if op in ("-in", "in"):
        if not isinstance(operand, (list, tuple)):
            raise QueryBuildError(f"Operator {op} needs a list of values")
        return col.in_(_expanding(bind_key, operand))
    if op in ("-not_in", "not_in", "not in"):
        if not isinstance(operand, (list, tuple)):
            raise QueryBuildError(f"Operator {op} needs a list of values")
        return col.not_in(_expanding(bind_key, operand))
    if op in ("-between", "between"):
        if not isinstance(operand, (list, tuple)) or len(operand) != 2:
            raise QueryBuildError(f"Operator {op} needs exactly two values")
        return col.between(
            bindparam(bind_key, operand[0], unique=True),
            bindparam(bind_key, operand[1], unique=True),
        )
    raise QueryBuildError(f"Unknown operator {op!r} for {bind_key!r}")


def order_clauses(order: Any) -> List[ColumnElement]:
    """ORDER BY elements; ``-col`` sorts descending, ``+col`` ascending."""
    clauses = []
    for name in split_names(order):
        if name.startswith("-"):
            clauses.append(column_ref(name[1:]).desc())
        elif name.startswith("+"):
            clauses.append(column_ref(name[1:]).asc())
        else:
            clauses.append(column_ref(name))
    return clauses
