"""
Query Errors
============

Error taxonomy for the query wrapper. Every error is fatal to the operation
that raised it and is propagated unchanged to the host application, which
decides whether to surface, log or retry.

- QueryBuildError: the query specification could not be turned into SQL
  (unknown operator, malformed join, invalid identifier, ...).
- PrepareError: the statement could not be compiled for the connection's
  dialect. Compiling does not consult the database, so schema problems are
  not caught here.
- ExecuteError: the statement was prepared but the driver rejected it,
  including a missing table or an unknown column.
- InvalidModeError: an unknown ``return_value`` mode was requested.

Rejected credentials are *not* errors; the account provider reports them as
a ``False`` result.
"""

from typing import Optional


class QueryError(Exception):
    """Base class for all errors raised by the query wrapper."""


class QueryBuildError(QueryError):
    """Raised when a query specification cannot be translated to SQL."""


class StatementError(QueryError):
    """
    Base class for failures that happen once a statement exists.

    Attributes
    ----------
    statement : str | None
        The SQL text that failed, when it could be rendered.
    message : str
        The message reported by the driver or the SQL compiler.
    """

    action = "run"

    def __init__(self, statement: Optional[str], message: str):
        self.statement = statement
        self.message = message
        super().__init__(f"Failed to {self.action} {statement or 'statement'}: {message}")


class PrepareError(StatementError):
    """Raised when a statement fails to compile against the connection."""

    action = "prepare"


class ExecuteError(StatementError):
    """Raised when the driver fails to execute a prepared statement."""

    action = "execute"


class InvalidModeError(QueryError):
    """Raised for an unrecognized ``return_value`` mode."""

    def __init__(self, mode):
        self.mode = mode
        super().__init__(f"Invalid return_value for SQL query: {mode!r}")
