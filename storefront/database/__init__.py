"""
The `database` package is responsible for all interactions with the shop database.

Contents:
    - config:
        Settings and SQLAlchemy bootstrap (connection URL, engine, metadata,
        declarative base).

    - entities:
        SQLAlchemy models of the fixed account schema.

    - query:
        Query wrapper building SQL with SQLAlchemy Core and shaping results.

    - daos:
        Account provider (login, roles, permissions) on top of the query wrapper.

    - errors:
        QueryBuildError, PrepareError, ExecuteError, InvalidModeError.
"""
