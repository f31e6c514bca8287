r"""Retry policy for PostgreSQL errors raised by asyncpg."""

from __future__ import annotations

__all__ = ["find_postgres_error", "should_retry_postgresql"]

import logging

import asyncpg

from backoffkit.core.config import RETRYABLE_POSTGRESQL_CODES

logger: logging.Logger = logging.getLogger(__name__)


def find_postgres_error(error: BaseException | None) -> asyncpg.PostgresError | None:
    """Find the first ``asyncpg.PostgresError`` in an exception chain.

    The chain is followed through ``__cause__`` first, then
    ``__context__``, so an error wrapped by the caller is still found.

    Args:
        error: The exception to inspect.

    Returns:
        The PostgreSQL error, or None if the chain contains none.
    """
    seen: set[int] = set()
    while error is not None and id(error) not in seen:
        if isinstance(error, asyncpg.PostgresError):
            return error
        seen.add(id(error))
        error = error.__cause__ or error.__context__
    return None


def should_retry_postgresql(error: BaseException | None) -> bool:
    """Indicate whether retrying is a reasonable way to deal with a
    PostgreSQL error.

    Connection failures (SQLSTATE 08000, 08001, 08004, 08006) and
    transaction state errors (25000, 25P01, 25P02, 25P03, 2D000) are
    retryable. See https://www.postgresql.org/docs/current/errcodes-appendix.html

    Args:
        error: The exception raised by the database call.

    Returns:
        True if the chain contains a PostgreSQL error with a retryable
        SQLSTATE code, False otherwise.

    Example:
        ```pycon
        >>> from asyncpg.exceptions import ConnectionFailureError, UniqueViolationError
        >>> from backoffkit.policy import should_retry_postgresql
        >>> should_retry_postgresql(ConnectionFailureError("connection lost"))
        True
        >>> should_retry_postgresql(UniqueViolationError("duplicate key"))
        False
        >>> should_retry_postgresql(ValueError("not a database error"))
        False

        ```
    """
    pg_error = find_postgres_error(error)
    if pg_error is None:
        return False
    code = getattr(pg_error, "sqlstate", None)
    retryable = code in RETRYABLE_POSTGRESQL_CODES
    logger.debug(f"PostgreSQL error with SQLSTATE {code} is {'' if retryable else 'not '}retryable")
    return retryable
