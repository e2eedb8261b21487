"""
errors/data_access.py
---------------------
Data-access errors and the translation of psycopg2 driver exceptions
into them. The persistence layer never retries; it classifies and
re-raises so the caller can decide.
"""

from http import HTTPStatus
from typing import Optional

import psycopg2
from psycopg2 import errors as pg_errors

from errors.base import ErrorCategory, PlatformError


class DataAccessError(PlatformError):
    category = ErrorCategory.DATA_ACCESS
    default_code = "DATA_ACCESS_ERROR"
    http_status = HTTPStatus.INTERNAL_SERVER_ERROR


class EntityNotFoundError(DataAccessError):
    """Raised only by get-or-fail helpers; plain lookups return None."""
    default_code = "ENTITY_NOT_FOUND"
    http_status = HTTPStatus.NOT_FOUND


class UniqueConstraintError(DataAccessError):
    default_code = "UNIQUE_CONSTRAINT_VIOLATION"
    http_status = HTTPStatus.CONFLICT


class ForeignKeyViolationError(DataAccessError):
    default_code = "FOREIGN_KEY_VIOLATION"
    http_status = HTTPStatus.CONFLICT


class StatementExecutionError(DataAccessError):
    default_code = "STATEMENT_EXECUTION_FAILED"


class TransactionError(DataAccessError):
    default_code = "TRANSACTION_FAILED"


class PoolExhaustedError(DataAccessError):
    default_code = "CONNECTION_POOL_EXHAUSTED"
    http_status = HTTPStatus.SERVICE_UNAVAILABLE
    default_retryable = True


def translate_driver_error(
    exc: psycopg2.Error, operation: str, sql: Optional[str] = None
) -> DataAccessError:
    """
    Classify a psycopg2 exception into the data-access taxonomy.

    Args:
        exc: The exception raised by the driver.
        operation: Executor operation kind (e.g. 'query', 'update', 'count').
        sql: The statement text, attached to the context for diagnostics.

    Returns:
        A DataAccessError subclass instance; the caller raises it ``from exc``.
    """
    message = (getattr(exc, "pgerror", None) or str(exc)).strip()
    context = {"operation": operation}
    if sql:
        context["sql"] = " ".join(sql.split())
    diag = getattr(exc, "diag", None)
    constraint = getattr(diag, "constraint_name", None) if diag is not None else None
    if constraint:
        context["constraint"] = constraint

    if isinstance(exc, pg_errors.UniqueViolation):
        return UniqueConstraintError(message, context=context)
    if isinstance(exc, pg_errors.ForeignKeyViolation):
        return ForeignKeyViolationError(message, context=context)
    if isinstance(exc, (pg_errors.SerializationFailure, pg_errors.DeadlockDetected)):
        return TransactionError(message, context=context, retryable=True)
    return StatementExecutionError(
        f"{operation} failed: {message}", context=context
    )
