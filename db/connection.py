"""
db/connection.py
----------------
Manages the PostgreSQL connection pool.
Uses psycopg2's ThreadedConnectionPool so each calling thread gets its
own connection per call.

A Database is created once at startup and passed explicitly to the
StatementExecutor; there is no module-level pool.
"""

import threading
from contextlib import contextmanager
from typing import Iterator

import psycopg2
from psycopg2 import errors as pg_errors
from psycopg2 import extras, pool

from config import (
    DATABASE_URL,
    DB_POOL_MAX_CONN,
    DB_POOL_MIN_CONN,
    DB_STATEMENT_TIMEOUT_MS,
)
from errors import DataAccessError, PoolExhaustedError, TransactionError
from utils.logger import get_logger

logger = get_logger(__name__)

# UUID parameters are adapted to the native uuid type, and uuid columns
# come back as uuid.UUID.
extras.register_uuid()


class Database:
    """Owns the connection pool and the per-thread transaction binding."""

    def __init__(self, connection_pool):
        """
        Args:
            connection_pool: Any object exposing getconn/putconn/closeall
                (normally a psycopg2 ThreadedConnectionPool).
        """
        self._pool = connection_pool
        self._local = threading.local()

    @classmethod
    def connect(
        cls,
        dsn: str = DATABASE_URL,
        min_conn: int = DB_POOL_MIN_CONN,
        max_conn: int = DB_POOL_MAX_CONN,
        statement_timeout_ms: int = DB_STATEMENT_TIMEOUT_MS,
    ) -> "Database":
        """
        Create the connection pool.

        Args:
            dsn: libpq connection string or URL.
            min_conn: Minimum number of connections to keep open.
            max_conn: Maximum number of connections allowed.
            statement_timeout_ms: Server-side statement timeout (0 = none).

        Raises:
            DataAccessError: If the database is unreachable.
        """
        kwargs = {"cursor_factory": extras.RealDictCursor}
        if statement_timeout_ms:
            kwargs["options"] = f"-c statement_timeout={statement_timeout_ms}"
        try:
            connection_pool = pool.ThreadedConnectionPool(min_conn, max_conn, dsn, **kwargs)
        except psycopg2.OperationalError as e:
            logger.error(f"Failed to initialize database pool: {e}")
            raise DataAccessError(
                f"Could not connect to database: {e}",
                code="CONNECTION_FAILED",
                retryable=True,
            ) from e
        logger.info(f"Database connection pool initialized ({min_conn}..{max_conn} connections).")
        return cls(connection_pool)

    # ── CONNECTIONS ───────────────────────────────────────

    def _acquire(self):
        try:
            return self._pool.getconn()
        except pool.PoolError as e:
            if "exhausted" in str(e):
                raise PoolExhaustedError(
                    "No free connection in the pool", context={"detail": str(e)}
                ) from e
            raise DataAccessError(
                f"Connection pool unavailable: {e}", code="CONNECTION_POOL_UNAVAILABLE"
            ) from e

    def _release(self, conn) -> None:
        self._pool.putconn(conn)

    @property
    def in_transaction(self) -> bool:
        """True if the current thread is inside `transaction()`."""
        return getattr(self._local, "conn", None) is not None

    @contextmanager
    def connection(self) -> Iterator:
        """
        Yield a connection for a single statement.

        Inside `transaction()` the thread's bound connection is reused and
        left uncommitted. Otherwise a pooled connection is committed on
        success, rolled back on failure and always returned to the pool.
        """
        bound = getattr(self._local, "conn", None)
        if bound is not None:
            yield bound
            return

        conn = self._acquire()
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            self._release(conn)

    @contextmanager
    def transaction(self) -> Iterator:
        """
        Bind one pooled connection to the current thread so every executor
        call made inside the block shares a single unit of work.

        Nested calls join the outer transaction.

        Raises:
            TransactionError: If the final commit fails.
        """
        bound = getattr(self._local, "conn", None)
        if bound is not None:
            yield bound
            return

        conn = self._acquire()
        self._local.conn = conn
        try:
            try:
                yield conn
            except Exception:
                conn.rollback()
                raise
            try:
                conn.commit()
            except psycopg2.Error as e:
                conn.rollback()
                logger.error(f"Transaction commit failed: {e}")
                raise TransactionError(
                    f"Commit failed: {e}",
                    retryable=isinstance(
                        e,
                        (pg_errors.SerializationFailure, pg_errors.DeadlockDetected),
                    ),
                ) from e
        finally:
            self._local.conn = None
            self._release(conn)

    def close(self) -> None:
        """Close all connections in the pool."""
        self._pool.closeall()
        logger.info("Database connection pool closed.")
