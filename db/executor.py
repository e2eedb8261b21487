"""
db/executor.py
--------------
The single point through which SQL text and bound parameters reach the
database. Every call borrows a connection from the Database, runs one
statement and gives the connection back before returning.
"""

from typing import Any, Callable, Iterable, Mapping, Optional, Sequence, TypeVar

import psycopg2
from psycopg2 import extras

from config import SQL_DIALECT
from db.connection import Database
from errors import translate_driver_error
from utils.logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T")
RowMapper = Callable[[Mapping[str, Any]], T]


class StatementExecutor:
    """Runs list, single-optional, mutation and count statements."""

    def __init__(self, database: Database, dialect: str = SQL_DIALECT):
        self.database = database
        self.dialect = dialect

    def _run(self, operation: str, sql: str, params: Sequence, handle: Callable):
        logger.debug(f"{operation}: {' '.join(sql.split())} | params={len(params)}")
        try:
            with self.database.connection() as conn:
                with conn.cursor() as cur:
                    cur.execute(sql, tuple(params))
                    return handle(cur)
        except psycopg2.Error as e:
            error = translate_driver_error(e, operation, sql)
            logger.error(f"{operation} failed [{error.code}]: {error.message}")
            raise error from e

    # ── READ ──────────────────────────────────────────────

    def query_for_list(self, sql: str, mapper: RowMapper[T], params: Sequence = ()) -> list[T]:
        """
        Run a SELECT and map every row.

        Returns:
            The mapped rows in result order; empty when nothing matches.
        """
        rows = self._run("query", sql, params, lambda cur: cur.fetchall())
        return [mapper(row) for row in rows]

    def query_for_optional(
        self, sql: str, mapper: RowMapper[T], params: Sequence = ()
    ) -> Optional[T]:
        """
        Run a SELECT and map the first row only.

        Further rows are ignored, so predicates must be selective when
        at-most-one semantics matter.
        """
        row = self._run("query_optional", sql, params, lambda cur: cur.fetchone())
        return mapper(row) if row is not None else None

    def count(self, sql: str, params: Sequence = ()) -> int:
        """Run a single-value SELECT (usually COUNT(*)) and return it as int."""
        row = self._run("count", sql, params, lambda cur: cur.fetchone())
        if row is None:
            return 0
        value = next(iter(row.values())) if isinstance(row, Mapping) else row[0]
        return int(value or 0)

    # ── WRITE ─────────────────────────────────────────────

    def update(self, sql: str, params: Sequence = ()) -> int:
        """
        Run an INSERT, UPDATE or DELETE.

        Returns:
            Number of affected rows.
        """
        return self._run("update", sql, params, lambda cur: cur.rowcount)

    def batch_update(self, sql: str, param_seq: Iterable[Sequence]) -> int:
        """
        Run one statement for each parameter tuple on a single connection.

        Returns:
            Number of parameter sets executed (0 when `param_seq` is empty,
            in which case no connection is borrowed).
        """
        batch = [tuple(p) for p in param_seq]
        if not batch:
            return 0
        logger.debug(f"batch_update: {' '.join(sql.split())} | rows={len(batch)}")
        try:
            with self.database.connection() as conn:
                with conn.cursor() as cur:
                    extras.execute_batch(cur, sql, batch)
        except psycopg2.Error as e:
            error = translate_driver_error(e, "batch_update", sql)
            logger.error(f"batch_update failed [{error.code}]: {error.message}")
            raise error from e
        return len(batch)
