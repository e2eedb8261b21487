"""Shared fakes for unit tests.

FakePool / FakeConnection / FakeCursor stand in for psycopg2's pool,
connection and RealDictCursor so the Database and StatementExecutor can be
exercised without a server. RecordingExecutor stands in for the
StatementExecutor in repository tests and records every statement.
"""

from __future__ import annotations

from collections import deque
from typing import Any

import pytest
from psycopg2 import pool as pg_pool

from db.connection import Database
from db.executor import StatementExecutor


class FakeCursor:
    def __init__(self, conn: "FakeConnection"):
        self.conn = conn
        self.rowcount = -1
        self._rows: list = []

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
        return False

    def close(self):
        self.conn.cursors_closed += 1

    def execute(self, sql, params=None):
        self.conn.statements.append((sql, params))
        result = self.conn.results.popleft() if self.conn.results else []
        if isinstance(result, BaseException):
            raise result
        if isinstance(result, int):
            self.rowcount = result
            self._rows = []
        else:
            self._rows = list(result)
            self.rowcount = len(self._rows)

    def mogrify(self, sql, params=None):
        # Used by psycopg2.extras.execute_batch.
        self.conn.batched.append((sql, tuple(params or ())))
        return f"{sql} -- {params!r}".encode()

    def fetchall(self):
        rows, self._rows = self._rows, []
        return rows

    def fetchone(self):
        return self._rows.pop(0) if self._rows else None


class FakeConnection:
    """Connection whose statements yield scripted results in order.

    A scripted result is a list of row dicts (SELECT), an int (rowcount)
    or an exception instance to raise from execute().
    """

    def __init__(self):
        self.results: deque = deque()
        self.statements: list[tuple[Any, Any]] = []
        self.batched: list[tuple[str, tuple]] = []
        self.commits = 0
        self.rollbacks = 0
        self.cursors_closed = 0
        self.commit_error: BaseException | None = None

    def script(self, *results):
        self.results.extend(results)
        return self

    def cursor(self):
        return FakeCursor(self)

    def commit(self):
        if self.commit_error is not None:
            raise self.commit_error
        self.commits += 1

    def rollback(self):
        self.rollbacks += 1


class FakePool:
    """Hands out one shared FakeConnection and tracks checkouts."""

    def __init__(self, maxconn: int = 10):
        self.conn = FakeConnection()
        self.maxconn = maxconn
        self.checked_out = 0
        self.getconn_calls = 0
        self.putconn_calls = 0
        self.closed = False

    def getconn(self):
        if self.closed:
            raise pg_pool.PoolError("connection pool is closed")
        if self.checked_out >= self.maxconn:
            raise pg_pool.PoolError("connection pool exhausted")
        self.getconn_calls += 1
        self.checked_out += 1
        return self.conn

    def putconn(self, conn):
        self.putconn_calls += 1
        self.checked_out -= 1

    def closeall(self):
        self.closed = True


class RecordingExecutor:
    """Executor double: records calls, returns scripted results in call order.

    batch_update does not consume scripted results; it returns the size of
    the batch like the real executor.
    """

    def __init__(self, dialect: str = "postgresql"):
        self.dialect = dialect
        self.calls: list[tuple[str, str, Any]] = []
        self.results: deque = deque()

    def script(self, *results):
        self.results.extend(results)
        return self

    def _next(self, default):
        return self.results.popleft() if self.results else default

    def query_for_list(self, sql, mapper, params=()):
        self.calls.append(("query_for_list", sql, tuple(params)))
        return [mapper(row) for row in self._next([])]

    def query_for_optional(self, sql, mapper, params=()):
        self.calls.append(("query_for_optional", sql, tuple(params)))
        row = self._next(None)
        return mapper(row) if row is not None else None

    def count(self, sql, params=()):
        self.calls.append(("count", sql, tuple(params)))
        return self._next(0)

    def update(self, sql, params=()):
        self.calls.append(("update", sql, tuple(params)))
        return self._next(1)

    def batch_update(self, sql, param_seq):
        batch = [tuple(p) for p in param_seq]
        self.calls.append(("batch_update", sql, batch))
        return len(batch)

    def sql_of(self, kind: str) -> list[str]:
        return [sql for k, sql, _ in self.calls if k == kind]


@pytest.fixture
def fake_pool():
    return FakePool()


@pytest.fixture
def fake_conn(fake_pool):
    return fake_pool.conn


@pytest.fixture
def database(fake_pool):
    return Database(fake_pool)


@pytest.fixture
def executor(database):
    return StatementExecutor(database, dialect="postgresql")


@pytest.fixture
def recorder():
    return RecordingExecutor()
