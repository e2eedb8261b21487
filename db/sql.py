"""
db/sql.py
---------
Builders for parameterized SQL text.

Placeholders follow psycopg2's `%s` style. Table and column names are
always supplied by repository code, never by callers.
"""

from dataclasses import dataclass
from typing import Any, Callable, Generic, Iterable, Sequence, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Column(Generic[T]):
    """
    One persisted attribute: the column name paired with the function that
    reads its bound value from an entity.

    A repository declares its columns once; the same sequence produces the
    statement text and the parameter tuple, so the two cannot drift apart.

    Attributes:
        name: Column name in the table.
        value: Extracts the value to bind from an entity.
        insertable: Included in INSERT statements.
        updatable: Included in the SET list of UPDATE statements.
    """
    name: str
    value: Callable[[T], Any]
    insertable: bool = True
    updatable: bool = True


def placeholders(count: int) -> str:
    """Comma-separated `%s` list, e.g. for VALUES (...) or IN (...)."""
    return ", ".join(["%s"] * count)


def build_insert_sql(table: str, columns: Sequence[str]) -> str:
    """
    INSERT for the given columns. Parameters must be bound in exactly the
    order of `columns`.
    """
    if not columns:
        raise ValueError("An INSERT needs at least one column")
    return (
        f"INSERT INTO {table} ({', '.join(columns)}) "
        f"VALUES ({placeholders(len(columns))})"
    )


def build_update_sql(table: str, id_column: str, columns: Sequence[str]) -> str:
    """
    UPDATE of the given columns keyed by primary key. Parameters must be
    bound in the order of `columns`, followed by the primary-key value.
    """
    if not columns:
        raise ValueError("An UPDATE needs at least one column")
    assignments = ", ".join(f"{c} = %s" for c in columns)
    return f"UPDATE {table} SET {assignments} WHERE {id_column} = %s"


def build_upsert_sql(
    table: str, id_column: str, columns: Sequence[str], update_columns: Sequence[str]
) -> str:
    """
    Atomic insert-or-update keyed by the primary key (PostgreSQL
    ON CONFLICT). Parameters are bound in the order of `columns`.
    """
    sql = build_insert_sql(table, columns)
    if not update_columns:
        return f"{sql} ON CONFLICT ({id_column}) DO NOTHING"
    assignments = ", ".join(f"{c} = EXCLUDED.{c}" for c in update_columns)
    return f"{sql} ON CONFLICT ({id_column}) DO UPDATE SET {assignments}"


def insert_statement(table: str, columns: Iterable[Column[T]], entity: T) -> tuple[str, tuple]:
    """INSERT text and parameters from insertable descriptors."""
    cols = [c for c in columns if c.insertable]
    return (
        build_insert_sql(table, [c.name for c in cols]),
        tuple(c.value(entity) for c in cols),
    )


def update_statement(
    table: str, id_column: str, columns: Iterable[Column[T]], entity: T, entity_id: Any
) -> tuple[str, tuple]:
    """UPDATE text and parameters from updatable descriptors; the id is bound last."""
    cols = [c for c in columns if c.updatable]
    return (
        build_update_sql(table, id_column, [c.name for c in cols]),
        tuple(c.value(entity) for c in cols) + (entity_id,),
    )


def upsert_statement(
    table: str, id_column: str, columns: Iterable[Column[T]], entity: T
) -> tuple[str, tuple]:
    cols = [c for c in columns if c.insertable]
    update_cols = [c.name for c in cols if c.updatable and c.name != id_column]
    return (
        build_upsert_sql(table, id_column, [c.name for c in cols], update_cols),
        tuple(c.value(entity) for c in cols),
    )


class Where:
    """
    Accumulates AND-ed predicates and their parameters.

    Build one per query and append `sql` to both the content and the count
    statement; ordering and paging are added to the content statement only.
    """

    def __init__(self) -> None:
        self._clauses: list[str] = []
        self.params: list[Any] = []

    def add(self, clause: str, *params: Any) -> "Where":
        self._clauses.append(clause)
        self.params.extend(params)
        return self

    def add_if(self, value: Any, clause: str) -> "Where":
        """Add `clause` bound to `value` unless value is None."""
        if value is not None:
            self.add(clause, value)
        return self

    def add_in(self, column: str, values: Sequence[Any]) -> "Where":
        """`column IN (...)`; an empty sequence matches nothing."""
        if not values:
            return self.add("1 = 0")
        return self.add(f"{column} IN ({placeholders(len(values))})", *values)

    @property
    def sql(self) -> str:
        if not self._clauses:
            return ""
        return " WHERE " + " AND ".join(self._clauses)

    def __bool__(self) -> bool:
        return bool(self._clauses)
