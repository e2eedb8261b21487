"""
repositories/base.py
--------------------
Generic CRUD for a single table with a client-generated UUID key.

A concrete repository declares `table`, `id_column`, its column
descriptors and a row mapper; it inherits the uniform operations and
adds entity-specific queries built with the same helpers.
"""

import uuid
from datetime import datetime
from typing import Any, Generic, Iterable, Mapping, Optional, Sequence, TypeVar

from db import sql as sqlbuild
from db.executor import StatementExecutor
from db.pagination import Page, PageRequest, Sort, build_order_by_clause, fetch_page
from db.sql import Column, Where
from errors import EntityNotFoundError, ValidationError
from utils.logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T")
ID = TypeVar("ID")


class BaseRepository(Generic[T, ID]):
    """
    Shared operations for repositories of entities exposing an `id`
    attribute.

    Class attributes set by subclasses:
        table: Table name.
        id_column: Primary-key column.
        alias: Optional table alias used by joined reads.
        columns: Column descriptors in statement order (id first).
        default_sort: Order used by find_all / find_page when none is given.
        sort_columns: Optional property -> column mapping for page sorting.

    Known race: `save` checks existence and then inserts or updates in two
    statements. Two concurrent first saves of the same new id both see
    "absent"; the primary key makes the second insert fail with
    UniqueConstraintError. Use `upsert` when that matters.
    """

    table: str = ""
    id_column: str = "id"
    alias: Optional[str] = None
    columns: Sequence[Column] = ()
    default_sort: Optional[Sort] = None
    sort_columns: Optional[Mapping[str, str]] = None

    def __init__(self, executor: StatementExecutor):
        self.executor = executor

    # ── HOOKS ─────────────────────────────────────────────

    def map_row(self, row: Mapping[str, Any]) -> T:
        """Plain mapper: the entity's own columns only."""
        raise NotImplementedError

    def map_read_row(self, row: Mapping[str, Any]) -> T:
        """Mapper for rows produced by `_select_sql`; joined repositories override."""
        return self.map_row(row)

    def _select_list(self) -> str:
        return f"{self.alias}.*" if self.alias else "*"

    def _from_clause(self) -> str:
        """FROM target shared by select and count statements."""
        return f"{self.table} {self.alias}" if self.alias else self.table

    def _qualified(self, column: str) -> str:
        return f"{self.alias}.{column}" if self.alias else column

    def _load_children(self, entity: T) -> T:
        """Populate association collections after a read."""
        return entity

    def _save_children(self, entity: T) -> None:
        """Replace association collections after the owner row is written."""

    def _delete_children(self, entity_id: ID) -> None:
        """Clear association rows before the owner row is deleted."""

    # ── SQL TEXT ──────────────────────────────────────────

    def _select_sql(self) -> str:
        return f"SELECT {self._select_list()} FROM {self._from_clause()}"

    def _count_sql(self) -> str:
        return f"SELECT COUNT(*) FROM {self._from_clause()}"

    def _id_predicate(self) -> str:
        return f"{self._qualified(self.id_column)} = %s"

    def build_insert_sql(self, *columns: str) -> str:
        """INSERT INTO <table> for the given columns, in that parameter order."""
        return sqlbuild.build_insert_sql(self.table, columns)

    def build_update_sql(self, *columns: str) -> str:
        """UPDATE <table> SET ... WHERE <id_column> = %s; bind the id last."""
        return sqlbuild.build_update_sql(self.table, self.id_column, columns)

    # ── READ ──────────────────────────────────────────────

    def generate_id(self) -> uuid.UUID:
        """Fresh random identifier, known before the first write."""
        return uuid.uuid4()

    def exists_by_id(self, entity_id: ID) -> bool:
        sql = f"SELECT COUNT(*) FROM {self.table} WHERE {self.id_column} = %s"
        return self.executor.count(sql, (entity_id,)) > 0

    def count(self) -> int:
        return self.executor.count(f"SELECT COUNT(*) FROM {self.table}")

    def find_by_id(self, entity_id: ID) -> Optional[T]:
        """Return the entity or None; absence is not an error."""
        sql = f"{self._select_sql()} WHERE {self._id_predicate()}"
        entity = self.executor.query_for_optional(sql, self.map_read_row, (entity_id,))
        return self._load_children(entity) if entity is not None else None

    def get_by_id(self, entity_id: ID) -> T:
        """
        Like find_by_id, for callers that require the entity to exist.

        Raises:
            EntityNotFoundError: If no row has this id.
        """
        entity = self.find_by_id(entity_id)
        if entity is None:
            raise EntityNotFoundError(
                f"{self.table} row {entity_id} not found",
                context={"table": self.table, "id": entity_id},
            )
        return entity

    def find_all(self) -> list[T]:
        """All rows, in `default_sort` order when one is declared."""
        sql = self._select_sql() + build_order_by_clause(
            self.default_sort or Sort.unsorted(), self.sort_columns
        )
        return [self._load_children(e) for e in self.executor.query_for_list(sql, self.map_read_row)]

    def find_all_by_id(self, ids: Iterable[ID]) -> list[T]:
        ids = list(ids)
        if not ids:
            return []
        where = Where().add_in(self._qualified(self.id_column), ids)
        sql = self._select_sql() + where.sql
        rows = self.executor.query_for_list(sql, self.map_read_row, where.params)
        return [self._load_children(e) for e in rows]

    def find_page(self, request: PageRequest, where: Optional[Where] = None) -> Page[T]:
        """
        One page of rows matching `where` (all rows when None), with the
        total counted under the same filter. The primary key is always the
        last sort key.
        """
        page = fetch_page(
            self.executor,
            select_sql=self._select_sql(),
            count_sql=self._count_sql(),
            where=where or Where(),
            request=request,
            mapper=self.map_read_row,
            columns=self.sort_columns,
            default_sort=self.default_sort,
            tiebreaker=self._qualified(self.id_column),
        )
        for entity in page.content:
            self._load_children(entity)
        return page

    # ── WRITE ─────────────────────────────────────────────

    def save(self, entity: T) -> T:
        """
        Insert the entity if its id is not stored yet, otherwise update it,
        then replace its association rows.

        Run inside `Database.transaction()` to make the owner row and its
        children one unit of work.
        """
        if getattr(entity, "id", None) is None:
            entity.id = self.generate_id()

        if self.exists_by_id(entity.id):
            self._update(entity)
        else:
            self._insert(entity)

        self._save_children(entity)
        return entity

    def upsert(self, entity: T) -> T:
        """
        Atomic insert-or-update on the primary key (INSERT ... ON CONFLICT),
        free of the check-then-write race in `save`. PostgreSQL only.
        """
        if self.executor.dialect != "postgresql":
            raise ValidationError(
                "upsert requires the postgresql dialect",
                context={"dialect": self.executor.dialect},
            )
        if getattr(entity, "id", None) is None:
            entity.id = self.generate_id()

        now = datetime.now()
        self._stamp_created(entity, now)
        if hasattr(entity, "updated_at"):
            entity.updated_at = now

        sql, params = sqlbuild.upsert_statement(self.table, self.id_column, self.columns, entity)
        self.executor.update(sql, params)
        self._save_children(entity)
        return entity

    def delete_by_id(self, entity_id: ID) -> bool:
        """
        Delete association rows, then the row itself.

        Returns:
            True if a row was deleted.
        """
        self._delete_children(entity_id)
        sql = f"DELETE FROM {self.table} WHERE {self.id_column} = %s"
        deleted = self.executor.update(sql, (entity_id,)) > 0
        if deleted:
            logger.info(f"Deleted {self.table} #{entity_id}")
        return deleted

    # ── HELPERS ───────────────────────────────────────────

    @staticmethod
    def _stamp_created(entity: Any, now: datetime) -> None:
        for attr in ("created_at", "updated_at"):
            if hasattr(entity, attr) and getattr(entity, attr) is None:
                setattr(entity, attr, now)

    def _insert(self, entity: T) -> None:
        self._stamp_created(entity, datetime.now())
        sql, params = sqlbuild.insert_statement(self.table, self.columns, entity)
        self.executor.update(sql, params)
        logger.info(f"Inserted {self.table} #{entity.id}")

    def _update(self, entity: T) -> None:
        if hasattr(entity, "updated_at"):
            entity.updated_at = datetime.now()
        sql, params = sqlbuild.update_statement(
            self.table, self.id_column, self.columns, entity, entity.id
        )
        self.executor.update(sql, params)

    def _query(self, where: Where, order: Optional[Sort] = None) -> list[T]:
        """Rows from `_select_sql` filtered by `where`, optionally ordered."""
        sql = self._select_sql() + where.sql + build_order_by_clause(
            order or Sort.unsorted(), self.sort_columns
        )
        rows = self.executor.query_for_list(sql, self.map_read_row, where.params)
        return [self._load_children(e) for e in rows]

    def _query_one(self, where: Where) -> Optional[T]:
        entity = self.executor.query_for_optional(
            self._select_sql() + where.sql, self.map_read_row, where.params
        )
        return self._load_children(entity) if entity is not None else None

    def _count_where(self, where: Where) -> int:
        return self.executor.count(self._count_sql() + where.sql, where.params)
