"""
repositories/associations.py
----------------------------
Child tables holding set/list-valued attributes of an owner entity
(tags, channel ids, dependency names, test cases).

The stored collection is always replaced wholesale: delete every row of
the owner, then insert the current members. Nothing is diffed.
"""

from typing import Any, Callable, Iterable, Mapping, Optional, Sequence

from db.executor import StatementExecutor
from db.sql import build_insert_sql
from utils.logger import get_logger

logger = get_logger(__name__)


class AssociationTable:
    """
    One child table keyed by the owner's identifier.

    Args:
        executor: Statement executor shared with the owning repository.
        table: Child table name.
        owner_column: Foreign-key column referencing the owner.
        value_columns: Columns holding the member value(s).
        order_column: Optional column giving the stored order of a list.
    """

    def __init__(
        self,
        executor: StatementExecutor,
        table: str,
        owner_column: str,
        value_columns: Sequence[str],
        order_column: Optional[str] = None,
    ):
        self.executor = executor
        self.table = table
        self.owner_column = owner_column
        self.value_columns = tuple(value_columns)
        self.order_column = order_column

    def _row_columns(self) -> tuple[str, ...]:
        cols = (self.owner_column,) + self.value_columns
        return cols + (self.order_column,) if self.order_column else cols

    def load(self, owner_id: Any, mapper: Optional[Callable[[Mapping[str, Any]], Any]] = None) -> list:
        """
        Members of one owner.

        Args:
            owner_id: Owner identifier.
            mapper: Row mapper; defaults to the single value column.
        """
        sql = (
            f"SELECT {', '.join(self.value_columns)} FROM {self.table} "
            f"WHERE {self.owner_column} = %s"
        )
        if self.order_column:
            sql += f" ORDER BY {self.order_column}"
        if mapper is None:
            column = self.value_columns[0]
            mapper = lambda row: row[column]  # noqa: E731
        return self.executor.query_for_list(sql, mapper, (owner_id,))

    def delete_all(self, owner_id: Any) -> int:
        sql = f"DELETE FROM {self.table} WHERE {self.owner_column} = %s"
        return self.executor.update(sql, (owner_id,))

    def replace(self, owner_id: Any, members: Iterable[Any]) -> int:
        """
        Delete all rows of the owner and insert one row per member.

        Members are scalars for single-value tables or tuples matching
        `value_columns` otherwise. Runs even when nothing changed.

        Returns:
            Number of rows inserted.
        """
        self.delete_all(owner_id)
        rows = []
        for position, member in enumerate(members):
            values = member if isinstance(member, tuple) else (member,)
            row = (owner_id,) + values
            if self.order_column:
                row += (position,)
            rows.append(row)
        inserted = self.executor.batch_update(
            build_insert_sql(self.table, self._row_columns()), rows
        )
        logger.debug(f"Replaced {self.table} for owner {owner_id}: {inserted} row(s)")
        return inserted
