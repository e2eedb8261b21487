"""
repositories/message_repo.py
-----------------------------
Data access layer for flow messages. Payloads are stored as BYTEA and
each read joins the owning flow's name.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from db import columns as col
from db.pagination import Page, PageRequest, Sort, Order
from db.sql import Column, Where
from models.message import Message, MessageStatus
from models.references import FlowRef
from repositories.base import BaseRepository

_TERMINAL = (MessageStatus.COMPLETED, MessageStatus.FAILED, MessageStatus.DEAD_LETTER)


class MessageRepository(BaseRepository[Message, UUID]):
    """Repository for CRUD operations on the messages table."""

    table = "messages"
    alias = "m"
    columns = (
        Column("id", lambda m: m.id, updatable=False),
        Column("message_id", lambda m: m.message_id),
        Column("flow_id", lambda m: m.flow.id if m.flow else None),
        Column("status", lambda m: col.enum_value(m.status)),
        Column("correlation_id", lambda m: m.correlation_id),
        Column("content_type", lambda m: m.content_type),
        Column("payload", lambda m: m.payload),
        Column("size_bytes", lambda m: m.size_bytes),
        Column("priority", lambda m: m.priority),
        Column("retry_count", lambda m: m.retry_count),
        Column("error_message", lambda m: m.error_message),
        Column("received_at", lambda m: col.to_timestamp(m.received_at)),
        Column("processed_at", lambda m: col.to_timestamp(m.processed_at)),
        Column("completed_at", lambda m: col.to_timestamp(m.completed_at)),
        Column("created_at", lambda m: col.to_timestamp(m.created_at), updatable=False),
        Column("updated_at", lambda m: col.to_timestamp(m.updated_at)),
    )
    default_sort = Sort.by(Order.desc("received_at"), Order.desc("id"))
    sort_columns = {
        "received_at": "m.received_at",
        "priority": "m.priority",
        "status": "m.status",
        "id": "m.id",
    }

    def _select_list(self) -> str:
        return "m.*, f.name AS flow_name"

    def _from_clause(self) -> str:
        return "messages m LEFT JOIN integration_flows f ON m.flow_id = f.id"

    # ── READ ──────────────────────────────────────────────

    def find_by_message_id(self, message_id: str) -> Optional[Message]:
        return self._query_one(Where().add("m.message_id = %s", message_id))

    def find_by_correlation_id(self, correlation_id: str) -> list[Message]:
        return self._query(Where().add("m.correlation_id = %s", correlation_id), self.default_sort)

    def find_by_flow_id(self, flow_id: UUID) -> list[Message]:
        return self._query(Where().add("m.flow_id = %s", flow_id), self.default_sort)

    def find_by_status_page(
        self, status: MessageStatus, request: PageRequest, flow_id: Optional[UUID] = None
    ) -> Page[Message]:
        where = Where().add("m.status = %s", status.value)
        where.add_if(flow_id, "m.flow_id = %s")
        return self.find_page(request, where)

    def count_by_status(self, status: MessageStatus) -> int:
        return self._count_where(Where().add("m.status = %s", status.value))

    # ── UPDATE ────────────────────────────────────────────

    def update_status(
        self, message_id: UUID, status: MessageStatus, error_message: Optional[str] = None
    ) -> bool:
        """Set the status; terminal states also stamp completed_at."""
        now = datetime.now()
        completed_at = now if status in _TERMINAL else None
        sql = (
            f"UPDATE {self.table} SET status = %s, error_message = %s, "
            f"completed_at = COALESCE(%s, completed_at), updated_at = %s WHERE id = %s"
        )
        params = (status.value, error_message, completed_at, now, message_id)
        return self.executor.update(sql, params) > 0

    # ── HELPERS ───────────────────────────────────────────

    def map_row(self, row) -> Message:
        return Message(
            id=col.get_uuid(row, "id"),
            message_id=col.get_str(row, "message_id"),
            status=col.get_enum(row, "status", MessageStatus),
            correlation_id=col.get_str(row, "correlation_id"),
            content_type=col.get_str(row, "content_type"),
            payload=col.get_bytes(row, "payload"),
            size_bytes=col.get_long(row, "size_bytes"),
            priority=col.get_int(row, "priority"),
            retry_count=col.get_int(row, "retry_count") or 0,
            error_message=col.get_str(row, "error_message"),
            received_at=col.get_datetime(row, "received_at"),
            processed_at=col.get_datetime(row, "processed_at"),
            completed_at=col.get_datetime(row, "completed_at"),
            created_at=col.get_datetime(row, "created_at"),
            updated_at=col.get_datetime(row, "updated_at"),
        )

    def map_read_row(self, row) -> Message:
        message = self.map_row(row)
        flow_id = col.get_uuid(row, "flow_id")
        if flow_id is not None:
            message.flow = FlowRef(id=flow_id, name=col.get_str(row, "flow_name"))
        return message
