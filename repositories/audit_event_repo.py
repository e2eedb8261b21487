"""
repositories/audit_event_repo.py
--------------------------------
Data access layer for the append-only audit trail.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from db import columns as col
from db.pagination import Order, Page, PageRequest, Sort
from db.sql import Column, Where
from models.audit_event import AuditEvent, AuditOutcome
from repositories.base import BaseRepository


class AuditEventRepository(BaseRepository[AuditEvent, UUID]):
    """Repository for audit_events. Rows are inserted, searched and purged, never edited."""

    table = "audit_events"
    columns = (
        Column("id", lambda e: e.id, updatable=False),
        Column("event_type", lambda e: e.event_type),
        Column("username", lambda e: e.username),
        Column("action", lambda e: e.action),
        Column("outcome", lambda e: col.enum_value(e.outcome)),
        Column("entity_type", lambda e: e.entity_type),
        Column("entity_id", lambda e: e.entity_id),
        Column("entity_name", lambda e: e.entity_name),
        Column("details", lambda e: col.to_json(e.details)),
        Column("ip_address", lambda e: e.ip_address),
        Column("correlation_id", lambda e: e.correlation_id),
        Column("error_message", lambda e: e.error_message),
        Column("occurred_at", lambda e: col.to_timestamp(e.occurred_at)),
        Column("created_at", lambda e: col.to_timestamp(e.created_at), updatable=False),
    )
    default_sort = Sort.by(Order.desc("occurred_at"), Order.desc("id"))
    sort_columns = {
        "occurred_at": "occurred_at",
        "username": "username",
        "event_type": "event_type",
        "id": "id",
    }

    def record(self, event: AuditEvent) -> AuditEvent:
        """Append an event; occurred_at defaults to now."""
        if event.occurred_at is None:
            event.occurred_at = datetime.now()
        if event.id is None:
            event.id = self.generate_id()
        self._insert(event)
        return event

    def search(
        self,
        request: PageRequest,
        username: Optional[str] = None,
        event_type: Optional[str] = None,
        outcome: Optional[AuditOutcome] = None,
        entity_type: Optional[str] = None,
        entity_id: Optional[str] = None,
        since: Optional[datetime] = None,
        until: Optional[datetime] = None,
    ) -> Page[AuditEvent]:
        """Filtered page of events; every filter is optional."""
        where = Where()
        where.add_if(username, "username = %s")
        where.add_if(event_type, "event_type = %s")
        where.add_if(col.enum_value(outcome), "outcome = %s")
        where.add_if(entity_type, "entity_type = %s")
        where.add_if(entity_id, "entity_id = %s")
        where.add_if(col.to_timestamp(since), "occurred_at >= %s")
        where.add_if(col.to_timestamp(until), "occurred_at < %s")
        return self.find_page(request, where)

    def find_by_entity(self, entity_type: str, entity_id: str) -> list[AuditEvent]:
        where = Where().add("entity_type = %s", entity_type).add("entity_id = %s", entity_id)
        return self._query(where, self.default_sort)

    def delete_older_than(self, cutoff: datetime) -> int:
        """Purge events before `cutoff`; returns the number removed."""
        sql = f"DELETE FROM {self.table} WHERE occurred_at < %s"
        return self.executor.update(sql, (col.to_timestamp(cutoff),))

    def map_row(self, row) -> AuditEvent:
        return AuditEvent(
            id=col.get_uuid(row, "id"),
            event_type=col.get_str(row, "event_type"),
            username=col.get_str(row, "username"),
            action=col.get_str(row, "action"),
            outcome=col.get_enum(row, "outcome", AuditOutcome),
            entity_type=col.get_str(row, "entity_type"),
            entity_id=col.get_str(row, "entity_id"),
            entity_name=col.get_str(row, "entity_name"),
            details=col.get_json(row, "details"),
            ip_address=col.get_str(row, "ip_address"),
            correlation_id=col.get_str(row, "correlation_id"),
            error_message=col.get_str(row, "error_message"),
            occurred_at=col.get_datetime(row, "occurred_at"),
            created_at=col.get_datetime(row, "created_at"),
        )
