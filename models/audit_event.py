"""
models/audit_event.py
---------------------
Domain model for audit trail entries. Audit events are append-only.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID


class AuditOutcome(str, Enum):
    SUCCESS = "SUCCESS"
    FAILURE = "FAILURE"


@dataclass
class AuditEvent:
    event_type: str
    username: Optional[str] = None
    action: Optional[str] = None
    outcome: Optional[AuditOutcome] = None
    entity_type: Optional[str] = None
    entity_id: Optional[str] = None
    entity_name: Optional[str] = None
    details: Optional[Any] = None
    ip_address: Optional[str] = None
    correlation_id: Optional[str] = None
    error_message: Optional[str] = None
    occurred_at: Optional[datetime] = None
    id: Optional[UUID] = None
    created_at: Optional[datetime] = None
