"""
models/message.py
-----------------
Domain model for messages processed by a flow.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import UUID

from models.references import FlowRef


class MessageStatus(str, Enum):
    RECEIVED = "RECEIVED"
    PROCESSING = "PROCESSING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    DEAD_LETTER = "DEAD_LETTER"


@dataclass
class Message:
    """
    A message travelling through a flow.

    `payload` holds the raw body bytes; `size_bytes` may exceed 32 bits.
    """
    message_id: str
    status: Optional[MessageStatus] = MessageStatus.RECEIVED
    flow: Optional[FlowRef] = None
    correlation_id: Optional[str] = None
    content_type: Optional[str] = None
    payload: Optional[bytes] = None
    size_bytes: Optional[int] = None
    priority: Optional[int] = None
    retry_count: int = 0
    error_message: Optional[str] = None
    received_at: Optional[datetime] = None
    processed_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    id: Optional[UUID] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
