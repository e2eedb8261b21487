"""
models/alert_rule.py
--------------------
Domain model for alert rules. Tags and channel ids live in their own
association tables and are replaced wholesale on every save.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import UUID


class AlertType(str, Enum):
    FLOW_FAILURE = "FLOW_FAILURE"
    ADAPTER_DOWN = "ADAPTER_DOWN"
    THRESHOLD = "THRESHOLD"
    SLA_BREACH = "SLA_BREACH"


class AlertSeverity(str, Enum):
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class ThresholdOperator(str, Enum):
    GREATER_THAN = "GREATER_THAN"
    LESS_THAN = "LESS_THAN"
    EQUALS = "EQUALS"


@dataclass
class AlertRule:
    """
    A rule raising alerts when its condition holds.

    Attributes:
        rule_name: Unique rule name.
        alert_type / severity: Categorical settings; None if stored NULL.
        threshold_value / threshold_operator: Optional numeric condition.
        time_window_minutes / occurrence_count: Optional windowing.
        tags: Free-form labels.
        notification_channel_ids: Channels notified when the rule fires.
        escalation_channel_ids: Channels notified on escalation.
        trigger_count: How many times the rule has fired.
    """
    rule_name: str
    alert_type: Optional[AlertType] = None
    severity: Optional[AlertSeverity] = None
    description: Optional[str] = None
    is_enabled: bool = True
    condition_expression: Optional[str] = None
    threshold_value: Optional[float] = None
    threshold_operator: Optional[ThresholdOperator] = None
    time_window_minutes: Optional[int] = None
    occurrence_count: Optional[int] = None
    trigger_count: int = 0
    last_triggered_at: Optional[datetime] = None
    escalation_enabled: bool = False
    escalation_after_minutes: Optional[int] = None
    tags: set[str] = field(default_factory=set)
    notification_channel_ids: set[str] = field(default_factory=set)
    escalation_channel_ids: set[str] = field(default_factory=set)
    id: Optional[UUID] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
