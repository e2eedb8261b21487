"""
repositories/alert_rule_repo.py
-------------------------------
Data access layer for alert rules.

Tags, notification channels and escalation channels are stored in three
child tables keyed by alert_rule_id and replaced on every save.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from db import columns as col
from db.executor import StatementExecutor
from db.pagination import Sort
from db.sql import Column, Where
from models.alert_rule import AlertRule, AlertSeverity, AlertType, ThresholdOperator
from repositories.associations import AssociationTable
from repositories.base import BaseRepository


class AlertRuleRepository(BaseRepository[AlertRule, UUID]):
    """Repository for alert_rules and its three association tables."""

    table = "alert_rules"
    columns = (
        Column("id", lambda r: r.id, updatable=False),
        Column("rule_name", lambda r: r.rule_name),
        Column("description", lambda r: r.description),
        Column("alert_type", lambda r: col.enum_value(r.alert_type)),
        Column("severity", lambda r: col.enum_value(r.severity)),
        Column("is_enabled", lambda r: r.is_enabled),
        Column("condition_expression", lambda r: r.condition_expression),
        Column("threshold_value", lambda r: r.threshold_value),
        Column("threshold_operator", lambda r: col.enum_value(r.threshold_operator)),
        Column("time_window_minutes", lambda r: r.time_window_minutes),
        Column("occurrence_count", lambda r: r.occurrence_count),
        Column("trigger_count", lambda r: r.trigger_count),
        Column("last_triggered_at", lambda r: col.to_timestamp(r.last_triggered_at)),
        Column("escalation_enabled", lambda r: r.escalation_enabled),
        Column("escalation_after_minutes", lambda r: r.escalation_after_minutes),
        Column("created_at", lambda r: col.to_timestamp(r.created_at), updatable=False),
        Column("updated_at", lambda r: col.to_timestamp(r.updated_at)),
    )
    default_sort = Sort.by("rule_name")

    def __init__(self, executor: StatementExecutor):
        super().__init__(executor)
        self.tags = AssociationTable(executor, "alert_rule_tags", "alert_rule_id", ("tag",))
        self.channels = AssociationTable(
            executor, "alert_rule_channels", "alert_rule_id", ("channel_id",)
        )
        self.escalation_channels = AssociationTable(
            executor, "alert_rule_escalation_channels", "alert_rule_id", ("channel_id",)
        )

    # ── READ ──────────────────────────────────────────────

    def find_by_rule_name(self, rule_name: str) -> Optional[AlertRule]:
        return self._query_one(Where().add("rule_name = %s", rule_name))

    def find_enabled_by_type(self, alert_type: AlertType) -> list[AlertRule]:
        where = Where().add("alert_type = %s", alert_type.value).add("is_enabled = TRUE")
        return self._query(where, self.default_sort)

    def exists_by_rule_name(self, rule_name: str) -> bool:
        return self._count_where(Where().add("rule_name = %s", rule_name)) > 0

    # ── UPDATE ────────────────────────────────────────────

    def record_trigger(self, rule_id: UUID, triggered_at: Optional[datetime] = None) -> bool:
        sql = (
            f"UPDATE {self.table} SET last_triggered_at = %s, "
            f"trigger_count = trigger_count + 1 WHERE id = %s"
        )
        when = col.to_timestamp(triggered_at or datetime.now())
        return self.executor.update(sql, (when, rule_id)) > 0

    # ── COLLECTIONS ───────────────────────────────────────

    def _load_children(self, rule: AlertRule) -> AlertRule:
        rule.tags = set(self.tags.load(rule.id))
        rule.notification_channel_ids = set(self.channels.load(rule.id))
        rule.escalation_channel_ids = set(self.escalation_channels.load(rule.id))
        return rule

    def _save_children(self, rule: AlertRule) -> None:
        self.tags.replace(rule.id, sorted(rule.tags))
        self.channels.replace(rule.id, sorted(rule.notification_channel_ids))
        self.escalation_channels.replace(rule.id, sorted(rule.escalation_channel_ids))

    def _delete_children(self, rule_id: UUID) -> None:
        self.tags.delete_all(rule_id)
        self.channels.delete_all(rule_id)
        self.escalation_channels.delete_all(rule_id)

    # ── HELPERS ───────────────────────────────────────────

    def map_row(self, row) -> AlertRule:
        return AlertRule(
            id=col.get_uuid(row, "id"),
            rule_name=col.get_str(row, "rule_name"),
            description=col.get_str(row, "description"),
            alert_type=col.get_enum(row, "alert_type", AlertType),
            severity=col.get_enum(row, "severity", AlertSeverity),
            is_enabled=bool(col.get_bool(row, "is_enabled")),
            condition_expression=col.get_str(row, "condition_expression"),
            threshold_value=col.get_float(row, "threshold_value"),
            threshold_operator=col.get_enum(row, "threshold_operator", ThresholdOperator),
            time_window_minutes=col.get_int(row, "time_window_minutes"),
            occurrence_count=col.get_int(row, "occurrence_count"),
            trigger_count=col.get_int(row, "trigger_count") or 0,
            last_triggered_at=col.get_datetime(row, "last_triggered_at"),
            escalation_enabled=bool(col.get_bool(row, "escalation_enabled")),
            escalation_after_minutes=col.get_int(row, "escalation_after_minutes"),
            created_at=col.get_datetime(row, "created_at"),
            updated_at=col.get_datetime(row, "updated_at"),
        )
