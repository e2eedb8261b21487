"""Unit tests for repositories/alert_rule_repo.py."""

import uuid
from datetime import datetime

import pytest

from models.alert_rule import AlertRule, AlertSeverity, AlertType
from repositories.alert_rule_repo import AlertRuleRepository

RULE_ID = uuid.uuid4()


def _rule_row(**overrides):
    row = {
        "id": RULE_ID,
        "rule_name": "high-error-rate",
        "description": None,
        "alert_type": AlertType.FLOW_FAILURE.value,
        "severity": AlertSeverity.CRITICAL.value,
        "is_enabled": True,
        "condition_expression": None,
        "threshold_value": None,
        "threshold_operator": None,
        "time_window_minutes": 15,
        "occurrence_count": None,
        "trigger_count": 0,
        "last_triggered_at": None,
        "escalation_enabled": False,
        "escalation_after_minutes": None,
        "created_at": datetime(2024, 1, 1),
        "updated_at": None,
    }
    row.update(overrides)
    return row


@pytest.fixture
def rules(recorder):
    return AlertRuleRepository(recorder)


def _batches(recorder):
    return {sql.split()[2]: rows for kind, sql, rows in recorder.calls if kind == "batch_update"}


def test_save_replaces_all_three_collections(rules, recorder):
    recorder.script(0)
    rule = AlertRule(
        rule_name="high-error-rate",
        id=RULE_ID,
        tags={"prod", "billing"},
        notification_channel_ids={"email-ops"},
    )

    rules.save(rule)

    deletes = [sql for sql in recorder.sql_of("update") if sql.startswith("DELETE")]
    assert deletes == [
        "DELETE FROM alert_rule_tags WHERE alert_rule_id = %s",
        "DELETE FROM alert_rule_channels WHERE alert_rule_id = %s",
        "DELETE FROM alert_rule_escalation_channels WHERE alert_rule_id = %s",
    ]
    batches = _batches(recorder)
    assert batches["alert_rule_tags"] == [(RULE_ID, "billing"), (RULE_ID, "prod")]
    assert batches["alert_rule_channels"] == [(RULE_ID, "email-ops")]
    assert batches["alert_rule_escalation_channels"] == []


def test_replace_is_exact_not_additive(rules, recorder):
    recorder.script(0)
    rule = AlertRule(rule_name="r", id=RULE_ID, tags={"A", "B"})
    rules.save(rule)
    recorder.script(1)

    rule.tags = {"A", "C"}
    rules.save(rule)

    tag_batches = [rows for kind, sql, rows in recorder.calls
                   if kind == "batch_update" and "alert_rule_tags" in sql]
    assert tag_batches[-1] == [(RULE_ID, "A"), (RULE_ID, "C")]
    tag_deletes = [sql for sql in recorder.sql_of("update") if "DELETE FROM alert_rule_tags" in sql]
    assert len(tag_deletes) == 2


def test_find_by_id_loads_collections(rules, recorder):
    recorder.script(
        _rule_row(),
        [{"tag": "prod"}],
        [{"channel_id": "email-ops"}, {"channel_id": "slack"}],
        [],
    )

    rule = rules.find_by_id(RULE_ID)

    assert rule.alert_type is AlertType.FLOW_FAILURE
    assert rule.threshold_value is None
    assert rule.time_window_minutes == 15
    assert rule.tags == {"prod"}
    assert rule.notification_channel_ids == {"email-ops", "slack"}
    assert rule.escalation_channel_ids == set()


def test_delete_clears_children_before_owner(rules, recorder):
    rules.delete_by_id(RULE_ID)

    statements = recorder.sql_of("update")
    assert statements[-1] == "DELETE FROM alert_rules WHERE id = %s"
    assert len(statements) == 4


def test_find_enabled_by_type(rules, recorder):
    rules.find_enabled_by_type(AlertType.FLOW_FAILURE)
    _, sql, params = recorder.calls[0]
    assert sql == (
        "SELECT * FROM alert_rules WHERE alert_type = %s AND is_enabled = TRUE "
        "ORDER BY rule_name ASC"
    )
    assert params == ("FLOW_FAILURE",)


def test_record_trigger_increments_counter(rules, recorder):
    when = datetime(2024, 6, 1, 8, 30)
    assert rules.record_trigger(RULE_ID, when) is True
    _, sql, params = recorder.calls[0]
    assert "trigger_count = trigger_count + 1" in sql
    assert params == (when, RULE_ID)
