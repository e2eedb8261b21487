"""Unit tests for db/init_db.py and the repository wiring."""

import re

from db.init_db import SCHEMA_SQL, create_tables
from repositories import Repositories, get_repositories


def test_create_tables_runs_schema_once_and_commits(database, fake_conn, fake_pool):
    create_tables(database)

    assert fake_conn.statements == [(SCHEMA_SQL, None)]
    assert fake_conn.commits == 1
    assert fake_pool.checked_out == 0


def test_schema_is_idempotent():
    creates = re.findall(r"CREATE (?:TABLE|INDEX) (IF NOT EXISTS )?", SCHEMA_SQL)
    assert creates
    assert all(c for c in creates)


def test_every_repository_table_is_in_schema(recorder):
    repos = get_repositories(recorder)
    tables = {
        repos.users.table,
        repos.business_components.table,
        repos.integration_flows.table,
        repos.messages.table,
        repos.alert_rules.table,
        repos.custom_functions.table,
        repos.audit_events.table,
        repos.alert_rules.tags.table,
        repos.alert_rules.channels.table,
        repos.alert_rules.escalation_channels.table,
        repos.custom_functions.dependencies.table,
        repos.custom_functions.test_cases.table,
    }
    for table in tables:
        assert f"CREATE TABLE IF NOT EXISTS {table} (" in SCHEMA_SQL


def test_get_repositories_shares_one_executor(recorder):
    repos = get_repositories(recorder)
    assert isinstance(repos, Repositories)
    assert repos.users.executor is recorder
    assert repos.audit_events.executor is recorder
