"""
db/init_db.py
-------------
Creates the database schema (tables) if they do not already exist.
Run this module directly to initialize a fresh database:
    python -m db.init_db
"""

from db.connection import Database
from utils.logger import get_logger

logger = get_logger(__name__)

SCHEMA_SQL = """
-- Users: platform accounts referenced as creator/updater of flows
CREATE TABLE IF NOT EXISTS users (
    id              UUID PRIMARY KEY,
    username        VARCHAR(100) UNIQUE NOT NULL,
    email           VARCHAR(255) UNIQUE,
    first_name      VARCHAR(100),
    last_name       VARCHAR(100),
    is_active       BOOLEAN NOT NULL DEFAULT TRUE,
    last_login_at   TIMESTAMP,
    created_at      TIMESTAMP NOT NULL,
    updated_at      TIMESTAMP
);

-- Business components: organisational owners of integration flows
CREATE TABLE IF NOT EXISTS business_components (
    id              UUID PRIMARY KEY,
    name            VARCHAR(200) UNIQUE NOT NULL,
    description     TEXT,
    contact_email   VARCHAR(255),
    contact_phone   VARCHAR(50),
    created_at      TIMESTAMP NOT NULL,
    updated_at      TIMESTAMP
);

-- Integration flows: inbound -> (mapping) -> outbound pipelines
CREATE TABLE IF NOT EXISTS integration_flows (
    id                    UUID PRIMARY KEY,
    name                  VARCHAR(200) UNIQUE NOT NULL,
    description           TEXT,
    inbound_adapter_id    UUID,
    outbound_adapter_id   UUID,
    status                VARCHAR(20) NOT NULL DEFAULT 'DRAFT',
    flow_type             VARCHAR(30),
    mapping_mode          VARCHAR(30),
    is_active             BOOLEAN NOT NULL DEFAULT FALSE,
    version               VARCHAR(50),
    deployment_metadata   JSONB,
    deployed_at           TIMESTAMP,
    last_execution_at     TIMESTAMP,
    execution_count       BIGINT NOT NULL DEFAULT 0,
    success_count         BIGINT NOT NULL DEFAULT 0,
    error_count           BIGINT NOT NULL DEFAULT 0,
    business_component_id UUID REFERENCES business_components(id),
    created_by            UUID REFERENCES users(id),
    updated_by            UUID REFERENCES users(id),
    created_at            TIMESTAMP NOT NULL,
    updated_at            TIMESTAMP
);

-- Messages: payloads received and processed by a flow
CREATE TABLE IF NOT EXISTS messages (
    id              UUID PRIMARY KEY,
    message_id      VARCHAR(255) UNIQUE NOT NULL,
    flow_id         UUID REFERENCES integration_flows(id),
    status          VARCHAR(20) NOT NULL,
    correlation_id  VARCHAR(255),
    content_type    VARCHAR(100),
    payload         BYTEA,
    size_bytes      BIGINT,
    priority        INT,
    retry_count     INT NOT NULL DEFAULT 0,
    error_message   TEXT,
    received_at     TIMESTAMP,
    processed_at    TIMESTAMP,
    completed_at    TIMESTAMP,
    created_at      TIMESTAMP NOT NULL,
    updated_at      TIMESTAMP
);

-- Alert rules and their set-valued attributes
CREATE TABLE IF NOT EXISTS alert_rules (
    id                        UUID PRIMARY KEY,
    rule_name                 VARCHAR(200) UNIQUE NOT NULL,
    description               TEXT,
    alert_type                VARCHAR(30),
    severity                  VARCHAR(20),
    is_enabled                BOOLEAN NOT NULL DEFAULT TRUE,
    condition_expression      TEXT,
    threshold_value           DOUBLE PRECISION,
    threshold_operator        VARCHAR(30),
    time_window_minutes       INT,
    occurrence_count          INT,
    trigger_count             INT NOT NULL DEFAULT 0,
    last_triggered_at         TIMESTAMP,
    escalation_enabled        BOOLEAN NOT NULL DEFAULT FALSE,
    escalation_after_minutes  INT,
    created_at                TIMESTAMP NOT NULL,
    updated_at                TIMESTAMP
);

CREATE TABLE IF NOT EXISTS alert_rule_tags (
    alert_rule_id   UUID NOT NULL REFERENCES alert_rules(id),
    tag             VARCHAR(100) NOT NULL,
    PRIMARY KEY (alert_rule_id, tag)
);

CREATE TABLE IF NOT EXISTS alert_rule_channels (
    alert_rule_id   UUID NOT NULL REFERENCES alert_rules(id),
    channel_id      VARCHAR(100) NOT NULL,
    PRIMARY KEY (alert_rule_id, channel_id)
);

CREATE TABLE IF NOT EXISTS alert_rule_escalation_channels (
    alert_rule_id   UUID NOT NULL REFERENCES alert_rules(id),
    channel_id      VARCHAR(100) NOT NULL,
    PRIMARY KEY (alert_rule_id, channel_id)
);

-- Custom transformation functions, their dependencies and test cases
CREATE TABLE IF NOT EXISTS transformation_custom_functions (
    function_id         UUID PRIMARY KEY,
    name                VARCHAR(200) UNIQUE NOT NULL,
    description         TEXT,
    category            VARCHAR(100),
    language            VARCHAR(30),
    function_signature  TEXT,
    parameters          JSONB,
    function_body       TEXT NOT NULL,
    is_safe             BOOLEAN NOT NULL DEFAULT TRUE,
    is_public           BOOLEAN NOT NULL DEFAULT FALSE,
    is_built_in         BOOLEAN NOT NULL DEFAULT FALSE,
    version             INT NOT NULL DEFAULT 1,
    created_by          VARCHAR(100),
    created_at          TIMESTAMP NOT NULL,
    updated_at          TIMESTAMP
);

CREATE TABLE IF NOT EXISTS function_dependencies (
    function_id     UUID NOT NULL REFERENCES transformation_custom_functions(function_id),
    dependency      VARCHAR(200) NOT NULL,
    position        INT NOT NULL,
    PRIMARY KEY (function_id, position)
);

CREATE TABLE IF NOT EXISTS function_test_cases (
    function_id       UUID NOT NULL REFERENCES transformation_custom_functions(function_id),
    test_name         VARCHAR(200) NOT NULL,
    input_data        TEXT,
    expected_output   TEXT,
    test_description  TEXT,
    position          INT NOT NULL,
    PRIMARY KEY (function_id, position)
);

-- Audit trail: append-only
CREATE TABLE IF NOT EXISTS audit_events (
    id              UUID PRIMARY KEY,
    event_type      VARCHAR(100) NOT NULL,
    username        VARCHAR(100),
    action          VARCHAR(100),
    outcome         VARCHAR(20),
    entity_type     VARCHAR(100),
    entity_id       VARCHAR(100),
    entity_name     VARCHAR(255),
    details         JSONB,
    ip_address      VARCHAR(64),
    correlation_id  VARCHAR(255),
    error_message   TEXT,
    occurred_at     TIMESTAMP NOT NULL,
    created_at      TIMESTAMP NOT NULL
);

-- Indexes for faster queries
CREATE INDEX IF NOT EXISTS idx_flows_status ON integration_flows(status);
CREATE INDEX IF NOT EXISTS idx_flows_component ON integration_flows(business_component_id);
CREATE INDEX IF NOT EXISTS idx_messages_flow_status ON messages(flow_id, status);
CREATE INDEX IF NOT EXISTS idx_messages_correlation ON messages(correlation_id);
CREATE INDEX IF NOT EXISTS idx_audit_occurred ON audit_events(occurred_at);
CREATE INDEX IF NOT EXISTS idx_audit_entity ON audit_events(entity_type, entity_id);
"""


def create_tables(database: Database) -> None:
    """
    Execute the schema SQL to create all tables.
    Safe to call multiple times (uses IF NOT EXISTS).
    """
    try:
        with database.connection() as conn:
            with conn.cursor() as cur:
                cur.execute(SCHEMA_SQL)
        logger.info("Database schema initialized successfully.")
    except Exception as e:
        logger.error(f"Failed to initialize schema: {e}")
        raise


if __name__ == "__main__":
    db = Database.connect()
    try:
        create_tables(db)
    finally:
        db.close()
    print("Database schema created successfully.")
