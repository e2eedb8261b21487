"""
repositories/ - Data Access Layer
==================================
Each repository encapsulates all SQL queries for a specific domain entity.
Repositories receive raw rows from the database and return domain model objects.

`get_repositories` wires every repository to one StatementExecutor at the
application boundary.
"""

from dataclasses import dataclass

from db.executor import StatementExecutor
from repositories.alert_rule_repo import AlertRuleRepository
from repositories.audit_event_repo import AuditEventRepository
from repositories.business_component_repo import BusinessComponentRepository
from repositories.custom_function_repo import CustomFunctionRepository
from repositories.integration_flow_repo import IntegrationFlowRepository
from repositories.message_repo import MessageRepository
from repositories.user_repo import UserRepository


@dataclass
class Repositories:
    """All repository instances sharing a single executor."""

    users: UserRepository
    business_components: BusinessComponentRepository
    integration_flows: IntegrationFlowRepository
    messages: MessageRepository
    alert_rules: AlertRuleRepository
    custom_functions: CustomFunctionRepository
    audit_events: AuditEventRepository


def get_repositories(executor: StatementExecutor) -> Repositories:
    """
    Construct all repositories bound to the given executor.

        db = Database.connect()
        repos = get_repositories(StatementExecutor(db))
        with db.transaction():
            repos.integration_flows.save(flow)
    """
    return Repositories(
        users=UserRepository(executor),
        business_components=BusinessComponentRepository(executor),
        integration_flows=IntegrationFlowRepository(executor),
        messages=MessageRepository(executor),
        alert_rules=AlertRuleRepository(executor),
        custom_functions=CustomFunctionRepository(executor),
        audit_events=AuditEventRepository(executor),
    )


__all__ = [
    "Repositories",
    "get_repositories",
    "UserRepository",
    "BusinessComponentRepository",
    "IntegrationFlowRepository",
    "MessageRepository",
    "AlertRuleRepository",
    "CustomFunctionRepository",
    "AuditEventRepository",
]
