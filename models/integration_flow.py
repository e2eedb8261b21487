"""
models/integration_flow.py
--------------------------
Domain model for integration flows.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import UUID

from models.references import BusinessComponentRef, FlowRef, UserRef


class FlowStatus(str, Enum):
    DRAFT = "DRAFT"
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    ERROR = "ERROR"


class FlowType(str, Enum):
    DIRECT_MAPPING = "DIRECT_MAPPING"
    ORCHESTRATION = "ORCHESTRATION"


class MappingMode(str, Enum):
    WITH_MAPPING = "WITH_MAPPING"
    PASS_THROUGH = "PASS_THROUGH"


@dataclass
class IntegrationFlow:
    """
    An integration flow connecting an inbound and an outbound adapter.

    Attributes:
        id: Client-generated identifier (None until first save).
        name: Unique flow name.
        description: Optional free text.
        inbound_adapter_id: Source adapter.
        outbound_adapter_id: Target adapter.
        status: Lifecycle status; None only if the stored value is NULL.
        flow_type: Direct mapping or orchestration.
        mapping_mode: Whether a field mapping is applied.
        is_active: Whether the flow accepts messages.
        version: Free-form version label.
        deployment_metadata: Opaque JSON written by the deployer.
        deployed_at: When the flow was last deployed.
        last_execution_at: Timestamp of the latest execution.
        execution_count / success_count / error_count: Running statistics.
        business_component: Owning component (reference only).
        created_by / updated_by: Users (reference only).
    """
    name: str
    description: Optional[str] = None
    inbound_adapter_id: Optional[UUID] = None
    outbound_adapter_id: Optional[UUID] = None
    status: Optional[FlowStatus] = FlowStatus.DRAFT
    flow_type: Optional[FlowType] = FlowType.DIRECT_MAPPING
    mapping_mode: Optional[MappingMode] = MappingMode.WITH_MAPPING
    is_active: bool = False
    version: Optional[str] = None
    deployment_metadata: Optional[dict] = None
    deployed_at: Optional[datetime] = None
    last_execution_at: Optional[datetime] = None
    execution_count: int = 0
    success_count: int = 0
    error_count: int = 0
    business_component: Optional[BusinessComponentRef] = None
    created_by: Optional[UserRef] = None
    updated_by: Optional[UserRef] = None
    id: Optional[UUID] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __str__(self) -> str:
        status = self.status.value if self.status else "UNKNOWN"
        return f"{self.name} [{status}]"

    def to_ref(self) -> FlowRef:
        return FlowRef(id=self.id, name=self.name)
