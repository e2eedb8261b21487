"""
repositories/integration_flow_repo.py
-------------------------------------
Data access layer for integration flows.

Reads go through a LEFT JOIN on business_components and users so that
listing flows with owner and author display names costs one statement
instead of one extra query per row. The joined columns are turned into
reference objects, never into full entities.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from db import columns as col
from db.pagination import Page, PageRequest, Sort
from db.sql import Column, Where
from models.integration_flow import FlowStatus, FlowType, IntegrationFlow, MappingMode
from models.references import BusinessComponentRef, UserRef
from repositories.base import BaseRepository
from utils.logger import get_logger

logger = get_logger(__name__)


def _ref_id(ref) -> Optional[UUID]:
    return ref.id if ref is not None else None


class IntegrationFlowRepository(BaseRepository[IntegrationFlow, UUID]):
    """Repository for integration_flows, with joined owner/author references."""

    table = "integration_flows"
    alias = "ifl"
    columns = (
        Column("id", lambda f: f.id, updatable=False),
        Column("name", lambda f: f.name),
        Column("description", lambda f: f.description),
        Column("inbound_adapter_id", lambda f: f.inbound_adapter_id),
        Column("outbound_adapter_id", lambda f: f.outbound_adapter_id),
        Column("status", lambda f: col.enum_value(f.status)),
        Column("flow_type", lambda f: col.enum_value(f.flow_type)),
        Column("mapping_mode", lambda f: col.enum_value(f.mapping_mode)),
        Column("is_active", lambda f: f.is_active),
        Column("version", lambda f: f.version),
        Column("deployment_metadata", lambda f: col.to_json(f.deployment_metadata)),
        Column("deployed_at", lambda f: col.to_timestamp(f.deployed_at)),
        Column("last_execution_at", lambda f: col.to_timestamp(f.last_execution_at)),
        Column("execution_count", lambda f: f.execution_count),
        Column("success_count", lambda f: f.success_count),
        Column("error_count", lambda f: f.error_count),
        Column("business_component_id", lambda f: _ref_id(f.business_component)),
        Column("created_by", lambda f: _ref_id(f.created_by), updatable=False),
        Column("updated_by", lambda f: _ref_id(f.updated_by)),
        Column("created_at", lambda f: col.to_timestamp(f.created_at), updatable=False),
        Column("updated_at", lambda f: col.to_timestamp(f.updated_at)),
    )
    default_sort = Sort.by("name")
    sort_columns = {
        "name": "ifl.name",
        "status": "ifl.status",
        "created_at": "ifl.created_at",
        "updated_at": "ifl.updated_at",
        "last_execution_at": "ifl.last_execution_at",
        "business_component_name": "bc.name",
    }

    def _select_list(self) -> str:
        return (
            "ifl.*, "
            "bc.name AS bc_name, bc.description AS bc_description, "
            "cu.username AS created_by_username, cu.email AS created_by_email, "
            "uu.username AS updated_by_username, uu.email AS updated_by_email"
        )

    def _from_clause(self) -> str:
        return (
            "integration_flows ifl "
            "LEFT JOIN business_components bc ON ifl.business_component_id = bc.id "
            "LEFT JOIN users cu ON ifl.created_by = cu.id "
            "LEFT JOIN users uu ON ifl.updated_by = uu.id"
        )

    # ── READ ──────────────────────────────────────────────

    def find_by_name(self, name: str) -> Optional[IntegrationFlow]:
        return self._query_one(Where().add("ifl.name = %s", name))

    def find_by_status(self, status: FlowStatus) -> list[IntegrationFlow]:
        return self._query(Where().add("ifl.status = %s", status.value), self.default_sort)

    def find_active(self) -> list[IntegrationFlow]:
        return self._query(Where().add("ifl.is_active = TRUE"), self.default_sort)

    def find_by_business_component_id(self, business_component_id: UUID) -> list[IntegrationFlow]:
        where = Where().add("ifl.business_component_id = %s", business_component_id)
        return self._query(where, self.default_sort)

    def search_page(
        self,
        request: PageRequest,
        status: Optional[FlowStatus] = None,
        business_component_id: Optional[UUID] = None,
        active_only: bool = False,
    ) -> Page[IntegrationFlow]:
        """Filtered page; the count statement uses the same filter."""
        where = Where()
        where.add_if(col.enum_value(status), "ifl.status = %s")
        where.add_if(business_component_id, "ifl.business_component_id = %s")
        if active_only:
            where.add("ifl.is_active = TRUE")
        return self.find_page(request, where)

    def exists_by_name(self, name: str, exclude_id: Optional[UUID] = None) -> bool:
        where = Where().add("name = %s", name)
        where.add_if(exclude_id, "id <> %s")
        sql = f"SELECT COUNT(*) FROM {self.table}" + where.sql
        return self.executor.count(sql, where.params) > 0

    def count_active(self) -> int:
        return self.executor.count(f"SELECT COUNT(*) FROM {self.table} WHERE is_active = TRUE")

    # ── UPDATE ────────────────────────────────────────────

    def update_execution_stats(self, flow_id: UUID, success: bool) -> bool:
        """Increment the execution counters atomically in the database."""
        outcome = "success_count = success_count + 1" if success else "error_count = error_count + 1"
        sql = (
            f"UPDATE {self.table} SET execution_count = execution_count + 1, "
            f"{outcome}, last_execution_at = %s WHERE id = %s"
        )
        return self.executor.update(sql, (col.to_timestamp(datetime.now()), flow_id)) > 0

    def update_deployment(
        self, flow_id: UUID, deployed_at: datetime, metadata: Optional[dict] = None
    ) -> bool:
        sql = (
            f"UPDATE {self.table} SET deployed_at = %s, deployment_metadata = %s, "
            f"status = %s, updated_at = %s WHERE id = %s"
        )
        params = (
            col.to_timestamp(deployed_at),
            col.to_json(metadata),
            FlowStatus.ACTIVE.value,
            datetime.now(),
            flow_id,
        )
        updated = self.executor.update(sql, params) > 0
        if updated:
            logger.info(f"Flow #{flow_id} marked deployed")
        return updated

    # ── HELPERS ───────────────────────────────────────────

    def map_row(self, row) -> IntegrationFlow:
        """Own columns only; relationship fields stay None."""
        return IntegrationFlow(
            id=col.get_uuid(row, "id"),
            name=col.get_str(row, "name"),
            description=col.get_str(row, "description"),
            inbound_adapter_id=col.get_uuid(row, "inbound_adapter_id"),
            outbound_adapter_id=col.get_uuid(row, "outbound_adapter_id"),
            status=col.get_enum(row, "status", FlowStatus),
            flow_type=col.get_enum(row, "flow_type", FlowType),
            mapping_mode=col.get_enum(row, "mapping_mode", MappingMode),
            is_active=bool(col.get_bool(row, "is_active")),
            version=col.get_str(row, "version"),
            deployment_metadata=col.get_json(row, "deployment_metadata"),
            deployed_at=col.get_datetime(row, "deployed_at"),
            last_execution_at=col.get_datetime(row, "last_execution_at"),
            execution_count=col.get_long(row, "execution_count") or 0,
            success_count=col.get_long(row, "success_count") or 0,
            error_count=col.get_long(row, "error_count") or 0,
            created_at=col.get_datetime(row, "created_at"),
            updated_at=col.get_datetime(row, "updated_at"),
        )

    def map_read_row(self, row) -> IntegrationFlow:
        """Plain mapping plus references built from the joined columns."""
        flow = self.map_row(row)

        bc_id = col.get_uuid(row, "business_component_id")
        if bc_id is not None:
            flow.business_component = BusinessComponentRef(
                id=bc_id,
                name=col.get_str(row, "bc_name"),
                description=col.get_str(row, "bc_description"),
            )

        created_by = col.get_uuid(row, "created_by")
        if created_by is not None:
            flow.created_by = UserRef(
                id=created_by,
                username=col.get_str(row, "created_by_username"),
                email=col.get_str(row, "created_by_email"),
            )

        updated_by = col.get_uuid(row, "updated_by")
        if updated_by is not None:
            flow.updated_by = UserRef(
                id=updated_by,
                username=col.get_str(row, "updated_by_username"),
                email=col.get_str(row, "updated_by_email"),
            )

        return flow
