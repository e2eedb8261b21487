"""
repositories/business_component_repo.py
----------------------------------------
Data access layer for business components.
"""

from typing import Optional
from uuid import UUID

from db import columns as col
from db.pagination import Page, PageRequest, Sort
from db.sql import Column, Where
from models.business_component import BusinessComponent
from repositories.base import BaseRepository


class BusinessComponentRepository(BaseRepository[BusinessComponent, UUID]):
    """Repository for CRUD operations on the business_components table."""

    table = "business_components"
    columns = (
        Column("id", lambda b: b.id, updatable=False),
        Column("name", lambda b: b.name),
        Column("description", lambda b: b.description),
        Column("contact_email", lambda b: b.contact_email),
        Column("contact_phone", lambda b: b.contact_phone),
        Column("created_at", lambda b: col.to_timestamp(b.created_at), updatable=False),
        Column("updated_at", lambda b: col.to_timestamp(b.updated_at)),
    )
    default_sort = Sort.by("name")
    sort_columns = {"name": "name", "created_at": "created_at", "updated_at": "updated_at"}

    def find_by_name(self, name: str) -> Optional[BusinessComponent]:
        return self._query_one(Where().add("name = %s", name))

    def exists_by_name(self, name: str) -> bool:
        return self._count_where(Where().add("name = %s", name)) > 0

    def search_page(self, name_fragment: Optional[str], request: PageRequest) -> Page[BusinessComponent]:
        """Case-insensitive name search; all components when the fragment is None."""
        where = Where()
        if name_fragment:
            where.add("name ILIKE %s", f"%{name_fragment}%")
        return self.find_page(request, where)

    def map_row(self, row) -> BusinessComponent:
        return BusinessComponent(
            id=col.get_uuid(row, "id"),
            name=col.get_str(row, "name"),
            description=col.get_str(row, "description"),
            contact_email=col.get_str(row, "contact_email"),
            contact_phone=col.get_str(row, "contact_phone"),
            created_at=col.get_datetime(row, "created_at"),
            updated_at=col.get_datetime(row, "updated_at"),
        )
