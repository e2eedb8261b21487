"""
models/business_component.py
----------------------------
Domain model for business components (the owning unit of a flow).
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from uuid import UUID

from models.references import BusinessComponentRef


@dataclass
class BusinessComponent:
    name: str
    description: Optional[str] = None
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None
    id: Optional[UUID] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_ref(self) -> BusinessComponentRef:
        return BusinessComponentRef(id=self.id, name=self.name, description=self.description)
