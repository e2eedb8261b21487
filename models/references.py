"""
models/references.py
--------------------
Relationship references: the identifier of a related entity plus a few
display fields read from a joined row.

They are not full entities; load the related entity through its own
repository when the whole record is needed.
"""

from dataclasses import dataclass
from typing import Optional
from uuid import UUID


@dataclass(frozen=True)
class UserRef:
    id: UUID
    username: Optional[str] = None
    email: Optional[str] = None


@dataclass(frozen=True)
class BusinessComponentRef:
    id: UUID
    name: Optional[str] = None
    description: Optional[str] = None


@dataclass(frozen=True)
class FlowRef:
    id: UUID
    name: Optional[str] = None
