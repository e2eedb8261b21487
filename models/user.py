"""
models/user.py
--------------
Domain model for platform users.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from uuid import UUID

from models.references import UserRef


@dataclass
class User:
    """
    A platform user.

    Attributes:
        id: Client-generated identifier (None until first save).
        username: Unique login name.
        email: Unique e-mail address.
        first_name: Optional given name.
        last_name: Optional family name.
        is_active: Whether the account may log in.
        last_login_at: Last successful login, if any.
        created_at: Set on first insert.
        updated_at: Refreshed on every update.
    """
    username: str
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    is_active: bool = True
    last_login_at: Optional[datetime] = None
    id: Optional[UUID] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_ref(self) -> UserRef:
        return UserRef(id=self.id, username=self.username, email=self.email)

    def __str__(self) -> str:
        return f"{self.username} <{self.email}>"
