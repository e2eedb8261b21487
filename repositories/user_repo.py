"""
repositories/user_repo.py
--------------------------
Data access layer for user records.
All SQL queries related to the `users` table live here.
"""

from typing import Optional
from uuid import UUID

from db import columns as col
from db.pagination import Sort
from db.sql import Column, Where
from models.user import User
from repositories.base import BaseRepository


class UserRepository(BaseRepository[User, UUID]):
    """Repository for CRUD operations on the users table."""

    table = "users"
    columns = (
        Column("id", lambda u: u.id, updatable=False),
        Column("username", lambda u: u.username),
        Column("email", lambda u: u.email),
        Column("first_name", lambda u: u.first_name),
        Column("last_name", lambda u: u.last_name),
        Column("is_active", lambda u: u.is_active),
        Column("last_login_at", lambda u: col.to_timestamp(u.last_login_at)),
        Column("created_at", lambda u: col.to_timestamp(u.created_at), updatable=False),
        Column("updated_at", lambda u: col.to_timestamp(u.updated_at)),
    )
    default_sort = Sort.by("username")

    # ── READ ──────────────────────────────────────────────

    def find_by_username(self, username: str) -> Optional[User]:
        return self._query_one(Where().add("username = %s", username))

    def find_by_email(self, email: str) -> Optional[User]:
        return self._query_one(Where().add("email = %s", email))

    def exists_by_username(self, username: str) -> bool:
        return self._count_where(Where().add("username = %s", username)) > 0

    # ── HELPERS ───────────────────────────────────────────

    def map_row(self, row) -> User:
        return self._row_to_user(row)

    @staticmethod
    def _row_to_user(row) -> User:
        """Convert a database row to a User domain object."""
        return User(
            id=col.get_uuid(row, "id"),
            username=col.get_str(row, "username"),
            email=col.get_str(row, "email"),
            first_name=col.get_str(row, "first_name"),
            last_name=col.get_str(row, "last_name"),
            is_active=bool(col.get_bool(row, "is_active")),
            last_login_at=col.get_datetime(row, "last_login_at"),
            created_at=col.get_datetime(row, "created_at"),
            updated_at=col.get_datetime(row, "updated_at"),
        )
