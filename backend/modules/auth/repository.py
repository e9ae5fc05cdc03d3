"""
User directory backed by a Supabase table.

Encapsulates all Supabase queries and row mapping for the users table.
Email and username are stored lower-cased so the table's unique
constraints make them case-insensitive.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Optional

from postgrest.exceptions import APIError
from supabase import Client

from shared.repository import BaseRepository

from .exceptions import DuplicateUserError
from .interfaces import IUserDirectory
from .models import NewUser, User

logger = logging.getLogger(__name__)

# Postgres unique_violation
UNIQUE_VIOLATION = "23505"


class UserRepository(BaseRepository[User], IUserDirectory):
    """
    Repository for user data access.

    Note: This repository does NOT apply account rules (active, banned).
    The identity service is responsible for those decisions.
    """

    def __init__(self, db: Client, table: str = "users") -> None:
        super().__init__(db)
        self._table = table

    def insert_user(self, new_user: NewUser) -> User:
        """
        Insert a user row.

        Raises:
            DuplicateUserError: If a unique constraint rejects the row
        """
        now = datetime.now(timezone.utc).isoformat()
        data = {
            **new_user.model_dump(mode="json"),
            "email": new_user.email.lower(),
            "username": new_user.username.lower(),
            "created_at": now,
            "updated_at": now,
        }
        try:
            result = self._db.table(self._table).insert(data).execute()
        except APIError as e:
            if e.code == UNIQUE_VIOLATION:
                raise DuplicateUserError(_violated_field(e.message)) from e
            raise

        row = self._first_row(result)
        if row is None:
            raise RuntimeError("Failed to create user")
        return self._map_to_user(row)

    def find_by_email(self, email: str) -> Optional[User]:
        return self._find_one("email", email.lower())

    def find_by_username(self, username: str) -> Optional[User]:
        return self._find_one("username", username.lower())

    def find_by_display_name(self, display_name: str) -> Optional[User]:
        return self._find_one("display_name", display_name)

    def get_by_id(self, user_id: str) -> Optional[User]:
        return self._find_one("id", user_id)

    def record_login(self, user_id: str) -> None:
        now = datetime.now(timezone.utc).isoformat()
        self._db.table(self._table).update(
            {"last_login_at": now, "updated_at": now}
        ).eq("id", user_id).execute()

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _find_one(self, column: str, value: str) -> Optional[User]:
        result = self._db.table(self._table).select("*").eq(column, value).limit(1).execute()
        row = self._first_row(result)
        return self._map_to_user(row) if row else None

    @staticmethod
    def _map_to_user(row: dict[str, Any]) -> User:
        return User(
            id=str(row["id"]),
            email=row["email"],
            username=row["username"],
            password_hash=row["password_hash"],
            display_name=row.get("display_name"),
            avatar=row.get("avatar"),
            user_type=row.get("user_type") or "PLAYER",
            is_verified=bool(row.get("is_verified", False)),
            is_active=bool(row.get("is_active", True)),
            is_banned=bool(row.get("is_banned", False)),
            created_at=row["created_at"],
            updated_at=row["updated_at"],
            last_login_at=row.get("last_login_at"),
        )


def _violated_field(message: Optional[str]) -> Optional[str]:
    text = (message or "").lower()
    for field in ("email", "username", "display_name"):
        if field in text:
            return field
    return None
