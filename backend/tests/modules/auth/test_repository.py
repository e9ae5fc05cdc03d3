"""Tests for the Supabase-backed user directory."""

import pytest
from unittest.mock import MagicMock
from datetime import datetime, timezone

from postgrest.exceptions import APIError

from modules.auth.exceptions import DuplicateUserError
from modules.auth.models import NewUser, UserType
from modules.auth.repository import UserRepository


def create_mock_user_data(
    user_id: str = "user-123",
    email: str = "player@example.com",
    username: str = "player_one",
    **overrides,
) -> dict:
    """Helper to create a mock users row."""
    now = datetime.now(timezone.utc).isoformat()
    return {
        "id": user_id,
        "email": email,
        "username": username,
        "password_hash": "$2b$04$hash",
        "display_name": None,
        "avatar": None,
        "user_type": "PLAYER",
        "is_verified": False,
        "is_active": True,
        "is_banned": False,
        "created_at": now,
        "updated_at": now,
        "last_login_at": None,
        **overrides,
    }


def mock_select(mock_db: MagicMock, rows: list[dict]) -> MagicMock:
    """Wire table().select().eq().limit().execute() to return rows."""
    query = mock_db.table.return_value.select.return_value.eq.return_value
    query.limit.return_value.execute.return_value.data = rows
    return query


class TestUserRepository:
    @pytest.fixture
    def mock_db(self):
        return MagicMock()

    @pytest.fixture
    def repo(self, mock_db):
        return UserRepository(mock_db)

    def test_insert_user_lowercases_and_maps(self, repo, mock_db):
        mock_db.table.return_value.insert.return_value.execute.return_value.data = [
            create_mock_user_data()
        ]

        user = repo.insert_user(
            NewUser(email="Player@Example.com", username="Player_One", password_hash="h")
        )

        mock_db.table.assert_called_with("users")
        inserted = mock_db.table.return_value.insert.call_args[0][0]
        assert inserted["email"] == "player@example.com"
        assert inserted["username"] == "player_one"
        assert inserted["is_active"] is True
        assert inserted["is_banned"] is False
        assert inserted["is_verified"] is False
        assert inserted["user_type"] == "PLAYER"
        assert "created_at" in inserted and "updated_at" in inserted
        assert user.id == "user-123"
        assert user.user_type == UserType.PLAYER

    def test_insert_unique_violation_raises_duplicate(self, repo, mock_db):
        mock_db.table.return_value.insert.return_value.execute.side_effect = APIError({
            "message": 'duplicate key value violates unique constraint "users_email_key"',
            "code": "23505",
            "hint": None,
            "details": None,
        })

        with pytest.raises(DuplicateUserError) as exc_info:
            repo.insert_user(NewUser(email="a@example.com", username="abc", password_hash="h"))
        assert exc_info.value.details == {"field": "email"}
        assert exc_info.value.code == "CONFLICT"

    def test_insert_other_api_error_propagates(self, repo, mock_db):
        mock_db.table.return_value.insert.return_value.execute.side_effect = APIError({
            "message": "permission denied",
            "code": "42501",
            "hint": None,
            "details": None,
        })

        with pytest.raises(APIError):
            repo.insert_user(NewUser(email="a@example.com", username="abc", password_hash="h"))

    def test_insert_without_returned_row_fails(self, repo, mock_db):
        mock_db.table.return_value.insert.return_value.execute.return_value.data = []

        with pytest.raises(RuntimeError):
            repo.insert_user(NewUser(email="a@example.com", username="abc", password_hash="h"))

    def test_find_by_email_is_case_insensitive(self, repo, mock_db):
        query = mock_select(mock_db, [create_mock_user_data()])

        user = repo.find_by_email("PLAYER@example.com")

        mock_db.table.return_value.select.return_value.eq.assert_called_with(
            "email", "player@example.com"
        )
        query.limit.assert_called_with(1)
        assert user is not None
        assert user.email == "player@example.com"

    def test_find_by_username_lowercases(self, repo, mock_db):
        mock_select(mock_db, [create_mock_user_data()])

        repo.find_by_username("Player_One")

        mock_db.table.return_value.select.return_value.eq.assert_called_with(
            "username", "player_one"
        )

    def test_find_by_display_name_is_exact(self, repo, mock_db):
        mock_select(mock_db, [])

        assert repo.find_by_display_name("Player One") is None
        mock_db.table.return_value.select.return_value.eq.assert_called_with(
            "display_name", "Player One"
        )

    def test_get_by_id_not_found(self, repo, mock_db):
        mock_select(mock_db, [])
        assert repo.get_by_id("missing") is None

    def test_maps_flags(self, repo, mock_db):
        mock_select(mock_db, [create_mock_user_data(is_banned=True, user_type="MODERATOR")])

        user = repo.get_by_id("user-123")

        assert user.is_banned is True
        assert user.user_type == UserType.MODERATOR
        assert not user.can_sign_in

    def test_record_login_updates_timestamp(self, repo, mock_db):
        repo.record_login("user-123")

        update = mock_db.table.return_value.update
        payload = update.call_args[0][0]
        assert set(payload) == {"last_login_at", "updated_at"}
        update.return_value.eq.assert_called_with("id", "user-123")

    def test_custom_table_name(self, mock_db):
        repo = UserRepository(mock_db, table="identity_users")
        mock_select(mock_db, [])

        repo.get_by_id("user-123")

        mock_db.table.assert_called_with("identity_users")
