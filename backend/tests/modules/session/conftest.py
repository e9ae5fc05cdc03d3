"""
Pytest fixtures for session module tests.
"""

from datetime import datetime, timedelta, timezone

import pytest

from modules.auth.models import PublicIdentity, UserType
from modules.session.models import AuthState, CurrentUserIdentity

from tests.conftest import T0

NOW = datetime.fromtimestamp(T0, tz=timezone.utc)
EXPIRES = NOW + timedelta(minutes=15)


@pytest.fixture
def public_user() -> PublicIdentity:
    return PublicIdentity(
        id="user-123",
        email="player@example.com",
        username="player_one",
        display_name="Player One",
        avatar="https://cdn.example.com/a.png",
        user_type=UserType.CREATOR,
        is_verified=True,
        created_at=NOW,
        updated_at=NOW,
    )


@pytest.fixture
def identity() -> CurrentUserIdentity:
    return CurrentUserIdentity(
        id="user-123",
        username="player_one",
        display_name="Player One",
        user_type=UserType.CREATOR,
        is_verified=True,
    )


@pytest.fixture
def signed_in(identity) -> AuthState:
    return AuthState(
        current_user=identity,
        is_authenticated=True,
        session_expires_at=EXPIRES,
    )
