"""
Shared test fixtures and utilities.

This module provides common test infrastructure used across all test modules:
settings with test secrets, a controllable clock, an in-memory user
directory and credential store, and application/client factories.
"""

import threading
import uuid
from datetime import datetime, timezone
from typing import Optional

import pytest
from fastapi.testclient import TestClient

from api.app import create_app
from api.dependencies import ServiceContainer
from shared.config import Settings
from modules.auth.exceptions import DuplicateUserError
from modules.auth.models import NewUser, User, UserType
from modules.auth.passwords import hash_password
from modules.auth.service import IdentityService
from modules.tokens import TokenAuthority


# Test secrets (only for testing)
TEST_JWT_SECRET = "test-access-secret-for-testing-only"
TEST_JWT_REFRESH_SECRET = "test-refresh-secret-for-testing-only"

# Mid-November 2023, whole seconds
T0 = 1_700_000_000.0

CSRF_HEADERS = {"X-Requested-With": "XMLHttpRequest"}

VALID_PASSWORD = "Passw0rd!"


class FixedClock:
    """Callable clock returning a settable epoch time."""

    def __init__(self, now: float = T0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class InMemoryUserDirectory:
    """
    User directory held in a dict.

    Enforces case-insensitive email and username uniqueness on insert,
    like the database constraint does.
    """

    def __init__(self):
        self._users: dict[str, User] = {}
        self._lock = threading.Lock()
        self.login_records: list[str] = []

    def insert_user(self, new_user: NewUser) -> User:
        with self._lock:
            for existing in self._users.values():
                if existing.email.lower() == new_user.email.lower():
                    raise DuplicateUserError("email")
                if existing.username.lower() == new_user.username.lower():
                    raise DuplicateUserError("username")
            now = datetime.now(timezone.utc)
            user = User(
                id=str(uuid.uuid4()),
                **{
                    **new_user.model_dump(),
                    "email": new_user.email.lower(),
                    "username": new_user.username.lower(),
                },
                created_at=now,
                updated_at=now,
            )
            self._users[user.id] = user
            return user

    def find_by_email(self, email: str) -> Optional[User]:
        return self._find(lambda u: u.email.lower() == email.lower())

    def find_by_username(self, username: str) -> Optional[User]:
        return self._find(lambda u: u.username.lower() == username.lower())

    def find_by_display_name(self, display_name: str) -> Optional[User]:
        return self._find(lambda u: u.display_name == display_name)

    def get_by_id(self, user_id: str) -> Optional[User]:
        return self._users.get(user_id)

    def record_login(self, user_id: str) -> None:
        self.login_records.append(user_id)
        user = self._users.get(user_id)
        if user is not None:
            self._users[user_id] = user.model_copy(
                update={"last_login_at": datetime.now(timezone.utc)}
            )

    # Test helpers

    def add(
        self,
        email: str = "player@example.com",
        username: str = "player_one",
        password: str = VALID_PASSWORD,
        **fields,
    ) -> User:
        """Insert a user with a real (cheap) bcrypt hash."""
        return self.insert_user(
            NewUser(
                email=email,
                username=username,
                password_hash=hash_password(password, rounds=4),
                **fields,
            )
        )

    def update(self, user_id: str, **fields) -> User:
        user = self._users[user_id].model_copy(update=fields)
        self._users[user_id] = user
        return user

    def delete(self, user_id: str) -> None:
        del self._users[user_id]

    @property
    def count(self) -> int:
        return len(self._users)

    def _find(self, predicate) -> Optional[User]:
        for user in self._users.values():
            if predicate(user):
                return user
        return None


class InMemoryCredentialStore:
    """Credential store holding tokens in attributes instead of cookies."""

    def __init__(self, access: Optional[str] = None, refresh: Optional[str] = None):
        self.access = access
        self.refresh = refresh
        self.clear_count = 0

    def set_access(self, token: str) -> None:
        self.access = token

    def set_refresh(self, token: str) -> None:
        self.refresh = token

    def get_access(self) -> Optional[str]:
        return self.access

    def get_refresh(self) -> Optional[str]:
        return self.refresh

    def clear_all(self) -> None:
        self.access = None
        self.refresh = None
        self.clear_count += 1


def make_settings(**overrides) -> Settings:
    """Settings isolated from the environment's .env file."""
    values = {
        "jwt_secret": TEST_JWT_SECRET,
        "jwt_refresh_secret": TEST_JWT_REFRESH_SECRET,
        "environment": "test",
        "password_hash_rounds": 4,
        **overrides,
    }
    return Settings(_env_file=None, **values)


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def directory() -> InMemoryUserDirectory:
    return InMemoryUserDirectory()


@pytest.fixture
def tokens(settings: Settings, clock: FixedClock) -> TokenAuthority:
    return TokenAuthority.from_settings(settings, clock=clock)


@pytest.fixture
def identity_service(directory, tokens, settings) -> IdentityService:
    return IdentityService(directory=directory, tokens=tokens, settings=settings)


@pytest.fixture
def credential_store() -> InMemoryCredentialStore:
    return InMemoryCredentialStore()


@pytest.fixture
def existing_user(directory: InMemoryUserDirectory) -> User:
    """An active player account with password VALID_PASSWORD."""
    return directory.add(
        email="player@example.com",
        username="player_one",
        display_name="Player One",
        user_type=UserType.PLAYER,
    )


@pytest.fixture
def container(settings, directory, clock) -> ServiceContainer:
    return ServiceContainer(settings, directory=directory, clock=clock)


@pytest.fixture
def app(container: ServiceContainer):
    return create_app(container=container)


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)
