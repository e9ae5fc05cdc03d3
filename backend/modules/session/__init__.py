"""
Session state machine (client side).

Tracks who is signed in and until when, drives sign-in, refresh and
sign-out against the identity API, and persists the minimal identity
locally so a restart can rehydrate without a network call.

Public API:
- SessionStore: Owns the state and runs the async operations
- AuthApiClient: httpx client for /api/auth
- reduce: Pure transition function
- AuthState / CurrentUserIdentity: State models
- JsonFileStorage / MemoryStorage: Local persistence
"""

from .client import AuthApiClient
from .config import SessionClientSettings, get_session_client_settings
from .exceptions import AuthRequestError
from .interfaces import IAuthApi
from .models import AuthState, CurrentUserIdentity, PersistedSession
from .projection import apply_identity_update, create_identity_update, project_identity
from .selectors import (
    UserDisplayInfo,
    select_is_session_expired,
    select_user,
    select_user_display_info,
    select_user_id,
)
from .storage import JsonFileStorage, MemoryStorage, SessionStorage, rehydrate
from .store import SessionStore
from .transitions import ANONYMOUS, reduce

__all__ = [
    # Interface
    "IAuthApi",
    "SessionStorage",
    # Implementations
    "AuthApiClient",
    "SessionStore",
    "JsonFileStorage",
    "MemoryStorage",
    # Config
    "SessionClientSettings",
    "get_session_client_settings",
    # Models
    "AuthState",
    "CurrentUserIdentity",
    "PersistedSession",
    "ANONYMOUS",
    # Functions
    "reduce",
    "rehydrate",
    "project_identity",
    "create_identity_update",
    "apply_identity_update",
    # Selectors
    "UserDisplayInfo",
    "select_user",
    "select_user_id",
    "select_user_display_info",
    "select_is_session_expired",
    # Exceptions
    "AuthRequestError",
]
