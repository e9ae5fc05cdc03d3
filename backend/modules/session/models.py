"""
Session state machine data models.

The client keeps only a minimal identity projection and an expiry in its
state. Credentials never appear here; they live in HTTP-only cookies.
"""

from datetime import datetime
from typing import Optional
from pydantic import Field, model_validator

from shared.models import CamelModel
from modules.auth.models import UserType


class CurrentUserIdentity(CamelModel):
    """
    Minimal identity kept in global client state.

    Everything else about the user is fetched on demand.
    """

    id: str
    username: str
    display_name: Optional[str] = None
    avatar: Optional[str] = None
    user_type: UserType = UserType.PLAYER
    is_verified: bool = False
    is_active: bool = True
    is_banned: bool = False

    model_config = {"frozen": True}


class AuthState(CamelModel):
    """
    Client auth state.

    Invariants:
        is_authenticated is True iff current_user is set.
        session_expires_at is set iff is_authenticated.
    """

    current_user: Optional[CurrentUserIdentity] = None
    is_authenticated: bool = False
    is_loading: bool = False
    error: Optional[str] = None
    session_expires_at: Optional[datetime] = None

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _check_invariants(self) -> "AuthState":
        if self.is_authenticated != (self.current_user is not None):
            raise ValueError("is_authenticated must be True iff current_user is set")
        if self.is_authenticated != (self.session_expires_at is not None):
            raise ValueError("session_expires_at must be set iff authenticated")
        return self


class PersistedSession(CamelModel):
    """What is written to local storage: projection and expiry, never tokens."""

    user: CurrentUserIdentity
    session_expires_at: datetime
    saved_at: Optional[datetime] = Field(None, description="When this snapshot was written")
