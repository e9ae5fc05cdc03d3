"""
Read-only views over AuthState.
"""

import time
from datetime import datetime, timezone
from typing import Callable, Optional

from pydantic import BaseModel

from .models import AuthState, CurrentUserIdentity


class UserDisplayInfo(BaseModel):
    """What a header or nav bar shows for the signed-in user."""

    display_name: str
    username: str
    avatar: Optional[str] = None


def select_user(state: AuthState) -> Optional[CurrentUserIdentity]:
    return state.current_user


def select_user_id(state: AuthState) -> Optional[str]:
    return state.current_user.id if state.current_user else None


def select_user_display_info(state: AuthState) -> Optional[UserDisplayInfo]:
    """Display name, falling back to the username when unset or empty."""
    user = state.current_user
    if user is None:
        return None
    return UserDisplayInfo(
        display_name=user.display_name or user.username,
        username=user.username,
        avatar=user.avatar,
    )


def select_is_session_expired(
    state: AuthState,
    clock: Callable[[], float] = time.time,
) -> bool:
    """True when there is no session or its access window has passed."""
    expires_at = state.session_expires_at
    if expires_at is None:
        return True
    if expires_at.tzinfo is None:
        expires_at = expires_at.replace(tzinfo=timezone.utc)
    return expires_at <= datetime.fromtimestamp(clock(), tz=timezone.utc)
