"""
Pure state transitions of the client session state machine.

Each async operation (sign-in, refresh, sign-out) produces a pending event
and then exactly one fulfilled or rejected event. reduce() maps a state and
an event to the next state and never performs I/O, so every transition can
be tested without a network.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping, Optional, Union

from .models import AuthState, CurrentUserIdentity
from .projection import apply_identity_update

ANONYMOUS = AuthState()


# =============================================================================
# Events
# =============================================================================


@dataclass(frozen=True)
class SignInPending:
    pass


@dataclass(frozen=True)
class SignInFulfilled:
    user: CurrentUserIdentity
    expires_at: datetime


@dataclass(frozen=True)
class SignInRejected:
    message: str


@dataclass(frozen=True)
class RefreshPending:
    pass


@dataclass(frozen=True)
class RefreshFulfilled:
    expires_at: datetime


@dataclass(frozen=True)
class RefreshRejected:
    message: str


@dataclass(frozen=True)
class SignOutPending:
    pass


@dataclass(frozen=True)
class SignOutSettled:
    """Sign-out finished. Success and failure are the same transition."""

    failed: bool = False


@dataclass(frozen=True)
class OptimisticLogout:
    pass


@dataclass(frozen=True)
class SetCurrentUser:
    """Hydrate from a server-rendered preload; user None means anonymous."""

    user: Optional[CurrentUserIdentity]
    expires_at: Optional[datetime] = None

    def __post_init__(self):
        if self.user is not None and self.expires_at is None:
            raise ValueError("expires_at is required when hydrating a user")


@dataclass(frozen=True)
class UpdateIdentity:
    """Apply a partial identity update from a profile mutation."""

    changes: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ClearError:
    pass


SessionEvent = Union[
    SignInPending,
    SignInFulfilled,
    SignInRejected,
    RefreshPending,
    RefreshFulfilled,
    RefreshRejected,
    SignOutPending,
    SignOutSettled,
    OptimisticLogout,
    SetCurrentUser,
    UpdateIdentity,
    ClearError,
]


# =============================================================================
# Reducer
# =============================================================================


def _authenticated(user: CurrentUserIdentity, expires_at: datetime) -> AuthState:
    return AuthState(
        current_user=user,
        is_authenticated=True,
        is_loading=False,
        error=None,
        session_expires_at=expires_at,
    )


def _logged_out(error: Optional[str] = None, is_loading: bool = False) -> AuthState:
    return AuthState(is_loading=is_loading, error=error)


def reduce(state: AuthState, event: SessionEvent) -> AuthState:
    """
    Compute the next state.

    Clearing transitions never depend on the prior state, so applying one
    twice is a no-op and a clear always dominates an earlier set.
    """
    if isinstance(event, SignInPending):
        return state.model_copy(update={"is_loading": True, "error": None})

    if isinstance(event, SignInFulfilled):
        return _authenticated(event.user, event.expires_at)

    if isinstance(event, SignInRejected):
        # An existing session survives a failed sign-in
        return state.model_copy(update={"is_loading": False, "error": event.message})

    if isinstance(event, RefreshPending):
        return state.model_copy(update={"is_loading": True})

    if isinstance(event, RefreshFulfilled):
        if not state.is_authenticated:
            # Nothing to extend; setting an expiry would break the invariant
            return state.model_copy(update={"is_loading": False})
        return state.model_copy(
            update={"is_loading": False, "session_expires_at": event.expires_at}
        )

    if isinstance(event, RefreshRejected):
        return _logged_out(error=event.message)

    if isinstance(event, SignOutPending):
        return state.model_copy(update={"is_loading": True})

    if isinstance(event, SignOutSettled):
        return _logged_out()

    if isinstance(event, OptimisticLogout):
        return _logged_out(error=state.error)

    if isinstance(event, SetCurrentUser):
        if event.user is None:
            return _logged_out(error=state.error, is_loading=state.is_loading)
        return AuthState(
            current_user=event.user,
            is_authenticated=True,
            is_loading=state.is_loading,
            error=state.error,
            session_expires_at=event.expires_at,
        )

    if isinstance(event, UpdateIdentity):
        if state.current_user is None:
            return state
        return state.model_copy(
            update={"current_user": apply_identity_update(state.current_user, event.changes)}
        )

    if isinstance(event, ClearError):
        return state.model_copy(update={"error": None})

    raise TypeError(f"Unknown session event: {type(event).__name__}")
