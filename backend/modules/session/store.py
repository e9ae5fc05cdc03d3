"""
Client session store.

Holds the current AuthState, runs the three async operations against the
identity API and persists the outcome locally. Operations may overlap;
the store does not serialize them. A sign-in or refresh result that
arrives after a logout was dispatched is dropped, so a logout is never
undone by a late success.
"""

import logging
import time
from datetime import datetime, timezone
from typing import Any, Callable, Iterable, Mapping, Optional

import httpx

from modules.auth.models import PublicIdentity

from .client import AuthApiClient
from .config import SessionClientSettings
from .exceptions import NETWORK_ERROR_MESSAGE, AuthRequestError
from .interfaces import IAuthApi
from .models import AuthState
from .projection import UserLike, create_identity_update, project_identity
from .storage import JsonFileStorage, SessionStorage, rehydrate, snapshot
from .transitions import (
    ClearError,
    OptimisticLogout,
    RefreshFulfilled,
    RefreshPending,
    RefreshRejected,
    SessionEvent,
    SetCurrentUser,
    SignInFulfilled,
    SignInPending,
    SignInRejected,
    SignOutPending,
    SignOutSettled,
    UpdateIdentity,
    reduce,
)

logger = logging.getLogger(__name__)

Listener = Callable[[AuthState], None]


class SessionStore:
    """
    Owner of the client auth state.

    On construction the state is rehydrated from storage (expired
    snapshots are discarded) unless an explicit initial state is given.
    """

    def __init__(
        self,
        api: IAuthApi,
        storage: SessionStorage,
        clock: Callable[[], float] = time.time,
        initial_state: Optional[AuthState] = None,
    ):
        self._api = api
        self._storage = storage
        self._clock = clock
        self._state = initial_state if initial_state is not None else rehydrate(storage, clock)
        self._listeners: list[Listener] = []
        # Bumped by every logout; operations started before a bump are stale
        self._logout_generation = 0

    @classmethod
    def from_settings(
        cls,
        settings: SessionClientSettings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "SessionStore":
        """Build a store over the HTTP client and a JSON file."""
        return cls(
            api=AuthApiClient.from_settings(settings, transport=transport),
            storage=JsonFileStorage(settings.storage_path),
        )

    @property
    def state(self) -> AuthState:
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call listener after every transition. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # -------------------------------------------------------------------------
    # Async operations
    # -------------------------------------------------------------------------

    async def sign_in(self, email: str, password: str) -> AuthState:
        generation = self._logout_generation
        self._dispatch(SignInPending())

        try:
            session = await self._api.sign_in(email, password)
        except AuthRequestError as e:
            return self._dispatch(SignInRejected(e.message))
        except Exception:
            logger.exception("Sign-in call failed unexpectedly")
            return self._dispatch(SignInRejected(NETWORK_ERROR_MESSAGE))

        if generation != self._logout_generation:
            logger.info("Dropping sign-in result that arrived after logout")
            return self._state

        self._dispatch(SignInFulfilled(project_identity(session.user), session.expires_at))
        self._persist()
        return self._state

    async def refresh_session(self) -> AuthState:
        generation = self._logout_generation
        self._dispatch(RefreshPending())

        try:
            extension = await self._api.refresh_session()
        except AuthRequestError as e:
            logger.info("Session refresh failed (%s)", e.code)
            return self._reject_refresh(generation, e.message)
        except Exception:
            logger.exception("Session refresh failed unexpectedly")
            return self._reject_refresh(generation, NETWORK_ERROR_MESSAGE)

        if generation != self._logout_generation:
            logger.info("Dropping refresh result that arrived after logout")
            return self._state

        self._dispatch(RefreshFulfilled(extension.expires_at))
        self._persist()
        return self._state

    async def sign_out(self) -> AuthState:
        """
        Sign out on the server, then clear local state.

        Local state is cleared whatever the server call does.
        """
        self._logout_generation += 1
        self._dispatch(SignOutPending())

        failed = True
        try:
            await self._api.sign_out()
            failed = False
        except AuthRequestError as e:
            logger.warning("Server sign-out failed: %s", e.message)
        except Exception:
            logger.exception("Server sign-out failed unexpectedly")
        finally:
            self._dispatch(SignOutSettled(failed=failed))
            self._storage.clear()
        return self._state

    # -------------------------------------------------------------------------
    # Synchronous actions
    # -------------------------------------------------------------------------

    def optimistic_logout(self) -> AuthState:
        """Clear identity immediately; follow with sign_out() for the server."""
        self._logout_generation += 1
        self._dispatch(OptimisticLogout())
        self._storage.clear()
        return self._state

    def set_current_user(
        self,
        user: Optional[UserLike],
        expires_at: Optional[datetime] = None,
    ) -> AuthState:
        """
        Hydrate from a server-rendered preload without a network call.

        Args:
            user: Public identity (or projection, or wire mapping); None
                to become anonymous
            expires_at: End of the access window; required with a user

        Raises:
            ValueError: If a user is given without expires_at
        """
        identity = project_identity(user) if user is not None else None
        self._dispatch(SetCurrentUser(identity, expires_at))
        self._persist()
        return self._state

    def update_identity(self, changes: Mapping[str, Any]) -> AuthState:
        """Apply a partial identity update in place."""
        self._dispatch(UpdateIdentity(dict(changes)))
        self._persist()
        return self._state

    def apply_profile_update(
        self,
        updated_user: PublicIdentity,
        changed_fields: Iterable[str],
    ) -> AuthState:
        """Sync identity fields changed by a profile mutation elsewhere."""
        return self.update_identity(create_identity_update(updated_user, changed_fields))

    def clear_error(self) -> AuthState:
        return self._dispatch(ClearError())

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _reject_refresh(self, generation: int, message: str) -> AuthState:
        if generation != self._logout_generation:
            return self._state
        self._dispatch(RefreshRejected(message))
        self._storage.clear()
        return self._state

    def _dispatch(self, event: SessionEvent) -> AuthState:
        self._state = reduce(self._state, event)
        for listener in list(self._listeners):
            listener(self._state)
        return self._state

    def _persist(self) -> None:
        now = datetime.fromtimestamp(self._clock(), tz=timezone.utc)
        persisted = snapshot(self._state, now)
        if persisted is None:
            self._storage.clear()
        else:
            self._storage.save(persisted)
