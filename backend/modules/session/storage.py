"""
Local persistence of the client session.

Only the identity projection and the expiry are written. A snapshot whose
expiry has passed is discarded on load rather than trusted.
"""

import logging
import os
import tempfile
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Optional, Protocol, runtime_checkable

from pydantic import ValidationError as PydanticValidationError

from .models import AuthState, PersistedSession

logger = logging.getLogger(__name__)


@runtime_checkable
class SessionStorage(Protocol):
    """Durable client-local storage for one persisted session."""

    def load(self) -> Optional[PersistedSession]:
        ...

    def save(self, session: PersistedSession) -> None:
        ...

    def clear(self) -> None:
        ...


class MemoryStorage(SessionStorage):
    """Keeps the snapshot in process memory. Used in tests."""

    def __init__(self, session: Optional[PersistedSession] = None):
        self._session = session

    def load(self) -> Optional[PersistedSession]:
        return self._session

    def save(self, session: PersistedSession) -> None:
        self._session = session

    def clear(self) -> None:
        self._session = None


class JsonFileStorage(SessionStorage):
    """
    Stores the snapshot as a JSON file.

    Writes go to a temporary file in the same directory which is then
    renamed over the target, so a crash never leaves half a snapshot.
    An unreadable or invalid file loads as no session.
    """

    def __init__(self, path: "str | Path"):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> Optional[PersistedSession]:
        try:
            raw = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as e:
            logger.warning("Could not read persisted session %s: %s", self._path, e)
            return None

        try:
            return PersistedSession.model_validate_json(raw)
        except PydanticValidationError:
            logger.warning("Discarding invalid persisted session at %s", self._path)
            return None

    def save(self, session: PersistedSession) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self._path.parent, prefix=".session-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(session.model_dump_json(by_alias=True))
            os.replace(tmp_name, self._path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def clear(self) -> None:
        self._path.unlink(missing_ok=True)


def snapshot(state: AuthState, now: Optional[datetime] = None) -> Optional[PersistedSession]:
    """The persistable part of a state, or None when anonymous."""
    if state.current_user is None or state.session_expires_at is None:
        return None
    return PersistedSession(
        user=state.current_user,
        session_expires_at=state.session_expires_at,
        saved_at=now,
    )


def rehydrate(
    storage: SessionStorage,
    clock: Callable[[], float] = time.time,
) -> AuthState:
    """
    Rebuild auth state from storage without a network call.

    An expired snapshot is purged and yields the anonymous state.
    """
    persisted = storage.load()
    if persisted is None:
        return AuthState()

    now = datetime.fromtimestamp(clock(), tz=timezone.utc)
    expires_at = persisted.session_expires_at
    if expires_at.tzinfo is None:
        expires_at = expires_at.replace(tzinfo=timezone.utc)

    if expires_at <= now:
        logger.info("Persisted session expired at %s; discarding", expires_at.isoformat())
        storage.clear()
        return AuthState()

    return AuthState(
        current_user=persisted.user,
        is_authenticated=True,
        session_expires_at=persisted.session_expires_at,
    )
