"""
Authentication module interfaces.

Other modules should depend on these protocols, not the concrete
implementations. This enables testing with fakes and future extraction
of the user directory to a separate service.
"""

from typing import Protocol, Optional, runtime_checkable

from shared.models import AuthenticatedUser

from .models import (
    AuthSession,
    NewUser,
    PublicIdentity,
    RegistrationCheck,
    SessionExtension,
    User,
)


@runtime_checkable
class IUserDirectory(Protocol):
    """
    Storage capability the identity authority calls.

    Email and username lookups are case-insensitive. insert_user must
    enforce uniqueness itself and raise DuplicateUserError on violation.
    """

    def insert_user(self, new_user: NewUser) -> User:
        ...

    def find_by_email(self, email: str) -> Optional[User]:
        ...

    def find_by_username(self, username: str) -> Optional[User]:
        ...

    def find_by_display_name(self, display_name: str) -> Optional[User]:
        ...

    def get_by_id(self, user_id: str) -> Optional[User]:
        ...

    def record_login(self, user_id: str) -> None:
        """Set last_login_at to now."""
        ...


@runtime_checkable
class ICredentialStore(Protocol):
    """
    Persists credentials for one request/response exchange.

    The browser-facing implementation writes HTTP-only cookies.
    """

    def set_access(self, token: str) -> None:
        ...

    def set_refresh(self, token: str) -> None:
        ...

    def get_access(self) -> Optional[str]:
        ...

    def get_refresh(self) -> Optional[str]:
        ...

    def clear_all(self) -> None:
        ...


@runtime_checkable
class IIdentityService(Protocol):
    """
    Interface for the identity authority.

    Every failure is raised as one of the auth module exceptions, each
    mapping to a single wire error code.
    """

    async def validate_registration(
        self,
        email: str,
        username: str,
        display_name: Optional[str] = None,
    ) -> RegistrationCheck:
        """Check email, then username, then display name for conflicts."""
        ...

    async def register(
        self,
        email: str,
        username: str,
        password: str,
        store: ICredentialStore,
        display_name: Optional[str] = None,
    ) -> AuthSession:
        """Create the user, issue both credentials and store them."""
        ...

    async def login(self, email: str, password: str, store: ICredentialStore) -> AuthSession:
        """Verify credentials, issue both credentials and store them."""
        ...

    async def refresh(self, store: ICredentialStore) -> SessionExtension:
        """Re-issue the access credential from the access or refresh cookie."""
        ...

    async def logout(self, store: ICredentialStore) -> None:
        """Clear both credentials unconditionally."""
        ...

    async def authenticate(self, store: ICredentialStore) -> AuthenticatedUser:
        """Verify the access credential of a privileged request."""
        ...

    async def get_current_user(self, store: ICredentialStore) -> PublicIdentity:
        """Verify the access credential and load the user it names."""
        ...
