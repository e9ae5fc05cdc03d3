"""
Dependency injection setup for FastAPI.

This module provides the "container" that wires together all module
implementations. Each module exposes its service through an interface,
and this file creates the concrete implementations.

When we're ready to extract the user directory to a separate service, we
only need to change the implementation here to an HTTP client.
"""

import time
from typing import TYPE_CHECKING, Callable

from fastapi import Depends, Request, Response

from shared.config import Settings

# Type checking imports for interfaces (avoids circular imports)
if TYPE_CHECKING:
    from modules.auth.interfaces import ICredentialStore, IIdentityService, IUserDirectory
    from modules.tokens.interfaces import ITokenAuthority


class ServiceContainer:
    """
    Container for all service instances.

    This class manages the lifecycle of service instances and their
    dependencies. Services are created lazily on first access, except
    those passed in explicitly (tests pass an in-memory directory).

    All services are cached as singletons within the container.
    """

    def __init__(
        self,
        settings: Settings,
        directory: "IUserDirectory | None" = None,
        tokens: "ITokenAuthority | None" = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.settings = settings
        self._clock = clock
        self._given_directory = directory
        self._directory: "IUserDirectory | None" = directory
        self._tokens: "ITokenAuthority | None" = tokens
        self._identity_service: "IIdentityService | None" = None

    @property
    def directory(self) -> "IUserDirectory":
        """Get the user directory (Supabase-backed unless injected)."""
        if self._directory is None:
            from modules.auth.repository import UserRepository
            from shared.database import create_supabase_client
            self._directory = UserRepository(
                create_supabase_client(self.settings),
                table=self.settings.users_table,
            )
        return self._directory

    @property
    def tokens(self) -> "ITokenAuthority":
        """Get the token authority instance."""
        if self._tokens is None:
            from modules.tokens.service import TokenAuthority
            self._tokens = TokenAuthority.from_settings(self.settings, clock=self._clock)
        return self._tokens

    @property
    def identity(self) -> "IIdentityService":
        """Get the identity service instance."""
        if self._identity_service is None:
            from modules.auth.service import IdentityService
            self._identity_service = IdentityService(
                directory=self.directory,
                tokens=self.tokens,
                settings=self.settings,
            )
        return self._identity_service

    @property
    def signing_key_configured(self) -> bool:
        return bool(self.settings.jwt_secret)

    @property
    def directory_configured(self) -> bool:
        if self._given_directory is not None:
            return True
        return bool(self.settings.supabase_url and self.settings.supabase_service_role_key)


# FastAPI dependency functions
# These are the functions that should be used in route Depends() calls


def get_container(request: Request) -> ServiceContainer:
    """FastAPI dependency for the application's service container."""
    return request.app.state.container


def get_app_settings(container: ServiceContainer = Depends(get_container)) -> Settings:
    """FastAPI dependency for the settings the application was built with."""
    return container.settings


def get_identity_service(
    container: ServiceContainer = Depends(get_container),
) -> "IIdentityService":
    """FastAPI dependency for the identity service."""
    return container.identity


def get_credential_store(
    request: Request,
    response: Response,
    settings: Settings = Depends(get_app_settings),
) -> "ICredentialStore":
    """
    FastAPI dependency for a cookie credential store.

    Writes go to the injected response, so they reach the client only when
    the route returns normally.
    """
    from modules.auth.cookies import CookieCredentialStore
    return CookieCredentialStore(request, response, settings)
