"""
Authentication module.

Handles registration, login, session refresh and logout, the cookie
credential store and the CSRF guard.

Public API:
- IIdentityService: Interface for identity operations
- IUserDirectory: Storage capability the identity service calls
- ICredentialStore: Where issued credentials are kept
- PublicIdentity: User as sent to clients
- Auth exceptions: one per wire error code

The HTTP routes live in modules.auth.routes and are mounted by the API.
"""

from .interfaces import ICredentialStore, IIdentityService, IUserDirectory
from .models import (
    AuthSession,
    CurrentUserPayload,
    LoginRequest,
    NewUser,
    PublicIdentity,
    RegisterRequest,
    RegistrationCheck,
    SessionExtension,
    User,
    UserType,
)
from .exceptions import (
    AccountInactiveError,
    CSRFError,
    DuplicateUserError,
    InternalAuthError,
    InvalidCredentialsError,
    InvalidTokenError,
    NoSessionError,
    RegistrationConflictError,
    RequestValidationFailed,
    UserNotFoundError,
)
from .cookies import CookieCredentialStore
from .service import IdentityService

__all__ = [
    # Interfaces
    "ICredentialStore",
    "IIdentityService",
    "IUserDirectory",
    # Implementations
    "CookieCredentialStore",
    "IdentityService",
    # Models
    "AuthSession",
    "CurrentUserPayload",
    "LoginRequest",
    "NewUser",
    "PublicIdentity",
    "RegisterRequest",
    "RegistrationCheck",
    "SessionExtension",
    "User",
    "UserType",
    # Exceptions
    "AccountInactiveError",
    "CSRFError",
    "DuplicateUserError",
    "InternalAuthError",
    "InvalidCredentialsError",
    "InvalidTokenError",
    "NoSessionError",
    "RegistrationConflictError",
    "RequestValidationFailed",
    "UserNotFoundError",
]
