"""
Authentication module exceptions.

One exception per wire error code. The API layer renders them as
`{"success": false, "error": {"message", "code"}}` with the class status.
"""

from typing import Optional

from shared.exceptions import (
    CommunityError,
    ValidationError,
    AuthenticationError,
    AuthorizationError,
    ConflictError,
)


class RequestValidationFailed(ValidationError):
    """Raised when a request body fails validation."""

    def __init__(self, message: str = "Validation failed"):
        super().__init__(message, code="VALIDATION_ERROR")


class CSRFError(AuthorizationError):
    """Raised when the CSRF marker header is missing or wrong."""

    def __init__(self, message: str = "Invalid request"):
        super().__init__(message, code="CSRF_ERROR")


class InvalidCredentialsError(AuthenticationError):
    """
    Raised when login fails.

    Deliberately the same for unknown email and wrong password.
    """

    def __init__(self):
        super().__init__("Invalid email or password", code="INVALID_CREDENTIALS")


class AccountInactiveError(AuthorizationError):
    """Raised when the account is deactivated or banned."""

    def __init__(self, user_id: Optional[str] = None):
        super().__init__(
            "Account is inactive or banned",
            code="ACCOUNT_INACTIVE",
            details={"user_id": user_id} if user_id else None,
        )


class RegistrationConflictError(ConflictError):
    """Raised when email, username, or display name is already taken."""

    def __init__(self, message: str):
        super().__init__(message, code="CONFLICT")


class DuplicateUserError(ConflictError):
    """
    Raised by a user directory when its uniqueness constraint rejects an insert.

    This is the final authority on uniqueness; the service-level pre-check
    is only a fast path.
    """

    def __init__(self, field: Optional[str] = None):
        super().__init__(
            "User already exists",
            code="CONFLICT",
            details={"field": field} if field else None,
        )


class NoSessionError(AuthenticationError):
    """Raised when no usable credential accompanies the request."""

    def __init__(self, message: str = "No valid session or refresh token"):
        super().__init__(message, code="NO_SESSION")


class InvalidTokenError(AuthenticationError):
    """Raised when a presented credential is tampered or malformed."""

    def __init__(self, message: str = "Invalid session token"):
        super().__init__(message, code="INVALID_TOKEN")


class UserNotFoundError(AuthenticationError):
    """Raised when a credential's subject no longer exists."""

    def __init__(self, user_id: str):
        super().__init__(
            "User not found",
            code="USER_NOT_FOUND",
            details={"user_id": user_id},
        )


class InternalAuthError(CommunityError):
    """Raised for unexpected failures; message is safe to show clients."""

    def __init__(self, message: str = "Internal server error"):
        super().__init__(message, code="INTERNAL_ERROR")
