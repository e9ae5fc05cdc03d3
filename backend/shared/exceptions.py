"""
Base exception classes for the identity backend.

Each module should define its own exceptions that inherit from these bases.
This enables consistent error handling across the application: the API
layer renders any CommunityError using its status_code and code.
"""

from typing import Optional, Any


class CommunityError(Exception):
    """
    Base exception for all application errors.

    All custom exceptions should inherit from this class.
    """

    status_code: int = 500

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


class ValidationError(CommunityError):
    """Input validation failed."""

    status_code = 400


class AuthenticationError(CommunityError):
    """Authentication failed (invalid or missing credentials)."""

    status_code = 401


class AuthorizationError(CommunityError):
    """Authorization failed (request or account not permitted)."""

    status_code = 403


class NotFoundError(CommunityError):
    """Resource not found."""

    status_code = 404


class ConflictError(CommunityError):
    """Resource conflicts with existing state (e.g. uniqueness)."""

    status_code = 409


class ExternalServiceError(CommunityError):
    """Error communicating with an external service."""

    status_code = 502

    def __init__(
        self,
        message: str,
        service: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, code, details)
        self.service = service
        self.details["service"] = service
