"""
Token module interface.

Other modules should depend on ITokenAuthority, not the concrete implementation.
"""

from typing import Protocol, runtime_checkable

from .models import AccessVerification, IssuedToken, RefreshVerification


@runtime_checkable
class ITokenAuthority(Protocol):
    """
    Creates and verifies signed, time-bounded credentials.

    Implementations are pure functions over a fixed secret and a clock.
    """

    @property
    def is_configured(self) -> bool:
        """True when a signing key is present, so issuing cannot fail."""
        ...

    def issue_access(self, user_id: str, email: str) -> IssuedToken:
        """
        Sign an access credential for the given subject.

        Raises:
            SigningKeyError: If the signing key is not configured
        """
        ...

    def issue_refresh(self, user_id: str) -> IssuedToken:
        """
        Sign a refresh credential for the given subject.

        Raises:
            SigningKeyError: If the signing key is not configured
        """
        ...

    def verify_access(self, token: str | None) -> AccessVerification:
        """Return the access claims, or InvalidToken. Never raises."""
        ...

    def verify_refresh(self, token: str | None) -> RefreshVerification:
        """Return the refresh claims, or InvalidToken. Never raises."""
        ...
