"""
Token module exceptions.

Verification never raises; only issuing with a misconfigured signing key
does, and that is a fatal deployment error rather than a request error.
"""

from shared.exceptions import CommunityError


class SigningKeyError(CommunityError):
    """Raised when a credential cannot be signed because the key is missing."""

    def __init__(self, message: str = "Credential signing key is not configured"):
        super().__init__(message, code="INTERNAL_ERROR")
