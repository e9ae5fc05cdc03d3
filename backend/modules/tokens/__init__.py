"""
Token authority module.

Creates and verifies signed, time-bounded credentials.

Public API:
- ITokenAuthority: Interface for issuing and verifying credentials
- TokenAuthority: HS256 implementation over a fixed secret
- AccessClaims / RefreshClaims: Verified claims
- InvalidToken: Typed verification failure (returned, never raised)
"""

from .interfaces import ITokenAuthority
from .models import (
    AccessClaims,
    RefreshClaims,
    InvalidToken,
    InvalidReason,
    IssuedToken,
    TokenType,
)
from .exceptions import SigningKeyError
from .service import TokenAuthority

__all__ = [
    # Interface
    "ITokenAuthority",
    "TokenAuthority",
    # Models
    "AccessClaims",
    "RefreshClaims",
    "InvalidToken",
    "InvalidReason",
    "IssuedToken",
    "TokenType",
    # Exceptions
    "SigningKeyError",
]
