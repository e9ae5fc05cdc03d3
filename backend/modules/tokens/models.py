"""
Token module data models.

Claims carried by signed credentials, and the typed "invalid" result that
verification returns instead of raising.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional, Union
from pydantic import BaseModel, Field


class TokenType(str, Enum):
    """Kind of credential, stored in the `typ` claim."""

    ACCESS = "access"
    REFRESH = "refresh"


class InvalidReason(str, Enum):
    """Why a credential failed verification."""

    MALFORMED = "malformed"
    BAD_SIGNATURE = "bad_signature"
    EXPIRED = "expired"
    WRONG_TYPE = "wrong_type"
    NOT_CONFIGURED = "not_configured"


class _Claims(BaseModel):
    sub: str = Field(..., description="Subject (user ID)")
    iat: int = Field(..., description="Issued at, epoch seconds")
    exp: int = Field(..., description="Expires at, epoch seconds")
    typ: TokenType

    model_config = {"frozen": True}

    @property
    def user_id(self) -> str:
        return self.sub

    @property
    def expires_at(self) -> datetime:
        return datetime.fromtimestamp(self.exp, tz=timezone.utc)


class AccessClaims(_Claims):
    """Claims of a short-lived access credential."""

    email: str = Field(..., description="User's email")
    typ: TokenType = TokenType.ACCESS


class RefreshClaims(_Claims):
    """Claims of a long-lived refresh credential."""

    typ: TokenType = TokenType.REFRESH


class InvalidToken(BaseModel):
    """
    Verification failure.

    Returned, never raised, so callers must branch on it explicitly.
    """

    reason: InvalidReason
    detail: Optional[str] = None

    model_config = {"frozen": True}

    @property
    def expired(self) -> bool:
        return self.reason == InvalidReason.EXPIRED


class IssuedToken(BaseModel):
    """A freshly signed credential together with its expiry."""

    token: str
    expires_at: datetime

    model_config = {"frozen": True}


AccessVerification = Union[AccessClaims, InvalidToken]
RefreshVerification = Union[RefreshClaims, InvalidToken]
