"""
Authentication module data models.

These models define the data structures used by the identity authority
and exposed to other modules (and to clients) through the wire contract.
"""

import re
from datetime import datetime
from enum import Enum
from typing import Generic, Optional, TypeVar
from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator

from shared.models import CamelModel


# At least 8 chars, one lower, one upper, one digit, one of @$!%*?&, nothing else
PASSWORD_PATTERN = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)(?=.*[@$!%*?&])[A-Za-z\d@$!%*?&]{8,}$")
USERNAME_PATTERN = re.compile(r"^[a-zA-Z0-9_-]+$")

# bcrypt only reads the first 72 bytes and newer releases reject longer input
PASSWORD_MAX_BYTES = 72

PASSWORD_POLICY_MESSAGE = (
    "Password must contain at least 8 characters, one uppercase letter, "
    "one lowercase letter, one number, and one special character (@$!%*?&)"
)


def check_password_policy(password: str) -> str:
    """Validate a password against the policy, returning it unchanged."""
    if len(password) < 8:
        raise ValueError("Password must be at least 8 characters")
    if len(password.encode("utf-8")) > PASSWORD_MAX_BYTES:
        raise ValueError(f"Password must be at most {PASSWORD_MAX_BYTES} bytes")
    if not PASSWORD_PATTERN.match(password):
        raise ValueError(PASSWORD_POLICY_MESSAGE)
    return password


class UserType(str, Enum):
    """Account type; determines feature access on the client."""

    PLAYER = "PLAYER"
    CREATOR = "CREATOR"
    MODERATOR = "MODERATOR"
    ADMIN = "ADMIN"


# =============================================================================
# Users
# =============================================================================


class PublicIdentity(CamelModel):
    """
    User as sent to clients.

    Everything the server knows about the account except the password hash
    and provider-linkage secrets.
    """

    id: str
    email: str
    username: str
    display_name: Optional[str] = None
    avatar: Optional[str] = None
    user_type: UserType = UserType.PLAYER
    is_verified: bool = False
    is_active: bool = True
    is_banned: bool = False
    created_at: datetime
    updated_at: datetime
    last_login_at: Optional[datetime] = None


class User(PublicIdentity):
    """Authoritative server-side user record."""

    password_hash: str = Field(..., repr=False)

    @property
    def can_sign_in(self) -> bool:
        return self.is_active and not self.is_banned

    def to_public(self) -> PublicIdentity:
        """Project to the public identity (drops the password hash)."""
        return PublicIdentity.model_validate(self.model_dump(exclude={"password_hash"}))


class NewUser(BaseModel):
    """Fields the identity authority hands to the directory on insert."""

    email: str
    username: str
    password_hash: str
    display_name: Optional[str] = None
    user_type: UserType = UserType.PLAYER
    is_verified: bool = False
    is_active: bool = True
    is_banned: bool = False


# =============================================================================
# Requests
# =============================================================================


class LoginRequest(CamelModel):
    """Body of POST /auth/login."""

    email: EmailStr
    password: str

    @field_validator("password")
    @classmethod
    def _password_policy(cls, value: str) -> str:
        return check_password_policy(value)


class RegisterRequest(CamelModel):
    """Body of POST /auth/register."""

    email: EmailStr
    username: str = Field(..., min_length=3, max_length=30)
    password: str
    confirm_password: Optional[str] = None
    display_name: Optional[str] = Field(None, max_length=50)

    @field_validator("username")
    @classmethod
    def _username_charset(cls, value: str) -> str:
        if not USERNAME_PATTERN.match(value):
            raise ValueError("Username can only contain letters, numbers, underscores, and hyphens")
        return value

    @field_validator("password")
    @classmethod
    def _password_policy(cls, value: str) -> str:
        return check_password_policy(value)

    @field_validator("display_name")
    @classmethod
    def _blank_display_name(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return value.strip() or None

    @model_validator(mode="after")
    def _passwords_match(self) -> "RegisterRequest":
        if self.confirm_password is not None and self.confirm_password != self.password:
            raise ValueError("Passwords do not match")
        return self


# =============================================================================
# Results
# =============================================================================


class RegistrationCheck(BaseModel):
    """Outcome of the uniqueness pre-check."""

    is_valid: bool
    error: Optional[str] = None


class AuthSession(CamelModel):
    """Result of a successful register/login: who, and until when."""

    user: PublicIdentity
    expires_at: datetime


class SessionExtension(CamelModel):
    """Result of a successful refresh: only the validity window moves."""

    expires_at: datetime


class CurrentUserPayload(CamelModel):
    """Result of GET /auth/me."""

    user: PublicIdentity


# =============================================================================
# Wire envelopes
# =============================================================================

DataT = TypeVar("DataT")


class ErrorBody(CamelModel):
    message: str
    code: Optional[str] = None


class SuccessEnvelope(CamelModel, Generic[DataT]):
    """`{"success": true, "data": ...}`"""

    success: bool = True
    data: Optional[DataT] = None


class ErrorEnvelope(CamelModel):
    """`{"success": false, "error": {"message", "code"}}`"""

    success: bool = False
    error: ErrorBody
