"""
Token authority implementation.

Signs and verifies HS256 JWT credentials with PyJWT. Expiry is checked
against an injectable clock rather than PyJWT's wall clock so that the
validity window is exact and testable.
"""

import logging
import time
from datetime import datetime, timezone
from typing import Any, Callable, Optional, Type, TypeVar

import jwt
from pydantic import ValidationError as PydanticValidationError

from shared.config import Settings

from .exceptions import SigningKeyError
from .interfaces import ITokenAuthority
from .models import (
    AccessClaims,
    AccessVerification,
    InvalidReason,
    InvalidToken,
    IssuedToken,
    RefreshClaims,
    RefreshVerification,
    TokenType,
)

logger = logging.getLogger(__name__)

ClaimsT = TypeVar("ClaimsT", AccessClaims, RefreshClaims)

_REQUIRED_CLAIMS = ["sub", "iat", "exp", "typ"]


class TokenAuthority(ITokenAuthority):
    """
    Issues access and refresh credentials and verifies them fail-closed.

    Access and refresh credentials may use different secrets; each carries
    a `typ` claim so one can never stand in for the other.
    """

    def __init__(
        self,
        access_secret: str,
        refresh_secret: Optional[str] = None,
        algorithm: str = "HS256",
        access_ttl_seconds: int = 15 * 60,
        refresh_ttl_seconds: int = 7 * 24 * 60 * 60,
        clock: Callable[[], float] = time.time,
    ):
        self._access_secret = access_secret
        self._refresh_secret = refresh_secret or access_secret
        self._algorithm = algorithm
        self._access_ttl = access_ttl_seconds
        self._refresh_ttl = refresh_ttl_seconds
        self._clock = clock

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        clock: Callable[[], float] = time.time,
    ) -> "TokenAuthority":
        """Build a token authority from application settings."""
        return cls(
            access_secret=settings.jwt_secret,
            refresh_secret=settings.refresh_signing_secret,
            algorithm=settings.jwt_algorithm,
            access_ttl_seconds=settings.access_token_ttl_seconds,
            refresh_ttl_seconds=settings.refresh_token_ttl_seconds,
            clock=clock,
        )

    @property
    def is_configured(self) -> bool:
        return bool(self._access_secret)

    @property
    def access_ttl_seconds(self) -> int:
        return self._access_ttl

    @property
    def refresh_ttl_seconds(self) -> int:
        return self._refresh_ttl

    # -------------------------------------------------------------------------
    # Issuing
    # -------------------------------------------------------------------------

    def issue_access(self, user_id: str, email: str) -> IssuedToken:
        """Sign a 15-minute (by default) access credential."""
        return self._sign(
            {"sub": user_id, "email": email, "typ": TokenType.ACCESS.value},
            self._access_secret,
            self._access_ttl,
        )

    def issue_refresh(self, user_id: str) -> IssuedToken:
        """Sign a 7-day (by default) refresh credential."""
        return self._sign(
            {"sub": user_id, "typ": TokenType.REFRESH.value},
            self._refresh_secret,
            self._refresh_ttl,
        )

    def _sign(self, claims: dict[str, Any], secret: str, ttl_seconds: int) -> IssuedToken:
        if not secret:
            raise SigningKeyError()

        issued_at = int(self._clock())
        expires_at = issued_at + ttl_seconds
        payload = {**claims, "iat": issued_at, "exp": expires_at}
        token = jwt.encode(payload, secret, algorithm=self._algorithm)

        return IssuedToken(
            token=token,
            expires_at=datetime.fromtimestamp(expires_at, tz=timezone.utc),
        )

    # -------------------------------------------------------------------------
    # Verification
    # -------------------------------------------------------------------------

    def verify_access(self, token: Optional[str]) -> AccessVerification:
        return self._verify(token, self._access_secret, TokenType.ACCESS, AccessClaims)

    def verify_refresh(self, token: Optional[str]) -> RefreshVerification:
        return self._verify(token, self._refresh_secret, TokenType.REFRESH, RefreshClaims)

    def _verify(
        self,
        token: Optional[str],
        secret: str,
        expected: TokenType,
        model: Type[ClaimsT],
    ) -> "ClaimsT | InvalidToken":
        if not token:
            return InvalidToken(reason=InvalidReason.MALFORMED, detail="Missing token")
        if not secret:
            return InvalidToken(reason=InvalidReason.NOT_CONFIGURED)

        try:
            payload = jwt.decode(
                token,
                secret,
                algorithms=[self._algorithm],
                options={
                    "require": _REQUIRED_CLAIMS,
                    "verify_exp": False,  # checked below against self._clock
                    "verify_iat": False,
                    "verify_nbf": False,
                },
            )
        except jwt.InvalidSignatureError:
            return InvalidToken(reason=InvalidReason.BAD_SIGNATURE)
        except jwt.PyJWTError as e:
            return InvalidToken(reason=InvalidReason.MALFORMED, detail=str(e))

        if payload.get("typ") != expected.value:
            return InvalidToken(reason=InvalidReason.WRONG_TYPE)

        try:
            claims = model.model_validate(payload)
        except PydanticValidationError:
            return InvalidToken(reason=InvalidReason.MALFORMED, detail="Unexpected claims")

        if claims.exp <= int(self._clock()):
            return InvalidToken(reason=InvalidReason.EXPIRED)

        return claims
