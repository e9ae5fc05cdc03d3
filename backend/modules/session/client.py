"""
HTTP client for the identity authority.

Wraps an httpx.AsyncClient whose cookie jar carries the session and
refresh cookies between calls, the way a browser would. Every request
sends the CSRF marker header.
"""

import logging
from typing import Any, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError as PydanticValidationError

from modules.auth.models import AuthSession, PublicIdentity, SessionExtension

from .config import SessionClientSettings
from .exceptions import NETWORK_ERROR_MESSAGE, AuthRequestError
from .interfaces import IAuthApi

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class AuthApiClient(IAuthApi):
    """
    Talks to /api/auth over HTTP.

    Pass `transport` (for example httpx.ASGITransport) to call an
    in-process app instead of the network.
    """

    def __init__(
        self,
        base_url: str,
        auth_path: str = "/api/auth",
        timeout: float = 10.0,
        csrf_header_name: str = "X-Requested-With",
        csrf_header_value: str = "XMLHttpRequest",
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._auth_path = auth_path.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            headers={csrf_header_name: csrf_header_value},
            transport=transport,
        )

    @classmethod
    def from_settings(
        cls,
        settings: SessionClientSettings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "AuthApiClient":
        return cls(
            base_url=settings.api_base_url,
            auth_path=settings.auth_path,
            timeout=settings.timeout_seconds,
            csrf_header_name=settings.csrf_header_name,
            csrf_header_value=settings.csrf_header_value,
            transport=transport,
        )

    @property
    def cookies(self) -> httpx.Cookies:
        return self._client.cookies

    async def __aenter__(self) -> "AuthApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    # -------------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------------

    async def register(
        self,
        email: str,
        username: str,
        password: str,
        display_name: Optional[str] = None,
    ) -> AuthSession:
        payload: dict[str, Any] = {"email": email, "username": username, "password": password}
        if display_name is not None:
            payload["displayName"] = display_name
        data = await self._request("POST", "/register", json=payload)
        return _parse(AuthSession, data)

    async def sign_in(self, email: str, password: str) -> AuthSession:
        data = await self._request("POST", "/login", json={"email": email, "password": password})
        return _parse(AuthSession, data)

    async def refresh_session(self) -> SessionExtension:
        data = await self._request("POST", "/refresh", fallback="Failed to refresh session")
        return _parse(SessionExtension, data, "Failed to refresh session")

    async def sign_out(self) -> None:
        await self._request("POST", "/logout", fallback="Sign out failed", expect_data=False)

    async def current_user(self) -> PublicIdentity:
        data = await self._request("GET", "/me")
        return _parse(PublicIdentity, data.get("user") if isinstance(data, dict) else None)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    async def _request(
        self,
        method: str,
        path: str,
        json: Optional[dict[str, Any]] = None,
        fallback: str = NETWORK_ERROR_MESSAGE,
        expect_data: bool = True,
    ) -> Any:
        """
        Send a request and unwrap the response envelope.

        Raises:
            AuthRequestError: On transport failure, a non-2xx status, an
                unparseable body, or `success: false`
        """
        try:
            response = await self._client.request(method, self._auth_path + path, json=json)
        except httpx.HTTPError as e:
            logger.warning("%s %s failed: %s", method, path, e)
            raise AuthRequestError(NETWORK_ERROR_MESSAGE) from e

        try:
            body = response.json()
        except ValueError:
            body = None

        if not isinstance(body, dict):
            raise AuthRequestError(fallback, http_status=response.status_code)

        if not response.is_success or not body.get("success"):
            error = body.get("error") or {}
            raise AuthRequestError(
                error.get("message") or fallback,
                code=error.get("code"),
                http_status=response.status_code,
            )

        if expect_data and body.get("data") is None:
            raise AuthRequestError(fallback, http_status=response.status_code)
        return body.get("data")


def _parse(
    model: Type[ModelT],
    data: Any,
    fallback: str = NETWORK_ERROR_MESSAGE,
) -> ModelT:
    """Validate a success payload; a malformed one counts as a failed call."""
    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        logger.warning("Malformed %s in auth response: %s", model.__name__, e)
        raise AuthRequestError(fallback, code="INVALID_RESPONSE") from e
