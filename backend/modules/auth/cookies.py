"""
Credential store backed by HTTP cookies.

Both credentials are HTTP-only, SameSite=Lax and Secure in production.
The access cookie is scoped to the whole origin; the refresh cookie only
to the authentication routes, so browsers never send it elsewhere.
"""

from typing import Any, Optional

from fastapi import Request, Response

from shared.config import Settings

from .interfaces import ICredentialStore


def access_cookie_kwargs(settings: Settings, value: str) -> dict[str, Any]:
    return {
        "key": settings.session_cookie_name,
        "value": value,
        "max_age": settings.access_token_ttl_seconds,
        "httponly": True,
        "secure": settings.cookie_secure,
        "samesite": "lax",
        "path": "/",
    }


def refresh_cookie_kwargs(settings: Settings, value: str) -> dict[str, Any]:
    return {
        "key": settings.refresh_cookie_name,
        "value": value,
        "max_age": settings.refresh_token_ttl_seconds,
        "httponly": True,
        "secure": settings.cookie_secure,
        "samesite": "lax",
        "path": settings.refresh_cookie_path,
    }


class CookieCredentialStore(ICredentialStore):
    """
    Reads credentials from the incoming request, writes them to the response.

    Writes are remembered so a later get_* in the same exchange sees them.
    """

    def __init__(self, request: Request, response: Response, settings: Settings):
        self._request = request
        self._response = response
        self._settings = settings
        self._written: dict[str, Optional[str]] = {}

    def set_access(self, token: str) -> None:
        self._response.set_cookie(**access_cookie_kwargs(self._settings, token))
        self._written[self._settings.session_cookie_name] = token

    def set_refresh(self, token: str) -> None:
        self._response.set_cookie(**refresh_cookie_kwargs(self._settings, token))
        self._written[self._settings.refresh_cookie_name] = token

    def get_access(self) -> Optional[str]:
        return self._read(self._settings.session_cookie_name)

    def get_refresh(self) -> Optional[str]:
        return self._read(self._settings.refresh_cookie_name)

    def clear_all(self) -> None:
        s = self._settings
        # Deletion must repeat path/secure/samesite or browsers keep the original
        self._response.delete_cookie(
            s.session_cookie_name,
            path="/",
            secure=s.cookie_secure,
            httponly=True,
            samesite="lax",
        )
        self._response.delete_cookie(
            s.refresh_cookie_name,
            path=s.refresh_cookie_path,
            secure=s.cookie_secure,
            httponly=True,
            samesite="lax",
        )
        self._written[s.session_cookie_name] = None
        self._written[s.refresh_cookie_name] = None

    def _read(self, name: str) -> Optional[str]:
        if name in self._written:
            return self._written[name]
        return self._request.cookies.get(name) or None
