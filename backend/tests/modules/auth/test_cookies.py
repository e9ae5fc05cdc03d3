"""Tests for modules/auth/cookies.py."""

from fastapi import Request, Response

from modules.auth.cookies import (
    CookieCredentialStore,
    access_cookie_kwargs,
    refresh_cookie_kwargs,
)

from tests.conftest import make_settings


def make_request(cookie_header: str = "") -> Request:
    headers = [(b"cookie", cookie_header.encode())] if cookie_header else []
    return Request({
        "type": "http",
        "method": "POST",
        "path": "/api/auth/login",
        "headers": headers,
        "query_string": b"",
    })


def set_cookie_headers(response: Response) -> list[str]:
    return response.headers.getlist("set-cookie")


def find_cookie(response: Response, name: str) -> str:
    matches = [h for h in set_cookie_headers(response) if h.startswith(f"{name}=")]
    assert len(matches) == 1, set_cookie_headers(response)
    return matches[0]


class TestCookieAttributes:
    def test_access_cookie_scoped_to_origin(self):
        kwargs = access_cookie_kwargs(make_settings(), "tok")
        assert kwargs["key"] == "session"
        assert kwargs["path"] == "/"
        assert kwargs["max_age"] == 900
        assert kwargs["httponly"] is True
        assert kwargs["samesite"] == "lax"

    def test_refresh_cookie_scoped_to_auth_routes(self):
        kwargs = refresh_cookie_kwargs(make_settings(), "tok")
        assert kwargs["key"] == "refresh_token"
        assert kwargs["path"] == "/api/auth"
        assert kwargs["max_age"] == 604800
        assert kwargs["httponly"] is True

    def test_secure_only_in_production(self):
        assert access_cookie_kwargs(make_settings(environment="production"), "t")["secure"] is True
        assert refresh_cookie_kwargs(make_settings(environment="production"), "t")["secure"] is True
        assert access_cookie_kwargs(make_settings(environment="development"), "t")["secure"] is False
        assert access_cookie_kwargs(make_settings(environment="test"), "t")["secure"] is False


class TestCookieCredentialStore:
    def test_set_writes_response_cookies(self):
        response = Response()
        store = CookieCredentialStore(make_request(), response, make_settings())

        store.set_access("access-token")
        store.set_refresh("refresh-token")

        access = find_cookie(response, "session")
        assert "access-token" in access
        assert "Max-Age=900" in access
        assert "Path=/" in access
        assert "HttpOnly" in access
        assert "SameSite=lax" in access
        assert "Secure" not in access

        refresh = find_cookie(response, "refresh_token")
        assert "Max-Age=604800" in refresh
        assert "Path=/api/auth" in refresh
        assert "HttpOnly" in refresh

    def test_production_cookies_are_secure(self):
        response = Response()
        store = CookieCredentialStore(make_request(), response, make_settings(environment="production"))

        store.set_access("a")
        store.set_refresh("r")

        assert "Secure" in find_cookie(response, "session")
        assert "Secure" in find_cookie(response, "refresh_token")

    def test_get_reads_request_cookies(self):
        store = CookieCredentialStore(
            make_request("session=abc; refresh_token=def"), Response(), make_settings()
        )
        assert store.get_access() == "abc"
        assert store.get_refresh() == "def"

    def test_get_missing_returns_none(self):
        store = CookieCredentialStore(make_request(), Response(), make_settings())
        assert store.get_access() is None
        assert store.get_refresh() is None

    def test_get_sees_values_written_in_same_exchange(self):
        store = CookieCredentialStore(make_request("session=old"), Response(), make_settings())
        store.set_access("new")
        assert store.get_access() == "new"

    def test_clear_all_expires_both_with_matching_paths(self):
        response = Response()
        store = CookieCredentialStore(
            make_request("session=abc; refresh_token=def"), response, make_settings()
        )

        store.clear_all()

        access = find_cookie(response, "session")
        refresh = find_cookie(response, "refresh_token")
        assert "Max-Age=0" in access
        assert "Path=/" in access
        assert "Max-Age=0" in refresh
        assert "Path=/api/auth" in refresh
        assert store.get_access() is None
        assert store.get_refresh() is None
