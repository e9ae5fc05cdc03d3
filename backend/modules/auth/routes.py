"""
Authentication API endpoints.

Mounted under /api/auth. State-changing routes require the CSRF marker
header. Cookies written by the identity service are carried on error
responses too, so a failed refresh still clears the browser's cookies.
"""

import logging
from typing import Any, Awaitable, Callable

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from api.dependencies import get_app_settings, get_identity_service
from api.errors import community_error_response
from shared.config import Settings
from shared.exceptions import CommunityError

from . import csrf
from .cookies import CookieCredentialStore
from .interfaces import ICredentialStore, IIdentityService
from .models import (
    AuthSession,
    CurrentUserPayload,
    LoginRequest,
    RegisterRequest,
    SessionExtension,
    SuccessEnvelope,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def require_csrf(request: Request, settings: Settings = Depends(get_app_settings)) -> None:
    """Dependency rejecting requests without the CSRF marker header."""
    csrf.ensure_valid(request, settings)


CsrfGuard = Depends(require_csrf)


async def _exchange(
    request: Request,
    settings: Settings,
    operation: Callable[[ICredentialStore], Awaitable[BaseModel]],
    status_code: int = 200,
) -> JSONResponse:
    """
    Run an identity operation against a cookie store and render the result.

    Returns the success envelope, or the error envelope for a CommunityError.
    Either way, the cookies the operation set or cleared are attached.
    """
    cookie_jar = Response()
    store = CookieCredentialStore(request, cookie_jar, settings)

    try:
        data = await operation(store)
    except CommunityError as e:
        if e.status_code >= 500:
            logger.error("%s on %s: %s", e.code, request.url.path, e.message)
        response = community_error_response(e)
    else:
        response = JSONResponse(
            status_code=status_code,
            content={"success": True, "data": data.model_dump(mode="json", by_alias=True)},
        )

    _copy_cookies(cookie_jar, response)
    return response


def _copy_cookies(source: Response, target: Response) -> None:
    for key, value in source.raw_headers:
        if key == b"set-cookie":
            target.raw_headers.append((key, value))


@router.post(
    "/register",
    response_model=SuccessEnvelope[AuthSession],
    status_code=201,
    dependencies=[CsrfGuard],
)
async def register(
    body: RegisterRequest,
    request: Request,
    settings: Settings = Depends(get_app_settings),
    service: IIdentityService = Depends(get_identity_service),
) -> Any:
    """
    Create an account and start a session.

    Sets the session and refresh cookies and returns the public identity
    with the access window's expiry.
    """
    return await _exchange(
        request,
        settings,
        lambda store: service.register(
            email=body.email,
            username=body.username,
            password=body.password,
            store=store,
            display_name=body.display_name,
        ),
        status_code=201,
    )


@router.post(
    "/login",
    response_model=SuccessEnvelope[AuthSession],
    dependencies=[CsrfGuard],
)
async def login(
    body: LoginRequest,
    request: Request,
    settings: Settings = Depends(get_app_settings),
    service: IIdentityService = Depends(get_identity_service),
) -> Any:
    """Verify credentials and start a session."""
    return await _exchange(
        request,
        settings,
        lambda store: service.login(body.email, body.password, store),
    )


@router.post(
    "/refresh",
    response_model=SuccessEnvelope[SessionExtension],
    dependencies=[CsrfGuard],
)
async def refresh(
    request: Request,
    settings: Settings = Depends(get_app_settings),
    service: IIdentityService = Depends(get_identity_service),
) -> Any:
    """
    Extend the session.

    On failure both cookies are cleared and 401 is returned.
    """
    return await _exchange(request, settings, service.refresh)


@router.post("/logout", dependencies=[CsrfGuard])
async def logout(
    request: Request,
    settings: Settings = Depends(get_app_settings),
    service: IIdentityService = Depends(get_identity_service),
) -> Any:
    """Clear both cookies. Always succeeds."""
    response = JSONResponse(content={"success": True})
    await service.logout(CookieCredentialStore(request, response, settings))
    return response


@router.get("/me", response_model=SuccessEnvelope[CurrentUserPayload])
async def me(
    request: Request,
    settings: Settings = Depends(get_app_settings),
    service: IIdentityService = Depends(get_identity_service),
) -> Any:
    """Return the user named by the access cookie."""

    async def load(store: ICredentialStore) -> CurrentUserPayload:
        return CurrentUserPayload(user=await service.get_current_user(store))

    return await _exchange(request, settings, load)
