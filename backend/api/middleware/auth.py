"""
Session cookie authentication.

Verifies the access cookie of a privileged request and exposes the caller.
"""

from typing import Optional
from fastapi import Depends

from shared.exceptions import CommunityError
from shared.models import AuthenticatedUser
from modules.auth.interfaces import ICredentialStore, IIdentityService

from ..dependencies import get_credential_store, get_identity_service


async def get_current_user(
    store: ICredentialStore = Depends(get_credential_store),
    service: IIdentityService = Depends(get_identity_service),
) -> AuthenticatedUser:
    """
    Dependency that requires authentication.

    Use this for endpoints that require a logged-in user. Failures surface
    as 401 NO_SESSION or INVALID_TOKEN through the exception handlers.

    Usage:
        @router.get("/protected")
        async def protected_route(user: AuthenticatedUser = Depends(get_current_user)):
            return {"user_id": user.id}
    """
    return await service.authenticate(store)


async def get_optional_user(
    store: ICredentialStore = Depends(get_credential_store),
    service: IIdentityService = Depends(get_identity_service),
) -> Optional[AuthenticatedUser]:
    """
    Dependency that optionally extracts user if authenticated.

    Use this for endpoints that work with or without authentication.
    """
    try:
        return await service.authenticate(store)
    except CommunityError:
        return None
