"""
Session module interfaces.

The session store depends on IAuthApi, not on the HTTP client, so tests
can drive it with fakes.
"""

from typing import Protocol, runtime_checkable

from modules.auth.models import AuthSession, PublicIdentity, SessionExtension


@runtime_checkable
class IAuthApi(Protocol):
    """
    Client side of the identity authority's HTTP contract.

    Every method raises AuthRequestError when the call does not succeed.
    """

    async def sign_in(self, email: str, password: str) -> AuthSession:
        ...

    async def refresh_session(self) -> SessionExtension:
        ...

    async def sign_out(self) -> None:
        ...

    async def current_user(self) -> PublicIdentity:
        ...
