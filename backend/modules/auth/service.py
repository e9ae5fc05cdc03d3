"""
Identity authority implementation.

Validates registrations, verifies passwords, issues credentials through the
token authority and hands them to a credential store. Stateless apart from
the user directory it is given.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi.concurrency import run_in_threadpool

from shared.config import Settings
from shared.models import AuthenticatedUser
from modules.tokens import AccessClaims, InvalidToken, ITokenAuthority, SigningKeyError

from .interfaces import ICredentialStore, IIdentityService, IUserDirectory
from .models import (
    AuthSession,
    NewUser,
    PublicIdentity,
    RegistrationCheck,
    SessionExtension,
    User,
)
from .exceptions import (
    AccountInactiveError,
    DuplicateUserError,
    InvalidCredentialsError,
    InvalidTokenError,
    NoSessionError,
    RegistrationConflictError,
    UserNotFoundError,
)
from .passwords import hash_password, verify_password

logger = logging.getLogger(__name__)


class IdentityService(IIdentityService):
    """
    Identity authority over an injected user directory and token authority.

    Password hashing runs in a worker thread; directory calls are made
    inline, as the directory is expected to be quick and thread-safe.
    """

    def __init__(
        self,
        directory: IUserDirectory,
        tokens: ITokenAuthority,
        settings: Settings,
    ):
        self._directory = directory
        self._tokens = tokens
        self._settings = settings
        self._dummy_hash: Optional[str] = None

    # -------------------------------------------------------------------------
    # Registration
    # -------------------------------------------------------------------------

    async def validate_registration(
        self,
        email: str,
        username: str,
        display_name: Optional[str] = None,
    ) -> RegistrationCheck:
        """
        Check availability in a fixed order: email, username, display name.

        Stops at the first conflict, so a taken email is reported even when
        the username is also taken.
        """
        if self._directory.find_by_email(email) is not None:
            return RegistrationCheck(is_valid=False, error="Email is already registered")

        if self._directory.find_by_username(username) is not None:
            return RegistrationCheck(is_valid=False, error="Username is already taken")

        if display_name and self._directory.find_by_display_name(display_name) is not None:
            return RegistrationCheck(is_valid=False, error="Display name is already taken")

        return RegistrationCheck(is_valid=True)

    async def register(
        self,
        email: str,
        username: str,
        password: str,
        store: ICredentialStore,
        display_name: Optional[str] = None,
    ) -> AuthSession:
        email = email.lower()
        username = username.lower()

        check = await self.validate_registration(email, username, display_name)
        if not check.is_valid:
            raise RegistrationConflictError(check.error or "Account already exists")

        # Signing needs the new user id, so check the key before inserting
        if not self._tokens.is_configured:
            raise SigningKeyError()

        password_hash = await run_in_threadpool(
            hash_password, password, self._settings.password_hash_rounds
        )

        try:
            user = self._directory.insert_user(
                NewUser(
                    email=email,
                    username=username,
                    password_hash=password_hash,
                    display_name=display_name,
                )
            )
        except DuplicateUserError as e:
            # Lost a check-then-insert race; the directory constraint decided
            logger.warning("Registration rejected by directory uniqueness: %s", e.details)
            raise RegistrationConflictError("Email or username is already taken") from e

        session = self._issue_credentials(user, store)
        logger.info("User registration successful: user_id=%s", user.id)
        return session

    # -------------------------------------------------------------------------
    # Login / logout
    # -------------------------------------------------------------------------

    async def login(self, email: str, password: str, store: ICredentialStore) -> AuthSession:
        user = self._directory.find_by_email(email.lower())

        if user is None:
            # Spend the same time as a real check so timing does not reveal the email
            await run_in_threadpool(verify_password, password, self._get_dummy_hash())
            logger.warning("Login failed: unknown email")
            raise InvalidCredentialsError()

        if not await run_in_threadpool(verify_password, password, user.password_hash):
            logger.warning("Login failed: wrong password for user_id=%s", user.id)
            raise InvalidCredentialsError()

        if not user.can_sign_in:
            logger.warning("Login refused for inactive account: user_id=%s", user.id)
            raise AccountInactiveError(user.id)

        user = user.model_copy(update={"last_login_at": datetime.now(timezone.utc)})
        session = self._issue_credentials(user, store)
        self._directory.record_login(user.id)
        logger.info("User login successful: user_id=%s", user.id)
        return session

    async def logout(self, store: ICredentialStore) -> None:
        store.clear_all()
        logger.info("Session cookies cleared")

    # -------------------------------------------------------------------------
    # Refresh
    # -------------------------------------------------------------------------

    async def refresh(self, store: ICredentialStore) -> SessionExtension:
        """
        Extend the session by re-issuing the access credential.

        A still-valid access credential is enough on its own; otherwise the
        refresh credential is used. On any failure both cookies are cleared
        before the error is raised.
        """
        subject: Optional[str] = None

        access = self._tokens.verify_access(store.get_access())
        if isinstance(access, AccessClaims):
            subject = access.sub

        if subject is None:
            refresh_token = store.get_refresh()
            if not refresh_token:
                store.clear_all()
                raise NoSessionError()

            claims = self._tokens.verify_refresh(refresh_token)
            if isinstance(claims, InvalidToken):
                store.clear_all()
                logger.warning("Refresh rejected: %s", claims.reason.value)
                if claims.expired:
                    raise NoSessionError("Session has expired")
                raise InvalidTokenError("Invalid refresh token")
            subject = claims.sub

        user = self._directory.get_by_id(subject)
        if user is None:
            store.clear_all()
            raise UserNotFoundError(subject)
        if not user.can_sign_in:
            store.clear_all()
            raise AccountInactiveError(user.id)

        issued = self._tokens.issue_access(user.id, user.email)
        store.set_access(issued.token)
        return SessionExtension(expires_at=issued.expires_at)

    # -------------------------------------------------------------------------
    # Privileged requests
    # -------------------------------------------------------------------------

    async def authenticate(self, store: ICredentialStore) -> AuthenticatedUser:
        token = store.get_access()
        if not token:
            raise NoSessionError("Authentication required")

        claims = self._tokens.verify_access(token)
        if isinstance(claims, InvalidToken):
            if claims.expired:
                raise NoSessionError("Session has expired")
            raise InvalidTokenError()

        return AuthenticatedUser(id=claims.sub, email=claims.email, expires_at=claims.expires_at)

    async def get_current_user(self, store: ICredentialStore) -> PublicIdentity:
        caller = await self.authenticate(store)
        user = self._directory.get_by_id(caller.id)
        if user is None:
            raise UserNotFoundError(caller.id)
        if not user.can_sign_in:
            raise AccountInactiveError(user.id)
        return user.to_public()

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _issue_credentials(self, user: User, store: ICredentialStore) -> AuthSession:
        access = self._tokens.issue_access(user.id, user.email)
        refresh = self._tokens.issue_refresh(user.id)
        store.set_access(access.token)
        store.set_refresh(refresh.token)
        return AuthSession(user=user.to_public(), expires_at=access.expires_at)

    def _get_dummy_hash(self) -> str:
        if self._dummy_hash is None:
            self._dummy_hash = hash_password(
                "not-a-real-password", self._settings.password_hash_rounds
            )
        return self._dummy_hash
