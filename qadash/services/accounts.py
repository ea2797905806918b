"""
Account use cases: login, password change and password reset.
"""

from __future__ import annotations

import logging

from qadash.auth.passwords import hash_password, is_legacy_hash, verify_password
from qadash.auth.positions import UnknownPositionError
from qadash.auth.sessions import ResetCodeRegistry, Session, SessionRegistry, SessionUser
from qadash.config import Settings
from qadash.core.errors import AuthenticationError, NotFoundError, PermissionDenied, ValidationError
from qadash.core.models import User
from qadash.services.audit import log_activity
from qadash.services.base import UserRepository, is_blank, require_min_length

logger = logging.getLogger(__name__)


class AccountService:
    """Authenticate users and manage their credentials."""

    def __init__(
        self,
        users: UserRepository,
        sessions: SessionRegistry,
        reset_codes: ResetCodeRegistry,
        settings: Settings,
    ):
        self._users = users
        self._sessions = sessions
        self._reset_codes = reset_codes
        self._settings = settings

    def snapshot(self, user: User) -> SessionUser:
        try:
            return SessionUser.from_user(user)
        except UnknownPositionError:
            logger.warning("User %s has unrecognised position %r", user.id, user.position)
            raise PermissionDenied("Account position is not recognised; contact an administrator")

    async def login(self, email: str | None, password: str | None) -> Session:
        if is_blank(email) or is_blank(password):
            raise ValidationError("Email and password are required")

        user = await self._users.find_by_email(email)
        if not user or not user.is_active or not verify_password(password, user.password):
            raise AuthenticationError("Invalid credentials")

        if is_legacy_hash(user.password):
            user = await self._users.save(user.merged({"password": hash_password(password)}))
            logger.info("Upgraded password hash for user %s", user.id)

        session = await self._sessions.issue(self.snapshot(user))
        swept = await self._sessions.store.sweep_expired()
        if swept:
            logger.debug("Swept %d expired sessions", swept)

        log_activity("USER_LOGIN", user.id, email=user.email)
        return session

    async def logout(self, token: str | None) -> None:
        await self._sessions.revoke(token)

    async def change_password(
        self,
        actor: SessionUser,
        current_password: str | None,
        new_password: str | None,
    ) -> Session:
        """
        Replace the caller's password and issue a fresh session.

        Older tokens of the user stay valid until they expire.
        """
        if is_blank(current_password) or is_blank(new_password):
            raise ValidationError("Current password and new password are required")
        require_min_length(new_password, "New password must be at least 6 characters long")

        user = await self._users.get(actor.id)
        if not user:
            raise NotFoundError("User not found")
        if not verify_password(current_password, user.password):
            raise ValidationError("Current password is incorrect")

        first_time = user.needs_password_reset
        user = await self._users.save(user.merged({
            "password": hash_password(new_password),
            "needs_password_reset": False,
        }))

        log_activity("PASSWORD_CHANGED", user.id, isFirstTimeChange=first_time)
        return await self._sessions.issue(self.snapshot(user))

    async def forgot_password(self, email: str | None) -> str:
        """
        Issue a reset code for an account.

        There is no mail delivery; the code is handed back to the caller.
        """
        if is_blank(email):
            raise ValidationError("Email is required")

        user = await self._users.find_by_email(email)
        if not user:
            raise NotFoundError("No account found with this email address")

        code = self._reset_codes.issue(user.email)
        log_activity("PASSWORD_RESET_REQUESTED", user.id)
        return code

    async def reset_password(
        self,
        email: str | None,
        reset_code: str | None,
        new_password: str | None,
    ) -> None:
        if is_blank(email) or is_blank(new_password):
            raise ValidationError("Email and new password are required")
        require_min_length(new_password, "Password must be at least 6 characters long")

        user = await self._users.find_by_email(email)
        if not user:
            raise NotFoundError("No account found with this email address")

        if self._settings.accept_any_reset_code:
            self._reset_codes.discard(user.email)
        elif not self._reset_codes.consume(user.email, reset_code):
            raise ValidationError("Invalid or expired reset code")

        await self._users.save(user.merged({"password": hash_password(new_password)}))
        log_activity("PASSWORD_RESET", user.id)
