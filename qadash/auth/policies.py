"""
Policies - the interface for route authorization.

Use ``ctx: AuthContext = Depends(require_auth())`` in a route:

- the bearer token is resolved through the app's SessionRegistry
- a missing, unknown or expired token raises 401
- a session that still has to change its password gets 403, unless the
  route opts in with ``allow_pending_reset=True``
- an optional check on the context turns a ``False`` into 403
"""

from __future__ import annotations

from typing import Callable

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from qadash.auth.context import AuthContext
from qadash.core.errors import AuthenticationError, PermissionDenied
from qadash.integrations.sentry import set_user


# Optional bearer (doesn't fail if no token; the policy decides)
optional_bearer = HTTPBearer(auto_error=False)

PASSWORD_CHANGE_REQUIRED = "Password change required before accessing this resource"


async def get_token(
    credentials: HTTPAuthorizationCredentials | None = Depends(optional_bearer),
) -> str | None:
    """The raw bearer token, if one was sent."""
    if not credentials:
        return None
    return credentials.credentials


# =============================================================================
# Policy
# =============================================================================


class Policy:
    """
    What a route demands from an authenticated caller.

    Checks run in order: pending password reset first, then the custom check.
    """

    def __init__(
        self,
        allow_pending_reset: bool = False,
        custom_check: Callable[[AuthContext], bool] | None = None,
        denial_message: str = "Insufficient permissions",
    ):
        self.allow_pending_reset = allow_pending_reset
        self.custom_check = custom_check
        self.denial_message = denial_message

    def check(self, ctx: AuthContext) -> tuple[bool, str | None]:
        """
        Check if context satisfies this policy.

        Returns: (allowed, error_message)
        """
        if ctx.needs_password_reset and not self.allow_pending_reset:
            return False, PASSWORD_CHANGE_REQUIRED

        if self.custom_check and not self.custom_check(ctx):
            return False, self.denial_message

        return True, None


# =============================================================================
# Main Interface
# =============================================================================


def require_auth(allow_pending_reset: bool = False) -> Callable:
    """Require a valid session, no specific permission."""
    return _create_dependency(Policy(allow_pending_reset=allow_pending_reset))


def require(check: Callable[[AuthContext], bool], message: str) -> Callable:
    """
    Require a valid session whose context passes ``check``.

    Usage:
        ctx: AuthContext = Depends(require(lambda c: c.is_admin, "Admins only"))
    """
    return _create_dependency(Policy(custom_check=check, denial_message=message))


def require_admin(message: str = "Admin access required") -> Callable:
    return require(lambda ctx: ctx.is_admin, message)


# =============================================================================
# Internal: Create the FastAPI Dependency
# =============================================================================


def _create_dependency(policy: Policy) -> Callable:
    """Create a FastAPI dependency from a policy."""

    async def dependency(
        request: Request,
        token: str | None = Depends(get_token),
    ) -> AuthContext:
        if not token:
            raise AuthenticationError("Access token required")

        registry = request.app.state.services.sessions
        session = await registry.resolve(token)
        if session is None:
            raise AuthenticationError("Invalid or expired token")

        ctx = AuthContext.from_session(session)
        set_user(ctx.user_id, position=ctx.position.value)

        allowed, error = policy.check(ctx)
        if not allowed:
            raise PermissionDenied(error)

        return ctx

    return dependency
