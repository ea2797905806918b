"""
Auth context - who is calling and what they may do.

This is the lightweight object passed to route handlers. It wraps the session
snapshot resolved from the bearer token.
"""

from __future__ import annotations

from dataclasses import dataclass

from qadash.auth import permissions
from qadash.auth.positions import TierPosition
from qadash.auth.sessions import Session, SessionUser


@dataclass
class AuthContext:
    """
    Authorization context for a request.

    Usage in routes:
        async def my_route(ctx: AuthContext = Depends(require_auth())):
            if ctx.can_assign_tasks:
                ...
    """

    token: str
    user: SessionUser

    @classmethod
    def from_session(cls, session: Session) -> AuthContext:
        return cls(token=session.token, user=session.user)

    @property
    def user_id(self) -> int:
        return self.user.id

    @property
    def position(self) -> TierPosition:
        return self.user.position

    @property
    def is_admin(self) -> bool:
        return self.user.position == TierPosition.ADMIN

    @property
    def needs_password_reset(self) -> bool:
        return self.user.needs_password_reset

    @property
    def can_manage_team(self) -> bool:
        return permissions.can_manage_team(self.position)

    @property
    def can_assign_tasks(self) -> bool:
        return permissions.can_assign_tasks(self.position)

    @property
    def can_view_all_data(self) -> bool:
        return permissions.can_view_all_data(self.position)
