"""
Authorization - positions, permissions, sessions and route policies.

The HTTP routes live in ``qadash.auth.routes`` and are not imported here:
storage depends on the session types below, and the routes depend on storage.
"""

from qadash.auth.positions import (
    LegacyPosition,
    TierPosition,
    UnknownPositionError,
    normalize,
    is_admin,
)
from qadash.auth.permissions import (
    can_manage_team,
    can_assign_tasks,
    can_view_all_data,
    can_edit_user,
    can_edit_task,
    can_log_work_for,
    permission_summary,
)
from qadash.auth.sessions import (
    InMemorySessionStore,
    ResetCodeRegistry,
    Session,
    SessionRegistry,
    SessionStore,
    SessionUser,
)
from qadash.auth.context import AuthContext
from qadash.auth.policies import Policy, require, require_admin, require_auth

__all__ = [
    # Positions
    "LegacyPosition",
    "TierPosition",
    "UnknownPositionError",
    "normalize",
    "is_admin",
    # Permissions
    "can_manage_team",
    "can_assign_tasks",
    "can_view_all_data",
    "can_edit_user",
    "can_edit_task",
    "can_log_work_for",
    "permission_summary",
    # Sessions
    "InMemorySessionStore",
    "ResetCodeRegistry",
    "Session",
    "SessionRegistry",
    "SessionStore",
    "SessionUser",
    # Route policies
    "AuthContext",
    "Policy",
    "require",
    "require_admin",
    "require_auth",
]
