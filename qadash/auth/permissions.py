"""
Permissions - what a position may do, and to which records.

Every check here is a pure function returning a bool. Absence of permission
is always ``False``, never an exception; turning a ``False`` into a 403 is
the caller's job.
"""

from __future__ import annotations

from typing import Any, Iterable, Protocol

from qadash.auth.positions import LegacyPosition, TierPosition, is_admin
from qadash.core.models import Task, WorkLog


Position = LegacyPosition | TierPosition | str | None


class Actor(Protocol):
    """Anything that identifies the caller: an id and a position."""

    id: int
    position: Position


# =============================================================================
# Position-only permissions
# =============================================================================


def can_manage_team(position: Position) -> bool:
    """Create team-member/login-account pairs."""
    return is_admin(position)


def can_assign_tasks(position: Position) -> bool:
    """Create tasks."""
    return is_admin(position)


def can_view_all_data(position: Position) -> bool:
    """See every task and work log rather than only one's own."""
    return is_admin(position)


def permission_summary(position: Position) -> dict[str, bool]:
    """The flags the client uses to decide which controls to show."""
    return {
        "canManageTeam": can_manage_team(position),
        "canAssignTasks": can_assign_tasks(position),
        "canViewAllData": can_view_all_data(position),
    }


# =============================================================================
# Record-level permissions
# =============================================================================


def can_edit_user(actor: Actor, target_id: int) -> bool:
    """Self-edit is always allowed; Admins may edit anyone."""
    if actor.id == target_id:
        return True
    return is_admin(actor.position)


def can_edit_task(actor: Actor, task: Task) -> bool:
    """Admins, the assignee and the creator may edit a task."""
    return (
        is_admin(actor.position)
        or task.assigned_to == actor.id
        or task.created_by == actor.id
    )


def can_log_work_for(actor: Actor, member_id: int) -> bool:
    return actor.id == member_id or is_admin(actor.position)


# =============================================================================
# Field-level write restrictions
# =============================================================================


# What an employee may change on a task assigned to them
ASSIGNEE_TASK_FIELDS = frozenset({"status", "comments"})

# Profile fields only an Admin may change
ADMIN_ONLY_PROFILE_FIELDS = frozenset({
    "employee_id",
    "join_date",
    "department",
    "employment_type",
    "role",
    "name",
    "email",
})

# Never writable through an update payload
IMMUTABLE_TASK_FIELDS = frozenset({"id", "created_by", "created_date"})
IMMUTABLE_PROFILE_FIELDS = frozenset({"id"})


def filter_task_update(actor: Actor, task: Task, updates: dict[str, Any]) -> dict[str, Any]:
    """
    Narrow a task update to the fields this actor may write.

    An employee editing a task assigned to them only gets ``status`` and
    ``comments`` through; everything else is dropped silently.
    """
    allowed = {k: v for k, v in updates.items() if k not in IMMUTABLE_TASK_FIELDS}
    if not is_admin(actor.position) and task.assigned_to == actor.id:
        return {k: v for k, v in allowed.items() if k in ASSIGNEE_TASK_FIELDS}
    return allowed


def filter_profile_update(actor: Actor, updates: dict[str, Any]) -> dict[str, Any]:
    """Strip administrative fields from a non-Admin's profile update."""
    allowed = {k: v for k, v in updates.items() if k not in IMMUTABLE_PROFILE_FIELDS}
    if is_admin(actor.position):
        return allowed
    return {k: v for k, v in allowed.items() if k not in ADMIN_ONLY_PROFILE_FIELDS}


# =============================================================================
# List visibility
# =============================================================================


def visible_tasks(actor: Actor, tasks: Iterable[Task]) -> list[Task]:
    """Admins see every task; employees see the tasks assigned to them."""
    if can_view_all_data(actor.position):
        return list(tasks)
    return [t for t in tasks if t.assigned_to == actor.id]


def visible_work_logs(actor: Actor, logs: Iterable[WorkLog]) -> list[WorkLog]:
    """Admins see every log; employees see the hours logged for them."""
    if can_view_all_data(actor.position):
        return list(logs)
    return [log for log in logs if log.member_id == actor.id]
