"""
Core module - records, errors and small shared helpers.

This module contains:
- models: Persisted records (User, TeamMember, Task, WorkLog)
- errors: Error taxonomy mapped to HTTP statuses
- utils: Time helpers
"""

from qadash.core.models import (
    Availability,
    Record,
    RequestModel,
    Task,
    TaskPriority,
    TaskStatus,
    TeamMember,
    User,
    WorkLog,
)

from qadash.core.errors import (
    AuthenticationError,
    ConflictError,
    DashboardError,
    NotFoundError,
    PermissionDenied,
    ValidationError,
)

from qadash.core.utils import timestamp_iso, today_iso, utc_now

__all__ = [
    # Models
    "Availability",
    "Record",
    "RequestModel",
    "Task",
    "TaskPriority",
    "TaskStatus",
    "TeamMember",
    "User",
    "WorkLog",
    # Errors
    "AuthenticationError",
    "ConflictError",
    "DashboardError",
    "NotFoundError",
    "PermissionDenied",
    "ValidationError",
    # Utils
    "timestamp_iso",
    "today_iso",
    "utc_now",
]
