"""
Core data models for the dashboard.

These are the persisted records: users (login identities), team members
(profiles), tasks and work logs. On disk and on the wire every record uses
camelCase keys; in Python the attributes are snake_case.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


# =============================================================================
# Enums
# =============================================================================


class Availability(str, Enum):
    """Whether a team member can take on work."""

    AVAILABLE = "available"
    BUSY = "busy"
    ON_LEAVE = "on-leave"


class TaskPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class TaskStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


# =============================================================================
# Base
# =============================================================================


R = TypeVar("R", bound="Record")


class Record(BaseModel):
    """
    Base for every persisted record.

    Accepts both camelCase (storage/wire) and snake_case (Python) keys and
    always dumps camelCase.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: int

    def to_record(self) -> dict[str, Any]:
        """Serialize to the storage/wire representation."""
        return self.model_dump(by_alias=True, mode="json", exclude_none=True)

    @classmethod
    def from_record(cls: type[R], data: dict[str, Any]) -> R:
        return cls.model_validate(data)

    def merged(self: R, updates: dict[str, Any]) -> R:
        """Return a copy with snake_case ``updates`` applied and re-validated."""
        data = self.model_dump()
        data.update(updates)
        return self.__class__.model_validate(data)


class RequestModel(BaseModel):
    """
    Base for JSON request bodies.

    Every field is optional at this level so that a missing field reaches the
    service, which answers with its own message.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    def changes(self) -> dict[str, Any]:
        """Snake_case fields the client actually sent."""
        return self.model_dump(exclude_unset=True)


# =============================================================================
# Records
# =============================================================================


class User(Record):
    """
    A login identity.

    ``position`` keeps the legacy three-tier value (Regular Employee, Team
    Lead, QA Manager); the two-tier view is derived on demand.
    """

    email: str
    password: str
    name: str
    role: str = ""
    position: str
    team_id: int | None = None
    created_date: str | None = None
    is_active: bool = True
    needs_password_reset: bool = False


class TeamMember(Record):
    """A team member's profile, keyed by the id of its User."""

    name: str
    email: str
    role: str = ""
    availability: Availability = Availability.AVAILABLE
    team_id: int | None = None
    join_date: str | None = None

    # Contact
    phone: str | None = None
    emergency_contact: str | None = None
    address: str | None = None
    city: str | None = None
    state: str | None = None
    zipcode: str | None = None

    # Employment
    employee_id: str | None = None
    department: str | None = None
    employment_type: str | None = None

    # Skills & education
    skills: str | None = None
    education: str | None = None
    experience: int | None = None
    certifications: str | None = None


class Task(Record):
    title: str
    description: str | None = None
    assigned_to: int
    priority: TaskPriority = TaskPriority.MEDIUM
    status: TaskStatus = TaskStatus.PENDING
    created_by: int | None = None
    created_date: str | None = None
    due_date: str | None = None
    comments: str | None = None


class WorkLog(Record):
    """A logged time entry. Append-only."""

    member_id: int
    logged_by: int | None = None
    hours: float = 0
    activity: str | None = None
    category: str | None = None
    date: str | None = None
    timestamp: str | None = None
