"""
Tests for the permission evaluator and the field filters.
"""

from dataclasses import dataclass

import pytest

from qadash.auth.permissions import (
    can_assign_tasks,
    can_edit_task,
    can_edit_user,
    can_log_work_for,
    can_manage_team,
    can_view_all_data,
    filter_profile_update,
    filter_task_update,
    permission_summary,
    visible_tasks,
    visible_work_logs,
)
from qadash.core.models import Task, TaskPriority, TaskStatus, WorkLog


@dataclass
class Caller:
    id: int
    position: str


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def admin():
    return Caller(id=1, position="QA Manager")


@pytest.fixture
def lead():
    return Caller(id=2, position="Team Lead")


@pytest.fixture
def employee():
    return Caller(id=3, position="Regular Employee")


@pytest.fixture
def tasks():
    """Five tasks, two of them assigned to user 3."""
    return [
        Task(id=1, title="Login", assigned_to=3, created_by=1),
        Task(id=2, title="Search", assigned_to=4, created_by=1),
        Task(id=3, title="Checkout", assigned_to=3, created_by=2),
        Task(id=4, title="Profile", assigned_to=5, created_by=3),
        Task(id=5, title="Reports", assigned_to=4, created_by=2),
    ]


# =============================================================================
# Position-only permissions
# =============================================================================


class TestPositionPermissions:
    @pytest.mark.parametrize("position", ["QA Manager", "Team Lead", "Admin"])
    def test_admin_positions_have_everything(self, position):
        assert can_manage_team(position)
        assert can_assign_tasks(position)
        assert can_view_all_data(position)

    @pytest.mark.parametrize("position", ["Regular Employee", "Employee", "Director", None])
    def test_others_have_nothing(self, position):
        assert not can_manage_team(position)
        assert not can_assign_tasks(position)
        assert not can_view_all_data(position)

    def test_summary_keys(self):
        assert permission_summary("Team Lead") == {
            "canManageTeam": True,
            "canAssignTasks": True,
            "canViewAllData": True,
        }
        assert not any(permission_summary("Employee").values())


# =============================================================================
# Record-level permissions
# =============================================================================


class TestRecordPermissions:
    def test_edit_user(self, admin, employee):
        assert can_edit_user(employee, employee.id)
        assert not can_edit_user(employee, 4)
        assert can_edit_user(admin, 4)

    def test_log_work_for(self, lead, employee):
        assert can_log_work_for(employee, employee.id)
        assert not can_log_work_for(employee, 4)
        assert can_log_work_for(lead, 4)

    @pytest.mark.parametrize("position", ["QA Manager", "Team Lead", "Regular Employee", "Employee", "Director"])
    @pytest.mark.parametrize("user_id", [1, 3, 4, 9])
    def test_edit_task_rule(self, tasks, position, user_id):
        caller = Caller(id=user_id, position=position)
        for task in tasks:
            expected = (
                position in ("QA Manager", "Team Lead")
                or task.assigned_to == user_id
                or task.created_by == user_id
            )
            assert can_edit_task(caller, task) == expected


# =============================================================================
# Field filters
# =============================================================================


class TestTaskUpdateFilter:
    def test_assignee_only_changes_status(self, employee, tasks):
        task = tasks[0]
        updates = {"status": TaskStatus.COMPLETED, "priority": TaskPriority.HIGH, "title": "x"}

        changes = filter_task_update(employee, task, updates)
        updated = task.merged(changes)

        assert changes == {"status": TaskStatus.COMPLETED}
        assert updated.status == TaskStatus.COMPLETED
        assert updated.priority == TaskPriority.MEDIUM
        assert updated.title == "Login"

    def test_assignee_may_comment(self, employee, tasks):
        changes = filter_task_update(employee, tasks[0], {"comments": "Blocked on env"})
        assert changes == {"comments": "Blocked on env"}

    def test_creator_may_change_anything_editable(self, employee, tasks):
        # Task 4 was created by the employee and is assigned to someone else
        changes = filter_task_update(employee, tasks[3], {"title": "New", "priority": "high"})
        assert changes == {"title": "New", "priority": "high"}

    def test_admin_may_change_anything_editable(self, admin, tasks):
        changes = filter_task_update(admin, tasks[0], {"title": "New", "assigned_to": 4})
        assert changes == {"title": "New", "assigned_to": 4}

    def test_identity_fields_are_never_written(self, admin, tasks):
        changes = filter_task_update(admin, tasks[0], {"id": 99, "created_by": 7, "title": "T"})
        assert changes == {"title": "T"}


class TestProfileUpdateFilter:
    def test_employee_cannot_change_email(self, employee):
        changes = filter_profile_update(employee, {"email": "new@x.com", "phone": "555-0100"})
        assert changes == {"phone": "555-0100"}

    def test_employee_loses_every_admin_field(self, employee):
        updates = {
            "employee_id": "E1",
            "join_date": "2024-01-01",
            "department": "QA",
            "employment_type": "Full-time",
            "role": "QA Manager",
            "name": "Someone",
            "skills": "Selenium",
        }
        assert filter_profile_update(employee, updates) == {"skills": "Selenium"}

    def test_admin_keeps_everything_but_id(self, admin):
        changes = filter_profile_update(admin, {"id": 50, "email": "new@x.com", "role": "QA Lead"})
        assert changes == {"email": "new@x.com", "role": "QA Lead"}


# =============================================================================
# Visibility
# =============================================================================


class TestVisibility:
    def test_employee_sees_assigned_tasks(self, employee, tasks):
        visible = visible_tasks(employee, tasks)
        assert [t.id for t in visible] == [1, 3]

    def test_admin_sees_all_tasks(self, admin, tasks):
        assert len(visible_tasks(admin, tasks)) == 5

    def test_work_logs(self, employee, lead):
        logs = [
            WorkLog(id=1, member_id=3, hours=2),
            WorkLog(id=2, member_id=4, hours=1),
            WorkLog(id=3, member_id=3, hours=5, logged_by=2),
        ]
        assert [log.id for log in visible_work_logs(employee, logs)] == [1, 3]
        assert len(visible_work_logs(lead, logs)) == 3
