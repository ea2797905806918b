"""
Task use cases.
"""

from __future__ import annotations

from typing import Any

from qadash.auth.permissions import can_assign_tasks, can_edit_task, filter_task_update, visible_tasks
from qadash.auth.sessions import SessionUser
from qadash.core.errors import NotFoundError, PermissionDenied, ValidationError
from qadash.core.models import Task, TaskStatus
from qadash.core.utils import today_iso
from qadash.services.audit import log_activity
from qadash.services.base import Repository, TeamMemberRepository, is_blank


REQUIRED_TASK_FIELDS = (
    ("title", "Task title is required"),
    ("assigned_to", "Assignee is required"),
    ("priority", "Priority is required"),
    ("due_date", "Due date is required"),
)


class TaskService:
    def __init__(self, tasks: Repository[Task], members: TeamMemberRepository):
        self._tasks = tasks
        self._members = members

    async def list_tasks(self, actor: SessionUser) -> list[Task]:
        tasks = visible_tasks(actor, await self._tasks.all())
        log_activity("VIEW_TASKS", actor.id, taskCount=len(tasks))
        return tasks

    async def create_task(self, actor: SessionUser, data: dict[str, Any]) -> Task:
        """
        Create a task. Admins only.

        Status always starts as pending, whatever the payload says.
        """
        if not can_assign_tasks(actor.position):
            raise PermissionDenied("Only admins can create tasks")

        for field, message in REQUIRED_TASK_FIELDS:
            if is_blank(data.get(field)):
                raise ValidationError(message)

        assignee = await self._members.get(int(data["assigned_to"]))
        if not assignee:
            raise ValidationError("Assigned team member not found")

        payload = {k: v for k, v in data.items() if v is not None and k != "id"}
        payload.update({
            "status": TaskStatus.PENDING,
            "created_by": actor.id,
            "created_date": today_iso(),
        })
        task = await self._tasks.create(payload)

        log_activity("CREATE_TASK", actor.id, task.id, assignedTo=task.assigned_to, title=task.title)
        return task

    async def update_task(self, actor: SessionUser, task_id: int, updates: dict[str, Any]) -> Task:
        task = await self._tasks.get(task_id)
        if not task:
            raise NotFoundError("Task not found")
        if not can_edit_task(actor, task):
            raise PermissionDenied("You can only edit tasks assigned to you or tasks you created")

        changes = filter_task_update(actor, task, updates)
        if "assigned_to" in changes and is_blank(changes["assigned_to"]):
            raise ValidationError("Assignee is required")
        if "assigned_to" in changes and changes["assigned_to"] != task.assigned_to:
            if not await self._members.get(int(changes["assigned_to"])):
                raise ValidationError("Assigned team member not found")

        updated = await self._tasks.save(task.merged(changes))
        log_activity("UPDATE_TASK", actor.id, task_id, changes=sorted(changes))
        return updated
