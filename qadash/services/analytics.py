"""
Dashboard analytics.

Team counts are computed over every profile regardless of who asks; task and
work-log figures only cover what the caller may see.
"""

from __future__ import annotations

from typing import Any

from qadash.auth.permissions import (
    can_view_all_data,
    permission_summary,
    visible_tasks,
    visible_work_logs,
)
from qadash.auth.sessions import SessionUser
from qadash.core.models import Availability, Task, TaskStatus, WorkLog
from qadash.services.audit import log_activity
from qadash.services.base import Repository, TeamMemberRepository
from qadash.services.work_logs import WorkLogService, with_member_name

RECENT_ACTIVITY_LIMIT = 5


class AnalyticsService:
    def __init__(
        self,
        members: TeamMemberRepository,
        tasks: Repository[Task],
        work_logs: Repository[WorkLog],
        work_log_service: WorkLogService,
    ):
        self._members = members
        self._tasks = tasks
        self._work_logs = work_logs
        self._work_log_service = work_log_service

    async def summary(self, actor: SessionUser) -> dict[str, Any]:
        members = await self._members.all()
        tasks = visible_tasks(actor, await self._tasks.all())
        logs = visible_work_logs(actor, await self._work_logs.all())

        names = await self._work_log_service.member_names()
        recent = [with_member_name(log, names) for log in reversed(logs[-RECENT_ACTIVITY_LIMIT:])]

        log_activity(
            "VIEW_ANALYTICS",
            actor.id,
            dataScope="all" if can_view_all_data(actor.position) else "personal",
        )

        return {
            "totalTeamMembers": len(members),
            "availableMembers": sum(1 for m in members if m.availability == Availability.AVAILABLE),
            "totalTasks": len(tasks),
            "completedTasks": sum(1 for t in tasks if t.status == TaskStatus.COMPLETED),
            "totalHoursLogged": sum(log.hours for log in logs),
            "recentActivity": recent,
            "userPosition": actor.position.value,
            "userPermissions": permission_summary(actor.position),
        }
