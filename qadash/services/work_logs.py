"""
Work-log use cases. Logs are append-only: there is no edit or delete.
"""

from __future__ import annotations

import math
from typing import Any

from qadash.auth.permissions import can_log_work_for, visible_work_logs
from qadash.auth.sessions import SessionUser
from qadash.core.errors import PermissionDenied, ValidationError
from qadash.core.models import WorkLog
from qadash.core.utils import timestamp_iso, today_iso
from qadash.services.audit import log_activity
from qadash.services.base import Repository, UserRepository

UNKNOWN_MEMBER_NAME = "Unknown User"


class WorkLogService:
    def __init__(
        self,
        work_logs: Repository[WorkLog],
        users: UserRepository,
    ):
        self._work_logs = work_logs
        self._users = users

    async def member_names(self) -> dict[int, str]:
        return {u.id: u.name for u in await self._users.all()}

    async def list_logs(self, actor: SessionUser) -> list[dict[str, Any]]:
        """Visible logs, each annotated with the member's display name."""
        logs = visible_work_logs(actor, await self._work_logs.all())
        names = await self.member_names()
        log_activity("VIEW_WORK_LOGS", actor.id, logCount=len(logs))
        return [with_member_name(log, names) for log in logs]

    async def create_log(self, actor: SessionUser, data: dict[str, Any]) -> WorkLog:
        """
        Append a work log.

        Employees may only log for themselves. Admins may log for anyone who
        has a login account.
        """
        member_id = data.get("member_id")
        if member_id is None:
            raise ValidationError("Member ID is required")
        member_id = int(member_id)

        hours = data.get("hours")
        if hours is None or float(hours) <= 0:
            raise ValidationError("Hours must be greater than 0")
        if not math.isfinite(float(hours)):
            raise ValidationError("Hours must be a finite number")

        if not can_log_work_for(actor, member_id):
            raise PermissionDenied("You can only log work hours for yourself")
        if member_id != actor.id and not await self._users.get(member_id):
            raise ValidationError("Target user not found")

        payload = {k: v for k, v in data.items() if v is not None and k != "id"}
        payload.update({
            "member_id": member_id,
            "hours": float(hours),
            "logged_by": actor.id,
            "date": data.get("date") or today_iso(),
            "timestamp": timestamp_iso(),
        })
        log = await self._work_logs.create(payload)

        log_activity(
            "LOG_WORK_HOURS",
            actor.id,
            member_id,
            hours=log.hours,
            isForSelf=member_id == actor.id,
        )
        return log


def with_member_name(log: WorkLog, names: dict[int, str]) -> dict[str, Any]:
    data = log.to_record()
    data["memberName"] = names.get(log.member_id, UNKNOWN_MEMBER_NAME)
    return data
