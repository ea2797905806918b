"""Services - the request-handling logic, one class per area."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

from fastapi import Request

from qadash.auth.sessions import ResetCodeRegistry, SessionRegistry
from qadash.config import Settings
from qadash.core.models import Task, WorkLog
from qadash.services.accounts import AccountService
from qadash.services.analytics import AnalyticsService
from qadash.services.base import Repository, TeamMemberRepository, UserRepository
from qadash.services.directory import TeamDirectoryService
from qadash.services.reconciliation import ReconciliationReport, reconcile
from qadash.services.tasks import TaskService
from qadash.services.work_logs import WorkLogService
from qadash.storage import Collections, StorageProvider


@dataclass
class Services:
    """Everything a request handler needs, built once per app."""

    settings: Settings
    storage: StorageProvider
    sessions: SessionRegistry
    reset_codes: ResetCodeRegistry
    accounts: AccountService
    directory: TeamDirectoryService
    tasks: TaskService
    work_logs: WorkLogService
    analytics: AnalyticsService


def build_services(storage: StorageProvider, settings: Settings) -> Services:
    records = storage.records
    users = UserRepository(records)
    members = TeamMemberRepository(records)
    tasks = Repository(records, Collections.TASKS, Task)
    work_logs = Repository(records, Collections.WORK_LOGS, WorkLog)

    sessions = SessionRegistry(storage.sessions, ttl=timedelta(hours=settings.session_ttl_hours))
    reset_codes = ResetCodeRegistry(ttl=timedelta(minutes=settings.reset_code_ttl_minutes))
    work_log_service = WorkLogService(work_logs, users)

    return Services(
        settings=settings,
        storage=storage,
        sessions=sessions,
        reset_codes=reset_codes,
        accounts=AccountService(users, sessions, reset_codes, settings),
        directory=TeamDirectoryService(users, members, settings),
        tasks=TaskService(tasks, members),
        work_logs=work_log_service,
        analytics=AnalyticsService(members, tasks, work_logs, work_log_service),
    )


def get_services(request: Request) -> Services:
    """FastAPI dependency: the container stored on the app at startup."""
    return request.app.state.services


__all__ = [
    "Services",
    "build_services",
    "get_services",
    "AccountService",
    "AnalyticsService",
    "TeamDirectoryService",
    "TaskService",
    "WorkLogService",
    "ReconciliationReport",
    "reconcile",
]
