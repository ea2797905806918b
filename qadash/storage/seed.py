"""
Demo data written on first start.

Only collections that do not exist yet are seeded, so a populated data
directory is never touched. John Doe and Jane Smith deliberately have a
profile but no login: the startup reconciliation gives them one with the
temporary password.
"""

from __future__ import annotations

import logging

from qadash.auth.passwords import hash_password
from qadash.storage.base import Collections, Document, RecordStore

logger = logging.getLogger(__name__)


def _demo_users() -> list[Document]:
    return [
        {
            "id": 1,
            "email": "admin@qa-team.com",
            "password": hash_password("admin123"),
            "name": "QA Administrator",
            "role": "QA Manager",
            "position": "QA Manager",
            "createdDate": "2024-12-20",
            "isActive": True,
            "needsPasswordReset": False,
        },
        {
            "id": 2,
            "email": "lead@qa-team.com",
            "password": hash_password("lead123"),
            "name": "Sarah Wilson",
            "role": "QA Lead",
            "position": "Team Lead",
            "teamId": 1,
            "createdDate": "2024-12-20",
            "isActive": True,
            "needsPasswordReset": False,
        },
        {
            "id": 3,
            "email": "analyst@qa-team.com",
            "password": hash_password("analyst123"),
            "name": "Mike Johnson",
            "role": "QA Analyst",
            "position": "Regular Employee",
            "teamId": 1,
            "createdDate": "2024-12-20",
            "isActive": True,
            "needsPasswordReset": False,
        },
    ]


DEMO_TEAM_MEMBERS: list[Document] = [
    {
        "id": 2,
        "name": "Sarah Wilson",
        "email": "lead@qa-team.com",
        "role": "QA Lead",
        "availability": "available",
        "teamId": 1,
        "joinDate": "2024-12-20",
    },
    {
        "id": 3,
        "name": "Mike Johnson",
        "email": "analyst@qa-team.com",
        "role": "QA Analyst",
        "availability": "available",
        "teamId": 1,
        "joinDate": "2024-12-20",
    },
    {
        "id": 4,
        "name": "John Doe",
        "email": "john.doe@company.com",
        "role": "Senior QA Engineer",
        "availability": "available",
        "teamId": 1,
        "joinDate": "2024-01-15",
    },
    {
        "id": 5,
        "name": "Jane Smith",
        "email": "jane.smith@company.com",
        "role": "QA Analyst",
        "availability": "busy",
        "teamId": 1,
        "joinDate": "2024-02-01",
    },
]

DEMO_TASKS: list[Document] = [
    {
        "id": 1,
        "title": "Test Login Functionality",
        "assignedTo": 4,
        "status": "in-progress",
        "priority": "high",
        "createdBy": 1,
        "createdDate": "2024-12-20",
        "dueDate": "2024-12-22",
    },
    {
        "id": 2,
        "title": "UI Regression Testing",
        "assignedTo": 3,
        "status": "pending",
        "priority": "medium",
        "createdBy": 2,
        "createdDate": "2024-12-20",
        "dueDate": "2024-12-25",
    },
]


async def seed_default_data(store: RecordStore) -> list[str]:
    """
    Write demo records into collections that do not exist yet.

    Returns the names of the collections that were seeded.
    """
    defaults = {
        Collections.USERS: _demo_users,
        Collections.TEAM_MEMBERS: lambda: DEMO_TEAM_MEMBERS,
        Collections.TASKS: lambda: DEMO_TASKS,
        Collections.WORK_LOGS: lambda: [],
    }

    seeded = []
    for collection, factory in defaults.items():
        if await store.exists(collection):
            continue
        await store.write_all(collection, factory())
        seeded.append(collection)

    if seeded:
        logger.info("Seeded demo data: %s", ", ".join(seeded))
    return seeded
