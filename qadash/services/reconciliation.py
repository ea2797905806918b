"""
Users <-> team members integrity check.

Every login identity should have a profile and every profile a login, paired
by email and sharing one id. Team-member creation keeps the pair in step on
its own; this sweep repairs data that arrived some other way (seeded files,
hand edits, older versions) and runs once at startup or from the CLI.

Steps, in order:

1. Profiles without a user get one with the temporary password, a forced
   password change and a position derived from the job title.
2. Users without a profile (except the bootstrap admin) get one with
   availability ``available``.
3. Profiles whose id differs from their user's take the user's id.

Only collections that changed are written, so a second run is a no-op.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from qadash.auth.passwords import hash_password
from qadash.auth.positions import position_from_job_title
from qadash.config import Settings, get_settings
from qadash.core.models import Availability
from qadash.core.utils import today_iso
from qadash.storage.base import Collections, Document, RecordStore

logger = logging.getLogger(__name__)


@dataclass
class ReconciliationReport:
    """What a reconciliation run repaired."""

    users_created: list[int] = field(default_factory=list)
    members_created: list[int] = field(default_factory=list)
    # (old member id, new member id)
    members_realigned: list[tuple[int, int]] = field(default_factory=list)
    collections_written: list[str] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.collections_written)

    def to_dict(self) -> dict:
        return {
            "usersCreated": self.users_created,
            "membersCreated": self.members_created,
            "membersRealigned": [list(pair) for pair in self.members_realigned],
            "collectionsWritten": self.collections_written,
        }


def _email(record: Document) -> str:
    return str(record.get("email") or "").strip().lower()


async def reconcile(store: RecordStore, settings: Settings | None = None) -> ReconciliationReport:
    """Run the three repair steps against ``store``."""
    settings = settings or get_settings()
    report = ReconciliationReport()

    users = await store.read_all(Collections.USERS)
    members = await store.read_all(Collections.TEAM_MEMBERS)
    users_changed = False
    members_changed = False

    used_ids = {r.get("id") for r in users} | {r.get("id") for r in members}
    next_id = max((i for i in used_ids if isinstance(i, int)), default=0) + 1
    temp_hash: str | None = None

    # Step 1: a login for every profile
    user_emails = {_email(u) for u in users}
    user_ids = {u.get("id") for u in users}
    for member in members:
        email = _email(member)
        if not email or email in user_emails:
            continue

        new_id = member.get("id")
        if new_id in user_ids or not isinstance(new_id, int):
            new_id = next_id
            next_id += 1

        if temp_hash is None:
            temp_hash = hash_password(settings.default_member_password)

        role = member.get("role") or ""
        users.append({
            "id": new_id,
            "email": email,
            "password": temp_hash,
            "name": member.get("name", ""),
            "role": role,
            "position": position_from_job_title(role).value,
            "teamId": member.get("teamId"),
            "createdDate": today_iso(),
            "isActive": True,
            "needsPasswordReset": True,
        })
        user_emails.add(email)
        user_ids.add(new_id)
        report.users_created.append(new_id)
        users_changed = True
        logger.info("Created login for team member %s (%s)", member.get("id"), email)

    # Step 2: a profile for every login
    member_emails = {_email(m) for m in members}
    bootstrap = settings.bootstrap_admin_email.strip().lower()
    for user in users:
        email = _email(user)
        if not email or email in member_emails or email == bootstrap:
            continue

        members.append({
            "id": user.get("id"),
            "name": user.get("name", ""),
            "email": email,
            "role": user.get("role") or "",
            "availability": Availability.AVAILABLE.value,
            "teamId": user.get("teamId"),
            "joinDate": user.get("createdDate") or today_iso(),
        })
        member_emails.add(email)
        report.members_created.append(user.get("id"))
        members_changed = True
        logger.info("Created team member profile for user %s (%s)", user.get("id"), email)

    # Step 3: the user's id wins
    id_by_email = {_email(u): u.get("id") for u in users}
    for member in members:
        user_id = id_by_email.get(_email(member))
        if user_id is None or member.get("id") == user_id:
            continue
        report.members_realigned.append((member.get("id"), user_id))
        logger.info("Realigned team member %s to user id %s", member.get("id"), user_id)
        member["id"] = user_id
        members_changed = True

    if users_changed:
        await store.write_all(Collections.USERS, users)
        report.collections_written.append(Collections.USERS)
    if members_changed:
        await store.write_all(Collections.TEAM_MEMBERS, members)
        report.collections_written.append(Collections.TEAM_MEMBERS)

    if report.changed:
        logger.warning(
            "Reconciliation repaired data: %d users, %d profiles, %d id fixes",
            len(report.users_created),
            len(report.members_created),
            len(report.members_realigned),
        )
    else:
        logger.info("Reconciliation found users and team members in sync")
    return report
