"""
Team directory - profiles and the login accounts behind them.

A team member and its user share one id. Both are created together by
``create_member_account``: either both records are persisted or neither is,
so the directory never relies on a later sweep to pair them up.
"""

from __future__ import annotations

import logging
from typing import Any

from qadash.auth.passwords import hash_password
from qadash.auth.permissions import can_edit_user, can_manage_team, filter_profile_update
from qadash.auth.positions import (
    LegacyPosition,
    TierPosition,
    legacy_position_for,
    position_from_job_title,
)
from qadash.auth.sessions import SessionUser
from qadash.config import Settings
from qadash.core.errors import ConflictError, NotFoundError, PermissionDenied, ValidationError
from qadash.core.models import TeamMember, User
from qadash.core.utils import today_iso
from qadash.services.audit import log_activity
from qadash.services.base import (
    TeamMemberRepository,
    UserRepository,
    require_fields,
    require_min_length,
)
from qadash.storage.base import Collections

logger = logging.getLogger(__name__)


# Profile fields mirrored onto the matching user record
MIRRORED_USER_FIELDS = ("name", "email", "role")

REGISTRATION_FIELDS = {
    "email": "email",
    "password": "password",
    "name": "name",
    "role": "role",
    "position": "position",
    "phone": "phone",
    "emergency_contact": "emergencyContact",
    "employee_id": "employeeId",
    "join_date": "joinDate",
    "department": "department",
    "employment_type": "employmentType",
}


class TeamDirectoryService:
    """List, create and edit team members."""

    def __init__(self, users: UserRepository, members: TeamMemberRepository, settings: Settings):
        self._users = users
        self._members = members
        self._settings = settings

    # =========================================================================
    # Queries
    # =========================================================================

    async def list_members(self, actor: SessionUser) -> list[TeamMember]:
        """Every authenticated user sees every profile."""
        log_activity("VIEW_ALL_TEAM_MEMBERS", actor.id)
        return await self._members.all()

    # =========================================================================
    # Account + profile creation
    # =========================================================================

    async def create_member_account(
        self,
        profile: dict[str, Any],
        *,
        password_hash: str,
        position: LegacyPosition,
        needs_password_reset: bool = True,
    ) -> tuple[User, TeamMember]:
        """
        Create a user and its team-member profile under one new id.

        Raises:
            ConflictError: the email is already used by a user or a profile
        """
        email = profile["email"].strip().lower()
        if await self._users.find_by_email(email) or await self._members.find_by_email(email):
            raise ConflictError("User with this email already exists")

        new_id = await self._users.store.next_id(Collections.USERS, Collections.TEAM_MEMBERS)
        member = TeamMember.model_validate({**profile, "id": new_id, "email": email})
        user = User(
            id=new_id,
            email=email,
            password=password_hash,
            name=member.name,
            role=member.role,
            position=position.value,
            team_id=member.team_id,
            created_date=today_iso(),
            is_active=True,
            needs_password_reset=needs_password_reset,
        )

        await self._users.insert(user)
        try:
            await self._members.insert(member)
        except Exception:
            logger.exception("Profile write failed for %s; removing the new user", email)
            await self._users.delete(user.id)
            raise

        return user, member

    async def create_member(self, actor: SessionUser, data: dict[str, Any]) -> TeamMember:
        """
        Add a team member together with a login account.

        The account gets the temporary password and must change it at first
        login.
        """
        if not can_manage_team(actor.position):
            raise PermissionDenied("Only admins can add team members")
        require_fields(data, {"name": "name", "email": "email"})

        profile = {k: v for k, v in data.items() if v is not None and k != "id"}
        profile["team_id"] = data.get("team_id") or self._settings.default_team_id
        profile["join_date"] = today_iso()

        _, member = await self.create_member_account(
            profile,
            password_hash=hash_password(self._settings.default_member_password),
            position=position_from_job_title(member_role(data)),
        )

        log_activity("ADD_TEAM_MEMBER", actor.id, member.id, memberName=member.name, teamId=member.team_id)
        return member

    async def register_employee(
        self,
        actor: SessionUser,
        data: dict[str, Any],
    ) -> tuple[User, TeamMember, TierPosition]:
        """Admin-initiated registration with a full profile and a chosen password."""
        if actor.position != TierPosition.ADMIN:
            raise PermissionDenied("Only admins can register employees")

        require_fields(data, REGISTRATION_FIELDS)
        require_min_length(data["password"], "Password must be at least 6 characters long")

        try:
            tier = TierPosition(data["position"])
        except ValueError:
            raise ValidationError("Invalid position selected")

        employee_id = str(data["employee_id"]).strip()
        for existing in await self._members.all():
            if existing.employee_id == employee_id:
                raise ConflictError("Employee ID already exists")

        # Team Leads register into their own team
        team_id = self._settings.default_team_id
        if actor.legacy_position == LegacyPosition.TEAM_LEAD.value and actor.team_id is not None:
            team_id = actor.team_id

        profile = {
            k: v for k, v in data.items()
            if k not in ("password", "position", "id") and v is not None
        }
        profile.update({
            "employee_id": employee_id,
            "team_id": team_id,
            "availability": data.get("availability") or "available",
        })

        user, member = await self.create_member_account(
            profile,
            password_hash=hash_password(data["password"]),
            position=legacy_position_for(tier, data.get("role")),
        )

        log_activity(
            "ADMIN_REGISTER_EMPLOYEE",
            actor.id,
            user.id,
            employeeEmail=user.email,
            employeeRole=user.role,
            employeePosition=user.position,
            employeeId=employee_id,
        )
        return user, member, tier

    # =========================================================================
    # Profile edits
    # =========================================================================

    async def update_member(
        self,
        actor: SessionUser,
        member_id: int,
        updates: dict[str, Any],
    ) -> TeamMember:
        """
        Apply a profile edit.

        Non-admins silently lose the administrative fields. Name, email and
        role changes are copied onto the user with the same id.
        """
        if not can_edit_user(actor, member_id):
            raise PermissionDenied("You can only edit your own information unless you are an admin")

        member = await self._members.get(member_id)
        if not member:
            raise NotFoundError("Team member not found")

        changes = filter_profile_update(actor, updates)
        if changes.get("email"):
            changes["email"] = changes["email"].strip().lower()
            await self._check_email_free(changes["email"], member_id)

        updated = await self._members.save(member.merged(changes))

        mirrored = {k: changes[k] for k in MIRRORED_USER_FIELDS if k in changes}
        if mirrored:
            user = await self._users.get(member_id)
            if user:
                await self._users.save(user.merged(mirrored))

        log_activity(
            "UPDATE_TEAM_MEMBER",
            actor.id,
            member_id,
            changes=sorted(changes),
            isOwnData=actor.id == member_id,
        )
        return updated

    async def _check_email_free(self, email: str, owner_id: int) -> None:
        for record in (await self._users.find_by_email(email), await self._members.find_by_email(email)):
            if record and record.id != owner_id:
                raise ConflictError("User with this email already exists")


def member_role(data: dict[str, Any]) -> str:
    return (data.get("role") or "").strip()
