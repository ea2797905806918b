"""
Positions - the legacy three-tier model and the two-tier model it maps onto.

Stored users carry a legacy position; every authorization decision is made
on the tier. The mapping is total over the closed enumerations below, and a
value outside them is rejected rather than guessed at.
"""

from __future__ import annotations

from enum import Enum

from qadash.core.errors import ValidationError


class TierPosition(str, Enum):
    """Simplified position used for authorization."""

    EMPLOYEE = "Employee"
    ADMIN = "Admin"


class LegacyPosition(str, Enum):
    """Position as stored on user records."""

    REGULAR_EMPLOYEE = "Regular Employee"
    TEAM_LEAD = "Team Lead"
    QA_MANAGER = "QA Manager"


class UnknownPositionError(ValidationError):
    """A position string that is neither a legacy nor a tier value."""


# =============================================================================
# Mappings
# =============================================================================


LEGACY_TO_TIER: dict[LegacyPosition, TierPosition] = {
    LegacyPosition.REGULAR_EMPLOYEE: TierPosition.EMPLOYEE,
    LegacyPosition.TEAM_LEAD: TierPosition.ADMIN,
    LegacyPosition.QA_MANAGER: TierPosition.ADMIN,
}

# Job titles that imply a legacy position; anything else is a regular employee
JOB_TITLE_POSITIONS: dict[str, LegacyPosition] = {
    "QA Manager": LegacyPosition.QA_MANAGER,
    "QA Lead": LegacyPosition.TEAM_LEAD,
    "Senior QA Engineer": LegacyPosition.TEAM_LEAD,
}


def normalize(position: LegacyPosition | TierPosition | str) -> TierPosition:
    """
    Map any position onto the two-tier model.

    Tier values come back unchanged, so ``normalize(normalize(x)) ==
    normalize(x)``.

    Raises:
        UnknownPositionError: the value is not a known position
    """
    if isinstance(position, TierPosition):
        return position
    if isinstance(position, LegacyPosition):
        return LEGACY_TO_TIER[position]

    for tier in TierPosition:
        if position == tier.value:
            return tier
    for legacy in LegacyPosition:
        if position == legacy.value:
            return LEGACY_TO_TIER[legacy]

    raise UnknownPositionError(f"Unknown position: {position!r}")


def is_admin(position: LegacyPosition | TierPosition | str | None) -> bool:
    """True iff the position normalizes to Admin. Unknown values are not Admin."""
    if position is None:
        return False
    try:
        return normalize(position) == TierPosition.ADMIN
    except UnknownPositionError:
        return False


def position_from_job_title(role: str | None) -> LegacyPosition:
    """Legacy position implied by a free-text job title."""
    return JOB_TITLE_POSITIONS.get(role or "", LegacyPosition.REGULAR_EMPLOYEE)


def legacy_position_for(tier: TierPosition, role: str | None) -> LegacyPosition:
    """
    Legacy position to store for an account registered with a tier.

    Admins become QA Managers when their title says so, Team Leads otherwise.
    """
    if tier == TierPosition.ADMIN:
        if role == LegacyPosition.QA_MANAGER.value:
            return LegacyPosition.QA_MANAGER
        return LegacyPosition.TEAM_LEAD
    return LegacyPosition.REGULAR_EMPLOYEE
