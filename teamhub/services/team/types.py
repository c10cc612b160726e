"""
Team Service Type Definitions

Shared types, constants, and enums used across the team and org service modules.
"""

from typing import Iterable, List
from datetime import datetime, UTC

from teamhub.schemas.team_models import TeamRole, TeamStatus, InvitationStatus

# Roles an invitation may grant; Owner only moves by ownership transfer
INVITABLE_ROLES = [TeamRole.MANAGER.value, TeamRole.MEMBER.value]

# Roles allowed to invite, withdraw, remove and update
MANAGING_ROLES = [TeamRole.OWNER.value, TeamRole.MANAGER.value]

# Collections
TEAMS = "teams"
TEAM_MEMBERS = "team-members"
TEAM_INVITATIONS = "team-invitations"
USERS = "users"
ORGS = "orgs"
ORG_MEMBERS = "org-members"


def utc_now_iso() -> str:
    """Current time as an ISO-8601 UTC string (document timestamp format)"""
    return datetime.now(UTC).isoformat()


def normalize_roles(roles: Iterable[str]) -> List[str]:
    """Sorted, de-duplicated role labels (canonical form stored on invitations)"""
    return sorted({getattr(role, "value", role) for role in roles})


__all__ = [
    "TeamRole",
    "TeamStatus",
    "InvitationStatus",
    "INVITABLE_ROLES",
    "MANAGING_ROLES",
    "TEAMS",
    "TEAM_MEMBERS",
    "TEAM_INVITATIONS",
    "USERS",
    "ORGS",
    "ORG_MEMBERS",
    "utc_now_iso",
    "normalize_roles",
]
