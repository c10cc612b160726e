"""Pydantic entity and response models"""

from teamhub.schemas.team_models import (
    TeamRole,
    TeamStatus,
    InvitationStatus,
    Team,
    Org,
    TeamMember,
    TeamInvitation,
    ServiceResponse,
    TeamResponse,
    InvitationResponse,
    InvitationListResponse,
    MembersResponse,
    OrgResponse,
)

__all__ = [
    "TeamRole",
    "TeamStatus",
    "InvitationStatus",
    "Team",
    "Org",
    "TeamMember",
    "TeamInvitation",
    "ServiceResponse",
    "TeamResponse",
    "InvitationResponse",
    "InvitationListResponse",
    "MembersResponse",
    "OrgResponse",
]
