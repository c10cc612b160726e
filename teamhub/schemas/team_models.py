"""
Team-related Pydantic models for TeamHub.

Entity models mirror the stored documents; response models are what every
team/org operation returns: `success`, a list of response codes, and the
entity when there is one.
"""

from enum import Enum
from typing import Optional, List, Union
from pydantic import BaseModel, ConfigDict, Field

from teamhub.errors import TeamResponseCode, OrgResponseCode, get_error_message


# ============================================================================
# Enums
# ============================================================================

class TeamRole(str, Enum):
    OWNER = "Owner"
    MANAGER = "Manager"
    MEMBER = "Member"
    # Placeholder for a member left with no role (e.g. after losing Owner)
    NOT_MENTIONED = "NOT_MENTIONED"


class TeamStatus(str, Enum):
    PUBLIC = "Public"
    PRIVATE = "Private"


class InvitationStatus(str, Enum):
    SENT = "Sent"
    ACCEPTED = "Accepted"
    REJECTED = "Rejected"
    WITHDRAWN = "Withdrawn"
    EXPIRED = "Expired"


# ============================================================================
# Entities
# ============================================================================

class Team(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    name: str
    game: str
    description: str
    status: TeamStatus = TeamStatus.PRIVATE
    profile_picture: Optional[str] = None
    banner_picture: Optional[str] = None
    owner_id: Optional[str] = None
    members: List[str] = Field(default_factory=list)
    created_at: str
    updated_at: Optional[str] = None


class Org(Team):
    """Organization: same shape as a team, stored in its own collections"""
    pass


class TeamMember(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    team_id: Optional[str] = None
    org_id: Optional[str] = None
    user_id: str
    roles: List[str] = Field(default_factory=list)
    created_at: str
    updated_at: Optional[str] = None


class TeamInvitation(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    team_id: str
    send_by: str
    send_to: str
    roles: List[str]
    status: InvitationStatus
    expiration: str
    created_at: str
    updated_at: Optional[str] = None
    # Computed on read: status is Sent and the expiry token still verifies
    is_live: Optional[bool] = None


# ============================================================================
# Responses
# ============================================================================

ResponseCode = Union[TeamResponseCode, OrgResponseCode]


class ServiceResponse(BaseModel):
    success: bool
    code: List[ResponseCode] = Field(default_factory=list)

    def messages(self) -> List[str]:
        """Human-readable message for each code"""
        return [get_error_message(code) for code in self.code]


class TeamResponse(ServiceResponse):
    team: Optional[Team] = None


class InvitationResponse(ServiceResponse):
    invitation: Optional[TeamInvitation] = None


class InvitationListResponse(ServiceResponse):
    invitations: List[TeamInvitation] = Field(default_factory=list)


class MembersResponse(ServiceResponse):
    members: List[TeamMember] = Field(default_factory=list)


class OrgResponse(ServiceResponse):
    org: Optional[Org] = None
