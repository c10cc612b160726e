"""
Team Service Core Logic

TeamManager class with all team operations:
- Team CRUD
- Invitation lifecycle (send, accept, reject, withdraw, list)
- Member removal and ownership transfer

Each method runs its synchronous, transactional implementation in a
worker thread so concurrent requests never block the event loop.
"""

import asyncio
import logging
from typing import Optional, List

from teamhub.config import TeamHubSettings, get_settings
from teamhub.db import DocumentStore
from teamhub.schemas import (
    TeamResponse,
    InvitationResponse,
    InvitationListResponse,
    MembersResponse,
    ServiceResponse,
)
from teamhub.services.auth import InvitationTokenCodec
from teamhub.structured_logger import configure_logging

# Import modular team service components
from . import teams as teams_mod
from . import members as members_mod
from . import invitations as invitations_mod
from .types import TeamStatus, InvitationStatus

logger = logging.getLogger(__name__)


class TeamManager:
    """
    Manages team creation, invitations, membership and ownership
    """

    def __init__(
        self,
        store: DocumentStore,
        codec: InvitationTokenCodec,
        settings: Optional[TeamHubSettings] = None
    ):
        self.store = store
        self.codec = codec
        self.settings = settings or get_settings()

    @classmethod
    def from_settings(cls, settings: Optional[TeamHubSettings] = None) -> "TeamManager":
        """Build a manager from settings: logging, store (initialized) and codec"""
        settings = settings or get_settings()
        configure_logging(settings)
        store = DocumentStore.from_settings(settings).initialize()
        codec = InvitationTokenCodec.from_settings(settings)
        return cls(store, codec, settings)

    # ========================================================================
    # TEAMS
    # ========================================================================

    async def create_team(
        self,
        name: str,
        game: str,
        description: str,
        owner_id: str,
        status: TeamStatus = TeamStatus.PRIVATE,
        profile_picture: Optional[str] = None,
        banner_picture: Optional[str] = None
    ) -> TeamResponse:
        """
        Create a new team

        Args:
            name: Team name (unique)
            game: Game the team plays
            description: Team description
            owner_id: User ID of the creator, who becomes Owner
            status: Public or Private

        Returns:
            TeamResponse with the created team
        """
        return await asyncio.to_thread(
            teams_mod.create_team,
            self.store,
            name,
            game,
            description,
            owner_id,
            status,
            profile_picture,
            banner_picture,
            self.settings.team_name_min_length,
            self.settings.game_name_min_length
        )

    async def update_team(
        self,
        team_id: str,
        updated_by: Optional[str] = None,
        name: Optional[str] = None,
        game: Optional[str] = None,
        description: Optional[str] = None,
        status: Optional[TeamStatus] = None,
        profile_picture: Optional[str] = None,
        banner_picture: Optional[str] = None
    ) -> TeamResponse:
        return await asyncio.to_thread(
            teams_mod.update_team,
            self.store,
            team_id,
            updated_by,
            name,
            game,
            description,
            status,
            profile_picture,
            banner_picture,
            self.settings.team_name_min_length,
            self.settings.game_name_min_length
        )

    async def delete_team(self, team_id: str, deleted_by: str, reason: str) -> TeamResponse:
        """Delete a team with its members and invitations (Owner only)"""
        return await asyncio.to_thread(teams_mod.delete_team, self.store, team_id, deleted_by, reason)

    async def get_team(self, team_id: str) -> TeamResponse:
        """Get team details by ID"""
        return await asyncio.to_thread(teams_mod.get_team, self.store, team_id)

    # ========================================================================
    # INVITATIONS
    # ========================================================================

    async def send_invitation(
        self,
        team_id: str,
        send_by: str,
        send_to: str,
        roles: List[str],
        expiration=None
    ) -> InvitationResponse:
        """
        Invite a user into a team

        Args:
            expiration: Invitation lifetime ("1d", "12h", seconds...);
                defaults to settings.invitation_default_duration
        """
        if expiration is None:
            expiration = self.settings.invitation_default_duration
        return await asyncio.to_thread(
            invitations_mod.send_invitation,
            self.store,
            self.codec,
            team_id,
            send_by,
            send_to,
            roles,
            expiration
        )

    async def accept_invitation(self, invitation_id: str, accepted_by: str) -> InvitationResponse:
        return await asyncio.to_thread(
            invitations_mod.accept_invitation, self.store, self.codec, invitation_id, accepted_by
        )

    async def reject_invitation(self, invitation_id: str, rejected_by: str) -> InvitationResponse:
        return await asyncio.to_thread(
            invitations_mod.reject_invitation, self.store, self.codec, invitation_id, rejected_by
        )

    async def withdraw_invitation(self, invitation_id: str, withdrawn_by: str) -> InvitationResponse:
        return await asyncio.to_thread(
            invitations_mod.withdraw_invitation, self.store, self.codec, invitation_id, withdrawn_by
        )

    async def list_invitations(
        self,
        invited_user_id: str,
        status: Optional[InvitationStatus] = None
    ) -> InvitationListResponse:
        """Invitations addressed to a user, newest first"""
        return await asyncio.to_thread(
            invitations_mod.list_invitations, self.store, self.codec, invited_user_id, status
        )

    # ========================================================================
    # MEMBERS
    # ========================================================================

    async def remove_user(self, team_id: str, removed_by: str, user_to_remove: str) -> ServiceResponse:
        return await asyncio.to_thread(
            members_mod.remove_user, self.store, team_id, removed_by, user_to_remove
        )

    async def transfer_ownership(self, team_id: str, old_owner_id: str, new_owner_id: str) -> ServiceResponse:
        """Hand the Owner role to another member of the team"""
        return await asyncio.to_thread(
            members_mod.transfer_ownership, self.store, team_id, old_owner_id, new_owner_id
        )

    async def list_team_members(self, team_id: str) -> MembersResponse:
        return await asyncio.to_thread(members_mod.list_team_members, self.store, team_id)
