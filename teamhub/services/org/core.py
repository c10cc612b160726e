"""
Org Service Core Logic

OrgManager: async facade over the org lifecycle, mirroring TeamManager.
"""

import asyncio
import logging
import threading
from typing import Optional

from teamhub.config import TeamHubSettings, get_settings
from teamhub.db import DocumentStore
from teamhub.schemas import OrgResponse, ServiceResponse
from teamhub.services.team.types import TeamStatus
from teamhub.structured_logger import configure_logging

from . import orgs as orgs_mod

logger = logging.getLogger(__name__)

_org_manager = None
_org_manager_lock = threading.Lock()


class OrgManager:
    """
    Manages org creation, updates and member removal
    """

    def __init__(self, store: DocumentStore, settings: Optional[TeamHubSettings] = None):
        self.store = store
        self.settings = settings or get_settings()

    @classmethod
    def from_settings(cls, settings: Optional[TeamHubSettings] = None) -> "OrgManager":
        settings = settings or get_settings()
        configure_logging(settings)
        return cls(DocumentStore.from_settings(settings).initialize(), settings)

    async def create_org(
        self,
        name: str,
        game: str,
        description: str,
        owner_id: str,
        status: TeamStatus = TeamStatus.PRIVATE,
        profile_picture: Optional[str] = None,
        banner_picture: Optional[str] = None
    ) -> OrgResponse:
        """Create a new org owned by `owner_id`"""
        return await asyncio.to_thread(
            orgs_mod.create_org,
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

    async def update_org(
        self,
        org_id: str,
        name: Optional[str] = None,
        game: Optional[str] = None,
        description: Optional[str] = None,
        status: Optional[TeamStatus] = None,
        profile_picture: Optional[str] = None,
        banner_picture: Optional[str] = None
    ) -> OrgResponse:
        return await asyncio.to_thread(
            orgs_mod.update_org,
            self.store,
            org_id,
            name,
            game,
            description,
            status,
            profile_picture,
            banner_picture,
            self.settings.team_name_min_length,
            self.settings.game_name_min_length
        )

    async def remove_user_from_org(self, org_id: str, removed_by: str, user_to_remove: str) -> ServiceResponse:
        return await asyncio.to_thread(
            orgs_mod.remove_user_from_org, self.store, org_id, removed_by, user_to_remove
        )


def get_org_manager() -> OrgManager:
    """Get singleton OrgManager instance"""
    global _org_manager
    with _org_manager_lock:
        if _org_manager is None:
            _org_manager = OrgManager.from_settings()
            logger.info("OrgManager initialized")
    return _org_manager
