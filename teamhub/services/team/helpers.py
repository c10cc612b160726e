"""
Team Service Helper Functions

Process-wide TeamManager access and membership checks for callers that
already hold a session.
"""

import logging
import threading
from typing import Optional

from teamhub.db import DocumentSession
from teamhub.services.team.storage import find_member, member_has_any_role
from teamhub.services.team.types import TeamRole, MANAGING_ROLES

logger = logging.getLogger(__name__)

_team_manager = None
_team_manager_lock = threading.Lock()


def is_team_member(session: DocumentSession, team_id: str, user_id: str) -> Optional[list]:
    """
    Check if user is a member of the team.

    Returns:
        The member's roles if they are a member, None otherwise
    """
    member = find_member(session, team_id, user_id)
    return member.get("roles") if member else None


def is_team_manager(session: DocumentSession, team_id: str, user_id: str) -> bool:
    """True when the user holds Owner or Manager on the team"""
    return member_has_any_role(find_member(session, team_id, user_id), MANAGING_ROLES)


def is_team_owner(session: DocumentSession, team_id: str, user_id: str) -> bool:
    return member_has_any_role(find_member(session, team_id, user_id), [TeamRole.OWNER])


def get_team_manager():
    """
    Get singleton TeamManager instance.

    Returns:
        TeamManager instance built from get_settings()
    """
    from teamhub.services.team.core import TeamManager
    global _team_manager
    with _team_manager_lock:
        if _team_manager is None:
            _team_manager = TeamManager.from_settings()
            logger.info("TeamManager initialized")
    return _team_manager


def reset_team_manager() -> None:
    """Drop the singleton (used when settings change, e.g. in tests)"""
    global _team_manager
    with _team_manager_lock:
        _team_manager = None
