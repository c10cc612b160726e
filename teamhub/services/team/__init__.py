"""
Team Service Package

Modular team service for team lifecycle, invitations, membership
and ownership transfer.

Usage:
    from teamhub.services.team import get_team_manager

    manager = get_team_manager()
    response = await manager.create_team("Night Owls", "Chess", "Late games", owner_id)
"""

# Re-export core TeamManager
from .core import TeamManager

# Re-export helper functions (most commonly used)
from .helpers import (
    get_team_manager,
    reset_team_manager,
    is_team_member,
    is_team_manager,
    is_team_owner,
)
from .storage import member_has_any_role

__all__ = [
    # Core
    "TeamManager",
    # Helpers
    "get_team_manager",
    "reset_team_manager",
    "is_team_member",
    "is_team_manager",
    "is_team_owner",
    "member_has_any_role",
]
