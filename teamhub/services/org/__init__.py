"""
Org Service Package

Organizations: team-shaped groups stored in the `orgs`/`org-members`
collections.
"""

from .core import OrgManager, get_org_manager

__all__ = ["OrgManager", "get_org_manager"]
