"""
Team Service Storage Layer

Document access functions for team-related persistence.
All raw store operations should go through this module.

Every function takes an open `DocumentSession` so callers decide the
transaction boundary; none of them commit on their own. The org variant
reuses the same functions with `collection`/`group_key` pointed at the
org collections.
"""

import logging
from enum import Enum
from typing import Optional, List, Dict, Any

from teamhub.db import DocumentSession
from teamhub.errors import NotFoundError
from teamhub.services.team.types import (
    TeamRole,
    InvitationStatus,
    TEAMS,
    TEAM_MEMBERS,
    TEAM_INVITATIONS,
    USERS,
    normalize_roles,
    utc_now_iso,
)

logger = logging.getLogger(__name__)


class UpdateOutcome(Enum):
    UPDATED = "updated"
    NO_CHANGES = "no_changes"
    NOT_FOUND = "not_found"


# ========================================================================
# USERS (read-only identity lookups)
# ========================================================================

def user_exists(session: DocumentSession, user_id: Optional[str]) -> bool:
    """Check if a user with this id exists"""
    if not user_id:
        return False
    return session.exists(USERS, {"id": user_id})


# ========================================================================
# MEMBERSHIP STORE
# ========================================================================

def upsert_member(
    session: DocumentSession,
    filter: Dict[str, Any],
    data: Dict[str, Any],
    collection: str = TEAM_MEMBERS
) -> str:
    """
    Create or update the member matching `filter` (e.g. {team_id, user_id}).

    List-valued fields in `data` are merged as a set union with what the
    member already holds; scalar fields are overwritten.

    Returns:
        The member id
    """
    scalars = {k: v for k, v in data.items() if not isinstance(v, list)}
    arrays = {k: v for k, v in data.items() if isinstance(v, list)}

    existing = session.find_one(collection, filter)
    now = utc_now_iso()

    if existing is None:
        result = session.update_one(
            collection,
            filter,
            set_fields=scalars,
            add_to_set=arrays,
            upsert=True,
            set_on_insert={"created_at": now, "updated_at": now}
        )
        logger.debug(f"Created member {result.upserted_id} in {collection}")
        return result.upserted_id

    result = session.update_one(
        collection,
        {"id": existing["id"]},
        set_fields=scalars,
        add_to_set=arrays
    )
    if result.modified_count:
        session.update_one(collection, {"id": existing["id"]}, set_fields={"updated_at": now})
    return existing["id"]


def remove_owner_role(session: DocumentSession, member_id: str, collection: str = TEAM_MEMBERS) -> bool:
    """
    Strip the Owner role from a member.

    An emptied role set becomes ["NOT_MENTIONED"]. Returns True without
    writing when the member did not hold Owner.

    Raises:
        NotFoundError: if the member does not exist
    """
    member = session.find_one(collection, {"id": member_id})
    if member is None:
        raise NotFoundError(f"Member not found: {member_id}", collection=collection, filter={"id": member_id})

    roles = member.get("roles") or []
    if TeamRole.OWNER.value not in roles:
        return True

    remaining = [role for role in roles if role != TeamRole.OWNER.value]
    if not remaining:
        remaining = [TeamRole.NOT_MENTIONED.value]

    result = session.update_one(
        collection,
        {"id": member_id},
        set_fields={"roles": remaining, "updated_at": utc_now_iso()}
    )
    return result.modified_count == 1


def remove_member(
    session: DocumentSession,
    group_id: str,
    member_id: str,
    collection: str = TEAM_MEMBERS,
    group_key: str = "team_id"
) -> bool:
    """Delete a member row. Returns False when nothing was deleted."""
    deleted = session.delete_one(collection, {"id": member_id, group_key: group_id})
    return deleted == 1


def find_member(
    session: DocumentSession,
    group_id: str,
    user_id: str,
    collection: str = TEAM_MEMBERS,
    group_key: str = "team_id"
) -> Optional[Dict]:
    """Get a user's membership in a team, or None"""
    if not group_id or not user_id:
        return None
    return session.find_one(collection, {group_key: group_id, "user_id": user_id})


def list_members(
    session: DocumentSession,
    group_id: str,
    collection: str = TEAM_MEMBERS,
    group_key: str = "team_id"
) -> List[Dict]:
    """All members of a team in join order"""
    return session.find(collection, {group_key: group_id})


def member_has_any_role(member: Optional[Dict], roles: List[str]) -> bool:
    """True when the member exists and holds at least one of `roles`"""
    if not member:
        return False
    held = member.get("roles") or []
    return any(getattr(role, "value", role) in held for role in roles)


def count_owners(
    session: DocumentSession,
    group_id: str,
    collection: str = TEAM_MEMBERS,
    group_key: str = "team_id"
) -> int:
    return session.count(collection, {group_key: group_id, "roles": TeamRole.OWNER.value})


# ========================================================================
# TEAM STORE
# ========================================================================

def create_team_record(session: DocumentSession, data: Dict[str, Any], collection: str = TEAMS) -> Dict:
    """Insert a team document and return it"""
    now = utc_now_iso()
    doc = dict(data)
    doc.setdefault("members", [])
    doc["created_at"] = now
    doc["updated_at"] = now
    team_id = session.insert_one(collection, doc)
    doc["id"] = team_id
    return doc


def get_team_by_id(session: DocumentSession, team_id: Optional[str], collection: str = TEAMS) -> Optional[Dict]:
    """Get team details by ID"""
    if not team_id:
        return None
    return session.find_one(collection, {"id": team_id})


def team_name_exists(
    session: DocumentSession,
    name: str,
    collection: str = TEAMS,
    exclude_id: Optional[str] = None
) -> bool:
    """Check if a team name is already taken (optionally ignoring one team)"""
    filter: Dict[str, Any] = {"name": name}
    if exclude_id:
        filter["id"] = {"$ne": exclude_id}
    return session.exists(collection, filter)


def add_member_to_team(session: DocumentSession, team_id: str, member_id: str, collection: str = TEAMS) -> bool:
    """
    Link a member id into Team.members (idempotent).

    Returns:
        True if the list changed

    Raises:
        NotFoundError: if the team does not exist
    """
    result = session.update_one(collection, {"id": team_id}, add_to_set={"members": member_id})
    if result.matched_count == 0:
        raise NotFoundError(f"Team not found: {team_id}", collection=collection, filter={"id": team_id})
    if result.modified_count:
        session.update_one(collection, {"id": team_id}, set_fields={"updated_at": utc_now_iso()})
        return True
    return False


def remove_member_from_team(session: DocumentSession, team_id: str, member_id: str, collection: str = TEAMS) -> bool:
    """
    Unlink a member id from Team.members (idempotent).

    Raises:
        NotFoundError: if the team does not exist
    """
    result = session.update_one(collection, {"id": team_id}, pull={"members": member_id})
    if result.matched_count == 0:
        raise NotFoundError(f"Team not found: {team_id}", collection=collection, filter={"id": team_id})
    if result.modified_count:
        session.update_one(collection, {"id": team_id}, set_fields={"updated_at": utc_now_iso()})
        return True
    return False


def update_team_record(
    session: DocumentSession,
    team_id: str,
    fields: Dict[str, Any],
    collection: str = TEAMS
) -> UpdateOutcome:
    """
    Write only the fields that are present and differ from the stored team.

    None values mean "not provided" and are skipped.
    """
    team = get_team_by_id(session, team_id, collection)
    if team is None:
        return UpdateOutcome.NOT_FOUND

    changes = {
        key: value for key, value in fields.items()
        if value is not None and team.get(key) != value
    }
    if not changes:
        return UpdateOutcome.NO_CHANGES

    changes["updated_at"] = utc_now_iso()
    session.update_one(collection, {"id": team_id}, set_fields=changes)
    return UpdateOutcome.UPDATED


def delete_team_cascade(session: DocumentSession, team_id: str) -> Dict[str, int]:
    """Delete a team together with its members and invitations"""
    counts = {
        "invitations": session.delete_many(TEAM_INVITATIONS, {"team_id": team_id}),
        "members": session.delete_many(TEAM_MEMBERS, {"team_id": team_id}),
        "teams": session.delete_one(TEAMS, {"id": team_id}),
    }
    logger.info(f"Deleted team {team_id}: {counts}")
    return counts


# ========================================================================
# INVITATIONS
# ========================================================================

def insert_invitation(session: DocumentSession, data: Dict[str, Any]) -> Dict:
    """Insert a Sent invitation and return it"""
    now = utc_now_iso()
    doc = dict(data)
    doc["roles"] = normalize_roles(doc.get("roles") or [])
    doc.setdefault("status", InvitationStatus.SENT.value)
    doc["created_at"] = now
    doc["updated_at"] = now
    doc["id"] = session.insert_one(TEAM_INVITATIONS, doc)
    return doc


def find_invitation(session: DocumentSession, invitation_id: str) -> Optional[Dict]:
    return session.find_one(TEAM_INVITATIONS, {"id": invitation_id})


def find_latest_sent_invitation(
    session: DocumentSession,
    team_id: str,
    send_to: str,
    roles: List[str]
) -> Optional[Dict]:
    """Most recent Sent invitation for the exact (team, recipient, role-set) tuple"""
    return session.find_one(
        TEAM_INVITATIONS,
        {
            "team_id": team_id,
            "send_to": send_to,
            "roles": normalize_roles(roles),
            "status": InvitationStatus.SENT.value,
        },
        sort=[("created_at", -1)]
    )


def set_invitation_status(session: DocumentSession, invitation_id: str, status: InvitationStatus) -> bool:
    result = session.update_one(
        TEAM_INVITATIONS,
        {"id": invitation_id},
        set_fields={"status": status.value, "updated_at": utc_now_iso()}
    )
    return result.modified_count == 1


def list_user_invitations(session: DocumentSession, user_id: str) -> List[Dict]:
    """Invitations addressed to a user, newest first"""
    return session.find(TEAM_INVITATIONS, {"send_to": user_id}, sort=[("created_at", -1)])
