"""
Team Members Module

Member removal, ownership transfer and member listing.

Ownership only moves through transfer_ownership; remove_user refuses to
touch the Owner. Both run their checks and writes in one transaction, so
concurrent calls on the same team can never leave zero or two owners.
A StorageError rolls the transaction back and propagates to the caller.
"""

import logging
from typing import Optional, List

from teamhub.db import DocumentStore
from teamhub.errors import TeamResponseCode, NotFoundError, TransactionAborted
from teamhub.schemas import TeamMember, ServiceResponse, MembersResponse
from teamhub.services.team.types import TeamRole, MANAGING_ROLES
from teamhub.services.team.storage import (
    get_team_by_id,
    find_member,
    list_members,
    member_has_any_role,
    remove_member,
    remove_member_from_team,
    remove_owner_role,
    upsert_member,
    add_member_to_team,
)
from teamhub.structured_logger import log_with_context

logger = logging.getLogger(__name__)


def _failure(*codes: TeamResponseCode) -> ServiceResponse:
    return ServiceResponse(success=False, code=list(codes))


def remove_user(
    store: DocumentStore,
    team_id: Optional[str],
    removed_by: Optional[str],
    user_to_remove: Optional[str]
) -> ServiceResponse:
    """
    Remove a non-owner member from a team.

    The remover must be an Owner or Manager of the team.
    """
    codes: List[TeamResponseCode] = []
    if not team_id:
        codes.append(TeamResponseCode.TEAM_ID_MISSING)
    if not removed_by:
        codes.append(TeamResponseCode.REMOVER_ID_MISSING)
    if not user_to_remove:
        codes.append(TeamResponseCode.USER_TO_REMOVE_ID_MISSING)
    if codes:
        return _failure(*codes)

    try:
        with store.transaction() as session:
            if get_team_by_id(session, team_id) is None:
                return _failure(TeamResponseCode.INVALID_TEAM_ID)

            remover = find_member(session, team_id, removed_by)
            if not member_has_any_role(remover, MANAGING_ROLES):
                codes.append(TeamResponseCode.REMOVE_USER_ACCESS_DENIED)

            target = find_member(session, team_id, user_to_remove)
            if target is None:
                codes.append(TeamResponseCode.USER_TO_REMOVE_NOT_IN_TEAM)
            elif member_has_any_role(target, [TeamRole.OWNER]):
                codes.append(TeamResponseCode.CANT_REMOVE_TEAM_OWNER)

            if codes:
                return _failure(*codes)

            try:
                remove_member_from_team(session, team_id, target["id"])
                if not remove_member(session, team_id, target["id"]):
                    raise TransactionAborted(TeamResponseCode.USER_REMOVED_FAILED)
            except NotFoundError as e:
                logger.error(f"Failed to remove user {user_to_remove} from team {team_id}: {e}")
                raise TransactionAborted(TeamResponseCode.USER_REMOVED_FAILED) from e
    except TransactionAborted as e:
        return _failure(e.code)

    log_with_context(logger, "info", "User removed from team", {
        "team_id": team_id,
        "removed_by": removed_by,
        "user_id": user_to_remove,
    })
    return ServiceResponse(success=True, code=[TeamResponseCode.USER_REMOVED_SUCCESS])


def transfer_ownership(
    store: DocumentStore,
    team_id: Optional[str],
    old_owner_id: Optional[str],
    new_owner_id: Optional[str]
) -> ServiceResponse:
    """
    Hand the Owner role from `old_owner_id` to `new_owner_id`.

    The new owner must already be a member. The old owner keeps their
    other roles (or NOT_MENTIONED when Owner was the only one); the new
    owner's roles gain Owner. Both writes commit together or not at all.
    """
    codes: List[TeamResponseCode] = []
    if not team_id:
        codes.append(TeamResponseCode.TEAM_ID_MISSING)
    if not old_owner_id:
        codes.append(TeamResponseCode.CURRENT_OWNER_ID_MISSING)
    if not new_owner_id:
        codes.append(TeamResponseCode.NEW_OWNER_ID_MISSING)
    if codes:
        return _failure(*codes)

    try:
        with store.transaction() as session:
            if get_team_by_id(session, team_id) is None:
                return _failure(TeamResponseCode.INVALID_TEAM_ID)

            old_owner = find_member(session, team_id, old_owner_id)
            if old_owner is None:
                codes.append(TeamResponseCode.CURRENT_OWNER_ID_INVALID)
            elif not member_has_any_role(old_owner, [TeamRole.OWNER]):
                codes.append(TeamResponseCode.USER_SHOULD_BE_OWNER_TO_TRANSFER_OWNERSHIP)

            new_owner = find_member(session, team_id, new_owner_id)
            if new_owner is None:
                codes.append(TeamResponseCode.NEW_OWNER_SHOULD_BE_IN_TEAM)
            elif new_owner_id == old_owner_id:
                codes.append(TeamResponseCode.NEW_OWNER_ID_INVALID)

            if codes:
                return _failure(*codes)

            try:
                remove_owner_role(session, old_owner["id"])
                member_id = upsert_member(
                    session,
                    {"team_id": team_id, "user_id": new_owner_id},
                    {"roles": [TeamRole.OWNER.value]}
                )
                add_member_to_team(session, team_id, member_id)
            except NotFoundError as e:
                logger.error(f"Failed to transfer ownership of team {team_id}: {e}")
                raise TransactionAborted(TeamResponseCode.OWNERSHIP_TRANSFER_FAILED) from e
    except TransactionAborted as e:
        return _failure(e.code)

    log_with_context(logger, "info", "Team ownership transferred", {
        "team_id": team_id,
        "old_owner_id": old_owner_id,
        "new_owner_id": new_owner_id,
    })
    return ServiceResponse(success=True, code=[TeamResponseCode.OWNERSHIP_TRANSFER_SUCCESS])


def list_team_members(store: DocumentStore, team_id: Optional[str]) -> MembersResponse:
    """All members of a team in join order"""
    with store.read() as session:
        if get_team_by_id(session, team_id) is None:
            return MembersResponse(success=False, code=[TeamResponseCode.INVALID_TEAM_ID])
        members = list_members(session, team_id)

    return MembersResponse(
        success=True,
        code=[TeamResponseCode.MEMBERS_FETCHED],
        members=[TeamMember.model_validate(member) for member in members]
    )
