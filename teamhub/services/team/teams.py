"""
Team Lifecycle Module

Team creation, update, deletion and lookup.

A team and its Owner membership are created in one transaction, so a
team is never visible without an owner. Storage failures propagate to
the caller after the transaction rolls back.
"""

import logging
from typing import Optional, List

from teamhub.db import DocumentStore
from teamhub.errors import TeamResponseCode, NotFoundError, TransactionAborted
from teamhub.schemas import Team, TeamResponse
from teamhub.services.team.types import TeamRole, TeamStatus, MANAGING_ROLES
from teamhub.services.team.storage import (
    UpdateOutcome,
    create_team_record,
    get_team_by_id,
    update_team_record,
    delete_team_cascade,
    upsert_member,
    add_member_to_team,
    find_member,
    member_has_any_role,
)
from teamhub.services.team.validation import TEAM_CODES, is_blank, validate_group_fields, group_fields

logger = logging.getLogger(__name__)

DEFAULT_TEAM_NAME_MIN_LENGTH = 4
DEFAULT_GAME_NAME_MIN_LENGTH = 2


def _failure(*codes: TeamResponseCode) -> TeamResponse:
    return TeamResponse(success=False, code=list(codes))


def create_team(
    store: DocumentStore,
    name: Optional[str],
    game: Optional[str],
    description: Optional[str],
    owner_id: Optional[str],
    status: TeamStatus = TeamStatus.PRIVATE,
    profile_picture: Optional[str] = None,
    banner_picture: Optional[str] = None,
    name_min_length: int = DEFAULT_TEAM_NAME_MIN_LENGTH,
    game_min_length: int = DEFAULT_GAME_NAME_MIN_LENGTH
) -> TeamResponse:
    """
    Create a team owned by `owner_id`.

    Validation failures are accumulated. On success the team, the owner's
    membership (roles ["Owner"]) and the members link are written in one
    transaction.

    Raises:
        StorageError: if a write fails (nothing is persisted)
    """
    try:
        with store.transaction() as session:
            codes = validate_group_fields(
                session, TEAM_CODES,
                name=name,
                game=game,
                description=description,
                status=status,
                owner_id=owner_id,
                creating=True,
                name_min_length=name_min_length,
                game_min_length=game_min_length
            )
            if codes:
                return _failure(*codes)

            team = create_team_record(session, {
                **group_fields(name, game, description, status, profile_picture, banner_picture),
                "owner_id": owner_id,
                "members": [],
            })
            member_id = upsert_member(
                session,
                {"team_id": team["id"], "user_id": owner_id},
                {"roles": [TeamRole.OWNER.value]}
            )
            try:
                add_member_to_team(session, team["id"], member_id)
            except NotFoundError as e:
                logger.error(f"Failed to link owner into team {team['id']}: {e}")
                raise TransactionAborted(TeamResponseCode.TEAM_CREATION_FAILED) from e

            team = get_team_by_id(session, team["id"])
    except TransactionAborted as e:
        return _failure(e.code)

    logger.info(f"Team created: {team['id']} ({team['name']}) by {owner_id}")
    return TeamResponse(
        success=True,
        code=[TeamResponseCode.TEAM_CREATION_SUCCESS],
        team=Team.model_validate(team)
    )


def update_team(
    store: DocumentStore,
    team_id: Optional[str],
    updated_by: Optional[str] = None,
    name: Optional[str] = None,
    game: Optional[str] = None,
    description: Optional[str] = None,
    status: Optional[TeamStatus] = None,
    profile_picture: Optional[str] = None,
    banner_picture: Optional[str] = None,
    name_min_length: int = DEFAULT_TEAM_NAME_MIN_LENGTH,
    game_min_length: int = DEFAULT_GAME_NAME_MIN_LENGTH
) -> TeamResponse:
    """
    Update team details. Only provided fields that actually differ are written.

    When `updated_by` is given it must be an Owner or Manager of the team.
    """
    try:
        with store.transaction() as session:
            team = get_team_by_id(session, team_id)
            if team is None:
                return _failure(TeamResponseCode.INVALID_TEAM_ID)

            if updated_by is not None:
                updater = find_member(session, team_id, updated_by)
                if not member_has_any_role(updater, MANAGING_ROLES):
                    return _failure(TeamResponseCode.TEAM_UPDATE_ACCESS_DENIED)

            codes = validate_group_fields(
                session, TEAM_CODES,
                name=name,
                game=game,
                description=description,
                status=status,
                exclude_id=team_id,
                name_min_length=name_min_length,
                game_min_length=game_min_length
            )
            if codes:
                return _failure(*codes)

            fields = group_fields(name, game, description, status, profile_picture, banner_picture)
            outcome = update_team_record(session, team_id, fields)
            if outcome == UpdateOutcome.NOT_FOUND:
                logger.error(f"Team {team_id} vanished during update")
                raise TransactionAborted(TeamResponseCode.TEAM_UPDATING_FAILED)
            if outcome == UpdateOutcome.NO_CHANGES:
                return _failure(TeamResponseCode.NO_FIELDS_TO_UPDATE)

            team = get_team_by_id(session, team_id)
    except TransactionAborted as e:
        return _failure(e.code)

    logger.info(f"Team updated: {team_id}")
    return TeamResponse(
        success=True,
        code=[TeamResponseCode.TEAM_UPDATING_SUCCESS],
        team=Team.model_validate(team)
    )


def delete_team(
    store: DocumentStore,
    team_id: Optional[str],
    deleted_by: Optional[str],
    reason: Optional[str]
) -> TeamResponse:
    """
    Delete a team (Owner only, reason required).

    Members and invitations of the team are deleted with it.
    """
    codes: List[TeamResponseCode] = []
    if not team_id:
        codes.append(TeamResponseCode.TEAM_ID_MISSING)
    if not deleted_by:
        codes.append(TeamResponseCode.DELETER_ID_MISSING)
    if is_blank(reason):
        codes.append(TeamResponseCode.REASON_MISSING)
    if codes:
        return _failure(*codes)

    try:
        with store.transaction() as session:
            team = get_team_by_id(session, team_id)
            if team is None:
                return _failure(TeamResponseCode.INVALID_TEAM_ID)

            deleter = find_member(session, team_id, deleted_by)
            if not member_has_any_role(deleter, [TeamRole.OWNER]):
                return _failure(TeamResponseCode.TEAM_DELETE_ACCESS_DENIED)

            counts = delete_team_cascade(session, team_id)
            if counts["teams"] != 1:
                logger.error(f"Team {team_id} vanished during delete")
                raise TransactionAborted(TeamResponseCode.TEAM_DELETION_FAILED)
    except TransactionAborted as e:
        return _failure(e.code)

    logger.info(f"Team deleted: {team_id} by {deleted_by} (reason: {reason.strip()})")
    return TeamResponse(
        success=True,
        code=[TeamResponseCode.TEAM_DELETION_SUCCESS],
        team=Team.model_validate(team)
    )


def get_team(store: DocumentStore, team_id: Optional[str]) -> TeamResponse:
    """Get team details by ID"""
    with store.read() as session:
        team = get_team_by_id(session, team_id)

    if team is None:
        return _failure(TeamResponseCode.INVALID_TEAM_ID)
    return TeamResponse(success=True, code=[], team=Team.model_validate(team))
