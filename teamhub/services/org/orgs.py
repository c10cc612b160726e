"""
Org Lifecycle Module

Organizations behave like teams (single Owner, denormalized member list)
but live in their own collections, keyed by `org_id`, and report
OrgResponseCode codes. Field validation is shared with teams.
"""

import logging
from typing import Optional, List

from teamhub.db import DocumentStore
from teamhub.errors import OrgResponseCode, NotFoundError, TransactionAborted
from teamhub.schemas import Org, OrgResponse, ServiceResponse
from teamhub.services.team.types import TeamRole, TeamStatus, MANAGING_ROLES, ORGS, ORG_MEMBERS
from teamhub.services.team.storage import (
    UpdateOutcome,
    create_team_record,
    get_team_by_id,
    update_team_record,
    upsert_member,
    add_member_to_team,
    remove_member_from_team,
    remove_member,
    find_member,
    member_has_any_role,
)
from teamhub.services.team.validation import ORG_CODES, validate_group_fields, group_fields

logger = logging.getLogger(__name__)

ORG_KEY = "org_id"


def create_org(
    store: DocumentStore,
    name: Optional[str],
    game: Optional[str],
    description: Optional[str],
    owner_id: Optional[str],
    status: TeamStatus = TeamStatus.PRIVATE,
    profile_picture: Optional[str] = None,
    banner_picture: Optional[str] = None,
    name_min_length: int = 4,
    game_min_length: int = 2
) -> OrgResponse:
    """Create an org and its Owner membership in one transaction"""
    try:
        with store.transaction() as session:
            codes = validate_group_fields(
                session, ORG_CODES,
                name=name,
                game=game,
                description=description,
                status=status,
                owner_id=owner_id,
                creating=True,
                collection=ORGS,
                name_min_length=name_min_length,
                game_min_length=game_min_length
            )
            if codes:
                return OrgResponse(success=False, code=codes)

            org = create_team_record(session, {
                **group_fields(name, game, description, status, profile_picture, banner_picture),
                "owner_id": owner_id,
                "members": [],
            }, collection=ORGS)
            member_id = upsert_member(
                session,
                {ORG_KEY: org["id"], "user_id": owner_id},
                {"roles": [TeamRole.OWNER.value]},
                collection=ORG_MEMBERS
            )
            try:
                add_member_to_team(session, org["id"], member_id, collection=ORGS)
            except NotFoundError as e:
                logger.error(f"Failed to link owner into org {org['id']}: {e}")
                raise TransactionAborted(OrgResponseCode.ORG_CREATION_FAILED) from e

            org = get_team_by_id(session, org["id"], collection=ORGS)
    except TransactionAborted as e:
        return OrgResponse(success=False, code=[e.code])

    logger.info(f"Org created: {org['id']} ({org['name']}) by {owner_id}")
    return OrgResponse(success=True, code=[OrgResponseCode.ORG_CREATION_SUCCESS], org=Org.model_validate(org))


def update_org(
    store: DocumentStore,
    org_id: Optional[str],
    name: Optional[str] = None,
    game: Optional[str] = None,
    description: Optional[str] = None,
    status: Optional[TeamStatus] = None,
    profile_picture: Optional[str] = None,
    banner_picture: Optional[str] = None,
    name_min_length: int = 4,
    game_min_length: int = 2
) -> OrgResponse:
    """Update org details; only provided fields that differ are written"""
    try:
        with store.transaction() as session:
            if get_team_by_id(session, org_id, collection=ORGS) is None:
                return OrgResponse(success=False, code=[OrgResponseCode.INVALID_ORG_ID])

            codes = validate_group_fields(
                session, ORG_CODES,
                name=name,
                game=game,
                description=description,
                status=status,
                collection=ORGS,
                exclude_id=org_id,
                name_min_length=name_min_length,
                game_min_length=game_min_length
            )
            if codes:
                return OrgResponse(success=False, code=codes)

            fields = group_fields(name, game, description, status, profile_picture, banner_picture)
            outcome = update_team_record(session, org_id, fields, collection=ORGS)
            if outcome == UpdateOutcome.NOT_FOUND:
                logger.error(f"Org {org_id} vanished during update")
                raise TransactionAborted(OrgResponseCode.ORG_UPDATING_FAILED)
            if outcome == UpdateOutcome.NO_CHANGES:
                return OrgResponse(success=False, code=[OrgResponseCode.NO_FIELDS_TO_UPDATE])

            org = get_team_by_id(session, org_id, collection=ORGS)
    except TransactionAborted as e:
        return OrgResponse(success=False, code=[e.code])

    return OrgResponse(success=True, code=[OrgResponseCode.ORG_UPDATING_SUCCESS], org=Org.model_validate(org))

def remove_user_from_org(
    store: DocumentStore,
    org_id: Optional[str],
    removed_by: Optional[str],
    user_to_remove: Optional[str]
) -> ServiceResponse:
    """Remove a non-owner member from an org (remover must be Owner or Manager)"""
    codes: List[OrgResponseCode] = []
    if not org_id:
        codes.append(OrgResponseCode.ORG_ID_MISSING)
    if not removed_by:
        codes.append(OrgResponseCode.REMOVER_ID_MISSING)
    if not user_to_remove:
        codes.append(OrgResponseCode.USER_TO_REMOVE_ID_MISSING)
    if codes:
        return ServiceResponse(success=False, code=codes)

    try:
        with store.transaction() as session:
            if get_team_by_id(session, org_id, collection=ORGS) is None:
                return ServiceResponse(success=False, code=[OrgResponseCode.INVALID_ORG_ID])

            remover = find_member(session, org_id, removed_by, collection=ORG_MEMBERS, group_key=ORG_KEY)
            if not member_has_any_role(remover, MANAGING_ROLES):
                codes.append(OrgResponseCode.REMOVE_USER_ACCESS_DENIED)

            target = find_member(session, org_id, user_to_remove, collection=ORG_MEMBERS, group_key=ORG_KEY)
            if target is None:
                codes.append(OrgResponseCode.USER_TO_REMOVE_NOT_IN_ORG)
            elif member_has_any_role(target, [TeamRole.OWNER]):
                codes.append(OrgResponseCode.CANT_REMOVE_ORG_OWNER)

            if codes:
                return ServiceResponse(success=False, code=codes)

            try:
                remove_member_from_team(session, org_id, target["id"], collection=ORGS)
                if not remove_member(session, org_id, target["id"], collection=ORG_MEMBERS, group_key=ORG_KEY):
                    raise TransactionAborted(OrgResponseCode.USER_REMOVED_FAILED)
            except NotFoundError as e:
                logger.error(f"Failed to remove user {user_to_remove} from org {org_id}: {e}")
                raise TransactionAborted(OrgResponseCode.USER_REMOVED_FAILED) from e
    except TransactionAborted as e:
        return ServiceResponse(success=False, code=[e.code])

    logger.info(f"User {user_to_remove} removed from org {org_id} by {removed_by}")
    return ServiceResponse(success=True, code=[OrgResponseCode.USER_REMOVED_SUCCESS])
