"""
Team/Org Field Validation

Teams and orgs share one document shape, so create/update validation is
shared too. Each group kind passes its own GroupCodes; the checks run in
a fixed order and every failure is reported, not just the first.
"""

from dataclasses import dataclass
from typing import Optional, List, Dict, Any

from teamhub.db import DocumentSession
from teamhub.errors import TeamResponseCode, OrgResponseCode, ResponseCode
from teamhub.services.team.types import TeamStatus, TEAMS
from teamhub.services.team.storage import user_exists, team_name_exists


@dataclass(frozen=True)
class GroupCodes:
    """Response codes a group kind reports for each validation failure"""
    invalid_name: ResponseCode
    invalid_name_length: ResponseCode
    duplicate_name: ResponseCode
    invalid_game: ResponseCode
    invalid_game_length: ResponseCode
    invalid_description: ResponseCode
    invalid_owner: ResponseCode
    invalid_status: ResponseCode


TEAM_CODES = GroupCodes(
    invalid_name=TeamResponseCode.INVALID_TEAM_NAME,
    invalid_name_length=TeamResponseCode.INVALID_TEAM_NAME_LENGTH,
    duplicate_name=TeamResponseCode.DUPLICATE_TEAM_NAME,
    invalid_game=TeamResponseCode.INVALID_GAME_NAME,
    invalid_game_length=TeamResponseCode.INVALID_GAME_NAME_LENGTH,
    invalid_description=TeamResponseCode.INVALID_TEAM_DESCRIPTION,
    invalid_owner=TeamResponseCode.INVALID_OWNER_ID,
    invalid_status=TeamResponseCode.INVALID_TEAM_STATUS,
)

ORG_CODES = GroupCodes(
    invalid_name=OrgResponseCode.INVALID_ORG_NAME,
    invalid_name_length=OrgResponseCode.INVALID_ORG_NAME_LENGTH,
    duplicate_name=OrgResponseCode.DUPLICATE_ORG_NAME,
    invalid_game=OrgResponseCode.INVALID_GAME_NAME,
    invalid_game_length=OrgResponseCode.INVALID_GAME_NAME_LENGTH,
    invalid_description=OrgResponseCode.INVALID_ORG_DESCRIPTION,
    invalid_owner=OrgResponseCode.INVALID_OWNER_ID,
    invalid_status=OrgResponseCode.INVALID_ORG_STATUS,
)


def is_blank(value: Optional[str]) -> bool:
    return value is None or not isinstance(value, str) or not value.strip()


def is_valid_status(status) -> bool:
    try:
        TeamStatus(status)
        return True
    except ValueError:
        return False


def validate_group_fields(
    session: DocumentSession,
    codes: GroupCodes,
    name: Optional[str] = None,
    game: Optional[str] = None,
    description: Optional[str] = None,
    status=None,
    owner_id: Optional[str] = None,
    creating: bool = False,
    collection: str = TEAMS,
    exclude_id: Optional[str] = None,
    name_min_length: int = 4,
    game_min_length: int = 2
) -> List[ResponseCode]:
    """
    Validate team/org fields.

    With `creating=True` every field is required and `owner_id` must be a
    known user; otherwise only the fields that were passed are checked.
    Name uniqueness is per collection, ignoring `exclude_id`.
    """
    errors: List[ResponseCode] = []

    if creating or name is not None:
        if is_blank(name):
            errors.append(codes.invalid_name)
        elif len(name.strip()) < name_min_length:
            errors.append(codes.invalid_name_length)
        elif team_name_exists(session, name.strip(), collection=collection, exclude_id=exclude_id):
            errors.append(codes.duplicate_name)

    if creating or game is not None:
        if is_blank(game):
            errors.append(codes.invalid_game)
        elif len(game.strip()) < game_min_length:
            errors.append(codes.invalid_game_length)

    if (creating or description is not None) and is_blank(description):
        errors.append(codes.invalid_description)

    if creating and not user_exists(session, owner_id):
        errors.append(codes.invalid_owner)

    if (creating or status is not None) and not is_valid_status(status):
        errors.append(codes.invalid_status)

    return errors


def group_fields(
    name: Optional[str] = None,
    game: Optional[str] = None,
    description: Optional[str] = None,
    status=None,
    profile_picture: Optional[str] = None,
    banner_picture: Optional[str] = None
) -> Dict[str, Any]:
    """Stored form of already validated fields; None means not provided"""
    return {
        "name": name.strip() if name is not None else None,
        "game": game.strip() if game is not None else None,
        "description": description.strip() if description is not None else None,
        "status": TeamStatus(status).value if status is not None else None,
        "profile_picture": profile_picture,
        "banner_picture": banner_picture,
    }
