"""
Tests for teamhub/services/team/validation.py
"""

import pytest

from teamhub.errors import TeamResponseCode as C, OrgResponseCode as O
from teamhub.services.team.types import ORGS
from teamhub.services.team.validation import (
    TEAM_CODES,
    ORG_CODES,
    is_blank,
    is_valid_status,
    validate_group_fields,
    group_fields,
)

from conftest import OWNER


@pytest.mark.parametrize("value,expected", [
    (None, True),
    ("", True),
    ("   ", True),
    (42, True),
    ("x", False),
])
def test_is_blank(value, expected):
    assert is_blank(value) is expected


def test_is_valid_status():
    assert is_valid_status("Public")
    assert is_valid_status("Private")
    assert not is_valid_status("public")
    assert not is_valid_status(None)


def test_creating_requires_every_field(store, users):
    with store.read() as session:
        errors = validate_group_fields(session, TEAM_CODES, creating=True)
    assert errors == [
        C.INVALID_TEAM_NAME,
        C.INVALID_GAME_NAME,
        C.INVALID_TEAM_DESCRIPTION,
        C.INVALID_OWNER_ID,
        C.INVALID_TEAM_STATUS,
    ]


def test_partial_checks_only_given_fields(store, users):
    with store.read() as session:
        assert validate_group_fields(session, TEAM_CODES) == []
        assert validate_group_fields(session, TEAM_CODES, description=" ") == [C.INVALID_TEAM_DESCRIPTION]


def test_codes_follow_group_kind(store, users):
    with store.read() as session:
        errors = validate_group_fields(
            session, ORG_CODES, name="abc", game="Go", description="d", owner_id=OWNER,
            status="Public", creating=True, collection=ORGS
        )
    assert errors == [O.INVALID_ORG_NAME_LENGTH]


def test_duplicate_name_is_scoped_to_collection(store, team):
    with store.read() as session:
        assert validate_group_fields(session, TEAM_CODES, name="Night Owls") == [C.DUPLICATE_TEAM_NAME]
        assert validate_group_fields(session, TEAM_CODES, name="Night Owls", exclude_id=team.id) == []
        assert validate_group_fields(session, ORG_CODES, name="Night Owls", collection=ORGS) == []


def test_group_fields_strips_and_marks_missing():
    fields = group_fields(name="  Owls ", status="Public")
    assert fields == {
        "name": "Owls",
        "game": None,
        "description": None,
        "status": "Public",
        "profile_picture": None,
        "banner_picture": None,
    }
