"""
Shared pytest fixtures for TeamHub tests.

Provides:
- Settings fixture (testing environment, temp data dir)
- Document store fixture (fresh SQLite file per test)
- Invitation token codec with a controllable clock
- Seeded users and a ready-made team
- `teamhub` logger state restored after configure_logging
"""

import sys
import logging
import pytest
from pathlib import Path
from datetime import datetime, timedelta, UTC

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from teamhub.config import TeamHubSettings
from teamhub.db import DocumentStore
from teamhub.services.auth import InvitationTokenCodec
from teamhub.services.team import teams as teams_mod
from teamhub.services.team.types import USERS

TEST_SECRET = "test-invitation-secret-0123456789abcdef"

OWNER = "user-owner"
MANAGER = "user-manager"
MEMBER = "user-member"
OUTSIDER = "user-outsider"
INVITEE = "user-invitee"

ALL_USERS = [OWNER, MANAGER, MEMBER, OUTSIDER, INVITEE]


class FakeClock:
    """Controllable UTC clock for the token codec"""

    def __init__(self, start: datetime = None):
        self.now = start or datetime.now(UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now = self.now + delta


# ============================================================================
# Core Fixtures
# ============================================================================

@pytest.fixture
def settings(tmp_path: Path) -> TeamHubSettings:
    return TeamHubSettings(
        environment="testing",
        data_dir=tmp_path / "data",
        invitation_jwt_secret_key=TEST_SECRET,
        invitation_default_duration="1d",
    )


@pytest.fixture
def store(tmp_path: Path) -> DocumentStore:
    """Fresh, initialized document store"""
    return DocumentStore(tmp_path / "teamhub.db", timeout=10.0).initialize()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def codec(clock: FakeClock) -> InvitationTokenCodec:
    return InvitationTokenCodec(TEST_SECRET, clock=clock)


@pytest.fixture
def users(store: DocumentStore) -> list:
    """Seed the users collection"""
    with store.transaction() as session:
        for user_id in ALL_USERS:
            session.insert_one(USERS, {"id": user_id, "username": user_id.split("-", 1)[1]})
    return list(ALL_USERS)


# ============================================================================
# Team Fixtures
# ============================================================================

def add_member(store: DocumentStore, team_id: str, user_id: str, roles: list) -> str:
    """Grant membership directly through the storage layer"""
    from teamhub.services.team.storage import upsert_member, add_member_to_team

    with store.transaction() as session:
        member_id = upsert_member(session, {"team_id": team_id, "user_id": user_id}, {"roles": roles})
        add_member_to_team(session, team_id, member_id)
    return member_id


@pytest.fixture
def team(store: DocumentStore, users: list):
    """Team owned by OWNER"""
    response = teams_mod.create_team(store, "Night Owls", "Chess", "Late night blitz", OWNER)
    assert response.success, response.code
    return response.team


@pytest.fixture
def staffed_team(store: DocumentStore, team):
    """Team with OWNER, a MANAGER and a MEMBER"""
    add_member(store, team.id, MANAGER, ["Manager"])
    add_member(store, team.id, MEMBER, ["Member"])
    return team


@pytest.fixture
def teamhub_logger():
    """Restore the `teamhub` logger after configure_logging touches it"""
    logger = logging.getLogger("teamhub")
    saved = (list(logger.handlers), logger.level, logger.propagate)
    yield logger
    logger.handlers[:] = saved[0]
    logger.setLevel(saved[1])
    logger.propagate = saved[2]
