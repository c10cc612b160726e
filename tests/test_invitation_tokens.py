"""
Tests for teamhub/services/auth/invitation_tokens.py

Coverage targets:
- parse_duration: numeric, unit strings, long forms, invalid input
- issue/verify round trip against the codec clock
- Expiry, tampering, wrong secret, wrong purpose, garbage input
"""

import jwt
import pytest
from datetime import datetime, timedelta, UTC

from teamhub.services.auth import InvitationTokenCodec, parse_duration
from teamhub.errors import TokenError

from conftest import FakeClock, TEST_SECRET


class TestParseDuration:

    @pytest.mark.parametrize("value,expected", [
        (60, timedelta(seconds=60)),
        (1.5, timedelta(seconds=1.5)),
        ("90s", timedelta(seconds=90)),
        ("15m", timedelta(minutes=15)),
        ("2h", timedelta(hours=2)),
        ("1d", timedelta(days=1)),
        ("2 weeks", timedelta(weeks=2)),
        ("3 days", timedelta(days=3)),
        ("10 mins", timedelta(minutes=10)),
        ("1y", timedelta(days=365.25)),
        ("500ms", timedelta(milliseconds=500)),
        ("120", timedelta(seconds=120)),
        ("1.5h", timedelta(minutes=90)),
        ("1D", timedelta(days=1)),
        (timedelta(hours=1), timedelta(hours=1)),
    ])
    def test_valid_durations(self, value, expected):
        assert parse_duration(value) == expected

    @pytest.mark.parametrize("value", [None, "", "soon", "1 fortnight", "-1d", "0", 0, -5, True, [], "d1"])
    def test_invalid_durations(self, value):
        with pytest.raises(ValueError):
            parse_duration(value)


class TestCodec:

    def test_issue_then_verify(self, codec):
        token = codec.issue("1d")
        assert codec.verify(token) is True

    def test_token_claims(self, codec, clock):
        token = codec.issue("2h")
        payload = jwt.decode(token, TEST_SECRET, algorithms=["HS256"], options={"verify_exp": False})
        assert payload["purpose"] == "team_invitation"
        assert payload["exp"] - payload["iat"] == 2 * 60 * 60
        assert payload["jti"]

    def test_tokens_are_unique(self, codec):
        assert codec.issue("1d") != codec.issue("1d")

    def test_expires_after_duration(self, codec, clock):
        token = codec.issue("1h")
        clock.advance(timedelta(minutes=59))
        assert codec.verify(token) is True
        clock.advance(timedelta(minutes=2))
        assert codec.verify(token) is False

    def test_token_issued_in_the_past_is_expired(self):
        past = FakeClock(datetime.now(UTC) - timedelta(days=2))
        stale = InvitationTokenCodec(TEST_SECRET, clock=past).issue("1d")
        assert InvitationTokenCodec(TEST_SECRET).verify(stale) is False

    def test_expires_at(self, codec, clock):
        token = codec.issue("1d")
        expected = int((clock.now + timedelta(days=1)).timestamp())
        assert int(codec.expires_at(token).timestamp()) == expected

    def test_tampered_token_fails(self, codec):
        token = codec.issue("1d")
        header, payload, signature = token.split(".")
        tampered = ".".join([header, payload, signature[::-1]])
        assert codec.verify(tampered) is False

    def test_wrong_secret_fails(self, codec):
        other = InvitationTokenCodec("another-secret-that-is-long-enough-123")
        assert other.verify(codec.issue("1d")) is False

    def test_wrong_purpose_fails(self, codec):
        now = datetime.now(UTC)
        token = jwt.encode(
            {"purpose": "session", "exp": int((now + timedelta(days=1)).timestamp()), "iat": int(now.timestamp())},
            TEST_SECRET,
            algorithm="HS256"
        )
        assert codec.verify(token) is False

    @pytest.mark.parametrize("garbage", [None, "", "not-a-token", "a.b.c", 12345])
    def test_garbage_never_raises(self, codec, garbage):
        assert codec.verify(garbage) is False
        assert codec.expires_at(garbage) is None

    def test_issue_rejects_bad_duration(self, codec):
        with pytest.raises(ValueError):
            codec.issue("forever")

    def test_empty_secret_rejected(self):
        with pytest.raises(TokenError):
            InvitationTokenCodec("")

    def test_from_settings(self, settings):
        codec = InvitationTokenCodec.from_settings(settings)
        assert codec.algorithm == "HS256"
        assert codec.verify(codec.issue(settings.invitation_default_duration))
