"""
Invitation Token Codec

Invitation expiry is not stored as a plain timestamp: each invitation
carries a signed JWT whose `exp` claim is the real deadline. A tampered
or foreign token never verifies, so a stored row cannot be made live
again by editing it.

    codec = InvitationTokenCodec.from_settings()
    token = codec.issue("1d")
    codec.verify(token)   # True until the deadline passes
"""

import re
import secrets
import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional, Union

import jwt

from teamhub.errors import TokenError, ErrorType

logger = logging.getLogger(__name__)

TOKEN_PURPOSE = "team_invitation"

Clock = Callable[[], datetime]
Duration = Union[int, float, str, timedelta]

_DURATION_RE = re.compile(
    r"^(?P<value>-?(?:\d+)?\.?\d+)\s*"
    r"(?P<unit>milliseconds?|msecs?|ms|seconds?|secs?|s|minutes?|mins?|m|"
    r"hours?|hrs?|h|days?|d|weeks?|w|years?|yrs?|y)?$",
    re.IGNORECASE
)

_UNIT_SECONDS = {
    "ms": 0.001,
    "s": 1,
    "m": 60,
    "h": 60 * 60,
    "d": 24 * 60 * 60,
    "w": 7 * 24 * 60 * 60,
    "y": 365.25 * 24 * 60 * 60,
}


def _unit_key(unit: Optional[str]) -> str:
    if not unit:
        return "s"
    unit = unit.lower()
    if unit.startswith(("ms", "milli")):
        return "ms"
    if unit.startswith("mi"):
        return "m"
    if unit.startswith("hr"):
        return "h"
    if unit.startswith("yr"):
        return "y"
    return unit[0]


def parse_duration(value: Duration) -> timedelta:
    """
    Convert an invitation lifetime to a timedelta.

    Accepts integers/floats (seconds), timedeltas, and strings such as
    "90s", "15m", "2h", "1d", "2 weeks", "1y". A bare numeric string is
    seconds.

    Raises:
        ValueError: if the value is missing, unparseable, or not positive
    """
    if value is None or isinstance(value, bool):
        raise ValueError(f"Invalid duration: {value!r}")

    if isinstance(value, timedelta):
        delta = value
    elif isinstance(value, (int, float)):
        delta = timedelta(seconds=value)
    elif isinstance(value, str):
        match = _DURATION_RE.match(value.strip())
        if not match:
            raise ValueError(f"Invalid duration: {value!r}")
        amount = float(match.group("value"))
        delta = timedelta(seconds=amount * _UNIT_SECONDS[_unit_key(match.group("unit"))])
    else:
        raise ValueError(f"Invalid duration type: {type(value).__name__}")

    if delta <= timedelta(0):
        raise ValueError(f"Duration must be positive: {value!r}")
    return delta


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class InvitationTokenCodec:
    """Issues and verifies signed invitation expiry tokens"""

    def __init__(self, secret_key: str, algorithm: str = "HS256", clock: Optional[Clock] = None):
        if not secret_key:
            raise TokenError("Invitation signing secret is empty", error_type=ErrorType.TOKEN_INVALID)
        self._secret_key = secret_key
        self.algorithm = algorithm
        self.clock = clock or _utc_now

    @classmethod
    def from_settings(cls, settings=None, clock: Optional[Clock] = None) -> "InvitationTokenCodec":
        if settings is None:
            from teamhub.config import get_settings
            settings = get_settings()
        return cls(
            settings.invitation_jwt_secret_key,
            algorithm=settings.invitation_jwt_algorithm,
            clock=clock
        )

    def issue(self, duration: Duration) -> str:
        """
        Sign a token that expires `duration` from now.

        Raises:
            ValueError: if the duration is invalid
        """
        delta = parse_duration(duration)
        issued_at = self.clock()
        expire = issued_at + delta

        payload = {
            "purpose": TOKEN_PURPOSE,
            "exp": int(expire.timestamp()),
            "iat": int(issued_at.timestamp()),
            "jti": secrets.token_urlsafe(16),
        }

        token: str = jwt.encode(payload, self._secret_key, algorithm=self.algorithm)
        return token

    def expires_at(self, token: str) -> Optional[datetime]:
        """Deadline encoded in a correctly signed token, else None"""
        payload = self._decode(token)
        if payload is None:
            return None
        return datetime.fromtimestamp(payload["exp"], tz=timezone.utc)

    def verify(self, token: str) -> bool:
        """
        True iff the token is correctly signed for invitations and its
        deadline is still in the future. Never raises.
        """
        payload = self._decode(token)
        if payload is None:
            return False

        if payload["exp"] <= self.clock().timestamp():
            logger.debug("Invitation token expired")
            return False
        return True

    def _decode(self, token: str) -> Optional[dict]:
        if not token or not isinstance(token, str):
            return None
        try:
            # Expiry is compared against the codec clock, not wall time
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self.algorithm],
                options={"verify_exp": False, "verify_iat": False, "require": ["exp", "iat"]}
            )
        except jwt.PyJWTError as e:
            logger.warning(f"Invitation token rejected: {e}")
            return None

        if payload.get("purpose") != TOKEN_PURPOSE:
            logger.warning(f"Invitation token has wrong purpose: {payload.get('purpose')}")
            return None
        if not isinstance(payload.get("exp"), (int, float)):
            return None
        return payload
