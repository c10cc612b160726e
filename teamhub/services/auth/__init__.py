"""Invitation token signing for the team/org services"""

from teamhub.services.auth.invitation_tokens import (
    InvitationTokenCodec,
    parse_duration,
    TOKEN_PURPOSE,
)

__all__ = ["InvitationTokenCodec", "parse_duration", "TOKEN_PURPOSE"]
