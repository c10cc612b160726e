"""
Team Invitations Module

Invitation lifecycle: send, accept, reject, withdraw, list.

State machine: Sent -> {Accepted, Rejected, Withdrawn, Expired}. Only Sent
invitations can move, and a Sent invitation is live only while its signed
expiry token still verifies. A Sent invitation found with a dead token is
rewritten to Expired in the same transaction that read it.
"""

import logging
from typing import Optional, List, Dict

from teamhub.db import DocumentStore, DocumentSession
from teamhub.errors import TeamResponseCode, NotFoundError, TransactionAborted
from teamhub.schemas import TeamInvitation, InvitationResponse, InvitationListResponse
from teamhub.services.auth import InvitationTokenCodec, parse_duration
from teamhub.services.team.types import (
    InvitationStatus,
    INVITABLE_ROLES,
    MANAGING_ROLES,
    normalize_roles,
)
from teamhub.services.team.storage import (
    user_exists,
    get_team_by_id,
    find_member,
    member_has_any_role,
    upsert_member,
    add_member_to_team,
    insert_invitation,
    find_invitation,
    find_latest_sent_invitation,
    set_invitation_status,
    list_user_invitations,
)
from teamhub.structured_logger import log_with_context

logger = logging.getLogger(__name__)


def _failure(*codes: TeamResponseCode) -> InvitationResponse:
    return InvitationResponse(success=False, code=list(codes))


def is_invitation_live(
    session: DocumentSession,
    codec: InvitationTokenCodec,
    invitation: Dict
) -> bool:
    """
    True when the invitation is Sent and its token still verifies.

    A Sent invitation whose token no longer verifies is marked Expired
    (mutates both the stored row and `invitation`).
    """
    if invitation.get("status") != InvitationStatus.SENT.value:
        return False
    if codec.verify(invitation.get("expiration")):
        return True

    set_invitation_status(session, invitation["id"], InvitationStatus.EXPIRED)
    invitation["status"] = InvitationStatus.EXPIRED.value
    logger.info(f"Invitation {invitation['id']} expired")
    return False


def _validate_roles(roles) -> bool:
    """
    Invitations grant Manager and/or Member only, and at least one role.

    Owner is never invitable: it moves solely through transfer_ownership,
    which keeps exactly one Owner per team. NOT_MENTIONED is only the
    placeholder left behind when Owner is stripped.
    """
    if not isinstance(roles, (list, tuple, set)) or not roles:
        return False
    return all(getattr(role, "value", role) in INVITABLE_ROLES for role in roles)


def _load_sent_invitation(
    session: DocumentSession,
    codec: InvitationTokenCodec,
    invitation_id: str
):
    """
    Shared guard for accept/reject/withdraw.

    Returns (invitation, None) when the invitation is live, else
    (None, failure code).
    """
    invitation = find_invitation(session, invitation_id)
    if invitation is None or invitation.get("status") != InvitationStatus.SENT.value:
        return None, TeamResponseCode.INVITATION_NOT_FOUND
    if not is_invitation_live(session, codec, invitation):
        return None, TeamResponseCode.INVITATION_EXPIRED
    return invitation, None


# ========================================================================
# SEND
# ========================================================================

def send_invitation(
    store: DocumentStore,
    codec: InvitationTokenCodec,
    team_id: Optional[str],
    send_by: Optional[str],
    send_to: Optional[str],
    roles: Optional[List[str]],
    expiration
) -> InvitationResponse:
    """
    Invite `send_to` into a team with `roles`, valid for `expiration`.

    All checks and the insert run in one write transaction, so two
    concurrent identical sends produce one invitation and one
    DUPLICATE_INVITATION.
    """
    with store.transaction() as session:
        codes: List[TeamResponseCode] = []

        if get_team_by_id(session, team_id) is None:
            codes.append(TeamResponseCode.INVALID_TEAM_ID)
        if not user_exists(session, send_by):
            codes.append(TeamResponseCode.INVALID_SENDER_ID)
        if not user_exists(session, send_to):
            codes.append(TeamResponseCode.INVALID_RECEIVER_ID)

        try:
            parse_duration(expiration)
        except ValueError:
            codes.append(TeamResponseCode.INVALID_EXPIRATION)

        if not _validate_roles(roles):
            codes.append(TeamResponseCode.INVALID_ROLE)

        if codes:
            return _failure(*codes)

        normalized = normalize_roles(roles)

        sender = find_member(session, team_id, send_by)
        if not member_has_any_role(sender, MANAGING_ROLES):
            codes.append(TeamResponseCode.INVITATION_SEND_ACCESS_DENIED)

        recipient = find_member(session, team_id, send_to)
        if recipient and all(role in (recipient.get("roles") or []) for role in normalized):
            codes.append(TeamResponseCode.USER_ALREADY_IN_TEAM)

        if codes:
            return _failure(*codes)

        existing = find_latest_sent_invitation(session, team_id, send_to, normalized)
        if existing and is_invitation_live(session, codec, existing):
            logger.info(f"Duplicate invitation for {send_to} in team {team_id}")
            return _failure(TeamResponseCode.DUPLICATE_INVITATION)

        invitation = insert_invitation(session, {
            "team_id": team_id,
            "send_by": send_by,
            "send_to": send_to,
            "roles": normalized,
            "status": InvitationStatus.SENT.value,
            "expiration": codec.issue(expiration),
        })

    log_with_context(logger, "info", "Invitation sent", {
        "invitation_id": invitation["id"],
        "team_id": team_id,
    })
    return InvitationResponse(
        success=True,
        code=[TeamResponseCode.INVITATION_SENT],
        invitation=TeamInvitation.model_validate(invitation)
    )


# ========================================================================
# ACCEPT / REJECT / WITHDRAW
# ========================================================================

def accept_invitation(
    store: DocumentStore,
    codec: InvitationTokenCodec,
    invitation_id: Optional[str],
    accepted_by: Optional[str]
) -> InvitationResponse:
    """
    Accept a live invitation as its recipient.

    Marks it Accepted, grants the roles (merged into any existing
    membership) and links the member into the team, all or nothing.

    Raises:
        StorageError: if a write fails (the transaction is rolled back)
    """
    if not invitation_id:
        return _failure(TeamResponseCode.INVITATION_ID_MISSING)

    try:
        with store.transaction() as session:
            invitation, error = _load_sent_invitation(session, codec, invitation_id)
            if error:
                return _failure(error)

            if not accepted_by:
                return _failure(TeamResponseCode.ACCEPTER_ID_MISSING)
            if accepted_by != invitation["send_to"]:
                return _failure(TeamResponseCode.OTHER_USER_TRYING_TO_ACCEPT)

            try:
                set_invitation_status(session, invitation_id, InvitationStatus.ACCEPTED)
                member_id = upsert_member(
                    session,
                    {"team_id": invitation["team_id"], "user_id": accepted_by},
                    {"roles": invitation["roles"]}
                )
                add_member_to_team(session, invitation["team_id"], member_id)
            except NotFoundError as e:
                logger.error(f"Failed to accept invitation {invitation_id}: {e}")
                raise TransactionAborted(TeamResponseCode.INVITATION_FAILED_TO_ACCEPT) from e

            invitation = find_invitation(session, invitation_id)
    except TransactionAborted as e:
        return _failure(e.code)

    log_with_context(logger, "info", "Invitation accepted", {
        "invitation_id": invitation_id,
        "team_id": invitation["team_id"],
    })
    return InvitationResponse(
        success=True,
        code=[TeamResponseCode.INVITATION_ACCEPTED],
        invitation=TeamInvitation.model_validate(invitation)
    )


def reject_invitation(
    store: DocumentStore,
    codec: InvitationTokenCodec,
    invitation_id: Optional[str],
    rejected_by: Optional[str]
) -> InvitationResponse:
    """Reject a live invitation (recipient only)"""
    if not invitation_id:
        return _failure(TeamResponseCode.INVITATION_ID_MISSING)

    with store.transaction() as session:
        invitation, error = _load_sent_invitation(session, codec, invitation_id)
        if error:
            return _failure(error)

        if not rejected_by:
            return _failure(TeamResponseCode.REJECTOR_ID_MISSING)
        if rejected_by != invitation["send_to"]:
            return _failure(TeamResponseCode.OTHER_USER_TRYING_TO_REJECT)

        if not set_invitation_status(session, invitation_id, InvitationStatus.REJECTED):
            return _failure(TeamResponseCode.INVITATION_FAILED_TO_REJECT)
        invitation = find_invitation(session, invitation_id)

    logger.info(f"Invitation {invitation_id} rejected by {rejected_by}")
    return InvitationResponse(
        success=True,
        code=[TeamResponseCode.INVITATION_REJECTED],
        invitation=TeamInvitation.model_validate(invitation)
    )


def withdraw_invitation(
    store: DocumentStore,
    codec: InvitationTokenCodec,
    invitation_id: Optional[str],
    withdrawn_by: Optional[str]
) -> InvitationResponse:
    """Withdraw a live invitation (team Owner or Manager only)"""
    if not invitation_id:
        return _failure(TeamResponseCode.INVITATION_ID_MISSING)

    with store.transaction() as session:
        invitation, error = _load_sent_invitation(session, codec, invitation_id)
        if error:
            return _failure(error)

        if not withdrawn_by:
            return _failure(TeamResponseCode.WITHDRAWER_ID_MISSING)

        withdrawer = find_member(session, invitation["team_id"], withdrawn_by)
        if not member_has_any_role(withdrawer, MANAGING_ROLES):
            return _failure(TeamResponseCode.INVITATION_WITHDRAW_ACCESS_DENIED)

        if not set_invitation_status(session, invitation_id, InvitationStatus.WITHDRAWN):
            return _failure(TeamResponseCode.INVITATION_FAILED_TO_WITHDRAW)
        invitation = find_invitation(session, invitation_id)

    logger.info(f"Invitation {invitation_id} withdrawn by {withdrawn_by}")
    return InvitationResponse(
        success=True,
        code=[TeamResponseCode.INVITATION_WITHDRAWN],
        invitation=TeamInvitation.model_validate(invitation)
    )


# ========================================================================
# LIST
# ========================================================================

def list_invitations(
    store: DocumentStore,
    codec: InvitationTokenCodec,
    invited_user_id: Optional[str],
    status: Optional[InvitationStatus] = None
) -> InvitationListResponse:
    """
    All invitations addressed to a user, newest first, each flagged with
    is_live. `status` narrows the result to one stored status, evaluated
    after stale Sent invitations have been expired.
    """
    codes: List[TeamResponseCode] = []
    if not invited_user_id:
        codes.append(TeamResponseCode.INVITED_USER_ID_MISSING)

    wanted = None
    if status is not None:
        try:
            wanted = InvitationStatus(status).value
        except ValueError:
            codes.append(TeamResponseCode.INVALID_INVITATION_STATUS)

    if codes:
        return InvitationListResponse(success=False, code=codes)

    # Write transaction: reading may expire stale Sent invitations
    with store.transaction() as session:
        docs = list_user_invitations(session, invited_user_id)
        invitations = []
        for doc in docs:
            live = is_invitation_live(session, codec, doc)
            if wanted is not None and doc["status"] != wanted:
                continue
            invitations.append(TeamInvitation.model_validate({**doc, "is_live": live}))

    return InvitationListResponse(
        success=True,
        code=[TeamResponseCode.INVITATIONS_FETCHED],
        invitations=invitations
    )
