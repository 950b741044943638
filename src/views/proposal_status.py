"""Forward-only proposal status machine.

draft -> sent -> viewed -> accepted | rejected. Nothing moves backwards and
draft only leaves through publishing.
"""

import secrets
from datetime import datetime, timezone
from typing import Dict, FrozenSet, Optional, NamedTuple

from src.core.exceptions import InvalidTransitionError
from src.models import ProposalStatus

TRANSITIONS: Dict[ProposalStatus, FrozenSet[ProposalStatus]] = {
    ProposalStatus.DRAFT: frozenset({ProposalStatus.SENT}),
    ProposalStatus.SENT: frozenset({ProposalStatus.VIEWED}),
    ProposalStatus.VIEWED: frozenset({ProposalStatus.ACCEPTED, ProposalStatus.REJECTED}),
    ProposalStatus.ACCEPTED: frozenset(),
    ProposalStatus.REJECTED: frozenset(),
}

_RANK = {
    ProposalStatus.DRAFT: 0,
    ProposalStatus.SENT: 1,
    ProposalStatus.VIEWED: 2,
    ProposalStatus.ACCEPTED: 3,
    ProposalStatus.REJECTED: 3,
}


class StatusChange(NamedTuple):
    """Fields a transition writes. Empty ``updates`` means nothing changes."""
    status: ProposalStatus
    share_token: Optional[str]
    viewed_at: Optional[datetime]
    updates: dict


def can_transition(current: ProposalStatus, target: ProposalStatus) -> bool:
    return target in TRANSITIONS[current]


def is_regression(current: ProposalStatus, target: ProposalStatus) -> bool:
    return _RANK[target] < _RANK[current]


def new_share_token() -> str:
    """Opaque, unguessable token for the public link."""
    return secrets.token_urlsafe(24)


def publish(status: ProposalStatus, share_token: Optional[str]) -> StatusChange:
    """
    Publish a proposal.

    Issues a token only when none exists. Draft moves to sent; later states
    keep their status so re-publishing never regresses.
    """
    updates = {}
    token = share_token
    if not token:
        token = new_share_token()
        updates["share_token"] = token

    new_status = status
    if status == ProposalStatus.DRAFT:
        new_status = ProposalStatus.SENT
        updates["status"] = new_status.value

    return StatusChange(new_status, token, None, updates)


def mark_viewed(
    status: ProposalStatus,
    viewed_at: Optional[datetime],
    now: Optional[datetime] = None
) -> StatusChange:
    """First public resolution while sent moves to viewed; later views are no-ops."""
    if status != ProposalStatus.SENT:
        return StatusChange(status, None, viewed_at, {})

    stamp = now or datetime.now(timezone.utc)
    return StatusChange(
        ProposalStatus.VIEWED,
        None,
        stamp,
        {"status": ProposalStatus.VIEWED.value, "viewed_at": stamp.isoformat()},
    )


def decide(status: ProposalStatus, target: ProposalStatus) -> StatusChange:
    """Client decision (accept or reject), only valid from viewed."""
    if target not in (ProposalStatus.ACCEPTED, ProposalStatus.REJECTED):
        raise InvalidTransitionError(f"'{target.value}' is not a client decision")
    if not can_transition(status, target):
        raise InvalidTransitionError(
            f"Cannot move proposal from '{status.value}' to '{target.value}'"
        )
    return StatusChange(target, None, None, {"status": target.value})


def accept(status: ProposalStatus) -> StatusChange:
    return decide(status, ProposalStatus.ACCEPTED)


def reject(status: ProposalStatus) -> StatusChange:
    return decide(status, ProposalStatus.REJECTED)
