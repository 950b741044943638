"""Tests for the proposal status machine."""

from datetime import datetime, timezone

import pytest

from src.core.exceptions import InvalidTransitionError
from src.models import ProposalStatus
from src.views import proposal_status

ALL = list(ProposalStatus)


class TestPublish:

    def test_draft_gets_token_and_moves_to_sent(self):
        change = proposal_status.publish(ProposalStatus.DRAFT, None)

        assert change.status == ProposalStatus.SENT
        assert change.share_token
        assert change.updates == {"share_token": change.share_token, "status": "sent"}

    def test_existing_token_is_reused(self):
        change = proposal_status.publish(ProposalStatus.SENT, "tok-1")

        assert change.share_token == "tok-1"
        assert change.status == ProposalStatus.SENT
        assert change.updates == {}

    @pytest.mark.parametrize("status", [
        ProposalStatus.VIEWED,
        ProposalStatus.ACCEPTED,
        ProposalStatus.REJECTED,
    ])
    def test_republishing_never_regresses(self, status):
        change = proposal_status.publish(status, "tok-1")
        assert change.status == status
        assert change.share_token == "tok-1"

    def test_tokens_are_unique(self):
        tokens = {proposal_status.new_share_token() for _ in range(50)}
        assert len(tokens) == 50


class TestMarkViewed:

    def test_sent_becomes_viewed(self):
        now = datetime(2024, 5, 1, tzinfo=timezone.utc)
        change = proposal_status.mark_viewed(ProposalStatus.SENT, None, now=now)

        assert change.status == ProposalStatus.VIEWED
        assert change.viewed_at == now
        assert change.updates["viewed_at"] == now.isoformat()

    @pytest.mark.parametrize("status", [s for s in ALL if s != ProposalStatus.SENT])
    def test_other_states_unchanged(self, status):
        change = proposal_status.mark_viewed(status, None)
        assert change.status == status
        assert change.updates == {}


class TestDecisions:

    def test_accept_from_viewed(self):
        assert proposal_status.accept(ProposalStatus.VIEWED).status == ProposalStatus.ACCEPTED

    def test_reject_from_viewed(self):
        assert proposal_status.reject(ProposalStatus.VIEWED).status == ProposalStatus.REJECTED

    @pytest.mark.parametrize("status", [
        ProposalStatus.DRAFT,
        ProposalStatus.SENT,
        ProposalStatus.ACCEPTED,
        ProposalStatus.REJECTED,
    ])
    def test_accept_rejected_elsewhere(self, status):
        with pytest.raises(InvalidTransitionError):
            proposal_status.accept(status)

    def test_decide_requires_a_decision(self):
        with pytest.raises(InvalidTransitionError):
            proposal_status.decide(ProposalStatus.VIEWED, ProposalStatus.SENT)


class TestNoRegression:

    @pytest.mark.parametrize("current", ALL)
    @pytest.mark.parametrize("target", ALL)
    def test_allowed_transitions_only_move_forward(self, current, target):
        if proposal_status.can_transition(current, target):
            assert not proposal_status.is_regression(current, target)

    @pytest.mark.parametrize("current", [s for s in ALL if s != ProposalStatus.DRAFT])
    def test_nothing_returns_to_draft(self, current):
        assert not proposal_status.can_transition(current, ProposalStatus.DRAFT)
