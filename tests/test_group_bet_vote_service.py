"""
Tests for GroupBetVoteService.
"""

import pytest

from domain.models.proposal import ProposalStatus
from services import error_codes
from services.group_bet_vote_service import GroupBetVoteService, VoteEvent

MESSAGE_ID = 555
PROPOSER_ID = 100


@pytest.fixture
def service():
    return GroupBetVoteService(pass_threshold=1, reject_threshold=2, proposal_ttl_seconds=3600)


@pytest.fixture
def proposal(service):
    return service.register_proposal(MESSAGE_ID, PROPOSER_ID)


class TestRegistration:
    def test_register_is_idempotent(self, service, proposal):
        again = service.register_proposal(MESSAGE_ID, 999)
        assert again is proposal
        assert again.proposer_id == PROPOSER_ID
        assert len(service) == 1

    def test_new_proposal_is_open(self, proposal):
        assert proposal.status is ProposalStatus.OPEN
        assert proposal.announced is False
        assert proposal.upvoters == set()
        assert proposal.downvoters == set()

    def test_vote_on_untracked_proposal(self, service):
        result = service.cast_upvote(404, 200)
        assert not result
        assert result.error_code == error_codes.PROPOSAL_NOT_FOUND


class TestUpvotes:
    def test_first_upvote_passes_with_threshold_one(self, service, proposal):
        result = service.cast_upvote(MESSAGE_ID, 200)

        assert result.success
        assert result.value.event is VoteEvent.PASSED
        assert result.value.is_terminal
        assert proposal.status is ProposalStatus.PASSED
        assert proposal.announced is True
        assert proposal.for_voters() == [PROPOSER_ID, 200]

    def test_progress_below_threshold(self):
        service = GroupBetVoteService(pass_threshold=3, reject_threshold=2)
        service.register_proposal(MESSAGE_ID, PROPOSER_ID)

        result = service.cast_upvote(MESSAGE_ID, 200)

        assert result.value.event is VoteEvent.UPVOTE_PROGRESS
        assert result.value.votes_needed == 2

    def test_proposer_cannot_vote(self, service, proposal):
        up = service.cast_upvote(MESSAGE_ID, PROPOSER_ID)
        down = service.cast_downvote(MESSAGE_ID, PROPOSER_ID)

        assert up.error_code == error_codes.SELF_VOTE
        assert down.error_code == error_codes.SELF_VOTE
        assert up.soft_failure
        assert proposal.upvoters == set()
        assert proposal.downvoters == set()


class TestDownvotes:
    def test_single_downvote_is_only_noted(self, service, proposal):
        result = service.cast_downvote(MESSAGE_ID, 200)

        assert result.value.event is VoteEvent.DOWNVOTE_NOTED
        assert result.value.votes_needed == 1
        assert proposal.status is ProposalStatus.OPEN

    def test_second_independent_downvote_rejects(self, service, proposal):
        service.cast_downvote(MESSAGE_ID, 200)
        result = service.cast_downvote(MESSAGE_ID, 300)

        assert result.value.event is VoteEvent.REJECTED
        assert proposal.status is ProposalStatus.REJECTED
        assert proposal.against_voters() == [200, 300]

    def test_same_voter_twice_counts_once(self, service, proposal):
        service.cast_downvote(MESSAGE_ID, 200)
        result = service.cast_downvote(MESSAGE_ID, 200)

        assert result.error_code == error_codes.ALREADY_VOTED
        assert proposal.downvoters == {200}
        assert proposal.status is ProposalStatus.OPEN

    def test_opposite_second_vote_is_ignored_not_overwritten(self, service, proposal):
        service.cast_downvote(MESSAGE_ID, 200)
        result = service.cast_upvote(MESSAGE_ID, 200)

        assert result.error_code == error_codes.ALREADY_VOTED
        assert proposal.upvoters == set()
        assert proposal.downvoters == {200}


class TestTerminalProposals:
    def test_passed_proposal_rejects_further_votes(self, service, proposal):
        service.cast_upvote(MESSAGE_ID, 200)

        up = service.cast_upvote(MESSAGE_ID, 300)
        down = service.cast_downvote(MESSAGE_ID, 400)

        assert up.error_code == error_codes.PROPOSAL_CLOSED
        assert down.error_code == error_codes.PROPOSAL_CLOSED
        assert proposal.upvoters == {200}
        assert proposal.downvoters == set()
        assert proposal.status is ProposalStatus.PASSED

    def test_rejected_proposal_cannot_pass_later(self, service, proposal):
        service.cast_downvote(MESSAGE_ID, 200)
        service.cast_downvote(MESSAGE_ID, 300)

        result = service.cast_upvote(MESSAGE_ID, 400)

        assert result.error_code == error_codes.PROPOSAL_CLOSED
        assert proposal.status is ProposalStatus.REJECTED

    def test_re_registering_terminal_proposal_keeps_it_closed(self, service, proposal):
        service.cast_upvote(MESSAGE_ID, 200)
        service.register_proposal(MESSAGE_ID, PROPOSER_ID)

        assert service.get_proposal(MESSAGE_ID).status is ProposalStatus.PASSED


class TestPruning:
    def test_prune_drops_only_expired(self):
        now = [1000.0]
        service = GroupBetVoteService(
            pass_threshold=1, reject_threshold=2, proposal_ttl_seconds=60, clock=lambda: now[0]
        )
        service.register_proposal(1, PROPOSER_ID)
        now[0] = 1050.0
        service.register_proposal(2, PROPOSER_ID)

        now[0] = 1070.0
        removed = service.prune_expired()

        assert removed == 1
        assert service.get_proposal(1) is None
        assert service.get_proposal(2) is not None

    def test_zero_ttl_disables_pruning(self):
        service = GroupBetVoteService(proposal_ttl_seconds=0, clock=lambda: 0.0)
        service.register_proposal(1, PROPOSER_ID)

        assert service.prune_expired(now=10**9) == 0
        assert len(service) == 1

    def test_expired_passed_proposal_cannot_pass_again(self):
        now = [1000.0]
        service = GroupBetVoteService(
            pass_threshold=1, reject_threshold=2, proposal_ttl_seconds=60, clock=lambda: now[0]
        )
        service.register_proposal(1, PROPOSER_ID, created_at=1000.0)
        assert service.cast_upvote(1, 200).value.event is VoteEvent.PASSED

        now[0] = 1120.0
        again = service.register_proposal(1, PROPOSER_ID, created_at=1000.0)
        result = service.cast_upvote(1, 300)

        assert again is None
        assert not result
        assert result.error_code == error_codes.PROPOSAL_NOT_FOUND

    def test_created_at_comes_from_the_message(self):
        service = GroupBetVoteService(proposal_ttl_seconds=60, clock=lambda: 1000.0)

        proposal = service.register_proposal(1, PROPOSER_ID, created_at=990.0)

        assert proposal.created_at == 990.0
        assert service.prune_expired(now=1051.0) == 1
