"""
Group bet voting service.

Tracks who proposed a group bet and who voted for or against it, and
decides when a proposal passes or is rejected.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from config import PROPOSAL_TTL_SECONDS, VOTE_PASS_THRESHOLD, VOTE_REJECT_THRESHOLD
from domain.models.proposal import ProposalState, ProposalStatus
from services import error_codes
from services.result import Result

logger = logging.getLogger("bet_bot.services.group_bet_vote")


class VoteEvent(Enum):
    PASSED = "passed"
    REJECTED = "rejected"
    UPVOTE_PROGRESS = "upvote_progress"
    DOWNVOTE_NOTED = "downvote_noted"


@dataclass(frozen=True)
class VoteOutcome:
    """What a successful vote changed, for the announcement layer."""

    event: VoteEvent
    proposal: ProposalState
    votes_needed: int = 0

    @property
    def is_terminal(self) -> bool:
        return self.event in (VoteEvent.PASSED, VoteEvent.REJECTED)


class GroupBetVoteService:
    """
    Manages voting on group bet proposals.

    State machine per proposal: OPEN -> PASSED or OPEN -> REJECTED.
    Terminal proposals accept no further votes, so a threshold can only be
    announced once. Each voter gets one vote per proposal in either
    direction; the proposer cannot vote explicitly.
    """

    def __init__(
        self,
        pass_threshold: int | None = None,
        reject_threshold: int | None = None,
        proposal_ttl_seconds: int | None = None,
        clock: Callable[[], float] = time.time,
    ):
        self.pass_threshold = pass_threshold if pass_threshold is not None else VOTE_PASS_THRESHOLD
        self.reject_threshold = (
            reject_threshold if reject_threshold is not None else VOTE_REJECT_THRESHOLD
        )
        self.proposal_ttl_seconds = (
            proposal_ttl_seconds if proposal_ttl_seconds is not None else PROPOSAL_TTL_SECONDS
        )
        self._clock = clock
        self._proposals: dict[int, ProposalState] = {}

    def register_proposal(
        self, message_id: int, proposer_id: int, created_at: float | None = None
    ) -> ProposalState | None:
        """
        Start tracking a proposal. Idempotent: an existing proposal is returned as is.

        Also called on the first vote for an unknown message, which covers
        proposals posted before a restart.

        Args:
            created_at: When the bet message was posted (epoch seconds); defaults to now

        Returns:
            The proposal, or None when the message is older than the TTL. Such
            a proposal may already have been decided and pruned, so it is not
            re-opened.
        """
        self.prune_expired()
        existing = self._proposals.get(message_id)
        if existing is not None:
            return existing
        created = created_at if created_at is not None else self._clock()
        if self._is_expired(created):
            logger.debug(f"Not tracking group bet {message_id}: older than the proposal TTL")
            return None
        proposal = ProposalState(
            message_id=message_id,
            proposer_id=proposer_id,
            created_at=created,
        )
        self._proposals[message_id] = proposal
        logger.info(f"Tracking group bet proposal {message_id} from user {proposer_id}")
        return proposal

    def get_proposal(self, message_id: int) -> ProposalState | None:
        return self._proposals.get(message_id)

    def cast_upvote(self, message_id: int, voter_id: int) -> Result[VoteOutcome]:
        proposal, rejection = self._check_vote(message_id, voter_id)
        if rejection is not None:
            return rejection

        proposal.upvoters.add(voter_id)
        if len(proposal.upvoters) >= self.pass_threshold:
            proposal.status = ProposalStatus.PASSED
            logger.info(f"Group bet {message_id} passed with {len(proposal.upvoters)} up-vote(s)")
            return Result.ok(VoteOutcome(event=VoteEvent.PASSED, proposal=proposal))

        needed = self.pass_threshold - len(proposal.upvoters)
        return Result.ok(
            VoteOutcome(event=VoteEvent.UPVOTE_PROGRESS, proposal=proposal, votes_needed=needed)
        )

    def cast_downvote(self, message_id: int, voter_id: int) -> Result[VoteOutcome]:
        proposal, rejection = self._check_vote(message_id, voter_id)
        if rejection is not None:
            return rejection

        proposal.downvoters.add(voter_id)
        if len(proposal.downvoters) >= self.reject_threshold:
            proposal.status = ProposalStatus.REJECTED
            logger.info(
                f"Group bet {message_id} rejected with {len(proposal.downvoters)} down-vote(s)"
            )
            return Result.ok(VoteOutcome(event=VoteEvent.REJECTED, proposal=proposal))

        needed = self.reject_threshold - len(proposal.downvoters)
        return Result.ok(
            VoteOutcome(event=VoteEvent.DOWNVOTE_NOTED, proposal=proposal, votes_needed=needed)
        )

    def prune_expired(self, now: float | None = None) -> int:
        """
        Drop proposals older than the TTL.

        Returns:
            Number of proposals removed
        """
        expired = [mid for mid, p in self._proposals.items() if self._is_expired(p.created_at, now)]
        for mid in expired:
            del self._proposals[mid]
        if expired:
            logger.debug(f"Pruned {len(expired)} expired group bet proposal(s)")
        return len(expired)

    def __len__(self) -> int:
        return len(self._proposals)

    def _is_expired(self, created_at: float, now: float | None = None) -> bool:
        if self.proposal_ttl_seconds <= 0:
            return False
        current = now if now is not None else self._clock()
        return created_at < current - self.proposal_ttl_seconds

    def _check_vote(
        self, message_id: int, voter_id: int
    ) -> tuple[ProposalState | None, Result[VoteOutcome] | None]:
        proposal = self._proposals.get(message_id)
        if proposal is None:
            return None, Result.fail(
                "Proposal is not being tracked.", code=error_codes.PROPOSAL_NOT_FOUND
            )
        if not proposal.is_open:
            return proposal, Result.fail(
                f"Proposal already {proposal.status.value}.", code=error_codes.PROPOSAL_CLOSED
            )
        if voter_id == proposal.proposer_id:
            return proposal, Result.fail(
                "Proposer cannot vote on their own bet.", code=error_codes.SELF_VOTE
            )
        if proposal.has_voted(voter_id):
            return proposal, Result.fail(
                "Voter already voted on this proposal.", code=error_codes.ALREADY_VOTED
            )
        return proposal, None
