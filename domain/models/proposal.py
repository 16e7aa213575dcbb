"""
Group bet proposal state.
"""

import time
from dataclasses import dataclass, field
from enum import Enum


class ProposalStatus(Enum):
    OPEN = "open"
    PASSED = "passed"
    REJECTED = "rejected"


@dataclass
class ProposalState:
    """
    Voting state for one group bet message.

    The proposer approves implicitly and never appears in either voter set.
    Once the status leaves OPEN the proposal is frozen.
    """

    message_id: int
    proposer_id: int
    upvoters: set[int] = field(default_factory=set)
    downvoters: set[int] = field(default_factory=set)
    status: ProposalStatus = ProposalStatus.OPEN
    created_at: float = field(default_factory=time.time)

    @property
    def announced(self) -> bool:
        return self.status is not ProposalStatus.OPEN

    @property
    def is_open(self) -> bool:
        return self.status is ProposalStatus.OPEN

    def has_voted(self, user_id: int) -> bool:
        return user_id in self.upvoters or user_id in self.downvoters

    def for_voters(self) -> list[int]:
        """Proposer first, then up-voters in id order."""
        return [self.proposer_id, *sorted(self.upvoters)]

    def against_voters(self) -> list[int]:
        return sorted(self.downvoters)
