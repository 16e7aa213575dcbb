"""
Bet announcement domain model.
"""

from dataclasses import dataclass
from enum import Enum


class BetKind(Enum):
    """Who a bet was placed for, derived from the leading initials."""

    INDIVIDUAL = "Individual"
    GROUP = "Group"
    UNKNOWN = "Unknown"


@dataclass(frozen=True)
class BetAnnouncement:
    """
    Structured fields parsed from a bet line such as
    ``DH Danny Live Nuggets ML -210 $2.42 Returns $3.57``.
    """

    kind: BetKind
    initials: str
    bettor: str
    market: str
    odds: float
    stake: float
    returns_amount: float

    @property
    def is_group(self) -> bool:
        return self.kind is BetKind.GROUP
