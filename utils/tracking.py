"""
Channel and marker settings shared by the bet listeners.
"""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class TrackingSettings:
    """Where bets are watched, where summaries go, and which initials mark a bet's kind."""

    bet_channel_name: str = "bet-tracking"
    discussion_channel_name: str = "bet-discussion"
    bet_channel_id: int | None = None
    discussion_channel_id: int | None = None
    group_initials: str = "DG"
    individual_initials: str = "DH"

    def is_bet_channel(self, channel: Any) -> bool:
        """Match by configured ID when set, otherwise by channel name."""
        if channel is None:
            return False
        if self.bet_channel_id:
            return getattr(channel, "id", None) == self.bet_channel_id
        return getattr(channel, "name", None) == self.bet_channel_name
