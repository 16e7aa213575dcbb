"""
Report row model for the bet spreadsheet.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from domain.models.bet import BetAnnouncement, BetKind
from utils.bet_parsing import parse_bet_text

# Event kinds written to the "Event" column
BET_PLACED = "BET_PLACED"
CASH_OUT = "CASH_OUT"
VOID = "VOID"
WIN = "WIN"
LOSS = "LOSS"

EVENT_KINDS = (BET_PLACED, CASH_OUT, VOID, WIN, LOSS)

# Spreadsheet tabs, chosen by bet kind
TAB_INDIVIDUAL = "Individual"
TAB_GROUP = "Group"

REPORT_HEADERS = [
    "Timestamp (ISO)",
    "Event",
    "Kind",
    "Initials",
    "Bettor Name",
    "Market",
    "Odds",
    "Stake",
    "Returns",
    "Cashout",
    "Gain/Loss",
    "Channel",
    "Bet Text",
    "Author Tag",
    "Author ID",
    "Message Link",
    "Message ID",
]


@dataclass(frozen=True)
class ReportEvent:
    """One spreadsheet row before formatting."""

    timestamp: datetime
    event: str
    bet: BetAnnouncement | None
    channel: str
    full_text: str
    author_tag: str
    author_id: str
    link: str
    message_id: str
    cashout: float | None = None
    gain_loss: float | None = None

    @property
    def kind(self) -> BetKind:
        return self.bet.kind if self.bet else BetKind.UNKNOWN

    @classmethod
    def from_message(
        cls,
        event: str,
        message: Any,
        channel_name: str = "",
        cashout: float | None = None,
        gain_loss: float | None = None,
        group_initials: str = "DG",
        individual_initials: str = "DH",
    ) -> ReportEvent:
        """
        Build an event from a Discord message (the original bet, not a reply).

        Parsing is best-effort: a bet line that does not match the structured
        pattern still produces a row, just without the enriched columns.
        """
        if event not in EVENT_KINDS:
            raise ValueError(f"Unknown report event: {event}")

        content = getattr(message, "content", None) or ""
        author = getattr(message, "author", None)
        created_at = getattr(message, "created_at", None) or datetime.now(timezone.utc)

        return cls(
            timestamp=created_at,
            event=event,
            bet=parse_bet_text(
                content,
                group_initials=group_initials,
                individual_initials=individual_initials,
            ),
            channel=channel_name or "",
            full_text=content,
            author_tag=str(author) if author is not None else "",
            author_id=str(author.id) if author is not None else "",
            link=getattr(message, "jump_url", "") or "",
            message_id=str(message.id),
            cashout=cashout,
            gain_loss=gain_loss,
        )
