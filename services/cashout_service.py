"""
Cash-out and void resolution for replies to a bet.

A reply that is exactly a dollar amount settles the bet early: $0 voids it,
anything else is a cash-out whose gain or loss is measured against the
stake inferred from the original text.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from utils.bet_parsing import extract_stake, parse_exact_amount
from utils.formatting import CASH_OUT_EMOJI, RESOLVED_EMOJIS, VOID_EMOJI, format_money

# Differences smaller than half a cent are reported as a plain cash-out
NEUTRAL_EPSILON = 0.005


class SettlementKind(Enum):
    VOID = "VOID"
    CASH_OUT = "CASH_OUT"


@dataclass(frozen=True)
class Settlement:
    """Decision for one cash-out/void reply."""

    kind: SettlementKind
    amount: float
    marker: str
    line: str
    stake: float | None = None
    gain_loss: float | None = None

    @property
    def is_void(self) -> bool:
        return self.kind is SettlementKind.VOID


def format_cashout_line(amount: float, stake: float | None) -> tuple[str, float | None]:
    """
    Build the status line for a cash-out.

    Returns:
        (line, gain_loss) where gain_loss is None if no stake was found
    """
    line = f"Cashed out at ${format_money(amount)}"
    if stake is None:
        return line, None

    diff = amount - stake
    magnitude = abs(diff)
    if magnitude >= NEUTRAL_EPSILON:
        if diff > 0:
            line = (
                f"Cashed out for a ${format_money(magnitude)} gain for ${format_money(amount)}"
            )
        else:
            line = f"Cashed out at a ${format_money(magnitude)} loss for ${format_money(amount)}"
    return line, diff


class CashOutService:
    """Decides whether a reply voids, cashes out, or is ignored."""

    def __init__(self, resolved_emojis: Iterable[str] | None = None):
        self.resolved_emojis = frozenset(
            resolved_emojis if resolved_emojis is not None else RESOLVED_EMOJIS
        )

    def is_resolved(self, reaction_names: Iterable[str | None]) -> bool:
        return any(name in self.resolved_emojis for name in reaction_names if name)

    def evaluate(
        self,
        reply_text: str | None,
        original_text: str | None,
        reaction_names: Iterable[str | None] = (),
    ) -> Settlement | None:
        """
        Args:
            reply_text: Content of the reply, e.g. "$4.50"
            original_text: Content of the bet being replied to
            reaction_names: Emoji names currently on the original bet

        Returns:
            Settlement, or None when the reply is not an exact amount or the
            bet is already resolved
        """
        amount = parse_exact_amount(reply_text)
        if amount is None:
            return None
        if self.is_resolved(reaction_names):
            return None

        if amount == 0:
            return Settlement(
                kind=SettlementKind.VOID,
                amount=0.0,
                marker=VOID_EMOJI,
                line="Bet Voided",
                gain_loss=0.0,
            )

        stake = extract_stake(original_text or "")
        line, gain_loss = format_cashout_line(amount, stake)
        return Settlement(
            kind=SettlementKind.CASH_OUT,
            amount=amount,
            marker=CASH_OUT_EMOJI,
            line=line,
            stake=stake,
            gain_loss=gain_loss,
        )
