"""
Text parsing for bet announcements and cash-out replies.

Everything here is pure string matching. A miss returns None and callers
carry on without the enriched fields.
"""

import re

from domain.models.bet import BetAnnouncement, BetKind

# Strict, case-sensitive qualification token
RETURNS_TOKEN = " Returns "

_GROUP_MARKER_RE = re.compile(r"\bgb\b", re.IGNORECASE)

# "DH Danny Live Nuggets ML -210 $2.42 Returns $3.57" (also "... To Return $3.57")
_BET_LINE_RE = re.compile(
    r"^(\w{2})\s+(\S+)\s+(.+?)\s+([+-]?\d+(?:\.\d+)?)\s+"
    r"\$([0-9]+(?:\.[0-9]+)?)\s+(?:Returns|To\s+Return)\s+\$([0-9]+(?:\.[0-9]+)?)",
    re.IGNORECASE,
)

_RETURNS_AMOUNT_RE = re.compile(r" Returns \$([0-9]+(?:\.[0-9]+)?)")
_DOLLAR_RE = re.compile(r"\$([0-9]+(?:\.[0-9]+)?)")
_EXACT_AMOUNT_RE = re.compile(r"^\$\s*([0-9]+(?:\.[0-9]+)?)$")


def is_qualifying_bet(text: str | None) -> bool:
    """Return True if the text contains the exact ' Returns ' token."""
    return bool(text) and RETURNS_TOKEN in text


def is_group_bet(text: str | None) -> bool:
    """
    Return True for a qualifying bet that also carries the standalone 'gb' marker.

    Word boundaries keep 'gbp' and similar from matching.
    """
    return is_qualifying_bet(text) and _GROUP_MARKER_RE.search(text) is not None


def parse_bet_text(
    text: str | None,
    group_initials: str = "DG",
    individual_initials: str = "DH",
) -> BetAnnouncement | None:
    """
    Parse a full bet line into a BetAnnouncement.

    Format: <initials> <bettor> <market...> <odds> $<stake> Returns|To Return $<returns>

    Initials are upper-cased before comparison against the configured markers;
    anything else parses with kind UNKNOWN.

    Returns:
        BetAnnouncement, or None if the line does not match
    """
    if not text:
        return None

    match = _BET_LINE_RE.match(text)
    if not match:
        return None

    initials = match.group(1).upper()
    if initials == group_initials.upper():
        kind = BetKind.GROUP
    elif initials == individual_initials.upper():
        kind = BetKind.INDIVIDUAL
    else:
        kind = BetKind.UNKNOWN

    return BetAnnouncement(
        kind=kind,
        initials=initials,
        bettor=match.group(2),
        market=match.group(3).strip(),
        odds=float(match.group(4)),
        stake=float(match.group(5)),
        returns_amount=float(match.group(6)),
    )


def extract_returns_amount(text: str | None) -> str | None:
    """Return the decimal right after ' Returns $' as a string, or None."""
    if not text:
        return None
    match = _RETURNS_AMOUNT_RE.search(text)
    return match.group(1) if match else None


def extract_stake(text: str | None) -> float | None:
    """
    Infer the stake from free-form bet text.

    Prefers the last dollar amount before the word 'Returns'; otherwise the
    smallest dollar amount anywhere in the text.
    """
    if not text:
        return None

    amounts = [(m.start(), float(m.group(1))) for m in _DOLLAR_RE.finditer(text)]
    if not amounts:
        return None

    returns_index = text.find("Returns")
    if returns_index != -1:
        before = [value for index, value in amounts if index < returns_index]
        if before:
            return before[-1]

    return min(value for _, value in amounts)


def parse_exact_amount(text: str | None) -> float | None:
    """Parse a message that is nothing but a dollar amount ('$5', '$ 6.50', '$0')."""
    if text is None:
        return None
    match = _EXACT_AMOUNT_RE.match(text.strip())
    if not match:
        return None
    return float(match.group(1))
