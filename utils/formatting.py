"""
Shared formatting helpers and emoji constants.
"""

from typing import Any

# Reactions the bot adds to the original bet
CASH_OUT_EMOJI = "🟡"
VOID_EMOJI = "⚫"

# Group bet voting
UPVOTE_EMOJI = "👍"
DOWNVOTE_EMOJI = "👎"

# Outcome reactions placed by members
SUCCESS_EMOJIS = frozenset({"✅", "✔️", "☑️", "🟩"})
FAIL_EMOJIS = frozenset({"❌", "✖️", "🟥"})

# Any of these on a bet means it is closed for cash-out/void
RESOLVED_EMOJIS = SUCCESS_EMOJIS | FAIL_EMOJIS | {VOID_EMOJI}

UNKNOWN_USER = "Unknown User"
NO_VOTERS = "None"


def format_money(amount: float) -> str:
    """Always two decimals: 3 -> '3.00'."""
    return f"{amount:.2f}"


def format_money_terse(amount: float) -> str:
    """Two decimals with a trailing '.00' or trailing zero removed: 3.50 -> '3.5', 3 -> '3'."""
    text = format_money(amount)
    if text.endswith(".00"):
        return text[:-3]
    if text.endswith("0"):
        return text[:-1]
    return text


def round_money(amount: float) -> float:
    """Round to cents for numeric spreadsheet cells."""
    return round(float(amount) * 100) / 100


def emoji_name(emoji: Any) -> str | None:
    """Name of a reaction emoji, whether unicode str, PartialEmoji or Emoji."""
    if emoji is None:
        return None
    if isinstance(emoji, str):
        return emoji
    return getattr(emoji, "name", None)


def build_bet_reference(message: Any) -> str:
    """
    Reference block for a forwarded bet: author, original text, source channel.
    """
    author = getattr(message, "author", None)
    author_tag = str(author) if author is not None else "Unknown"
    content = getattr(message, "content", None) or "(no text)"
    return f"**{author_tag}**\n{content}\n<#{message.channel.id}>"


def format_name_list(names: list[str]) -> str:
    return ", ".join(names) if names else NO_VOTERS
