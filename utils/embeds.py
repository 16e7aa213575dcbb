"""
Embeds and message text for group bet vote announcements.
"""

import discord

from utils.formatting import DOWNVOTE_EMOJI, UPVOTE_EMOJI, format_name_list

# Discord limits
FIELD_VALUE_LIMIT = 1024
DESCRIPTION_LIMIT = 4096


def truncate(text: str, max_len: int) -> str:
    """Trim text to a Discord limit, marking the cut with '...'."""
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."


def _vote_embed(
    title: str,
    color: discord.Color,
    bet_text: str,
    for_names: list[str],
    against_names: list[str],
    jump_url: str | None,
) -> discord.Embed:
    embed = discord.Embed(
        title=title,
        description=truncate(bet_text or "(no text)", DESCRIPTION_LIMIT),
        color=color,
    )
    embed.add_field(
        name=f"{UPVOTE_EMOJI} For ({len(for_names)})",
        value=truncate(format_name_list(for_names), FIELD_VALUE_LIMIT),
        inline=True,
    )
    embed.add_field(
        name=f"{DOWNVOTE_EMOJI} Against ({len(against_names)})",
        value=truncate(format_name_list(against_names), FIELD_VALUE_LIMIT),
        inline=True,
    )
    if jump_url:
        embed.add_field(name="\u200b", value=f"[Jump to Bet]({jump_url})", inline=False)
    return embed


def create_vote_passed_embed(
    bet_text: str, for_names: list[str], against_names: list[str], jump_url: str | None = None
) -> discord.Embed:
    """For lists the proposer first; Against shows 'None' when empty."""
    return _vote_embed(
        "✅ Group Bet Approved",
        discord.Color.green(),
        bet_text,
        for_names,
        against_names,
        jump_url,
    )


def create_vote_rejected_embed(
    bet_text: str, for_names: list[str], against_names: list[str], jump_url: str | None = None
) -> discord.Embed:
    return _vote_embed(
        "❌ Group Bet Rejected",
        discord.Color.red(),
        bet_text,
        for_names,
        against_names,
        jump_url,
    )


def format_upvote_progress(voter_name: str, votes_needed: int) -> str:
    plural = "s" if votes_needed != 1 else ""
    return (
        f"{UPVOTE_EMOJI} **{voter_name}** voted for the group bet. "
        f"**{votes_needed}** more vote{plural} needed to approve."
    )


def format_downvote_notice(voter_name: str, votes_needed: int) -> str:
    plural = "s" if votes_needed != 1 else ""
    return (
        f"{DOWNVOTE_EMOJI} **{voter_name}** voted against the group bet "
        f"({votes_needed} more vote{plural} to reject)."
    )
