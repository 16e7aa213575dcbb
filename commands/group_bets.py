"""
Group bet voting through reactions.

A group bet is posted in the bet channel with the 'gb' marker; members vote
with 👍/👎 and the result is announced in the discussion channel.
"""

import logging

import discord
from discord.ext import commands

from infrastructure.discord_notifier import DiscordNotifier
from services.group_bet_vote_service import GroupBetVoteService, VoteEvent, VoteOutcome
from utils.bet_parsing import is_group_bet
from utils.embeds import (
    create_vote_passed_embed,
    create_vote_rejected_embed,
    format_downvote_notice,
    format_upvote_progress,
)
from utils.formatting import DOWNVOTE_EMOJI, UPVOTE_EMOJI, emoji_name
from utils.keyed_lock import KeyedLock
from utils.tracking import TrackingSettings

logger = logging.getLogger("bet_bot.commands.group_bets")


class GroupBetCommands(commands.Cog):
    """Tracks group bet proposals and their votes."""

    def __init__(
        self,
        bot: commands.Bot,
        notifier: DiscordNotifier,
        vote_service: GroupBetVoteService,
        settings: TrackingSettings,
        message_locks: KeyedLock | None = None,
    ):
        self.bot = bot
        self.notifier = notifier
        self.vote_service = vote_service
        self.settings = settings
        self.message_locks = message_locks if message_locks is not None else KeyedLock()

    @commands.Cog.listener("on_message")
    async def on_message(self, message: discord.Message):
        try:
            await self.handle_proposal(message)
        except Exception as exc:
            logger.error(f"Error handling group bet message {message.id}: {exc}", exc_info=True)

    @commands.Cog.listener("on_raw_reaction_add")
    async def on_raw_reaction_add(self, payload: discord.RawReactionActionEvent):
        try:
            await self.handle_vote(payload)
        except Exception as exc:
            logger.error(f"Error handling vote on {payload.message_id}: {exc}", exc_info=True)

    async def handle_proposal(self, message: discord.Message) -> bool:
        """
        Start tracking a new group bet and seed the vote reactions.

        Returns:
            True if the message was registered as a proposal
        """
        if message.author.bot or message.guild is None:
            return False
        if not self.settings.is_bet_channel(message.channel):
            return False
        if not is_group_bet(message.content):
            return False

        if self.vote_service.register_proposal(
            message.id, message.author.id, created_at=message.created_at.timestamp()
        ) is None:
            return False
        await self.notifier.react(message, UPVOTE_EMOJI)
        await self.notifier.react(message, DOWNVOTE_EMOJI)
        return True

    async def handle_vote(self, payload: discord.RawReactionActionEvent) -> VoteOutcome | None:
        """
        Apply a 👍/👎 reaction as a vote and announce the outcome.

        Returns:
            The outcome that was announced, or None if the reaction was not a
            countable vote
        """
        name = emoji_name(payload.emoji)
        if name == UPVOTE_EMOJI:
            cast_vote = self.vote_service.cast_upvote
        elif name == DOWNVOTE_EMOJI:
            cast_vote = self.vote_service.cast_downvote
        else:
            return None

        if payload.guild_id is None or self._is_bot_reaction(payload):
            return None

        channel = await self.notifier.fetch_channel(payload.channel_id)
        if not self.settings.is_bet_channel(channel):
            return None

        async with self.message_locks.hold(payload.message_id):
            try:
                message = await channel.fetch_message(payload.message_id)
            except discord.HTTPException as exc:
                logger.warning(f"Could not fetch group bet {payload.message_id}: {exc}")
                return None
            if not is_group_bet(message.content):
                return None

            # Proposals posted before a restart are picked up on their first vote;
            # ones older than the TTL stay untracked so a decided bet is never re-opened
            self.vote_service.register_proposal(
                message.id, message.author.id, created_at=message.created_at.timestamp()
            )
            result = cast_vote(message.id, payload.user_id)
            if not result:
                logger.debug(
                    f"Ignoring vote from {payload.user_id} on {message.id}: "
                    f"{result.error_code} ({result.error})"
                )
                return None

            outcome = result.value
            await self._announce(outcome, message, payload.user_id)
            return outcome

    async def _announce(self, outcome: VoteOutcome, message: discord.Message, voter_id: int) -> None:
        output = await self.notifier.find_text_channel(
            message.guild,
            self.settings.discussion_channel_name,
            self.settings.discussion_channel_id,
        )
        if output is None:
            return

        guild = message.guild
        proposal = outcome.proposal
        if outcome.is_terminal:
            for_names = await self.notifier.resolve_display_names(guild, proposal.for_voters())
            against_names = await self.notifier.resolve_display_names(guild, proposal.against_voters())
            create_embed = (
                create_vote_passed_embed
                if outcome.event is VoteEvent.PASSED
                else create_vote_rejected_embed
            )
            embed = create_embed(message.content, for_names, against_names, message.jump_url)
            await self.notifier.send(output, embed=embed)
            return

        voter_name = await self.notifier.resolve_display_name(guild, voter_id)
        if outcome.event is VoteEvent.UPVOTE_PROGRESS:
            text = format_upvote_progress(voter_name, outcome.votes_needed)
        else:
            text = format_downvote_notice(voter_name, outcome.votes_needed)
        await self.notifier.send(output, text)

    def _is_bot_reaction(self, payload: discord.RawReactionActionEvent) -> bool:
        if self.bot.user is not None and payload.user_id == self.bot.user.id:
            return True
        member = payload.member
        return member is not None and member.bot


async def setup(bot: commands.Bot):
    notifier = getattr(bot, "notifier", None)
    if notifier is None:
        raise RuntimeError("Notifier not registered on bot.")
    vote_service = getattr(bot, "vote_service", None)
    if vote_service is None:
        raise RuntimeError("Vote service not registered on bot.")
    settings = getattr(bot, "tracking_settings", None) or TrackingSettings()
    message_locks = getattr(bot, "message_locks", None)

    await bot.add_cog(
        GroupBetCommands(bot, notifier, vote_service, settings, message_locks=message_locks)
    )
