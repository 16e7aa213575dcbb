"""
Listeners for bet outcomes, cash-outs and voids in the bet channel.
"""

import logging

import discord
from discord.ext import commands

from domain.models.report_event import BET_PLACED, CASH_OUT, LOSS, VOID, WIN, ReportEvent
from infrastructure.discord_notifier import DiscordNotifier
from services.cashout_service import CashOutService, Settlement
from services.report_service import ReportService
from services.resolution_service import ResolutionLedger
from utils.bet_parsing import extract_returns_amount, is_qualifying_bet, parse_exact_amount
from utils.formatting import (
    FAIL_EMOJIS,
    SUCCESS_EMOJIS,
    build_bet_reference,
    emoji_name,
    format_money_terse,
)
from utils.keyed_lock import KeyedLock
from utils.tracking import TrackingSettings

logger = logging.getLogger("bet_bot.commands.bet_tracking")

OUTCOME_HEADERS = {
    WIN: "Bet Hit",
    LOSS: "Bet Failed",
}


class BetTrackingCommands(commands.Cog):
    """Forwards results and settles cash-out/void replies."""

    def __init__(
        self,
        bot: commands.Bot,
        notifier: DiscordNotifier,
        resolution_ledger: ResolutionLedger,
        cashout_service: CashOutService,
        report_service: ReportService,
        settings: TrackingSettings,
        message_locks: KeyedLock | None = None,
    ):
        self.bot = bot
        self.notifier = notifier
        self.resolution_ledger = resolution_ledger
        self.cashout_service = cashout_service
        self.report_service = report_service
        self.settings = settings
        self.message_locks = message_locks if message_locks is not None else KeyedLock()

    @commands.Cog.listener("on_message")
    async def on_message(self, message: discord.Message):
        try:
            await self.handle_message(message)
        except Exception as exc:
            logger.error(f"Error handling message {message.id}: {exc}", exc_info=True)

    @commands.Cog.listener("on_raw_reaction_add")
    async def on_raw_reaction_add(self, payload: discord.RawReactionActionEvent):
        try:
            await self.handle_outcome_reaction(payload)
        except Exception as exc:
            logger.error(f"Error handling outcome reaction on {payload.message_id}: {exc}", exc_info=True)

    async def handle_message(self, message: discord.Message) -> None:
        if message.author.bot or message.guild is None:
            return
        if not self.settings.is_bet_channel(message.channel):
            return

        reference = message.reference
        if reference is not None and reference.message_id and parse_exact_amount(message.content) is not None:
            await self.handle_settlement_reply(message, reference.message_id)
            return

        if is_qualifying_bet(message.content):
            self._report(BET_PLACED, message, message.channel.name)

    async def handle_settlement_reply(
        self, reply: discord.Message, original_id: int
    ) -> Settlement | None:
        """
        Settle the referenced bet from a '$<amount>' reply.

        Returns:
            The settlement that was posted, or None if the reply was ignored
        """
        async with self.message_locks.hold(original_id):
            try:
                original = await reply.channel.fetch_message(original_id)
            except discord.HTTPException as exc:
                logger.warning(f"Could not fetch bet {original_id} for cash-out reply {reply.id}: {exc}")
                return None

            reaction_names = [emoji_name(reaction.emoji) for reaction in original.reactions]
            settlement = self.cashout_service.evaluate(reply.content, original.content, reaction_names)
            if settlement is None:
                logger.debug(f"Bet {original_id} is already resolved, ignoring reply {reply.id}")
                return None

            output = await self._discussion_channel(reply.guild)
            if output is None:
                return None

            await self.notifier.react(original, settlement.marker)
            await self.notifier.send(output, f"{settlement.line}\n{build_bet_reference(original)}")

        logger.info(
            f"{settlement.kind.value} for bet {original_id} at ${format_money_terse(settlement.amount)}"
        )
        self._report(
            VOID if settlement.is_void else CASH_OUT,
            original,
            original.channel.name,
            cashout=settlement.amount,
            gain_loss=settlement.gain_loss,
        )
        return settlement

    async def handle_outcome_reaction(self, payload: discord.RawReactionActionEvent) -> bool:
        """
        Forward a bet the first time it gets a success or fail reaction.

        Returns:
            True if a forward was sent
        """
        name = emoji_name(payload.emoji)
        if name in SUCCESS_EMOJIS:
            outcome = WIN
        elif name in FAIL_EMOJIS:
            outcome = LOSS
        else:
            return False

        if payload.guild_id is None or self._is_bot_reaction(payload):
            return False
        if self.resolution_ledger.is_resolved(payload.message_id):
            return False

        channel = await self.notifier.fetch_channel(payload.channel_id)
        if not self.settings.is_bet_channel(channel):
            return False

        try:
            message = await channel.fetch_message(payload.message_id)
        except discord.HTTPException as exc:
            logger.warning(f"Could not fetch bet {payload.message_id}: {exc}")
            return False
        if not is_qualifying_bet(message.content):
            return False

        output = await self._discussion_channel(channel.guild)
        if output is None:
            return False
        # Nothing awaits between this check-and-mark and the decision to forward
        if not self.resolution_ledger.mark_if_unresolved(message.id):
            return False

        await self.notifier.send(
            output,
            f"{OUTCOME_HEADERS[outcome]}\n{build_bet_reference(message)}",
            attachment_urls=[attachment.url for attachment in message.attachments],
        )
        returns = extract_returns_amount(message.content)
        logger.info(f"Forwarded {outcome} for bet {message.id}" + (f" (returns ${returns})" if returns else ""))
        self._report(outcome, message, channel.name)
        return True

    def _is_bot_reaction(self, payload: discord.RawReactionActionEvent) -> bool:
        if self.bot.user is not None and payload.user_id == self.bot.user.id:
            return True
        member = payload.member
        return member is not None and member.bot

    async def _discussion_channel(self, guild: discord.Guild | None):
        return await self.notifier.find_text_channel(
            guild, self.settings.discussion_channel_name, self.settings.discussion_channel_id
        )

    def _report(
        self,
        event: str,
        message: discord.Message,
        channel_name: str,
        cashout: float | None = None,
        gain_loss: float | None = None,
    ) -> None:
        report_event = ReportEvent.from_message(
            event,
            message,
            channel_name=channel_name,
            cashout=cashout,
            gain_loss=gain_loss,
            group_initials=self.settings.group_initials,
            individual_initials=self.settings.individual_initials,
        )
        self.report_service.schedule(report_event)


async def setup(bot: commands.Bot):
    notifier = getattr(bot, "notifier", None)
    if notifier is None:
        raise RuntimeError("Notifier not registered on bot.")
    resolution_ledger = getattr(bot, "resolution_ledger", None)
    if resolution_ledger is None:
        raise RuntimeError("Resolution ledger not registered on bot.")
    cashout_service = getattr(bot, "cashout_service", None)
    if cashout_service is None:
        raise RuntimeError("Cash-out service not registered on bot.")
    report_service = getattr(bot, "report_service", None)
    if report_service is None:
        raise RuntimeError("Report service not registered on bot.")
    settings = getattr(bot, "tracking_settings", None) or TrackingSettings()
    message_locks = getattr(bot, "message_locks", None)

    await bot.add_cog(
        BetTrackingCommands(
            bot,
            notifier,
            resolution_ledger,
            cashout_service,
            report_service,
            settings,
            message_locks=message_locks,
        )
    )
