"""
Pytest fixtures for tests.

Discord objects are MagicMock/AsyncMock fakes shaped like the attributes the
listeners touch; the spreadsheet is replaced by an in-memory repository.
"""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import discord
import pytest

from infrastructure.discord_notifier import DiscordNotifier
from repositories.interfaces import IReportRepository
from services.cashout_service import CashOutService
from services.group_bet_vote_service import GroupBetVoteService
from services.report_service import ReportService
from services.resolution_service import ResolutionLedger
from utils.keyed_lock import KeyedLock
from utils.tracking import TrackingSettings

# =============================================================================
# CENTRALIZED CONSTANTS
# =============================================================================

TEST_GUILD_ID = 12345
BET_CHANNEL_ID = 1001
DISCUSSION_CHANNEL_ID = 1002
BOT_USER_ID = 999
PROPOSER_ID = 100

BET_CREATED_AT = datetime(2025, 11, 15, 18, 30, tzinfo=timezone.utc)
SAMPLE_BET = "DH Danny Live Nuggets ML -210 $2.42 Returns $3.57"
SAMPLE_GROUP_BET = "DG Crew Lakers ML gb +150 $10.00 Returns $25.00"


class InMemoryReportRepository(IReportRepository):
    """Collects rows; optionally fails the first N appends."""

    def __init__(self, failures: int = 0):
        self.rows: list[tuple[str, list]] = []
        self.tabs: set[str] = set()
        self.failures = failures
        self.attempts = 0

    def ensure_tab(self, tab: str) -> None:
        self.tabs.add(tab)

    def append_row(self, tab: str, row: list) -> None:
        self.attempts += 1
        if self.attempts <= self.failures:
            raise RuntimeError("sheets unavailable")
        self.ensure_tab(tab)
        self.rows.append((tab, row))


def make_user(user_id: int, name: str | None = None, bot: bool = False):
    user = MagicMock()
    user.id = user_id
    user.bot = bot
    user.display_name = name or f"user{user_id}"
    user.__str__.return_value = name or f"user{user_id}"
    return user


def make_channel(channel_id: int, name: str, guild=None):
    channel = MagicMock()
    channel.id = channel_id
    channel.name = name
    channel.guild = guild
    channel.send = AsyncMock()
    channel.fetch_message = AsyncMock()
    return channel


def make_message(
    message_id: int,
    content: str,
    channel,
    author=None,
    reference_id: int | None = None,
    reactions: list[str] | None = None,
    attachments: list[str] | None = None,
    created_at: datetime = BET_CREATED_AT,
):
    message = MagicMock()
    message.id = message_id
    message.content = content
    message.channel = channel
    message.guild = channel.guild
    message.author = author or make_user(PROPOSER_ID, "danny")
    message.created_at = created_at
    message.jump_url = f"https://discord.com/channels/{TEST_GUILD_ID}/{channel.id}/{message_id}"
    message.add_reaction = AsyncMock()
    if reference_id is not None:
        message.reference = MagicMock()
        message.reference.message_id = reference_id
    else:
        message.reference = None
    message.reactions = []
    for emoji in reactions or []:
        reaction = MagicMock()
        reaction.emoji = emoji
        message.reactions.append(reaction)
    message.attachments = []
    for url in attachments or []:
        attachment = MagicMock()
        attachment.url = url
        message.attachments.append(attachment)
    return message


def make_payload(message_id: int, user_id: int, emoji: str, channel_id: int = BET_CHANNEL_ID):
    payload = MagicMock()
    payload.message_id = message_id
    payload.channel_id = channel_id
    payload.guild_id = TEST_GUILD_ID
    payload.user_id = user_id
    payload.emoji = discord.PartialEmoji(name=emoji)
    payload.member = None
    return payload


@pytest.fixture
def guild():
    guild = MagicMock()
    guild.id = TEST_GUILD_ID
    members = {
        PROPOSER_ID: make_user(PROPOSER_ID, "danny"),
        200: make_user(200, "erich"),
        300: make_user(300, "zak"),
        400: make_user(400, "mo"),
    }
    guild.get_member.side_effect = members.get
    return guild


@pytest.fixture
def bet_channel(guild):
    return make_channel(BET_CHANNEL_ID, "bet-tracking", guild)


@pytest.fixture
def discussion_channel(guild, bet_channel):
    channel = make_channel(DISCUSSION_CHANNEL_ID, "bet-discussion", guild)
    guild.text_channels = [bet_channel, channel]
    return channel


@pytest.fixture
def bot(bet_channel, discussion_channel):
    bot = MagicMock()
    bot.user = make_user(BOT_USER_ID, "betbot", bot=True)
    channels = {BET_CHANNEL_ID: bet_channel, DISCUSSION_CHANNEL_ID: discussion_channel}
    bot.get_channel.side_effect = channels.get
    bot.get_user.return_value = None
    bot.fetch_channel = AsyncMock(side_effect=lambda cid: channels[cid])
    bot.fetch_user = AsyncMock(side_effect=discord.NotFound(MagicMock(), "unknown user"))
    return bot


@pytest.fixture
def notifier(bot):
    return DiscordNotifier(bot)


@pytest.fixture
def settings():
    return TrackingSettings()


@pytest.fixture
def report_repo():
    return InMemoryReportRepository()


@pytest.fixture
def report_service(report_repo):
    async def no_sleep(_delay):
        return None

    return ReportService(
        report_repo,
        cutoff=datetime(2025, 11, 1, tzinfo=timezone.utc),
        max_attempts=5,
        initial_delay_seconds=0.4,
        backoff_factor=1.6,
        sleep=no_sleep,
    )


@pytest.fixture
def vote_service():
    return GroupBetVoteService(
        pass_threshold=1,
        reject_threshold=2,
        proposal_ttl_seconds=604800,
        clock=lambda: BET_CREATED_AT.timestamp() + 60,
    )


@pytest.fixture
def resolution_ledger():
    return ResolutionLedger()


@pytest.fixture
def cashout_service():
    return CashOutService()


@pytest.fixture
def message_locks():
    return KeyedLock()
