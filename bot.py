"""
Main Discord bot entry for the bet tracker.
"""

import logging

# Configure logging BEFORE importing discord to prevent duplicate handlers
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    force=True,  # Override any existing handlers (e.g., from discord.py)
)
logger = logging.getLogger("bet_bot")


# Suppress PyNaCl warning since voice support isn't needed
class _PyNaClFilter(logging.Filter):
    """Filter out the PyNaCl warning from discord.py."""

    def filter(self, record):
        return "PyNaCl is not installed" not in record.getMessage()


logging.getLogger("discord.client").addFilter(_PyNaClFilter())

# Now import discord after logging is configured
import discord
from discord.ext import commands

# discord.py adds its own handler to the 'discord' logger on import
_discord_logger = logging.getLogger("discord")
_discord_logger.handlers.clear()
_discord_logger.setLevel(logging.INFO)

from config import DISCORD_BOT_TOKEN
from infrastructure.service_container import ServiceContainer

# Bot setup

intents = discord.Intents.default()
intents.message_content = True
intents.members = True
intents.reactions = True

bot = commands.Bot(command_prefix="!", intents=intents)

# Lazy-initialized service container
_container: ServiceContainer | None = None


def _init_services():
    """Initialize all services via ServiceContainer (lazy, idempotent)."""
    global _container

    if _container is not None:
        return

    _container = ServiceContainer()
    _container.initialize()
    _container.expose_to_bot(bot)


EXTENSIONS = [
    "commands.bet_tracking",
    "commands.group_bets",
]


async def _load_extensions():
    """Load listener extensions if not already loaded."""
    _init_services()

    loaded_extensions = []
    failed_extensions = []

    for ext in EXTENSIONS:
        if ext in bot.extensions:
            logger.debug(f"Extension {ext} already loaded, skipping")
            continue
        try:
            await bot.load_extension(ext)
            loaded_extensions.append(ext)
            logger.info(f"Loaded extension: {ext}")
        except Exception as exc:
            failed_extensions.append(ext)
            logger.error(f"Failed to load extension {ext}: {exc}", exc_info=True)

    logger.info(
        f"Extension loading complete: {len(loaded_extensions)} loaded, "
        f"{len(failed_extensions)} failed. Cogs: {list(bot.cogs.keys())}"
    )


@bot.event
async def setup_hook():
    """Load listener cogs."""
    _init_services()
    await _load_extensions()


@bot.event
async def on_ready():
    """Called when bot is ready."""
    logger.info(f"{bot.user} connected. Guilds: {len(bot.guilds)}")

    report_service = getattr(bot, "report_service", None)
    if report_service is not None and report_service.enabled:
        await report_service.ensure_tabs()


def main():
    """Run the bot."""
    token = DISCORD_BOT_TOKEN
    if not token:
        print("ERROR: DISCORD_BOT_TOKEN not found!")
        return

    try:
        # Pass log_handler=None to prevent discord.py from adding its own handler
        bot.run(token, log_handler=None)
    except KeyboardInterrupt:
        logger.info("Bot stopped by user (Ctrl+C)")
    except Exception as exc:
        logger.error(f"Bot crashed: {exc}", exc_info=True)


if __name__ == "__main__":
    main()
