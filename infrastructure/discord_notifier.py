"""
Discord boundary used by the cogs: sending, reacting, channel and name lookup.

Reactions and lookups are best-effort; failures are logged and reported
through return values instead of exceptions.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

import discord

from utils.formatting import UNKNOWN_USER

logger = logging.getLogger("bet_bot.infrastructure.notifier")


class DiscordNotifier:
    def __init__(self, bot: discord.Client):
        self.bot = bot

    async def send(
        self,
        channel: discord.abc.Messageable,
        text: str | None = None,
        embed: discord.Embed | None = None,
        attachment_urls: Iterable[str] | None = None,
    ) -> discord.Message:
        """
        Post to a channel. Attachment URLs are appended on their own lines so
        Discord unfurls them. Send errors propagate to the handler.
        """
        content = text or ""
        urls = [url for url in (attachment_urls or []) if url]
        if urls:
            content = "\n".join([content, *urls]) if content else "\n".join(urls)
        return await channel.send(
            content=content or None,
            embed=embed,
            allowed_mentions=discord.AllowedMentions.none(),
        )

    async def react(self, message: discord.Message, emoji: str) -> bool:
        try:
            await message.add_reaction(emoji)
            return True
        except discord.HTTPException as exc:
            logger.warning(f"Failed to add {emoji} to message {message.id}: {exc}")
            return False

    async def fetch_channel(self, channel_id: int):
        channel = self.bot.get_channel(channel_id)
        if channel is not None:
            return channel
        try:
            return await self.bot.fetch_channel(channel_id)
        except discord.HTTPException as exc:
            logger.warning(f"Could not fetch channel {channel_id}: {exc}")
            return None

    async def find_text_channel(
        self, guild: discord.Guild | None, name: str, channel_id: int | None = None
    ):
        """Look up a channel by configured ID, falling back to name within the guild."""
        if channel_id:
            return await self.fetch_channel(channel_id)
        if guild is None:
            return None
        for channel in guild.text_channels:
            if channel.name == name:
                return channel
        logger.warning(f"Channel '{name}' not found in guild {guild.id}")
        return None

    async def resolve_display_name(self, guild: discord.Guild | None, user_id: int) -> str:
        if guild is not None:
            member = guild.get_member(user_id)
            if member is not None:
                return member.display_name
        user = self.bot.get_user(user_id)
        if user is not None:
            return user.display_name
        try:
            user = await self.bot.fetch_user(user_id)
            return user.display_name
        except Exception as exc:
            logger.debug(f"Could not resolve user {user_id}: {exc}")
            return UNKNOWN_USER

    async def resolve_display_names(
        self, guild: discord.Guild | None, user_ids: Iterable[int]
    ) -> list[str]:
        return [await self.resolve_display_name(guild, uid) for uid in user_ids]
