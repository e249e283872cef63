"""
kestrel.bot.cogs.messages — Automod → Leveling pipeline
=========================================================

Listens for on_message and runs every guild message through:

1. Gate checks (bots, DMs)
2. Automod classifier — a flagged message is deleted, a short-lived
   notice is posted, and processing stops (no points for it)
3. Leveling — ``record_activity`` on a background thread via run_db
4. Level-up side effects through announcement_service

Failures in any step are logged; nothing here raises back into
discord.py's dispatcher.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

import discord
from discord.ext import commands

from kestrel.database.engine import run_db
from kestrel.engine.automod import explain
from kestrel.services.announcement_service import announce_level_up
from kestrel.services.embeds import automod_warning_text
from kestrel.services.guild_config_service import get_guild_settings
from kestrel.services.progress_service import record_activity

if TYPE_CHECKING:
    from kestrel.bot.core import KestrelBot

logger = logging.getLogger(__name__)


def now_ms() -> int:
    return int(time.time() * 1000)


class Messages(commands.Cog, name="Messages"):
    """Applies automod and awards points for guild messages."""

    def __init__(self, bot: KestrelBot) -> None:
        self.bot = bot

    @commands.Cog.listener()
    async def on_message(self, message: discord.Message) -> None:
        """Entry point — fires on every message the bot can see."""
        try:
            await self._handle_message(message)
        except Exception:
            logger.exception(
                "Error processing message %s from user %s",
                message.id,
                message.author.id,
            )

    async def _handle_message(self, message: discord.Message) -> None:
        """Inner message handler (separated for error isolation)."""

        # Gate 1: Ignore bots
        if message.author.bot:
            return

        # Gate 2: Ignore DMs
        if message.guild is None:
            return

        # --- Automod ---------------------------------------------------------
        settings = await run_db(get_guild_settings, self.bot.engine, message.guild.id)
        triggered = explain(message.content, settings, self.bot.cfg.automod)
        if triggered:
            logger.info(
                "Automod removed message %s from %s in guild %s (%s)",
                message.id, message.author.id, message.guild.id, ", ".join(triggered),
            )
            await self._suppress(message)
            return

        # --- Leveling --------------------------------------------------------
        event = await run_db(
            record_activity,
            self.bot.engine,
            self.bot.cfg.leveling,
            user_id=message.author.id,
            guild_id=message.guild.id,
            now=now_ms(),
            channel_id=message.channel.id,
        )
        if event is None:
            return

        if not isinstance(message.author, discord.Member):
            logger.warning("Level-up for %s but author is not a guild member", message.author.id)
            return

        await announce_level_up(
            event,
            guild=message.guild,
            member=message.author,
            fallback_channel=message.channel,
        )

    async def _suppress(self, message: discord.Message) -> None:
        """Delete *message* and leave a notice that cleans itself up."""
        try:
            await message.delete()
            await message.channel.send(
                automod_warning_text(message.author.id),
                delete_after=self.bot.cfg.automod_warning_seconds,
            )
        except discord.HTTPException:
            logger.exception("Error with automod on message %s", message.id)


async def setup(bot: KestrelBot) -> None:
    await bot.add_cog(Messages(bot))
