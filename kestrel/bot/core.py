"""
kestrel.bot.core — Bot Instance & Cog Loader
=============================================

Defines :class:`KestrelBot`, a ``commands.Bot`` subclass that:

1. Stores the shared config (``bot.cfg``) and DB engine (``bot.engine``)
   so every Cog can reach them via ``self.bot.cfg`` / ``self.bot.engine``.
2. Loads every Cog listed in :data:`EXTENSIONS`.
3. Syncs the slash-command tree on startup (guild-scoped for dev, global
   for production — controlled by the ``DEV_GUILD_ID`` env var).
4. Sets the configured presence.
"""

from __future__ import annotations

import logging
import os

import discord
from discord.ext import commands
from sqlalchemy import Engine

from kestrel.config import KestrelConfig

logger = logging.getLogger(__name__)

# Cog modules to load on startup
EXTENSIONS: list[str] = [
    "kestrel.bot.cogs.messages",
    "kestrel.bot.cogs.moderation",
    "kestrel.bot.cogs.meta",
    "kestrel.bot.cogs.admin",
]

_STATUSES = {
    "online": discord.Status.online,
    "idle": discord.Status.idle,
    "dnd": discord.Status.dnd,
    "invisible": discord.Status.invisible,
}


class KestrelBot(commands.Bot):
    """Custom Bot subclass that carries project-wide state.

    Parameters
    ----------
    cfg:
        The parsed :class:`KestrelConfig` from ``config.yaml``.  Its
        ``leveling`` and ``automod`` rules are what the cogs apply.
    engine:
        A SQLAlchemy :class:`Engine`.
    """

    def __init__(self, cfg: KestrelConfig, engine: Engine) -> None:
        # Privileged intents (must enable in Developer Portal):
        #   MESSAGE_CONTENT — automod needs the text
        #   GUILD_MEMBERS   — role grants, kick/timeout member lookup
        intents = discord.Intents.default()
        intents.message_content = True
        intents.members = True
        intents.presences = False

        super().__init__(command_prefix=cfg.bot_prefix, intents=intents)

        self.cfg = cfg
        self.engine = engine

    # -----------------------------------------------------------------------
    # Lifecycle hooks
    # -----------------------------------------------------------------------
    async def setup_hook(self) -> None:
        """Load all Cog extensions before connecting.

        A broken Cog is logged and skipped rather than taking the bot down.
        """
        for ext in EXTENSIONS:
            try:
                await self.load_extension(ext)
                logger.info("Loaded extension: %s", ext)
            except Exception as exc:
                logger.error("Failed to load extension %s: %s", ext, exc)

    async def on_ready(self) -> None:
        """Fired when the bot has connected and the cache is populated."""
        assert self.user is not None  # guaranteed after on_ready
        logger.info("Logged in as %s (ID: %s)", self.user.name, self.user.id)

        await self._apply_presence()

        # --- Slash-command sync ---------------------------------------------
        try:
            dev_guild_id = os.getenv("DEV_GUILD_ID")
            if dev_guild_id:
                guild = discord.Object(id=int(dev_guild_id))
                self.tree.copy_global_to(guild=guild)
                synced = await self.tree.sync(guild=guild)
                logger.info("Synced %d commands to dev guild %s", len(synced), dev_guild_id)
            else:
                synced = await self.tree.sync()
                logger.info("Synced %d commands globally", len(synced))
        except discord.HTTPException:
            logger.exception("Failed to sync application commands")

    async def _apply_presence(self) -> None:
        activity = None
        if self.cfg.presence_activity:
            activity = discord.Activity(
                type=discord.ActivityType.watching, name=self.cfg.presence_activity
            )
        await self.change_presence(
            status=_STATUSES.get(self.cfg.presence_status, discord.Status.online),
            activity=activity,
        )
