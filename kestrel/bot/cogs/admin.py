"""
kestrel.bot.cogs.admin — Guild Configuration Commands
=======================================================

- /setlevelchannel — where level-up messages go
- /automod — turn automod on or off
- /badword add | remove | list — guild-specific block-list

All commands require Administrator.  Each write goes through
guild_config_service, which rewrites the full guild record.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import discord
from discord import app_commands
from discord.ext import commands

from kestrel.bot.arguments import BadWordArgs
from kestrel.bot.checks import is_administrator, reply_command_error, send_private
from kestrel.database.engine import run_db
from kestrel.services.guild_config_service import (
    add_bad_word,
    get_guild_settings,
    remove_bad_word,
    set_announce_channel,
    set_automod_enabled,
)

if TYPE_CHECKING:
    from kestrel.bot.core import KestrelBot

logger = logging.getLogger(__name__)


class Admin(commands.Cog, name="Admin"):
    """Per-guild configuration."""

    badword = app_commands.Group(
        name="badword",
        description="Manage this server's automod word list",
        guild_only=True,
        default_permissions=discord.Permissions(administrator=True),
    )

    def __init__(self, bot: KestrelBot) -> None:
        self.bot = bot

    # -------------------------------------------------------------------
    # /setlevelchannel
    # -------------------------------------------------------------------
    @app_commands.command(
        name="setlevelchannel",
        description="Set the channel for level up notifications",
    )
    @app_commands.describe(channel="The channel for level notifications")
    @app_commands.default_permissions(administrator=True)
    @app_commands.guild_only()
    @is_administrator()
    async def setlevelchannel(
        self,
        interaction: discord.Interaction,
        channel: discord.TextChannel,
    ) -> None:
        await run_db(set_announce_channel, self.bot.engine, interaction.guild_id, channel.id)
        await interaction.response.send_message(
            f"Level up notifications will now be sent to {channel.mention}."
        )

    # -------------------------------------------------------------------
    # /automod
    # -------------------------------------------------------------------
    @app_commands.command(name="automod", description="Enable or disable automod")
    @app_commands.describe(enabled="Whether automod should remove flagged messages")
    @app_commands.default_permissions(administrator=True)
    @app_commands.guild_only()
    @is_administrator()
    async def automod(self, interaction: discord.Interaction, enabled: bool) -> None:
        await run_db(set_automod_enabled, self.bot.engine, interaction.guild_id, enabled)
        await interaction.response.send_message(
            f"Automod is now **{'enabled' if enabled else 'disabled'}**."
        )

    # -------------------------------------------------------------------
    # /badword
    # -------------------------------------------------------------------
    @badword.command(name="add", description="Block a word or phrase")
    @app_commands.describe(word="Matched anywhere in a message, case-insensitive")
    @is_administrator()
    async def badword_add(self, interaction: discord.Interaction, word: str) -> None:
        args = BadWordArgs(word=word)
        added, _ = await run_db(add_bad_word, self.bot.engine, interaction.guild_id, args.word)
        if not added:
            await send_private(interaction, f"`{args.word}` is already blocked.")
            return
        await send_private(interaction, f"Added `{args.word}` to the block-list.")

    @badword.command(name="remove", description="Unblock a word or phrase")
    @app_commands.describe(word="A word previously added with /badword add")
    @is_administrator()
    async def badword_remove(self, interaction: discord.Interaction, word: str) -> None:
        args = BadWordArgs(word=word)
        removed, _ = await run_db(remove_bad_word, self.bot.engine, interaction.guild_id, args.word)
        if not removed:
            await send_private(interaction, f"`{args.word}` is not on this server's list.")
            return
        await send_private(interaction, f"Removed `{args.word}` from the block-list.")

    @badword.command(name="list", description="Show the block-list")
    @is_administrator()
    async def badword_list(self, interaction: discord.Interaction) -> None:
        settings = await run_db(get_guild_settings, self.bot.engine, interaction.guild_id)
        custom = ", ".join(f"`{w}`" for w in settings.bad_words) if settings else ""
        defaults = ", ".join(f"`{w}`" for w in self.bot.cfg.automod.default_bad_words)
        await send_private(
            interaction,
            f"**Default:** {defaults or '(none)'}\n**This server:** {custom or '(none)'}",
        )

    async def cog_app_command_error(
        self, interaction: discord.Interaction, error: app_commands.AppCommandError
    ) -> None:
        await reply_command_error(interaction, error)


async def setup(bot: KestrelBot) -> None:
    await bot.add_cog(Admin(bot))
