"""
kestrel.bot.cogs.meta — /level
================================

Lets anyone look up their own (or another member's) points and level.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import discord
from discord import app_commands
from discord.ext import commands

from kestrel.bot.checks import reply_command_error, send_private
from kestrel.database.engine import run_db
from kestrel.services.embeds import build_level_embed
from kestrel.services.progress_service import get_progress

if TYPE_CHECKING:
    from kestrel.bot.core import KestrelBot


class Meta(commands.Cog, name="Meta"):
    """Level lookups."""

    def __init__(self, bot: KestrelBot) -> None:
        self.bot = bot

    @app_commands.command(name="level", description="Check your or someone else's level")
    @app_commands.describe(user="The user to check (optional)")
    @app_commands.guild_only()
    async def level(
        self,
        interaction: discord.Interaction,
        user: discord.User | None = None,
    ) -> None:
        target = user or interaction.user
        progress = await run_db(
            get_progress, self.bot.engine, target.id, interaction.guild_id
        )
        if progress is None:
            await send_private(interaction, f"{target} hasn't gained any XP yet.")
            return

        embed = build_level_embed(str(target), target.display_avatar.url, progress)
        await interaction.response.send_message(embed=embed)

    async def cog_app_command_error(
        self, interaction: discord.Interaction, error: app_commands.AppCommandError
    ) -> None:
        await reply_command_error(interaction, error)


async def setup(bot: KestrelBot) -> None:
    await bot.add_cog(Meta(bot))
