"""
kestrel.bot.cogs.moderation — Moderator Slash Commands
========================================================

- /kick — remove a member from the server
- /ban — ban a user (member or not)
- /timeout — mute a member for N minutes
- /clear — bulk delete the last 1–100 messages in the channel
- /embed — post a custom embed as the bot

All commands require Manage Messages or Administrator.  Discord-side
defaults (``default_permissions``) hide them from regular members too.
"""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import TYPE_CHECKING

import discord
from discord import app_commands
from discord.ext import commands

from kestrel.bot.arguments import ClearArgs, EmbedArgs, ModerationArgs, TimeoutArgs
from kestrel.bot.checks import is_moderator, reply_command_error, send_private
from kestrel.services.embeds import build_custom_embed

if TYPE_CHECKING:
    from kestrel.bot.core import KestrelBot

logger = logging.getLogger(__name__)


def bot_outranks(guild: discord.Guild, member: discord.Member) -> bool:
    """True if the bot's top role sits above *member*'s (and they aren't the owner)."""
    me = guild.me
    if me is None or member.id == guild.owner_id or member.id == me.id:
        return False
    return me.top_role > member.top_role


class Moderation(commands.Cog, name="Moderation"):
    """Kick, ban, timeout, bulk delete and custom embeds."""

    def __init__(self, bot: KestrelBot) -> None:
        self.bot = bot

    # -------------------------------------------------------------------
    # /embed
    # -------------------------------------------------------------------
    @app_commands.command(name="embed", description="Create a custom embed")
    @app_commands.describe(
        title="The title of the embed",
        message="The message content of the embed",
        color="The color of the embed (hex code like #ff0000)",
    )
    @app_commands.guild_only()
    @is_moderator()
    async def embed(
        self,
        interaction: discord.Interaction,
        title: str,
        message: str,
        color: str,
    ) -> None:
        args = EmbedArgs(title=title, message=message, color=color)
        await interaction.response.send_message(
            embed=build_custom_embed(args.title, args.message, args.color)
        )

    # -------------------------------------------------------------------
    # /kick
    # -------------------------------------------------------------------
    @app_commands.command(name="kick", description="Kick a user from the server")
    @app_commands.describe(user="The user to kick", reason="Reason for the kick")
    @app_commands.default_permissions(kick_members=True)
    @app_commands.guild_only()
    @is_moderator()
    async def kick(
        self,
        interaction: discord.Interaction,
        user: discord.User,
        reason: str | None = None,
    ) -> None:
        args = ModerationArgs(user_id=user.id, reason=reason)
        guild = interaction.guild
        member = guild.get_member(args.user_id)
        if member is None:
            await send_private(interaction, "User not found in this server.")
            return
        if not (bot_outranks(guild, member) and guild.me.guild_permissions.kick_members):
            await send_private(interaction, "I cannot kick this user.")
            return

        await member.kick(reason=args.reason)
        logger.info(
            "%s kicked %s from guild %s: %s",
            interaction.user.id, member.id, guild.id, args.reason,
        )
        await interaction.response.send_message(f"Kicked {user} for: {args.reason}")

    # -------------------------------------------------------------------
    # /ban
    # -------------------------------------------------------------------
    @app_commands.command(name="ban", description="Ban a user from the server")
    @app_commands.describe(user="The user to ban", reason="Reason for the ban")
    @app_commands.default_permissions(ban_members=True)
    @app_commands.guild_only()
    @is_moderator()
    async def ban(
        self,
        interaction: discord.Interaction,
        user: discord.User,
        reason: str | None = None,
    ) -> None:
        args = ModerationArgs(user_id=user.id, reason=reason)
        guild = interaction.guild
        member = guild.get_member(args.user_id)
        # Users who already left can still be banned
        if member is not None and not (
            bot_outranks(guild, member) and guild.me.guild_permissions.ban_members
        ):
            await send_private(interaction, "I cannot ban this user.")
            return

        await guild.ban(user, reason=args.reason)
        logger.info(
            "%s banned %s from guild %s: %s",
            interaction.user.id, user.id, guild.id, args.reason,
        )
        await interaction.response.send_message(f"Banned {user} for: {args.reason}")

    # -------------------------------------------------------------------
    # /timeout
    # -------------------------------------------------------------------
    @app_commands.command(name="timeout", description="Timeout a user")
    @app_commands.describe(
        user="The user to timeout",
        duration="Duration in minutes",
        reason="Reason for the timeout",
    )
    @app_commands.default_permissions(moderate_members=True)
    @app_commands.guild_only()
    @is_moderator()
    async def timeout(
        self,
        interaction: discord.Interaction,
        user: discord.User,
        duration: int,
        reason: str | None = None,
    ) -> None:
        args = TimeoutArgs(user_id=user.id, duration=duration, reason=reason)
        guild = interaction.guild
        member = guild.get_member(args.user_id)
        if member is None:
            await send_private(interaction, "User not found in this server.")
            return
        if not (bot_outranks(guild, member) and guild.me.guild_permissions.moderate_members):
            await send_private(interaction, "I cannot timeout this user.")
            return

        await member.timeout(timedelta(minutes=args.duration), reason=args.reason)
        logger.info(
            "%s timed out %s in guild %s for %d min: %s",
            interaction.user.id, member.id, guild.id, args.duration, args.reason,
        )
        await interaction.response.send_message(
            f"Timed out {user} for {args.duration} minutes. Reason: {args.reason}"
        )

    # -------------------------------------------------------------------
    # /clear
    # -------------------------------------------------------------------
    @app_commands.command(name="clear", description="Clear messages from the channel")
    @app_commands.describe(amount="Number of messages to delete (1-100)")
    @app_commands.default_permissions(manage_messages=True)
    @app_commands.guild_only()
    @is_moderator()
    async def clear(
        self,
        interaction: discord.Interaction,
        amount: app_commands.Range[int, 1, 100],
    ) -> None:
        args = ClearArgs(amount=amount)
        channel = interaction.channel
        if not isinstance(channel, (discord.TextChannel, discord.Thread, discord.VoiceChannel)):
            await send_private(interaction, "This command can only be used in a text channel.")
            return

        # Fetch + bulk delete can outlast the 3 s interaction deadline
        await interaction.response.defer(ephemeral=True, thinking=True)
        messages = [m async for m in channel.history(limit=args.amount)]
        await channel.delete_messages(messages)
        logger.info(
            "%s cleared %d messages in channel %s", interaction.user.id, len(messages), channel.id,
        )
        await interaction.followup.send(f"Deleted {len(messages)} messages.", ephemeral=True)

    async def cog_app_command_error(
        self, interaction: discord.Interaction, error: app_commands.AppCommandError
    ) -> None:
        await reply_command_error(interaction, error)


async def setup(bot: KestrelBot) -> None:
    await bot.add_cog(Moderation(bot))
