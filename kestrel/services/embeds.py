"""
kestrel.services.embeds — Discord embed builders
==================================================

All embed construction lives here so the cogs only need to supply data.
"""

from __future__ import annotations

import discord

from kestrel.constants import points_for_level
from kestrel.engine.events import ProgressSnapshot


def build_custom_embed(title: str, message: str, color: int) -> discord.Embed:
    """Embed posted by ``/embed``."""
    embed = discord.Embed(
        title=title,
        description=message,
        color=discord.Color(color),
        timestamp=discord.utils.utcnow(),
    )
    return embed


def build_level_embed(
    display_name: str,
    avatar_url: str,
    progress: ProgressSnapshot,
) -> discord.Embed:
    """Level card shown by ``/level``."""
    to_next = points_for_level(progress.level + 1) - progress.points
    embed = discord.Embed(
        title=f"{display_name}'s Level",
        color=discord.Color(0x00FF00),
    )
    embed.add_field(name="Current Level", value=str(progress.level), inline=True)
    embed.add_field(name="XP", value=str(progress.points), inline=True)
    embed.add_field(name="XP to Next Level", value=str(to_next), inline=True)
    embed.set_thumbnail(url=avatar_url)
    return embed


def level_up_text(user_id: int, new_level: int) -> str:
    """Congratulation posted when a member reaches a role level."""
    return f"<@{user_id}> you are now level {new_level}!"


def automod_warning_text(user_id: int) -> str:
    return f"<@{user_id}>, your message was removed by automod."
