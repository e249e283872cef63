"""
kestrel.services.announcement_service — Level-up Side Effects
===============================================================

Turns a :class:`~kestrel.engine.events.LevelUpEvent` into the two things
members see: a congratulation message and the level role.

The two run concurrently and independently.  Each catches and logs its
own failure, so a missing role never blocks the message and a failed
message never blocks the role.  Nothing here rolls back the points write.
"""

from __future__ import annotations

import asyncio
import enum
import logging
from typing import TYPE_CHECKING

import discord
from discord.abc import Messageable

from kestrel.services.embeds import level_up_text

if TYPE_CHECKING:
    from kestrel.engine.events import LevelUpEvent

logger = logging.getLogger(__name__)


class RoleGrantResult(enum.StrEnum):
    """Outcome of a role grant by name."""
    GRANTED = "granted"
    NOT_FOUND = "not_found"
    DENIED = "denied"
    FAILED = "failed"


# ---------------------------------------------------------------------------
# Channel resolution
# ---------------------------------------------------------------------------
def resolve_announce_channel(
    guild: discord.Guild,
    channel_id: int,
    *,
    fallback_channel: Messageable | None = None,
) -> Messageable | None:
    """Resolve *channel_id* to something we can send to.

    The triggering channel is reused directly when its id matches; a
    configured channel that no longer exists resolves to ``None``.
    """
    if fallback_channel is not None and getattr(fallback_channel, "id", None) == channel_id:
        return fallback_channel
    ch = guild.get_channel(channel_id)
    if ch is not None and isinstance(ch, Messageable):
        return ch
    return None


# ---------------------------------------------------------------------------
# Side effects
# ---------------------------------------------------------------------------
async def send_level_up_message(
    channel: Messageable | None, event: LevelUpEvent
) -> bool:
    """Post the congratulation.  Returns True if it was sent."""
    if channel is None:
        logger.warning(
            "Level-up channel %d not found in guild %d — skipping announcement",
            event.channel_id, event.guild_id,
        )
        return False
    try:
        await channel.send(level_up_text(event.user_id, event.new_level))
    except discord.HTTPException:
        logger.exception(
            "Failed to send level-up message to channel %d", event.channel_id
        )
        return False
    return True


async def grant_role_by_name(
    guild: discord.Guild,
    member: discord.Member,
    role_name: str,
) -> RoleGrantResult:
    """Give *member* the guild role called exactly *role_name*."""
    role = discord.utils.get(guild.roles, name=role_name)
    if role is None:
        logger.warning("Role %r not found in guild %s", role_name, guild.id)
        return RoleGrantResult.NOT_FOUND
    try:
        await member.add_roles(role, reason=f"Reached {role_name}")
    except discord.Forbidden:
        logger.warning(
            "Missing permissions to grant %r to %s in guild %s",
            role_name, member.id, guild.id,
        )
        return RoleGrantResult.DENIED
    except discord.HTTPException:
        logger.exception("Error assigning role %r to %s", role_name, member.id)
        return RoleGrantResult.FAILED
    logger.info("Granted %r to %s in guild %s", role_name, member.id, guild.id)
    return RoleGrantResult.GRANTED


# ---------------------------------------------------------------------------
# Public API — called by cogs
# ---------------------------------------------------------------------------
async def announce_level_up(
    event: LevelUpEvent,
    *,
    guild: discord.Guild,
    member: discord.Member,
    fallback_channel: Messageable | None = None,
) -> tuple[bool, RoleGrantResult]:
    """Send the congratulation and grant the role, concurrently.

    Returns ``(message_sent, role_result)`` for logging and tests.
    """
    channel = resolve_announce_channel(
        guild, event.channel_id, fallback_channel=fallback_channel
    )
    sent, role_result = await asyncio.gather(
        send_level_up_message(channel, event),
        grant_role_by_name(guild, member, event.role_name),
    )
    return sent, role_result
