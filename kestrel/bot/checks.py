"""
kestrel.bot.checks — Permission checks & shared command error reply
=====================================================================

* :func:`is_moderator` — Manage Messages **or** Administrator.
* :func:`is_administrator` — Administrator only.

A failed check raises a :class:`~discord.app_commands.CheckFailure`
subclass carrying the private rejection text.  Every cog routes
``cog_app_command_error`` to :func:`reply_command_error`, which maps:

* permission failures → private rejection, nothing executed;
* pydantic validation errors → private description of the bad input;
* anything else (Discord HTTP / database errors) → logged, generic
  private reply.
"""

from __future__ import annotations

import logging

import discord
from discord import app_commands
from pydantic import ValidationError

from kestrel.bot.arguments import describe_validation_error

logger = logging.getLogger(__name__)

GENERIC_ERROR = "An error occurred while executing this command."


class MissingModeratorPermission(app_commands.CheckFailure):
    def __init__(self) -> None:
        super().__init__("You don't have permission to use this command.")


class MissingAdministratorPermission(app_commands.CheckFailure):
    def __init__(self) -> None:
        super().__init__("You need Administrator permission to use this command.")


def _permissions(interaction: discord.Interaction) -> discord.Permissions | None:
    return getattr(interaction.user, "guild_permissions", None)


def has_moderator_permission(interaction: discord.Interaction) -> bool:
    perms = _permissions(interaction)
    return bool(perms and (perms.manage_messages or perms.administrator))


def has_administrator_permission(interaction: discord.Interaction) -> bool:
    perms = _permissions(interaction)
    return bool(perms and perms.administrator)


def is_moderator():
    """Decorator: caller needs Manage Messages or Administrator."""
    async def predicate(interaction: discord.Interaction) -> bool:
        if not has_moderator_permission(interaction):
            raise MissingModeratorPermission()
        return True
    return app_commands.check(predicate)


def is_administrator():
    """Decorator: caller needs Administrator."""
    async def predicate(interaction: discord.Interaction) -> bool:
        if not has_administrator_permission(interaction):
            raise MissingAdministratorPermission()
        return True
    return app_commands.check(predicate)


async def send_private(interaction: discord.Interaction, content: str) -> None:
    """Ephemeral reply that works before or after the initial response."""
    if interaction.response.is_done():
        await interaction.followup.send(content, ephemeral=True)
    else:
        await interaction.response.send_message(content, ephemeral=True)


async def reply_command_error(
    interaction: discord.Interaction, error: app_commands.AppCommandError
) -> None:
    """Turn a slash-command error into a private reply."""
    original = getattr(error, "original", error)
    command = interaction.command.name if interaction.command else "?"

    if isinstance(error, app_commands.CheckFailure):
        logger.info(
            "Rejected /%s from %s: %s", command, interaction.user.id, error
        )
        content = str(error) or "You don't have permission to use this command."
    elif isinstance(original, ValidationError):
        content = describe_validation_error(original)
    else:
        logger.exception(
            "Error handling /%s from %s", command, interaction.user.id,
            exc_info=original,
        )
        content = GENERIC_ERROR

    try:
        await send_private(interaction, content)
    except discord.HTTPException:
        logger.exception("Failed to send error reply for /%s", command)
