"""
kestrel.services.guild_config_service — Guild Settings Reads & Writes
=======================================================================

Read-modify-write over the single ``guild_config`` row of a guild.

Every write rewrites the **complete** record: the current row is loaded
(or defaults are synthesized when the guild has none yet), one field is
changed, and all columns are written back.  Changing the announcement
channel therefore never drops the automod flag, the mod role or the word
list.
"""

from __future__ import annotations

import dataclasses
import logging
from typing import TYPE_CHECKING

from sqlalchemy.orm import Session

from kestrel.database.engine import get_session
from kestrel.database.models import GuildConfig
from kestrel.engine.events import GuildSettings

if TYPE_CHECKING:
    from sqlalchemy import Engine

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------
def get_guild_settings(engine: Engine, guild_id: int) -> GuildSettings | None:
    """Return the guild's settings, or ``None`` when no row exists."""
    with Session(engine) as session:
        row = session.get(GuildConfig, guild_id)
        return row.to_settings() if row else None


def load_settings(session: Session, guild_id: int) -> GuildSettings | None:
    """Same as :func:`get_guild_settings` but inside an open session."""
    row = session.get(GuildConfig, guild_id)
    return row.to_settings() if row else None


# ---------------------------------------------------------------------------
# Writes
# ---------------------------------------------------------------------------
def _write_full_record(session: Session, settings: GuildSettings) -> None:
    row = session.get(GuildConfig, settings.guild_id)
    if row is None:
        row = GuildConfig(guild_id=settings.guild_id)
        session.add(row)
    row.automod_enabled = settings.automod_enabled
    row.level_channel_id = settings.level_channel_id
    row.mod_role_id = settings.mod_role_id
    row.bad_words = list(settings.bad_words)
    row.level_roles = {str(k): v for k, v in settings.level_roles.items()}


def _update(engine: Engine, guild_id: int, **changes) -> GuildSettings:
    with get_session(engine) as session:
        current = load_settings(session, guild_id) or GuildSettings(guild_id=guild_id)
        updated = dataclasses.replace(current, **changes)
        _write_full_record(session, updated)
    return updated


def set_announce_channel(engine: Engine, guild_id: int, channel_id: int | None) -> GuildSettings:
    """Point level-up announcements at *channel_id* (``None`` → in-channel)."""
    settings = _update(engine, guild_id, level_channel_id=channel_id)
    logger.info("Guild %s: level channel set to %s", guild_id, channel_id)
    return settings


def set_automod_enabled(engine: Engine, guild_id: int, enabled: bool) -> GuildSettings:
    """Turn automod on or off for a guild."""
    settings = _update(engine, guild_id, automod_enabled=enabled)
    logger.info("Guild %s: automod %s", guild_id, "enabled" if enabled else "disabled")
    return settings


def add_bad_word(engine: Engine, guild_id: int, word: str) -> tuple[bool, GuildSettings]:
    """Append *word* (lowercased) to the guild's list.

    Returns ``(added, settings)``; *added* is False if it was already there,
    in which case nothing is written.
    """
    word = word.strip().lower()
    current = get_guild_settings(engine, guild_id) or GuildSettings(guild_id=guild_id)
    if word in current.bad_words:
        return False, current
    settings = _update(engine, guild_id, bad_words=(*current.bad_words, word))
    logger.info("Guild %s: added custom bad word %r", guild_id, word)
    return True, settings


def remove_bad_word(engine: Engine, guild_id: int, word: str) -> tuple[bool, GuildSettings]:
    """Remove *word* from the guild's list.

    Returns ``(removed, settings)``; *removed* is False if it was not there.
    """
    word = word.strip().lower()
    current = get_guild_settings(engine, guild_id) or GuildSettings(guild_id=guild_id)
    if word not in current.bad_words:
        return False, current
    remaining = tuple(w for w in current.bad_words if w != word)
    settings = _update(engine, guild_id, bad_words=remaining)
    logger.info("Guild %s: removed custom bad word %r", guild_id, word)
    return True, settings
