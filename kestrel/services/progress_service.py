"""
kestrel.services.progress_service — Progress Persistence
==========================================================

Wraps the pure leveling step with a load and a save.  Callable from cogs
through :func:`~kestrel.database.engine.run_db`.

Concurrency: there is no per-user lock.  Two messages from the same user
processed at the same instant can both read the old row, and the last
write wins.  The cooldown window makes that practically unreachable, so
the race is accepted rather than serialized.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy.orm import Session

from kestrel.database.models import UserProgress
from kestrel.engine.events import LevelUpEvent, ProgressSnapshot
from kestrel.engine.leveling import DEFAULT_LEVELING_RULES, LevelingRules, apply_activity
from kestrel.services.guild_config_service import load_settings

if TYPE_CHECKING:
    from sqlalchemy import Engine

logger = logging.getLogger(__name__)


def get_progress(engine: Engine, user_id: int, guild_id: int) -> ProgressSnapshot | None:
    """Return the user's persisted progress in a guild, if any."""
    with Session(engine) as session:
        row = session.get(UserProgress, (user_id, guild_id))
        return row.to_snapshot() if row else None


def record_activity(
    engine: Engine,
    rules: LevelingRules = DEFAULT_LEVELING_RULES,
    *,
    user_id: int,
    guild_id: int,
    now: int,
    channel_id: int,
) -> LevelUpEvent | None:
    """Award points for one message and detect a level crossing.

    1. Load the user's row (missing → zero points, zero timestamp).
    2. On cooldown → return ``None`` without writing.
    3. Otherwise write points, level and timestamp together.
    4. If the level went up and a role is mapped to the new level, return a
       :class:`LevelUpEvent`; its channel is the guild's configured
       announcement channel, else *channel_id* (where the message was sent).

    Storage errors propagate; the transaction is rolled back, so points,
    level and timestamp are never half-written.
    """
    with Session(engine) as session:
        row = session.get(UserProgress, (user_id, guild_id))
        current = row.to_snapshot() if row else None

        result = apply_activity(
            current, user_id=user_id, guild_id=guild_id, now=now, rules=rules
        )
        if result is None:
            return None

        if row is None:
            row = UserProgress(user_id=user_id, guild_id=guild_id)
            session.add(row)
        row.points = result.progress.points
        row.level = result.progress.level
        row.last_event_at = result.progress.last_event_at

        event: LevelUpEvent | None = None
        if result.leveled_up:
            settings = load_settings(session, guild_id)
            overrides = settings.level_roles if settings else None
            role_name = rules.role_for_level(result.progress.level, overrides)
            logger.info(
                "User %s reached level %d in guild %s (%d points)",
                user_id, result.progress.level, guild_id, result.progress.points,
            )
            if role_name is not None:
                announce_channel = (
                    settings.level_channel_id
                    if settings and settings.level_channel_id
                    else channel_id
                )
                event = LevelUpEvent(
                    user_id=user_id,
                    guild_id=guild_id,
                    new_level=result.progress.level,
                    channel_id=announce_channel,
                    role_name=role_name,
                )

        session.commit()
        return event
