"""
kestrel.engine.events — Engine data types
===========================================

Immutable value objects passed between the pure engine, the services and
the cogs.  None of them hold a database session or a Discord object, so
they are safe to hand across the ``run_db`` thread boundary.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

__all__ = ["GuildSettings", "LevelUpEvent", "ProgressSnapshot"]


@dataclass(frozen=True, slots=True)
class ProgressSnapshot:
    """A user's points in one guild, as last persisted."""

    user_id: int
    guild_id: int
    points: int = 0
    level: int = 0
    last_event_at: int = 0  # epoch milliseconds


@dataclass(frozen=True, slots=True)
class GuildSettings:
    """Detached copy of a ``guild_config`` row.

    ``GuildSettings(guild_id=...)`` with no other arguments is exactly the
    set of defaults used when a guild has no row yet.
    """

    guild_id: int
    automod_enabled: bool = True
    level_channel_id: int | None = None
    mod_role_id: int | None = None  # Stored, not consulted yet
    bad_words: tuple[str, ...] = ()
    level_roles: Mapping[int, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # Read-only copy; the caller's dict stays theirs
        object.__setattr__(self, "level_roles", MappingProxyType(dict(self.level_roles)))


@dataclass(frozen=True, slots=True)
class LevelUpEvent:
    """A level crossing that has a role mapped to it.

    The platform layer turns this into two independent side effects:
    a congratulation in ``channel_id`` and a grant of ``role_name``.
    """

    user_id: int
    guild_id: int
    new_level: int
    channel_id: int
    role_name: str
