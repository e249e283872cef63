"""
kestrel.engine.leveling — Cooldown & Point Accrual
====================================================

Pure calculation step.  No Discord I/O, no DB I/O inside the engine;
:mod:`kestrel.services.progress_service` loads the snapshot, calls
:func:`apply_activity` and persists whatever comes back.

Pipeline:
  ProgressSnapshot | None → Cooldown gate → Accrue → Recompute level → ActivityResult
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from kestrel.constants import (
    COOLDOWN_MS,
    DEFAULT_LEVEL_ROLES,
    POINTS_PER_MESSAGE,
    level_from_points,
)
from kestrel.engine.events import ProgressSnapshot

logger = logging.getLogger(__name__)

__all__ = ["ActivityResult", "DEFAULT_LEVELING_RULES", "LevelingRules", "apply_activity"]


@dataclass(frozen=True, slots=True)
class LevelingRules:
    """Tuning for the leveling engine, built once at startup."""

    points_per_message: int = POINTS_PER_MESSAGE
    cooldown_ms: int = COOLDOWN_MS
    level_roles: Mapping[int, str] = field(default_factory=lambda: DEFAULT_LEVEL_ROLES)

    def __post_init__(self) -> None:
        object.__setattr__(self, "level_roles", MappingProxyType(dict(self.level_roles)))

    def role_for_level(
        self, level: int, overrides: Mapping[int, str] | None = None
    ) -> str | None:
        """Role name mapped to *level*; guild *overrides* win over the defaults."""
        if overrides and level in overrides:
            return overrides[level]
        return self.level_roles.get(level)


DEFAULT_LEVELING_RULES = LevelingRules()


@dataclass(frozen=True, slots=True)
class ActivityResult:
    """Output of an accepted (off-cooldown) activity."""

    progress: ProgressSnapshot
    previous_level: int

    @property
    def leveled_up(self) -> bool:
        return self.progress.level > self.previous_level


def apply_activity(
    current: ProgressSnapshot | None,
    *,
    user_id: int,
    guild_id: int,
    now: int,
    rules: LevelingRules = DEFAULT_LEVELING_RULES,
) -> ActivityResult | None:
    """Advance a user's progress for one message sent at *now* (epoch ms).

    Returns ``None`` while the user is on cooldown — nothing should be
    written in that case.  A missing snapshot counts as zero points with a
    zero timestamp; the cooldown only applies once a snapshot exists, so a
    user's first message always counts.
    """
    if current is not None and now - current.last_event_at < rules.cooldown_ms:
        logger.debug(
            "Cooldown active for user %s in guild %s (%d ms remaining)",
            user_id, guild_id, rules.cooldown_ms - (now - current.last_event_at),
        )
        return None

    if current is None:
        current = ProgressSnapshot(user_id=user_id, guild_id=guild_id)

    new_points = current.points + rules.points_per_message
    return ActivityResult(
        progress=ProgressSnapshot(
            user_id=user_id,
            guild_id=guild_id,
            points=new_points,
            level=level_from_points(new_points),
            last_event_at=now,
        ),
        previous_level=current.level,
    )
