"""
kestrel.constants — Shared Constants & Leveling Formula
=========================================================

Single source of truth for the leveling formula and the default tables.
The tables are only *defaults*: at runtime the bot uses the
:class:`~kestrel.engine.leveling.LevelingRules` and
:class:`~kestrel.engine.automod.AutomodRules` built from ``config.yaml``.
"""

from __future__ import annotations

import math
from types import MappingProxyType

# ---------------------------------------------------------------------------
# Leveling defaults
# ---------------------------------------------------------------------------
POINTS_PER_MESSAGE = 15
COOLDOWN_MS = 60_000

DEFAULT_LEVEL_ROLES = MappingProxyType({
    1: "Level 1",
    10: "Level 10",
    20: "Level 20",
    30: "Level 30",
    40: "Level 40",
    60: "Level 60",
    80: "Level 80",
    100: "Level 100",
})

# ---------------------------------------------------------------------------
# Automod defaults
# ---------------------------------------------------------------------------
DEFAULT_BAD_WORDS: tuple[str, ...] = ("spam", "discord.gg", "discord.com/invite")
REPEAT_RUN_LENGTH = 6
CAPS_MIN_LENGTH = 10
CAPS_RATIO = 0.7

# How long the "removed by automod" notice stays up (seconds)
AUTOMOD_WARNING_SECONDS = 5.0


# ---------------------------------------------------------------------------
# Leveling formula — THE single canonical implementation
# ---------------------------------------------------------------------------
def level_from_points(points: int) -> int:
    """Level reached with *points*.

    ``floor(0.1 * sqrt(points))`` — 100 points for level 1, 400 for level 2,
    10 000 for level 10.
    """
    if points < 0:
        raise ValueError(f"points must be non-negative, got {points}")
    return math.floor(0.1 * math.sqrt(points))


def points_for_level(level: int) -> int:
    """Points required to reach *level*: ``ceil((level / 0.1) ** 2)``.

    Not an exact inverse of :func:`level_from_points` because of float
    rounding, but ``level_from_points(points_for_level(L)) >= L`` holds.
    """
    if level < 0:
        raise ValueError(f"level must be non-negative, got {level}")
    return math.ceil((level / 0.1) ** 2)
