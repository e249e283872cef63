"""
kestrel.config — YAML Configuration Loader
===========================================

Reads ``config.yaml`` for soft settings: command prefix, presence, and the
leveling / automod tuning tables.  Secrets (``DISCORD_TOKEN``,
``DATABASE_URL``) come from the environment instead.

The tuning sections are turned into immutable
:class:`~kestrel.engine.leveling.LevelingRules` and
:class:`~kestrel.engine.automod.AutomodRules` once, at startup, and handed
to the bot.  Any section left out of the file falls back to the defaults
in :mod:`kestrel.constants`.

Usage::

    from kestrel.config import load_config

    cfg = load_config()            # reads ./config.yaml by default
    print(cfg.leveling.cooldown_ms)  # 60000
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import yaml

from kestrel.constants import (
    AUTOMOD_WARNING_SECONDS,
    CAPS_MIN_LENGTH,
    CAPS_RATIO,
    COOLDOWN_MS,
    DEFAULT_BAD_WORDS,
    DEFAULT_LEVEL_ROLES,
    POINTS_PER_MESSAGE,
    REPEAT_RUN_LENGTH,
)
from kestrel.engine.automod import AutomodRules
from kestrel.engine.leveling import LevelingRules

_PRESENCE_STATUSES = {"online", "idle", "dnd", "invisible"}


# ---------------------------------------------------------------------------
# Typed settings object
# ---------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class KestrelConfig:
    """Immutable configuration loaded from ``config.yaml``."""

    # Discord
    bot_prefix: str

    # Presence shown under the bot's name
    presence_status: str = "dnd"
    presence_activity: str | None = "Joyedlion"  # "Watching …"

    # Seconds before the "removed by automod" notice deletes itself
    automod_warning_seconds: float = AUTOMOD_WARNING_SECONDS

    leveling: LevelingRules = field(default_factory=LevelingRules)
    automod: AutomodRules = field(default_factory=AutomodRules)


# ---------------------------------------------------------------------------
# Section parsers
# ---------------------------------------------------------------------------
def _parse_leveling(raw: dict | None) -> LevelingRules:
    raw = raw or {}
    roles = raw.get("level_roles")
    return LevelingRules(
        points_per_message=int(raw.get("points_per_message", POINTS_PER_MESSAGE)),
        cooldown_ms=int(float(raw.get("cooldown_seconds", COOLDOWN_MS / 1000)) * 1000),
        level_roles=(
            {int(level): str(name) for level, name in roles.items()}
            if roles is not None
            else dict(DEFAULT_LEVEL_ROLES)
        ),
    )


def _parse_automod(raw: dict | None) -> AutomodRules:
    raw = raw or {}
    words = raw.get("default_bad_words")
    return AutomodRules(
        default_bad_words=(
            tuple(str(w).lower() for w in words) if words is not None else DEFAULT_BAD_WORDS
        ),
        repeat_run_length=int(raw.get("repeat_run_length", REPEAT_RUN_LENGTH)),
        caps_min_length=int(raw.get("caps_min_length", CAPS_MIN_LENGTH)),
        caps_ratio=float(raw.get("caps_ratio", CAPS_RATIO)),
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------
def load_config(path: str | Path = "config.yaml") -> KestrelConfig:
    """Read *path* and return a :class:`KestrelConfig` instance.

    Raises
    ------
    FileNotFoundError
        If the YAML file doesn't exist.
    KeyError
        If a required key is missing from the YAML file.
    ValueError
        If the presence status is not one Discord understands.
    """
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(
            f"Configuration file not found: {config_path.resolve()}\n"
            "Hint: copy config.yaml.example → config.yaml and edit it."
        )

    with open(config_path, encoding="utf-8") as fh:
        raw: dict = yaml.safe_load(fh) or {}

    presence = raw.get("presence") or {}
    status = str(presence.get("status", "dnd")).lower()
    if status not in _PRESENCE_STATUSES:
        raise ValueError(
            f"presence.status must be one of {sorted(_PRESENCE_STATUSES)}, got {status!r}"
        )

    return KestrelConfig(
        bot_prefix=raw["bot_prefix"],
        presence_status=status,
        presence_activity=presence.get("activity", "Joyedlion") or None,
        automod_warning_seconds=float(
            raw.get("automod_warning_seconds", AUTOMOD_WARNING_SECONDS)
        ),
        leveling=_parse_leveling(raw.get("leveling")),
        automod=_parse_automod(raw.get("automod")),
    )
