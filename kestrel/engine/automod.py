"""
kestrel.engine.automod — Message classifier
=============================================

Decides whether a guild message should be removed.  Three independent
rules are OR-ed together:

* **bad_word** — any default or guild-specific term appears as a literal,
  case-insensitive substring ("spammer" trips "spam").
* **repeated_characters** — one character typed ``repeat_run_length`` or
  more times in a row (case-sensitive, as typed; line breaks excluded).
* **excessive_caps** — the message is longer than ``caps_min_length`` and
  uppercase ``A-Z`` make up more than ``caps_ratio`` of *all* characters,
  spaces and punctuation included.

Pure: no I/O, no mutation.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from kestrel.constants import (
    CAPS_MIN_LENGTH,
    CAPS_RATIO,
    DEFAULT_BAD_WORDS,
    REPEAT_RUN_LENGTH,
)
from kestrel.engine.events import GuildSettings

__all__ = ["AutomodRules", "DEFAULT_AUTOMOD_RULES", "classify", "explain"]

_UPPERCASE = re.compile(r"[A-Z]")


@dataclass(frozen=True, slots=True)
class AutomodRules:
    """Global automod tuning, built once at startup."""

    default_bad_words: tuple[str, ...] = DEFAULT_BAD_WORDS
    repeat_run_length: int = REPEAT_RUN_LENGTH
    caps_min_length: int = CAPS_MIN_LENGTH
    caps_ratio: float = CAPS_RATIO

    def __post_init__(self) -> None:
        if self.repeat_run_length < 2:
            raise ValueError("repeat_run_length must be at least 2")

    @property
    def repeat_pattern(self) -> re.Pattern[str]:
        # (.)\1{n-1,}; line breaks are not characters here
        return re.compile(r"(.)\1{%d,}" % (self.repeat_run_length - 1))


DEFAULT_AUTOMOD_RULES = AutomodRules()


def _contains_bad_word(text: str, words: list[str]) -> bool:
    lowered = text.lower()
    return any(word and word.lower() in lowered for word in words)


def _has_repeated_run(text: str, rules: AutomodRules) -> bool:
    return rules.repeat_pattern.search(text) is not None


def _is_mostly_caps(text: str, rules: AutomodRules) -> bool:
    if len(text) <= rules.caps_min_length:
        return False
    return len(_UPPERCASE.findall(text)) / len(text) > rules.caps_ratio


def explain(
    text: str,
    settings: GuildSettings | None,
    rules: AutomodRules = DEFAULT_AUTOMOD_RULES,
) -> list[str]:
    """Return the names of every rule *text* trips (empty → allowed).

    A guild with no settings row is treated as automod-enabled with no
    custom words; only an explicit ``automod_enabled=False`` turns it off.
    """
    if settings is not None and not settings.automod_enabled:
        return []

    words = list(rules.default_bad_words)
    if settings is not None:
        words.extend(settings.bad_words)

    triggered: list[str] = []
    if _contains_bad_word(text, words):
        triggered.append("bad_word")
    if _has_repeated_run(text, rules):
        triggered.append("repeated_characters")
    if _is_mostly_caps(text, rules):
        triggered.append("excessive_caps")
    return triggered


def classify(
    text: str,
    settings: GuildSettings | None,
    rules: AutomodRules = DEFAULT_AUTOMOD_RULES,
) -> bool:
    """True if the message should be suppressed."""
    return bool(explain(text, settings, rules))
