"""
kestrel.bot.arguments — Typed slash-command arguments
=======================================================

Every command builds one of these models from its options before it
touches Discord or the database.  A :class:`pydantic.ValidationError`
raised here is turned into a private reply by
:func:`kestrel.bot.checks.reply_command_error`.
"""

from __future__ import annotations

import re

from pydantic import BaseModel, ConfigDict, Field, field_validator

_HEX_COLOR_RE = re.compile(r"^#?([0-9a-fA-F]{6}|[0-9a-fA-F]{3})$")

DEFAULT_REASON = "No reason provided"
MAX_TIMEOUT_MINUTES = 28 * 24 * 60  # Discord's cap: 28 days


class CommandArgs(BaseModel):
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)


class EmbedArgs(CommandArgs):
    title: str = Field(min_length=1, max_length=256)
    message: str = Field(min_length=1, max_length=4096)
    color: int

    @field_validator("color", mode="before")
    @classmethod
    def _parse_hex(cls, value):
        if isinstance(value, int):
            return value
        match = _HEX_COLOR_RE.match(str(value).strip())
        if not match:
            raise ValueError("color must be a hex code like #ff0000")
        digits = match.group(1)
        if len(digits) == 3:
            digits = "".join(c * 2 for c in digits)
        return int(digits, 16)


class ModerationArgs(CommandArgs):
    """Shared by /kick and /ban."""
    user_id: int
    reason: str = Field(default=DEFAULT_REASON, max_length=512)

    @field_validator("reason", mode="before")
    @classmethod
    def _default_reason(cls, value):
        return value or DEFAULT_REASON


class TimeoutArgs(ModerationArgs):
    duration: int = Field(ge=1, le=MAX_TIMEOUT_MINUTES)  # minutes


class ClearArgs(CommandArgs):
    amount: int = Field(ge=1, le=100)


class BadWordArgs(CommandArgs):
    word: str = Field(min_length=1, max_length=100)

    @field_validator("word")
    @classmethod
    def _lower(cls, value: str) -> str:
        return value.lower()


def describe_validation_error(exc) -> str:
    """One-line, user-facing summary of a pydantic ValidationError."""
    parts = []
    for err in exc.errors():
        field = ".".join(str(p) for p in err.get("loc", ())) or "input"
        msg = err.get("msg", "invalid value").removeprefix("Value error, ")
        parts.append(f"`{field}`: {msg}")
    return "Invalid input: " + "; ".join(parts)
