"""
kestrel.database.models — SQLAlchemy 2.0 Data Models
======================================================

Tables:
- user_progress — Points, level and cooldown timestamp per (user, guild)
- guild_config  — Per-guild automod / announcement settings
"""

from __future__ import annotations

from sqlalchemy import JSON, BigInteger, Boolean, Integer
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from kestrel.engine.events import GuildSettings, ProgressSnapshot


# ---------------------------------------------------------------------------
# Base
# ---------------------------------------------------------------------------
class Base(DeclarativeBase):
    """Shared base for all Kestrel ORM models."""


# ---------------------------------------------------------------------------
# UserProgress — one row per member per guild
# ---------------------------------------------------------------------------
class UserProgress(Base):
    __tablename__ = "user_progress"

    user_id: Mapped[int] = mapped_column(BigInteger, primary_key=True)
    guild_id: Mapped[int] = mapped_column(BigInteger, primary_key=True)
    points: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    # Always written as level_from_points(points), never on its own
    level: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    last_event_at: Mapped[int] = mapped_column(BigInteger, default=0, nullable=False)

    def to_snapshot(self) -> ProgressSnapshot:
        return ProgressSnapshot(
            user_id=self.user_id,
            guild_id=self.guild_id,
            points=self.points,
            level=self.level,
            last_event_at=self.last_event_at,
        )

    def __repr__(self) -> str:
        return (
            f"<UserProgress user={self.user_id} guild={self.guild_id} "
            f"points={self.points} lvl={self.level}>"
        )


# ---------------------------------------------------------------------------
# GuildConfig — one row per guild, created on the first config change
# ---------------------------------------------------------------------------
class GuildConfig(Base):
    __tablename__ = "guild_config"

    guild_id: Mapped[int] = mapped_column(BigInteger, primary_key=True)
    automod_enabled: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    level_channel_id: Mapped[int | None] = mapped_column(BigInteger, default=None)
    mod_role_id: Mapped[int | None] = mapped_column(BigInteger, default=None)
    bad_words: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    # JSON object keys are strings on disk: {"5": "Regular"}
    level_roles: Mapped[dict] = mapped_column(JSON, default=dict, nullable=False)

    def to_settings(self) -> GuildSettings:
        return GuildSettings(
            guild_id=self.guild_id,
            automod_enabled=bool(self.automod_enabled),
            level_channel_id=self.level_channel_id,
            mod_role_id=self.mod_role_id,
            bad_words=tuple(self.bad_words or ()),
            level_roles={int(k): v for k, v in (self.level_roles or {}).items()},
        )

    def __repr__(self) -> str:
        return f"<GuildConfig guild={self.guild_id} automod={self.automod_enabled}>"
