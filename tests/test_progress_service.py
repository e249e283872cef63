"""
tests/test_progress_service.py — Progress Service Integration Tests
====================================================================
Covers record_activity(): lazy row creation, cooldown no-ops, timestamp
updates, level-up events and announcement channel resolution.

Uses an in-memory SQLite database via the shared conftest fixtures.
"""

from __future__ import annotations

from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from kestrel.constants import level_from_points
from kestrel.database.models import GuildConfig, UserProgress
from kestrel.engine.events import LevelUpEvent, ProgressSnapshot
from kestrel.engine.leveling import LevelingRules
from kestrel.services import guild_config_service, progress_service

USER = 1000
GUILD = 100
CHANNEL = 500
MINUTE = 60_000


def _record(engine, now: int, rules: LevelingRules | None = None, **kwargs):
    return progress_service.record_activity(
        engine,
        rules or LevelingRules(),
        user_id=kwargs.get("user_id", USER),
        guild_id=kwargs.get("guild_id", GUILD),
        now=now,
        channel_id=kwargs.get("channel_id", CHANNEL),
    )


def _seed_progress(engine, points: int, last_event_at: int = 0) -> None:
    with Session(engine) as session:
        session.add(UserProgress(
            user_id=USER,
            guild_id=GUILD,
            points=points,
            level=level_from_points(points),
            last_event_at=last_event_at,
        ))
        session.commit()


class TestRecordActivity:
    def test_first_message_creates_row(self, db_engine):
        assert _record(db_engine, now=1_700_000_000_000) is None
        assert progress_service.get_progress(db_engine, USER, GUILD) == ProgressSnapshot(
            user_id=USER, guild_id=GUILD, points=15, level=0, last_event_at=1_700_000_000_000,
        )

    def test_first_message_at_epoch_start_is_scored(self, db_engine):
        assert _record(db_engine, now=0) is None
        progress = progress_service.get_progress(db_engine, USER, GUILD)
        assert progress.points == 15
        assert progress.last_event_at == 0

    def test_second_call_within_cooldown_is_noop(self, db_engine):
        _record(db_engine, now=10 * MINUTE)
        assert _record(db_engine, now=10 * MINUTE + 30_000) is None

        progress = progress_service.get_progress(db_engine, USER, GUILD)
        assert progress.points == 15
        assert progress.last_event_at == 10 * MINUTE

    def test_after_cooldown_always_writes(self, db_engine):
        _record(db_engine, now=10 * MINUTE)
        assert _record(db_engine, now=11 * MINUTE) is None  # no role threshold

        progress = progress_service.get_progress(db_engine, USER, GUILD)
        assert progress.points == 30
        assert progress.last_event_at == 11 * MINUTE

    def test_users_and_guilds_are_independent(self, db_engine):
        _record(db_engine, now=MINUTE)
        _record(db_engine, now=MINUTE, user_id=USER + 1)
        _record(db_engine, now=MINUTE, guild_id=GUILD + 1)
        assert progress_service.get_progress(db_engine, USER, GUILD).points == 15
        assert progress_service.get_progress(db_engine, USER + 1, GUILD).points == 15
        assert progress_service.get_progress(db_engine, USER, GUILD + 1).points == 15

    def test_level_up_to_mapped_level_emits_event(self, db_engine):
        _seed_progress(db_engine, points=90)
        event = _record(db_engine, now=5 * MINUTE)
        assert event == LevelUpEvent(
            user_id=USER, guild_id=GUILD, new_level=1, channel_id=CHANNEL, role_name="Level 1",
        )
        progress = progress_service.get_progress(db_engine, USER, GUILD)
        assert (progress.points, progress.level) == (105, 1)

    def test_level_up_to_unmapped_level_has_no_event(self, db_engine):
        _seed_progress(db_engine, points=390)  # level 1 → 2
        assert _record(db_engine, now=5 * MINUTE) is None
        assert progress_service.get_progress(db_engine, USER, GUILD).level == 2

    def test_configured_channel_wins(self, db_engine):
        guild_config_service.set_announce_channel(db_engine, GUILD, 999)
        _seed_progress(db_engine, points=90)
        event = _record(db_engine, now=5 * MINUTE)
        assert event.channel_id == 999

    def test_guild_role_override(self, db_engine):
        with Session(db_engine) as session:
            session.add(GuildConfig(guild_id=GUILD, level_roles={"2": "Regular"}))
            session.commit()
        _seed_progress(db_engine, points=390)
        event = _record(db_engine, now=5 * MINUTE)
        assert event.role_name == "Regular"
        assert event.new_level == 2

    def test_storage_failure_propagates_and_commits_nothing(self, db_engine):
        _seed_progress(db_engine, points=90)
        with patch.object(Session, "commit", side_effect=OperationalError("stmt", {}, Exception("disk"))):
            with pytest.raises(OperationalError):
                _record(db_engine, now=5 * MINUTE)
        progress = progress_service.get_progress(db_engine, USER, GUILD)
        assert progress.points == 90
        assert progress.last_event_at == 0


class TestGetProgress:
    def test_unknown_user(self, db_engine):
        assert progress_service.get_progress(db_engine, USER, GUILD) is None
