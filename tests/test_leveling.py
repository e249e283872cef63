"""
tests/test_leveling.py — Unit Tests for the Leveling Engine
=============================================================

Covers the canonical formula and the pure cooldown/accrual step
(no I/O, no database).
"""

from __future__ import annotations

import pytest

from kestrel.constants import (
    COOLDOWN_MS,
    DEFAULT_LEVEL_ROLES,
    POINTS_PER_MESSAGE,
    level_from_points,
    points_for_level,
)
from kestrel.engine.events import ProgressSnapshot
from kestrel.engine.leveling import LevelingRules, apply_activity


# ---------------------------------------------------------------------------
# Formula
# ---------------------------------------------------------------------------
class TestLevelFormula:
    def test_zero_points_is_level_zero(self):
        assert level_from_points(0) == 0

    @pytest.mark.parametrize(
        ("points", "level"),
        [(99, 0), (100, 1), (399, 1), (400, 2), (9_999, 9), (10_000, 10), (1_000_000, 100)],
    )
    def test_known_thresholds(self, points, level):
        assert level_from_points(points) == level

    def test_points_for_level_values(self):
        assert points_for_level(0) == 0
        assert points_for_level(1) == 100
        assert points_for_level(2) == 400
        assert points_for_level(10) == 10_000

    def test_points_for_level_never_undershoots(self):
        for level in range(1, 201):
            assert level_from_points(points_for_level(level)) >= level

    def test_monotonic(self):
        previous = 0
        for points in range(0, 50_000, 7):
            current = level_from_points(points)
            assert current >= previous
            previous = current

    def test_negative_input_rejected(self):
        with pytest.raises(ValueError):
            level_from_points(-1)
        with pytest.raises(ValueError):
            points_for_level(-1)


# ---------------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------------
class TestLevelingRules:
    def test_defaults(self):
        rules = LevelingRules()
        assert rules.points_per_message == POINTS_PER_MESSAGE == 15
        assert rules.cooldown_ms == COOLDOWN_MS == 60_000
        assert dict(rules.level_roles) == dict(DEFAULT_LEVEL_ROLES)

    def test_role_for_level_uses_table(self):
        rules = LevelingRules()
        assert rules.role_for_level(1) == "Level 1"
        assert rules.role_for_level(100) == "Level 100"
        assert rules.role_for_level(2) is None

    def test_guild_overrides_win(self):
        rules = LevelingRules()
        overrides = {1: "Newcomer", 5: "Regular"}
        assert rules.role_for_level(1, overrides) == "Newcomer"
        assert rules.role_for_level(5, overrides) == "Regular"
        assert rules.role_for_level(10, overrides) == "Level 10"

    def test_role_table_is_read_only(self):
        source = {5: "Regular"}
        rules = LevelingRules(level_roles=source)
        with pytest.raises(TypeError):
            rules.level_roles[6] = "Veteran"
        source[6] = "Veteran"
        assert rules.role_for_level(6) is None


# ---------------------------------------------------------------------------
# apply_activity
# ---------------------------------------------------------------------------
class TestApplyActivity:
    def test_first_event_is_never_on_cooldown(self):
        result = apply_activity(None, user_id=1, guild_id=2, now=5)
        assert result is not None
        assert result.progress.points == 15
        assert result.progress.level == 0
        assert result.progress.last_event_at == 5
        assert result.previous_level == 0
        assert not result.leveled_up

    def test_within_cooldown_is_noop(self):
        current = ProgressSnapshot(user_id=1, guild_id=2, points=30, level=0, last_event_at=1_000)
        assert apply_activity(current, user_id=1, guild_id=2, now=1_000 + 59_999) is None

    def test_exactly_at_cooldown_boundary_accrues(self):
        current = ProgressSnapshot(user_id=1, guild_id=2, points=30, level=0, last_event_at=1_000)
        result = apply_activity(current, user_id=1, guild_id=2, now=61_000)
        assert result is not None
        assert result.progress.points == 45

    def test_level_crossing(self):
        current = ProgressSnapshot(user_id=1, guild_id=2, points=90, level=0, last_event_at=0)
        result = apply_activity(current, user_id=1, guild_id=2, now=120_000)
        assert result.progress.points == 105
        assert result.progress.level == 1
        assert result.leveled_up

    def test_level_always_matches_points(self):
        current = None
        now = 0
        for _ in range(200):
            now += COOLDOWN_MS
            result = apply_activity(current, user_id=1, guild_id=2, now=now)
            assert result.progress.level == level_from_points(result.progress.points)
            current = result.progress

    def test_custom_rules(self):
        rules = LevelingRules(points_per_message=100, cooldown_ms=10)
        result = apply_activity(None, user_id=1, guild_id=2, now=10, rules=rules)
        assert result.progress.points == 100
        assert result.progress.level == 1
        current = result.progress
        assert apply_activity(current, user_id=1, guild_id=2, now=19, rules=rules) is None
        assert apply_activity(current, user_id=1, guild_id=2, now=20, rules=rules) is not None
