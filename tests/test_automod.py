"""
tests/test_automod.py — Automod Classifier Tests
==================================================

Pure function tests: bad words, repeated characters, excessive caps, and
the three-way config state (no row / enabled row / disabled row).
"""

from __future__ import annotations

import pytest

from kestrel.engine.automod import AutomodRules, classify, explain
from kestrel.engine.events import GuildSettings

GUILD = 100


@pytest.fixture
def enabled():
    return GuildSettings(guild_id=GUILD)


@pytest.fixture
def disabled():
    return GuildSettings(guild_id=GUILD, automod_enabled=False)


class TestConfigState:
    def test_absent_config_defaults_to_enabled(self):
        assert classify("hello", None) is False
        assert classify("free spam here", None) is True

    def test_enabled_row(self, enabled):
        assert classify("hello", enabled) is False
        assert classify("free spam here", enabled) is True

    @pytest.mark.parametrize(
        "text",
        ["BUY SPAM NOW", "aaaaaaaaaa", "HELLO THERE FRIEND", "discord.gg/abc", "hi"],
    )
    def test_disabled_row_never_suppresses(self, disabled, text):
        assert classify(text, disabled) is False


class TestBadWords:
    def test_default_word_case_insensitive(self, enabled):
        assert classify("BUY SPAM NOW", enabled) is True

    def test_partial_word_matches(self, enabled):
        assert classify("what a spammer", enabled) is True

    def test_invite_links(self, enabled):
        assert classify("join discord.gg/xyz", enabled) is True
        assert classify("https://Discord.com/invite/xyz", enabled) is True

    def test_custom_words_are_appended(self):
        settings = GuildSettings(guild_id=GUILD, bad_words=("heck",))
        assert classify("what the HECK", settings) is True
        assert classify("spam", settings) is True

    def test_custom_words_only_apply_to_their_guild(self, enabled):
        assert classify("what the heck", enabled) is False

    def test_empty_custom_word_ignored(self):
        settings = GuildSettings(guild_id=GUILD, bad_words=("",))
        assert classify("perfectly fine", settings) is False

    def test_clean_message(self, enabled):
        assert classify("hello", enabled) is False


class TestRepeatedCharacters:
    def test_seven_repeats(self, enabled):
        assert classify("aaaaaaa", enabled) is True

    def test_exactly_six_repeats(self, enabled):
        assert classify("nooooooo", enabled) is True
        assert classify("xxxxxx", enabled) is True

    def test_five_repeats_allowed(self, enabled):
        assert classify("xxxxx", enabled) is False

    def test_case_sensitive_run(self, enabled):
        assert classify("aaaAAA", enabled) is False

    def test_punctuation_counts(self, enabled):
        assert classify("what!!!!!!", enabled) is True

    def test_blank_lines_are_not_a_run(self, enabled):
        assert classify("hi\n\n\n\n\n\nthere", enabled) is False
        assert classify("line\n      indented", enabled) is True  # spaces still count


class TestExcessiveCaps:
    def test_shouting(self, enabled):
        # 18 chars, 16 uppercase → 0.89
        assert classify("HELLO THERE FRIEND", enabled) is True
        assert explain("HELLO THERE FRIEND", enabled) == ["excessive_caps"]

    def test_short_caps_allowed(self, enabled):
        # 10 chars is not > 10
        assert classify("HELLOWORLD", enabled) is False

    def test_denominator_includes_spaces_and_punctuation(self, enabled):
        # 11 chars, 7 uppercase → 0.636
        assert classify("HI YO! ABC.", enabled) is False

    def test_ratio_must_exceed_threshold(self, enabled):
        # 20 chars, exactly 14 uppercase → 0.7, not > 0.7
        text = "ABCDEFGHIJKLMN" + "abcdef"
        assert len(text) == 20
        assert classify(text, enabled) is False
        assert classify("ABCDEFGHIJKLMNO" + "abcde", enabled) is True

    def test_normal_sentence(self, enabled):
        assert classify("Hello There, how are you doing?", enabled) is False


class TestRules:
    def test_custom_rules(self, enabled):
        rules = AutomodRules(default_bad_words=("foo",), repeat_run_length=3, caps_ratio=0.5)
        assert classify("spam", enabled, rules) is False
        assert classify("food", enabled, rules) is True
        assert classify("zzz", enabled, rules) is True

    def test_run_length_must_be_sane(self):
        with pytest.raises(ValueError):
            AutomodRules(repeat_run_length=1)

    def test_explain_lists_every_rule(self, enabled):
        assert explain("SPAMMMMMMM EVERYWHERE", enabled) == [
            "bad_word", "repeated_characters", "excessive_caps",
        ]

    def test_pure(self, enabled):
        assert classify("hello", enabled) == classify("hello", enabled)
        assert enabled == GuildSettings(guild_id=GUILD)
