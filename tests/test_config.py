"""
tests/test_config.py — YAML config loading
===========================================
"""

from __future__ import annotations

import textwrap

import pytest

from kestrel.config import KestrelConfig, load_config
from kestrel.constants import DEFAULT_BAD_WORDS, DEFAULT_LEVEL_ROLES


def _write(tmp_path, body: str):
    path = tmp_path / "config.yaml"
    path.write_text(textwrap.dedent(body), encoding="utf-8")
    return path


def test_minimal_file_uses_defaults(tmp_path):
    cfg = load_config(_write(tmp_path, 'bot_prefix: "!"\n'))
    assert cfg == KestrelConfig(bot_prefix="!")
    assert cfg.presence_status == "dnd"
    assert cfg.presence_activity == "Joyedlion"
    assert cfg.automod_warning_seconds == 5.0
    assert cfg.leveling.cooldown_ms == 60_000
    assert cfg.leveling.points_per_message == 15
    assert dict(cfg.leveling.level_roles) == dict(DEFAULT_LEVEL_ROLES)
    assert cfg.automod.default_bad_words == DEFAULT_BAD_WORDS


def test_full_file(tmp_path):
    cfg = load_config(_write(tmp_path, """\
        bot_prefix: "?"
        presence:
          status: IDLE
          activity: ""
        automod_warning_seconds: 2.5
        leveling:
          points_per_message: 20
          cooldown_seconds: 30
          level_roles:
            5: Regular
        automod:
          default_bad_words: [Heck]
          repeat_run_length: 4
          caps_min_length: 20
          caps_ratio: 0.5
        """))
    assert cfg.bot_prefix == "?"
    assert cfg.presence_status == "idle"
    assert cfg.presence_activity is None
    assert cfg.automod_warning_seconds == 2.5
    assert cfg.leveling.points_per_message == 20
    assert cfg.leveling.cooldown_ms == 30_000
    assert dict(cfg.leveling.level_roles) == {5: "Regular"}
    assert cfg.automod.default_bad_words == ("heck",)
    assert cfg.automod.repeat_run_length == 4
    assert cfg.automod.caps_min_length == 20
    assert cfg.automod.caps_ratio == 0.5


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError, match="config.yaml.example"):
        load_config(tmp_path / "nope.yaml")


def test_missing_prefix(tmp_path):
    with pytest.raises(KeyError):
        load_config(_write(tmp_path, "presence:\n  status: dnd\n"))


def test_bad_presence_status(tmp_path):
    with pytest.raises(ValueError, match="presence.status"):
        load_config(_write(tmp_path, 'bot_prefix: "!"\npresence:\n  status: busy\n'))


def test_bad_repeat_run_length(tmp_path):
    with pytest.raises(ValueError):
        load_config(_write(tmp_path, 'bot_prefix: "!"\nautomod:\n  repeat_run_length: 1\n'))


def test_example_file_loads():
    from pathlib import Path

    example = Path(__file__).resolve().parent.parent / "config.yaml.example"
    cfg = load_config(example)
    assert cfg.leveling.cooldown_ms == 60_000
    assert dict(cfg.leveling.level_roles) == dict(DEFAULT_LEVEL_ROLES)
