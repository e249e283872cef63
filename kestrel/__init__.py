"""
Kestrel — Moderation & Leveling Bot for Discord
=================================================
Watches guild messages, removes the ones that trip the automod rules, and
rewards everyone else with points, levels and level roles.  A handful of
slash commands cover day-to-day moderation and per-guild configuration.

Package layout::

    kestrel/
    ├── config.py          # YAML → typed Python config
    ├── constants.py       # Leveling formula + default tables
    ├── database/
    │   ├── engine.py      # SQLAlchemy engine + async helper
    │   └── models.py      # UserProgress, GuildConfig
    ├── engine/
    │   ├── events.py      # LevelUpEvent, ProgressSnapshot, GuildSettings
    │   ├── leveling.py    # Cooldown + accrual step (pure)
    │   └── automod.py     # Message classifier (pure)
    ├── services/
    │   ├── progress_service.py      # record_activity / get_progress
    │   ├── guild_config_service.py  # Full-record config writes
    │   ├── announcement_service.py  # Level-up message + role grant
    │   └── embeds.py                # Embed builders
    └── bot/
        ├── core.py        # Bot subclass, cog loader
        ├── checks.py      # Permission checks + shared error reply
        ├── arguments.py   # Typed slash-command arguments
        └── cogs/
            ├── messages.py    # on_message: automod → leveling
            ├── moderation.py  # /kick, /ban, /timeout, /clear, /embed
            ├── meta.py        # /level
            └── admin.py       # /setlevelchannel, /automod, /badword
"""

__version__ = "0.1.0"
