"""Pure leveling and automod logic — no Discord or DB I/O."""
