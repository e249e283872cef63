"""Discord bot: core, checks, typed arguments and cogs."""
