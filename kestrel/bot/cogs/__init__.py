"""Cogs loaded by :data:`kestrel.bot.core.EXTENSIONS`."""
