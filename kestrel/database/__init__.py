"""Persistence: SQLAlchemy models, engine and the async bridge."""
