"""Create user_progress and guild_config tables

Revision ID: 5c1e0a7d2b94
Revises:
Create Date: 2026-10-19 10:12:41.517204

"""
from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = '5c1e0a7d2b94'
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Create the two tables the bot reads and writes."""

    # --- user_progress ---
    op.create_table(
        "user_progress",
        sa.Column("user_id", sa.BigInteger, primary_key=True),
        sa.Column("guild_id", sa.BigInteger, primary_key=True),
        sa.Column("points", sa.Integer, nullable=False, server_default="0"),
        sa.Column("level", sa.Integer, nullable=False, server_default="0"),
        sa.Column("last_event_at", sa.BigInteger, nullable=False, server_default="0"),
    )

    # --- guild_config ---
    op.create_table(
        "guild_config",
        sa.Column("guild_id", sa.BigInteger, primary_key=True),
        sa.Column("automod_enabled", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("level_channel_id", sa.BigInteger, nullable=True),
        sa.Column("mod_role_id", sa.BigInteger, nullable=True),
        sa.Column("bad_words", sa.JSON, nullable=False, server_default="[]"),
        sa.Column("level_roles", sa.JSON, nullable=False, server_default="{}"),
    )


def downgrade() -> None:
    """Drop both tables."""
    op.drop_table("guild_config")
    op.drop_table("user_progress")
