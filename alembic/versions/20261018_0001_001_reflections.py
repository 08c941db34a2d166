"""001: Reflections table.

Creates the `reflections` table written by POST /reflections and read back
newest-first by GET /reflections.

Revision ID: 001_reflections
Revises:
"""

from alembic import op
import sqlalchemy as sa

revision = "001_reflections"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "reflections",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("user", sa.String(255), nullable=False, server_default="anonymous"),
        sa.Column("summary", sa.Text, nullable=False),
        sa.Column("category", sa.String(50), nullable=False, server_default="general"),
        sa.Column("sentiment", sa.Float, nullable=False, server_default="0"),
        sa.Column("timestamp", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_reflections_timestamp", "reflections", ["timestamp"])


def downgrade() -> None:
    op.drop_index("ix_reflections_timestamp", table_name="reflections")
    op.drop_table("reflections")
