"""Create vendors and speakers tables.

Revision ID: 0001
Revises:
Create Date: 2026-10-19 00:00:00
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "vendors",
        sa.Column("vendor_id", sa.String(length=64), nullable=False),
        sa.Column("updated", sa.BigInteger(), nullable=False),
        sa.Column("name", sa.Text(), nullable=True),
        sa.Column("location", sa.Text(), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("url", sa.Text(), nullable=True),
        sa.Column("product_description", sa.Text(), nullable=True),
        sa.Column("track_id", sa.String(length=64), nullable=True),
        sa.Column("logo_url", sa.Text(), nullable=True),
        sa.Column("starred", sa.Integer(), server_default="0", nullable=False),
        sa.PrimaryKeyConstraint("vendor_id", name=op.f("pk_vendors")),
    )
    op.create_index(op.f("ix_vendors_track_id"), "vendors", ["track_id"], unique=False)
    op.create_table(
        "speakers",
        sa.Column("speaker_id", sa.String(length=130), nullable=False),
        sa.Column("updated", sa.BigInteger(), nullable=False),
        sa.Column("name", sa.Text(), nullable=True),
        sa.Column("company", sa.Text(), nullable=True),
        sa.Column("abstract", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("speaker_id", name=op.f("pk_speakers")),
    )


def downgrade() -> None:
    op.drop_table("speakers")
    op.drop_index(op.f("ix_vendors_track_id"), table_name="vendors")
    op.drop_table("vendors")
