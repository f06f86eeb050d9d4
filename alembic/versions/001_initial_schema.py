"""initial schema

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-17 00:00:00.000000
"""
from typing import Sequence, Union

import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import ENUM, JSONB, UUID

from alembic import op

revision: str = "001_initial_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    content_type = ENUM("place", "blog", "shopping", name="content_type", create_type=False)
    content_type.create(op.get_bind(), checkfirst=True)

    # Accounts and their point balance
    op.create_table(
        "accounts",
        sa.Column("id", sa.String(128), primary_key=True),
        sa.Column("points", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
    )

    # Point ledger, one row per debit
    op.create_table(
        "point_history",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "account_id",
            sa.String(128),
            sa.ForeignKey("accounts.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("delta", sa.Integer(), nullable=False),
        sa.Column("balance_after", sa.Integer(), nullable=False),
        sa.Column("memo", sa.String(512), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
    )
    op.create_index("ix_point_history_account_id", "point_history", ["account_id"])

    # Rank observation log
    op.create_table(
        "rank_history",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("account_id", sa.String(128), nullable=False),
        sa.Column("content_type", content_type, nullable=False),
        sa.Column("target_id", sa.String(256), nullable=False),
        sa.Column("keyword_id", sa.String(256), nullable=False),
        sa.Column("keyword", sa.String(256), nullable=False),
        sa.Column("target_url", sa.String(2048), nullable=False),
        sa.Column("rank", sa.Integer(), nullable=False),
        sa.Column("page", sa.Integer(), nullable=True),
        sa.Column("search_type", sa.String(32), nullable=False),
        sa.Column("total_results", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("found", JSONB, nullable=True),
        sa.Column("error_message", sa.Text(), nullable=True),
        sa.Column("searched_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index(
        "ix_rank_history_lookup",
        "rank_history",
        ["account_id", "content_type", "target_id", "keyword_id", "searched_at"],
    )


def downgrade() -> None:
    op.drop_table("rank_history")
    op.drop_table("point_history")
    op.drop_table("accounts")
    ENUM(name="content_type").drop(op.get_bind(), checkfirst=True)
