"""Initial tables: challenges, challenge_options, attempts, aggregates, streaks.

Revision ID: 001
Revises:
Create Date: 2026-01-12

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "challenges",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("date_key", sa.String(10), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("scenario_text", sa.Text(), nullable=False),
        sa.Column("assumptions", sa.Text(), nullable=False),
        sa.Column("category", sa.String(100), nullable=False),
        sa.Column("difficulty", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_challenges_date_key"), "challenges", ["date_key"], unique=True)

    op.create_table(
        "challenge_options",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("challenge_id", sa.String(36), nullable=False),
        sa.Column("option_text", sa.Text(), nullable=False),
        sa.Column("tier_label", sa.String(20), nullable=False),
        sa.Column("explanation_short", sa.Text(), nullable=False),
        sa.Column("ordering_index", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["challenge_id"], ["challenges.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("challenge_id", "ordering_index", name="uq_challenge_options_challenge_ordering"),
    )
    op.create_index(op.f("ix_challenge_options_challenge_id"), "challenge_options", ["challenge_id"], unique=False)

    op.create_table(
        "attempts",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("user_id", sa.String(255), nullable=False),
        sa.Column("challenge_id", sa.String(36), nullable=False),
        sa.Column("date_key", sa.String(10), nullable=True),
        sa.Column("submitted_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("ranking_json", sa.JSON(), nullable=False),
        sa.Column("score_numeric", sa.Integer(), nullable=False),
        sa.Column("grade_tier", sa.String(20), nullable=False),
        sa.Column("is_best_attempt", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.ForeignKeyConstraint(["challenge_id"], ["challenges.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_attempts_challenge_id"), "attempts", ["challenge_id"], unique=False)
    op.create_index("ix_attempts_user_challenge", "attempts", ["user_id", "challenge_id"], unique=False)

    op.create_table(
        "aggregates",
        sa.Column("challenge_id", sa.String(36), nullable=False),
        sa.Column("best_attempt_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("top_pick_counts_json", sa.JSON(), nullable=False),
        sa.Column("top_two_counts_json", sa.JSON(), nullable=False),
        sa.Column("exact_ranking_counts_json", sa.JSON(), nullable=False),
        sa.Column("score_histogram_json", sa.JSON(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(["challenge_id"], ["challenges.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("challenge_id"),
    )

    op.create_table(
        "streaks",
        sa.Column("user_id", sa.String(255), nullable=False),
        sa.Column("current_streak", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("longest_streak", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("last_completed_date_key", sa.String(10), nullable=True),
        sa.PrimaryKeyConstraint("user_id"),
    )


def downgrade() -> None:
    op.drop_table("streaks")
    op.drop_table("aggregates")
    op.drop_index("ix_attempts_user_challenge", table_name="attempts")
    op.drop_index(op.f("ix_attempts_challenge_id"), table_name="attempts")
    op.drop_table("attempts")
    op.drop_index(op.f("ix_challenge_options_challenge_id"), table_name="challenge_options")
    op.drop_table("challenge_options")
    op.drop_index(op.f("ix_challenges_date_key"), table_name="challenges")
    op.drop_table("challenges")
