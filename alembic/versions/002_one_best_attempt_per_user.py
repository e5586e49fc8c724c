"""Partial unique index: one best attempt per (user, challenge).

Run scripts/reconcile_aggregates.py first if older data may hold duplicates.

Revision ID: 002
Revises: 001
Create Date: 2026-02-03

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_index(
        "uq_attempts_one_best_per_user_challenge",
        "attempts",
        ["user_id", "challenge_id"],
        unique=True,
        sqlite_where=sa.text("is_best_attempt = 1"),
        postgresql_where=sa.text("is_best_attempt"),
    )


def downgrade() -> None:
    op.drop_index("uq_attempts_one_best_per_user_challenge", table_name="attempts")
