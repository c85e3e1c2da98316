"""results and attempt events

Revision ID: 0001
Revises:
Create Date: 2026-10-17 10:00:00.000000

"""

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "quiz_results",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("phone", sa.String(length=64), nullable=False),
        sa.Column("correct", sa.Integer(), nullable=False),
        sa.Column("wrong", sa.Integer(), nullable=False),
        sa.Column("score", sa.Float(), nullable=False),
        sa.Column("answers", sa.JSON(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("allowed_retake", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("retake_allowed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("retake_disallowed_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_quiz_results_phone", "quiz_results", ["phone"])
    op.create_index("ix_quiz_results_created_at", "quiz_results", ["created_at"])

    op.create_table(
        "attempt_events",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("phone", sa.String(length=64), nullable=False),
        sa.Column("action", sa.String(length=32), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("user_agent", sa.String(length=512), nullable=True),
    )
    op.create_index("ix_attempt_events_phone", "attempt_events", ["phone"])
    op.create_index("ix_attempt_events_created_at", "attempt_events", ["created_at"])


def downgrade() -> None:
    op.drop_index("ix_attempt_events_created_at", table_name="attempt_events")
    op.drop_index("ix_attempt_events_phone", table_name="attempt_events")
    op.drop_table("attempt_events")
    op.drop_index("ix_quiz_results_created_at", table_name="quiz_results")
    op.drop_index("ix_quiz_results_phone", table_name="quiz_results")
    op.drop_table("quiz_results")
