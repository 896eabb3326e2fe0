"""Mentors, sessions, reviews and the credits ledger

Revision ID: 0002_mentoring_and_credits
Revises: 0001_core_tables
Create Date: 2026-10-19 00:10:00
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision = "0002_mentoring_and_credits"
down_revision = "0001_core_tables"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "mentors",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("user_accounts.id"), nullable=False, unique=True),
        sa.Column("expertise", postgresql.JSONB(), nullable=False, server_default=sa.text("'[]'::jsonb")),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.Column("rating", sa.Float(), nullable=False, server_default=sa.text("0")),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_mentors_user_id", "mentors", ["user_id"])

    op.create_table(
        "mentor_sessions",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("mentor_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("mentors.id"), nullable=False),
        sa.Column("student_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("students.id"), nullable=False),
        sa.Column("scheduled_at", sa.DateTime(), nullable=False),
        sa.Column("meeting_link", sa.Text(), nullable=True),
        sa.Column("status", sa.String(length=16), nullable=False, server_default="scheduled"),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_mentor_sessions_mentor_id", "mentor_sessions", ["mentor_id"])
    op.create_index("ix_mentor_sessions_student_id", "mentor_sessions", ["student_id"])

    op.create_table(
        "mentor_reviews",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("mentor_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("mentors.id"), nullable=False),
        sa.Column("student_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("students.id"), nullable=False),
        sa.Column("rating", sa.Integer(), nullable=False),
        sa.Column("review_text", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.CheckConstraint("rating BETWEEN 1 AND 5", name="ck_mentor_reviews_rating_range"),
    )
    op.create_index("ix_mentor_reviews_mentor_id", "mentor_reviews", ["mentor_id"])
    op.create_index("ix_mentor_reviews_student_id", "mentor_reviews", ["student_id"])

    op.create_table(
        "credits",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("student_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("students.id"), nullable=False, unique=True),
        sa.Column("credits_earned", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_credits_student_id", "credits", ["student_id"])

    op.create_table(
        "credit_awards",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("student_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("students.id"), nullable=False),
        sa.Column("amount", sa.Integer(), nullable=False),
        sa.Column("reason", sa.Text(), nullable=True),
        sa.Column("awarded_by", postgresql.UUID(as_uuid=True), sa.ForeignKey("user_accounts.id"), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_credit_awards_student_id", "credit_awards", ["student_id"])


def downgrade() -> None:
    op.drop_index("ix_credit_awards_student_id", table_name="credit_awards")
    op.drop_table("credit_awards")
    op.drop_index("ix_credits_student_id", table_name="credits")
    op.drop_table("credits")
    op.drop_index("ix_mentor_reviews_student_id", table_name="mentor_reviews")
    op.drop_index("ix_mentor_reviews_mentor_id", table_name="mentor_reviews")
    op.drop_table("mentor_reviews")
    op.drop_index("ix_mentor_sessions_student_id", table_name="mentor_sessions")
    op.drop_index("ix_mentor_sessions_mentor_id", table_name="mentor_sessions")
    op.drop_table("mentor_sessions")
    op.drop_index("ix_mentors_user_id", table_name="mentors")
    op.drop_table("mentors")
