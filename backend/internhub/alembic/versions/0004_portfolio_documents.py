"""Certifications, CV generations and GitHub portfolio projects

Revision ID: 0004_portfolio_documents
Revises: 0003_community_and_feeds
Create Date: 2026-10-19 00:30:00
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision = "0004_portfolio_documents"
down_revision = "0003_community_and_feeds"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "certifications",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("student_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("students.id"), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("issuer", sa.String(length=255), nullable=True),
        sa.Column("issue_date", sa.DateTime(), nullable=True),
        sa.Column("credential_id", sa.String(length=255), nullable=True),
        sa.Column("credential_url", sa.Text(), nullable=True),
        sa.Column("document_url", sa.Text(), nullable=True),
        sa.Column("source", sa.String(length=16), nullable=False, server_default="manual"),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_certifications_student_id", "certifications", ["student_id"])

    op.create_table(
        "cv_generations",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("student_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("students.id"), nullable=False),
        sa.Column("template_name", sa.String(length=80), nullable=False, server_default="default"),
        sa.Column("file_url", sa.Text(), nullable=False),
        sa.Column("format", sa.String(length=16), nullable=False, server_default="html"),
        sa.Column("generated_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_cv_generations_student_id", "cv_generations", ["student_id"])

    op.create_table(
        "portfolio_projects",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("student_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("students.id"), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("github_url", sa.Text(), nullable=True),
        sa.Column("live_url", sa.Text(), nullable=True),
        sa.Column("tags", postgresql.JSONB(), nullable=False, server_default=sa.text("'[]'::jsonb")),
        sa.Column("source", sa.String(length=16), nullable=False, server_default="manual"),
        sa.Column("github_repo_id", sa.String(length=64), nullable=True, unique=True),
        sa.Column("stars", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("forks", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("language", sa.String(length=80), nullable=True),
        sa.Column("last_synced_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_portfolio_projects_student_id", "portfolio_projects", ["student_id"])
    op.create_index("ix_portfolio_projects_github_repo_id", "portfolio_projects", ["github_repo_id"])


def downgrade() -> None:
    op.drop_index("ix_portfolio_projects_github_repo_id", table_name="portfolio_projects")
    op.drop_index("ix_portfolio_projects_student_id", table_name="portfolio_projects")
    op.drop_table("portfolio_projects")
    op.drop_index("ix_cv_generations_student_id", table_name="cv_generations")
    op.drop_table("cv_generations")
    op.drop_index("ix_certifications_student_id", table_name="certifications")
    op.drop_table("certifications")
