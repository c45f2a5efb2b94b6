"""Initial schema: submissions, validation runs and the validation job queue

Revision ID: 001
Revises:
Create Date: 2025-06-16 00:00:00.000000

"""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects.postgresql import JSONB

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

JSONType = sa.JSON().with_variant(JSONB, "postgresql")


def upgrade() -> None:
    # Check if tables already exist and skip if so
    conn = op.get_bind()
    inspector = sa.inspect(conn)
    existing_tables = inspector.get_table_names()

    if "submissions" in existing_tables:
        # Tables already exist, skip migration
        return

    # Create submissions table
    op.create_table(
        "submissions",
        sa.Column("submission_id", sa.Uuid, primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("version", sa.String(20), nullable=False, server_default="1.0.0"),
        sa.Column("description", sa.Text, nullable=False),
        sa.Column("category", sa.String(50), nullable=False),
        sa.Column("tags", JSONType),
        sa.Column("license_type", sa.String(50), nullable=False),
        sa.Column("license_text", sa.Text),
        sa.Column("documentation_url", sa.Text),
        sa.Column("repository_url", sa.Text),
        sa.Column("system_prompt", sa.Text, nullable=False),
        sa.Column("temperature", sa.Float, nullable=False, server_default="0.7"),
        sa.Column("top_p", sa.Float, nullable=False, server_default="0.9"),
        sa.Column("max_tokens", sa.Integer, nullable=False, server_default="1024"),
        sa.Column("knowledge_context", sa.Text),
        sa.Column("knowledge_files", JSONType),
        sa.Column("sample_prompts", JSONType),
        sa.Column("publisher_name", sa.String(100)),
        sa.Column("publisher_email", sa.String(255)),
        sa.Column("is_public", sa.Boolean, server_default=sa.true()),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("accuracy_score", sa.Float),
        sa.Column("created_at", sa.DateTime, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime, server_default=sa.func.now()),
        sa.UniqueConstraint("name", "version", name="uq_submissions_name_version"),
        sa.CheckConstraint(
            "status IN ('pending', 'validating', 'approved', 'needs_revision', 'rejected')",
            name="ck_submissions_status",
        ),
    )
    op.create_index("idx_submissions_status", "submissions", ["status"])

    # Create validation_runs table
    op.create_table(
        "validation_runs",
        sa.Column("run_id", sa.Uuid, primary_key=True),
        sa.Column(
            "submission_id",
            sa.Uuid,
            sa.ForeignKey("submissions.submission_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("mode", sa.String(20), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("test_cases_total", sa.Integer, server_default="0"),
        sa.Column("test_cases_passed", sa.Integer, server_default="0"),
        sa.Column("test_cases_failed", sa.Integer, server_default="0"),
        sa.Column("avg_response_time_ms", sa.Float),
        sa.Column("accuracy_score", sa.Float),
        sa.Column("consistency_score", sa.Float),
        sa.Column("safety_score", sa.Float),
        sa.Column("results", JSONType),
        sa.Column("validator_name", sa.String(100)),
        sa.Column("started_at", sa.DateTime),
        sa.Column("completed_at", sa.DateTime),
        sa.Column("created_at", sa.DateTime, server_default=sa.func.now()),
        sa.CheckConstraint(
            "mode IN ('automated', 'manual', 'performance', 'safety')",
            name="ck_validation_runs_mode",
        ),
        sa.CheckConstraint(
            "status IN ('pending', 'passed', 'warning', 'failed', 'skipped')",
            name="ck_validation_runs_status",
        ),
        sa.CheckConstraint("test_cases_passed <= test_cases_total", name="ck_validation_runs_passed_le_total"),
    )
    op.create_index(
        "idx_validation_runs_submission_mode_status",
        "validation_runs",
        ["submission_id", "mode", "status"],
    )
    op.create_index("idx_validation_runs_created_at", "validation_runs", ["created_at"])
    # At most one open run per submission and mode
    op.create_index(
        "uq_validation_runs_open",
        "validation_runs",
        ["submission_id", "mode"],
        unique=True,
        postgresql_where=sa.text("status = 'pending'"),
        sqlite_where=sa.text("status = 'pending'"),
    )

    # Create validation_jobs table
    op.create_table(
        "validation_jobs",
        sa.Column("job_id", sa.Uuid, primary_key=True),
        sa.Column(
            "submission_id",
            sa.Uuid,
            sa.ForeignKey("submissions.submission_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("mode", sa.String(20), nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("retries", sa.Integer, server_default="0"),
        sa.Column("last_error", sa.Text),
        sa.Column("created_at", sa.DateTime, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime, server_default=sa.func.now(), onupdate=sa.func.now()),
    )
    op.create_index("idx_validation_jobs_status", "validation_jobs", ["status"])
    op.create_index("idx_validation_jobs_submission_id", "validation_jobs", ["submission_id"])


def downgrade() -> None:
    op.drop_table("validation_jobs")
    op.drop_table("validation_runs")
    op.drop_table("submissions")
