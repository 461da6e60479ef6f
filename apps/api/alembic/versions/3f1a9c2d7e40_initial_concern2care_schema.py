"""initial concern2care schema

Revision ID: 3f1a9c2d7e40
Revises:
Create Date: 2026-10-19 09:00:00.000000

This migration creates:
1. schools and users (with the monthly support request quota)
2. concerns, interventions, follow_up_questions and progress_notes
3. reports
4. user and school SMTP configurations
5. admin_logs and api_keys

Parent tables are created before the tables that reference them.
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "3f1a9c2d7e40"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

# Enum labels are the Python member names, as SQLAlchemy stores them
user_role_enum = postgresql.ENUM(
    "TEACHER",
    "SCHOOL_ADMIN",
    "PLATFORM_ADMIN",
    name="user_role",
    create_type=False,
)
severity_level_enum = postgresql.ENUM(
    "MILD",
    "MODERATE",
    "URGENT",
    name="severity_level",
    create_type=False,
)
task_type_enum = postgresql.ENUM(
    "INTERVENTION",
    "DIFFERENTIATION",
    "CLASSROOM_MANAGEMENT",
    name="concern_task_type",
    create_type=False,
)


def _base_columns() -> list[sa.Column]:
    """Primary key and timestamps (from BaseModel)."""
    return [
        sa.Column("id", postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
    ]


def _smtp_columns() -> list[sa.Column]:
    """Columns shared by user and school SMTP configurations."""
    return [
        sa.Column("smtp_host", sa.String(length=255), nullable=False),
        sa.Column("smtp_port", sa.Integer(), nullable=False, server_default="587"),
        sa.Column("smtp_secure", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("smtp_user", sa.String(length=255), nullable=False),
        sa.Column("smtp_password", sa.Text(), nullable=False),
        sa.Column("from_address", sa.String(length=255), nullable=True),
        sa.Column("from_name", sa.String(length=200), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="true"),
        sa.Column("test_status", sa.String(length=20), nullable=True),
        sa.Column("last_tested_at", sa.DateTime(timezone=True), nullable=True),
    ]


def upgrade() -> None:
    """Create all tables."""
    bind = op.get_bind()
    user_role_enum.create(bind, checkfirst=True)
    severity_level_enum.create(bind, checkfirst=True)
    task_type_enum.create(bind, checkfirst=True)

    # Schools
    op.create_table(
        "schools",
        *_base_columns(),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("district", sa.String(length=200), nullable=True),
        sa.Column("address", sa.Text(), nullable=True),
        sa.Column("contact_email", sa.String(length=255), nullable=True),
        sa.Column("max_teachers", sa.Integer(), nullable=False, server_default="50"),
        sa.Column(
            "default_requests_per_teacher",
            sa.Integer(),
            nullable=False,
            server_default="20",
        ),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="true"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_schools_name"), "schools", ["name"], unique=False)

    # Users
    op.create_table(
        "users",
        *_base_columns(),
        sa.Column("school_id", postgresql.UUID(as_uuid=False), nullable=True),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.Text(), nullable=False),
        sa.Column("first_name", sa.String(length=100), nullable=False),
        sa.Column("last_name", sa.String(length=100), nullable=False, server_default=""),
        sa.Column("primary_grade", sa.String(length=50), nullable=True),
        sa.Column("primary_subject", sa.String(length=100), nullable=True),
        sa.Column("teacher_type", sa.String(length=100), nullable=True),
        sa.Column("role", user_role_enum, nullable=False, server_default="TEACHER"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="true"),
        sa.Column(
            "must_change_password",
            sa.Boolean(),
            nullable=False,
            server_default="false",
        ),
        sa.Column("subscription_end_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("last_login_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("support_requests_used", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("support_requests_limit", sa.Integer(), nullable=False, server_default="20"),
        sa.Column("additional_requests", sa.Integer(), nullable=False, server_default="0"),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(
            ["school_id"],
            ["schools.id"],
            name="fk_users_school_id",
            ondelete="SET NULL",
        ),
    )
    op.create_index(op.f("ix_users_email"), "users", ["email"], unique=True)
    op.create_index(op.f("ix_users_school_id"), "users", ["school_id"], unique=False)

    # Concerns
    op.create_table(
        "concerns",
        *_base_columns(),
        sa.Column("teacher_id", postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column("student_first_name", sa.String(length=100), nullable=False),
        sa.Column("student_last_initial", sa.String(length=1), nullable=False),
        sa.Column("grade", sa.String(length=50), nullable=False),
        sa.Column("teacher_position", sa.String(length=100), nullable=True),
        sa.Column("incident_date", sa.Date(), nullable=True),
        sa.Column("location", sa.String(length=200), nullable=True),
        sa.Column("concern_types", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column("other_concern_type", sa.String(length=200), nullable=True),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column(
            "severity_level",
            severity_level_enum,
            nullable=False,
            server_default="MODERATE",
        ),
        sa.Column("actions_taken", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column("other_action_taken", sa.String(length=200), nullable=True),
        sa.Column("task_type", task_type_enum, nullable=False, server_default="INTERVENTION"),
        sa.Column("has_iep", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("has_disability", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("disability_type", sa.String(length=200), nullable=True),
        sa.Column("is_eal_learner", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("eal_proficiency", sa.String(length=50), nullable=True),
        sa.Column("is_gifted", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("is_struggling", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("other_needs", sa.Text(), nullable=True),
        sa.Column("lesson_plan_content", sa.Text(), nullable=True),
        sa.Column("language", sa.String(length=50), nullable=True),
        sa.Column("ai_disclaimer", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["teacher_id"], ["users.id"], ondelete="CASCADE"),
    )
    op.create_index(op.f("ix_concerns_teacher_id"), "concerns", ["teacher_id"], unique=False)
    op.create_index(
        "ix_concerns_teacher_created",
        "concerns",
        ["teacher_id", "created_at"],
        unique=False,
    )

    # Interventions
    op.create_table(
        "interventions",
        *_base_columns(),
        sa.Column("concern_id", postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("steps", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column("timeline", sa.String(length=100), nullable=True),
        sa.Column("saved", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("saved_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["concern_id"], ["concerns.id"], ondelete="CASCADE"),
    )
    op.create_index(
        op.f("ix_interventions_concern_id"), "interventions", ["concern_id"], unique=False
    )

    # Follow-up questions
    op.create_table(
        "follow_up_questions",
        *_base_columns(),
        sa.Column("concern_id", postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column("question", sa.Text(), nullable=False),
        sa.Column("response", sa.Text(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["concern_id"], ["concerns.id"], ondelete="CASCADE"),
    )
    op.create_index(
        op.f("ix_follow_up_questions_concern_id"),
        "follow_up_questions",
        ["concern_id"],
        unique=False,
    )

    # Progress notes
    op.create_table(
        "progress_notes",
        *_base_columns(),
        sa.Column("intervention_id", postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column("teacher_id", postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column("note", sa.Text(), nullable=False),
        sa.Column("outcome", sa.String(length=100), nullable=True),
        sa.Column("next_steps", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["intervention_id"], ["interventions.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["teacher_id"], ["users.id"], ondelete="CASCADE"),
    )
    op.create_index(
        op.f("ix_progress_notes_intervention_id"),
        "progress_notes",
        ["intervention_id"],
        unique=False,
    )

    # Reports
    op.create_table(
        "reports",
        *_base_columns(),
        sa.Column("concern_id", postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column("created_by", postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column("pdf_path", sa.String(length=500), nullable=False),
        sa.Column("shared_with", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["concern_id"], ["concerns.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["created_by"], ["users.id"], ondelete="CASCADE"),
    )
    op.create_index(op.f("ix_reports_concern_id"), "reports", ["concern_id"], unique=False)

    # SMTP configurations
    op.create_table(
        "user_email_configs",
        *_base_columns(),
        sa.Column("user_id", postgresql.UUID(as_uuid=False), nullable=False),
        *_smtp_columns(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("user_id", name="uq_user_email_configs_user_id"),
    )
    op.create_table(
        "school_email_configs",
        *_base_columns(),
        sa.Column("school_id", postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column("configured_by", postgresql.UUID(as_uuid=False), nullable=True),
        *_smtp_columns(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["school_id"], ["schools.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["configured_by"], ["users.id"], ondelete="SET NULL"),
        sa.UniqueConstraint("school_id", name="uq_school_email_configs_school_id"),
    )

    # Admin audit log and API keys
    op.create_table(
        "admin_logs",
        *_base_columns(),
        sa.Column("admin_id", postgresql.UUID(as_uuid=False), nullable=True),
        sa.Column("action", sa.String(length=100), nullable=False),
        sa.Column("target_user_id", postgresql.UUID(as_uuid=False), nullable=True),
        sa.Column("target_school_id", postgresql.UUID(as_uuid=False), nullable=True),
        sa.Column("details", postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["admin_id"], ["users.id"], ondelete="SET NULL"),
    )
    op.create_index(op.f("ix_admin_logs_admin_id"), "admin_logs", ["admin_id"], unique=False)
    op.create_index("ix_admin_logs_created_at", "admin_logs", ["created_at"], unique=False)

    op.create_table(
        "api_keys",
        *_base_columns(),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("provider", sa.String(length=50), nullable=False, server_default="deepseek"),
        sa.Column("api_key", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="true"),
        sa.Column("usage_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("max_usage", sa.Integer(), nullable=False, server_default="10000"),
        sa.Column("last_used_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_by", postgresql.UUID(as_uuid=False), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["created_by"], ["users.id"], ondelete="SET NULL"),
    )
    op.create_index(op.f("ix_api_keys_provider"), "api_keys", ["provider"], unique=False)


def downgrade() -> None:
    """Drop all tables in reverse dependency order."""
    op.drop_index(op.f("ix_api_keys_provider"), table_name="api_keys")
    op.drop_table("api_keys")
    op.drop_index("ix_admin_logs_created_at", table_name="admin_logs")
    op.drop_index(op.f("ix_admin_logs_admin_id"), table_name="admin_logs")
    op.drop_table("admin_logs")
    op.drop_table("school_email_configs")
    op.drop_table("user_email_configs")
    op.drop_index(op.f("ix_reports_concern_id"), table_name="reports")
    op.drop_table("reports")
    op.drop_index(op.f("ix_progress_notes_intervention_id"), table_name="progress_notes")
    op.drop_table("progress_notes")
    op.drop_index(op.f("ix_follow_up_questions_concern_id"), table_name="follow_up_questions")
    op.drop_table("follow_up_questions")
    op.drop_index(op.f("ix_interventions_concern_id"), table_name="interventions")
    op.drop_table("interventions")
    op.drop_index("ix_concerns_teacher_created", table_name="concerns")
    op.drop_index(op.f("ix_concerns_teacher_id"), table_name="concerns")
    op.drop_table("concerns")
    op.drop_index(op.f("ix_users_school_id"), table_name="users")
    op.drop_index(op.f("ix_users_email"), table_name="users")
    op.drop_table("users")
    op.drop_index(op.f("ix_schools_name"), table_name="schools")
    op.drop_table("schools")

    bind = op.get_bind()
    task_type_enum.drop(bind, checkfirst=True)
    severity_level_enum.drop(bind, checkfirst=True)
    user_role_enum.drop(bind, checkfirst=True)
