"""Initial schema with all tables.

Revision ID: 001_initial
Revises:
Create Date: 2026-10-19

This migration creates the complete MedTracker database schema:
- Tables: users, subjects, user_subject_progress, study_sessions, notes,
  chat_messages, user_stats
- Constraints: one progress row per (user, subject), one stats row per user,
  ON DELETE CASCADE from users to every per-user table
- Triggers: updated_at auto-update function and triggers
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

_UPDATED_AT_TABLES = ["users", "user_subject_progress", "notes", "user_stats"]


def _timestamp(name: str, nullable: bool = False) -> sa.Column:
    if nullable:
        return sa.Column(name, postgresql.TIMESTAMP(timezone=True), nullable=True)
    return sa.Column(name, postgresql.TIMESTAMP(timezone=True), server_default=sa.text("NOW()"), nullable=False)


def upgrade() -> None:
    op.execute('CREATE EXTENSION IF NOT EXISTS "pgcrypto"')
    new_id = sa.text("gen_random_uuid()::text")

    # ==========================================================================
    # USERS TABLE
    # ==========================================================================
    op.create_table(
        "users",
        sa.Column("id", sa.String(255), server_default=new_id, nullable=False),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("first_name", sa.String(255), nullable=True),
        sa.Column("last_name", sa.String(255), nullable=True),
        sa.Column("profile_image_url", sa.String(), nullable=True),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
    )

    # ==========================================================================
    # SUBJECTS TABLE
    # ==========================================================================
    op.create_table(
        "subjects",
        sa.Column("id", sa.String(36), server_default=new_id, nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("icon", sa.String(50), nullable=False),
        sa.Column("color", sa.String(20), nullable=False),
        _timestamp("created_at"),
        sa.PrimaryKeyConstraint("id"),
    )

    # ==========================================================================
    # USER_SUBJECT_PROGRESS TABLE
    # ==========================================================================
    op.create_table(
        "user_subject_progress",
        sa.Column("id", sa.String(36), server_default=new_id, nullable=False),
        sa.Column("user_id", sa.String(255), nullable=False),
        sa.Column("subject_id", sa.String(36), nullable=False),
        sa.Column("progress_percentage", sa.Float(), server_default="0", nullable=False),
        sa.Column("topics_mastered", sa.Integer(), server_default="0", nullable=False),
        sa.Column("current_topic", sa.String(255), nullable=True),
        _timestamp("last_studied_at", nullable=True),
        _timestamp("updated_at"),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["subject_id"], ["subjects.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("user_id", "subject_id", name="unique_user_subject_progress"),
        sa.CheckConstraint(
            "progress_percentage >= 0 AND progress_percentage <= 100",
            name="valid_progress_percentage",
        ),
    )
    op.create_index("ix_user_subject_progress_user_id", "user_subject_progress", ["user_id"])

    # ==========================================================================
    # STUDY_SESSIONS TABLE
    # ==========================================================================
    op.create_table(
        "study_sessions",
        sa.Column("id", sa.String(36), server_default=new_id, nullable=False),
        sa.Column("user_id", sa.String(255), nullable=False),
        sa.Column("subject_id", sa.String(36), nullable=True),
        sa.Column("topic", sa.String(255), nullable=True),
        sa.Column("duration", sa.Integer(), nullable=False),
        sa.Column("questions_answered", sa.Integer(), server_default="0", nullable=False),
        sa.Column("correct_answers", sa.Integer(), server_default="0", nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("started_at", postgresql.TIMESTAMP(timezone=True), nullable=False),
        _timestamp("ended_at", nullable=True),
        _timestamp("created_at"),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["subject_id"], ["subjects.id"], ondelete="SET NULL"),
        sa.CheckConstraint("duration > 0", name="valid_duration"),
    )
    op.create_index("idx_study_sessions_user_started_at", "study_sessions", ["user_id", "started_at"])
    op.create_index("idx_study_sessions_user_created_at", "study_sessions", ["user_id", "created_at"])

    # ==========================================================================
    # NOTES TABLE
    # ==========================================================================
    op.create_table(
        "notes",
        sa.Column("id", sa.String(36), server_default=new_id, nullable=False),
        sa.Column("user_id", sa.String(255), nullable=False),
        sa.Column("subject_id", sa.String(36), nullable=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("tags", postgresql.ARRAY(sa.Text()), server_default="{}", nullable=False),
        sa.Column("is_ai_generated", sa.Boolean(), server_default=sa.text("false"), nullable=False),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["subject_id"], ["subjects.id"], ondelete="SET NULL"),
    )
    op.create_index("idx_notes_user_updated_at", "notes", ["user_id", "updated_at"])
    op.create_index("ix_notes_subject_id", "notes", ["subject_id"])

    # ==========================================================================
    # CHAT_MESSAGES TABLE
    # ==========================================================================
    op.create_table(
        "chat_messages",
        sa.Column("id", sa.String(36), server_default=new_id, nullable=False),
        sa.Column("user_id", sa.String(255), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("response", sa.Text(), nullable=False),
        _timestamp("created_at"),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
    )
    op.create_index("idx_chat_messages_user_created_at", "chat_messages", ["user_id", "created_at"])

    # ==========================================================================
    # USER_STATS TABLE
    # ==========================================================================
    op.create_table(
        "user_stats",
        sa.Column("id", sa.String(36), server_default=new_id, nullable=False),
        sa.Column("user_id", sa.String(255), nullable=False),
        sa.Column("study_streak", sa.Integer(), server_default="0", nullable=False),
        sa.Column("total_hours_studied", sa.Float(), server_default="0", nullable=False),
        sa.Column("total_topics_mastered", sa.Integer(), server_default="0", nullable=False),
        sa.Column("overall_progress", sa.Float(), server_default="0", nullable=False),
        _timestamp("last_active_date", nullable=True),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("user_id"),
    )

    # ==========================================================================
    # UPDATED_AT TRIGGER
    # ==========================================================================
    op.execute("""
        CREATE OR REPLACE FUNCTION update_updated_at_column()
        RETURNS TRIGGER AS $$
        BEGIN
            NEW.updated_at = NOW();
            RETURN NEW;
        END;
        $$ LANGUAGE plpgsql;
    """)

    for table in _UPDATED_AT_TABLES:
        op.execute(f"""
            CREATE TRIGGER update_{table}_updated_at
                BEFORE UPDATE ON {table}
                FOR EACH ROW EXECUTE FUNCTION update_updated_at_column();
        """)


def downgrade() -> None:
    for table in _UPDATED_AT_TABLES:
        op.execute(f"DROP TRIGGER IF EXISTS update_{table}_updated_at ON {table}")

    op.execute("DROP FUNCTION IF EXISTS update_updated_at_column()")

    # Drop tables in reverse dependency order
    op.drop_table("user_stats")
    op.drop_table("chat_messages")
    op.drop_table("notes")
    op.drop_table("study_sessions")
    op.drop_table("user_subject_progress")
    op.drop_table("subjects")
    op.drop_table("users")
