"""
SQLAlchemy 2.0 Models for MedTracker.

Uses modern declarative syntax with Mapped[] type annotations.
Ids are text: users are keyed by the identity provider's subject id,
everything else by a generated UUID4 string.
"""

from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4

from sqlalchemy import (
    ARRAY,
    JSON,
    CheckConstraint,
    DateTime,
    Float,
    ForeignKey,
    Index,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from medtracker.db.base import Base


def utcnow() -> datetime:
    """Timezone-aware current time in UTC."""
    return datetime.now(timezone.utc)


def new_id() -> str:
    return str(uuid4())


# TEXT[] on Postgres, JSON everywhere else
TagList = JSON().with_variant(ARRAY(Text), "postgresql")


# =============================================================================
# MODELS
# =============================================================================


class User(Base):
    """
    Core user account.

    Root of all per-user data: deleting a user removes progress, sessions,
    notes, chat messages and stats through ON DELETE CASCADE.
    """

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(255), primary_key=True, default=new_id)
    email: Mapped[Optional[str]] = mapped_column(String(255), unique=True, nullable=True)
    first_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    last_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    profile_image_url: Mapped[Optional[str]] = mapped_column(String(), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False
    )

    # Relationships
    subject_progress: Mapped[list["UserSubjectProgress"]] = relationship(
        "UserSubjectProgress", back_populates="user", passive_deletes=True
    )
    study_sessions: Mapped[list["StudySession"]] = relationship(
        "StudySession", back_populates="user", passive_deletes=True
    )
    notes: Mapped[list["Note"]] = relationship(
        "Note", back_populates="user", passive_deletes=True
    )
    chat_messages: Mapped[list["ChatMessage"]] = relationship(
        "ChatMessage", back_populates="user", passive_deletes=True
    )
    stats: Mapped[Optional["UserStats"]] = relationship(
        "UserStats", back_populates="user", uselist=False, passive_deletes=True
    )


class Subject(Base):
    """Medical subject area (e.g. Cardiology). Shared across all users."""

    __tablename__ = "subjects"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    icon: Mapped[str] = mapped_column(String(50), nullable=False)  # e.g. "fas fa-heart"
    color: Mapped[str] = mapped_column(String(20), nullable=False)  # theme color tag
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False
    )


class UserSubjectProgress(Base):
    """Per-user, per-subject progress. At most one row per (user, subject)."""

    __tablename__ = "user_subject_progress"
    __table_args__ = (
        UniqueConstraint("user_id", "subject_id", name="unique_user_subject_progress"),
        CheckConstraint(
            "progress_percentage >= 0 AND progress_percentage <= 100",
            name="valid_progress_percentage",
        ),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(
        String(255), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    subject_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("subjects.id", ondelete="CASCADE"), nullable=False
    )
    progress_percentage: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    topics_mastered: Mapped[int] = mapped_column(nullable=False, default=0)
    current_topic: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    last_studied_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False
    )

    # Relationships
    user: Mapped["User"] = relationship("User", back_populates="subject_progress")


class StudySession(Base):
    """A logged study interval with optional quiz performance."""

    __tablename__ = "study_sessions"
    __table_args__ = (
        Index("idx_study_sessions_user_started_at", "user_id", "started_at"),
        Index("idx_study_sessions_user_created_at", "user_id", "created_at"),
        CheckConstraint("duration > 0", name="valid_duration"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(
        String(255), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    subject_id: Mapped[Optional[str]] = mapped_column(
        String(36), ForeignKey("subjects.id", ondelete="SET NULL"), nullable=True
    )
    topic: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    duration: Mapped[int] = mapped_column(nullable=False)  # minutes
    questions_answered: Mapped[int] = mapped_column(nullable=False, default=0)
    correct_answers: Mapped[int] = mapped_column(nullable=False, default=0)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    started_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    ended_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False
    )

    # Relationships
    user: Mapped["User"] = relationship("User", back_populates="study_sessions")


class Note(Base):
    """
    User study notes.

    Notes can be standalone or attached to a subject. Tags keep their order.
    """

    __tablename__ = "notes"
    __table_args__ = (Index("idx_notes_user_updated_at", "user_id", "updated_at"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(
        String(255), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    subject_id: Mapped[Optional[str]] = mapped_column(
        String(36), ForeignKey("subjects.id", ondelete="SET NULL"), nullable=True, index=True
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    tags: Mapped[list[str]] = mapped_column(TagList, nullable=False, default=list)
    is_ai_generated: Mapped[bool] = mapped_column(nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False
    )

    # Relationships
    user: Mapped["User"] = relationship("User", back_populates="notes")


class ChatMessage(Base):
    """One question/answer exchange with the AI assistant. Append-only."""

    __tablename__ = "chat_messages"
    __table_args__ = (Index("idx_chat_messages_user_created_at", "user_id", "created_at"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(
        String(255), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    message: Mapped[str] = mapped_column(Text, nullable=False)
    response: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False
    )

    # Relationships
    user: Mapped["User"] = relationship("User", back_populates="chat_messages")


class UserStats(Base):
    """Aggregate statistics (1:1 with users)."""

    __tablename__ = "user_stats"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(
        String(255), ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False
    )
    study_streak: Mapped[int] = mapped_column(nullable=False, default=0)  # days
    total_hours_studied: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    total_topics_mastered: Mapped[int] = mapped_column(nullable=False, default=0)
    overall_progress: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    last_active_date: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False
    )

    # Relationships
    user: Mapped["User"] = relationship("User", back_populates="stats")
