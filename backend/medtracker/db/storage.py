"""
Data access layer.

One method per entity operation, each a single statement against one table
(the user upsert additionally guarantees the stats row). Every write commits
before returning. No ownership checks happen here: callers that act on a
row by id are responsible for verifying the row belongs to the caller.
"""

import logging
from datetime import datetime, timedelta
from typing import Any

from sqlalchemy import delete, select, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from medtracker.db.models import (
    ChatMessage,
    Note,
    StudySession,
    Subject,
    User,
    UserStats,
    UserSubjectProgress,
    utcnow,
)

logger = logging.getLogger(__name__)

DEFAULT_SUBJECTS: list[dict[str, str]] = [
    {"name": "Cardiology", "description": "Study of heart and cardiovascular system", "icon": "fas fa-heart", "color": "medical-blue"},
    {"name": "Neurology", "description": "Study of nervous system", "icon": "fas fa-brain", "color": "medical-green"},
    {"name": "Pharmacology", "description": "Study of drugs and their effects", "icon": "fas fa-pills", "color": "purple-600"},
    {"name": "Anatomy", "description": "Study of body structure", "icon": "fas fa-user-md", "color": "orange-600"},
    {"name": "Physiology", "description": "Study of body functions", "icon": "fas fa-heartbeat", "color": "red-600"},
]

# Refresh ORM identities with the values RETURNING hands back
_POPULATE = {"populate_existing": True}


class Storage:
    """Typed entity operations over a single database session."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    def _insert(self, model: type):
        """Dialect-specific INSERT so ON CONFLICT clauses are available."""
        if self.db.get_bind().dialect.name == "sqlite":
            return sqlite_insert(model)
        return pg_insert(model)

    # =========================================================================
    # USERS
    # =========================================================================

    async def get_user(self, user_id: str) -> User | None:
        result = await self.db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def upsert_user(self, data: dict[str, Any]) -> User:
        """
        Insert a user, or update every supplied field on id conflict.

        The stats row is created in the same transaction with a conditional
        insert on the user_id unique key, so concurrent first logins cannot
        produce duplicates.
        """
        changes = {key: value for key, value in data.items() if key != "id"}
        stmt = (
            self._insert(User)
            .values(**data)
            .on_conflict_do_update(
                index_elements=["id"],
                set_={**changes, "updated_at": utcnow()},
            )
            .returning(User)
        )
        result = await self.db.scalars(stmt, execution_options=_POPULATE)
        user = result.one()

        await self._insert_stats_if_missing(user.id)
        await self.db.commit()
        return user

    async def delete_user(self, user_id: str) -> None:
        """Delete a user; dependent rows go with it via ON DELETE CASCADE."""
        await self.db.execute(delete(User).where(User.id == user_id))
        await self.db.commit()
        logger.info("Deleted user %s", user_id)

    # =========================================================================
    # SUBJECTS
    # =========================================================================

    async def get_subjects(self) -> list[Subject]:
        result = await self.db.execute(select(Subject))
        return list(result.scalars())

    async def create_subject(self, data: dict[str, Any]) -> Subject:
        subject = Subject(**data)
        self.db.add(subject)
        await self.db.commit()
        await self.db.refresh(subject)
        return subject

    async def create_default_subjects(self) -> list[Subject]:
        """Insert the fixed set of starter subjects."""
        subjects = [Subject(**data) for data in DEFAULT_SUBJECTS]
        self.db.add_all(subjects)
        await self.db.commit()
        return subjects

    # =========================================================================
    # SUBJECT PROGRESS
    # =========================================================================

    async def get_user_subject_progress(self, user_id: str) -> list[UserSubjectProgress]:
        result = await self.db.execute(
            select(UserSubjectProgress).where(UserSubjectProgress.user_id == user_id)
        )
        return list(result.scalars())

    async def update_user_subject_progress(self, data: dict[str, Any]) -> UserSubjectProgress:
        """Upsert keyed on (user_id, subject_id); supplied fields overwrite."""
        now = utcnow()
        stmt = (
            self._insert(UserSubjectProgress)
            .values(**data, updated_at=now)
            .on_conflict_do_update(
                index_elements=["user_id", "subject_id"],
                set_={**data, "updated_at": now},
            )
            .returning(UserSubjectProgress)
        )
        result = await self.db.scalars(stmt, execution_options=_POPULATE)
        progress = result.one()
        await self.db.commit()
        return progress

    # =========================================================================
    # STUDY SESSIONS
    # =========================================================================

    async def create_study_session(self, data: dict[str, Any]) -> StudySession:
        session = StudySession(**data)
        self.db.add(session)
        await self.db.commit()
        await self.db.refresh(session)
        return session

    async def get_user_study_sessions(self, user_id: str, limit: int = 10) -> list[StudySession]:
        result = await self.db.execute(
            select(StudySession)
            .where(StudySession.user_id == user_id)
            .order_by(StudySession.created_at.desc())
            .limit(limit)
        )
        return list(result.scalars())

    async def get_weekly_study_sessions(
        self, user_id: str, now: datetime | None = None
    ) -> list[StudySession]:
        """Sessions started within the trailing seven days, newest first."""
        cutoff = (now or utcnow()) - timedelta(days=7)
        result = await self.db.execute(
            select(StudySession)
            .where(StudySession.user_id == user_id, StudySession.started_at >= cutoff)
            .order_by(StudySession.started_at.desc())
        )
        return list(result.scalars())

    # =========================================================================
    # NOTES
    # =========================================================================

    async def get_user_notes(self, user_id: str) -> list[Note]:
        result = await self.db.execute(
            select(Note).where(Note.user_id == user_id).order_by(Note.updated_at.desc())
        )
        return list(result.scalars())

    async def get_note(self, note_id: str) -> Note | None:
        result = await self.db.execute(select(Note).where(Note.id == note_id))
        return result.scalar_one_or_none()

    async def create_note(self, data: dict[str, Any]) -> Note:
        note = Note(**data)
        self.db.add(note)
        await self.db.commit()
        await self.db.refresh(note)
        return note

    async def update_note(self, note_id: str, updates: dict[str, Any]) -> Note | None:
        stmt = (
            update(Note)
            .where(Note.id == note_id)
            .values(**updates, updated_at=utcnow())
            .returning(Note)
        )
        result = await self.db.scalars(stmt, execution_options=_POPULATE)
        note = result.one_or_none()
        await self.db.commit()
        return note

    async def delete_note(self, note_id: str) -> None:
        await self.db.execute(delete(Note).where(Note.id == note_id))
        await self.db.commit()

    # =========================================================================
    # CHAT
    # =========================================================================

    async def create_chat_message(self, data: dict[str, Any]) -> ChatMessage:
        message = ChatMessage(**data)
        self.db.add(message)
        await self.db.commit()
        await self.db.refresh(message)
        return message

    async def get_user_chat_messages(self, user_id: str, limit: int = 50) -> list[ChatMessage]:
        result = await self.db.execute(
            select(ChatMessage)
            .where(ChatMessage.user_id == user_id)
            .order_by(ChatMessage.created_at.desc())
            .limit(limit)
        )
        return list(result.scalars())

    # =========================================================================
    # USER STATS
    # =========================================================================

    async def get_user_stats(self, user_id: str) -> UserStats | None:
        result = await self.db.execute(select(UserStats).where(UserStats.user_id == user_id))
        return result.scalar_one_or_none()

    async def update_user_stats(self, user_id: str, updates: dict[str, Any]) -> UserStats | None:
        stmt = (
            update(UserStats)
            .where(UserStats.user_id == user_id)
            .values(**updates, updated_at=utcnow())
            .returning(UserStats)
        )
        result = await self.db.scalars(stmt, execution_options=_POPULATE)
        stats = result.one_or_none()
        await self.db.commit()
        return stats

    async def initialize_user_stats(self, user_id: str) -> UserStats:
        """Create the all-zero stats row, or return the one already there."""
        stats = await self._insert_stats_if_missing(user_id)
        await self.db.commit()
        return stats

    async def _insert_stats_if_missing(self, user_id: str) -> UserStats:
        stmt = (
            self._insert(UserStats)
            .values(user_id=user_id)
            .on_conflict_do_nothing(index_elements=["user_id"])
            .returning(UserStats)
        )
        result = await self.db.scalars(stmt, execution_options=_POPULATE)
        stats = result.one_or_none()
        if stats is None:
            # Insert was suppressed by the unique key
            stats = await self.get_user_stats(user_id)
        return stats
