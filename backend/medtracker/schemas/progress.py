"""Subject progress and aggregate statistics schemas."""

from datetime import datetime

from pydantic import Field, field_validator

from medtracker.schemas.base import BaseSchema, IDMixin, TimestampMixin, UtcDatetime, reject_null


class ProgressUpdate(BaseSchema):
    """Upsert payload for one subject. The user comes from auth, never the body."""

    subject_id: str = Field(..., min_length=1, max_length=36)
    progress_percentage: float | None = Field(None, ge=0, le=100)
    topics_mastered: int | None = Field(None, ge=0)
    current_topic: str | None = Field(None, max_length=255)
    last_studied_at: UtcDatetime | None = None

    @field_validator("progress_percentage", "topics_mastered")
    @classmethod
    def check_not_null(cls, value):
        return reject_null(value)


class ProgressRead(BaseSchema):
    id: str
    user_id: str
    subject_id: str
    progress_percentage: float
    topics_mastered: int
    current_topic: str | None
    last_studied_at: datetime | None
    updated_at: datetime


class StatsRead(BaseSchema, IDMixin, TimestampMixin):
    user_id: str
    study_streak: int
    total_hours_studied: float
    total_topics_mastered: int
    overall_progress: float
    last_active_date: datetime | None


class StatsUpdate(BaseSchema):
    """Partial stats patch. All fields optional."""

    study_streak: int | None = Field(None, ge=0)
    total_hours_studied: float | None = Field(None, ge=0)
    total_topics_mastered: int | None = Field(None, ge=0)
    overall_progress: float | None = Field(None, ge=0, le=100)
    last_active_date: UtcDatetime | None = None

    @field_validator("study_streak", "total_hours_studied", "total_topics_mastered", "overall_progress")
    @classmethod
    def check_not_null(cls, value):
        return reject_null(value)
