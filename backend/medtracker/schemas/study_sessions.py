"""Study session schemas."""

from datetime import datetime

from pydantic import Field, model_validator

from medtracker.schemas.base import BaseSchema, UtcDatetime


class StudySessionCreate(BaseSchema):
    """Schema for logging a study session."""

    subject_id: str | None = Field(None, max_length=36)
    topic: str | None = Field(None, max_length=255)
    duration: int = Field(..., gt=0, description="Minutes studied")
    questions_answered: int = Field(0, ge=0)
    correct_answers: int = Field(0, ge=0)
    notes: str | None = None
    started_at: UtcDatetime
    ended_at: UtcDatetime | None = None

    @model_validator(mode="after")
    def check_counts(self) -> "StudySessionCreate":
        if self.correct_answers > self.questions_answered:
            raise ValueError("correct_answers cannot exceed questions_answered")
        if self.ended_at is not None and self.ended_at < self.started_at:
            raise ValueError("ended_at must not be before started_at")
        return self


class StudySessionRead(BaseSchema):
    id: str
    user_id: str
    subject_id: str | None
    topic: str | None
    duration: int
    questions_answered: int
    correct_answers: int
    notes: str | None
    started_at: datetime
    ended_at: datetime | None
    created_at: datetime
