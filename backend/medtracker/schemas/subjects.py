"""Subject schemas."""

from datetime import datetime

from pydantic import BaseModel, Field

from medtracker.schemas.base import BaseSchema


class SubjectCreate(BaseSchema):
    """Schema for creating a subject."""

    name: str = Field(..., min_length=1, max_length=100)
    description: str | None = None
    icon: str = Field(..., min_length=1, max_length=50)
    color: str = Field(..., min_length=1, max_length=20)


class SubjectRead(SubjectCreate):
    """Schema for reading subject data."""

    id: str
    created_at: datetime


class InitializeSubjectsResponse(BaseModel):
    message: str
    subjects: list[SubjectRead]
