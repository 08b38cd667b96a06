"""Note schemas."""

from pydantic import Field, field_validator

from medtracker.schemas.base import BaseSchema, IDMixin, TimestampMixin, reject_null


class NoteBase(BaseSchema):
    """Base note schema."""

    title: str = Field(..., min_length=1, max_length=255)
    content: str
    tags: list[str] = Field(default_factory=list)


class NoteCreate(NoteBase):
    """Schema for creating a note. Standalone or attached to a subject."""

    subject_id: str | None = Field(None, max_length=36)
    is_ai_generated: bool = False


class NoteRead(NoteBase, IDMixin, TimestampMixin):
    """Schema for reading note data."""

    user_id: str
    subject_id: str | None
    is_ai_generated: bool


class NoteUpdate(BaseSchema):
    """Schema for updating a note. All fields optional."""

    title: str | None = Field(None, min_length=1, max_length=255)
    content: str | None = None
    tags: list[str] | None = None
    subject_id: str | None = Field(None, max_length=36)
    is_ai_generated: bool | None = None

    @field_validator("title", "content", "tags", "is_ai_generated")
    @classmethod
    def check_not_null(cls, value):
        return reject_null(value)


class MessageResponse(BaseSchema):
    message: str
