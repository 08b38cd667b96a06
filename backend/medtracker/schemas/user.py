"""User schemas."""

from pydantic import EmailStr, Field

from medtracker.schemas.base import BaseSchema, IDMixin, TimestampMixin


class UserUpsert(BaseSchema):
    """Identity claims written on every login (internal use)."""

    id: str = Field(..., min_length=1, max_length=255)
    email: EmailStr | None = None
    first_name: str | None = Field(None, max_length=255)
    last_name: str | None = Field(None, max_length=255)
    profile_image_url: str | None = None


class UserRead(BaseSchema, IDMixin, TimestampMixin):
    """Schema for reading user data."""

    email: str | None
    first_name: str | None
    last_name: str | None
    profile_image_url: str | None
