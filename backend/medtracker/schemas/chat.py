"""Chat history schemas."""

from datetime import datetime

from medtracker.schemas.base import BaseSchema


class ChatMessageRead(BaseSchema):
    """One stored question/answer exchange."""

    id: str
    user_id: str
    message: str
    response: str
    created_at: datetime
