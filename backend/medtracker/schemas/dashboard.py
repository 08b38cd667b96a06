"""Dashboard aggregation schemas."""

import datetime as dt
from typing import Literal

from medtracker.schemas.base import BaseSchema


class DayBucketRead(BaseSchema):
    day: str
    date: dt.date
    hours: float
    height: float


class WeeklySummaryRead(BaseSchema):
    days: list[DayBucketRead]
    total_hours: float
    average_daily_hours: float
    total_questions: int
    total_correct: int
    accuracy: float


class ActivityItemRead(BaseSchema):
    id: str
    type: Literal["quiz", "study", "insight"]
    title: str
    description: str
    time: str
