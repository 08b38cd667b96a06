"""
Dashboard aggregation helpers.

Pure functions over already-loaded study sessions: weekly chart bucketing,
quiz accuracy, and the recent-activity feed. Nothing here touches the
database. Naive datetimes (as returned by SQLite) are treated as UTC.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Literal, Protocol

DAY_LABELS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")

# Bar chart scaling: 4 hours maps to 80%, clamped to the 20-90% band
_FULL_SCALE_HOURS = 4
_FULL_SCALE_HEIGHT = 80
_MIN_HEIGHT = 20
_MAX_HEIGHT = 90


class SessionLike(Protocol):
    """The study session attributes the helpers read."""

    id: str
    topic: str | None
    duration: int
    questions_answered: int | None
    correct_answers: int | None
    started_at: datetime


@dataclass
class DayBucket:
    day: str
    date: date
    hours: float
    height: float


@dataclass
class WeeklySummary:
    days: list[DayBucket]
    total_hours: float
    average_daily_hours: float
    total_questions: int
    total_correct: int
    accuracy: float


@dataclass
class ActivityItem:
    id: str
    type: Literal["quiz", "study", "insight"]
    title: str
    description: str
    time: str


def _as_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def accuracy_percentage(correct: int | None, answered: int | None) -> float:
    """Percentage of correct answers; 0 when nothing was answered."""
    if not answered or answered <= 0:
        return 0.0
    return (correct or 0) * 100 / answered


def bar_height(hours: float) -> float:
    """Map study hours to a chart bar height in percent."""
    scaled = hours / _FULL_SCALE_HOURS * _FULL_SCALE_HEIGHT
    return min(max(scaled, _MIN_HEIGHT), _MAX_HEIGHT)


def week_start(today: date) -> date:
    """Monday of the week containing ``today``."""
    return today - timedelta(days=today.weekday())


def weekly_breakdown(sessions: Iterable[SessionLike], today: date) -> list[DayBucket]:
    """
    Bucket sessions into the seven days (Mon..Sun) of the week containing today.

    Each session's full duration is attributed to the UTC calendar day its
    ``started_at`` falls on. Sessions outside the week are ignored.
    """
    monday = week_start(today)
    minutes_by_date: dict[date, int] = {}
    for session in sessions:
        day = _as_utc(session.started_at).date()
        minutes_by_date[day] = minutes_by_date.get(day, 0) + (session.duration or 0)

    buckets = []
    for offset, label in enumerate(DAY_LABELS):
        day = monday + timedelta(days=offset)
        hours = minutes_by_date.get(day, 0) / 60
        buckets.append(DayBucket(day=label, date=day, hours=hours, height=bar_height(hours)))
    return buckets


def summarize_week(sessions: Sequence[SessionLike], today: date) -> WeeklySummary:
    """Chart buckets plus the totals shown beneath the weekly chart."""
    days = weekly_breakdown(sessions, today)
    total_hours = sum(bucket.hours for bucket in days)
    total_questions = sum(s.questions_answered or 0 for s in sessions)
    total_correct = sum(s.correct_answers or 0 for s in sessions)
    return WeeklySummary(
        days=days,
        total_hours=total_hours,
        average_daily_hours=total_hours / 7,
        total_questions=total_questions,
        total_correct=total_correct,
        accuracy=accuracy_percentage(total_correct, total_questions),
    )


def format_time_ago(moment: datetime, now: datetime) -> str:
    elapsed = _as_utc(now) - _as_utc(moment)
    hours = int(elapsed.total_seconds() // 3600)
    days = hours // 24
    if days > 0:
        return f"{days} day{'s' if days > 1 else ''} ago"
    if hours > 0:
        return f"{hours} hour{'s' if hours > 1 else ''} ago"
    return "Just now"


def recent_activity(
    sessions: Sequence[SessionLike], now: datetime, limit: int = 3
) -> list[ActivityItem]:
    """Turn the most recent sessions into dashboard activity items."""
    items = []
    for session in sessions[:limit]:
        answered = session.questions_answered or 0
        if answered > 0:
            items.append(
                ActivityItem(
                    id=session.id,
                    type="quiz",
                    title="Completed Practice Session",
                    description=f"Scored {session.correct_answers or 0}/{answered} questions correctly",
                    time=format_time_ago(session.started_at, now),
                )
            )
        else:
            items.append(
                ActivityItem(
                    id=session.id,
                    type="study",
                    title=f"Studied {session.topic or 'General Topics'}",
                    description=f"Studied for {session.duration} minutes",
                    time=format_time_ago(session.started_at, now),
                )
            )

    if not items:
        items.append(
            ActivityItem(
                id="welcome",
                type="insight",
                title="Welcome to MedTracker!",
                description="Start your first study session to see your activity here",
                time="Just now",
            )
        )
    return items
