"""Dashboard routes: weekly chart data and the recent activity feed."""

from dataclasses import asdict

from fastapi import APIRouter

from medtracker.api.deps import CurrentUser, StorageDep
from medtracker.db.models import utcnow
from medtracker.schemas.dashboard import ActivityItemRead, WeeklySummaryRead
from medtracker.services import analytics

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/weekly-summary", response_model=WeeklySummaryRead)
async def weekly_summary(
    current_user: CurrentUser,
    storage: StorageDep,
) -> WeeklySummaryRead:
    """Hours per weekday for the current week, plus question totals and accuracy."""
    now = utcnow()
    sessions = await storage.get_weekly_study_sessions(current_user.id, now=now)
    summary = analytics.summarize_week(sessions, now.date())
    return WeeklySummaryRead.model_validate(asdict(summary))


@router.get("/recent-activity", response_model=list[ActivityItemRead])
async def recent_activity(
    current_user: CurrentUser,
    storage: StorageDep,
) -> list[ActivityItemRead]:
    """The last few study sessions as activity items."""
    sessions = await storage.get_user_study_sessions(current_user.id, limit=3)
    items = analytics.recent_activity(sessions, utcnow())
    return [ActivityItemRead.model_validate(asdict(item)) for item in items]
