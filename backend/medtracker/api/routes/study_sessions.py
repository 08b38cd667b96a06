"""Study session routes."""

from typing import Annotated

from fastapi import APIRouter, Query

from medtracker.api.deps import CurrentUser, StorageDep
from medtracker.config import get_settings
from medtracker.schemas.study_sessions import StudySessionCreate, StudySessionRead

router = APIRouter(prefix="/study-sessions", tags=["study-sessions"])
settings = get_settings()


@router.get("", response_model=list[StudySessionRead])
async def list_study_sessions(
    current_user: CurrentUser,
    storage: StorageDep,
    limit: Annotated[int | None, Query(ge=1, le=500)] = None,
) -> list[StudySessionRead]:
    """Most recently logged sessions, newest first."""
    sessions = await storage.get_user_study_sessions(
        current_user.id, limit or settings.default_session_limit
    )
    return [StudySessionRead.model_validate(s) for s in sessions]


@router.get("/weekly", response_model=list[StudySessionRead])
async def list_weekly_study_sessions(
    current_user: CurrentUser,
    storage: StorageDep,
) -> list[StudySessionRead]:
    """Sessions started in the last seven days, newest first."""
    sessions = await storage.get_weekly_study_sessions(current_user.id)
    return [StudySessionRead.model_validate(s) for s in sessions]


@router.post("", response_model=StudySessionRead)
async def create_study_session(
    data: StudySessionCreate,
    current_user: CurrentUser,
    storage: StorageDep,
) -> StudySessionRead:
    """Log a study session."""
    session = await storage.create_study_session(
        {**data.model_dump(), "user_id": current_user.id}
    )
    return StudySessionRead.model_validate(session)
