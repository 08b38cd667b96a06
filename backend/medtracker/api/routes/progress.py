"""Per-user progress and statistics routes."""

from fastapi import APIRouter, HTTPException, status

from medtracker.api.deps import CurrentUser, StorageDep
from medtracker.schemas.progress import ProgressRead, ProgressUpdate, StatsRead, StatsUpdate

router = APIRouter(prefix="/user", tags=["progress"])


@router.get("/progress", response_model=list[ProgressRead])
async def list_progress(
    current_user: CurrentUser,
    storage: StorageDep,
) -> list[ProgressRead]:
    """Progress rows for every subject the current user has studied."""
    rows = await storage.get_user_subject_progress(current_user.id)
    return [ProgressRead.model_validate(r) for r in rows]


@router.post("/progress", response_model=ProgressRead)
async def update_progress(
    data: ProgressUpdate,
    current_user: CurrentUser,
    storage: StorageDep,
) -> ProgressRead:
    """Insert or overwrite the current user's progress for one subject."""
    progress = await storage.update_user_subject_progress(
        {**data.model_dump(exclude_unset=True), "user_id": current_user.id}
    )
    return ProgressRead.model_validate(progress)


@router.get("/stats", response_model=StatsRead)
async def get_stats(
    current_user: CurrentUser,
    storage: StorageDep,
) -> StatsRead:
    """Aggregate statistics for the current user."""
    stats = await storage.get_user_stats(current_user.id)
    if stats is None:
        stats = await storage.initialize_user_stats(current_user.id)
    return StatsRead.model_validate(stats)


@router.patch("/stats", response_model=StatsRead)
async def update_stats(
    data: StatsUpdate,
    current_user: CurrentUser,
    storage: StorageDep,
) -> StatsRead:
    """Patch the current user's statistics."""
    stats = await storage.update_user_stats(current_user.id, data.model_dump(exclude_unset=True))
    if stats is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Stats not found")
    return StatsRead.model_validate(stats)
