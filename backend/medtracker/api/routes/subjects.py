"""Subject routes. Subjects are shared by every user."""

from fastapi import APIRouter

from medtracker.api.deps import CurrentUser, StorageDep
from medtracker.schemas.subjects import InitializeSubjectsResponse, SubjectCreate, SubjectRead

router = APIRouter(tags=["subjects"])


@router.get("/subjects", response_model=list[SubjectRead])
async def list_subjects(
    current_user: CurrentUser,
    storage: StorageDep,
) -> list[SubjectRead]:
    """List all subjects."""
    subjects = await storage.get_subjects()
    return [SubjectRead.model_validate(s) for s in subjects]


@router.post("/subjects", response_model=SubjectRead)
async def create_subject(
    data: SubjectCreate,
    current_user: CurrentUser,
    storage: StorageDep,
) -> SubjectRead:
    """Create a new subject."""
    subject = await storage.create_subject(data.model_dump())
    return SubjectRead.model_validate(subject)


@router.post("/initialize", response_model=InitializeSubjectsResponse)
async def initialize_subjects(
    current_user: CurrentUser,
    storage: StorageDep,
) -> InitializeSubjectsResponse:
    """Create the five default medical subjects."""
    subjects = await storage.create_default_subjects()
    return InitializeSubjectsResponse(
        message="Default subjects initialized",
        subjects=[SubjectRead.model_validate(s) for s in subjects],
    )
