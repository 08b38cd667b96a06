"""Notes CRUD routes."""

from fastapi import APIRouter, HTTPException, status

from medtracker.api.deps import CurrentUser, StorageDep, get_owned_note_or_404
from medtracker.schemas.notes import MessageResponse, NoteCreate, NoteRead, NoteUpdate

router = APIRouter(prefix="/notes", tags=["notes"])


@router.get("", response_model=list[NoteRead])
async def list_notes(
    current_user: CurrentUser,
    storage: StorageDep,
) -> list[NoteRead]:
    """List notes for the current user, most recently updated first."""
    notes = await storage.get_user_notes(current_user.id)
    return [NoteRead.model_validate(n) for n in notes]


@router.post("", response_model=NoteRead)
async def create_note(
    data: NoteCreate,
    current_user: CurrentUser,
    storage: StorageDep,
) -> NoteRead:
    """Create a new note."""
    note = await storage.create_note(
        {**data.model_dump(), "user_id": current_user.id}  # From auth, NEVER from request
    )
    return NoteRead.model_validate(note)


@router.patch("/{note_id}", response_model=NoteRead)
async def update_note(
    note_id: str,
    data: NoteUpdate,
    current_user: CurrentUser,
    storage: StorageDep,
) -> NoteRead:
    """Update a note."""
    await get_owned_note_or_404(note_id, current_user, storage)
    note = await storage.update_note(note_id, data.model_dump(exclude_unset=True))
    if note is None:
        # Deleted after the ownership check
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Note not found")
    return NoteRead.model_validate(note)


@router.delete("/{note_id}", response_model=MessageResponse)
async def delete_note(
    note_id: str,
    current_user: CurrentUser,
    storage: StorageDep,
) -> MessageResponse:
    """Delete a note."""
    await get_owned_note_or_404(note_id, current_user, storage)
    await storage.delete_note(note_id)
    return MessageResponse(message="Note deleted successfully")
