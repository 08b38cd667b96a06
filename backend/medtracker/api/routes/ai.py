"""AI assistant routes."""

import logging
from typing import Annotated

from fastapi import APIRouter, HTTPException, Query, status

from medtracker.api.deps import AIServiceDep, CurrentUser, StorageDep
from medtracker.config import get_settings
from medtracker.schemas.ai import (
    AskRequest,
    EnhanceNotesRequest,
    EnhanceNotesResponse,
    GenerateMCQsRequest,
    MCQListResponse,
    MedicalAnswer,
    RecommendationListResponse,
)
from medtracker.schemas.chat import ChatMessageRead
from medtracker.services import analytics
from medtracker.services.ai_service import AIServiceUnavailableError

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/ai", tags=["ai"])
settings = get_settings()

# Sessions fed to the recommendation prompt
_RECOMMENDATION_HISTORY_LIMIT = 20


@router.post("/ask", response_model=MedicalAnswer)
async def ask_question(
    request: AskRequest,
    current_user: CurrentUser,
    storage: StorageDep,
    ai: AIServiceDep,
) -> MedicalAnswer:
    """Answer a study question and record the exchange in chat history."""
    if not request.question or not request.question.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Question is required")

    try:
        answer = await ai.ask_medical_question(request.question, request.context)
    except AIServiceUnavailableError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to process question",
        )

    await storage.create_chat_message(
        {"user_id": current_user.id, "message": request.question, "response": answer.answer}
    )
    return answer


@router.get("/chat-history", response_model=list[ChatMessageRead])
async def chat_history(
    current_user: CurrentUser,
    storage: StorageDep,
    limit: Annotated[int | None, Query(ge=1, le=500)] = None,
) -> list[ChatMessageRead]:
    """Past questions and answers, newest first."""
    messages = await storage.get_user_chat_messages(
        current_user.id, limit or settings.default_chat_history_limit
    )
    return [ChatMessageRead.model_validate(m) for m in messages]


@router.post("/enhance-notes", response_model=EnhanceNotesResponse)
async def enhance_notes(
    request: EnhanceNotesRequest,
    current_user: CurrentUser,
    ai: AIServiceDep,
) -> EnhanceNotesResponse:
    """Rewrite notes for clarity. Falls back to the submitted text."""
    if not request.notes or not request.notes.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Notes content is required")

    enhanced = await ai.enhance_notes(request.notes, request.subject)
    return EnhanceNotesResponse(enhanced_notes=enhanced)


@router.post("/generate-mcqs", response_model=MCQListResponse)
async def generate_mcqs(
    request: GenerateMCQsRequest,
    current_user: CurrentUser,
    ai: AIServiceDep,
) -> MCQListResponse:
    """Generate practice questions. An empty list means the model was unavailable."""
    if not request.subject or not request.topic:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Subject and topic are required",
        )

    questions = await ai.generate_mcqs(request.subject, request.topic, request.difficulty)
    return MCQListResponse(questions=questions)


@router.get("/recommendations", response_model=RecommendationListResponse)
async def recommendations(
    current_user: CurrentUser,
    storage: StorageDep,
    ai: AIServiceDep,
) -> RecommendationListResponse:
    """Study recommendations built from the user's progress and recent sessions."""
    subject_names = {s.id: s.name for s in await storage.get_subjects()}
    progress_rows = await storage.get_user_subject_progress(current_user.id)
    sessions = await storage.get_user_study_sessions(
        current_user.id, limit=_RECOMMENDATION_HISTORY_LIMIT
    )

    progress = [
        {
            "subject": subject_names.get(row.subject_id, row.subject_id),
            "progress": row.progress_percentage,
            "lastStudied": row.last_studied_at,
        }
        for row in progress_rows
    ]
    history = [
        {
            "subject": subject_names.get(s.subject_id) or s.topic or "General",
            "duration": s.duration,
            "accuracy": analytics.accuracy_percentage(s.correct_answers, s.questions_answered),
        }
        for s in sessions
    ]

    items = await ai.generate_study_recommendations(progress, history)
    return RecommendationListResponse(recommendations=items)
