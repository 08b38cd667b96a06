"""Pydantic schemas for API request/response validation."""

from medtracker.schemas.user import UserRead, UserUpsert
from medtracker.schemas.auth import GoogleAuthRequest, TokenResponse
from medtracker.schemas.subjects import InitializeSubjectsResponse, SubjectCreate, SubjectRead
from medtracker.schemas.progress import ProgressRead, ProgressUpdate, StatsRead, StatsUpdate
from medtracker.schemas.study_sessions import StudySessionCreate, StudySessionRead
from medtracker.schemas.notes import MessageResponse, NoteCreate, NoteRead, NoteUpdate
from medtracker.schemas.chat import ChatMessageRead
from medtracker.schemas.ai import (
    AskRequest,
    EnhanceNotesRequest,
    EnhanceNotesResponse,
    GenerateMCQsRequest,
    MCQListResponse,
    MCQuestion,
    MedicalAnswer,
    RecommendationListResponse,
    StudyRecommendation,
)
from medtracker.schemas.dashboard import ActivityItemRead, DayBucketRead, WeeklySummaryRead

__all__ = [
    # User
    "UserRead",
    "UserUpsert",
    # Auth
    "GoogleAuthRequest",
    "TokenResponse",
    # Subjects
    "InitializeSubjectsResponse",
    "SubjectCreate",
    "SubjectRead",
    # Progress / stats
    "ProgressRead",
    "ProgressUpdate",
    "StatsRead",
    "StatsUpdate",
    # Study sessions
    "StudySessionCreate",
    "StudySessionRead",
    # Notes
    "MessageResponse",
    "NoteCreate",
    "NoteRead",
    "NoteUpdate",
    # Chat
    "ChatMessageRead",
    # AI
    "AskRequest",
    "EnhanceNotesRequest",
    "EnhanceNotesResponse",
    "GenerateMCQsRequest",
    "MCQListResponse",
    "MCQuestion",
    "MedicalAnswer",
    "RecommendationListResponse",
    "StudyRecommendation",
    # Dashboard
    "ActivityItemRead",
    "DayBucketRead",
    "WeeklySummaryRead",
]
