"""Schemas for AI assistant requests and the structured answers it returns."""

from typing import Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator

Difficulty = Literal["easy", "medium", "hard"]


# Request schemas
# Required fields are checked in the route so a missing value answers 400.
class AskRequest(BaseModel):
    """Question for the assistant, with optional study context."""

    question: str | None = Field(None, max_length=10000)
    context: str | None = Field(None, max_length=20000)


class EnhanceNotesRequest(BaseModel):
    notes: str | None = None
    subject: str | None = Field(None, max_length=100)


class GenerateMCQsRequest(BaseModel):
    subject: str | None = Field(None, max_length=100)
    topic: str | None = Field(None, max_length=255)
    difficulty: Difficulty = "medium"


# Model output schemas
class ModelOutput(BaseModel):
    """Structured model output; accepts the camelCase keys the prompts ask for."""

    model_config = ConfigDict(str_strip_whitespace=True)


class MedicalAnswer(ModelOutput):
    answer: str
    confidence: float = Field(..., ge=0, le=1)
    sources: list[str] = Field(default_factory=list)
    related_topics: list[str] = Field(
        default_factory=list, validation_alias=AliasChoices("relatedTopics", "related_topics")
    )


class StudyRecommendation(ModelOutput):
    subject: str = Field(..., min_length=1)
    topic: str = Field(..., min_length=1)
    reason: str
    priority: Literal["high", "medium", "low"]
    estimated_time: int = Field(  # minutes
        ..., ge=0, validation_alias=AliasChoices("estimatedTime", "estimated_time")
    )


class MCQuestion(ModelOutput):
    question: str = Field(..., min_length=1)
    options: list[str] = Field(..., min_length=4, max_length=5)
    correct_answer: int = Field(
        ..., validation_alias=AliasChoices("correctAnswer", "correct_answer")
    )
    explanation: str
    difficulty: str = "medium"

    @model_validator(mode="after")
    def check_answer_index(self) -> "MCQuestion":
        """correct_answer must index into options."""
        if not 0 <= self.correct_answer < len(self.options):
            raise ValueError("correctAnswer is not a valid option index")
        return self


# Response schemas
class EnhanceNotesResponse(BaseModel):
    enhanced_notes: str


class MCQListResponse(BaseModel):
    questions: list[MCQuestion]


class RecommendationListResponse(BaseModel):
    recommendations: list[StudyRecommendation]
