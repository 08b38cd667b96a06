"""AI study assistant: prompt templates around the Anthropic Messages API."""

import json
import logging
import re
from typing import Any

from anthropic import AsyncAnthropic
from pydantic import ValidationError

from medtracker.config import Settings
from medtracker.schemas.ai import MCQuestion, MedicalAnswer, StudyRecommendation

logger = logging.getLogger(__name__)

ANSWER_FALLBACK = "I apologize, but I couldn't process your question properly."
DEFAULT_CONFIDENCE = 0.7

ASK_SYSTEM_PROMPT = """You are an advanced medical AI assistant helping medical students learn.
Provide accurate, educational medical information with appropriate disclaimers.
Always include confidence level and suggest related topics for further study.
Respond with a single JSON object and nothing else, with keys:
"answer" (string), "confidence" (number between 0 and 1),
"sources" (optional array of strings), "relatedTopics" (optional array of strings).
Remember this is for educational purposes only and not for actual medical diagnosis."""

RECOMMENDATIONS_SYSTEM_PROMPT = """You are an AI study advisor for medical students.
Analyze the user's progress and study history to recommend optimal study topics.
Consider: progress gaps, time since last study, accuracy rates, and medical curriculum importance.
Respond with a single JSON object and nothing else, shaped as
{"recommendations": [{"subject": string, "topic": string, "reason": string,
"priority": "high" | "medium" | "low", "estimatedTime": minutes as integer}]}."""

ENHANCE_SYSTEM_PROMPT = """You are an AI assistant that enhances medical study notes.
Improve clarity, add relevant details, correct any inaccuracies, and maintain educational value.
Keep the original structure but make it more comprehensive and easier to study from.
Return only the improved notes."""

MCQ_SYSTEM_PROMPT = """You are a medical education AI that creates high-quality multiple choice questions.
Generate clinically relevant MCQs with explanations for each answer option.
Respond with a single JSON object and nothing else, shaped as
{"questions": [{"question": string, "options": array of 4-5 strings,
"correctAnswer": zero-based index into options, "explanation": string,
"difficulty": string}]}."""


class AIServiceUnavailableError(Exception):
    """The assistant could not produce a usable answer."""


def extract_json_object(text: str) -> dict[str, Any] | None:
    """
    Pull a JSON object out of a model reply.

    Strategies:
    1. Direct JSON parse
    2. Extract from ```json...``` blocks
    3. Extract the outermost {...}

    Returns None if nothing parses to a dict.
    """
    text = text.strip()

    try:
        result = json.loads(text)
        if isinstance(result, dict):
            return result
    except json.JSONDecodeError:
        pass

    json_match = re.search(r"```(?:json)?\s*([\s\S]*?)```", text)
    if json_match:
        try:
            result = json.loads(json_match.group(1).strip())
            if isinstance(result, dict):
                return result
        except json.JSONDecodeError:
            pass

    start = text.find("{")
    end = text.rfind("}") + 1
    if start >= 0 and end > start:
        try:
            result = json.loads(text[start:end])
            if isinstance(result, dict):
                return result
        except json.JSONDecodeError:
            pass

    return None


def _clamp_confidence(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return DEFAULT_CONFIDENCE
    return max(0.0, min(1.0, float(value)))


def _string_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(item) for item in value if item is not None]


def _validated_items(raw: Any, schema: type, kind: str) -> list:
    """Validate each entry of a model-produced list, dropping the bad ones."""
    if not isinstance(raw, list):
        return []
    items = []
    for entry in raw:
        try:
            items.append(schema.model_validate(entry))
        except ValidationError as e:
            logger.warning("Dropping malformed %s from model output: %s", kind, e.errors()[:1])
    return items


class AIService:
    """
    Prompt construction and output coercion for the study assistant.

    Failure policy is decided per operation:
    - ask_medical_question raises AIServiceUnavailableError
    - generate_study_recommendations returns []
    - enhance_notes returns the original notes
    - generate_mcqs returns []
    """

    def __init__(self, client: Any, *, model: str, max_tokens: int = 4000):
        self.client = client
        self.model = model
        self.max_tokens = max_tokens

    @classmethod
    def from_settings(cls, settings: Settings) -> "AIService":
        return cls(
            AsyncAnthropic(api_key=settings.anthropic_api_key),
            model=settings.llm_model,
            max_tokens=settings.llm_max_tokens,
        )

    async def _complete(self, system_prompt: str, user_prompt: str, temperature: float) -> str:
        message = await self.client.messages.create(
            model=self.model,
            max_tokens=self.max_tokens,
            system=system_prompt,
            messages=[{"role": "user", "content": user_prompt}],
            temperature=temperature,
        )
        return message.content[0].text

    async def _complete_json(self, system_prompt: str, user_prompt: str, temperature: float) -> dict[str, Any]:
        text = await self._complete(system_prompt, user_prompt, temperature)
        data = extract_json_object(text)
        if data is None:
            raise ValueError("Model reply did not contain a JSON object")
        return data

    async def ask_medical_question(self, question: str, context: str | None = None) -> MedicalAnswer:
        """
        Answer a study question.

        Raises:
            AIServiceUnavailableError: on any upstream or parsing failure.
        """
        user_prompt = (
            f"Context: {context}\n\nQuestion: {question}" if context else f"Question: {question}"
        )
        try:
            data = await self._complete_json(ASK_SYSTEM_PROMPT, user_prompt, temperature=0.3)
            return MedicalAnswer(
                answer=str(data.get("answer") or ANSWER_FALLBACK),
                confidence=_clamp_confidence(data.get("confidence")),
                sources=_string_list(data.get("sources")),
                related_topics=_string_list(data.get("relatedTopics", data.get("related_topics"))),
            )
        except Exception as e:
            logger.exception("AI question answering failed")
            raise AIServiceUnavailableError("Failed to get AI response. Please try again.") from e

    async def generate_study_recommendations(
        self,
        progress: list[dict[str, Any]],
        history: list[dict[str, Any]],
    ) -> list[StudyRecommendation]:
        """Suggest what to study next. Returns [] when the model is unavailable."""
        user_prompt = (
            f"User Progress: {json.dumps(progress, default=str)}\n"
            f"Study History: {json.dumps(history, default=str)}\n\n"
            "Provide 3-5 personalized study recommendations."
        )
        try:
            data = await self._complete_json(RECOMMENDATIONS_SYSTEM_PROMPT, user_prompt, temperature=0.4)
        except Exception:
            logger.exception("AI recommendations failed")
            return []
        return _validated_items(data.get("recommendations"), StudyRecommendation, "recommendation")

    async def enhance_notes(self, notes: str, subject: str | None = None) -> str:
        """Rewrite study notes. Returns the notes unchanged when the model is unavailable."""
        user_prompt = (
            f"Subject: {subject}\n\nOriginal Notes: {notes}" if subject else f"Original Notes: {notes}"
        )
        try:
            enhanced = await self._complete(ENHANCE_SYSTEM_PROMPT, user_prompt, temperature=0.3)
        except Exception:
            logger.exception("Note enhancement failed")
            return notes
        return enhanced or notes

    async def generate_mcqs(
        self, subject: str, topic: str, difficulty: str = "medium"
    ) -> list[MCQuestion]:
        """Generate five practice questions. Returns [] when the model is unavailable."""
        user_prompt = (
            f"Subject: {subject}\n"
            f"Topic: {topic}\n"
            f"Difficulty: {difficulty}\n\n"
            "Generate 5 multiple choice questions."
        )
        try:
            data = await self._complete_json(MCQ_SYSTEM_PROMPT, user_prompt, temperature=0.5)
        except Exception:
            logger.exception("MCQ generation failed")
            return []
        return _validated_items(data.get("questions"), MCQuestion, "question")
