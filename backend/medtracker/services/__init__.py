"""Services for external integrations and dashboard aggregation."""

from medtracker.services.ai_service import AIService, AIServiceUnavailableError
from medtracker.services import analytics

__all__ = ["AIService", "AIServiceUnavailableError", "analytics"]
