"""API routes package."""

from medtracker.api.routes import (
    ai,
    auth,
    dashboard,
    notes,
    progress,
    study_sessions,
    subjects,
)

__all__ = [
    "ai",
    "auth",
    "dashboard",
    "notes",
    "progress",
    "study_sessions",
    "subjects",
]
