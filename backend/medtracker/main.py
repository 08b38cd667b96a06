"""
MedTracker FastAPI Application Entry Point.

Run with: uvicorn medtracker.main:app --reload
"""

import logging
import time
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from medtracker.api.routes import (
    ai,
    auth,
    dashboard,
    notes,
    progress,
    study_sessions,
    subjects,
)
from medtracker.config import get_settings, sanitize_error
from medtracker.logging_config import setup_logging
from medtracker.services.ai_service import AIService

logger = logging.getLogger(__name__)
settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager for startup/shutdown."""
    logger.info("%s starting (environment=%s)", settings.app_name, settings.environment)
    yield
    logger.info("%s shutting down", settings.app_name)


async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Data-store failures surface as a generic 500."""
    logger.exception("Database error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": sanitize_error(exc)},
    )


def create_app(ai_service: AIService | None = None) -> FastAPI:
    """
    Build the application.

    The AI service is created from settings unless one is passed in
    (tests pass one wrapping a fake client).
    """
    setup_logging(settings)

    app = FastAPI(
        title=settings.app_name,
        description="Medical study tracking and AI study assistant API",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.ai_service = ai_service or AIService.from_settings(settings)

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start) * 1000
        logger.info(
            "%s %s %s %.0fms",
            request.method,
            request.url.path,
            response.status_code,
            duration_ms,
        )
        return response

    app.add_exception_handler(SQLAlchemyError, database_error_handler)

    # Include routers
    for module in (auth, subjects, progress, study_sessions, dashboard, notes, ai):
        app.include_router(module.router, prefix="/api")

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "healthy"}

    return app


app = create_app()
