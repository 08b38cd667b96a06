"""Pytest configuration and fixtures."""

import os

# Required settings must exist before medtracker modules are imported
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ.setdefault("GOOGLE_CLIENT_ID", "test-client-id.apps.googleusercontent.com")
os.environ.setdefault("ANTHROPIC_API_KEY", "test-anthropic-key")
os.environ.setdefault("ENVIRONMENT", "development")

from collections.abc import AsyncGenerator
from types import SimpleNamespace

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from medtracker.api.deps import create_access_token
from medtracker.db.base import Base
from medtracker.db.models import User
from medtracker.db.session import get_db
from medtracker.db.storage import Storage
from medtracker.main import create_app
from medtracker.services.ai_service import AIService


class FakeMessages:
    """Stands in for ``AsyncAnthropic().messages``.

    Queue replies as strings (returned as the text block) or exceptions
    (raised from ``create``).
    """

    def __init__(self) -> None:
        self.replies: list[str | Exception] = []
        self.calls: list[dict] = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        reply = self.replies.pop(0) if self.replies else "{}"
        if isinstance(reply, Exception):
            raise reply
        return SimpleNamespace(content=[SimpleNamespace(text=reply)])


class FakeAnthropic:
    def __init__(self) -> None:
        self.messages = FakeMessages()


@pytest.fixture
async def engine():
    """In-memory SQLite shared by every session in the test."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    @event.listens_for(engine.sync_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest.fixture
async def db(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture
def storage(db) -> Storage:
    return Storage(db)


@pytest.fixture
def fake_llm() -> FakeAnthropic:
    return FakeAnthropic()


@pytest.fixture
def ai_service(fake_llm) -> AIService:
    return AIService(fake_llm, model="test-model", max_tokens=512)


@pytest.fixture
def app(session_factory, ai_service):
    app = create_app(ai_service=ai_service)

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    return app


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client for testing FastAPI endpoints."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


async def make_user(storage: Storage, user_id: str, email: str | None = None) -> User:
    return await storage.upsert_user(
        {"id": user_id, "email": email, "first_name": "Test", "last_name": "Student"}
    )


@pytest.fixture
async def user(storage) -> User:
    return await make_user(storage, "google-sub-1", "student@example.com")


@pytest.fixture
async def other_user(storage) -> User:
    return await make_user(storage, "google-sub-2", "other@example.com")


@pytest.fixture
def auth_headers(user) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


@pytest.fixture
def other_auth_headers(other_user) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(other_user.id)}"}
