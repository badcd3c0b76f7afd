import os
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

# Tests always run against a throwaway in-memory SQLite database, in the
# school's default zone, regardless of what the local .env says.
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
os.environ["DATABASE_URL"] = TEST_DATABASE_URL
os.environ["ENVIRONMENT"] = "test"
os.environ["TIMEZONE"] = "America/Vancouver"

from libs.common.config import get_settings
from libs.db.base import Base
from libs.db.session import get_async_db
from services.classes_service import models as _class_models  # noqa: F401
from services.classes_service.app.main import app
from services.classes_service.services.summary import ScheduleSummaryService

# Clear cached settings to reload with new env vars
get_settings.cache_clear()


@pytest_asyncio.fixture
async def test_engine():
    """
    A fresh in-memory database per test.

    StaticPool keeps a single connection so every session sees the same
    database; the schema is created from model metadata.
    """
    engine = create_async_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(test_engine) -> async_sessionmaker:
    return async_sessionmaker(
        bind=test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Yield a database session bound to the per-test engine."""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(db_session, session_factory) -> AsyncGenerator[AsyncClient, None]:
    """
    Yield an AsyncClient against the classes app.

    The DB dependency is overridden with the test session and the summary
    service is rebuilt on the test engine so each test starts with a cold cache.
    """
    app.dependency_overrides[get_async_db] = lambda: db_session
    original_summary = app.state.schedule_summary
    app.state.schedule_summary = ScheduleSummaryService(session_factory)

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as ac:
        yield ac

    app.dependency_overrides.clear()
    app.state.schedule_summary = original_summary
