"""
Vacancies Test Configuration and Fixtures
Shared pytest fixtures for all test modules.
"""
import os
import tempfile
from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator, Iterable, Optional

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from vacancies.core.context import RequestContext
from vacancies.database import enable_sqlite_foreign_keys, get_db
from vacancies.main import app
from vacancies.models import Base, Category, Grant


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest_asyncio.fixture(scope="function")
async def async_engine():
    """Create an async SQLite engine for testing."""
    # Use a unique temp file for each test to ensure complete isolation
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    engine = create_async_engine(
        f"sqlite+aiosqlite:///{db_path}",
        connect_args={"check_same_thread": False},
        echo=False,
    )
    enable_sqlite_foreign_keys(engine)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()

    # Clean up the temp file
    try:
        os.unlink(db_path)
    except OSError:
        pass


@pytest.fixture
def session_maker(async_engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=async_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )


@pytest_asyncio.fixture(scope="function")
async def async_session(session_maker) -> AsyncGenerator[AsyncSession, None]:
    """Create an async session for testing."""
    async with session_maker() as session:
        yield session
        await session.rollback()


@pytest.fixture
def ctx() -> RequestContext:
    return RequestContext(request_id="test-request")


# =============================================================================
# API Client
# =============================================================================


@pytest_asyncio.fixture
async def client(session_maker) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client bound to the app, with sessions from the test database."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_maker() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


# =============================================================================
# Data Factories
# =============================================================================


def future(days: int = 30) -> datetime:
    return datetime.now(timezone.utc) + timedelta(days=days)


def past(days: int = 1) -> datetime:
    return datetime.now(timezone.utc) - timedelta(days=days)


@pytest.fixture
def make_category(async_session):
    """Factory for persisted categories."""

    async def _make(name: str = "Education", description: str = "") -> Category:
        category = Category(name=name, description=description)
        async_session.add(category)
        await async_session.commit()
        return category

    return _make


@pytest.fixture
def make_grant(async_session):
    """Factory for persisted grants."""

    async def _make(
        title: str = "Test Grant",
        country: str = "Germany",
        deadline: Optional[datetime] = None,
        is_active: bool = True,
        categories: Iterable[Category] = (),
        created_at: Optional[datetime] = None,
    ) -> Grant:
        grant = Grant(
            title=title,
            description=f"{title} description",
            country=country,
            deadline=deadline or future(),
            is_active=is_active,
            created_at=created_at or datetime.now(timezone.utc),
            categories=list(categories),
        )
        async_session.add(grant)
        await async_session.commit()
        return grant

    return _make


def grant_payload(**overrides) -> dict:
    """JSON body for POST/PUT /api/grants."""
    payload = {
        "title": "Research Fellowship",
        "description": "Two-year postdoctoral fellowship",
        "country": "Germany",
        "deadline": future().isoformat(),
        "requirements": "PhD",
        "fundingAmount": "50 000 EUR",
        "categoryIds": [],
    }
    payload.update(overrides)
    return payload
