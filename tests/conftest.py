"""Shared pytest fixtures for unit and integration tests."""

import os
import uuid

# Settings are read at import time; configure before the app is imported
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("LOG_FORMAT", "text")

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app import models  # noqa: F401  (registers every table on Base.metadata)
from app.config import settings
from app.database import Base, get_db
from app.main import app


@pytest.fixture
async def engine():
    """Fresh in-memory database per test."""
    test_engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest.fixture
async def db_session(session_factory):
    """Session for service-level tests; committed on success like get_db."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def api_base() -> str:
    """Base URL for API requests."""
    return f"http://test{settings.API_V1_PREFIX}"


@pytest.fixture
async def async_client(session_factory, api_base: str):
    """Async HTTP client bound to the app, with get_db pointed at the test database."""

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    transport = ASGITransport(app=app)
    client = AsyncClient(transport=transport, base_url=api_base, timeout=30.0)
    yield client
    await client.aclose()
    app.dependency_overrides.pop(get_db, None)


@pytest.fixture
def unique_suffix() -> str:
    """Unique suffix for test data to avoid collisions."""
    return str(uuid.uuid4())[:8]


@pytest.fixture
async def teacher(async_client: AsyncClient, api_base: str) -> dict:
    resp = await async_client.post(
        f"{api_base}/teachers",
        json={"teacherName": "Anjali Perera", "mobile": "0771234567", "schoolName": "Royal College"},
    )
    assert resp.status_code == 200, resp.text
    return resp.json()["data"]


@pytest.fixture
async def books(async_client: AsyncClient, api_base: str) -> list:
    """Two active catalog books: Grade 5 Maths at 100.00 and Grade 5 Science at 250.00."""
    created = []
    for name, price in (("Grade 5 Maths", "100.00"), ("Grade 5 Science", "250.00")):
        resp = await async_client.post(f"{api_base}/books", json={"name": name, "defaultPrice": price})
        assert resp.status_code == 200, resp.text
        created.append(resp.json()["data"])
    return created


@pytest.fixture
async def bill(async_client: AsyncClient, api_base: str, teacher: dict, books: list) -> dict:
    """Bill 1001 for 25 x 100.00 = 2500.00, nothing paid yet."""
    resp = await async_client.post(
        f"{api_base}/bills",
        json={
            "billNumber": "1001",
            "date": "2026-10-01",
            "teacherId": teacher["id"],
            "bookEntries": [
                {"bookId": books[0]["id"], "price": "100.00", "quantity": 25, "freeIssue": 2},
            ],
        },
    )
    assert resp.status_code == 200, resp.text
    return resp.json()["data"]
