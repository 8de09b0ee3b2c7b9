"""
Pytest configuration and fixtures.

This file is automatically discovered by pytest and provides
shared fixtures for all test modules.

Two backends are available:
- ``database`` / ``db_session``: the real SQLAlchemy store on in-memory SQLite
- ``fake_store``: an in-memory ContentStore that also counts writes

References:
-----------
- Pytest Fixtures: https://docs.pytest.org/en/stable/fixture.html
- FastAPI Testing: https://fastapi.tiangolo.com/advanced/async-tests/
"""

from datetime import datetime, timedelta, timezone
from typing import Any, AsyncGenerator, Dict, List, Mapping, Optional

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from notecards.api.deps import get_content_store
from notecards.core.access import PublicModePolicy
from notecards.core.config import Settings
from notecards.core.exceptions import ContentNotFoundError
from notecards.db.base import new_id, utcnow
from notecards.db.session import Database
from notecards.main import create_app
from notecards.models.content import ContentItem

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

T0 = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)


# ================================
# In-memory store
# ================================

class FakeContentStore:
    """
    ContentStore kept in a dict.

    ``writes`` counts every create/update/delete that reached the store, so
    tests can assert that a rejected call never touched it.
    """

    def __init__(self) -> None:
        self.items: Dict[str, ContentItem] = {}
        self.writes = 0
        self._clock = T0

    def _tick(self) -> datetime:
        # Strictly increasing so newest-first ordering is deterministic
        self._clock += timedelta(seconds=1)
        return self._clock

    def seed(self, **fields: Any) -> ContentItem:
        fields.setdefault("note", "")
        created_at = fields.pop("created_at", None) or self._tick()
        item = ContentItem(id=new_id(), created_at=created_at, updated_at=created_at, **fields)
        self.items[item.id] = item
        return item

    @staticmethod
    def _newest_first(items: List[ContentItem]) -> List[ContentItem]:
        return sorted(items, key=lambda item: item.created_at, reverse=True)

    async def list_all(self) -> List[ContentItem]:
        return self._newest_first(list(self.items.values()))

    async def get(self, content_id: str) -> Optional[ContentItem]:
        return self.items.get(content_id)

    async def list_by_type(self, content_type: str) -> List[ContentItem]:
        return self._newest_first([i for i in self.items.values() if i.type == content_type])

    async def create(self, fields: Mapping[str, Any]) -> ContentItem:
        self.writes += 1
        return self.seed(**dict(fields))

    async def update(self, content_id: str, changes: Mapping[str, Any]) -> ContentItem:
        self.writes += 1
        item = self.items.get(content_id)
        if item is None:
            raise ContentNotFoundError(content_id)
        for field, value in changes.items():
            setattr(item, field, value)
        if changes:
            item.updated_at = utcnow()
        return item

    async def delete(self, content_id: str) -> None:
        self.writes += 1
        if self.items.pop(content_id, None) is None:
            raise ContentNotFoundError(content_id)


# ================================
# Settings / Database Fixtures
# ================================

@pytest.fixture
def test_settings() -> Settings:
    """Settings for an editable deployment on in-memory SQLite."""
    return Settings(
        _env_file=None,
        APP_ENV="development",
        DEBUG=True,
        DATABASE_URL=TEST_DATABASE_URL,
        PUBLIC_MODE=False,
        LOG_FORMAT="text",
    )


@pytest_asyncio.fixture
async def database(test_settings: Settings) -> AsyncGenerator[Database, None]:
    """
    Fresh in-memory database per test.

    StaticPool (picked by get_engine_config for ``:memory:``) makes every
    session share one connection, so they all see the same tables.
    """
    db = Database.from_settings(test_settings)
    await db.create_all()

    yield db

    await db.dispose()


@pytest_asyncio.fixture
async def db_session(database: Database) -> AsyncGenerator[AsyncSession, None]:
    async with database.session_factory() as session:
        yield session


@pytest.fixture
def fake_store() -> FakeContentStore:
    return FakeContentStore()


# ================================
# FastAPI Fixtures
# ================================

@pytest.fixture
def app(test_settings: Settings, database: Database) -> FastAPI:
    """Editable application backed by the SQLite database."""
    return create_app(
        config=test_settings,
        database=database,
        policy=PublicModePolicy(False),
    )


@pytest.fixture
def public_app(test_settings: Settings, database: Database) -> FastAPI:
    """Read-only (public mode) application on the same database."""
    return create_app(
        config=test_settings,
        database=database,
        policy=PublicModePolicy(True),
    )


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """
    Create an async HTTP client for testing FastAPI endpoints.

    Usage:
        async def test_something(client: AsyncClient):
            response = await client.get("/api/v1/content")
            assert response.status_code == 200
    """
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def public_client(public_app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(transport=ASGITransport(app=public_app), base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def fake_store_client(
    app: FastAPI,
    fake_store: FakeContentStore,
) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client whose routes run against ``fake_store`` instead of SQLite."""
    app.dependency_overrides[get_content_store] = lambda: fake_store

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# ================================
# Data Fixtures
# ================================

@pytest.fixture
def youtube_draft() -> dict[str, Any]:
    return {
        "type": "youtube",
        "url": "https://www.youtube.com/watch?v=dQw4w9WgXcQ",
        "title": "Never Gonna Give You Up",
        "note": "classic",
        "author": "Rick Astley",
        "duration": "3:33",
    }


@pytest.fixture
def article_draft() -> dict[str, Any]:
    return {
        "type": "article",
        "url": "https://example.com/posts/foo",
        "title": "Foo",
        "note": "",
    }
