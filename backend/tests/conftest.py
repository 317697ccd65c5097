"""
SocialNet Backend — Test Configuration (conftest.py)
======================================================

Fixture Hierarchy (all function-scoped):
    ├── mock_db_session: AsyncMock standing in for AsyncSession (service tests)
    ├── make_user / make_post: ORM-like row objects for mocked repositories
    ├── db_engine: fresh SQLite file database with every table created
    ├── session_factory: sessions bound to db_engine
    ├── test_client: httpx AsyncClient on a fresh app whose get_db_session
    │                dependency is pointed at db_engine
    └── register_user: registers + logs in an account, returns its token/id
"""

import os

# Settings are read at import time; these must be set before socialnet loads
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["JWT_SECRET"] = "test-secret-not-for-production-use-only"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["RATE_LIMIT_REQUESTS"] = "10000"

from datetime import datetime, timezone
from types import SimpleNamespace
from typing import Any, Dict
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from socialnet.database import create_tables, enable_sqlite_foreign_keys, get_db_session


# ══════════════════════════════════════════════════════════════════════════
# Service-level fixtures (no database)
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    """
    Mock AsyncSession. Service tests patch the repository classes, so the
    session itself is only passed through.
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def make_user():
    def _make(**overrides: Any) -> SimpleNamespace:
        now = datetime.now(timezone.utc)
        fields: Dict[str, Any] = {
            "id": 1,
            "username": "alice",
            "email": "alice@example.com",
            "password_hash": "hashed",
            "age": 30,
            "city": "Taipei",
            "created_at": now,
            "updated_at": now,
        }
        fields.update(overrides)
        return SimpleNamespace(**fields)

    return _make


@pytest.fixture
def make_post(make_user):
    def _make(**overrides: Any) -> SimpleNamespace:
        now = datetime.now(timezone.utc)
        fields: Dict[str, Any] = {
            "id": 10,
            "user_id": 1,
            "content": "hello world",
            "created_at": now,
            "updated_at": now,
            "author": make_user(),
            "comments": [],
        }
        fields.update(overrides)
        return SimpleNamespace(**fields)

    return _make


# ══════════════════════════════════════════════════════════════════════════
# Database-backed fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def db_engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    enable_sqlite_foreign_keys(engine)
    await create_tables(engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def test_client(session_factory):
    """
    HTTPX AsyncClient talking to a fresh app instance (fresh rate limiter)
    backed by the per-test database.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
    """
    from socialnet.main import create_app

    app = create_app()

    async def override_get_db_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_get_db_session

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def register_user(test_client):
    """Registers and logs in an account; returns {"id", "token", "headers"}."""

    async def _register(
        username: str = "alice",
        email: str = "alice@example.com",
        password: str = "secret123",
        **extra: Any,
    ) -> Dict[str, Any]:
        body = {"username": username, "email": email, "password": password, **extra}
        response = await test_client.post("/users/register", json=body)
        assert response.status_code == 201, response.text

        response = await test_client.post(
            "/users/login", json={"email": email, "password": password}
        )
        assert response.status_code == 200, response.text
        data = response.json()["data"]
        return {
            "id": data["user"]["id"],
            "token": data["token"],
            "headers": {"Authorization": f"Bearer {data['token']}"},
        }

    return _register
