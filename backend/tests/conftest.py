"""Pytest configuration and shared fixtures for the API tests.

Every test gets its own SQLite database file; the app's session dependency
is overridden to point at it, so the real application database is never
touched.
"""

import asyncio
import os
from datetime import datetime

import pytest

os.environ["JWT_SECRET"] = "test-secret"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"

from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import NullPool  # noqa: E402

import app.models  # noqa: E402,F401  registers tables on Base.metadata
from app.core.database import Base, get_async_session  # noqa: E402
from main import app as fastapi_app  # noqa: E402


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture
def db_engine(tmp_path):
    """Isolated SQLite database with all tables created.

    NullPool keeps connections from outliving the event loop that opened
    them; TestClient runs each request on a fresh loop.
    """
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", poolclass=NullPool)

    async def _create_all():
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    asyncio.run(_create_all())
    yield engine
    asyncio.run(engine.dispose())


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
def client(session_factory):
    """TestClient wired to the per-test database."""

    async def _override_session():
        async with session_factory() as session:
            yield session

    fastapi_app.dependency_overrides[get_async_session] = _override_session
    try:
        yield TestClient(fastapi_app)
    finally:
        fastapi_app.dependency_overrides.clear()


# =============================================================================
# Helpers
# =============================================================================


def register(client, email="alice@example.com", password="secret123", first_name="Alice", last_name="Smith"):
    response = client.post(
        "/api/auth/register",
        json={"email": email, "password": password, "firstName": first_name, "lastName": last_name},
    )
    assert response.status_code == 200, response.text
    return response.json()


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def today_iso() -> str:
    return datetime.utcnow().date().isoformat()


@pytest.fixture
def alice(client):
    """Registered user; returns auth headers."""
    return bearer(register(client)["token"])


@pytest.fixture
def bob(client):
    return bearer(register(client, email="bob@example.com", first_name="Bob", last_name="Jones")["token"])
