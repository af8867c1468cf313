"""
Catalog API — Test Configuration (conftest.py)
================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── mock_db_session: Mock AsyncSession for service-level tests
    ├── db_engine:       Fresh in-memory SQLite database with all tables
    ├── db_session:      Session on db_engine, for seeding and assertions
    ├── test_client:     HTTPX AsyncClient wired to the app, with
    │                    get_db_session overridden to use db_engine
    └── make_product:    Factory for Product rows with sensible defaults
"""

import os

# Override settings BEFORE any catalog_api import reads them
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["LOG_LEVEL"] = "WARNING"

from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from catalog_api.database import Base, get_db_session
from catalog_api.models import Product


@pytest.fixture
def mock_db_session():
    """
    A mock AsyncSession; no database needed.

    Service tests patch ProductRepository, so the session is only passed
    through and never queried.
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest_asyncio.fixture
async def db_engine():
    """
    In-memory SQLite with the full schema.

    StaticPool keeps one connection alive, so every session in the test
    sees the same database.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_engine) -> AsyncGenerator[AsyncSession, None]:
    factory = async_sessionmaker(db_engine, expire_on_commit=False)
    async with factory() as session:
        yield session


@pytest_asyncio.fixture
async def test_client(db_engine):
    """
    HTTPX AsyncClient talking to the app through ASGITransport.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    from catalog_api.main import app

    factory = async_sessionmaker(db_engine, expire_on_commit=False)

    async def override_get_db_session():
        async with factory() as session:
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
    app.dependency_overrides.clear()


@pytest.fixture
def make_product():
    """
    Build (unsaved) Product rows.

    Each call gets a creation time one minute after the previous one, so
    newest-first ordering is predictable.
    """
    base_time = datetime(2024, 1, 1, tzinfo=timezone.utc)
    counter = {"n": 0}

    def factory(**overrides) -> Product:
        counter["n"] += 1
        n = counter["n"]
        created = base_time + timedelta(minutes=n)
        fields = {
            "name": f"Product {n}",
            "description": f"Description of product {n}",
            "price": 10.0 * n,
            "category": "electronics",
            "brand": "acme",
            "stock": 5,
            "is_active": True,
            "is_featured": False,
            "created_at": created,
            "updated_at": created,
        }
        fields.update(overrides)
        return Product(**fields)

    return factory
