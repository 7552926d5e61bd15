import random
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from dexkeep.api.scanner import provide_card_identifier
from dexkeep.config import settings
from dexkeep.db.database import get_session
from dexkeep.main import app
from dexkeep.models.db import Base
from dexkeep.services import in_flight as in_flight_module
from dexkeep.services.catalog import get_identification_catalog
from dexkeep.services.identification import StubCardIdentifier


@pytest.fixture(autouse=True)
def reset_in_flight_guard():
    """Give every test a fresh in-flight guard."""
    in_flight_module.reset_in_flight_guard()
    yield
    in_flight_module.reset_in_flight_guard()


@pytest.fixture(autouse=True)
def no_simulated_latency(monkeypatch: pytest.MonkeyPatch):
    """Skip the simulated AI processing delays."""
    monkeypatch.setattr(settings, "identification_latency_seconds", 0.0)
    monkeypatch.setattr(settings, "suggestion_latency_seconds", 0.0)


async def _create_engine(url: str) -> AsyncEngine:
    engine = create_async_engine(url, echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    return engine


@pytest.fixture
async def async_engine():
    """Create an in-memory SQLite engine for testing."""
    engine = await _create_engine("sqlite+aiosqlite:///:memory:")
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def file_engine(tmp_path):
    """SQLite file engine, for tests that need one connection per session."""
    engine = await _create_engine(f"sqlite+aiosqlite:///{tmp_path / 'dexkeep.db'}")
    yield engine
    await engine.dispose()


@pytest.fixture
async def session(async_engine) -> AsyncSession:
    """Provide a database session for tests."""
    async_session = async_sessionmaker(async_engine, class_=AsyncSession, expire_on_commit=False)
    async with async_session() as session:
        yield session


@pytest.fixture
def stub_identifier() -> StubCardIdentifier:
    """Stub identifier with no delay and a fixed seed."""
    return StubCardIdentifier(
        get_identification_catalog(), latency_seconds=0, rng=random.Random(7)
    )


@asynccontextmanager
async def _test_client(
    engine: AsyncEngine, identifier: StubCardIdentifier
) -> AsyncIterator[AsyncClient]:
    async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async def override_get_session():
        async with async_session() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[provide_card_identifier] = lambda: identifier

    transport = ASGITransport(app=app)
    try:
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
async def client(async_engine, stub_identifier: StubCardIdentifier):
    """Provide an async test client with overridden database session and identifier."""
    async with _test_client(async_engine, stub_identifier) as client:
        yield client


@pytest.fixture
async def file_client(file_engine, stub_identifier: StubCardIdentifier):
    """Test client backed by a SQLite file, so concurrent requests use separate connections."""
    async with _test_client(file_engine, stub_identifier) as client:
        yield client
