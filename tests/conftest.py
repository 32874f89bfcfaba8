"""Pytest configuration and fixtures."""

import os

os.environ.setdefault("ENV", "test")

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import StaticPool
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from mentor_booking.db.base import Base
from mentor_booking.db.session import build_engine, get_db
from mentor_booking.main import app
from mentor_booking.models.directory import Mentor, Student
from mentor_booking.services.directory import DirectoryStore

# Use SQLite for testing (simpler than spinning up postgres)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


def make_sessionmaker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest.fixture(scope="function")
async def async_engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create async test database engine."""
    engine = build_engine(TEST_DATABASE_URL, echo=False, poolclass=StaticPool)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture(scope="function")
async def async_session(async_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Create async database session for tests."""
    async with make_sessionmaker(async_engine)() as session:
        yield session


@pytest.fixture(scope="function")
async def file_engine(tmp_path: Path) -> AsyncGenerator[AsyncEngine, None]:
    """File-backed SQLite engine with a real connection pool.

    Unlike the in-memory engine, each session gets its own connection, so
    concurrent bookings really compete for the database lock.
    """
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'ledger.db'}", echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture(scope="function")
async def client(async_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create API test client with overridden dependencies."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield async_session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
async def biology_mentor(async_session: AsyncSession) -> Mentor:
    """Non-premium mentor with biology expertise."""
    return await DirectoryStore(async_session).create_mentor(
        name="Rosalind Franklin",
        expertise=["biology"],
        premium=False,
    )


@pytest.fixture
async def science_mentor(async_session: AsyncSession) -> Mentor:
    """Premium mentor with math and physics expertise."""
    return await DirectoryStore(async_session).create_mentor(
        name="Emmy Noether",
        expertise=["math", "physics"],
        premium=True,
    )


@pytest.fixture
async def biology_student(async_session: AsyncSession) -> Student:
    """Student interested in biology."""
    return await DirectoryStore(async_session).create_student(
        name="Sam Patel",
        area_of_interest="biology",
    )


@pytest.fixture
async def art_student(async_session: AsyncSession) -> Student:
    """Student interested in art."""
    return await DirectoryStore(async_session).create_student(
        name="Alex Kim",
        area_of_interest="art",
    )
