"""
Pytest fixtures for test database, client, and authentication.

Tables are created before and dropped after every test. The database defaults
to a SQLite file so the suite runs without services; point TEST_DATABASE_URL
at PostgreSQL to exercise the row locks and ON CONFLICT path for real.
"""

import os

TEST_DATABASE_URL = os.environ.setdefault("TEST_DATABASE_URL", "sqlite+aiosqlite:///./fastbreak_test.db")
os.environ.setdefault("DATABASE_URL", TEST_DATABASE_URL)
os.environ.setdefault("REDIS_ENABLED", "false")

from datetime import datetime, timezone, timedelta
from typing import AsyncGenerator

import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from fastbreak.main import app
from fastbreak.db.base import Base
from fastbreak.db.session import build_engine, get_db
from fastbreak.core.security import Caller, create_access_token, hash_password
from fastbreak.models.user import User
from fastbreak.schemas.event import EventInput

test_engine = build_engine(TEST_DATABASE_URL)
TestSessionLocal = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


def event_input(**overrides) -> EventInput:
    """A valid create/update payload; override any field by name."""
    values = {
        "event_name": "Lakers vs Celtics",
        "sport_type": "Basketball",
        "date_time": datetime(2026, 12, 1, 19, 30, tzinfo=timezone.utc),
        "description": "Season opener at home",
        "venues": ["Crypto Arena"],
    }
    values.update(overrides)
    return EventInput(**values)


@pytest_asyncio.fixture
async def make_input():
    return event_input


@pytest_asyncio.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create tables, yield session, then drop tables for isolation."""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with TestSessionLocal() as session:
        yield session

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest_asyncio.fixture
async def session_factory(db_session: AsyncSession) -> async_sessionmaker:
    """Factory for fresh sessions, one per unit of work, on the test schema."""
    return TestSessionLocal


@pytest_asyncio.fixture(scope="function")
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client whose requests each get their own session on the test database."""

    async def override_get_db():
        async with TestSessionLocal() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


async def _make_user(db: AsyncSession, email: str, username: str) -> Caller:
    user = User(email=email, username=username, hashed_password=hash_password("testpassword123"))
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return Caller(id=user.id, email=user.email)


@pytest_asyncio.fixture
async def test_user(db_session: AsyncSession) -> Caller:
    """The signed-in user, as the caller actions receive."""
    return await _make_user(db_session, "test@example.com", "testuser")


@pytest_asyncio.fixture
async def other_user(db_session: AsyncSession) -> Caller:
    return await _make_user(db_session, "other@example.com", "otheruser")


def _token_for(caller: Caller) -> str:
    return create_access_token(data={"sub": str(caller.id), "email": caller.email})


@pytest_asyncio.fixture
async def auth_token(test_user: Caller) -> str:
    return _token_for(test_user)


@pytest_asyncio.fixture
async def auth_headers(auth_token: str) -> dict:
    """Authorization headers with Bearer token."""
    return {"Authorization": f"Bearer {auth_token}"}


@pytest_asyncio.fixture
async def other_auth_headers(other_user: Caller) -> dict:
    return {"Authorization": f"Bearer {_token_for(other_user)}"}


@pytest_asyncio.fixture
async def expired_token(test_user: Caller) -> str:
    return create_access_token(
        data={"sub": str(test_user.id), "email": test_user.email},
        expires_delta=timedelta(minutes=-5),
    )
