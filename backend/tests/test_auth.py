"""
Tests for authentication endpoints: registration, login, logout and caller lookup.
"""

import pytest
from httpx import AsyncClient
from sqlalchemy import func, select

from fastbreak.actions.auth import log_in, register
from fastbreak.core import security
from fastbreak.core.exceptions import ErrorCode
from fastbreak.models.user import User
from fastbreak.schemas.user import UserCreate, UserLogin


@pytest.mark.asyncio
async def test_register_user(client: AsyncClient):
    """Successful registration returns user data."""
    response = await client.post("/api/v1/auth/register", json={
        "email": "new@example.com",
        "username": "newuser",
        "password": "securepassword123",
    })
    assert response.status_code == 201
    data = response.json()["data"]
    assert data["email"] == "new@example.com"
    assert data["username"] == "newuser"
    assert "hashed_password" not in data


@pytest.mark.asyncio
async def test_register_duplicate_email(client: AsyncClient, test_user):
    response = await client.post("/api/v1/auth/register", json={
        "email": "test@example.com",
        "username": "different",
        "password": "securepassword123",
    })
    assert response.status_code == 409
    assert response.json() == {"success": False, "error": "Email already registered", "code": "CONFLICT"}


@pytest.mark.asyncio
async def test_register_weak_password(client: AsyncClient):
    """Password under 8 chars returns 422."""
    response = await client.post("/api/v1/auth/register", json={
        "email": "weak@example.com",
        "username": "weakuser",
        "password": "short",
    })
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_login_success(client: AsyncClient, test_user):
    response = await client.post("/api/v1/auth/login", json={
        "email": "test@example.com",
        "password": "testpassword123",
    })
    assert response.status_code == 200
    data = response.json()["data"]
    assert "access_token" in data
    assert data["token_type"] == "bearer"


@pytest.mark.asyncio
async def test_login_wrong_password(client: AsyncClient, test_user):
    response = await client.post("/api/v1/auth/login", json={
        "email": "test@example.com",
        "password": "wrongpassword",
    })
    assert response.status_code == 401
    assert response.json()["error"] == "Invalid email or password"


@pytest.mark.asyncio
async def test_me_returns_caller(client: AsyncClient, test_user, auth_headers):
    response = await client.get("/api/v1/auth/me", headers=auth_headers)
    assert response.status_code == 200
    assert response.json() == {"id": test_user.id, "email": "test@example.com"}


@pytest.mark.asyncio
async def test_me_rejects_expired_token(client: AsyncClient, expired_token):
    response = await client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {expired_token}"})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_me_accepts_session_cookie(client: AsyncClient, test_user, auth_token):
    client.cookies.set("access_token", auth_token)
    response = await client.get("/api/v1/auth/me")
    assert response.status_code == 200
    assert response.json()["id"] == test_user.id


@pytest.mark.asyncio
async def test_logout_without_token(client: AsyncClient):
    response = await client.post("/api/v1/auth/logout")
    assert response.status_code == 401
    assert response.json() == {
        "success": False,
        "error": "You are not logged in",
        "code": "AUTHENTICATION_REQUIRED",
    }


@pytest.mark.asyncio
async def test_logout_without_redis_cannot_revoke(client: AsyncClient, auth_headers):
    """With the cache disabled the token is not revoked, but logout still succeeds."""
    response = await client.post("/api/v1/auth/logout", headers=auth_headers)
    assert response.status_code == 200
    assert response.json() == {"success": True, "data": {"revoked": False}}


@pytest.mark.asyncio
async def test_revoked_token_is_rejected(client: AsyncClient, auth_headers, monkeypatch):
    async def always_revoked(token_id: str) -> bool:
        return True

    monkeypatch.setattr(security, "is_token_revoked", always_revoked)
    response = await client.get("/api/v1/auth/me", headers=auth_headers)
    assert response.status_code == 401


def test_token_round_trip_carries_identity():
    token = security.create_access_token({"sub": "42", "email": "fan@example.com"})
    caller = security.decode_access_token(token)
    assert caller.id == 42
    assert caller.email == "fan@example.com"
    assert caller.token_id
    assert caller.expires_at is not None


def test_garbage_token_decodes_to_none():
    assert security.decode_access_token("not-a-jwt") is None


@pytest.mark.asyncio
async def test_register_duplicate_username_action(session_factory, test_user):
    async with session_factory() as db:
        result = await register(
            db, UserCreate(email="fresh@example.com", username="testuser", password="securepassword123")
        )

    assert result.success is False
    assert result.code == ErrorCode.CONFLICT
    assert result.status_code == 409
    assert result.error == "Username already taken"


@pytest.mark.asyncio
async def test_register_race_loser_gets_conflict(session_factory, db_session):
    """A registration that slips past the duplicate check is stopped by the unique index."""
    async with session_factory() as db:
        # Pending row the pre-check cannot see, as if another request inserted it meanwhile
        db.add(User(email="race@example.com", username="winner", hashed_password="x"))
        result = await register(
            db, UserCreate(email="race@example.com", username="loser", password="securepassword123")
        )

    assert result.success is False
    assert result.code == ErrorCode.CONFLICT
    assert result.error == "Email or username already registered"

    async with session_factory() as db:
        assert (await db.execute(select(func.count()).select_from(User))).scalar_one() == 0


@pytest.mark.asyncio
async def test_log_in_action(session_factory, test_user):
    async with session_factory() as db:
        ok = await log_in(db, UserLogin(email="test@example.com", password="testpassword123"))
        bad = await log_in(db, UserLogin(email="test@example.com", password="nope-nope"))

    assert security.decode_access_token(ok.data.access_token).id == test_user.id
    assert bad.code == ErrorCode.AUTHENTICATION_REQUIRED
    assert bad.status_code == 401
