"""
Authentication endpoints: register, login, logout and the current caller.
"""

from typing import Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from fastbreak.actions.auth import log_in, register, sign_out
from fastbreak.api.responses import respond
from fastbreak.core.security import Caller, get_current_caller, get_optional_caller
from fastbreak.db.session import get_db
from fastbreak.schemas.result import ActionResult
from fastbreak.schemas.user import CallerResponse, UserCreate, UserResponse, UserLogin, Token

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/register", response_model=ActionResult[UserResponse], status_code=status.HTTP_201_CREATED)
async def register_endpoint(user_data: UserCreate, db: AsyncSession = Depends(get_db)):
    """Register a new user account. A taken email or username is a 409."""
    return respond(await register(db, user_data), success_status=status.HTTP_201_CREATED)


@router.post("/login", response_model=ActionResult[Token])
async def login_endpoint(login_data: UserLogin, db: AsyncSession = Depends(get_db)):
    """Authenticate and receive a JWT access token."""
    return respond(await log_in(db, login_data))


@router.post("/logout", response_model=ActionResult[dict])
async def logout_endpoint(caller: Optional[Caller] = Depends(get_optional_caller)):
    """Revoke the presented token."""
    return respond(await sign_out(caller))


@router.get("/me", response_model=CallerResponse)
async def me(caller: Caller = Depends(get_current_caller)):
    return CallerResponse(id=caller.id, email=caller.email)
