"""
Session server actions: register, log in, sign out.
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from fastbreak.actions.base import run_action
from fastbreak.core.exceptions import AuthenticationRequired
from fastbreak.core.logging import get_logger
from fastbreak.core.security import Caller
from fastbreak.schemas.result import ActionResult
from fastbreak.schemas.user import Token, UserCreate, UserLogin, UserResponse
from fastbreak.services import auth_service
from fastbreak.services.cache_service import revoke_token

logger = get_logger(__name__)


async def register(db: AsyncSession, data: UserCreate) -> ActionResult:
    async def operation() -> UserResponse:
        user = await auth_service.register_user(db, data)
        return UserResponse.model_validate(user)

    return await run_action(
        "register",
        db,
        operation,
        failure_message="Failed to register",
        writes=True,
        invalidate_cache=False,
    )


async def log_in(db: AsyncSession, data: UserLogin) -> ActionResult:
    async def operation() -> Token:
        return Token(access_token=await auth_service.authenticate_user(db, data))

    return await run_action("log_in", db, operation, failure_message="Failed to log in")


async def sign_out(caller: Optional[Caller]) -> ActionResult:
    """
    Revoke the caller's token until it expires.
    Without Redis the token stays valid until expiry; clients drop it either way.
    """

    async def operation() -> dict:
        if caller is None:
            raise AuthenticationRequired("You are not logged in")

        revoked = False
        if caller.token_id and caller.expires_at:
            ttl = int((caller.expires_at - datetime.now(timezone.utc)).total_seconds())
            revoked = await revoke_token(caller.token_id, ttl)
        if not revoked:
            logger.warning("token_not_revoked", user_id=caller.id)

        logger.info("user_signed_out", user_id=caller.id)
        return {"revoked": revoked}

    return await run_action("sign_out", None, operation)
