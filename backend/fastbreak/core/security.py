"""
Password hashing, JWT access tokens and caller resolution.

The caller is resolved once per request and handed to the server actions
explicitly; actions never reach back into the request for identity.
"""

import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from passlib.context import CryptContext

from fastbreak.core.config import get_settings
from fastbreak.core.logging import get_logger
from fastbreak.services.cache_service import is_token_revoked

logger = get_logger(__name__)
settings = get_settings()

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Caller:
    """Authenticated identity of the user making a request."""

    id: int
    email: str
    token_id: Optional[str] = None
    expires_at: Optional[datetime] = None


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(data: dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode.update({"exp": expire, "jti": uuid.uuid4().hex})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> Optional[Caller]:
    """Return the caller encoded in a token, or None if the token is unusable."""
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError as e:
        logger.info("token_rejected", reason=str(e))
        return None

    subject = payload.get("sub")
    if subject is None:
        return None
    try:
        user_id = int(subject)
    except (TypeError, ValueError):
        return None

    exp = payload.get("exp")
    return Caller(
        id=user_id,
        email=payload.get("email", ""),
        token_id=payload.get("jti"),
        expires_at=datetime.fromtimestamp(exp, tz=timezone.utc) if exp else None,
    )


def _extract_token(request: Request, credentials: Optional[HTTPAuthorizationCredentials]) -> Optional[str]:
    if credentials and credentials.scheme.lower() == "bearer":
        return credentials.credentials
    return request.cookies.get(settings.SESSION_COOKIE_NAME)


async def get_optional_caller(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[Caller]:
    """Resolve the caller from a bearer header or the session cookie, if any."""
    token = _extract_token(request, credentials)
    if not token:
        return None

    caller = decode_access_token(token)
    if caller is None:
        return None

    if caller.token_id and await is_token_revoked(caller.token_id):
        logger.info("token_revoked_rejected", user_id=caller.id)
        return None

    return caller


async def get_current_caller(caller: Optional[Caller] = Depends(get_optional_caller)) -> Caller:
    """Like get_optional_caller but rejects anonymous requests with 401."""
    if caller is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return caller
