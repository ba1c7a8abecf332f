"""
Account registration and credential checks.

Like the other services this raises ActionError subclasses and only flushes;
the action layer commits and turns errors into results.
"""

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from fastbreak.core.exceptions import AuthenticationRequired, Conflict, PermissionDenied
from fastbreak.core.logging import get_logger
from fastbreak.core.security import create_access_token, hash_password, verify_password
from fastbreak.models.user import User
from fastbreak.schemas.user import UserCreate, UserLogin

logger = get_logger(__name__)


async def register_user(db: AsyncSession, user_data: UserCreate) -> User:
    """
    Create an account. Email and username are unique; a taken one is a Conflict.
    The unique indexes catch the registration that loses a race past the pre-check.
    """
    taken = await db.execute(
        select(User.email, User.username).where(
            or_(User.email == user_data.email, User.username == user_data.username)
        )
    )
    existing = taken.first()
    if existing is not None:
        if existing.email == user_data.email:
            logger.info("registration_rejected", reason="email_exists")
            raise Conflict("Email already registered")
        logger.info("registration_rejected", reason="username_exists")
        raise Conflict("Username already taken")

    user = User(
        email=user_data.email,
        username=user_data.username,
        hashed_password=hash_password(user_data.password),
    )
    db.add(user)
    try:
        await db.flush()
    except IntegrityError:
        logger.info("registration_rejected", reason="unique_violation")
        raise Conflict("Email or username already registered")
    await db.refresh(user)

    logger.info("user_registered", user_id=user.id)
    return user


async def authenticate_user(db: AsyncSession, login_data: UserLogin) -> str:
    """Check credentials and issue an access token carrying the user's id and email."""
    result = await db.execute(select(User).where(User.email == login_data.email))
    user = result.scalar_one_or_none()

    if user is None or not verify_password(login_data.password, user.hashed_password):
        logger.info("login_rejected")
        raise AuthenticationRequired("Invalid email or password")

    if not user.is_active:
        raise PermissionDenied("Account is deactivated")

    logger.info("user_logged_in", user_id=user.id)
    return create_access_token(data={"sub": str(user.id), "email": user.email})
