"""
Unit-of-work wrapper shared by all server actions.
"""

import time
from typing import Any, Awaitable, Callable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from fastbreak.core.exceptions import ActionError, BackendFailure
from fastbreak.core.logging import get_logger
from fastbreak.core.metrics import record_action
from fastbreak.schemas.result import ActionResult
from fastbreak.services.cache_service import invalidate_event_cache

logger = get_logger(__name__)


async def run_action(
    name: str,
    db: Optional[AsyncSession],
    operation: Callable[[], Awaitable[Any]],
    *,
    failure_message: str = "An unexpected error occurred",
    writes: bool = False,
    invalidate_cache: bool = True,
    **log_context: Any,
) -> ActionResult:
    """
    Run `operation` and wrap its outcome in an ActionResult.

    Writing actions commit on success and, unless told otherwise, invalidate
    the dashboard cache.
    Any failure rolls the whole unit back, so a late error never leaves
    half-written sport, venue or event rows behind.
    """
    start = time.perf_counter()
    try:
        data = await operation()
        if writes and db is not None:
            await db.commit()
    except ActionError as e:
        await _rollback(db)
        record_action(name, e.code.value, time.perf_counter() - start)
        logger.info("action_rejected", action=name, code=e.code.value, error=e.message, **log_context)
        return ActionResult.fail(e)
    except SQLAlchemyError:
        await _rollback(db)
        record_action(name, BackendFailure.code.value, time.perf_counter() - start)
        logger.exception("action_backend_error", action=name, **log_context)
        return ActionResult.fail(BackendFailure(failure_message))
    except Exception:
        await _rollback(db)
        record_action(name, BackendFailure.code.value, time.perf_counter() - start)
        logger.exception("action_unexpected_error", action=name, **log_context)
        return ActionResult.fail(BackendFailure())

    if writes and invalidate_cache:
        await invalidate_event_cache()

    record_action(name, "success", time.perf_counter() - start)
    return ActionResult.ok(data)


async def _rollback(db: Optional[AsyncSession]) -> None:
    if db is None:
        return
    try:
        await db.rollback()
    except SQLAlchemyError:
        logger.exception("action_rollback_failed")
