"""
Event server actions.
"""

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from fastbreak.actions.base import run_action
from fastbreak.core.security import Caller
from fastbreak.schemas.event import EventInput, EventRead, SportRead
from fastbreak.schemas.result import ActionResult
from fastbreak.services import catalog_service, event_service
from fastbreak.services.cache_service import get_cached_events, set_cached_events


async def get_events(
    db: AsyncSession,
    search: Optional[str] = None,
    sport_type: Optional[str] = None,
) -> ActionResult:
    """Dashboard listing, served from the cache when possible."""

    async def operation() -> list[EventRead]:
        cached = await get_cached_events(search, sport_type)
        if cached is not None:
            return [EventRead.model_validate(event) for event in cached]

        events = await event_service.list_events(db, search=search, sport_type=sport_type)
        await set_cached_events(search, sport_type, [event.model_dump(mode="json") for event in events])
        return events

    return await run_action(
        "get_events",
        db,
        operation,
        failure_message="Failed to fetch events",
        search=search,
        sport_type=sport_type,
    )


async def get_event_by_id(db: AsyncSession, event_id: int) -> ActionResult:
    return await run_action(
        "get_event_by_id",
        db,
        lambda: event_service.get_event(db, event_id),
        failure_message="Failed to fetch event",
        event_id=event_id,
    )


async def create_event(db: AsyncSession, caller: Optional[Caller], data: EventInput) -> ActionResult:
    return await run_action(
        "create_event",
        db,
        lambda: event_service.create_event(db, caller, data),
        failure_message="Failed to create event",
        writes=True,
        user_id=caller.id if caller else None,
    )


async def update_event(
    db: AsyncSession,
    caller: Optional[Caller],
    event_id: int,
    data: EventInput,
) -> ActionResult:
    return await run_action(
        "update_event",
        db,
        lambda: event_service.update_event(db, caller, event_id, data),
        failure_message="Failed to update event",
        writes=True,
        event_id=event_id,
        user_id=caller.id if caller else None,
    )


async def delete_event(db: AsyncSession, caller: Optional[Caller], event_id: int) -> ActionResult:
    return await run_action(
        "delete_event",
        db,
        lambda: event_service.delete_event(db, caller, event_id),
        failure_message="Failed to delete event",
        writes=True,
        event_id=event_id,
        user_id=caller.id if caller else None,
    )


async def get_sports(db: AsyncSession) -> ActionResult:
    async def operation() -> list[SportRead]:
        sports = await catalog_service.list_sports(db)
        return [SportRead.model_validate(sport) for sport in sports]

    return await run_action("get_sports", db, operation, failure_message="Failed to fetch sports")
