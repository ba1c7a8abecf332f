"""
Event endpoints. Each endpoint forwards to a server action and returns its
ActionResult, with the HTTP status taken from the result's error code.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from fastbreak.actions import events as actions
from fastbreak.core.security import Caller, get_optional_caller
from fastbreak.db.session import get_db
from fastbreak.schemas.event import EventInput, EventRead
from fastbreak.schemas.result import ActionResult
from fastbreak.api.responses import respond

router = APIRouter(prefix="/events", tags=["Events"])


@router.get("/", response_model=ActionResult[list[EventRead]])
async def list_events_endpoint(
    search: Optional[str] = Query(None, max_length=255),
    sport_type: Optional[str] = Query(None, max_length=100),
    db: AsyncSession = Depends(get_db),
):
    """
    List events newest first, filtered by name substring and sport.
    Results are cached in Redis and invalidated on every event write.
    """
    return respond(await actions.get_events(db, search=search, sport_type=sport_type))


@router.post("/", response_model=ActionResult[EventRead], status_code=status.HTTP_201_CREATED)
async def create_event_endpoint(
    event_data: EventInput,
    caller: Optional[Caller] = Depends(get_optional_caller),
    db: AsyncSession = Depends(get_db),
):
    """Create a new event owned by the caller. Requires authentication."""
    result = await actions.create_event(db, caller, event_data)
    return respond(result, success_status=status.HTTP_201_CREATED)


@router.get("/{event_id}", response_model=ActionResult[EventRead])
async def get_event_endpoint(event_id: int, db: AsyncSession = Depends(get_db)):
    """Get a single event with its sport and venues."""
    return respond(await actions.get_event_by_id(db, event_id))


@router.put("/{event_id}", response_model=ActionResult[EventRead])
async def update_event_endpoint(
    event_id: int,
    event_data: EventInput,
    caller: Optional[Caller] = Depends(get_optional_caller),
    db: AsyncSession = Depends(get_db),
):
    """Replace an event. Only its creator may do this."""
    return respond(await actions.update_event(db, caller, event_id, event_data))


@router.delete("/{event_id}", response_model=ActionResult[None])
async def delete_event_endpoint(
    event_id: int,
    caller: Optional[Caller] = Depends(get_optional_caller),
    db: AsyncSession = Depends(get_db),
):
    """Delete an event. Only its creator may do this."""
    return respond(await actions.delete_event(db, caller, event_id))
