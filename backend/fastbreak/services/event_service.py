"""
Event service handling CRUD operations.

Services raise ActionError subclasses; turning them into results is the job
of the action layer. Writes only flush, the action commits.
"""

from collections import defaultdict
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from fastbreak.core.exceptions import AuthenticationRequired, EventNotFound, PermissionDenied, ValidationFailed
from fastbreak.core.logging import get_logger
from fastbreak.core.security import Caller
from fastbreak.models.event import Event, EventVenue
from fastbreak.models.sport import Sport
from fastbreak.models.venue import Venue
from fastbreak.schemas.event import EventInput, EventRead, SportRead, VenueRead
from fastbreak.services.catalog_service import find_sport_id, resolve_sport, resolve_venues

logger = get_logger(__name__)


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    # SQLite hands back naive values; everything is stored in UTC
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _event_query():
    return select(Event, Sport).join(Sport, Sport.id == Event.sport_id)


async def _load_events(db: AsyncSession, query) -> list[EventRead]:
    """
    Run an event query and attach sport and venues.
    Venues for every returned event come from one batch query over the join table.
    """
    rows = (await db.execute(query.execution_options(populate_existing=True))).all()
    if not rows:
        return []

    event_ids = [event.id for event, _ in rows]
    venue_rows = await db.execute(
        select(EventVenue.event_id, Venue.id, Venue.name)
        .join(Venue, Venue.id == EventVenue.venue_id)
        .where(EventVenue.event_id.in_(event_ids))
        .order_by(EventVenue.event_id, EventVenue.position)
    )
    venues_by_event: dict[int, list[VenueRead]] = defaultdict(list)
    for event_id, venue_id, venue_name in venue_rows:
        venues_by_event[event_id].append(VenueRead(id=venue_id, name=venue_name))

    events = []
    for event, sport in rows:
        venues = venues_by_event[event.id]
        events.append(
            EventRead(
                id=event.id,
                name=event.name,
                date_time=_as_utc(event.date_time),
                description=event.description,
                sport_id=event.sport_id,
                sport=SportRead(id=sport.id, name=sport.name),
                venue_ids=[venue.id for venue in venues],
                venues=venues,
                created_by=event.created_by,
                created_at=_as_utc(event.created_at),
                updated_at=_as_utc(event.updated_at),
            )
        )
    return events


def _clean_name(raw: str) -> str:
    name = raw.strip()
    if not name:
        raise ValidationFailed("Event name must not be blank")
    return name


def _require_caller(caller: Optional[Caller], verb: str) -> Caller:
    if caller is None:
        raise AuthenticationRequired(f"You must be logged in to {verb} an event")
    return caller


async def _get_owned_event(db: AsyncSession, caller: Caller, event_id: int, verb: str) -> Event:
    """Load an event for writing and check that the caller created it."""
    result = await db.execute(select(Event).where(Event.id == event_id).with_for_update())
    event = result.scalar_one_or_none()

    if event is None:
        raise EventNotFound(event_id)

    if event.created_by != caller.id:
        logger.warning("event_permission_denied", event_id=event_id, user_id=caller.id, verb=verb)
        raise PermissionDenied(f"You don't have permission to {verb} this event")
    return event


async def _link_venues(db: AsyncSession, event_id: int, venue_ids: list[int]) -> None:
    db.add_all(
        EventVenue(event_id=event_id, venue_id=venue_id, position=position)
        for position, venue_id in enumerate(venue_ids)
    )
    await db.flush()


async def list_events(
    db: AsyncSession,
    search: Optional[str] = None,
    sport_type: Optional[str] = None,
) -> list[EventRead]:
    """
    Events newest first, optionally narrowed by a case-insensitive name
    substring and an exact (case-insensitive) sport name.
    A sport filter naming an unknown sport matches nothing.
    """
    query = _event_query().order_by(Event.date_time.desc(), Event.id.desc())

    if search and search.strip():
        pattern = f"%{_escape_like(search.strip())}%"
        query = query.where(Event.name.ilike(pattern, escape="\\"))

    if sport_type and sport_type.strip():
        sport_id = await find_sport_id(db, sport_type)
        if sport_id is None:
            logger.info("sport_filter_no_match", sport_type=sport_type)
            return []
        query = query.where(Event.sport_id == sport_id)

    return await _load_events(db, query)


async def get_event(db: AsyncSession, event_id: int) -> EventRead:
    """Get a single event by ID."""
    events = await _load_events(db, _event_query().where(Event.id == event_id))
    if not events:
        raise EventNotFound(event_id)
    return events[0]


async def create_event(db: AsyncSession, caller: Optional[Caller], data: EventInput) -> EventRead:
    """Create an event owned by the caller, creating its sport and venues on first use."""
    caller = _require_caller(caller, "create")

    sport_id = await resolve_sport(db, data.sport_type)
    venues = await resolve_venues(db, data.venues)
    venues.raise_for_failures()

    event = Event(
        name=_clean_name(data.event_name),
        date_time=_as_utc(data.date_time),
        description=data.description,
        sport_id=sport_id,
        created_by=caller.id,
    )
    db.add(event)
    await db.flush()
    await _link_venues(db, event.id, venues.venue_ids)

    logger.info(
        "event_created",
        event_id=event.id,
        user_id=caller.id,
        sport_id=sport_id,
        venues=len(venues.venue_ids),
    )
    return await get_event(db, event.id)


async def update_event(
    db: AsyncSession,
    caller: Optional[Caller],
    event_id: int,
    data: EventInput,
) -> EventRead:
    """Replace every mutable field of an event the caller owns."""
    caller = _require_caller(caller, "update")
    event = await _get_owned_event(db, caller, event_id, "edit")

    sport_id = await resolve_sport(db, data.sport_type)
    venues = await resolve_venues(db, data.venues)
    venues.raise_for_failures()

    event.name = _clean_name(data.event_name)
    event.sport_id = sport_id
    event.date_time = _as_utc(data.date_time)
    event.description = data.description
    event.updated_at = datetime.now(timezone.utc)

    await db.execute(delete(EventVenue).where(EventVenue.event_id == event_id))
    await db.flush()
    await _link_venues(db, event_id, venues.venue_ids)

    logger.info("event_updated", event_id=event_id, user_id=caller.id, venues=len(venues.venue_ids))
    return await get_event(db, event_id)


async def delete_event(db: AsyncSession, caller: Optional[Caller], event_id: int) -> None:
    """Delete an event the caller owns."""
    caller = _require_caller(caller, "delete")
    event = await _get_owned_event(db, caller, event_id, "delete")

    await db.execute(delete(EventVenue).where(EventVenue.event_id == event_id))
    await db.delete(event)
    await db.flush()

    logger.info("event_deleted", event_id=event_id, user_id=caller.id)
