"""
Sport and venue catalog: resolve names to rows, creating them on first use.

CONCURRENCY
===========

Two requests creating an event for the same new sport name at the same time
must end up pointing at one sport row. Both names are protected by unique
constraints, and rows are created with INSERT ... ON CONFLICT DO NOTHING
followed by a SELECT, so the loser of the race simply reads the winner's row.

Everything here runs inside the caller's transaction: if the event write
fails afterwards, the freshly created sport and venues roll back with it.
"""

from dataclasses import dataclass, field
from typing import Any, Optional

from sqlalchemy import insert, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from fastbreak.core.config import get_settings
from fastbreak.core.exceptions import ValidationFailed
from fastbreak.core.logging import get_logger
from fastbreak.core.metrics import record_catalog_insert
from fastbreak.models.sport import Sport
from fastbreak.models.venue import Venue, VENUE_NAME_MAX_LENGTH

logger = get_logger(__name__)
settings = get_settings()

SPORT_NAME_MAX_LENGTH = 100


@dataclass(frozen=True)
class VenueFailure:
    name: str
    reason: str


@dataclass
class VenueResolution:
    """Outcome of resolving venue names: ids in input order plus any rejects."""

    venue_ids: list[int] = field(default_factory=list)
    failures: list[VenueFailure] = field(default_factory=list)

    def raise_for_failures(self) -> None:
        if self.failures:
            details = "; ".join(f"{f.name or '(blank)'}: {f.reason}" for f in self.failures)
            raise ValidationFailed(f"Some venues could not be used: {details}")
        if not self.venue_ids:
            raise ValidationFailed("At least one valid venue is required")


async def _insert_ignoring_conflict(db: AsyncSession, model, values: dict[str, Any], column: str) -> bool:
    """Insert a row unless one with the same unique `column` exists. Returns True if inserted."""
    dialect = db.get_bind().dialect.name
    if dialect == "postgresql":
        stmt = pg_insert(model).values(**values).on_conflict_do_nothing(index_elements=[column])
    elif dialect == "sqlite":
        stmt = sqlite_insert(model).values(**values).on_conflict_do_nothing(index_elements=[column])
    else:
        stmt = insert(model).values(**values)
    result = await db.execute(stmt)
    return bool(result.rowcount)


async def _resolve_by_name(db: AsyncSession, model, name: str, extra: dict[str, Any]) -> int:
    lookup = select(model.id).where(model.name == name)

    existing = (await db.execute(lookup)).scalar_one_or_none()
    if existing is not None:
        return existing

    if await _insert_ignoring_conflict(db, model, {"name": name, **extra}, "name"):
        record_catalog_insert(model.__tablename__)
        logger.info("catalog_row_created", table=model.__tablename__, name=name)

    return (await db.execute(lookup)).scalar_one()


async def resolve_sport(db: AsyncSession, sport_type: str) -> int:
    """Return the id of the sport named `sport_type` (case-insensitive), creating it if needed."""
    name = sport_type.strip().lower()
    if not name:
        raise ValidationFailed("Please select a sport type")
    if len(name) > SPORT_NAME_MAX_LENGTH:
        raise ValidationFailed(f"Sport name must be at most {SPORT_NAME_MAX_LENGTH} characters")

    return await _resolve_by_name(db, Sport, name, {})


async def resolve_venues(db: AsyncSession, venue_names: list[str]) -> VenueResolution:
    """
    Resolve venue names (exact match, not case-folded) to ids, creating venues
    with a placeholder address when missing. Duplicate names collapse to the
    first occurrence. Unusable names are reported, never silently dropped.
    """
    resolution = VenueResolution()
    seen: set[str] = set()

    for raw_name in venue_names:
        name = raw_name.strip()
        if not name:
            resolution.failures.append(VenueFailure(name=raw_name, reason="name is blank"))
            continue
        if len(name) > VENUE_NAME_MAX_LENGTH:
            resolution.failures.append(
                VenueFailure(name=name[:40], reason=f"name is longer than {VENUE_NAME_MAX_LENGTH} characters")
            )
            continue
        if name in seen:
            continue
        seen.add(name)

        venue_id = await _resolve_by_name(db, Venue, name, {"address": settings.PLACEHOLDER_VENUE_ADDRESS})
        resolution.venue_ids.append(venue_id)

    if resolution.failures:
        logger.warning(
            "venue_resolution_failures",
            failed=[f.name for f in resolution.failures],
            resolved=len(resolution.venue_ids),
        )
    return resolution


async def list_sports(db: AsyncSession) -> list[Sport]:
    """All sports, alphabetically."""
    result = await db.execute(select(Sport).order_by(Sport.name.asc()))
    return list(result.scalars().all())


async def find_sport_id(db: AsyncSession, sport_type: str) -> Optional[int]:
    """Single-row, case-insensitive lookup without creating anything."""
    result = await db.execute(select(Sport.id).where(Sport.name == sport_type.strip().lower()))
    return result.scalar_one_or_none()
