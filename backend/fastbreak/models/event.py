"""
Event model and its venue links.

Key design decisions:
- Venues are linked through the `event_venues` join table with foreign keys
  instead of an id array on the event row, so a link always points at a real venue
- `position` keeps venues in the order they were entered
- Index on `date_time` backs the dashboard's newest-first ordering
"""

from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Index

from fastbreak.db.base import Base, TimestampMixin


class Event(Base, TimestampMixin):
    __tablename__ = "events"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    date_time = Column(DateTime(timezone=True), nullable=False)
    description = Column(Text, nullable=False)
    sport_id = Column(Integer, ForeignKey("sports.id"), nullable=False, index=True)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    __table_args__ = (
        Index("ix_events_date_time", "date_time"),
    )

    def __repr__(self) -> str:
        return f"<Event(id={self.id}, name={self.name}, sport={self.sport_id})>"


class EventVenue(Base):
    __tablename__ = "event_venues"

    event_id = Column(Integer, ForeignKey("events.id", ondelete="CASCADE"), primary_key=True)
    venue_id = Column(Integer, ForeignKey("venues.id"), primary_key=True, index=True)
    position = Column(Integer, nullable=False, default=0)

    def __repr__(self) -> str:
        return f"<EventVenue(event={self.event_id}, venue={self.venue_id}, position={self.position})>"
