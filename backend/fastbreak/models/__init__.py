from fastbreak.models.user import User
from fastbreak.models.sport import Sport
from fastbreak.models.venue import Venue
from fastbreak.models.event import Event, EventVenue

__all__ = ["User", "Sport", "Venue", "Event", "EventVenue"]
