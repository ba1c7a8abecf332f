from fastbreak.schemas.user import UserCreate, UserResponse, UserLogin, Token, CallerResponse
from fastbreak.schemas.event import EventInput, EventRead, SportRead, VenueRead
from fastbreak.schemas.forms import EventForm, validate_event_form
from fastbreak.schemas.result import ActionResult

__all__ = [
    "UserCreate", "UserResponse", "UserLogin", "Token", "CallerResponse",
    "EventInput", "EventRead", "SportRead", "VenueRead",
    "EventForm", "validate_event_form",
    "ActionResult",
]
