"""
Create/edit event form.

The form collects a separately picked date and time-of-day plus a
comma-separated venues field; `to_event_input` turns a valid form into the
payload the create/update actions expect.
"""

from datetime import date, datetime, time
from typing import Any, Optional
from zoneinfo import ZoneInfo

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator
from pydantic_core import PydanticCustomError

from fastbreak.schemas.event import EventInput, EventRead

DATE_TIME_FIELD = "date_time"
DATE_TIME_REQUIRED = "Date and time is required"


def split_venues(raw: str) -> list[str]:
    """Split a comma-separated venues field, dropping empty segments."""
    return [part.strip() for part in raw.split(",") if part.strip()]


class EventForm(BaseModel):
    model_config = ConfigDict(validate_default=True)

    event_name: str = ""
    sport_type: str = ""
    event_date: Optional[date] = None
    event_time: Optional[time] = None
    description: str = ""
    venues: str = ""

    @field_validator("event_date", "event_time", mode="before")
    @classmethod
    def _blank_is_missing(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("event_name")
    @classmethod
    def _check_event_name(cls, value: str) -> str:
        if len(value) < 2:
            raise PydanticCustomError("too_short", "Event name must be at least 2 characters")
        return value

    @field_validator("sport_type")
    @classmethod
    def _check_sport_type(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise PydanticCustomError("missing", "Please select a sport type")
        return value

    @field_validator("description")
    @classmethod
    def _check_description(cls, value: str) -> str:
        if len(value) < 10:
            raise PydanticCustomError("too_short", "Description must be at least 10 characters")
        return value

    @field_validator("venues")
    @classmethod
    def _check_venues(cls, value: str) -> str:
        if not split_venues(value):
            raise PydanticCustomError("missing", "At least one venue is required")
        return value

    @field_validator("event_date", "event_time")
    @classmethod
    def _check_date_time(cls, value: Any) -> Any:
        if value is None:
            raise PydanticCustomError("missing", DATE_TIME_REQUIRED)
        return value

    @property
    def venue_list(self) -> list[str]:
        return split_venues(self.venues)

    def combined_date_time(self, tz: ZoneInfo) -> datetime:
        return datetime.combine(self.event_date, self.event_time.replace(second=0, microsecond=0), tzinfo=tz)

    def to_event_input(self, tz: ZoneInfo) -> EventInput:
        return EventInput(
            event_name=self.event_name,
            sport_type=self.sport_type,
            date_time=self.combined_date_time(tz),
            description=self.description,
            venues=self.venue_list,
        )

    @classmethod
    def initial_from_event(cls, event: EventRead, tz: ZoneInfo) -> dict[str, str]:
        """Raw field values used to pre-fill the edit form."""
        local = event.date_time if event.date_time.tzinfo else event.date_time.replace(tzinfo=tz)
        local = local.astimezone(tz)
        return {
            "event_name": event.name,
            "sport_type": event.sport.name,
            "event_date": local.date().isoformat(),
            "event_time": local.strftime("%H:%M"),
            "description": event.description,
            "venues": ", ".join(venue.name for venue in event.venues),
        }


def form_errors(exc: ValidationError) -> dict[str, str]:
    """Map a validation error to one message per form field."""
    errors: dict[str, str] = {}
    for error in exc.errors():
        field = str(error["loc"][0]) if error["loc"] else DATE_TIME_FIELD
        if field in ("event_date", "event_time"):
            field = DATE_TIME_FIELD
            message = DATE_TIME_REQUIRED if error["type"] == "missing" else error["msg"]
        else:
            message = error["msg"]
        errors.setdefault(field, message)
    return errors


def validate_event_form(values: dict[str, Any]) -> tuple[Optional[EventForm], dict[str, str]]:
    """Validate raw form values. Returns the form or the per-field errors."""
    try:
        return EventForm.model_validate(values), {}
    except ValidationError as exc:
        return None, form_errors(exc)
