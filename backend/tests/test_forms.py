"""
Tests for create/edit form validation and conversion.
"""

from datetime import datetime, timezone
from zoneinfo import ZoneInfo

from fastbreak.schemas.event import EventRead, SportRead, VenueRead
from fastbreak.schemas.forms import EventForm, split_venues, validate_event_form

VALID = {
    "event_name": "Lakers vs Celtics",
    "sport_type": "basketball",
    "event_date": "2026-12-01",
    "event_time": "19:30",
    "description": "Season opener at home",
    "venues": "Crypto Arena, Staples Center",
}


def test_valid_form():
    form, errors = validate_event_form(VALID)
    assert errors == {}
    assert form.venue_list == ["Crypto Arena", "Staples Center"]


def test_empty_form_reports_every_field():
    form, errors = validate_event_form({})
    assert form is None
    assert errors == {
        "event_name": "Event name must be at least 2 characters",
        "sport_type": "Please select a sport type",
        "date_time": "Date and time is required",
        "description": "Description must be at least 10 characters",
        "venues": "At least one venue is required",
    }


def test_blank_values_count_as_missing():
    _, errors = validate_event_form({**VALID, "event_name": "a", "event_date": "", "venues": " , ,"})
    assert errors == {
        "event_name": "Event name must be at least 2 characters",
        "date_time": "Date and time is required",
        "venues": "At least one venue is required",
    }


def test_missing_time_only():
    _, errors = validate_event_form({**VALID, "event_time": ""})
    assert errors == {"date_time": "Date and time is required"}


def test_short_description():
    _, errors = validate_event_form({**VALID, "description": "Too short"})
    assert errors == {"description": "Description must be at least 10 characters"}


def test_split_venues_drops_empty_segments():
    assert split_venues(" A ,, B ,") == ["A", "B"]
    assert split_venues("") == []


def test_to_event_input_combines_date_and_time():
    form, _ = validate_event_form(VALID)
    data = form.to_event_input(ZoneInfo("America/New_York"))

    assert data.event_name == "Lakers vs Celtics"
    assert data.venues == ["Crypto Arena", "Staples Center"]
    assert data.date_time.astimezone(timezone.utc) == datetime(2026, 12, 2, 0, 30, tzinfo=timezone.utc)
    assert data.model_dump(by_alias=True)["eventName"] == "Lakers vs Celtics"


def test_initial_values_from_event():
    event = EventRead(
        id=1,
        name="Derby",
        date_time=datetime(2026, 11, 2, 15, 0, tzinfo=timezone.utc),
        description="City derby at noon",
        sport_id=3,
        sport=SportRead(id=3, name="soccer"),
        venue_ids=[5, 6],
        venues=[VenueRead(id=5, name="Old Trafford"), VenueRead(id=6, name="Etihad")],
        created_by=9,
        created_at=datetime(2026, 10, 1, tzinfo=timezone.utc),
    )

    values = EventForm.initial_from_event(event, ZoneInfo("Europe/London"))

    assert values == {
        "event_name": "Derby",
        "sport_type": "soccer",
        "event_date": "2026-11-02",
        "event_time": "15:00",
        "description": "City derby at noon",
        "venues": "Old Trafford, Etihad",
    }
    form, errors = validate_event_form(values)
    assert errors == {}


def test_lengths_count_the_value_as_typed():
    """Surrounding whitespace counts toward the minimum and is kept."""
    form, errors = validate_event_form({**VALID, "event_name": " a", "description": "  123456789 "})
    assert errors == {}
    assert form.event_name == " a"
    assert form.description == "  123456789 "
