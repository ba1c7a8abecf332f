"""
Create/edit event form controller.

Validation runs before anything is sent: an invalid form never reaches the
create or update action.
"""

from dataclasses import dataclass, field
from typing import Any, Optional
from zoneinfo import ZoneInfo

from fastbreak.client.api import EventsApiClient
from fastbreak.client.notifications import Notifier
from fastbreak.schemas.event import SportRead
from fastbreak.schemas.forms import EventForm, validate_event_form
from fastbreak.schemas.result import ActionResult

DASHBOARD_PATH = "/"


@dataclass
class FormOutcome:
    submitted: bool
    errors: dict[str, str] = field(default_factory=dict)
    error: Optional[str] = None
    redirect_to: Optional[str] = None
    result: Optional[ActionResult] = None


class EventFormController:
    def __init__(
        self,
        api: EventsApiClient,
        notifier: Optional[Notifier] = None,
        event_id: Optional[int] = None,
        tz: ZoneInfo = ZoneInfo("UTC"),
    ):
        self.api = api
        self.notifier = notifier or Notifier()
        self.event_id = event_id
        self.tz = tz

        self.sports: list[SportRead] = []
        self.is_submitting = False
        self.errors: dict[str, str] = {}
        self.error: Optional[str] = None

    @property
    def is_edit(self) -> bool:
        return self.event_id is not None

    async def load_sports(self) -> None:
        result = await self.api.get_sports()
        if result.success and result.data is not None:
            self.sports = result.data

    async def load_initial_values(self) -> dict[str, str]:
        """Field values for the edit form, or empty values when creating."""
        if not self.is_edit:
            return {}
        result = await self.api.get_event_by_id(self.event_id)
        if not result.success:
            self.error = result.error
            self.notifier.error(result.error or "Failed to fetch event")
            return {}
        return EventForm.initial_from_event(result.data, self.tz)

    async def submit(self, values: dict[str, Any]) -> FormOutcome:
        form, errors = validate_event_form(values)
        self.errors = errors
        if form is None:
            return FormOutcome(submitted=False, errors=errors)

        self.is_submitting = True
        self.error = None
        payload = form.to_event_input(self.tz)

        if self.is_edit:
            result = await self.api.update_event(self.event_id, payload)
        else:
            result = await self.api.create_event(payload)

        if result.success:
            self.notifier.success("Event updated successfully!" if self.is_edit else "Event created successfully!")
            return FormOutcome(submitted=True, redirect_to=DASHBOARD_PATH, result=result)

        fallback = "Failed to update event" if self.is_edit else "Failed to create event"
        self.error = result.error or fallback
        self.notifier.error(self.error)
        self.is_submitting = False
        return FormOutcome(submitted=True, error=self.error, result=result)
