"""
Interactive events table.

STATES
======

  IDLE            nothing in flight, no dialog open
  PENDING         a refetch (or delete) is in flight
  DELETE_CONFIRM  the delete confirmation dialog is open

  IDLE --set_search / set_sport_filter--> PENDING --newest response--> IDLE
  IDLE --request_delete--> DELETE_CONFIRM --cancel_delete--> IDLE
  DELETE_CONFIRM --confirm_delete--> PENDING --delete + refetch--> IDLE

Request sequencing: each refetch takes a ticket from a counter. Only the
response for the newest ticket may replace the displayed events; an older
response that arrives late is dropped.
"""

import itertools
from enum import Enum
from typing import Iterable, Optional

from fastbreak.client.api import EventsApiClient
from fastbreak.client.notifications import Notifier
from fastbreak.core.logging import get_logger
from fastbreak.schemas.event import EventRead, SportRead
from fastbreak.schemas.result import ActionResult

logger = get_logger(__name__)

ALL_SPORTS = "all"


class TableState(str, Enum):
    IDLE = "idle"
    PENDING = "pending"
    DELETE_CONFIRM = "delete_confirm"


class EventsTable:
    def __init__(
        self,
        api: EventsApiClient,
        initial_events: Iterable[EventRead] = (),
        current_user_id: Optional[int] = None,
        notifier: Optional[Notifier] = None,
    ):
        self.api = api
        self.events: list[EventRead] = list(initial_events)
        self.current_user_id = current_user_id
        self.notifier = notifier or Notifier()

        self.search = ""
        self.sport_filter = ""
        self.sports: list[SportRead] = []
        self.pending_delete_id: Optional[int] = None
        self.state = TableState.IDLE

        self._tickets = itertools.count(1)
        self._latest_ticket = 0

    def can_modify(self, event: EventRead) -> bool:
        return self.current_user_id is not None and event.created_by == self.current_user_id

    async def load_sports(self) -> None:
        result = await self.api.get_sports()
        if result.success and result.data is not None:
            self.sports = result.data

    async def set_search(self, value: str) -> bool:
        self.search = value
        return await self.refresh()

    async def set_sport_filter(self, value: str) -> bool:
        self.sport_filter = "" if value == ALL_SPORTS else value
        return await self.refresh()

    async def refresh(self) -> bool:
        """
        Fetch events for the active filters.
        Returns False when the response was superseded by a newer request.
        """
        ticket = next(self._tickets)
        self._latest_ticket = ticket
        self.state = TableState.PENDING

        result = await self.api.get_events(
            search=self.search or None,
            sport_type=self.sport_filter or None,
        )

        if ticket != self._latest_ticket:
            logger.debug("stale_events_response_dropped", ticket=ticket, latest=self._latest_ticket)
            return False

        if result.success:
            self.events = result.data or []
        else:
            self.notifier.error(result.error or "Failed to fetch events")

        self.state = TableState.DELETE_CONFIRM if self.pending_delete_id is not None else TableState.IDLE
        return True

    def request_delete(self, event_id: int) -> bool:
        event = next((e for e in self.events if e.id == event_id), None)
        if event is None or not self.can_modify(event):
            return False
        self.pending_delete_id = event_id
        self.state = TableState.DELETE_CONFIRM
        return True

    def cancel_delete(self) -> None:
        self.pending_delete_id = None
        if self.state == TableState.DELETE_CONFIRM:
            self.state = TableState.IDLE

    async def confirm_delete(self) -> Optional[ActionResult]:
        if self.pending_delete_id is None:
            return None

        event_id = self.pending_delete_id
        self.state = TableState.PENDING
        result = await self.api.delete_event(event_id)
        self.pending_delete_id = None

        if result.success:
            self.notifier.success("Event deleted successfully")
            await self.refresh()
        else:
            self.notifier.error(result.error or "Failed to delete event")
            self.state = TableState.IDLE
        return result

    def rows(self) -> list[dict]:
        """Display rows as the table renders them."""
        return [
            {
                "id": event.id,
                "name": event.name,
                "sport": event.sport.name.capitalize(),
                "date_time": event.date_time.isoformat(),
                "venues": ", ".join(v.name for v in event.venues) if event.venues else "No venues",
                "description": event.description,
                "can_modify": self.can_modify(event),
            }
            for event in self.events
        ]
