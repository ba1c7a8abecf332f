"""
Python counterparts of the browser-side components. They drive the JSON API
through EventsApiClient and keep the same local state the pages would.
"""

from fastbreak.client.api import EventsApiClient
from fastbreak.client.event_form import EventFormController, FormOutcome
from fastbreak.client.events_table import EventsTable, TableState
from fastbreak.client.logout import LogoutControl
from fastbreak.client.notifications import Notification, Notifier

__all__ = [
    "EventsApiClient",
    "EventFormController", "FormOutcome",
    "EventsTable", "TableState",
    "LogoutControl",
    "Notification", "Notifier",
]
