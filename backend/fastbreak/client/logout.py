"""
Logout control.
"""

from typing import Optional

from fastbreak.client.api import EventsApiClient
from fastbreak.client.notifications import Notifier

LOGIN_PATH = "/login"


class LogoutControl:
    def __init__(self, api: EventsApiClient, notifier: Optional[Notifier] = None):
        self.api = api
        self.notifier = notifier or Notifier()
        self.is_loading = False

    @property
    def label(self) -> str:
        return "Logging out..." if self.is_loading else "Logout"

    async def click(self) -> Optional[str]:
        """
        Sign out and return where to navigate. Returns None while a sign-out is
        already running, or when it failed and the error should stay on screen.
        """
        if self.is_loading:
            return None
        self.is_loading = True

        result = await self.api.sign_out()
        if not result.success:
            self.notifier.error(result.error or "Failed to log out")
            self.is_loading = False
            return None
        return LOGIN_PATH
