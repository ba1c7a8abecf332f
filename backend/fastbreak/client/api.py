"""
Async HTTP client for the events API.

Every call returns an ActionResult, including transport failures and request
validation errors, so components only ever branch on `success`.
"""

from typing import Any, Optional

import httpx

from fastbreak.core.exceptions import ErrorCode
from fastbreak.core.logging import get_logger
from fastbreak.schemas.event import EventInput, EventRead, SportRead
from fastbreak.schemas.result import ActionResult
from fastbreak.schemas.user import Token

logger = get_logger(__name__)

API_PREFIX = "/api/v1"


def _detail_message(payload: Any) -> str:
    detail = payload.get("detail") if isinstance(payload, dict) else None
    if isinstance(detail, str):
        return detail
    if isinstance(detail, list) and detail:
        return "; ".join(str(item.get("msg", item)) for item in detail if isinstance(item, dict)) or "Invalid request"
    return "Invalid request"


class EventsApiClient:
    def __init__(self, http: httpx.AsyncClient, token: Optional[str] = None):
        self._http = http
        self.token = token

    @classmethod
    def from_url(cls, base_url: str, token: Optional[str] = None, timeout: float = 10.0) -> "EventsApiClient":
        return cls(httpx.AsyncClient(base_url=base_url, timeout=timeout), token=token)

    async def aclose(self) -> None:
        await self._http.aclose()

    def _headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"} if self.token else {}

    async def _call(self, method: str, path: str, model: Any, **kwargs) -> ActionResult:
        try:
            response = await self._http.request(method, f"{API_PREFIX}{path}", headers=self._headers(), **kwargs)
        except httpx.HTTPError as e:
            logger.warning("api_request_failed", method=method, path=path, error=str(e))
            return ActionResult(success=False, error="Could not reach the server", code=ErrorCode.BACKEND_ERROR)

        try:
            payload = response.json()
        except ValueError:
            return ActionResult(
                success=False,
                error=f"Unexpected response ({response.status_code})",
                code=ErrorCode.BACKEND_ERROR,
            )

        if isinstance(payload, dict) and "success" in payload:
            return ActionResult[model].model_validate(payload)

        code = ErrorCode.AUTHENTICATION_REQUIRED if response.status_code == 401 else ErrorCode.VALIDATION_ERROR
        return ActionResult(success=False, error=_detail_message(payload), code=code)

    async def login(self, email: str, password: str) -> ActionResult:
        """Exchange credentials for a token and keep it for later calls."""
        result = await self._call("POST", "/auth/login", Token, json={"email": email, "password": password})
        if result.success:
            self.token = result.data.access_token
        return result

    async def get_events(self, search: Optional[str] = None, sport_type: Optional[str] = None) -> ActionResult:
        params = {}
        if search:
            params["search"] = search
        if sport_type:
            params["sport_type"] = sport_type
        return await self._call("GET", "/events/", list[EventRead], params=params)

    async def get_event_by_id(self, event_id: int) -> ActionResult:
        return await self._call("GET", f"/events/{event_id}", EventRead)

    async def create_event(self, data: EventInput) -> ActionResult:
        return await self._call("POST", "/events/", EventRead, json=data.model_dump(mode="json", by_alias=True))

    async def update_event(self, event_id: int, data: EventInput) -> ActionResult:
        return await self._call(
            "PUT", f"/events/{event_id}", EventRead, json=data.model_dump(mode="json", by_alias=True)
        )

    async def delete_event(self, event_id: int) -> ActionResult:
        return await self._call("DELETE", f"/events/{event_id}", Any)

    async def get_sports(self) -> ActionResult:
        return await self._call("GET", "/sports/", list[SportRead])

    async def sign_out(self) -> ActionResult:
        result = await self._call("POST", "/auth/logout", dict)
        self.token = None
        return result
