"""
Server-rendered pages: dashboard, create/edit form, delete confirmation,
login and logout.

Pages call the same server actions as the JSON API and show their error
strings as notices. The session token lives in an HTTP-only cookie.
"""

from datetime import datetime
from pathlib import Path
from typing import Optional
from urllib.parse import urlencode
from zoneinfo import ZoneInfo

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from fastbreak.actions import events as actions
from fastbreak.actions.auth import log_in, sign_out
from fastbreak.core.config import get_settings
from fastbreak.core.exceptions import AuthenticationRequired
from fastbreak.core.logging import get_logger
from fastbreak.core.security import Caller, get_optional_caller
from fastbreak.db.session import get_db
from fastbreak.schemas.forms import EventForm, validate_event_form
from fastbreak.schemas.result import ActionResult
from fastbreak.schemas.user import UserLogin

logger = get_logger(__name__)
settings = get_settings()

templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))
router = APIRouter(include_in_schema=False)

FORM_FIELDS = ("event_name", "sport_type", "event_date", "event_time", "description", "venues")

NOTICES = {
    "created": "Event created successfully!",
    "updated": "Event updated successfully!",
    "deleted": "Event deleted successfully",
    "signed_out": "You have been logged out",
}


def local_tz() -> ZoneInfo:
    return ZoneInfo(settings.DEFAULT_TIMEZONE)


def format_local(value: datetime) -> str:
    return value.astimezone(local_tz()).strftime("%Y-%m-%d %H:%M")


templates.env.filters["localtime"] = format_local


def redirect(path: str, **params: str) -> RedirectResponse:
    query = urlencode({k: v for k, v in params.items() if v})
    return RedirectResponse(f"{path}?{query}" if query else path, status_code=status.HTTP_303_SEE_OTHER)


async def _sport_names(db: AsyncSession) -> list[str]:
    result = await actions.get_sports(db)
    return [sport.name for sport in result.data] if result.success else []


# Dashboard

@router.get("/", response_class=HTMLResponse)
async def dashboard(
    request: Request,
    search: str = "",
    sport: str = "",
    confirm_delete: Optional[int] = None,
    notice: str = "",
    error: str = "",
    caller: Optional[Caller] = Depends(get_optional_caller),
    db: AsyncSession = Depends(get_db),
):
    if caller is None:
        return redirect("/login")

    result = await actions.get_events(db, search=search or None, sport_type=sport or None)
    events = result.data if result.success else []
    if not result.success:
        error = error or result.error

    pending_delete = None
    if confirm_delete is not None:
        pending_delete = next(
            (e for e in events if e.id == confirm_delete and e.created_by == caller.id),
            None,
        )

    return templates.TemplateResponse(
        request,
        "dashboard.html",
        {
            "caller": caller,
            "events": events,
            "sports": await _sport_names(db),
            "search": search,
            "sport": sport,
            "pending_delete": pending_delete,
            "notice": NOTICES.get(notice, ""),
            "error": error,
        },
    )


@router.post("/events/{event_id}/delete")
async def delete_event_page(
    event_id: int,
    caller: Optional[Caller] = Depends(get_optional_caller),
    db: AsyncSession = Depends(get_db),
):
    result = await actions.delete_event(db, caller, event_id)
    if result.success:
        return redirect("/", notice="deleted")
    return redirect("/", error=result.error)


# Create / edit form

def _render_form(
    request: Request,
    *,
    caller: Caller,
    sports: list[str],
    values: dict,
    errors: Optional[dict] = None,
    error: str = "",
    event_id: Optional[int] = None,
    status_code: int = status.HTTP_200_OK,
):
    return templates.TemplateResponse(
        request,
        "event_form.html",
        {
            "caller": caller,
            "sports": sports,
            "values": values,
            "errors": errors or {},
            "error": error,
            "event_id": event_id,
            "title": "Edit Event" if event_id else "Create Event",
        },
        status_code=status_code,
    )


async def _read_form(request: Request) -> dict[str, str]:
    form = await request.form()
    return {name: str(form.get(name, "")) for name in FORM_FIELDS}


@router.get("/events/create", response_class=HTMLResponse)
async def create_event_page(
    request: Request,
    caller: Optional[Caller] = Depends(get_optional_caller),
    db: AsyncSession = Depends(get_db),
):
    if caller is None:
        return redirect("/login")
    return _render_form(request, caller=caller, sports=await _sport_names(db), values={})


@router.post("/events/create", response_class=HTMLResponse)
async def submit_create_event(
    request: Request,
    caller: Optional[Caller] = Depends(get_optional_caller),
    db: AsyncSession = Depends(get_db),
):
    if caller is None:
        return redirect("/login")

    values = await _read_form(request)
    form, errors = validate_event_form(values)
    if form is None:
        return _render_form(
            request, caller=caller, sports=await _sport_names(db), values=values,
            errors=errors, status_code=status.HTTP_400_BAD_REQUEST,
        )

    result = await actions.create_event(db, caller, form.to_event_input(local_tz()))
    if not result.success:
        return _render_form(
            request, caller=caller, sports=await _sport_names(db), values=values,
            error=result.error, status_code=result.status_code,
        )
    return redirect("/", notice="created")


@router.get("/events/edit/{event_id}", response_class=HTMLResponse)
async def edit_event_page(
    request: Request,
    event_id: int,
    caller: Optional[Caller] = Depends(get_optional_caller),
    db: AsyncSession = Depends(get_db),
):
    if caller is None:
        return redirect("/login")

    result = await actions.get_event_by_id(db, event_id)
    if not result.success:
        return redirect("/", error=result.error)
    if result.data.created_by != caller.id:
        return redirect("/", error="You don't have permission to edit this event")

    values = EventForm.initial_from_event(result.data, local_tz())
    return _render_form(request, caller=caller, sports=await _sport_names(db), values=values, event_id=event_id)


@router.post("/events/edit/{event_id}", response_class=HTMLResponse)
async def submit_edit_event(
    request: Request,
    event_id: int,
    caller: Optional[Caller] = Depends(get_optional_caller),
    db: AsyncSession = Depends(get_db),
):
    if caller is None:
        return redirect("/login")

    values = await _read_form(request)
    form, errors = validate_event_form(values)
    if form is None:
        return _render_form(
            request, caller=caller, sports=await _sport_names(db), values=values,
            errors=errors, event_id=event_id, status_code=status.HTTP_400_BAD_REQUEST,
        )

    result = await actions.update_event(db, caller, event_id, form.to_event_input(local_tz()))
    if not result.success:
        return _render_form(
            request, caller=caller, sports=await _sport_names(db), values=values,
            error=result.error, event_id=event_id, status_code=result.status_code,
        )
    return redirect("/", notice="updated")


# Session

@router.get("/login", response_class=HTMLResponse)
async def login_page(request: Request, notice: str = ""):
    return templates.TemplateResponse(
        request, "login.html", {"error": "", "email": "", "notice": NOTICES.get(notice, "")}
    )


@router.post("/login", response_class=HTMLResponse)
async def submit_login(request: Request, db: AsyncSession = Depends(get_db)):
    form = await request.form()
    email = str(form.get("email", ""))

    try:
        credentials = UserLogin(email=email, password=str(form.get("password", "")))
    except ValidationError:
        result = ActionResult.fail(AuthenticationRequired("Invalid email or password"))
    else:
        result = await log_in(db, credentials)

    if not result.success:
        return templates.TemplateResponse(
            request,
            "login.html",
            {"error": result.error, "email": email, "notice": ""},
            status_code=result.status_code,
        )

    response = redirect("/")
    response.set_cookie(
        settings.SESSION_COOKIE_NAME,
        result.data.access_token,
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        httponly=True,
        samesite="lax",
        secure=settings.is_production,
    )
    return response


@router.post("/logout")
async def logout_page(caller: Optional[Caller] = Depends(get_optional_caller)):
    if caller is not None:
        await sign_out(caller)
    response = redirect("/login", notice="signed_out")
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    return response
