"""Server-rendered calendar page."""

import logging
from datetime import MAXYEAR, MINYEAR, date
from typing import Annotated

from fastapi import APIRouter, Form, HTTPException, Query, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from api.models.responses import ErrorCodes
from core.calendar_grid import (
    WEEKDAY_LABELS,
    build_month_grid,
    decorate_grid,
    month_bounds,
    parse_date_key,
    shift_month,
)
from core.config import TEMPLATES_DIR
from core.database import StorageError
from core.validation import ValidationError, is_blank
from services.events import create_event, list_events
from ui.state import (
    CalendarState,
    add_failed,
    events_loaded,
    fetch_failed,
    fetch_started,
    initial_state,
    navigate_to,
    reduce,
    select_day,
    set_draft,
)

logger = logging.getLogger(__name__)

router = APIRouter()
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


def build_page_state(
    today: date,
    year: int | None = None,
    month: int | None = None,
    day: int | None = None,
) -> CalendarState:
    """Run the page load through the reducer: navigate, fetch the month, select a day."""
    state = initial_state(today)
    if year is not None or month is not None:
        # a lone year or month keeps the other part of today's date
        state = reduce(state, navigate_to(year or today.year, month or today.month))

    state = reduce(state, fetch_started())
    start, end = month_bounds(state.year, state.month)
    try:
        events = list_events(start, end)
    except (StorageError, ValidationError) as e:
        logger.error("Error fetching events for %s..%s: %s", start, end, e)
        state = reduce(state, fetch_failed(state.fetch_seq, "Could not load events for this month"))
    else:
        state = reduce(state, events_loaded(state.fetch_seq, state.year, state.month, events))

    if day is not None:
        state = reduce(state, select_day(day))
    return state


def render_page(request: Request, state: CalendarState, status_code: int = 200) -> HTMLResponse:
    """Render the calendar template for a state."""
    prev_year, prev_month = shift_month(state.year, state.month, -1)
    next_year, next_month = shift_month(state.year, state.month, 1)
    # no links past the years a date can hold
    prev_link = {"year": prev_year, "month": prev_month} if prev_year >= MINYEAR else None
    next_link = {"year": next_year, "month": next_month} if next_year <= MAXYEAR else None
    grid = build_month_grid(state.year, state.month)

    context = {
        "state": state,
        "month_title": date(state.year, state.month, 1).strftime("%B %Y"),
        "weekday_labels": WEEKDAY_LABELS,
        "weeks": decorate_grid(grid, state.year, state.month, state.today, state.events),
        "prev": prev_link,
        "next": next_link,
        "selected_label": (
            parse_date_key(state.selected_date).strftime("%A, %B %d, %Y")
            if state.selected_date
            else ""
        ),
    }
    return templates.TemplateResponse(request, "calendar.html", context, status_code=status_code)


@router.get("/", response_class=HTMLResponse)
def calendar_page(
    request: Request,
    year: Annotated[int | None, Query(ge=1, le=9999)] = None,
    month: Annotated[int | None, Query(ge=1, le=12)] = None,
    day: Annotated[int | None, Query(ge=1, le=31)] = None,
):
    """Month view, with the events list or add form open when a day is selected."""
    state = build_page_state(date.today(), year, month, day)
    return render_page(request, state)


@router.post("/days/{day_key}/events", response_class=HTMLResponse)
def add_event_form(
    request: Request,
    day_key: str,
    title: Annotated[str, Form()] = "",
):
    """Handle the add-event form; redirect back to the month on success."""
    try:
        day = parse_date_key(day_key)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={
                "error": "Invalid day",
                "code": ErrorCodes.INVALID_REQUEST,
                "details": ["Expected format: YYYY-MM-DD"],
            },
        )

    state = build_page_state(date.today(), day.year, day.month, day.day)
    state = reduce(state, set_draft(title))

    if is_blank(title):
        state = reduce(state, add_failed("Event title is required"))
        return render_page(request, state, status_code=status.HTTP_400_BAD_REQUEST)

    try:
        create_event(day_key, title)
    except StorageError as e:
        logger.error("Error adding event on %s: %s", day_key, e)
        state = reduce(state, add_failed("Could not save the event, please try again"))
        return render_page(request, state, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)

    return RedirectResponse(
        url=f"/?year={day.year}&month={day.month}",
        status_code=status.HTTP_303_SEE_OTHER,
    )
