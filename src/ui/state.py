"""
Calendar UI state and its transitions.

The whole UI is described by one immutable CalendarState. Every change goes
through reduce(state, action), which looks up a pure handler by action type.
Month fetches are tagged with a sequence number so that a response for a month
the user has already left is dropped instead of overwriting the index.
"""

from dataclasses import dataclass, field, replace
from datetime import date
from typing import Any, Callable

from core.calendar_grid import date_key, days_in_month, group_events_by_date, merge_event, shift_month
from models.events import Event

# Views
VIEW_GRID = "grid"
VIEW_EVENTS = "events"
VIEW_ADD = "add"

# Action types
NAVIGATE = "NAVIGATE"
FETCH_STARTED = "FETCH_STARTED"
EVENTS_LOADED = "EVENTS_LOADED"
FETCH_FAILED = "FETCH_FAILED"
SELECT_DAY = "SELECT_DAY"
SET_DRAFT = "SET_DRAFT"
EVENT_ADDED = "EVENT_ADDED"
ADD_FAILED = "ADD_FAILED"
CLOSE = "CLOSE"


@dataclass(frozen=True)
class CalendarState:
    """Everything the calendar page needs to render."""

    year: int
    month: int
    today: date
    events: dict[str, list[Event]] = field(default_factory=dict)
    selected_date: str | None = None
    view: str = VIEW_GRID
    draft_title: str = ""
    fetch_seq: int = 0
    loading: bool = False
    error: str | None = None

    @property
    def selected_events(self) -> list[Event]:
        if self.selected_date is None:
            return []
        return self.events.get(self.selected_date, [])


@dataclass(frozen=True)
class Action:
    type: str
    payload: dict[str, Any] = field(default_factory=dict)


def initial_state(today: date) -> CalendarState:
    """State showing the month containing today."""
    return CalendarState(year=today.year, month=today.month, today=today)


# =============================================================================
# ACTION CREATORS
# =============================================================================


def navigate(delta: int) -> Action:
    return Action(NAVIGATE, {"delta": delta})


def navigate_to(year: int, month: int) -> Action:
    return Action(NAVIGATE, {"year": year, "month": month})


def fetch_started() -> Action:
    return Action(FETCH_STARTED)


def events_loaded(seq: int, year: int, month: int, events: list[Event]) -> Action:
    return Action(EVENTS_LOADED, {"seq": seq, "year": year, "month": month, "events": events})


def fetch_failed(seq: int, message: str) -> Action:
    return Action(FETCH_FAILED, {"seq": seq, "message": message})


def select_day(day: int | None) -> Action:
    return Action(SELECT_DAY, {"day": day})


def set_draft(title: str) -> Action:
    return Action(SET_DRAFT, {"title": title})


def event_added(event: Event) -> Action:
    return Action(EVENT_ADDED, {"event": event})


def add_failed(message: str) -> Action:
    return Action(ADD_FAILED, {"message": message})


def close() -> Action:
    return Action(CLOSE)


# =============================================================================
# HANDLERS
# =============================================================================


def _navigate(state: CalendarState, payload: dict) -> CalendarState:
    if "delta" in payload:
        year, month = shift_month(state.year, state.month, payload["delta"])
    else:
        year, month = payload["year"], payload["month"]
    return replace(
        state,
        year=year,
        month=month,
        events={},
        selected_date=None,
        view=VIEW_GRID,
        draft_title="",
        error=None,
    )


def _fetch_started(state: CalendarState, payload: dict) -> CalendarState:
    return replace(state, fetch_seq=state.fetch_seq + 1, loading=True)


def _is_current_fetch(state: CalendarState, payload: dict) -> bool:
    if payload["seq"] != state.fetch_seq:
        return False
    if "year" in payload and (payload["year"], payload["month"]) != (state.year, state.month):
        return False
    return True


def _events_loaded(state: CalendarState, payload: dict) -> CalendarState:
    if not _is_current_fetch(state, payload):
        return state
    return replace(
        state,
        events=group_events_by_date(payload["events"]),
        loading=False,
        error=None,
    )


def _fetch_failed(state: CalendarState, payload: dict) -> CalendarState:
    if not _is_current_fetch(state, payload):
        return state
    return replace(state, loading=False, error=payload["message"])


def _select_day(state: CalendarState, payload: dict) -> CalendarState:
    day = payload["day"]
    if day is None or not 1 <= day <= days_in_month(state.year, state.month):
        return state
    key = date_key(state.year, state.month, day)
    view = VIEW_EVENTS if state.events.get(key) else VIEW_ADD
    return replace(state, selected_date=key, view=view, draft_title="")


def _set_draft(state: CalendarState, payload: dict) -> CalendarState:
    return replace(state, draft_title=payload["title"])


def _event_added(state: CalendarState, payload: dict) -> CalendarState:
    return replace(
        state,
        events=merge_event(state.events, payload["event"]),
        selected_date=None,
        view=VIEW_GRID,
        draft_title="",
        error=None,
    )


def _add_failed(state: CalendarState, payload: dict) -> CalendarState:
    view = VIEW_ADD if state.selected_date else state.view
    return replace(state, view=view, error=payload["message"])


def _close(state: CalendarState, payload: dict) -> CalendarState:
    return replace(state, selected_date=None, view=VIEW_GRID, draft_title="", error=None)


HANDLERS: dict[str, Callable[[CalendarState, dict], CalendarState]] = {
    NAVIGATE: _navigate,
    FETCH_STARTED: _fetch_started,
    EVENTS_LOADED: _events_loaded,
    FETCH_FAILED: _fetch_failed,
    SELECT_DAY: _select_day,
    SET_DRAFT: _set_draft,
    EVENT_ADDED: _event_added,
    ADD_FAILED: _add_failed,
    CLOSE: _close,
}


def reduce(state: CalendarState, action: Action) -> CalendarState:
    """
    Apply one action to the state.

    Raises:
        ValueError: for an unknown action type
    """
    try:
        handler = HANDLERS[action.type]
    except KeyError:
        raise ValueError(f"Unknown action type '{action.type}'") from None
    return handler(state, action.payload)
