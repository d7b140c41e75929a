"""
HTTP client for the events API and the calendar session that drives the UI state.
"""

import logging
from datetime import date

import httpx

from core.calendar_grid import month_bounds
from core.config import CALENDAR_API_URL, CLIENT_TIMEOUT_SECONDS
from core.validation import is_blank
from models.events import Event
from ui.state import (
    Action,
    CalendarState,
    add_failed,
    close as close_view,
    event_added,
    events_loaded,
    fetch_failed,
    fetch_started,
    initial_state,
    navigate,
    reduce,
    select_day,
    set_draft,
)

logger = logging.getLogger(__name__)


class EventsClientError(Exception):
    """Request to the events API failed."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


def _error_message(response: httpx.Response) -> str:
    """Pull the server's error text out of an error response."""
    try:
        body = response.json()
    except ValueError:
        return f"HTTP {response.status_code}"
    detail = body.get("detail") if isinstance(body, dict) else None
    if isinstance(detail, dict) and detail.get("error"):
        return detail["error"]
    return f"HTTP {response.status_code}"


class EventsClient:
    """
    Thin wrapper over the /api/events JSON endpoints.

    Any httpx.Client can be passed in, including a FastAPI TestClient.
    """

    def __init__(
        self,
        base_url: str = CALENDAR_API_URL,
        http: httpx.Client | None = None,
        timeout: float = CLIENT_TIMEOUT_SECONDS,
    ):
        self._http = http or httpx.Client(base_url=base_url, timeout=timeout)

    def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        try:
            response = self._http.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            raise EventsClientError(f"Could not reach calendar server: {e}") from e
        if response.is_error:
            raise EventsClientError(_error_message(response), response.status_code)
        return response

    def list_events(self, start: str, end: str) -> list[Event]:
        response = self._request("GET", "/api/events", params={"start": start, "end": end})
        return response.json()

    def create_event(self, date: str, title: str) -> Event:
        response = self._request("POST", "/api/events", json={"title": title, "date": date})
        return response.json()

    def close(self) -> None:
        self._http.close()


class CalendarSession:
    """Holds the current CalendarState and performs the requests behind user actions."""

    def __init__(self, client: EventsClient, today: date | None = None):
        self.client = client
        self.state: CalendarState = initial_state(today or date.today())

    def dispatch(self, action: Action) -> CalendarState:
        self.state = reduce(self.state, action)
        return self.state

    def load_month(self) -> CalendarState:
        """Fetch the displayed month's events and replace the index."""
        self.dispatch(fetch_started())
        seq, year, month = self.state.fetch_seq, self.state.year, self.state.month
        start, end = month_bounds(year, month)

        try:
            events = self.client.list_events(start, end)
        except EventsClientError as e:
            logger.warning("Error fetching events for %s..%s: %s", start, end, e)
            return self.dispatch(fetch_failed(seq, f"Could not load events: {e}"))

        return self.dispatch(events_loaded(seq, year, month, events))

    def next_month(self) -> CalendarState:
        self.dispatch(navigate(1))
        return self.load_month()

    def prev_month(self) -> CalendarState:
        self.dispatch(navigate(-1))
        return self.load_month()

    def click_day(self, day: int | None) -> CalendarState:
        return self.dispatch(select_day(day))

    def add_event(self, title: str) -> CalendarState:
        """Create an event on the selected day and merge it into the index."""
        self.dispatch(set_draft(title))
        if self.state.selected_date is None:
            return self.dispatch(add_failed("Select a day first"))
        if is_blank(title):
            return self.dispatch(add_failed("Event title is required"))

        try:
            event = self.client.create_event(self.state.selected_date, title)
        except EventsClientError as e:
            logger.warning("Error adding event on %s: %s", self.state.selected_date, e)
            return self.dispatch(add_failed(f"Could not add event: {e}"))

        return self.dispatch(event_added(event))

    def close(self) -> CalendarState:
        return self.dispatch(close_view())
