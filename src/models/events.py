"""
Data models for events and calendar cells.

Using TypedDict for type hints on the dictionaries passed between the
database, service, API and UI layers.
"""

from typing import TypedDict


class Event(TypedDict):
    """Stored calendar event, as returned by the API."""
    id: str
    title: str
    date: str  # YYYY-MM-DD, never a timestamp


class DayCell(TypedDict):
    """One decorated cell of a month grid."""
    day: int | None  # None for padding cells
    date_key: str | None
    is_today: bool
    has_events: bool
