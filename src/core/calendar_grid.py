"""
Month grid generation and date-keyed event indexing.

Dates are handled as "YYYY-MM-DD" strings (date keys) everywhere outside this
module, so that no timezone conversion can shift an event onto another day.
"""

import calendar
from datetime import date, datetime

from core.config import DATE_FORMAT
from models.events import DayCell, Event

WEEKDAY_LABELS = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]
DAYS_PER_WEEK = 7


# =============================================================================
# DATE KEYS
# =============================================================================


def date_key(year: int, month: int, day: int) -> str:
    """Format a calendar date as a YYYY-MM-DD key."""
    return f"{year:04d}-{month:02d}-{day:02d}"


def parse_date_key(value: str) -> date:
    """
    Parse a YYYY-MM-DD key into a date.

    Raises:
        ValueError: if the value is not exactly a valid YYYY-MM-DD date
    """
    parsed = datetime.strptime(value, DATE_FORMAT).date()
    # strptime accepts "2024-3-5"; keys must be zero padded
    if date_key(parsed.year, parsed.month, parsed.day) != value:
        raise ValueError(f"Date must be in YYYY-MM-DD form, got '{value}'")
    return parsed


def normalize_date_key(value: str) -> str:
    """Drop any time-of-day suffix ("2024-03-15T00:00:00Z" -> "2024-03-15")."""
    return value.split("T")[0]


# =============================================================================
# MONTH ARITHMETIC
# =============================================================================


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def weekday_index(year: int, month: int, day: int) -> int:
    """Weekday of a date with Sunday as 0."""
    return (date(year, month, day).weekday() + 1) % DAYS_PER_WEEK


def month_bounds(year: int, month: int) -> tuple[str, str]:
    """First and last date keys of a month."""
    return date_key(year, month, 1), date_key(year, month, days_in_month(year, month))


def shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    """Move (year, month) by delta months, e.g. (2024, 1, -1) -> (2023, 12)."""
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


# =============================================================================
# GRID
# =============================================================================


def build_month_grid(year: int, month: int) -> list[list[int | None]]:
    """
    Build the Sunday-first week matrix for a month.

    Each week has exactly 7 cells. Cells before day 1 and after the last day
    of the month are None.

    Example (March 2024, starts on a Friday):
        [[None, None, None, None, None, 1, 2], [3, 4, ...], ...]
    """
    weeks: list[list[int | None]] = [[]]

    for _ in range(weekday_index(year, month, 1)):
        weeks[0].append(None)

    for day in range(1, days_in_month(year, month) + 1):
        if len(weeks[-1]) == DAYS_PER_WEEK:
            weeks.append([])
        weeks[-1].append(day)

    while len(weeks[-1]) < DAYS_PER_WEEK:
        weeks[-1].append(None)

    return weeks


def decorate_grid(
    grid: list[list[int | None]],
    year: int,
    month: int,
    today: date,
    events_by_date: dict[str, list[Event]],
) -> list[list[DayCell]]:
    """Attach date keys and the today / has-events markers to each cell."""
    decorated = []
    for week in grid:
        row: list[DayCell] = []
        for day in week:
            if day is None:
                row.append({"day": None, "date_key": None, "is_today": False, "has_events": False})
                continue
            key = date_key(year, month, day)
            row.append(
                {
                    "day": day,
                    "date_key": key,
                    "is_today": (year, month, day) == (today.year, today.month, today.day),
                    "has_events": bool(events_by_date.get(key)),
                }
            )
        decorated.append(row)
    return decorated


# =============================================================================
# EVENT INDEX
# =============================================================================


def group_events_by_date(events: list[Event]) -> dict[str, list[Event]]:
    """Group events by date key, keeping fetch order within each day."""
    events_by_date: dict[str, list[Event]] = {}
    for event in events:
        events_by_date.setdefault(normalize_date_key(event["date"]), []).append(event)
    return events_by_date


def merge_event(events_by_date: dict[str, list[Event]], event: Event) -> dict[str, list[Event]]:
    """Return a copy of the index with event appended under its date key."""
    key = normalize_date_key(event["date"])
    return {**events_by_date, key: [*events_by_date.get(key, []), event]}
