"""
Event creation and date-range lookup against the SQLite event store.
"""

import logging
import sqlite3

from core.database import StorageError, find_events_in_range, get_connection, insert_event
from core.validation import validate_date_range, validate_new_event
from models.events import Event

logger = logging.getLogger(__name__)


def create_event(date: str | None, title: str | None) -> Event:
    """
    Persist a new event.

    Raises:
        ValidationError: if date or title is missing, or date is malformed
        StorageError: if the event could not be stored
    """
    date, title = validate_new_event(date, title)

    try:
        conn = get_connection()
        try:
            event = insert_event(conn, date, title)
        finally:
            conn.close()
    except sqlite3.Error as e:
        logger.error("Failed to add event on %s: %s", date, e)
        raise StorageError("Failed to add event") from e

    logger.info("Added event %s on %s", event["id"], event["date"])
    return event


def list_events(start: str | None, end: str | None) -> list[Event]:
    """
    List events dated within [start, end], inclusive at both ends.

    Raises:
        ValidationError: if either bound is missing or malformed
        StorageError: if the store could not be queried
    """
    start, end = validate_date_range(start, end)

    if start > end:
        return []

    try:
        conn = get_connection()
        try:
            return find_events_in_range(conn, start, end)
        finally:
            conn.close()
    except sqlite3.Error as e:
        logger.error("Failed to fetch events %s..%s: %s", start, end, e)
        raise StorageError("Failed to fetch events") from e
