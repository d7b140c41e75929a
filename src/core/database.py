"""
SQLite database operations for calendar events.
"""

import sqlite3
import uuid
from datetime import datetime, timezone

from core.config import DB_PATH
from models.events import Event


class StorageError(Exception):
    """The event store failed or is unavailable."""


SCHEMA = """
CREATE TABLE IF NOT EXISTS events (
    id TEXT PRIMARY KEY,
    title TEXT NOT NULL,
    date TEXT NOT NULL, -- YYYY-MM-DD
    created_at TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_events_date ON events(date);

CREATE TABLE IF NOT EXISTS api_requests (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    request_id TEXT UNIQUE NOT NULL,
    timestamp TEXT NOT NULL,
    endpoint TEXT NOT NULL,
    method TEXT NOT NULL,
    client_ip TEXT,
    range_start TEXT,
    range_end TEXT,
    event_id TEXT,
    status_code INTEGER NOT NULL,
    error_code TEXT,
    error_message TEXT,
    processing_time_ms INTEGER NOT NULL,
    events_returned INTEGER
);

CREATE TABLE IF NOT EXISTS api_request_details (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    request_id TEXT NOT NULL,
    detail_type TEXT NOT NULL CHECK(detail_type IN ('validation_error', 'warning')),
    message TEXT NOT NULL,
    FOREIGN KEY (request_id) REFERENCES api_requests(request_id)
);

CREATE INDEX IF NOT EXISTS idx_api_requests_timestamp ON api_requests(timestamp);
CREATE INDEX IF NOT EXISTS idx_api_requests_status ON api_requests(status_code);
CREATE INDEX IF NOT EXISTS idx_api_request_details_request ON api_request_details(request_id);
"""


def get_connection() -> sqlite3.Connection:
    """Get a database connection."""
    conn = sqlite3.connect(DB_PATH)
    conn.row_factory = sqlite3.Row
    return conn


def create_schema(conn: sqlite3.Connection) -> None:
    """Create tables and indexes if they don't exist."""
    conn.executescript(SCHEMA)
    conn.commit()


def row_to_event(row: sqlite3.Row) -> Event:
    """Project a stored row to the public event shape."""
    return {"id": row["id"], "title": row["title"], "date": row["date"]}


def insert_event(conn: sqlite3.Connection, date: str, title: str) -> Event:
    """Insert one event and return it with its generated id."""
    event_id = uuid.uuid4().hex
    conn.execute(
        "INSERT INTO events (id, title, date, created_at) VALUES (?, ?, ?, ?)",
        (event_id, title, date, datetime.now(timezone.utc).isoformat()),
    )
    conn.commit()
    return {"id": event_id, "title": title, "date": date}


def find_events_in_range(conn: sqlite3.Connection, start: str, end: str) -> list[Event]:
    """
    Fetch events whose date lies in [start, end], both inclusive.

    Date keys are zero padded, so string comparison matches calendar order.
    """
    cursor = conn.execute(
        "SELECT id, title, date FROM events WHERE date >= ? AND date <= ? ORDER BY rowid",
        (start, end),
    )
    return [row_to_event(row) for row in cursor.fetchall()]


def count_events(conn: sqlite3.Connection) -> int:
    """Count all stored events."""
    return conn.execute("SELECT COUNT(*) FROM events").fetchone()[0]


def init_database() -> None:
    """Create the database file, its directory and tables if missing."""
    DB_PATH.parent.mkdir(parents=True, exist_ok=True)
    conn = get_connection()
    try:
        create_schema(conn)
    finally:
        conn.close()
