"""
Pytest configuration and shared fixtures.
"""

import sys
from pathlib import Path

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from fastapi.testclient import TestClient  # noqa: E402

from core import database  # noqa: E402


@pytest.fixture
def db_path(tmp_path, monkeypatch):
    """Point the event store at a fresh SQLite file with all tables created."""
    path = tmp_path / "db" / "calendar.db"
    monkeypatch.setattr(database, "DB_PATH", path)
    database.init_database()
    return path


@pytest.fixture
def conn(db_path):
    """Open connection to the temporary database."""
    connection = database.get_connection()
    yield connection
    connection.close()


@pytest.fixture
def client(db_path):
    """TestClient running the app lifespan against the temporary database."""
    from api.main import app

    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def sample_event():
    """Sample event dictionary for testing."""
    return {
        "id": "5f0c6a3e9b1d4e2f8a7b6c5d4e3f2a1b",
        "title": "Meeting",
        "date": "2024-03-15",
    }


@pytest.fixture
def sample_events(sample_event):
    """Events across March 2024, two of them on the same day."""
    return [
        sample_event,
        {**sample_event, "id": "b2", "title": "Lunch", "date": "2024-03-01"},
        {**sample_event, "id": "c3", "title": "Retro", "date": "2024-03-15"},
        {**sample_event, "id": "d4", "title": "Release", "date": "2024-03-31"},
    ]
