"""Health check endpoint."""

import sqlite3
from datetime import datetime, timezone

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from api.models.responses import HealthResponse
from core.config import API_VERSION
from core.database import count_events, get_connection

router = APIRouter()


def database_available() -> bool:
    """Check that the event store can be opened and queried."""
    try:
        conn = get_connection()
        try:
            count_events(conn)
        finally:
            conn.close()
    except sqlite3.Error:
        return False
    return True


@router.get("/health", response_model=HealthResponse)
def health_check():
    """
    Health check endpoint for monitoring.

    Returns 200 if healthy, 503 if unhealthy.
    """
    timestamp = datetime.now(timezone.utc).isoformat()

    if database_available():
        return HealthResponse(
            status="healthy",
            version=API_VERSION,
            database_available=True,
            timestamp=timestamp,
        )
    else:
        return JSONResponse(
            status_code=503,
            content=HealthResponse(
                status="unhealthy",
                version=API_VERSION,
                database_available=False,
                timestamp=timestamp,
                error="Event database not available",
            ).model_dump(),
        )
