"""Pydantic request/response models for API endpoints."""

from pydantic import BaseModel


class EventCreate(BaseModel):
    """New event payload. Fields are optional here so a missing one maps to 400, not 422."""

    title: str | None = None
    date: str | None = None  # YYYY-MM-DD


class EventResponse(BaseModel):
    """Stored event."""

    id: str
    title: str
    date: str  # YYYY-MM-DD


class HealthResponse(BaseModel):
    """Health check response."""

    status: str  # "healthy" or "unhealthy"
    version: str
    database_available: bool
    timestamp: str  # ISO 8601 UTC
    error: str | None = None


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str
    code: str
    details: list[str] = []


class ErrorCodes:
    """Error code constants."""

    INVALID_REQUEST = "INVALID_REQUEST"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    STORAGE_ERROR = "STORAGE_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"
