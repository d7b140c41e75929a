"""API Pydantic models."""

from .responses import ErrorCodes, ErrorResponse, EventCreate, EventResponse, HealthResponse

__all__ = ["EventCreate", "EventResponse", "HealthResponse", "ErrorResponse", "ErrorCodes"]
