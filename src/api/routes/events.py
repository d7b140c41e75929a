"""Event creation and listing endpoints."""

import asyncio
import logging
import time
from typing import Annotated

from fastapi import APIRouter, HTTPException, Query, Request, status

from api.logging import RequestLog, log_request
from api.models.responses import ErrorCodes, EventCreate, EventResponse
from core.database import StorageError
from core.validation import ValidationError
from services.events import create_event, list_events

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


def get_client_ip(request: Request) -> str:
    """Extract client IP from request, handling proxies."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def _elapsed_ms(start_time: float) -> int:
    return int((time.time() - start_time) * 1000)


def _validation_failed(request_log: RequestLog, e: ValidationError) -> HTTPException:
    """Record a validation failure and build the 400 response."""
    request_log.status_code = status.HTTP_400_BAD_REQUEST
    request_log.error_code = ErrorCodes.VALIDATION_ERROR
    request_log.error_message = str(e)
    for detail in e.errors:
        request_log.details.append(("validation_error", detail))

    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail={
            "error": "Date and title are required"
            if request_log.method == "POST"
            else "Start and end dates are required",
            "code": ErrorCodes.VALIDATION_ERROR,
            "details": e.errors,
        },
    )


def _storage_failed(request_log: RequestLog, e: Exception, message: str) -> HTTPException:
    """Record a storage failure and build the 500 response."""
    request_log.status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    request_log.error_code = ErrorCodes.STORAGE_ERROR
    request_log.error_message = str(e)

    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail={
            "error": message,
            "code": ErrorCodes.STORAGE_ERROR,
            "details": [],
        },
    )


def _write_log(request_log: RequestLog) -> None:
    try:
        log_request(request_log)
    except Exception as e:
        # A broken audit log must not fail the request
        logger.warning("Could not write request log %s: %s", request_log.request_id, e)


@router.post(
    "/events",
    response_model=EventResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_event_endpoint(request: Request, payload: EventCreate):
    """
    Add a new event.

    Returns the stored event with its assigned id.
    """
    start_time = time.time()
    request_log = RequestLog(
        endpoint="/api/events",
        method="POST",
        client_ip=get_client_ip(request),
    )

    try:
        event = await asyncio.to_thread(create_event, payload.date, payload.title)

        request_log.status_code = status.HTTP_201_CREATED
        request_log.event_id = event["id"]
        return EventResponse(**event)

    except ValidationError as e:
        raise _validation_failed(request_log, e)

    except StorageError as e:
        raise _storage_failed(request_log, e, "Failed to add event")

    except Exception as e:
        request_log.status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
        request_log.error_code = ErrorCodes.INTERNAL_ERROR
        request_log.error_message = str(e)
        logger.exception("Unexpected error handling %s %s", request_log.method, request_log.endpoint)

        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "error": "Internal server error",
                "code": ErrorCodes.INTERNAL_ERROR,
                "details": [],
            },
        )

    finally:
        request_log.processing_time_ms = _elapsed_ms(start_time)
        await asyncio.to_thread(_write_log, request_log)


@router.get("/events", response_model=list[EventResponse])
async def list_events_endpoint(
    request: Request,
    start: Annotated[str | None, Query(description="First date, YYYY-MM-DD")] = None,
    end: Annotated[str | None, Query(description="Last date, YYYY-MM-DD")] = None,
):
    """
    List events whose date falls within [start, end], inclusive.
    """
    start_time = time.time()
    request_log = RequestLog(
        endpoint="/api/events",
        method="GET",
        client_ip=get_client_ip(request),
        range_start=start,
        range_end=end,
    )

    try:
        events = await asyncio.to_thread(list_events, start, end)

        request_log.status_code = status.HTTP_200_OK
        request_log.events_returned = len(events)
        return [EventResponse(**event) for event in events]

    except ValidationError as e:
        raise _validation_failed(request_log, e)

    except StorageError as e:
        raise _storage_failed(request_log, e, "Failed to fetch events")

    except Exception as e:
        request_log.status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
        request_log.error_code = ErrorCodes.INTERNAL_ERROR
        request_log.error_message = str(e)
        logger.exception("Unexpected error handling %s %s", request_log.method, request_log.endpoint)

        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "error": "Internal server error",
                "code": ErrorCodes.INTERNAL_ERROR,
                "details": [],
            },
        )

    finally:
        request_log.processing_time_ms = _elapsed_ms(start_time)
        await asyncio.to_thread(_write_log, request_log)
