"""Unified calendar feed and ad-hoc event endpoints."""

import sqlite3
import time

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status

from api.dependencies import get_db, get_session_id, verify_api_key
from api.logging import RequestLog, log_request
from api.models.requests import CalendarEventCreate, CalendarEventUpdate
from api.models.responses import (
    CalendarEventResponse,
    ErrorCodes,
    EventCreatedResponse,
    UpcomingEventResponse,
)
from core.config import DEFAULT_UPCOMING_LIMIT
from core.database import (
    EventNotFoundError,
    create_event,
    delete_event,
    get_source_readers,
    update_event,
)
from services.calendar import get_events_in_range, get_upcoming_events_summary

router = APIRouter(prefix="/v1/calendar", dependencies=[Depends(verify_api_key)])


def get_client_ip(request: Request) -> str:
    """Extract client IP from request, handling proxies."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def _not_found(event_id: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail={
            "error": "Calendar event not found",
            "code": ErrorCodes.NOT_FOUND,
            "details": [f"Event ID: {event_id}"],
        },
    )


@router.get("/events", response_model=list[CalendarEventResponse])
def list_events_in_range(
    request: Request,
    start: int = Query(..., description="Range start, UTC epoch millis"),
    end: int = Query(..., description="Range end, UTC epoch millis"),
    conn: sqlite3.Connection = Depends(get_db),
    session_id: str = Depends(get_session_id),
):
    """
    All calendar events (ad-hoc and derived) starting within [start, end].

    Malformed source records are skipped and recorded in the request log.
    """
    start_time = time.time()

    request_log = RequestLog(
        endpoint="/v1/calendar/events",
        method="GET",
        client_ip=get_client_ip(request),
        session_id=session_id,
        range_start=start,
        range_end=end,
    )

    try:
        skipped: list[str] = []
        events = get_events_in_range(get_source_readers(conn), start, end, skipped)

        request_log.status_code = 200
        request_log.events_returned = len(events)
        request_log.records_skipped = len(skipped)
        for message in skipped:
            request_log.details.append(("skipped_record", message))
        return events

    except Exception as e:
        request_log.status_code = 500
        request_log.error_code = ErrorCodes.INTERNAL_ERROR
        request_log.error_message = str(e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "error": "Internal server error",
                "code": ErrorCodes.INTERNAL_ERROR,
                "details": [],
            },
        )

    finally:
        request_log.processing_time_ms = int((time.time() - start_time) * 1000)
        # Always log the request
        try:
            log_request(request_log, conn)
        except sqlite3.Error:
            # Don't fail the request if logging fails
            pass


@router.get("/upcoming", response_model=list[UpcomingEventResponse])
def upcoming_events(
    limit: int = Query(DEFAULT_UPCOMING_LIMIT, ge=0, le=100),
    conn: sqlite3.Connection = Depends(get_db),
):
    """Next events in the coming 30 days (calendar events, competitions, meetings)."""
    return get_upcoming_events_summary(get_source_readers(conn), limit)


@router.post(
    "/events", response_model=EventCreatedResponse, status_code=status.HTTP_201_CREATED
)
def create_calendar_event(
    body: CalendarEventCreate,
    conn: sqlite3.Connection = Depends(get_db),
):
    event_id = create_event(conn, body.model_dump())
    return EventCreatedResponse(id=event_id)


@router.patch("/events/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
def update_calendar_event(
    event_id: str,
    body: CalendarEventUpdate,
    conn: sqlite3.Connection = Depends(get_db),
):
    try:
        update_event(conn, event_id, body.model_dump(exclude_unset=True))
    except EventNotFoundError:
        raise _not_found(event_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/events/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_calendar_event(
    event_id: str,
    conn: sqlite3.Connection = Depends(get_db),
):
    try:
        delete_event(conn, event_id)
    except EventNotFoundError:
        raise _not_found(event_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
