"""Pydantic response models for API endpoints."""

from pydantic import BaseModel


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


class CalendarEventResponse(BaseModel):
    """One entry of the unified calendar feed."""

    id: str
    title: str
    type: str
    start_date: int  # UTC epoch millis
    end_date: int | None = None
    all_day: bool
    location: str | None = None
    description: str | None = None
    color: str
    source: str
    source_id: str


class UpcomingEventResponse(BaseModel):
    id: str
    title: str
    type: str
    start_date: int
    days_until: int
    color: str


class EventCreatedResponse(BaseModel):
    id: str


class TimezonePreferenceResponse(BaseModel):
    mode: str
    zone: str
    label: str
    offset: str  # "+HH:MM" right now


class TimezoneOption(BaseModel):
    value: str
    label: str


class TimestampResponse(BaseModel):
    timestamp: int
    zone: str


class FormattedDateResponse(BaseModel):
    timestamp: int
    zone: str
    formatted: str
    date: str  # YYYY-MM-DD in zone
    time: str  # HH:MM in zone


class ErrorCodes:
    """Error code constants."""

    INVALID_REQUEST = "INVALID_REQUEST"
    UNAUTHORIZED = "UNAUTHORIZED"
    NOT_FOUND = "NOT_FOUND"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"
