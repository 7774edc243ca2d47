"""API Pydantic models."""

from .requests import (
    CalendarEventCreate,
    CalendarEventUpdate,
    ConvertRequest,
    TimezoneModeUpdate,
    TimezoneZoneUpdate,
)
from .responses import (
    CalendarEventResponse,
    ErrorCodes,
    ErrorResponse,
    EventCreatedResponse,
    FormattedDateResponse,
    HealthResponse,
    TimestampResponse,
    TimezoneOption,
    TimezonePreferenceResponse,
    UpcomingEventResponse,
)

__all__ = [
    "CalendarEventCreate",
    "CalendarEventResponse",
    "CalendarEventUpdate",
    "ConvertRequest",
    "ErrorCodes",
    "ErrorResponse",
    "EventCreatedResponse",
    "FormattedDateResponse",
    "HealthResponse",
    "TimestampResponse",
    "TimezoneModeUpdate",
    "TimezoneOption",
    "TimezonePreferenceResponse",
    "TimezoneZoneUpdate",
    "UpcomingEventResponse",
]
