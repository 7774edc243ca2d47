"""Pydantic request models for API endpoints."""

from datetime import date as CivilDate
from typing import Literal

from pydantic import BaseModel, Field

CalendarEventType = Literal["competition", "meeting", "deadline", "build_day", "outreach", "other"]

HEX_COLOR = r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$"
HH_MM = r"^([01]\d|2[0-3]):([0-5]\d)$"


class CalendarEventCreate(BaseModel):
    """Fields for a new ad-hoc calendar event."""

    title: str = Field(min_length=1)
    type: CalendarEventType
    start_date: int  # UTC epoch millis
    end_date: int | None = None
    all_day: bool = False
    location: str | None = None
    description: str | None = None
    color: str | None = Field(default=None, pattern=HEX_COLOR)


class CalendarEventUpdate(BaseModel):
    """Partial update; omitted fields are left unchanged."""

    title: str | None = Field(default=None, min_length=1)
    type: CalendarEventType | None = None
    start_date: int | None = None
    end_date: int | None = None
    all_day: bool | None = None
    location: str | None = None
    description: str | None = None
    color: str | None = Field(default=None, pattern=HEX_COLOR)


class TimezoneModeUpdate(BaseModel):
    mode: Literal["local", "utc", "custom"]


class TimezoneZoneUpdate(BaseModel):
    zone: str


class ConvertRequest(BaseModel):
    """Civil date (+ optional time) in the session's zone."""

    date: CivilDate
    time: str | None = Field(default=None, pattern=HH_MM)
