"""
Data models for source records and the unified calendar feed.

Source records are TypedDicts matching the rows read from each table.
Each source also has a small frozen wrapper so the aggregator can work
over one tagged union instead of checking which fields a dict happens
to have.
"""

from dataclasses import dataclass
from typing import Literal, TypedDict

EventType = Literal[
    "competition", "meeting", "deadline", "build_day", "outreach", "project", "other"
]
EventSource = Literal["calendar", "competition", "meeting", "task", "project"]
TimezoneMode = Literal["local", "utc", "custom"]


# =============================================================================
# SOURCE RECORDS
# =============================================================================


class CalendarEventRecord(TypedDict, total=False):
    """Ad-hoc event stored directly in the calendar table."""
    id: str
    title: str
    type: str
    start_date: int
    end_date: int | None
    all_day: bool
    location: str | None
    description: str | None
    color: str | None
    created_at: int
    updated_at: int


class CompetitionRecord(TypedDict, total=False):
    id: str
    name: str
    start_date: int
    end_date: int
    location: str
    notes: str | None


class MeetingRecord(TypedDict, total=False):
    id: str
    title: str
    type: str
    date: int
    start_time: str | None
    location: str | None
    agenda: str | None


class TaskRecord(TypedDict, total=False):
    id: str
    name: str
    description: str | None
    due_date: int | None


class ProjectRecord(TypedDict, total=False):
    id: str
    name: str
    description: str | None
    start_date: int | None
    end_date: int | None


# =============================================================================
# TAGGED SOURCE VARIANTS
# =============================================================================


@dataclass(frozen=True)
class CalendarSource:
    record: CalendarEventRecord
    source: EventSource = "calendar"


@dataclass(frozen=True)
class CompetitionSource:
    record: CompetitionRecord
    source: EventSource = "competition"


@dataclass(frozen=True)
class MeetingSource:
    record: MeetingRecord
    source: EventSource = "meeting"


@dataclass(frozen=True)
class TaskSource:
    record: TaskRecord
    source: EventSource = "task"


@dataclass(frozen=True)
class ProjectSource:
    record: ProjectRecord
    source: EventSource = "project"


SourceRecord = CalendarSource | CompetitionSource | MeetingSource | TaskSource | ProjectSource


# =============================================================================
# FEED MODELS
# =============================================================================


class CalendarEvent(TypedDict):
    """Normalized event produced by the aggregator. Never persisted."""
    id: str
    title: str
    type: EventType
    start_date: int
    end_date: int | None
    all_day: bool
    location: str | None
    description: str | None
    color: str
    source: EventSource
    source_id: str


class UpcomingEvent(TypedDict):
    id: str
    title: str
    type: str
    start_date: int
    days_until: int
    color: str


@dataclass(frozen=True)
class TimezonePreference:
    """Active display zone for one session; passed explicitly to every conversion."""
    mode: TimezoneMode
    zone: str
