"""
Unified calendar feed.

Merges ad-hoc calendar events, competitions, meetings, task deadlines
and project milestones into one list of CalendarEvent dicts, filtered
to a UTC range and sorted by start date.
"""

from core.config import (
    BUILD_DAY_COLOR,
    COMPETITION_COLOR,
    COMPETITION_ID_PREFIX,
    DEADLINE_COLOR,
    DEFAULT_EVENT_COLORS,
    DEFAULT_UPCOMING_LIMIT,
    MEETING_COLOR,
    MEETING_ID_PREFIX,
    MS_PER_DAY,
    OTHER_COLOR,
    PROJECT_COLOR,
    PROJECT_END_ID_PREFIX,
    PROJECT_START_ID_PREFIX,
    TASK_ID_PREFIX,
    UPCOMING_HORIZON_DAYS,
)
from core.database import SourceReaders
from core.timezone import now_ms
from core.validation import is_hex_color, validate_record
from models.events import (
    CalendarEvent,
    CalendarSource,
    CompetitionSource,
    MeetingSource,
    ProjectSource,
    SourceRecord,
    TaskSource,
    UpcomingEvent,
)


def get_default_color(event_type: str) -> str:
    return DEFAULT_EVENT_COLORS.get(event_type, OTHER_COLOR)


def _event_color(record: dict) -> str:
    """Explicit color when it is a usable hex value, otherwise the type default."""
    color = record.get("color")
    return color if is_hex_color(color) else get_default_color(record["type"])


def _meeting_color(meeting_type: str) -> str:
    return BUILD_DAY_COLOR if meeting_type == "build_day" else MEETING_COLOR


def _in_range(timestamp, start: int, end: int) -> bool:
    return timestamp is not None and start <= timestamp <= end


# =============================================================================
# NORMALIZERS (one per source variant)
# =============================================================================


def normalize_calendar_event(variant: CalendarSource, start: int, end: int) -> list[CalendarEvent]:
    event = variant.record
    if not _in_range(event["start_date"], start, end):
        return []
    return [
        {
            "id": event["id"],
            "title": event["title"],
            "type": event["type"],
            "start_date": event["start_date"],
            "end_date": event.get("end_date"),
            "all_day": bool(event.get("all_day", False)),
            "location": event.get("location"),
            "description": event.get("description"),
            "color": _event_color(event),
            "source": "calendar",
            "source_id": event["id"],
        }
    ]


def normalize_competition(variant: CompetitionSource, start: int, end: int) -> list[CalendarEvent]:
    comp = variant.record
    if not _in_range(comp["start_date"], start, end):
        return []
    return [
        {
            "id": f"{COMPETITION_ID_PREFIX}{comp['id']}",
            "title": comp["name"],
            "type": "competition",
            "start_date": comp["start_date"],
            "end_date": comp.get("end_date"),
            "all_day": True,
            "location": comp.get("location"),
            "description": comp.get("notes"),
            "color": COMPETITION_COLOR,
            "source": "competition",
            "source_id": comp["id"],
        }
    ]


def normalize_meeting(variant: MeetingSource, start: int, end: int) -> list[CalendarEvent]:
    meeting = variant.record
    if not _in_range(meeting["date"], start, end):
        return []
    meeting_type = meeting.get("type")
    return [
        {
            "id": f"{MEETING_ID_PREFIX}{meeting['id']}",
            "title": meeting["title"],
            "type": "build_day" if meeting_type == "build_day" else "meeting",
            "start_date": meeting["date"],
            "end_date": None,
            "all_day": not meeting.get("start_time"),
            "location": meeting.get("location"),
            "description": meeting.get("agenda"),
            "color": _meeting_color(meeting_type),
            "source": "meeting",
            "source_id": meeting["id"],
        }
    ]


def normalize_task(variant: TaskSource, start: int, end: int) -> list[CalendarEvent]:
    task = variant.record
    if not _in_range(task.get("due_date"), start, end):
        return []
    return [
        {
            "id": f"{TASK_ID_PREFIX}{task['id']}",
            "title": f"Due: {task['name']}",
            "type": "deadline",
            "start_date": task["due_date"],
            "end_date": None,
            "all_day": True,
            "location": None,
            "description": task.get("description"),
            "color": DEADLINE_COLOR,
            "source": "task",
            "source_id": task["id"],
        }
    ]


def normalize_project(variant: ProjectSource, start: int, end: int) -> list[CalendarEvent]:
    """
    Emit up to two milestones for a project.

    The end milestone is skipped when it falls on the same instant as the
    start so a one-day project shows up once.
    """
    project = variant.record
    start_date = project.get("start_date")
    end_date = project.get("end_date")
    events: list[CalendarEvent] = []

    if _in_range(start_date, start, end):
        events.append(
            {
                "id": f"{PROJECT_START_ID_PREFIX}{project['id']}",
                "title": f"Project Start: {project['name']}",
                "type": "project",
                "start_date": start_date,
                "end_date": end_date,
                "all_day": True,
                "location": None,
                "description": project.get("description"),
                "color": PROJECT_COLOR,
                "source": "project",
                "source_id": project["id"],
            }
        )

    if _in_range(end_date, start, end) and end_date != start_date:
        events.append(
            {
                "id": f"{PROJECT_END_ID_PREFIX}{project['id']}",
                "title": f"Project Due: {project['name']}",
                "type": "deadline",
                "start_date": end_date,
                "end_date": None,
                "all_day": True,
                "location": None,
                "description": project.get("description"),
                "color": PROJECT_COLOR,
                "source": "project",
                "source_id": project["id"],
            }
        )

    return events


NORMALIZERS = {
    CalendarSource: normalize_calendar_event,
    CompetitionSource: normalize_competition,
    MeetingSource: normalize_meeting,
    TaskSource: normalize_task,
    ProjectSource: normalize_project,
}


def normalize(variant: SourceRecord, start: int, end: int) -> list[CalendarEvent]:
    """Turn one tagged source record into zero or more in-range calendar events."""
    return NORMALIZERS[type(variant)](variant, start, end)


# =============================================================================
# SOURCE COLLECTION
# =============================================================================


def _read_source(reader, wrapper, skipped: list[str]) -> list[SourceRecord]:
    """Read one source and wrap the records that pass validation."""
    variants = []
    for record in reader():
        errors = validate_record(wrapper.source, record)
        if errors:
            record_id = record.get("id") if isinstance(record, dict) else None
            skipped.append(f"{wrapper.source} {record_id}: {'; '.join(errors)}")
            continue
        variants.append(wrapper(record))
    return variants


def collect_sources(readers: SourceReaders, skipped: list[str], include_all: bool = True) -> list[SourceRecord]:
    """
    Read every source in a fixed order: calendar, competition, meeting,
    task, project. Tasks and projects are left out when include_all is False.
    """
    sources = [
        (readers.calendar_events, CalendarSource),
        (readers.competitions, CompetitionSource),
        (readers.meetings, MeetingSource),
    ]
    if include_all:
        sources += [(readers.tasks, TaskSource), (readers.projects, ProjectSource)]

    variants: list[SourceRecord] = []
    for reader, wrapper in sources:
        variants.extend(_read_source(reader, wrapper, skipped))
    return variants


# =============================================================================
# AGGREGATOR
# =============================================================================


def get_events_in_range(
    readers: SourceReaders, start: int, end: int, skipped: list[str] | None = None
) -> list[CalendarEvent]:
    """
    Return every calendar event whose start date is within [start, end].

    Bad records are dropped and described in `skipped` (when given); they
    never abort the rest of the aggregation. Ties on start_date keep the
    source read order.
    """
    if skipped is None:
        skipped = []

    events: list[CalendarEvent] = []
    for variant in collect_sources(readers, skipped):
        try:
            events.extend(normalize(variant, start, end))
        except (KeyError, TypeError, ValueError) as e:
            skipped.append(f"{variant.source} {variant.record.get('id')}: {e}")

    if skipped:
        print(f"  Skipped {len(skipped)} malformed calendar record(s)")

    events.sort(key=lambda e: e["start_date"])
    return events


# =============================================================================
# UPCOMING PROJECTOR
# =============================================================================


def days_until(start_date: int, now: int) -> int:
    """Whole days from now until start_date, rounded up."""
    return -((now - start_date) // MS_PER_DAY)


def _to_upcoming(variant: SourceRecord, now: int) -> UpcomingEvent:
    record = variant.record
    if isinstance(variant, CalendarSource):
        return {
            "id": record["id"],
            "title": record["title"],
            "type": record["type"],
            "start_date": record["start_date"],
            "days_until": days_until(record["start_date"], now),
            "color": _event_color(record),
        }
    if isinstance(variant, CompetitionSource):
        return {
            "id": f"{COMPETITION_ID_PREFIX}{record['id']}",
            "title": record["name"],
            "type": "competition",
            "start_date": record["start_date"],
            "days_until": days_until(record["start_date"], now),
            "color": COMPETITION_COLOR,
        }
    # Meetings keep their own meeting type here (e.g. "strategy", "build_day")
    return {
        "id": f"{MEETING_ID_PREFIX}{record['id']}",
        "title": record["title"],
        "type": record.get("type") or "meeting",
        "start_date": record["date"],
        "days_until": days_until(record["date"], now),
        "color": _meeting_color(record.get("type")),
    }


def get_upcoming_events_summary(
    readers: SourceReaders, limit: int = DEFAULT_UPCOMING_LIMIT, now: int | None = None
) -> list[UpcomingEvent]:
    """
    Next `limit` events starting within the coming 30 days.

    Only calendar events, competitions and meetings are considered.
    """
    if now is None:
        now = now_ms()
    horizon = now + UPCOMING_HORIZON_DAYS * MS_PER_DAY

    skipped: list[str] = []
    upcoming: list[UpcomingEvent] = []
    for variant in collect_sources(readers, skipped, include_all=False):
        try:
            item = _to_upcoming(variant, now)
        except (KeyError, TypeError, ValueError) as e:
            skipped.append(f"{variant.source} {variant.record.get('id')}: {e}")
            continue
        if _in_range(item["start_date"], now, horizon):
            upcoming.append(item)

    if skipped:
        print(f"  Skipped {len(skipped)} malformed calendar record(s)")

    upcoming.sort(key=lambda e: e["start_date"])
    return upcoming[: max(limit, 0)]
