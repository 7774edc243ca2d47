"""
Source record validation.

Records that fail these checks are dropped from the calendar feed
rather than aborting the whole aggregation.
"""

import re

from core.config import CALENDAR_EVENT_TYPES, SUPPORTED_TIMEZONE_NAMES, TIMEZONE_MODES

HEX_COLOR_PATTERN = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")
TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")


def is_timestamp(value) -> bool:
    """Epoch millis must be a real int (bool is an int subclass, reject it)."""
    return isinstance(value, int) and not isinstance(value, bool)


def is_text(value) -> bool:
    return isinstance(value, str) and bool(value.strip())


def is_hex_color(value) -> bool:
    return isinstance(value, str) and bool(HEX_COLOR_PATTERN.match(value))


def is_valid_time(value) -> bool:
    """Check 'HH:MM' 24-hour format."""
    return isinstance(value, str) and bool(TIME_PATTERN.match(value))


def _check_optional_timestamp(record: dict, field: str, errors: list[str]):
    value = record.get(field)
    if value is not None and not is_timestamp(value):
        errors.append(f"Invalid {field} '{value}'")


def validate_calendar_event(record: dict) -> list[str]:
    errors = []
    if not is_text(record.get("id")):
        errors.append("Missing id")
    if not is_text(record.get("title")):
        errors.append("Missing title")
    if record.get("type") not in CALENDAR_EVENT_TYPES:
        errors.append(f"Invalid event type '{record.get('type')}'")
    if not is_timestamp(record.get("start_date")):
        errors.append("Missing start_date")
    _check_optional_timestamp(record, "end_date", errors)
    return errors


def validate_competition(record: dict) -> list[str]:
    errors = []
    if not is_text(record.get("id")):
        errors.append("Missing id")
    if not is_text(record.get("name")):
        errors.append("Missing name")
    if not is_timestamp(record.get("start_date")):
        errors.append("Missing start_date")
    _check_optional_timestamp(record, "end_date", errors)
    return errors


def validate_meeting(record: dict) -> list[str]:
    errors = []
    if not is_text(record.get("id")):
        errors.append("Missing id")
    if not is_text(record.get("title")):
        errors.append("Missing title")
    if not is_timestamp(record.get("date")):
        errors.append("Missing date")
    start_time = record.get("start_time")
    if start_time and not is_valid_time(start_time):
        errors.append(f"Invalid start_time '{start_time}'")
    return errors


def validate_task(record: dict) -> list[str]:
    errors = []
    if not is_text(record.get("id")):
        errors.append("Missing id")
    if not is_text(record.get("name")):
        errors.append("Missing name")
    _check_optional_timestamp(record, "due_date", errors)
    return errors


def validate_project(record: dict) -> list[str]:
    errors = []
    if not is_text(record.get("id")):
        errors.append("Missing id")
    if not is_text(record.get("name")):
        errors.append("Missing name")
    _check_optional_timestamp(record, "start_date", errors)
    _check_optional_timestamp(record, "end_date", errors)
    return errors


VALIDATORS = {
    "calendar": validate_calendar_event,
    "competition": validate_competition,
    "meeting": validate_meeting,
    "task": validate_task,
    "project": validate_project,
}


def validate_record(source: str, record) -> list[str]:
    """Return a list of problems with a source record (empty if usable)."""
    if not isinstance(record, dict):
        return [f"Record is not a mapping: {type(record).__name__}"]
    return VALIDATORS[source](record)


def validate_timezone_mode(mode: str) -> str:
    if mode not in TIMEZONE_MODES:
        raise ValueError(f"Invalid timezone mode '{mode}'")
    return mode


def validate_supported_zone(zone: str) -> str:
    if zone not in SUPPORTED_TIMEZONE_NAMES:
        raise ValueError(f"Unsupported timezone '{zone}'")
    return zone
