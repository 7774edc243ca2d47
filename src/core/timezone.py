"""
Time zone oracle: UTC offsets for IANA zones at a given instant.

The conversion code only talks to the TimeZoneOracle protocol, so the
zoneinfo backend can be swapped for a stub with fixed offsets in tests.
"""

import os
import re
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Protocol
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from core.config import DEFAULT_TIMEZONE, UTC_ZONE

# Matches "+05:30", "-0800", "+00:00" as produced by %z / isoformat
OFFSET_PATTERN = re.compile(r"([+-])(\d{2}):?(\d{2})")


class TimeZoneOracle(Protocol):
    def offset_minutes(self, zone: str, instant_ms: int) -> int:
        """UTC offset (local minus UTC, east positive) in effect at instant_ms."""
        ...


def parse_offset(offset_str: str) -> int | None:
    """Parse '+HH:MM' / '-HHMM' into signed minutes, None if it doesn't look like an offset."""
    match = OFFSET_PATTERN.search(offset_str or "")
    if not match:
        return None
    sign = 1 if match.group(1) == "+" else -1
    return sign * (int(match.group(2)) * 60 + int(match.group(3)))


def format_offset(minutes: int) -> str:
    """Render signed minutes as '+HH:MM'."""
    sign = "+" if minutes >= 0 else "-"
    hours, mins = divmod(abs(minutes), 60)
    return f"{sign}{hours:02d}:{mins:02d}"


class ZoneInfoOracle:
    """Oracle backed by the system tz database via zoneinfo."""

    def offset_minutes(self, zone: str, instant_ms: int) -> int:
        # Any failure to resolve degrades to UTC rather than raising
        try:
            local = datetime.fromtimestamp(instant_ms / 1000, tz=ZoneInfo(zone))
        except (ZoneInfoNotFoundError, ValueError, OverflowError, OSError, TypeError):
            return 0
        minutes = parse_offset(local.strftime("%z"))
        return minutes if minutes is not None else 0


_default_oracle = ZoneInfoOracle()


def get_default_oracle() -> TimeZoneOracle:
    return _default_oracle


def get_host_timezone() -> str:
    """
    Resolve the host's IANA zone name.

    Order: TEAM_CALENDAR_TIMEZONE, TZ, /etc/timezone, /etc/localtime symlink.
    Falls back to UTC when nothing usable is found.
    """
    candidates = [DEFAULT_TIMEZONE, os.environ.get("TZ", "").lstrip(":")]

    etc_timezone = Path("/etc/timezone")
    if etc_timezone.exists():
        try:
            candidates.append(etc_timezone.read_text(encoding="utf-8").strip())
        except OSError:
            pass

    localtime = Path("/etc/localtime")
    if localtime.is_symlink():
        target = str(localtime.resolve())
        if "zoneinfo/" in target:
            candidates.append(target.split("zoneinfo/", 1)[1])

    for name in candidates:
        if name and is_valid_zone(name):
            return name
    return UTC_ZONE


def is_valid_zone(name: str) -> bool:
    try:
        ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        return False
    return True


def now_ms() -> int:
    """Current wall-clock instant in epoch milliseconds."""
    return int(time.time() * 1000)


def ms_to_datetime(instant_ms: int, zone: str = UTC_ZONE) -> datetime:
    """Aware datetime for an epoch-millisecond instant rendered in zone."""
    if zone == UTC_ZONE:
        return datetime.fromtimestamp(instant_ms / 1000, tz=timezone.utc)
    return datetime.fromtimestamp(instant_ms / 1000, tz=ZoneInfo(zone))
