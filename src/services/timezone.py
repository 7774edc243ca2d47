"""
Timezone preference store and civil/UTC conversions.

Every conversion takes the TimezonePreference explicitly; nothing here
reads an ambient "current zone". The store only decides which
preference a session is using and persists changes to it.
"""

import sqlite3
from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

from core.config import SUPPORTED_TIMEZONES, UTC_ZONE
from core.database import load_timezone_preference, save_timezone_preference
from core.timezone import (
    TimeZoneOracle,
    format_offset,
    get_default_oracle,
    get_host_timezone,
    ms_to_datetime,
    now_ms,
)
from core.validation import validate_supported_zone, validate_timezone_mode
from models.events import TimezonePreference

UTC_PREFERENCE = TimezonePreference(mode="utc", zone=UTC_ZONE)


def _tzinfo(zone: str):
    return timezone.utc if zone == UTC_ZONE else ZoneInfo(zone)


# =============================================================================
# PREFERENCE STORE
# =============================================================================


class TimezonePreferenceStore:
    """
    Per-session {mode, zone} state backed by the timezone_preferences table.

    local  -> zone is the host zone, recomputed whenever the mode is entered
    utc    -> zone is always "UTC"
    custom -> zone stays as-is until set_zone() picks a supported zone;
              set_zone() from any mode switches to custom
    """

    def __init__(self, conn: sqlite3.Connection, session_id: str, host_zone: str | None = None):
        self.conn = conn
        self.session_id = session_id
        self.host_zone = host_zone or get_host_timezone()
        self._preference = self._load()

    def _load(self) -> TimezonePreference:
        stored = load_timezone_preference(self.conn, self.session_id)
        mode = stored["mode"] if stored else "local"
        zone = stored["zone"] if stored else None

        if mode == "utc":
            return TimezonePreference(mode="utc", zone=UTC_ZONE)
        if mode == "custom" and zone:
            return TimezonePreference(mode="custom", zone=zone)
        if mode == "custom":
            return TimezonePreference(mode="custom", zone=self.host_zone)
        return TimezonePreference(mode="local", zone=self.host_zone)

    def get_preference(self) -> TimezonePreference:
        return self._preference

    def set_mode(self, mode: str) -> TimezonePreference:
        validate_timezone_mode(mode)
        if mode == "utc":
            zone = UTC_ZONE
        elif mode == "local":
            zone = self.host_zone
        else:
            zone = self._preference.zone
        return self._save(TimezonePreference(mode=mode, zone=zone))

    def set_zone(self, zone: str) -> TimezonePreference:
        """Pick an explicit zone; this always puts the session in custom mode."""
        validate_supported_zone(zone)
        return self._save(TimezonePreference(mode="custom", zone=zone))

    def _save(self, preference: TimezonePreference) -> TimezonePreference:
        # Persist first so a failed write leaves the in-memory state untouched
        save_timezone_preference(self.conn, self.session_id, preference.mode, preference.zone)
        self._preference = preference
        return preference


def list_supported_timezones() -> list[dict]:
    return [{"value": value, "label": label} for value, label in SUPPORTED_TIMEZONES]


# =============================================================================
# FORMATTING
# =============================================================================


def format_date(pref: TimezonePreference, timestamp: int, fmt: str | None = None) -> str:
    """
    Render a UTC instant as civil time in the preference's zone.

    Without fmt the output reads like "Mar 10, 2024, 02:30 PM".
    """
    dt = ms_to_datetime(timestamp, pref.zone)
    if fmt:
        return dt.strftime(fmt)
    return f"{dt:%b} {dt.day}, {dt.year}, {dt:%I:%M %p}"


def format_date_for_input(pref: TimezonePreference, timestamp: int) -> str:
    """YYYY-MM-DD in the preference's zone, empty for a missing timestamp."""
    if not timestamp:
        return ""
    return ms_to_datetime(timestamp, pref.zone).date().isoformat()


def format_time_for_input(pref: TimezonePreference, timestamp: int) -> str:
    """24-hour HH:MM in the preference's zone, empty for a missing timestamp."""
    if not timestamp:
        return ""
    dt = ms_to_datetime(timestamp, pref.zone)
    return f"{dt.hour:02d}:{dt.minute:02d}"


def get_timezone_label(pref: TimezonePreference) -> str:
    if pref.mode == "utc":
        return "UTC"
    if pref.mode == "local":
        return f"{pref.zone} (Local)"
    return pref.zone


def get_timezone_offset(
    pref: TimezonePreference, at: int | None = None, oracle: TimeZoneOracle | None = None
) -> str:
    """Current offset of the preference's zone as '+HH:MM'."""
    if pref.zone == UTC_ZONE:
        return "+00:00"
    oracle = oracle or get_default_oracle()
    return format_offset(oracle.offset_minutes(pref.zone, at if at is not None else now_ms()))


# =============================================================================
# CONVERSION
# =============================================================================


def _civil_date_string(civil_date, zone: str, host_zone: str) -> str:
    """
    Canonical YYYY-MM-DD for civil_date as it reads in zone.

    A plain date or string is already civil. A naive datetime is treated
    as an instant in the host zone, an aware one as the instant it names;
    both are re-read in the target zone, which can land on a different day.
    """
    if isinstance(civil_date, str):
        return civil_date
    if isinstance(civil_date, datetime):
        if civil_date.tzinfo is None:
            civil_date = civil_date.replace(tzinfo=_tzinfo(host_zone))
        return civil_date.astimezone(_tzinfo(zone)).date().isoformat()
    if isinstance(civil_date, date):
        return civil_date.isoformat()
    raise TypeError(f"Unsupported civil date: {civil_date!r}")


def date_to_utc_timestamp(
    pref: TimezonePreference,
    civil_date,
    time_str: str | None = None,
    oracle: TimeZoneOracle | None = None,
    host_zone: str | None = None,
) -> int:
    """
    Convert a civil date (+ optional HH:MM) in the preference's zone to epoch millis.

    The wall-clock string is first read as a naive instant in the host zone,
    then shifted by (host offset - target offset) at that instant. DST gaps
    and overlaps resolve however the oracle resolves them.

    Raises:
        ValueError: if the date or time string cannot be parsed
    """
    oracle = oracle or get_default_oracle()
    host_zone = host_zone or get_host_timezone()

    date_str = _civil_date_string(civil_date, pref.zone, host_zone)
    time = time_str or "00:00"

    if pref.zone == UTC_ZONE:
        exact = datetime.fromisoformat(f"{date_str}T{time}:00+00:00")
        return round(exact.timestamp() * 1000)

    wall = datetime.fromisoformat(f"{date_str}T{time}:00")
    naive_ms = round(wall.replace(tzinfo=_tzinfo(host_zone)).timestamp() * 1000)

    target_offset_ms = oracle.offset_minutes(pref.zone, naive_ms) * 60_000
    host_offset_ms = oracle.offset_minutes(host_zone, naive_ms) * 60_000

    return naive_ms + host_offset_ms - target_offset_ms


def utc_timestamp_to_date(timestamp: int) -> datetime:
    """
    Wrap a UTC instant as an aware datetime without any zone shifting.

    This is not the inverse of date_to_utc_timestamp: the civil rendering
    is left to format_date / format_date_for_input at display time.
    A missing timestamp yields the current instant.
    """
    if not timestamp:
        return datetime.now(timezone.utc)
    return ms_to_datetime(timestamp, UTC_ZONE)


def parse_input_to_timestamp(
    pref: TimezonePreference,
    date_str: str,
    time_str: str | None = None,
    use_utc: bool = False,
    oracle: TimeZoneOracle | None = None,
    host_zone: str | None = None,
) -> int:
    """Form-input variant of date_to_utc_timestamp; 0 for an empty date."""
    if not date_str:
        return 0
    effective = UTC_PREFERENCE if use_utc else pref
    return date_to_utc_timestamp(effective, date_str, time_str, oracle=oracle, host_zone=host_zone)
