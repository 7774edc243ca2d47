"""
SQLite database operations for the team calendar.

The competitions, meetings, tasks and projects tables are owned by the
rest of the team-management app; this module only reads them. The
calendar_events table is the one entity the calendar writes.
"""

import sqlite3
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from core.config import DB_PATH
from core.timezone import now_ms

SCHEMA = [
    """
    CREATE TABLE IF NOT EXISTS calendar_events (
        id TEXT PRIMARY KEY,
        title TEXT NOT NULL,
        type TEXT NOT NULL CHECK(type IN ('competition', 'meeting', 'deadline', 'build_day', 'outreach', 'other')),
        start_date INTEGER NOT NULL,
        end_date INTEGER,
        all_day INTEGER NOT NULL DEFAULT 0,
        location TEXT,
        description TEXT,
        color TEXT,
        created_at INTEGER NOT NULL,
        updated_at INTEGER NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS competitions (
        id TEXT PRIMARY KEY,
        name TEXT NOT NULL,
        start_date INTEGER NOT NULL,
        end_date INTEGER NOT NULL,
        location TEXT NOT NULL,
        notes TEXT
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS meetings (
        id TEXT PRIMARY KEY,
        title TEXT NOT NULL,
        type TEXT NOT NULL,
        date INTEGER NOT NULL,
        start_time TEXT,
        location TEXT,
        agenda TEXT
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS tasks (
        id TEXT PRIMARY KEY,
        name TEXT NOT NULL,
        description TEXT,
        due_date INTEGER
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS projects (
        id TEXT PRIMARY KEY,
        name TEXT NOT NULL,
        description TEXT,
        start_date INTEGER,
        end_date INTEGER
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS timezone_preferences (
        session_id TEXT PRIMARY KEY,
        mode TEXT NOT NULL CHECK(mode IN ('local', 'utc', 'custom')),
        zone TEXT,
        updated_at INTEGER NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS api_requests (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        request_id TEXT UNIQUE NOT NULL,
        timestamp TEXT NOT NULL,
        endpoint TEXT NOT NULL,
        method TEXT NOT NULL,
        client_ip TEXT,
        session_id TEXT,
        range_start INTEGER,
        range_end INTEGER,
        status_code INTEGER NOT NULL,
        error_code TEXT,
        error_message TEXT,
        processing_time_ms INTEGER NOT NULL,
        events_returned INTEGER,
        records_skipped INTEGER
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS api_request_details (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        request_id TEXT NOT NULL,
        detail_type TEXT NOT NULL CHECK(detail_type IN ('validation_error', 'skipped_record', 'warning')),
        message TEXT NOT NULL,
        FOREIGN KEY (request_id) REFERENCES api_requests(request_id)
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_calendar_events_start ON calendar_events(start_date)",
    "CREATE INDEX IF NOT EXISTS idx_api_requests_timestamp ON api_requests(timestamp)",
    "CREATE INDEX IF NOT EXISTS idx_api_requests_status ON api_requests(status_code)",
]

CALENDAR_EVENT_FIELDS = (
    "title", "type", "start_date", "end_date", "all_day", "location", "description", "color"
)

SOURCE_TABLES = ("calendar_events", "competitions", "meetings", "tasks", "projects")
REQUIRED_TABLES = (*SOURCE_TABLES, "timezone_preferences", "api_requests", "api_request_details")


class EventNotFoundError(LookupError):
    """Raised when updating or deleting a calendar event that doesn't exist."""


def get_connection(path: Path | str = DB_PATH) -> sqlite3.Connection:
    """Get a database connection with dict-like rows."""
    conn = sqlite3.connect(path, check_same_thread=False)
    conn.row_factory = sqlite3.Row
    return conn


def create_schema(conn: sqlite3.Connection):
    """Create all tables and indexes if they don't exist."""
    cursor = conn.cursor()
    for statement in SCHEMA:
        cursor.execute(statement)
    conn.commit()


def find_missing_tables(conn: sqlite3.Connection) -> list[str]:
    """Required tables that don't exist yet, in schema order."""
    existing = {
        row[0] for row in conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'")
    }
    return [table for table in REQUIRED_TABLES if table not in existing]


def check_database(path: Path | str = DB_PATH) -> str | None:
    """Describe why the calendar database is unusable, or None if it is ready."""
    if not Path(path).exists():
        return "Calendar database not found"
    conn = get_connection(path)
    try:
        missing = find_missing_tables(conn)
    except sqlite3.DatabaseError as e:
        return f"Calendar database unreadable: {e}"
    finally:
        conn.close()
    if missing:
        return f"Calendar database missing tables: {', '.join(missing)}"
    return None


# =============================================================================
# SOURCE READERS
# =============================================================================


def _fetch_all(conn: sqlite3.Connection, query: str) -> list[dict]:
    return [dict(row) for row in conn.execute(query).fetchall()]


def list_calendar_events(conn: sqlite3.Connection) -> list[dict]:
    rows = _fetch_all(conn, "SELECT * FROM calendar_events ORDER BY start_date")
    for row in rows:
        row["all_day"] = bool(row["all_day"])
    return rows


def list_competitions(conn: sqlite3.Connection) -> list[dict]:
    return _fetch_all(conn, "SELECT * FROM competitions ORDER BY start_date")


def list_meetings(conn: sqlite3.Connection) -> list[dict]:
    return _fetch_all(conn, "SELECT * FROM meetings ORDER BY date")


def list_tasks(conn: sqlite3.Connection) -> list[dict]:
    return _fetch_all(conn, "SELECT * FROM tasks ORDER BY due_date")


def list_projects(conn: sqlite3.Connection) -> list[dict]:
    return _fetch_all(conn, "SELECT * FROM projects ORDER BY start_date")


@dataclass
class SourceReaders:
    """One read-only list() capability per source collection."""

    calendar_events: Callable[[], list]
    competitions: Callable[[], list]
    meetings: Callable[[], list]
    tasks: Callable[[], list]
    projects: Callable[[], list]


def get_source_readers(conn: sqlite3.Connection) -> SourceReaders:
    """Bind the five table readers to a connection."""
    return SourceReaders(
        calendar_events=lambda: list_calendar_events(conn),
        competitions=lambda: list_competitions(conn),
        meetings=lambda: list_meetings(conn),
        tasks=lambda: list_tasks(conn),
        projects=lambda: list_projects(conn),
    )


# =============================================================================
# CALENDAR EVENT PERSISTENCE
# =============================================================================


def get_event(conn: sqlite3.Connection, event_id: str) -> dict | None:
    row = conn.execute("SELECT * FROM calendar_events WHERE id = ?", (event_id,)).fetchone()
    if row is None:
        return None
    event = dict(row)
    event["all_day"] = bool(event["all_day"])
    return event


def create_event(conn: sqlite3.Connection, fields: dict) -> str:
    """Insert an ad-hoc calendar event and return its id."""
    event_id = uuid.uuid4().hex
    now = now_ms()
    conn.execute(
        """
        INSERT INTO calendar_events (
            id, title, type, start_date, end_date, all_day,
            location, description, color, created_at, updated_at
        ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """,
        (
            event_id,
            fields["title"],
            fields["type"],
            fields["start_date"],
            fields.get("end_date"),
            int(bool(fields.get("all_day", False))),
            fields.get("location"),
            fields.get("description"),
            fields.get("color"),
            now,
            now,
        ),
    )
    conn.commit()
    return event_id


def update_event(conn: sqlite3.Connection, event_id: str, fields: dict):
    """Patch only the supplied (non-None) fields and bump updated_at."""
    updates = {
        key: value
        for key, value in fields.items()
        if key in CALENDAR_EVENT_FIELDS and value is not None
    }
    if "all_day" in updates:
        updates["all_day"] = int(bool(updates["all_day"]))
    updates["updated_at"] = now_ms()

    assignments = ", ".join(f"{key} = ?" for key in updates)
    cursor = conn.execute(
        f"UPDATE calendar_events SET {assignments} WHERE id = ?",
        (*updates.values(), event_id),
    )
    if cursor.rowcount == 0:
        conn.rollback()
        raise EventNotFoundError(f"Calendar event '{event_id}' not found")
    conn.commit()


def delete_event(conn: sqlite3.Connection, event_id: str):
    cursor = conn.execute("DELETE FROM calendar_events WHERE id = ?", (event_id,))
    if cursor.rowcount == 0:
        conn.rollback()
        raise EventNotFoundError(f"Calendar event '{event_id}' not found")
    conn.commit()


# =============================================================================
# TIMEZONE PREFERENCES
# =============================================================================


def load_timezone_preference(conn: sqlite3.Connection, session_id: str) -> dict | None:
    row = conn.execute(
        "SELECT mode, zone FROM timezone_preferences WHERE session_id = ?",
        (session_id,),
    ).fetchone()
    return dict(row) if row else None


def save_timezone_preference(conn: sqlite3.Connection, session_id: str, mode: str, zone: str):
    """Write mode and zone together in one statement."""
    with conn:
        conn.execute(
            """
            INSERT INTO timezone_preferences (session_id, mode, zone, updated_at)
            VALUES (?, ?, ?, ?)
            ON CONFLICT(session_id) DO UPDATE SET
                mode = excluded.mode,
                zone = excluded.zone,
                updated_at = excluded.updated_at
            """,
            (session_id, mode, zone, now_ms()),
        )
