"""SQLite request logging for API."""

import sqlite3
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone


@dataclass
class RequestLog:
    """Captured request/response data for logging."""

    request_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    timestamp: str = field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )
    endpoint: str = ""
    method: str = ""
    client_ip: str | None = None
    session_id: str | None = None
    range_start: int | None = None
    range_end: int | None = None
    status_code: int = 0
    error_code: str | None = None
    error_message: str | None = None
    processing_time_ms: int = 0
    events_returned: int | None = None
    records_skipped: int | None = None
    details: list[tuple[str, str]] = field(default_factory=list)  # (type, message)


def log_request(log: RequestLog, conn: sqlite3.Connection) -> None:
    """Write request log to SQLite database."""
    cursor = conn.cursor()

    # Insert main request record
    cursor.execute(
        """
        INSERT INTO api_requests (
            request_id, timestamp, endpoint, method, client_ip, session_id,
            range_start, range_end, status_code, error_code, error_message,
            processing_time_ms, events_returned, records_skipped
        ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
    """,
        (
            log.request_id,
            log.timestamp,
            log.endpoint,
            log.method,
            log.client_ip,
            log.session_id,
            log.range_start,
            log.range_end,
            log.status_code,
            log.error_code,
            log.error_message,
            log.processing_time_ms,
            log.events_returned,
            log.records_skipped,
        ),
    )

    # Insert detail records
    for detail_type, message in log.details:
        cursor.execute(
            """
            INSERT INTO api_request_details (request_id, detail_type, message)
            VALUES (?, ?, ?)
        """,
            (log.request_id, detail_type, message),
        )

    conn.commit()
