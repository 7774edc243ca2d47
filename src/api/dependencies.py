"""FastAPI dependencies for authentication and shared resources."""

import secrets
import sqlite3
from typing import Iterator

from fastapi import Depends, Header, HTTPException, status

from core.config import TEAM_CALENDAR_API_KEY
from core.database import get_connection
from services.timezone import TimezonePreferenceStore


async def verify_api_key(x_api_key: str = Header(..., alias="X-API-Key")) -> str:
    """
    Verify API key from X-API-Key header.

    Raises:
        HTTPException: 401 if key is missing or invalid
    """
    if not TEAM_CALENDAR_API_KEY:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "error": "API key not configured on server",
                "code": "INTERNAL_ERROR",
                "details": [],
            },
        )

    # Use constant-time comparison to prevent timing attacks
    if not secrets.compare_digest(x_api_key, TEAM_CALENDAR_API_KEY):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={
                "error": "Invalid or missing API key",
                "code": "UNAUTHORIZED",
                "details": [],
            },
        )

    return x_api_key


def get_db() -> Iterator[sqlite3.Connection]:
    """Open a connection for the duration of one request."""
    conn = get_connection()
    try:
        yield conn
    finally:
        conn.close()


def get_session_id(x_session_id: str = Header("default", alias="X-Session-Id")) -> str:
    return x_session_id


def get_timezone_store(
    conn: sqlite3.Connection = Depends(get_db),
    session_id: str = Depends(get_session_id),
) -> TimezonePreferenceStore:
    """Preference store scoped to the caller's session."""
    return TimezonePreferenceStore(conn, session_id)
