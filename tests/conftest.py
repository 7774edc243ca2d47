"""
Pytest configuration and shared fixtures.
"""

import sys
from pathlib import Path

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from core.database import SourceReaders, create_schema, get_connection  # noqa: E402

# 2026-01-01T00:00:00Z
T = 1_767_225_600_000
DAY = 24 * 60 * 60 * 1000


class StubOracle:
    """Oracle with fixed per-zone offsets, in minutes east of UTC."""

    def __init__(self, offsets: dict[str, int]):
        self.offsets = offsets
        self.calls: list[tuple[str, int]] = []

    def offset_minutes(self, zone: str, instant_ms: int) -> int:
        self.calls.append((zone, instant_ms))
        return self.offsets.get(zone, 0)


def make_readers(
    calendar_events=(), competitions=(), meetings=(), tasks=(), projects=()
) -> SourceReaders:
    """SourceReaders over in-memory lists."""
    return SourceReaders(
        calendar_events=lambda: list(calendar_events),
        competitions=lambda: list(competitions),
        meetings=lambda: list(meetings),
        tasks=lambda: list(tasks),
        projects=lambda: list(projects),
    )


@pytest.fixture
def conn():
    """In-memory database with the full schema."""
    connection = get_connection(":memory:")
    create_schema(connection)
    yield connection
    connection.close()


@pytest.fixture
def sample_competition():
    return {
        "id": "c1",
        "name": "Regional",
        "start_date": T + 5 * DAY,
        "end_date": T + 6 * DAY,
        "location": "Central High School",
        "notes": "Bring spare batteries",
    }


@pytest.fixture
def sample_meeting():
    return {
        "id": "m1",
        "title": "Team meeting",
        "type": "general",
        "date": T + 2 * DAY,
        "start_time": "18:00",
        "location": "Shop",
        "agenda": "Season planning",
    }


@pytest.fixture
def sample_calendar_event():
    return {
        "id": "e1",
        "title": "Library demo",
        "type": "outreach",
        "start_date": T + 3 * DAY,
        "end_date": T + 3 * DAY + 2 * 60 * 60 * 1000,
        "all_day": False,
        "location": "Main library",
        "description": None,
        "color": None,
    }
