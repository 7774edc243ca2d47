"""
Configuration constants and environment setup.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# =============================================================================
# PATHS
# =============================================================================

PROJECT_ROOT = Path(__file__).parent.parent.parent
DB_PATH = Path(
    os.environ.get(
        "TEAM_CALENDAR_DB_PATH", str(PROJECT_ROOT / "data" / "db" / "team-calendar.db")
    )
)

# =============================================================================
# CALENDAR CONFIGURATION
# =============================================================================

MS_PER_DAY = 24 * 60 * 60 * 1000
UPCOMING_HORIZON_DAYS = 30
DEFAULT_UPCOMING_LIMIT = 5

# Types an ad-hoc calendar event may be stored with ("project" is synthetic only)
CALENDAR_EVENT_TYPES = {"competition", "meeting", "deadline", "build_day", "outreach", "other"}

COMPETITION_COLOR = "#f57e25"  # FTC orange
MEETING_COLOR = "#3b82f6"
BUILD_DAY_COLOR = "#22c55e"
DEADLINE_COLOR = "#ef4444"
PROJECT_COLOR = "#8b5cf6"
OTHER_COLOR = "#6b7280"

DEFAULT_EVENT_COLORS = {
    "competition": COMPETITION_COLOR,
    "meeting": MEETING_COLOR,
    "deadline": DEADLINE_COLOR,
    "build_day": BUILD_DAY_COLOR,
    "outreach": "#a855f7",
    "other": OTHER_COLOR,
}

COMPETITION_ID_PREFIX = "comp-"
MEETING_ID_PREFIX = "meeting-"
TASK_ID_PREFIX = "task-"
PROJECT_START_ID_PREFIX = "project-start-"
PROJECT_END_ID_PREFIX = "project-end-"

# =============================================================================
# TIMEZONE CONFIGURATION
# =============================================================================

UTC_ZONE = "UTC"
TIMEZONE_MODES = {"local", "utc", "custom"}

# Zones offered for the "custom" mode, in display order
SUPPORTED_TIMEZONES = [
    ("America/New_York", "Eastern Time (ET)"),
    ("America/Chicago", "Central Time (CT)"),
    ("America/Denver", "Mountain Time (MT)"),
    ("America/Los_Angeles", "Pacific Time (PT)"),
    ("America/Anchorage", "Alaska Time (AKT)"),
    ("Pacific/Honolulu", "Hawaii Time (HST)"),
    ("Europe/London", "London (GMT/BST)"),
    ("Europe/Paris", "Central European (CET)"),
    ("Asia/Tokyo", "Japan (JST)"),
    ("Asia/Shanghai", "China (CST)"),
    ("Australia/Sydney", "Sydney (AEST)"),
    (UTC_ZONE, "UTC"),
]
SUPPORTED_TIMEZONE_NAMES = {name for name, _ in SUPPORTED_TIMEZONES}

# Overrides host zone detection for the "local" mode when set
DEFAULT_TIMEZONE = os.environ.get("TEAM_CALENDAR_TIMEZONE", "")

# =============================================================================
# API CONFIGURATION
# =============================================================================

TEAM_CALENDAR_API_KEY = os.environ.get("TEAM_CALENDAR_API_KEY", "")
API_HOST = os.environ.get("API_HOST", "0.0.0.0")
API_PORT = int(os.environ.get("API_PORT", "8000"))
API_DEBUG = os.environ.get("API_DEBUG", "false").lower() == "true"
API_VERSION = "1.0.0"
