#!/usr/bin/env python3
"""
Generate a season of robotics-team data (calendar events, competitions,
meetings, tasks, projects) and store it in the team-calendar SQLite database.

Usage:
    uv run python tests/fixtures/generate_team_data.py --start 2025-11-01 --weeks 8
"""

import argparse
import random
import sqlite3
import sys
import uuid
from datetime import date, datetime, timedelta
from pathlib import Path
from zoneinfo import ZoneInfo

from faker import Faker

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent / "src"))

from core.config import CALENDAR_EVENT_TYPES, DB_PATH
from core.database import create_schema, get_connection

# Initialize Faker
fake = Faker()

# Team timezone
TEAM_TZ = ZoneInfo("America/New_York")

COMPETITION_NAMES = [
    "League Meet",
    "Scrimmage",
    "Regional Qualifier",
    "State Championship",
    "Invitational",
]

MEETING_TYPES = [
    "build_day",
    "strategy",
    "outreach",
    "mentor_meeting",
    "competition_prep",
    "general",
    "code_review",
]

MEETING_TITLES = {
    "build_day": ["Drivetrain build", "Intake prototyping", "Wiring cleanup", "Arm rebuild"],
    "strategy": ["Match strategy review", "Alliance selection planning"],
    "outreach": ["Library demo", "Elementary school visit", "STEM night"],
    "mentor_meeting": ["Mentor check-in", "Design review with mentors"],
    "competition_prep": ["Pit checklist", "Driver practice"],
    "general": ["Team meeting", "Season kickoff"],
    "code_review": ["Autonomous code review", "TeleOp code review"],
}

PROJECT_NAMES = [
    "Drivetrain",
    "Intake",
    "Lift",
    "Autonomous",
    "Engineering Notebook",
    "Sponsorship Packet",
]

TASK_VERBS = ["Finish", "Test", "Document", "Order parts for", "CAD", "Review"]


def new_id() -> str:
    return uuid.uuid4().hex


def local_ms(day: date, hour: int = 0, minute: int = 0) -> int:
    """Epoch millis for a wall-clock time in the team timezone."""
    dt = datetime(day.year, day.month, day.day, hour, minute, tzinfo=TEAM_TZ)
    return int(dt.timestamp() * 1000)


def generate_team_data(start: date, weeks: int = 8, seed: int | None = None) -> dict[str, list[dict]]:
    """Generate rows for all five source tables, keyed by table name."""
    if seed is not None:
        random.seed(seed)
        Faker.seed(seed)

    days = [start + timedelta(days=offset) for offset in range(weeks * 7)]
    data: dict[str, list[dict]] = {
        "calendar_events": [],
        "competitions": [],
        "meetings": [],
        "tasks": [],
        "projects": [],
    }

    # Competitions roughly every third Saturday
    saturdays = [d for d in days if d.weekday() == 5]
    for saturday in saturdays[::3]:
        data["competitions"].append(
            {
                "id": new_id(),
                "name": f"{fake.city()} {random.choice(COMPETITION_NAMES)}",
                "start_date": local_ms(saturday, 8),
                "end_date": local_ms(saturday + timedelta(days=1), 17),
                "location": f"{fake.city()} High School",
                "notes": fake.sentence(nb_words=8) if random.random() < 0.5 else None,
            }
        )

    # Meetings on weekdays, some without a start time (all-day)
    for day in days:
        if day.weekday() not in (1, 3, 5):
            continue
        meeting_type = "build_day" if day.weekday() == 5 else random.choice(MEETING_TYPES)
        has_time = random.random() < 0.8
        data["meetings"].append(
            {
                "id": new_id(),
                "title": random.choice(MEETING_TITLES[meeting_type]),
                "type": meeting_type,
                "date": local_ms(day, 18 if has_time else 0),
                "start_time": "18:00" if has_time else None,
                "location": random.choice(["Shop", "Room 204", "Library", None]),
                "agenda": fake.sentence(nb_words=10) if random.random() < 0.6 else None,
            }
        )

    # Projects spanning a few weeks; some one-day projects
    for name in PROJECT_NAMES:
        project_start = random.choice(days)
        if random.random() < 0.2:
            project_end = project_start
        else:
            project_end = project_start + timedelta(days=random.randint(7, 28))
        data["projects"].append(
            {
                "id": new_id(),
                "name": name,
                "description": fake.sentence(nb_words=12),
                "start_date": local_ms(project_start),
                "end_date": local_ms(project_end),
            }
        )

    # Tasks, about a quarter without a due date
    for _ in range(weeks * 3):
        due = random.choice(days)
        data["tasks"].append(
            {
                "id": new_id(),
                "name": f"{random.choice(TASK_VERBS)} {random.choice(PROJECT_NAMES).lower()}",
                "description": fake.sentence(nb_words=8) if random.random() < 0.5 else None,
                "due_date": local_ms(due, 23, 59) if random.random() < 0.75 else None,
            }
        )

    # Ad-hoc calendar events, occasionally with an explicit color
    event_types = sorted(CALENDAR_EVENT_TYPES)
    for _ in range(weeks * 2):
        day = random.choice(days)
        all_day = random.random() < 0.3
        start_ms = local_ms(day, 0 if all_day else random.randint(9, 19))
        data["calendar_events"].append(
            {
                "id": new_id(),
                "title": fake.catch_phrase(),
                "type": random.choice(event_types),
                "start_date": start_ms,
                "end_date": None if all_day else start_ms + 2 * 60 * 60 * 1000,
                "all_day": int(all_day),
                "location": fake.street_address() if random.random() < 0.4 else None,
                "description": fake.sentence(nb_words=10) if random.random() < 0.4 else None,
                "color": fake.hex_color() if random.random() < 0.2 else None,
                "created_at": start_ms,
                "updated_at": start_ms,
            }
        )

    return data


def insert_team_data(conn: sqlite3.Connection, data: dict[str, list[dict]]):
    """Insert generated rows into their tables."""
    cursor = conn.cursor()
    for table, rows in data.items():
        if not rows:
            continue
        columns = list(rows[0].keys())
        placeholders = ", ".join(f":{column}" for column in columns)
        cursor.executemany(
            f"INSERT INTO {table} ({', '.join(columns)}) VALUES ({placeholders})",
            rows,
        )
    conn.commit()


def print_summary(conn: sqlite3.Connection):
    """Print row counts per table."""
    print("\nRows generated:")
    for table in ("calendar_events", "competitions", "meetings", "tasks", "projects"):
        count = conn.execute(f"SELECT COUNT(*) FROM {table}").fetchone()[0]
        print(f"  {table}: {count}")


def main():
    parser = argparse.ArgumentParser(description="Generate sample team calendar data")
    parser.add_argument("--start", default=date.today().isoformat(), help="First day (YYYY-MM-DD)")
    parser.add_argument("--weeks", type=int, default=8)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--db", type=Path, default=DB_PATH)
    args = parser.parse_args()

    print("Creating database and generating team data...")

    args.db.parent.mkdir(parents=True, exist_ok=True)
    conn = get_connection(args.db)
    create_schema(conn)

    data = generate_team_data(
        datetime.strptime(args.start, "%Y-%m-%d").date(), args.weeks, args.seed
    )
    insert_team_data(conn, data)
    print_summary(conn)

    conn.close()
    print(f"\nDatabase saved to: {args.db}")


if __name__ == "__main__":
    main()
