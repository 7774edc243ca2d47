#!/usr/bin/env python3
"""
List the unified calendar feed for a date range, rendered in a timezone.

Usage:
    uv run python src/scripts/list_events.py --start 2025-11-01 --end 2025-11-30 --zone America/New_York
    uv run python src/scripts/list_events.py --upcoming 10
"""

import argparse
import sys
from datetime import date, datetime
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.config import DB_PATH, DEFAULT_UPCOMING_LIMIT, UTC_ZONE
from core.database import get_connection, get_source_readers
from core.timezone import get_host_timezone
from models.events import TimezonePreference
from services.calendar import get_events_in_range, get_upcoming_events_summary
from services.timezone import date_to_utc_timestamp, format_date, get_timezone_offset


def get_month_range(today: date) -> tuple[date, date]:
    """First and last day of today's month."""
    first = today.replace(day=1)
    if first.month == 12:
        next_first = first.replace(year=first.year + 1, month=1)
    else:
        next_first = first.replace(month=first.month + 1)
    return first, date.fromordinal(next_first.toordinal() - 1)


def parse_args():
    parser = argparse.ArgumentParser(description="List team calendar events")
    parser.add_argument("--start", help="First day (YYYY-MM-DD), defaults to start of month")
    parser.add_argument("--end", help="Last day (YYYY-MM-DD), defaults to end of month")
    parser.add_argument("--zone", help="IANA zone to render in (default: host zone)")
    parser.add_argument(
        "--upcoming",
        type=int,
        nargs="?",
        const=DEFAULT_UPCOMING_LIMIT,
        help="Show the next N events in the coming 30 days instead of a range",
    )
    parser.add_argument("--db", type=Path, default=DB_PATH, help="Database path")
    return parser.parse_args()


def main():
    args = parse_args()

    zone = args.zone or get_host_timezone()
    pref = TimezonePreference(mode="utc" if zone == UTC_ZONE else "custom", zone=zone)

    conn = get_connection(args.db)
    try:
        readers = get_source_readers(conn)

        if args.upcoming is not None:
            print(f"Next {args.upcoming} events ({zone} {get_timezone_offset(pref)}):\n")
            for event in get_upcoming_events_summary(readers, args.upcoming):
                when = format_date(pref, event["start_date"])
                print(f"  {when:<26} in {event['days_until']:>2}d  {event['title']} [{event['type']}]")
            return

        first, last = get_month_range(date.today())
        start_day = datetime.strptime(args.start, "%Y-%m-%d").date() if args.start else first
        end_day = datetime.strptime(args.end, "%Y-%m-%d").date() if args.end else last

        # Whole civil days in the chosen zone
        start_ms = date_to_utc_timestamp(pref, start_day)
        end_ms = date_to_utc_timestamp(pref, end_day, "23:59") + 59_999

        skipped: list[str] = []
        events = get_events_in_range(readers, start_ms, end_ms, skipped)

        print(f"Events {start_day} to {end_day} ({zone} {get_timezone_offset(pref)}):\n")
        print("=" * 80)
        for event in events:
            when = format_date(pref, event["start_date"], "%Y-%m-%d" if event["all_day"] else None)
            print(f"  {when:<26} {event['title']}")
            print(f"      Type: {event['type']}  Source: {event['source']}  ID: {event['id']}")
            if event["location"]:
                print(f"      Location: {event['location']}")
        print("-" * 80)
        print(f"{len(events)} event(s)")

        for message in skipped:
            print(f"  Skipped: {message}")
    finally:
        conn.close()


if __name__ == "__main__":
    main()
