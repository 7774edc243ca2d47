"""
Tests for the timezone oracle and civil/UTC conversions.
"""

from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from conftest import StubOracle
from core.timezone import ZoneInfoOracle, format_offset, parse_offset
from models.events import TimezonePreference
from services.timezone import (
    date_to_utc_timestamp,
    format_date,
    format_date_for_input,
    format_time_for_input,
    get_timezone_label,
    get_timezone_offset,
    parse_input_to_timestamp,
    utc_timestamp_to_date,
)

UTC_PREF = TimezonePreference(mode="utc", zone="UTC")
NEW_YORK = TimezonePreference(mode="custom", zone="America/New_York")
TOKYO = TimezonePreference(mode="custom", zone="Asia/Tokyo")
LOS_ANGELES = TimezonePreference(mode="custom", zone="America/Los_Angeles")


def utc_ms(*args) -> int:
    return int(datetime(*args, tzinfo=timezone.utc).timestamp() * 1000)


class TestOracle:
    def test_zoneinfo_offsets_follow_dst(self):
        oracle = ZoneInfoOracle()
        assert oracle.offset_minutes("America/New_York", utc_ms(2024, 1, 15, 12)) == -300
        assert oracle.offset_minutes("America/New_York", utc_ms(2024, 7, 15, 12)) == -240
        assert oracle.offset_minutes("Asia/Kolkata", utc_ms(2024, 7, 15, 12)) == 330
        assert oracle.offset_minutes("UTC", utc_ms(2024, 7, 15, 12)) == 0

    def test_unknown_zone_falls_back_to_zero(self):
        assert ZoneInfoOracle().offset_minutes("Not/AZone", utc_ms(2024, 1, 1)) == 0

    def test_parse_and_format_offset(self):
        assert parse_offset("+05:30") == 330
        assert parse_offset("-0800") == -480
        assert parse_offset("GMT") is None
        assert format_offset(330) == "+05:30"
        assert format_offset(-240) == "-04:00"
        assert format_offset(0) == "+00:00"


class TestDateToUtcTimestamp:
    def test_utc_zone_is_exact(self):
        result = date_to_utc_timestamp(UTC_PREF, date(2024, 3, 10), "14:30")

        assert result == utc_ms(2024, 3, 10, 14, 30)

    def test_utc_zone_defaults_to_midnight(self):
        assert date_to_utc_timestamp(UTC_PREF, date(2024, 3, 10)) == utc_ms(2024, 3, 10)

    def test_new_york_summer_from_utc_host(self):
        result = date_to_utc_timestamp(NEW_YORK, date(2024, 7, 1), "12:00", host_zone="UTC")

        assert result == utc_ms(2024, 7, 1, 16, 0)

    def test_tokyo_from_new_york_host(self):
        result = date_to_utc_timestamp(
            TOKYO, date(2024, 7, 1), "09:00", host_zone="America/New_York"
        )

        assert result == utc_ms(2024, 7, 1, 0, 0)

    def test_matches_zoneinfo_for_many_zones(self):
        for zone in ("Europe/London", "Australia/Sydney", "Pacific/Honolulu", "Asia/Shanghai"):
            pref = TimezonePreference(mode="custom", zone=zone)
            expected = int(datetime(2024, 11, 20, 8, 15, tzinfo=ZoneInfo(zone)).timestamp() * 1000)

            assert date_to_utc_timestamp(pref, date(2024, 11, 20), "08:15", host_zone="UTC") == expected

    def test_stub_oracle_offsets(self):
        oracle = StubOracle({"Asia/Kolkata": 330, "UTC": 0})
        pref = TimezonePreference(mode="custom", zone="Asia/Kolkata")

        result = date_to_utc_timestamp(pref, "2024-05-01", "10:00", oracle=oracle, host_zone="UTC")

        assert result == utc_ms(2024, 5, 1, 4, 30)
        assert {zone for zone, _ in oracle.calls} == {"Asia/Kolkata", "UTC"}

    def test_aware_datetime_is_reread_in_target_zone(self):
        # 02:00 UTC on July 1st is still June 30th in Los Angeles
        instant = datetime(2024, 7, 1, 2, 0, tzinfo=timezone.utc)

        result = date_to_utc_timestamp(LOS_ANGELES, instant, host_zone="UTC")

        assert result == utc_ms(2024, 6, 30, 7, 0)

    def test_naive_datetime_uses_host_zone(self):
        # 22:00 in New York on June 30th is July 1st in Tokyo
        result = date_to_utc_timestamp(
            TOKYO, datetime(2024, 6, 30, 22, 0), "09:00", host_zone="America/New_York"
        )

        assert result == utc_ms(2024, 7, 1, 0, 0)

    def test_nonexistent_spring_forward_time(self):
        result = date_to_utc_timestamp(NEW_YORK, date(2024, 3, 10), "02:30", host_zone="UTC")

        assert isinstance(result, int)
        assert result == utc_ms(2024, 3, 10, 7, 30)

    @pytest.mark.parametrize("host_zone", ["America/New_York", "Europe/Paris", "Asia/Tokyo"])
    def test_dst_gap_and_overlap_never_raise(self, host_zone):
        gap = date_to_utc_timestamp(NEW_YORK, date(2024, 3, 10), "02:30", host_zone=host_zone)
        overlap = date_to_utc_timestamp(NEW_YORK, date(2024, 11, 3), "01:30", host_zone=host_zone)

        assert isinstance(gap, int)
        assert isinstance(overlap, int)

    def test_unparseable_time_raises_value_error(self):
        with pytest.raises(ValueError):
            date_to_utc_timestamp(NEW_YORK, date(2024, 3, 10), "25:99", host_zone="UTC")


class TestParseInput:
    def test_empty_date_is_zero(self):
        assert parse_input_to_timestamp(NEW_YORK, "") == 0

    def test_use_utc_overrides_zone(self):
        assert parse_input_to_timestamp(NEW_YORK, "2024-03-10", "14:30", use_utc=True) == utc_ms(
            2024, 3, 10, 14, 30
        )

    def test_uses_preference_zone(self):
        result = parse_input_to_timestamp(NEW_YORK, "2024-01-15", "09:00", host_zone="UTC")

        assert result == utc_ms(2024, 1, 15, 14, 0)

    @pytest.mark.parametrize("host_zone", ["UTC", "Asia/Tokyo", "America/Los_Angeles"])
    def test_host_zone_does_not_change_result(self, host_zone):
        result = parse_input_to_timestamp(NEW_YORK, "2024-01-15", "09:00", host_zone=host_zone)

        assert result == utc_ms(2024, 1, 15, 14, 0)


class TestFormatting:
    def test_format_date_default(self):
        timestamp = utc_ms(2024, 3, 10, 14, 30)

        assert format_date(UTC_PREF, timestamp) == "Mar 10, 2024, 02:30 PM"
        assert format_date(NEW_YORK, timestamp) == "Mar 10, 2024, 10:30 AM"

    def test_format_date_custom_pattern(self):
        assert format_date(TOKYO, utc_ms(2024, 3, 10, 20, 0), "%Y-%m-%d %H:%M") == "2024-03-11 05:00"

    def test_input_helpers(self):
        timestamp = utc_ms(2024, 7, 1, 2, 5)

        assert format_date_for_input(LOS_ANGELES, timestamp) == "2024-06-30"
        assert format_time_for_input(LOS_ANGELES, timestamp) == "19:05"
        assert format_date_for_input(UTC_PREF, timestamp) == "2024-07-01"
        assert format_time_for_input(UTC_PREF, timestamp) == "02:05"
        assert format_date_for_input(UTC_PREF, 0) == ""
        assert format_time_for_input(UTC_PREF, 0) == ""

    def test_labels(self):
        assert get_timezone_label(UTC_PREF) == "UTC"
        assert get_timezone_label(TimezonePreference(mode="local", zone="Europe/Paris")) == "Europe/Paris (Local)"
        assert get_timezone_label(TOKYO) == "Asia/Tokyo"

    def test_offset_display(self):
        assert get_timezone_offset(UTC_PREF) == "+00:00"
        assert get_timezone_offset(NEW_YORK, at=utc_ms(2024, 7, 1)) == "-04:00"
        assert get_timezone_offset(NEW_YORK, at=utc_ms(2024, 1, 1)) == "-05:00"
        oracle = StubOracle({"Asia/Tokyo": 540})
        assert get_timezone_offset(TOKYO, oracle=oracle) == "+09:00"


class TestUtcTimestampToDate:
    def test_returns_same_instant(self):
        timestamp = utc_ms(2024, 3, 10, 14, 30)

        result = utc_timestamp_to_date(timestamp)

        assert result.tzinfo is not None
        assert int(result.timestamp() * 1000) == timestamp

    def test_missing_timestamp_is_now(self):
        before = datetime.now(timezone.utc)
        result = utc_timestamp_to_date(0)

        assert result >= before
