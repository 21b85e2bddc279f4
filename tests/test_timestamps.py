#!/usr/bin/env python3
"""
Tests for date parsing and timestamp normalization.

All relative forms are resolved against a fixed reference time,
Wednesday 2024-03-06 12:00.

Run with:
    python tests/run_tests.py test_timestamps
    python -m pytest tests/test_timestamps.py -v
"""

import sys
from datetime import date, datetime, timezone
from pathlib import Path

TOOL_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(TOOL_ROOT))

from components.chatparse.lib.timestamps import normalize_timestamp, parse_date

NOW = datetime(2024, 3, 6, 12, 0)  # a Wednesday
ARCHIVE_LINK = "https://acme.slack.com/archives/C0123ABC/p1700000000123"


# =============================================================================
# parse_date
# =============================================================================

def test_parse_date_rejects_rollover():
    """Feb 30 is rejected rather than rolled into March."""
    assert parse_date("Feb 30, 2024") is None


def test_parse_date_leap_year():
    assert parse_date("Feb 29, 2024") == date(2024, 2, 29)


def test_parse_date_non_leap_year():
    assert parse_date("Feb 29, 2023") is None


def test_parse_date_iso():
    assert parse_date("2024-03-04") == date(2024, 3, 4)
    assert parse_date("2024-02-30") is None


def test_parse_date_separator_text():
    assert parse_date("Monday, March 4th, 2024") == date(2024, 3, 4)


def test_parse_date_default_year():
    assert parse_date("March 4th", today=datetime(2023, 1, 1)) == date(2023, 3, 4)


def test_parse_date_month_abbreviations():
    assert parse_date("Sept 5, 2024") == date(2024, 9, 5)
    assert parse_date("Dec 31, 2024") == date(2024, 12, 31)


def test_parse_date_garbage():
    assert parse_date("nothing to see") is None
    assert parse_date("") is None


# =============================================================================
# normalize_timestamp: relative forms
# =============================================================================

def test_today_with_time():
    assert normalize_timestamp("Today at 3:45 PM", now=NOW) == datetime(2024, 3, 6, 15, 45)


def test_today_without_time_is_midnight():
    assert normalize_timestamp("Today", now=NOW) == datetime(2024, 3, 6)


def test_yesterday_with_time():
    assert normalize_timestamp("Yesterday at 9:02 AM", now=NOW) == datetime(2024, 3, 5, 9, 2)


def test_weekday_is_most_recent_past():
    assert normalize_timestamp("Monday at 10:00 AM", now=NOW) == datetime(2024, 3, 4, 10, 0)


def test_same_weekday_means_last_week():
    """Today is Wednesday, so "Wednesday" is a week ago."""
    assert normalize_timestamp("Wednesday", now=NOW) == datetime(2024, 2, 28)


# =============================================================================
# normalize_timestamp: clock forms
# =============================================================================

def test_bare_time_uses_context_date():
    assert normalize_timestamp("3:45 PM", context_date=date(2024, 3, 4), now=NOW) == \
        datetime(2024, 3, 4, 15, 45)


def test_bare_time_without_context_uses_now():
    assert normalize_timestamp("3:45 PM", now=NOW) == datetime(2024, 3, 6, 15, 45)


def test_24_hour_clock():
    assert normalize_timestamp("15:30", now=NOW) == datetime(2024, 3, 6, 15, 30)


def test_midnight_and_noon():
    assert normalize_timestamp("12:05 AM", now=NOW) == datetime(2024, 3, 6, 0, 5)
    assert normalize_timestamp("12:05 PM", now=NOW) == datetime(2024, 3, 6, 12, 5)


def test_out_of_range_clock_rejected():
    assert normalize_timestamp("13:45 PM", now=NOW) is None
    assert normalize_timestamp("3:75 PM", now=NOW) is None
    assert normalize_timestamp("25:00", now=NOW) is None


def test_time_with_seconds():
    assert normalize_timestamp("10:30:15 AM", context_date=date(2024, 3, 4), now=NOW) == \
        datetime(2024, 3, 4, 10, 30, 15)


def test_bracketed_time():
    assert normalize_timestamp("[3:45 PM]", now=NOW) == datetime(2024, 3, 6, 15, 45)


# =============================================================================
# normalize_timestamp: calendar forms
# =============================================================================

def test_month_day_at_time():
    assert normalize_timestamp("Feb 6th at 7:47 PM", now=NOW) == datetime(2024, 2, 6, 19, 47)


def test_month_day_uses_context_year():
    assert normalize_timestamp("Feb 6th at 7:47 PM", context_date=date(2022, 5, 1), now=NOW) == \
        datetime(2022, 2, 6, 19, 47)


def test_month_day_only_is_midnight():
    assert normalize_timestamp("March 4", now=NOW) == datetime(2024, 3, 4)


def test_month_day_rollover_rejected():
    assert normalize_timestamp("Feb 30", now=NOW) is None


def test_full_date_with_year():
    assert normalize_timestamp("Feb 6th, 2024 at 7:47 PM", now=NOW) == datetime(2024, 2, 6, 19, 47)


def test_month_and_year_fills_from_now_not_wall_clock():
    assert normalize_timestamp("Dec 2024", now=NOW) == datetime(2024, 12, 1)
    assert normalize_timestamp("Dec 2024", now=datetime(2030, 7, 19, 8, 30)) == datetime(2024, 12, 1)


def test_linked_month_and_year():
    assert normalize_timestamp(f"[Dec 2024]({ARCHIVE_LINK})", now=NOW) == datetime(2024, 12, 1)


def test_iso_string():
    assert normalize_timestamp("2024-03-04T10:30:00", now=NOW) == datetime(2024, 3, 4, 10, 30)


def test_iso_string_with_zulu():
    assert normalize_timestamp("2024-03-04T10:30:00Z", now=NOW) == \
        datetime(2024, 3, 4, 10, 30, tzinfo=timezone.utc)


def test_linked_timestamp_recurses():
    assert normalize_timestamp(f"[3:13 PM]({ARCHIVE_LINK})", context_date=date(2024, 3, 4), now=NOW) == \
        datetime(2024, 3, 4, 15, 13)


def test_linked_relative_timestamp():
    assert normalize_timestamp(f"[Yesterday at 9:02 AM]({ARCHIVE_LINK})", now=NOW) == \
        datetime(2024, 3, 5, 9, 2)


# =============================================================================
# normalize_timestamp: failures
# =============================================================================

def test_unparseable_returns_none():
    assert normalize_timestamp("sometime later", now=NOW) is None


def test_empty_returns_none():
    assert normalize_timestamp("", now=NOW) is None
    assert normalize_timestamp(None, now=NOW) is None
    assert normalize_timestamp("   ", now=NOW) is None


def test_never_raises():
    for raw in ("[", "()", "99:99:99", "Feb 99 at 1:00 PM", "Monday at 0:00 PM", "🎉", "[x](y)"):
        assert normalize_timestamp(raw, now=NOW) is None
