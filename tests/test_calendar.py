"""Tests for day and week boundary helpers."""

from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

from commandcenter.utils.calendar import (
    as_utc,
    end_of_day,
    end_of_week,
    get_zone,
    start_of_day,
    start_of_next_day,
    start_of_week,
)

UTC = timezone.utc
# Wednesday
NOW = datetime(2026, 10, 14, 15, 30, tzinfo=UTC)


def test_as_utc_treats_naive_as_utc():
    naive = datetime(2026, 1, 1, 12, 0)
    assert as_utc(naive) == datetime(2026, 1, 1, 12, 0, tzinfo=UTC)


def test_as_utc_converts_offsets():
    eastern = datetime(2026, 1, 1, 7, 0, tzinfo=ZoneInfo("America/New_York"))
    assert as_utc(eastern) == datetime(2026, 1, 1, 12, 0, tzinfo=UTC)


def test_day_boundaries_utc():
    tz = get_zone("UTC")
    assert start_of_day(NOW, tz) == datetime(2026, 10, 14, tzinfo=UTC)
    assert start_of_next_day(NOW, tz) == datetime(2026, 10, 15, tzinfo=UTC)
    assert end_of_day(NOW, tz) == datetime(2026, 10, 15, tzinfo=UTC) - timedelta(microseconds=1)


def test_day_boundaries_follow_configured_zone():
    tz = get_zone("Asia/Tokyo")
    # 15:30 UTC is already 00:30 the next day in Tokyo
    assert start_of_day(NOW, tz) == datetime(2026, 10, 14, 15, 0, tzinfo=UTC)


def test_week_runs_sunday_to_saturday_by_default():
    tz = get_zone("UTC")
    assert start_of_week(NOW, tz) == datetime(2026, 10, 11, tzinfo=UTC)
    assert end_of_week(NOW, tz) == datetime(2026, 10, 18, tzinfo=UTC) - timedelta(microseconds=1)


def test_week_can_start_on_monday():
    tz = get_zone("UTC")
    assert start_of_week(NOW, tz, week_starts_on=0) == datetime(2026, 10, 12, tzinfo=UTC)


def test_week_start_on_the_first_day_itself():
    tz = get_zone("UTC")
    sunday = datetime(2026, 10, 11, 0, 0, tzinfo=UTC)
    assert start_of_week(sunday, tz) == sunday
