"""Tests for zoned instant helpers."""

from datetime import UTC, date, datetime, timedelta, timezone
from decimal import Decimal
from zoneinfo import ZoneInfo

import pytest

from solcalc.time.zoned import (
    elapsed,
    is_after,
    is_before,
    local_minutes,
    minutes_to_timedelta,
    offset_hours,
    plus,
    start_of_day,
    to_utc,
)

BERLIN = ZoneInfo("Europe/Berlin")


def test_to_utc_with_naive_and_aware_datetimes() -> None:
    """Naive datetimes are treated as UTC; aware ones are converted."""
    assert to_utc(datetime(2024, 5, 12, 9, 37)) == datetime(2024, 5, 12, 9, 37, tzinfo=UTC)
    kst = timezone(timedelta(hours=9))
    assert to_utc(datetime(2024, 5, 13, 3, 5, tzinfo=kst)) == datetime(
        2024, 5, 12, 18, 5, tzinfo=UTC
    )


def test_plus_and_elapsed_use_instants_across_dst() -> None:
    """Arithmetic spans the spring-forward gap by exact duration."""
    before = datetime(2024, 3, 31, 1, 30, tzinfo=BERLIN)
    after = plus(before, timedelta(hours=1))

    assert (after.hour, after.minute) == (3, 30)
    assert after.tzinfo is BERLIN
    assert elapsed(before, after) == timedelta(hours=1)
    assert is_before(before, after)
    assert is_after(after, before)


def test_local_fields() -> None:
    """Wall-clock minutes and UTC offset are read from the zoned value."""
    dt = datetime(2024, 7, 1, 6, 30, 30, tzinfo=BERLIN)

    assert local_minutes(dt) == Decimal("390.5")
    assert offset_hours(dt) == 2
    assert offset_hours(datetime(2024, 1, 1, tzinfo=BERLIN)) == 1


def test_offset_hours_rejects_naive_datetime() -> None:
    """A naive datetime has no offset."""
    with pytest.raises(ValueError):
        offset_hours(datetime(2024, 1, 1))


def test_start_of_day_and_minute_conversion() -> None:
    """Day starts are local midnights and minutes convert at microsecond resolution."""
    assert start_of_day(date(2024, 9, 10), BERLIN) == datetime(2024, 9, 10, tzinfo=BERLIN)
    assert minutes_to_timedelta(Decimal("741.85")) == timedelta(minutes=741, seconds=51)
