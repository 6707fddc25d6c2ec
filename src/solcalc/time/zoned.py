"""Instant arithmetic and field extraction for zoned datetimes.

Aware datetimes sharing a tzinfo compare and subtract by wall time, so every
helper here goes through UTC to work on instants instead.
"""

from __future__ import annotations

from datetime import UTC, date, datetime, timedelta, tzinfo
from decimal import Decimal

_MICROS_PER_MINUTE = Decimal(60_000_000)
_SECONDS_PER_HOUR = Decimal(3600)


def require_aware(dt: datetime) -> datetime:
    """Return `dt` unchanged, rejecting naive datetimes."""
    if dt.tzinfo is None or dt.utcoffset() is None:
        raise ValueError("dt must be timezone-aware.")
    return dt


def to_utc(dt: datetime) -> datetime:
    """Convert datetime to timezone-aware UTC, assuming UTC for naive values."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def plus(dt: datetime, delta: timedelta) -> datetime:
    """Add an exact duration to `dt`, keeping its zone."""
    return (to_utc(dt) + delta).astimezone(dt.tzinfo)


def elapsed(start: datetime, end: datetime) -> timedelta:
    """Return the exact duration from `start` to `end`."""
    return to_utc(end) - to_utc(start)


def is_before(dt: datetime, other: datetime) -> bool:
    """Return whether `dt` is strictly earlier than `other`."""
    return to_utc(dt) < to_utc(other)


def is_after(dt: datetime, other: datetime) -> bool:
    """Return whether `dt` is strictly later than `other`."""
    return to_utc(dt) > to_utc(other)


def local_minutes(dt: datetime) -> Decimal:
    """Return wall-clock minutes since local midnight."""
    whole = dt.hour * 60 + dt.minute
    micros = dt.second * 1_000_000 + dt.microsecond
    return Decimal(whole) + Decimal(micros) / _MICROS_PER_MINUTE


def offset_hours(dt: datetime) -> Decimal:
    """Return the UTC offset of `dt` in hours."""
    offset = require_aware(dt).utcoffset()
    assert offset is not None
    seconds = offset.days * 86_400 + offset.seconds
    return (Decimal(seconds) + Decimal(offset.microseconds) / 1_000_000) / _SECONDS_PER_HOUR


def start_of_day(day: date, zone: tzinfo) -> datetime:
    """Return the first instant of `day` in `zone`."""
    return datetime(day.year, day.month, day.day, tzinfo=zone)


def minutes_to_timedelta(minutes: Decimal) -> timedelta:
    """Convert decimal minutes to a microsecond-resolution timedelta."""
    return timedelta(microseconds=int((minutes * _MICROS_PER_MINUTE).to_integral_value()))


def seconds_to_timedelta(seconds: Decimal) -> timedelta:
    """Convert decimal seconds to a microsecond-resolution timedelta."""
    return timedelta(microseconds=int((seconds * 1_000_000).to_integral_value()))
