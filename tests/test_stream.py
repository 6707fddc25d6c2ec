"""Tests for the lazy sunlight change stream."""

from __future__ import annotations

from datetime import UTC, date, datetime, timedelta, tzinfo
from itertools import islice, pairwise
from zoneinfo import ZoneInfo

import pytest

from solcalc.astro.solar import solar_elevation
from solcalc.config import SolverConfig
from solcalc.contracts import SolarTimeOfDay, SunlightChange
from solcalc.sunlight.levels import sunlight_level_at
from solcalc.sunlight.stream import SunlightChangeStream, sunlight_changes
from solcalc.sunlight.transitions import TransitionNotFoundError
from solcalc.time.zoned import elapsed, is_before, start_of_day

LOS_ANGELES = ZoneInfo("America/Los_Angeles")
BERLIN = ZoneInfo("Europe/Berlin")
SANTA_CLARA = (37.35, -121.95)
SVALBARD = (78.92, 11.93)


def _changes_on(day: date, zone: ZoneInfo, lat: float, lon: float) -> list[SunlightChange]:
    start = start_of_day(day, zone)
    end = start_of_day(day + timedelta(days=1), zone)
    return list(sunlight_changes(start, lat, lon).take_until(end))


def _assert_schedule(
    changes: list[SunlightChange],
    day: date,
    zone: ZoneInfo,
    expected: list[tuple[SolarTimeOfDay, int, int]],
) -> None:
    assert [change.name for change in changes] == [name for name, _, _ in expected]
    for change, (_, hour, minute) in zip(changes, expected, strict=True):
        target = datetime(day.year, day.month, day.day, hour, minute, tzinfo=zone)
        assert abs(elapsed(target, change.time)) <= timedelta(minutes=2), change


def test_full_day_mid_latitude() -> None:
    """Santa Clara sees all eight events on 2024-01-28."""
    day = date(2024, 1, 28)
    changes = _changes_on(day, LOS_ANGELES, *SANTA_CLARA)

    _assert_schedule(
        changes,
        day,
        LOS_ANGELES,
        [
            (SolarTimeOfDay.ASTRONOMICAL_DAWN, 5, 44),
            (SolarTimeOfDay.NAUTICAL_DAWN, 6, 15),
            (SolarTimeOfDay.CIVIL_DAWN, 6, 46),
            (SolarTimeOfDay.SUNRISE, 7, 14),
            (SolarTimeOfDay.SUNSET, 17, 27),
            (SolarTimeOfDay.CIVIL_DUSK, 17, 55),
            (SolarTimeOfDay.NAUTICAL_DUSK, 18, 26),
            (SolarTimeOfDay.ASTRONOMICAL_DUSK, 18, 57),
        ],
    )


def test_full_day_high_latitude_twilight() -> None:
    """Svalbard in September dips only into nautical twilight around midnight."""
    day = date(2024, 9, 10)
    changes = _changes_on(day, BERLIN, *SVALBARD)

    _assert_schedule(
        changes,
        day,
        BERLIN,
        [
            (SolarTimeOfDay.CIVIL_DUSK, 0, 28),
            (SolarTimeOfDay.CIVIL_DAWN, 1, 53),
            (SolarTimeOfDay.SUNRISE, 5, 15),
            (SolarTimeOfDay.SUNSET, 20, 58),
            (SolarTimeOfDay.CIVIL_DUSK, 23, 57),
        ],
    )


def test_midnight_sun_day_has_no_changes() -> None:
    """Svalbard in mid-April stays in daylight all day."""
    assert _changes_on(date(2024, 4, 17), BERLIN, *SVALBARD) == []


def test_stream_is_ordered_and_chains_levels() -> None:
    """Successive changes are strictly increasing and continue the level chain."""
    start = datetime(2024, 1, 28, 12, 0, tzinfo=LOS_ANGELES)
    changes = list(islice(sunlight_changes(start, *SANTA_CLARA), 10))

    assert is_before(start, changes[0].time)
    for earlier, later in pairwise(changes):
        assert is_before(earlier.time, later.time)
        assert later.previous_level == earlier.new_level


def test_stream_is_its_own_iterator() -> None:
    """The stream is forward-only; iterating again continues where it stopped."""
    stream = SunlightChangeStream(datetime(2024, 1, 28, 0, 0, tzinfo=LOS_ANGELES), *SANTA_CLARA)
    first = next(stream)
    second = next(iter(stream))

    assert iter(stream) is stream
    assert first.name is SolarTimeOfDay.ASTRONOMICAL_DAWN
    assert second.name is SolarTimeOfDay.NAUTICAL_DAWN


def _changes_within(
    start: datetime, days: int, lat: float, lon: float, config: SolverConfig
) -> list[SunlightChange]:
    """Collect changes before `start + days`, stopping early when polar day or night sets in."""
    end = start + timedelta(days=days)
    changes: list[SunlightChange] = []
    try:
        for change in sunlight_changes(start, lat, lon, config).take_until(end):
            changes.append(change)
    except TransitionNotFoundError:
        pass
    return changes


@pytest.mark.parametrize(
    ("lat", "lon", "zone", "day"),
    [
        pytest.param(78.92, 11.93, BERLIN, date(2024, 2, 26), id="svalbard-polar-night-end"),
        pytest.param(78.92, 11.93, BERLIN, date(2024, 4, 14), id="svalbard-midnight-sun-onset"),
        pytest.param(78.92, 11.93, BERLIN, date(2024, 8, 28), id="svalbard-midnight-sun-end"),
        pytest.param(78.92, 11.93, BERLIN, date(2024, 10, 22), id="svalbard-polar-night-onset"),
        pytest.param(85.0, 0.0, UTC, date(2024, 3, 1), id="85n-twilight-only"),
        pytest.param(85.0, 0.0, UTC, date(2024, 3, 28), id="85n-midnight-sun-onset"),
        pytest.param(-78.0, 166.67, UTC, date(2024, 2, 22), id="78s-midnight-sun-end"),
        pytest.param(-78.0, 166.67, UTC, date(2024, 10, 17), id="78s-midnight-sun-onset"),
    ],
)
def test_high_latitude_changes_are_ordered_chained_and_precise(
    lat: float, lon: float, zone: tzinfo, day: date
) -> None:
    """Around polar day and night, every change is later than the last, continues its level and hits its elevation."""
    days = 3
    config = SolverConfig(strict_convergence=True, max_polar_skips=2 * days + 2)
    start = start_of_day(day, zone)
    changes = _changes_within(start, days, lat, lon, config)

    assert changes
    assert is_before(start, changes[0].time)
    for change in changes:
        elevation = solar_elevation(change.time, lat, lon)
        assert abs(elevation - change.name.elevation) <= config.elevation_precision, change
        assert sunlight_level_at(change.time, lat, lon) is change.new_level, change
    for earlier, later in pairwise(changes):
        assert is_before(earlier.time, later.time), (earlier, later)
        assert later.previous_level == earlier.new_level, (earlier, later)
