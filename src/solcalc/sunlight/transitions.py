"""Search for the next instant at which the sunlight level changes.

The search walks solar half-days, from solar midnight to solar noon (sun
rising) or from noon to the next midnight (sun setting). A half-day whose end
is not on a later level in its direction holds no change and is skipped, which
covers polar day and night. Otherwise the crossing lies between the seed and
the end of the half-day: it is estimated from the roughly sinusoidal elevation
curve and refined with Newton steps that fall back to bisection whenever a step
leaves the bracket.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal

from solcalc.astro.solar import solar_elevation, solar_noon
from solcalc.config import DEFAULT_CONFIG, SolverConfig
from solcalc.contracts import SolarTimeOfDay, SunlightChange
from solcalc.precision.decimal_math import PI, asin, precision_context, sqrt
from solcalc.sunlight.levels import end_event, sunlight_level_for_elevation
from solcalc.time.zoned import (
    elapsed,
    is_after,
    is_before,
    plus,
    require_aware,
    seconds_to_timedelta,
)

_ONE_MICROSECOND = timedelta(microseconds=1)
_ONE_SECOND = timedelta(seconds=1)
_HALF_DAY = timedelta(hours=12)
_MIN_BRACKET = timedelta(microseconds=2)
_MAX_NEWTON_SECONDS = Decimal(12 * 3600)


class ConvergenceError(RuntimeError):
    """Raised in strict mode when Newton refinement runs out of iterations."""


class TransitionNotFoundError(RuntimeError):
    """Raised when polar skipping exceeds the configured budget."""


@dataclass(frozen=True)
class SolarExtrema:
    """Solar noons and midnights immediately before and after an instant."""

    previous_noon: datetime
    previous_midnight: datetime
    next_noon: datetime
    next_midnight: datetime


@dataclass(frozen=True)
class HalfDay:
    """Stretch between consecutive solar extrema over which the sun only rises or only sets."""

    begin: datetime
    end: datetime
    rising: bool


def surrounding_solar_extrema(start: datetime, lon_deg: float) -> SolarExtrema:
    """Find the nearest solar noon and midnight on each side of `start`.

    Candidate dates are scanned outwards from the local date of `start` in
    the order 0, +1, -1, +2, -2, ... until all four are known. Solar midnight
    is taken as the preceding solar noon plus 12 hours.
    """
    require_aware(start)
    zone = start.tzinfo
    assert zone is not None
    local_day = start.date()

    previous_noon: datetime | None = None
    previous_midnight: datetime | None = None
    next_noon: datetime | None = None
    next_midnight: datetime | None = None

    days_from_start = 0
    while previous_noon is None or previous_midnight is None or next_noon is None or next_midnight is None:
        noon = solar_noon(local_day + timedelta(days=days_from_start), zone, lon_deg)
        midnight = plus(noon, _HALF_DAY)

        if is_before(noon, start) and (previous_noon is None or is_after(noon, previous_noon)):
            previous_noon = noon
        if is_before(midnight, start) and (previous_midnight is None or is_after(midnight, previous_midnight)):
            previous_midnight = midnight
        if is_after(noon, start) and (next_noon is None or is_before(noon, next_noon)):
            next_noon = noon
        if is_after(midnight, start) and (next_midnight is None or is_before(midnight, next_midnight)):
            next_midnight = midnight

        days_from_start = -days_from_start + (1 if days_from_start <= 0 else 0)

    return SolarExtrema(
        previous_noon=previous_noon,
        previous_midnight=previous_midnight,
        next_noon=next_noon,
        next_midnight=next_midnight,
    )


def solar_half_day(at: datetime, lon_deg: float) -> HalfDay:
    """Return the half-day containing `at`; an extremum at `at` itself begins it."""
    extrema = surrounding_solar_extrema(plus(at, _ONE_MICROSECOND), lon_deg)
    if is_after(extrema.previous_midnight, extrema.previous_noon):
        return HalfDay(begin=extrema.previous_midnight, end=extrema.next_noon, rising=True)
    return HalfDay(begin=extrema.previous_noon, end=extrema.next_midnight, rising=False)


def _midpoint(lo: datetime, hi: datetime) -> datetime:
    return plus(lo, elapsed(lo, hi) / 2)


def _initial_guess(
    half_day: HalfDay,
    lo: datetime,
    begin_elevation: Decimal,
    end_elevation: Decimal,
    aim: Decimal,
) -> datetime:
    """Interpolate the crossing assuming elevation varies sinusoidally over the half-day.

    Falls back to the middle of (`lo`, `half_day.end`) when the aim lies
    outside the half-day's elevation range or the estimate leaves the bracket.
    """
    low, high = (
        (begin_elevation, end_elevation) if half_day.rising else (end_elevation, begin_elevation)
    )
    if not low < aim < high:
        return _midpoint(lo, half_day.end)

    with precision_context():
        fraction = 2 * asin(sqrt((aim - low) / (high - low))) / PI
    span = elapsed(half_day.begin, half_day.end)
    offset = fraction if half_day.rising else 1 - fraction
    guess = plus(half_day.begin, span * float(offset))
    if is_after(guess, lo) and is_before(guess, half_day.end):
        return guess
    return _midpoint(lo, half_day.end)


def _past_target(offset: Decimal, precision: Decimal, rising: bool) -> bool:
    """Whether an elevation `offset` beyond the target is on the new level and within precision."""
    return (offset >= 0 if rising else offset > 0) and offset <= precision


def _refine(
    guess: datetime,
    lo: datetime,
    hi: datetime,
    event: SolarTimeOfDay,
    lat_deg: float,
    lon_deg: float,
    config: SolverConfig,
) -> tuple[datetime, bool]:
    """Safeguarded Newton iteration for the crossing of `event` inside (lo, hi).

    The elevation is below the target at `lo` and past it at `hi`, measured in
    the event's direction. Steps aim half the precision past the target so a
    converged estimate already shows the new level. Returns
    `(estimate, converged)`; the estimate always lies inside the bracket.
    """
    rising = event.is_sun_rising
    direction = 1 if rising else -1
    precision = config.elevation_precision
    target = event.elevation

    with precision_context():
        aim = target + direction * precision / 2
        estimate = guess
        elevation = solar_elevation(estimate, lat_deg, lon_deg)
        if _past_target(direction * (elevation - target), precision, rising):
            return estimate, True

        for _ in range(1, config.max_iterations):
            if direction * (elevation - aim) < 0:
                lo = estimate
            else:
                hi = estimate

            candidate: datetime | None = None
            rate = solar_elevation(plus(estimate, _ONE_SECOND), lat_deg, lon_deg) - elevation
            if rate != 0:
                seconds = max(-_MAX_NEWTON_SECONDS, min(_MAX_NEWTON_SECONDS, (aim - elevation) / rate))
                candidate = plus(estimate, seconds_to_timedelta(seconds))
            if candidate is None or not (is_after(candidate, lo) and is_before(candidate, hi)):
                if elapsed(lo, hi) <= _MIN_BRACKET:
                    break
                candidate = _midpoint(lo, hi)

            estimate = candidate
            elevation = solar_elevation(estimate, lat_deg, lon_deg)
            if _past_target(direction * (elevation - target), precision, rising):
                return estimate, True
    return estimate, False


def next_sunlight_change(
    start: datetime,
    lat_deg: float,
    lon_deg: float,
    config: SolverConfig | None = None,
) -> SunlightChange:
    """Return the next change in sunlight level strictly after `start`.

    Args:
        start: Timezone-aware datetime. Its UTC offset must be the one in
            effect at the location.
        lat_deg: Latitude in degrees, north positive.
        lon_deg: Longitude in degrees east.
        config: Precision and iteration limits; `DEFAULT_CONFIG` when omitted.

    Returns:
        The change, with its time expressed in the zone of `start`. When
        refinement converged, the elevation at that time is within
        `config.elevation_precision` of the event elevation and already
        classifies as the event's new level.

    Raises:
        ConvergenceError: Newton refinement did not reach the requested
            precision and `config.strict_convergence` is set.
        TransitionNotFoundError: More than `config.max_polar_skips`
            consecutive half-days held no change.
    """
    cfg = config or DEFAULT_CONFIG
    require_aware(start)
    seed = start

    for _ in range(cfg.max_polar_skips + 1):
        half_day = solar_half_day(seed, lon_deg)
        level = sunlight_level_for_elevation(solar_elevation(seed, lat_deg, lon_deg))
        end_elevation = solar_elevation(half_day.end, lat_deg, lon_deg)
        end_level = sunlight_level_for_elevation(end_elevation)

        # Polar day/night: no change before the next noon or midnight.
        if (end_level <= level) if half_day.rising else (end_level >= level):
            seed = half_day.end
            continue

        event = end_event(level, half_day.rising)
        direction = 1 if half_day.rising else -1
        with precision_context():
            end_offset = direction * (end_elevation - event.elevation)
            aim = event.elevation + direction * cfg.elevation_precision / 2
        if _past_target(end_offset, cfg.elevation_precision, half_day.rising):
            estimate, converged = half_day.end, True
        else:
            begin_elevation = solar_elevation(half_day.begin, lat_deg, lon_deg)
            guess = _initial_guess(half_day, seed, begin_elevation, end_elevation, aim)
            estimate, converged = _refine(guess, seed, half_day.end, event, lat_deg, lon_deg, cfg)

        if not converged and cfg.strict_convergence:
            raise ConvergenceError(
                f"{event.value} did not converge within {cfg.max_iterations} iterations "
                f"(lat={lat_deg}, lon={lon_deg}, start={start.isoformat()})"
            )
        return SunlightChange(time=estimate.astimezone(start.tzinfo), name=event)

    raise TransitionNotFoundError(
        f"no sunlight change found after {cfg.max_polar_skips} polar skips "
        f"(lat={lat_deg}, lon={lon_deg}, start={start.isoformat()})"
    )
