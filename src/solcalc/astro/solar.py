"""Solar position helpers.

Datetime-facing wrappers around the NOAA formulas in `solcalc.astro.noaa`.
All arithmetic runs in the fixed decimal context of
`solcalc.precision.decimal_math`, so results are reproducible across hosts.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, tzinfo
from decimal import Decimal

from solcalc.astro import noaa
from solcalc.contracts import SolarPosition
from solcalc.precision.decimal_math import precision_context
from solcalc.time.zoned import (
    local_minutes,
    minutes_to_timedelta,
    offset_hours,
    plus,
    require_aware,
    start_of_day,
)


@dataclass(frozen=True, slots=True)
class _TimeAndPlace:
    """Decimal inputs to the NOAA formulas for one zoned instant and location."""

    julian_century: Decimal
    local_time: Decimal
    zone_offset: Decimal
    latitude: Decimal
    longitude: Decimal

    @classmethod
    def of(cls, dt: datetime, lat_deg: float, lon_deg: float) -> _TimeAndPlace:
        require_aware(dt)
        minutes = local_minutes(dt)
        offset = offset_hours(dt)
        jd = noaa.julian_day(dt.year, dt.month, dt.day) + minutes / 1440 - offset / 24
        return cls(
            julian_century=noaa.julian_century(jd),
            local_time=minutes,
            zone_offset=offset,
            latitude=_to_decimal(lat_deg),
            longitude=_to_decimal(lon_deg),
        )

    def geometry(self) -> noaa.ZenithGeometry:
        return noaa.zenith_geometry(
            self.julian_century,
            self.local_time,
            self.latitude,
            self.longitude,
            self.zone_offset,
        )


def _to_decimal(value: float) -> Decimal:
    """Convert a coordinate through its shortest repr, not its binary expansion."""
    return Decimal(repr(float(value)))


def solar_position(dt: datetime, lat_deg: float, lon_deg: float) -> SolarPosition:
    """Compute solar azimuth, elevation and declination.

    Args:
        dt: Timezone-aware datetime. Its UTC offset must be the one in effect
            at the given location; this is not checked.
        lat_deg: Latitude in degrees, north positive.
        lon_deg: Longitude in degrees east of the prime meridian.

    Returns:
        `SolarPosition` with azimuth in [0, 360), refraction-corrected
        elevation and declination, all in degrees.
    """
    with precision_context():
        geometry = _TimeAndPlace.of(dt, lat_deg, lon_deg).geometry()
        return SolarPosition(
            azimuth=noaa.azimuth_from_geometry(geometry),
            elevation=noaa.elevation_from_zenith(geometry.zenith),
            declination=geometry.declination,
        )


def solar_elevation(dt: datetime, lat_deg: float, lon_deg: float) -> Decimal:
    """Return refraction-corrected solar elevation in degrees above the horizon."""
    with precision_context():
        geometry = _TimeAndPlace.of(dt, lat_deg, lon_deg).geometry()
        return noaa.elevation_from_zenith(geometry.zenith)


def solar_azimuth(dt: datetime, lat_deg: float, lon_deg: float) -> Decimal:
    """Return solar azimuth in degrees clockwise from true north, in [0, 360)."""
    with precision_context():
        geometry = _TimeAndPlace.of(dt, lat_deg, lon_deg).geometry()
        return noaa.azimuth_from_geometry(geometry)


def solar_noon(day: date, zone: tzinfo, lon_deg: float) -> datetime:
    """Return the instant of solar transit on `day` at longitude `lon_deg`.

    The UTC offset is taken at the start of `day` in `zone`, and the result is
    that start of day plus the computed number of minutes.
    """
    midnight = start_of_day(day, zone)
    with precision_context():
        minutes = noaa.solar_noon_minutes(
            noaa.julian_day(day.year, day.month, day.day),
            _to_decimal(lon_deg),
            offset_hours(midnight),
        )
    return plus(midnight, minutes_to_timedelta(minutes))
