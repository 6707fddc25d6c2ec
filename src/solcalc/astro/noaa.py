"""NOAA GML solar calculator formulas in Julian-century time.

Ported from the NOAA Global Monitoring Laboratory solar calculator
(https://gml.noaa.gov/grad/solcalc/). Inputs and outputs are `Decimal`
degrees or minutes; the grouping of each expression follows the published
formulas so fixed-precision rounding stays the same.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from solcalc.precision.decimal_math import (
    acos,
    asin,
    cos,
    deg_to_rad,
    floor,
    rad_to_deg,
    sin,
    tan,
)

J2000 = Decimal("2451545.0")
DAYS_PER_CENTURY = Decimal("36525.0")
MINUTES_PER_DAY = Decimal(1440)


@dataclass(frozen=True, slots=True)
class ZenithGeometry:
    """Intermediate values shared by the elevation and azimuth formulas."""

    zenith: Decimal
    latitude_rad: Decimal
    declination_rad: Decimal
    hour_angle: Decimal
    declination: Decimal


def julian_century(julian_date: Decimal) -> Decimal:
    """Return Julian centuries since J2000.0."""
    return (julian_date - J2000) / DAYS_PER_CENTURY


def julian_day(year: int, month: int, day: int) -> Decimal:
    """Return the Julian day number at 0h UT of a Gregorian calendar date."""
    if month <= 2:
        year -= 1
        month += 12

    century = floor(Decimal(year) / 100)
    return (
        floor(Decimal("365.25") * (year + Decimal(4716)))
        + floor(Decimal("30.6001") * (month + 1))
        + day
        + (2 - century)
        + floor(century / 4)
        - Decimal("1524.5")
    )


def geom_mean_long_sun(t: Decimal) -> Decimal:
    """Geometric mean longitude of the sun, degrees in [0, 360]."""
    l0 = Decimal("280.46646") + t * (Decimal("36000.76983") + t * Decimal("0.0003032"))
    while l0 > 360:
        l0 -= 360
    while l0 < 0:
        l0 += 360
    return l0


def geom_mean_anomaly_sun(t: Decimal) -> Decimal:
    """Geometric mean anomaly of the sun, degrees."""
    return Decimal("357.52911") + t * (Decimal("35999.05029") - Decimal("0.0001537") * t)


def eccentricity_earth_orbit(t: Decimal) -> Decimal:
    """Eccentricity of Earth's orbit, unitless."""
    return Decimal("0.016708634") - t * (Decimal("0.000042037") + Decimal("0.0000001267") * t)


def sun_eq_of_center(t: Decimal) -> Decimal:
    """Equation of centre of the sun, degrees."""
    mrad = deg_to_rad(geom_mean_anomaly_sun(t))
    return (
        sin(mrad) * (Decimal("1.914602") - t * (Decimal("0.004817") + Decimal("0.000014") * t))
        + sin(mrad + mrad) * (Decimal("0.019993") - Decimal("0.000101") * t)
        + sin(mrad + mrad + mrad) * Decimal("0.000289")
    )


def sun_true_long(t: Decimal) -> Decimal:
    """True longitude of the sun, degrees."""
    return geom_mean_long_sun(t) + sun_eq_of_center(t)


def _omega_rad(t: Decimal) -> Decimal:
    return deg_to_rad(Decimal("125.04") - Decimal("1934.136") * t)


def sun_apparent_long(t: Decimal, omega_rad: Decimal) -> Decimal:
    """Apparent longitude of the sun, degrees."""
    return sun_true_long(t) - Decimal("0.00569") - Decimal("0.00478") * sin(omega_rad)


def mean_obliquity_of_ecliptic(t: Decimal) -> Decimal:
    """Mean obliquity of the ecliptic, degrees."""
    seconds = Decimal("21.448") - t * (
        Decimal("46.8150") + t * (Decimal("0.00059") - t * Decimal("0.001813"))
    )
    return Decimal("23.0") + (Decimal("26.0") + seconds / Decimal("60.0")) / Decimal("60.0")


def obliquity_correction(t: Decimal, omega_rad: Decimal) -> Decimal:
    """Corrected obliquity of the ecliptic, degrees."""
    return mean_obliquity_of_ecliptic(t) + Decimal("0.00256") * cos(omega_rad)


def sun_declination(t: Decimal) -> Decimal:
    """Declination of the sun, degrees."""
    omega = _omega_rad(t)
    return rad_to_deg(
        asin(
            sin(deg_to_rad(obliquity_correction(t, omega)))
            * sin(deg_to_rad(sun_apparent_long(t, omega)))
        )
    )


def equation_of_time(t: Decimal) -> Decimal:
    """Equation of time, minutes."""
    l0_rad = deg_to_rad(geom_mean_long_sun(t))
    e = eccentricity_earth_orbit(t)
    m_rad = deg_to_rad(geom_mean_anomaly_sun(t))
    sinm = sin(m_rad)
    y = tan(deg_to_rad(obliquity_correction(t, _omega_rad(t))) / 2)
    y *= y

    return rad_to_deg(
        y * sin(2 * l0_rad)
        - 2 * e * sinm
        + 4 * e * y * sinm * cos(2 * l0_rad)
        - Decimal("0.5") * y * y * sin(4 * l0_rad)
        - Decimal("1.25") * e * e * sin(2 * m_rad)
    ) * 4


def refraction(elevation: Decimal) -> Decimal:
    """Atmospheric refraction correction in degrees for an apparent elevation."""
    if elevation > 85:
        return Decimal(0)

    if elevation > 5:
        te = tan(deg_to_rad(elevation))
        arc_seconds = (
            Decimal("58.1") / te
            - Decimal("0.07") / (te * te * te)
            + Decimal("0.000086") / (te * te * te * te * te)
        )
    elif elevation > Decimal("-0.575"):
        arc_seconds = Decimal("1735.0") + elevation * (
            Decimal("-518.2")
            + elevation * (Decimal("103.4") + elevation * (Decimal("-12.79") + elevation * Decimal("0.711")))
        )
    else:
        arc_seconds = Decimal("-20.774") / tan(deg_to_rad(elevation))
    return arc_seconds / Decimal("3600.0")


def zenith_geometry(
    t: Decimal,
    local_time: Decimal,
    latitude: Decimal,
    longitude: Decimal,
    zone: Decimal,
) -> ZenithGeometry:
    """Compute zenith angle and hour angle for local minutes and UTC offset hours."""
    latitude_rad = deg_to_rad(latitude)
    declination = sun_declination(t)
    declination_rad = deg_to_rad(declination)

    true_solar_time = local_time + (equation_of_time(t) + 4 * longitude - 60 * zone)
    while true_solar_time > MINUTES_PER_DAY:
        true_solar_time -= MINUTES_PER_DAY

    hour_angle = true_solar_time / 4 - 180
    if hour_angle < -180:
        hour_angle += 360

    csz = sin(latitude_rad) * sin(declination_rad) + cos(latitude_rad) * cos(declination_rad) * cos(
        deg_to_rad(hour_angle)
    )
    csz = min(Decimal(1), max(Decimal(-1), csz))

    return ZenithGeometry(
        zenith=rad_to_deg(acos(csz)),
        latitude_rad=latitude_rad,
        declination_rad=declination_rad,
        hour_angle=hour_angle,
        declination=declination,
    )


def elevation_from_zenith(zenith: Decimal) -> Decimal:
    """Refraction-corrected elevation, degrees."""
    return 90 - (zenith - refraction(90 - zenith))


def azimuth_from_geometry(geometry: ZenithGeometry) -> Decimal:
    """Azimuth clockwise from true north, degrees in [0, 360)."""
    zenith_rad = deg_to_rad(geometry.zenith)
    denominator = cos(geometry.latitude_rad) * sin(zenith_rad)
    if abs(denominator) > Decimal("0.001"):
        az_rad = (
            sin(geometry.latitude_rad) * cos(zenith_rad) - sin(geometry.declination_rad)
        ) / denominator
        az_rad = min(Decimal(1), max(Decimal(-1), az_rad))
        azimuth = 180 - rad_to_deg(acos(az_rad))
        if geometry.hour_angle > 0:
            azimuth = -azimuth
    else:
        azimuth = Decimal(180) if rad_to_deg(geometry.latitude_rad) > 0 else Decimal(0)

    if azimuth < 0:
        azimuth += 360
    return azimuth


def solar_noon_minutes(julian_date: Decimal, longitude: Decimal, zone: Decimal) -> Decimal:
    """Local solar noon in minutes after midnight, refined with a second pass."""
    t_noon = julian_century(julian_date - longitude / 360)
    eq_time = equation_of_time(t_noon)
    noon_offset = 720 - longitude * 4 - eq_time
    refined_t = julian_century(julian_date - Decimal("0.5") + noon_offset / MINUTES_PER_DAY)
    eq_time = equation_of_time(refined_t)

    noon_local = 720 - longitude * 4 - eq_time + zone * 60
    while noon_local < 0:
        noon_local += MINUTES_PER_DAY
    while noon_local >= MINUTES_PER_DAY:
        noon_local -= MINUTES_PER_DAY
    return noon_local
