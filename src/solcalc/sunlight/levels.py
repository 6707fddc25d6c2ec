"""Classification of solar elevation into sunlight levels."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from solcalc.astro.solar import solar_elevation
from solcalc.contracts import SolarTimeOfDay, SunlightLevel

# Lower elevation bound (inclusive) of each level above NIGHT, brightest first.
_LEVEL_FLOORS: tuple[tuple[Decimal, SunlightLevel], ...] = (
    (Decimal(0), SunlightLevel.DAYLIGHT),
    (Decimal(-6), SunlightLevel.CIVIL_TWILIGHT),
    (Decimal(-12), SunlightLevel.NAUTICAL_TWILIGHT),
    (Decimal(-18), SunlightLevel.ASTRONOMICAL_TWILIGHT),
)

_RISING_END: dict[SunlightLevel, SolarTimeOfDay] = {
    SunlightLevel.NIGHT: SolarTimeOfDay.ASTRONOMICAL_DAWN,
    SunlightLevel.ASTRONOMICAL_TWILIGHT: SolarTimeOfDay.NAUTICAL_DAWN,
    SunlightLevel.NAUTICAL_TWILIGHT: SolarTimeOfDay.CIVIL_DAWN,
    SunlightLevel.CIVIL_TWILIGHT: SolarTimeOfDay.SUNRISE,
    SunlightLevel.DAYLIGHT: SolarTimeOfDay.SUNSET,
}

_SETTING_END: dict[SunlightLevel, SolarTimeOfDay] = {
    SunlightLevel.NIGHT: SolarTimeOfDay.ASTRONOMICAL_DAWN,
    SunlightLevel.ASTRONOMICAL_TWILIGHT: SolarTimeOfDay.ASTRONOMICAL_DUSK,
    SunlightLevel.NAUTICAL_TWILIGHT: SolarTimeOfDay.NAUTICAL_DUSK,
    SunlightLevel.CIVIL_TWILIGHT: SolarTimeOfDay.CIVIL_DUSK,
    SunlightLevel.DAYLIGHT: SolarTimeOfDay.SUNSET,
}

_RISING_START: dict[SunlightLevel, SolarTimeOfDay] = {
    SunlightLevel.NIGHT: SolarTimeOfDay.ASTRONOMICAL_DUSK,
    SunlightLevel.ASTRONOMICAL_TWILIGHT: SolarTimeOfDay.ASTRONOMICAL_DAWN,
    SunlightLevel.NAUTICAL_TWILIGHT: SolarTimeOfDay.NAUTICAL_DAWN,
    SunlightLevel.CIVIL_TWILIGHT: SolarTimeOfDay.CIVIL_DAWN,
    SunlightLevel.DAYLIGHT: SolarTimeOfDay.SUNRISE,
}

_SETTING_START: dict[SunlightLevel, SolarTimeOfDay] = {
    SunlightLevel.NIGHT: SolarTimeOfDay.ASTRONOMICAL_DUSK,
    SunlightLevel.ASTRONOMICAL_TWILIGHT: SolarTimeOfDay.NAUTICAL_DUSK,
    SunlightLevel.NAUTICAL_TWILIGHT: SolarTimeOfDay.CIVIL_DUSK,
    SunlightLevel.CIVIL_TWILIGHT: SolarTimeOfDay.SUNSET,
    SunlightLevel.DAYLIGHT: SolarTimeOfDay.SUNRISE,
}


def sunlight_level_for_elevation(elevation_deg: Decimal | float) -> SunlightLevel:
    """Map a solar elevation in degrees to its sunlight level."""
    elevation = Decimal(repr(elevation_deg)) if isinstance(elevation_deg, float) else elevation_deg
    for floor, level in _LEVEL_FLOORS:
        if elevation >= floor:
            return level
    return SunlightLevel.NIGHT


def sunlight_level_at(dt: datetime, lat_deg: float, lon_deg: float) -> SunlightLevel:
    """Return the sunlight level at a zoned instant and location.

    Weather, observer altitude and eclipses are not taken into account.
    """
    return sunlight_level_for_elevation(solar_elevation(dt, lat_deg, lon_deg))


def end_event(level: SunlightLevel, rising: bool) -> SolarTimeOfDay:
    """Return the event that ends `level` while the sun moves in the given direction.

    NIGHT can only end by rising and DAYLIGHT only by setting, whatever
    `rising` says.
    """
    return (_RISING_END if rising else _SETTING_END)[level]


def start_event(level: SunlightLevel, rising: bool) -> SolarTimeOfDay:
    """Return the event that starts `level` while the sun moves in the given direction."""
    return (_RISING_START if rising else _SETTING_START)[level]
