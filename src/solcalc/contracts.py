"""Core data contracts for solar position and sunlight changes."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import IntEnum, StrEnum
from typing import Any


@dataclass(frozen=True, slots=True)
class SolarPosition:
    """Sun's angular position for one instant and location, in degrees."""

    azimuth: Decimal
    elevation: Decimal
    declination: Decimal

    def to_dict(self) -> dict[str, float]:
        """Serialize the position to a JSON-compatible dictionary."""
        return {
            "azimuth": float(self.azimuth),
            "elevation": float(self.elevation),
            "declination": float(self.declination),
        }


class SunlightLevel(IntEnum):
    """Amount of sunlight, ordered from darkest to brightest.

    Bands of refraction-corrected solar elevation:
    - NIGHT: below -18°
    - ASTRONOMICAL_TWILIGHT: -18° to -12°
    - NAUTICAL_TWILIGHT: -12° to -6°
    - CIVIL_TWILIGHT: -6° to 0°
    - DAYLIGHT: 0° and above
    """

    NIGHT = 0
    ASTRONOMICAL_TWILIGHT = 1
    NAUTICAL_TWILIGHT = 2
    CIVIL_TWILIGHT = 3
    DAYLIGHT = 4


class SolarTimeOfDay(StrEnum):
    """Named instant at which the solar elevation crosses a sunlight band boundary."""

    ASTRONOMICAL_DAWN = "astronomical_dawn"
    NAUTICAL_DAWN = "nautical_dawn"
    CIVIL_DAWN = "civil_dawn"
    SUNRISE = "sunrise"
    SUNSET = "sunset"
    CIVIL_DUSK = "civil_dusk"
    NAUTICAL_DUSK = "nautical_dusk"
    ASTRONOMICAL_DUSK = "astronomical_dusk"

    @property
    def elevation(self) -> Decimal:
        """Solar elevation in degrees at which this event happens."""
        return _EVENT_ELEVATIONS[self]

    @property
    def is_sun_rising(self) -> bool:
        """Whether the sun is climbing when this event happens."""
        return _EVENT_LEVELS[self][1] > _EVENT_LEVELS[self][0]

    @property
    def previous_level(self) -> SunlightLevel:
        """Sunlight level just before this event."""
        return _EVENT_LEVELS[self][0]

    @property
    def new_level(self) -> SunlightLevel:
        """Sunlight level on and after this event."""
        return _EVENT_LEVELS[self][1]


_EVENT_ELEVATIONS: dict[SolarTimeOfDay, Decimal] = {
    SolarTimeOfDay.ASTRONOMICAL_DAWN: Decimal(-18),
    SolarTimeOfDay.NAUTICAL_DAWN: Decimal(-12),
    SolarTimeOfDay.CIVIL_DAWN: Decimal(-6),
    SolarTimeOfDay.SUNRISE: Decimal(0),
    SolarTimeOfDay.SUNSET: Decimal(0),
    SolarTimeOfDay.CIVIL_DUSK: Decimal(-6),
    SolarTimeOfDay.NAUTICAL_DUSK: Decimal(-12),
    SolarTimeOfDay.ASTRONOMICAL_DUSK: Decimal(-18),
}

# (previous level, new level)
_EVENT_LEVELS: dict[SolarTimeOfDay, tuple[SunlightLevel, SunlightLevel]] = {
    SolarTimeOfDay.ASTRONOMICAL_DAWN: (SunlightLevel.NIGHT, SunlightLevel.ASTRONOMICAL_TWILIGHT),
    SolarTimeOfDay.NAUTICAL_DAWN: (SunlightLevel.ASTRONOMICAL_TWILIGHT, SunlightLevel.NAUTICAL_TWILIGHT),
    SolarTimeOfDay.CIVIL_DAWN: (SunlightLevel.NAUTICAL_TWILIGHT, SunlightLevel.CIVIL_TWILIGHT),
    SolarTimeOfDay.SUNRISE: (SunlightLevel.CIVIL_TWILIGHT, SunlightLevel.DAYLIGHT),
    SolarTimeOfDay.SUNSET: (SunlightLevel.DAYLIGHT, SunlightLevel.CIVIL_TWILIGHT),
    SolarTimeOfDay.CIVIL_DUSK: (SunlightLevel.CIVIL_TWILIGHT, SunlightLevel.NAUTICAL_TWILIGHT),
    SolarTimeOfDay.NAUTICAL_DUSK: (SunlightLevel.NAUTICAL_TWILIGHT, SunlightLevel.ASTRONOMICAL_TWILIGHT),
    SolarTimeOfDay.ASTRONOMICAL_DUSK: (SunlightLevel.ASTRONOMICAL_TWILIGHT, SunlightLevel.NIGHT),
}


@dataclass(frozen=True, slots=True)
class SunlightChange:
    """Instant at which the sunlight level changes at a location.

    Only the time and event name are stored; the surrounding levels and the
    sun's direction are always derived from the name.
    """

    time: datetime
    name: SolarTimeOfDay

    @property
    def previous_level(self) -> SunlightLevel:
        """Sunlight level before `time`."""
        return self.name.previous_level

    @property
    def new_level(self) -> SunlightLevel:
        """Sunlight level on and after `time`."""
        return self.name.new_level

    @property
    def is_sun_rising(self) -> bool:
        """Whether the sun was climbing at `time`."""
        return self.name.is_sun_rising

    def to_dict(self) -> dict[str, Any]:
        """Serialize the change to a JSON-compatible dictionary."""
        return {
            "name": self.name.value,
            "time": self.time.isoformat(),
            "previous_level": self.previous_level.name.lower(),
            "new_level": self.new_level.name.lower(),
            "is_sun_rising": self.is_sun_rising,
        }
