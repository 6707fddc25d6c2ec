"""FastAPI app exposing solar position and sunlight change endpoints."""

from __future__ import annotations

from datetime import date, datetime
from itertools import islice
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field, model_validator

from solcalc.astro.solar import solar_noon, solar_position
from solcalc.config import SolverConfig, config_from_env
from solcalc.sunlight.levels import sunlight_level_for_elevation
from solcalc.sunlight.stream import sunlight_changes
from solcalc.sunlight.transitions import ConvergenceError, TransitionNotFoundError

_MAX_CHANGES = 64


def _resolve_zone(name: str) -> ZoneInfo:
    """Resolve an IANA time zone name."""
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ValueError(f"unknown time zone: {name}") from exc


def _localize(dt: datetime, zone: ZoneInfo) -> datetime:
    """Interpret naive datetimes as wall time in `zone`; convert aware ones into it."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=zone)
    return dt.astimezone(zone)


class ZonedPointRequest(BaseModel):
    """Instant and location shared by position and change queries."""

    time: datetime
    zone: str = "UTC"
    lat: float = Field(ge=-90.0, le=90.0)
    lon: float = Field(ge=-180.0, le=180.0)

    @model_validator(mode="after")
    def validate_zone(self) -> "ZonedPointRequest":
        """Reject unknown time zone names."""
        _resolve_zone(self.zone)
        return self

    def zoned_time(self) -> datetime:
        """Return `time` expressed in `zone`."""
        return _localize(self.time, _resolve_zone(self.zone))


class PositionResponse(BaseModel):
    """Solar position in degrees and the implied sunlight level."""

    azimuth: float
    elevation: float
    declination: float
    sunlight_level: str


class SolarNoonRequest(BaseModel):
    """Request schema for solar transit on a calendar date."""

    day: date
    zone: str = "UTC"
    lon: float = Field(ge=-180.0, le=180.0)

    @model_validator(mode="after")
    def validate_zone(self) -> "SolarNoonRequest":
        """Reject unknown time zone names."""
        _resolve_zone(self.zone)
        return self


class SolarNoonResponse(BaseModel):
    """Solar noon as a zoned ISO timestamp."""

    time: datetime


class ChangesRequest(ZonedPointRequest):
    """Request schema for the next sunlight changes after an instant."""

    count: int = Field(default=8, ge=1, le=_MAX_CHANGES)


class SunlightChangeResponse(BaseModel):
    """One sunlight change."""

    name: str
    time: datetime
    previous_level: str
    new_level: str
    is_sun_rising: bool


class ChangesResponse(BaseModel):
    """Ordered sunlight changes."""

    changes: list[SunlightChangeResponse]


def create_app(config: SolverConfig | None = None) -> FastAPI:
    """Create and configure the FastAPI app."""
    app = FastAPI(title="SolCalc API", version="0.1.0")
    solver_config = config or config_from_env()
    app.state.solver_config = solver_config

    @app.post("/position", response_model=PositionResponse)
    def post_position(payload: ZonedPointRequest) -> PositionResponse:
        """Compute solar position for a zoned instant and location."""
        try:
            position = solar_position(payload.zoned_time(), payload.lat, payload.lon)
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        level = sunlight_level_for_elevation(position.elevation)
        return PositionResponse(**position.to_dict(), sunlight_level=level.name.lower())

    @app.post("/solar-noon", response_model=SolarNoonResponse)
    def post_solar_noon(payload: SolarNoonRequest) -> SolarNoonResponse:
        """Compute solar noon for a calendar date and longitude."""
        try:
            noon = solar_noon(payload.day, _resolve_zone(payload.zone), payload.lon)
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        return SolarNoonResponse(time=noon)

    @app.post("/changes", response_model=ChangesResponse)
    def post_changes(payload: ChangesRequest) -> ChangesResponse:
        """List the next sunlight changes after a zoned instant."""
        try:
            stream = sunlight_changes(payload.zoned_time(), payload.lat, payload.lon, solver_config)
            changes = list(islice(stream, payload.count))
        except (ValueError, ConvergenceError, TransitionNotFoundError) as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        return ChangesResponse(
            changes=[SunlightChangeResponse(**change.to_dict()) for change in changes]
        )

    return app


app = create_app()
