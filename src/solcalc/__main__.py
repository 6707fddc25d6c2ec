"""Command-line entrypoint for solcalc."""

from __future__ import annotations

import argparse
from collections.abc import Sequence
from datetime import UTC, date, datetime, tzinfo
from itertools import islice
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from solcalc.astro.solar import solar_noon, solar_position
from solcalc.config import config_from_env
from solcalc.sunlight.levels import sunlight_level_for_elevation
from solcalc.sunlight.stream import sunlight_changes


def _parse_zone(value: str) -> ZoneInfo:
    """Parse an IANA time zone name."""
    try:
        return ZoneInfo(value)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise argparse.ArgumentTypeError(f"unknown time zone: {value}") from exc


def _parse_local_datetime(value: str) -> datetime:
    """Parse an ISO datetime; the zone is attached later from --zone."""
    try:
        return datetime.fromisoformat(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid datetime: {value}") from exc


def _parse_date(value: str) -> date:
    """Parse an ISO calendar date."""
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid date: {value}") from exc


def _zoned(value: datetime, zone: tzinfo) -> datetime:
    """Attach `zone` to naive values and convert aware ones into it."""
    if value.tzinfo is None:
        return value.replace(tzinfo=zone)
    return value.astimezone(zone)


def _add_location(parser: argparse.ArgumentParser, *, with_lat: bool = True) -> None:
    if with_lat:
        parser.add_argument("--lat", type=float, required=True)
    parser.add_argument("--lon", type=float, required=True)
    parser.add_argument("--zone", type=_parse_zone, default=UTC)


def build_parser() -> argparse.ArgumentParser:
    """Create and return the top-level CLI parser."""
    parser = argparse.ArgumentParser(
        prog="solcalc",
        description="Solar position and sunlight change calculator.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version="%(prog)s 0.1.0",
    )

    subparsers = parser.add_subparsers(dest="command")

    position = subparsers.add_parser("position", help="Print solar position at an instant.")
    _add_location(position)
    position.add_argument("--time", type=_parse_local_datetime, required=True)

    noon = subparsers.add_parser("noon", help="Print solar noon for a calendar date.")
    _add_location(noon, with_lat=False)
    noon.add_argument("--date", type=_parse_date, required=True)

    changes = subparsers.add_parser("changes", help="Print the next sunlight changes.")
    _add_location(changes)
    changes.add_argument("--time", type=_parse_local_datetime, required=True)
    changes.add_argument("--count", type=int, default=8)

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the CLI application."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "position":
        result = solar_position(_zoned(args.time, args.zone), args.lat, args.lon)
        level = sunlight_level_for_elevation(result.elevation)
        print(
            f"azimuth={result.azimuth:.4f} "
            f"elevation={result.elevation:.4f} "
            f"declination={result.declination:.4f} "
            f"sunlight_level={level.name.lower()}"
        )
        return 0

    if args.command == "noon":
        print(solar_noon(args.date, args.zone, args.lon).isoformat())
        return 0

    if args.command == "changes":
        if args.count <= 0:
            parser.error("--count must be positive")
        stream = sunlight_changes(_zoned(args.time, args.zone), args.lat, args.lon, config_from_env())
        for change in islice(stream, args.count):
            print(
                f"{change.time.isoformat()} {change.name.value} "
                f"{change.previous_level.name.lower()} -> {change.new_level.name.lower()}"
            )
        return 0

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
