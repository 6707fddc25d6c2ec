"""Demo: print one day's sunlight changes for a few locations."""

from __future__ import annotations

from datetime import date, timedelta

import sys
from pathlib import Path
from zoneinfo import ZoneInfo

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from solcalc.astro.solar import solar_noon  # noqa: E402
from solcalc.sunlight.stream import sunlight_changes  # noqa: E402
from solcalc.time.zoned import start_of_day  # noqa: E402

LOCATIONS = (
    ("Santa Clara", 37.35, -121.95, "America/Los_Angeles"),
    ("Longyearbyen", 78.92, 11.93, "Europe/Berlin"),
    ("Quito", -0.18, -78.47, "America/Guayaquil"),
)


def main() -> int:
    """Print solar noon and each sunlight change on a fixed date."""
    day = date(2024, 9, 10)

    print("=== SolCalc Day Schedule Demo ===")
    print(f"date: {day.isoformat()}\n")
    for name, lat, lon, zone_name in LOCATIONS:
        zone = ZoneInfo(zone_name)
        start = start_of_day(day, zone)
        end = start_of_day(day + timedelta(days=1), zone)

        print(f"{name} (lat={lat:.2f}, lon={lon:.2f}, {zone_name})")
        print(f"  solar noon: {solar_noon(day, zone, lon).strftime('%H:%M:%S')}")
        print("  time  | event             | level")
        print("  ------+-------------------+------------------------------------------")
        for change in sunlight_changes(start, lat, lon).take_until(end):
            levels = f"{change.previous_level.name.lower()} -> {change.new_level.name.lower()}"
            print(f"  {change.time.strftime('%H:%M')} | {change.name.value:<17} | {levels}")
        print()

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
