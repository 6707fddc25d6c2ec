"""Lazy, unbounded sequence of sunlight changes."""

from __future__ import annotations

from collections.abc import Iterator
from datetime import datetime

from solcalc.config import DEFAULT_CONFIG, SolverConfig
from solcalc.contracts import SunlightChange
from solcalc.sunlight.transitions import next_sunlight_change
from solcalc.time.zoned import is_before, plus, require_aware


class SunlightChangeStream:
    """Forward-only iterator over successive sunlight changes at one location.

    The stream never ends, since the sun keeps rising and setting. Bound it
    with `itertools.islice`, `itertools.takewhile` or `take_until`. Each
    change is computed only when requested, and only the next search seed is
    kept between calls, so a consumed stream cannot be restarted.
    """

    def __init__(
        self,
        start: datetime,
        lat_deg: float,
        lon_deg: float,
        config: SolverConfig | None = None,
    ) -> None:
        """Prepare a stream of changes occurring after `start`."""
        self._seed = require_aware(start)
        self.lat_deg = lat_deg
        self.lon_deg = lon_deg
        self.config = config or DEFAULT_CONFIG

    def __iter__(self) -> SunlightChangeStream:
        return self

    def __next__(self) -> SunlightChange:
        change = next_sunlight_change(self._seed, self.lat_deg, self.lon_deg, self.config)
        self._seed = plus(change.time, self.config.padding)
        return change

    def take_until(self, end: datetime) -> Iterator[SunlightChange]:
        """Yield changes strictly before `end`, stopping at the first one that is not."""
        for change in self:
            if not is_before(change.time, end):
                return
            yield change


def sunlight_changes(
    start: datetime,
    lat_deg: float,
    lon_deg: float,
    config: SolverConfig | None = None,
) -> SunlightChangeStream:
    """Return the infinite, ordered sequence of sunlight changes after `start`.

    For example, the changes during the local day of `start`:

        day_end = start_of_day(start.date() + timedelta(days=1), start.tzinfo)
        changes = list(sunlight_changes(start, 37.35, -121.95).take_until(day_end))
    """
    return SunlightChangeStream(start, lat_deg, lon_deg, config)
