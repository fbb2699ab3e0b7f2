"""Per-minute-of-day index of trip starts and ends."""
from __future__ import annotations

import logging
from typing import Iterable, List, Tuple

import pandas as pd

from stationflow.models import Trip
from stationflow.traffic.window import DEFAULT_RADIUS_MINUTES, select_window
from stationflow.utils.time import MINUTES_PER_DAY

logger = logging.getLogger(__name__)

Buckets = Tuple[Tuple[Trip, ...], ...]


class TimeBucketIndex:
    """Trips grouped into 1440 departure buckets and 1440 arrival buckets.

    Build once per loaded dataset with :meth:`build` and pass the index to
    every query. Buckets are tuples and are never modified after construction.
    """

    def __init__(self, departure_buckets: Buckets, arrival_buckets: Buckets) -> None:
        if len(departure_buckets) != MINUTES_PER_DAY or len(arrival_buckets) != MINUTES_PER_DAY:
            raise ValueError(f"Both bucket sequences must have {MINUTES_PER_DAY} slots.")
        self._departure_buckets = departure_buckets
        self._arrival_buckets = arrival_buckets

    @classmethod
    def build(cls, trips: Iterable[Trip]) -> "TimeBucketIndex":
        departures: List[List[Trip]] = [[] for _ in range(MINUTES_PER_DAY)]
        arrivals: List[List[Trip]] = [[] for _ in range(MINUTES_PER_DAY)]
        count = 0
        for trip in trips:
            _check_minute(trip.started_at_minute, "started_at_minute")
            _check_minute(trip.ended_at_minute, "ended_at_minute")
            departures[trip.started_at_minute].append(trip)
            arrivals[trip.ended_at_minute].append(trip)
            count += 1
        logger.info("Indexed %d trips into %d minute buckets", count, MINUTES_PER_DAY)
        return cls(
            tuple(tuple(bucket) for bucket in departures),
            tuple(tuple(bucket) for bucket in arrivals),
        )

    @property
    def departure_buckets(self) -> Buckets:
        return self._departure_buckets

    @property
    def arrival_buckets(self) -> Buckets:
        return self._arrival_buckets

    @property
    def trip_count(self) -> int:
        return sum(len(bucket) for bucket in self._departure_buckets)

    def __len__(self) -> int:
        return self.trip_count

    def departures(self, time_filter: int, radius_minutes: int = DEFAULT_RADIUS_MINUTES) -> List[Trip]:
        """Trips starting inside the window around ``time_filter``."""

        return select_window(self._departure_buckets, time_filter, radius_minutes)

    def arrivals(self, time_filter: int, radius_minutes: int = DEFAULT_RADIUS_MINUTES) -> List[Trip]:
        """Trips ending inside the window around ``time_filter``."""

        return select_window(self._arrival_buckets, time_filter, radius_minutes)

    def hourly_profile(self) -> pd.DataFrame:
        """Departures and arrivals per hour of day."""

        hours = range(MINUTES_PER_DAY // 60)
        return pd.DataFrame(
            {
                "hour": list(hours),
                "departures": [_hour_total(self._departure_buckets, hour) for hour in hours],
                "arrivals": [_hour_total(self._arrival_buckets, hour) for hour in hours],
            }
        )


def _hour_total(buckets: Buckets, hour: int) -> int:
    return sum(len(bucket) for bucket in buckets[hour * 60:(hour + 1) * 60])


def _check_minute(value: int, field: str) -> None:
    if not 0 <= value < MINUTES_PER_DAY:
        raise ValueError(f"{field} must be in [0, {MINUTES_PER_DAY - 1}], got {value}.")
