"""Per-station departure and arrival counts for a time-of-day window."""
from __future__ import annotations

import logging
from collections import Counter
from typing import Iterable, List, Sequence

import pandas as pd

from stationflow.models import Station, StationTraffic, Trip
from stationflow.traffic.buckets import TimeBucketIndex
from stationflow.traffic.window import DEFAULT_RADIUS_MINUTES, select_window
from stationflow.utils.time import NO_FILTER

logger = logging.getLogger(__name__)

TRAFFIC_COLUMNS = [
    "short_name",
    "name",
    "lat",
    "lon",
    "departures",
    "arrivals",
    "total_traffic",
    "departure_ratio",
]


def compute_station_traffic(
    stations: Sequence[Station],
    departure_trips: Iterable[Trip],
    arrival_trips: Iterable[Trip],
) -> List[StationTraffic]:
    """Count departures and arrivals for every station.

    Departures are keyed by ``start_station_id`` and arrivals by
    ``end_station_id``. Every station is returned, in input order, with zero
    counts when no trip matches it.
    """

    departures = Counter(trip.start_station_id for trip in departure_trips)
    arrivals = Counter(trip.end_station_id for trip in arrival_trips)
    return [
        StationTraffic(
            station=station,
            departures=departures.get(station.short_name, 0),
            arrivals=arrivals.get(station.short_name, 0),
        )
        for station in stations
    ]


def query_station_traffic(
    index: TimeBucketIndex,
    stations: Sequence[Station],
    time_filter: int = NO_FILTER,
    radius_minutes: int = DEFAULT_RADIUS_MINUTES,
) -> List[StationTraffic]:
    """Station traffic for the window around ``time_filter`` (``-1`` for the whole day)."""

    departure_trips = select_window(index.departure_buckets, time_filter, radius_minutes)
    arrival_trips = select_window(index.arrival_buckets, time_filter, radius_minutes)
    logger.debug(
        "Time filter %d: %d departures, %d arrivals in window",
        time_filter,
        len(departure_trips),
        len(arrival_trips),
    )
    return compute_station_traffic(stations, departure_trips, arrival_trips)


def unmatched_station_ids(index: TimeBucketIndex, stations: Sequence[Station]) -> List[str]:
    """Station ids referenced by trips but absent from ``stations``."""

    known = {station.short_name for station in stations}
    referenced = set()
    for bucket in index.departure_buckets:
        referenced.update(trip.start_station_id for trip in bucket)
    for bucket in index.arrival_buckets:
        referenced.update(trip.end_station_id for trip in bucket)
    return sorted(referenced - known)


def traffic_to_frame(traffic: Sequence[StationTraffic]) -> pd.DataFrame:
    """Tabulate traffic records, one row per station in the given order."""

    if not traffic:
        return pd.DataFrame(columns=TRAFFIC_COLUMNS)
    records = [
        {
            "short_name": item.short_name,
            "name": item.station.label,
            "lat": item.station.lat,
            "lon": item.station.lon,
            "departures": item.departures,
            "arrivals": item.arrivals,
            "total_traffic": item.total_traffic,
            "departure_ratio": item.departure_ratio,
        }
        for item in traffic
    ]
    return pd.DataFrame.from_records(records, columns=TRAFFIC_COLUMNS)
