"""Minute bucketing and time-windowed station traffic aggregation."""

from .buckets import TimeBucketIndex
from .window import DEFAULT_RADIUS_MINUTES, select_window, window_bounds
from .aggregate import (
    compute_station_traffic,
    query_station_traffic,
    traffic_to_frame,
    unmatched_station_ids,
)

__all__ = [
    "TimeBucketIndex",
    "DEFAULT_RADIUS_MINUTES",
    "select_window",
    "window_bounds",
    "compute_station_traffic",
    "query_station_traffic",
    "traffic_to_frame",
    "unmatched_station_ids",
]
