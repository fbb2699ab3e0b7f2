"""Loaders for trip CSVs and station information feeds."""

from .stations import load_station_frame, load_stations
from .trips import load_trip_frame, load_trips, trips_from_frame

__all__ = [
    "load_station_frame",
    "load_stations",
    "load_trip_frame",
    "load_trips",
    "trips_from_frame",
]
