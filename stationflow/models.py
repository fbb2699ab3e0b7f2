"""Record types shared by the loaders, the traffic core and reporting."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Trip:
    """A single ride reduced to its station endpoints and minute-of-day stamps."""

    start_station_id: str
    end_station_id: str
    started_at_minute: int
    ended_at_minute: int


@dataclass(frozen=True)
class Station:
    """Station metadata from the station information feed."""

    short_name: str
    lat: float
    lon: float
    name: Optional[str] = None

    @property
    def label(self) -> str:
        return self.name or self.short_name


@dataclass(frozen=True)
class StationTraffic:
    """Departure and arrival counts for one station within one time window."""

    station: Station
    departures: int = 0
    arrivals: int = 0

    @property
    def short_name(self) -> str:
        return self.station.short_name

    @property
    def total_traffic(self) -> int:
        return self.departures + self.arrivals

    @property
    def departure_ratio(self) -> float:
        """Share of traffic that departs from the station, ``0.0`` when idle."""

        total = self.total_traffic
        if total == 0:
            return 0.0
        return self.departures / total
