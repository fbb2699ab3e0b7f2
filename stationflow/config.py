"""Typed configuration models for station traffic workflows."""
from __future__ import annotations

from pathlib import Path
from typing import Literal, Optional, Tuple

from pydantic import BaseModel, Field, field_validator

BOSTON_BIKE_LANES_URL = (
    "https://bostonopendata-boston.opendata.arcgis.com/datasets/boston::existing-bike-network-2022.geojson"
)


class DataSourceConfig(BaseModel):
    """Where trips and stations come from and how their columns are named."""

    trips: str = Field(
        default="https://dsc106.com/labs/lab07/data/bluebikes-traffic-2024-03.csv",
        description="Trip CSV as a local path or HTTP(S) URL.",
    )
    stations: str = Field(
        default="https://dsc106.com/labs/lab07/data/bluebikes-stations.json",
        description="Station information JSON (GBFS layout) as a local path or HTTP(S) URL.",
    )
    started_at_column: str = Field(default="started_at")
    ended_at_column: str = Field(default="ended_at")
    start_station_column: str = Field(default="start_station_id")
    end_station_column: str = Field(default="end_station_id")
    timestamp_format: str = Field(
        default="ISO8601",
        description="pandas datetime format for the timestamp columns ('ISO8601', 'mixed', or strftime codes).",
    )
    request_timeout: float = Field(default=30.0, ge=1.0)
    max_retries: int = Field(default=3, ge=0)


class WindowConfig(BaseModel):
    """Time-of-day window applied around the selected minute."""

    radius_minutes: int = Field(
        default=60,
        ge=1,
        le=719,
        description="Half-width of the window; the window spans 2 * radius minutes.",
    )


class MarkerStyleConfig(BaseModel):
    """Circle marker styling, shared by filtered and unfiltered maps."""

    stroke_color: str = Field(default="white")
    stroke_width: float = Field(default=1.0, ge=0.0)
    fill_opacity: float = Field(default=0.6, ge=0.0, le=1.0)


class MapConfig(BaseModel):
    """Map layout and the visual encoding of station traffic."""

    center: Tuple[float, float] = Field(default=(42.36027, -71.09415))
    zoom_start: int = Field(default=12, ge=1, le=18)
    tiles: str = Field(default="OpenStreetMap")
    bike_lanes: Optional[str] = Field(
        default=BOSTON_BIKE_LANES_URL,
        description="GeoJSON path or URL drawn under the stations; None disables the overlay.",
    )
    bike_lane_color: str = Field(default="#32D400")
    bike_lane_weight: float = Field(default=5.0, ge=0.0)
    bike_lane_opacity: float = Field(default=0.6, ge=0.0, le=1.0)
    unfiltered_radius_range: Tuple[float, float] = Field(default=(0.0, 25.0))
    filtered_radius_range: Tuple[float, float] = Field(default=(3.0, 50.0))
    flow_levels: Tuple[float, ...] = Field(default=(0.0, 0.5, 1.0))
    departure_color: str = Field(default="#4682b4")
    arrival_color: str = Field(default="#ff8c00")
    slider_step_minutes: int = Field(default=30, ge=1, le=720)
    style: MarkerStyleConfig = Field(default_factory=MarkerStyleConfig)

    @field_validator("unfiltered_radius_range", "filtered_radius_range")
    @classmethod
    def _ordered_range(cls, value: Tuple[float, float]) -> Tuple[float, float]:
        low, high = value
        if low < 0 or high < low:
            raise ValueError(f"Radius range must satisfy 0 <= low <= high, got {value}")
        return value

    @field_validator("flow_levels")
    @classmethod
    def _levels_in_unit_interval(cls, value: Tuple[float, ...]) -> Tuple[float, ...]:
        if not value:
            raise ValueError("flow_levels must not be empty")
        if any(level < 0 or level > 1 for level in value):
            raise ValueError("flow_levels must lie in [0, 1]")
        return value


class TrafficMapConfig(BaseModel):
    """Top-level configuration."""

    data: DataSourceConfig = Field(default_factory=DataSourceConfig)
    window: WindowConfig = Field(default_factory=WindowConfig)
    map: MapConfig = Field(default_factory=MapConfig)
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(default="INFO")


def load_config(path: Optional[Path] = None) -> TrafficMapConfig:
    """Load configuration from disk or return defaults."""

    if path is None:
        return TrafficMapConfig()
    data = _load_json_or_yaml(path)
    return TrafficMapConfig.model_validate(data)


def _load_json_or_yaml(path: Path) -> dict:
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    if path.suffix in {".json"}:
        import json

        with path.open("r", encoding="utf-8") as handle:
            return json.load(handle)
    if path.suffix in {".yaml", ".yml"}:
        import yaml

        with path.open("r", encoding="utf-8") as handle:
            return yaml.safe_load(handle) or {}
    raise ValueError(f"Unsupported config format: {path}")
