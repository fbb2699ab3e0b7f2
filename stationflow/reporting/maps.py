"""Folium maps encoding station traffic as sized and colored circles."""
from __future__ import annotations

import json
import logging
import math
from typing import Dict, List, Optional, Sequence, Tuple

import folium
from branca.colormap import LinearColormap
from branca.element import Element
from folium.plugins import TimestampedGeoJson

from stationflow.config import MapConfig
from stationflow.models import Station, StationTraffic
from stationflow.traffic import DEFAULT_RADIUS_MINUTES, TimeBucketIndex, query_station_traffic
from stationflow.utils.io import read_text
from stationflow.utils.time import MINUTES_PER_DAY, NO_FILTER, format_minutes

logger = logging.getLogger(__name__)

# Frames of the time map are stamped on an arbitrary day; only the clock time is shown.
TIMEMAP_DAY = "1970-01-01"


def radius_scale(value: float, max_value: float, radius_range: Tuple[float, float]) -> float:
    """Square-root scale from ``[0, max_value]`` onto ``radius_range``."""

    low, high = radius_range
    if max_value <= 0:
        return low
    return low + (high - low) * math.sqrt(max(value, 0.0) / max_value)


def quantize_flow(ratio: float, levels: Sequence[float] = (0.0, 0.5, 1.0)) -> float:
    """Map a departure ratio in ``[0, 1]`` onto equal-width bins, one per level."""

    if not levels:
        raise ValueError("levels must not be empty")
    clamped = min(max(ratio, 0.0), 1.0)
    position = min(int(clamped * len(levels)), len(levels) - 1)
    return levels[position]


def flow_colormap(config: MapConfig) -> LinearColormap:
    return LinearColormap([config.arrival_color, config.departure_color], vmin=0.0, vmax=1.0)


def traffic_tooltip(item: StationTraffic) -> str:
    return f"{item.total_traffic} trips ({item.departures} departures, {item.arrivals} arrivals)"


def _radius_range(config: MapConfig, time_filter: int) -> Tuple[float, float]:
    return config.unfiltered_radius_range if time_filter == NO_FILTER else config.filtered_radius_range


def _max_traffic(traffic: Sequence[StationTraffic]) -> int:
    return max((item.total_traffic for item in traffic), default=0)


def _legend_html(title: str, colormap: LinearColormap) -> str:
    rows = [
        ("More departures", colormap(1.0)),
        ("Balanced", colormap(0.5)),
        ("More arrivals", colormap(0.0)),
    ]
    items = "".join(
        f'<li><span style="color:{color};">&#9679;</span> {label}</li>' for label, color in rows
    )
    return f"""
    <div style="position: fixed; bottom: 20px; left: 20px; width: 200px; z-index: 9999; background: rgba(255, 255, 255, 0.9); padding: 10px 12px; border-radius: 6px; box-shadow: 0 1px 3px rgba(0,0,0,0.4);">
      <h4 style="margin: 0 0 6px; font-size: 14px;">{title}</h4>
      <ul style="margin: 0; padding-left: 16px; font-size: 12px; line-height: 1.4;">{items}</ul>
    </div>
    """


def _add_bike_lanes(fmap: folium.Map, cfg: MapConfig) -> None:
    """Draw the bike lane network under the station layer when one is configured."""

    if cfg.bike_lanes is None:
        return
    network = json.loads(read_text(cfg.bike_lanes))
    style = {"color": cfg.bike_lane_color, "weight": cfg.bike_lane_weight, "opacity": cfg.bike_lane_opacity}
    folium.GeoJson(network, name="Bike lanes", style_function=lambda _: style).add_to(fmap)
    logger.info("Added bike lane overlay from %s", cfg.bike_lanes)


def build_traffic_map(
    index: TimeBucketIndex,
    stations: Sequence[Station],
    config: Optional[MapConfig] = None,
    time_filter: int = NO_FILTER,
    radius_minutes: int = DEFAULT_RADIUS_MINUTES,
) -> folium.Map:
    """Render one circle per station for the window around ``time_filter``.

    The radius domain is fixed by the busiest station over the whole day, so
    filtered maps stay comparable with the unfiltered one.
    """

    cfg = config or MapConfig()
    baseline = query_station_traffic(index, stations, NO_FILTER)
    traffic = baseline if time_filter == NO_FILTER else query_station_traffic(
        index, stations, time_filter, radius_minutes
    )
    max_total = _max_traffic(baseline)
    radius_range = _radius_range(cfg, time_filter)
    colormap = flow_colormap(cfg)
    style = cfg.style

    fmap = folium.Map(location=list(cfg.center), zoom_start=cfg.zoom_start, tiles=cfg.tiles)
    _add_bike_lanes(fmap, cfg)
    layer = folium.FeatureGroup(name="Stations")
    for item in traffic:
        level = quantize_flow(item.departure_ratio, cfg.flow_levels)
        folium.CircleMarker(
            location=(item.station.lat, item.station.lon),
            radius=radius_scale(item.total_traffic, max_total, radius_range),
            color=style.stroke_color,
            weight=style.stroke_width,
            fill=True,
            fill_color=colormap(level),
            fill_opacity=style.fill_opacity,
            tooltip=traffic_tooltip(item),
            popup=f"<b>{item.station.label}</b><br>{traffic_tooltip(item)}",
        ).add_to(layer)
    layer.add_to(fmap)
    fmap.get_root().html.add_child(Element(_legend_html(f"Station traffic: {format_minutes(time_filter)}", colormap)))
    logger.info("Rendered %d station markers for %s", len(traffic), format_minutes(time_filter))
    return fmap


def _frame_features(
    traffic: Sequence[StationTraffic],
    minute: int,
    max_total: int,
    cfg: MapConfig,
    colormap: LinearColormap,
) -> List[Dict[str, object]]:
    hour, mins = divmod(minute, 60)
    timestamp_iso = f"{TIMEMAP_DAY}T{hour:02d}:{mins:02d}:00"
    features = []
    for item in traffic:
        level = quantize_flow(item.departure_ratio, cfg.flow_levels)
        features.append(
            {
                "type": "Feature",
                "geometry": {
                    "type": "Point",
                    "coordinates": [item.station.lon, item.station.lat],
                },
                "properties": {
                    "time": timestamp_iso,
                    "popup": f"<strong>{item.station.label}</strong><br>{traffic_tooltip(item)}",
                    "icon": "circle",
                    "iconstyle": {
                        "fillColor": colormap(level),
                        "fillOpacity": cfg.style.fill_opacity,
                        "stroke": True,
                        "color": cfg.style.stroke_color,
                        "weight": cfg.style.stroke_width,
                        "radius": radius_scale(item.total_traffic, max_total, cfg.filtered_radius_range),
                    },
                },
            }
        )
    return features


def build_traffic_timemap(
    index: TimeBucketIndex,
    stations: Sequence[Station],
    config: Optional[MapConfig] = None,
    radius_minutes: int = DEFAULT_RADIUS_MINUTES,
) -> folium.Map:
    """Render a time-slider map with one filtered frame every ``slider_step_minutes``."""

    cfg = config or MapConfig()
    max_total = _max_traffic(query_station_traffic(index, stations, NO_FILTER))
    colormap = flow_colormap(cfg)

    features: List[Dict[str, object]] = []
    minutes = range(0, MINUTES_PER_DAY, cfg.slider_step_minutes)
    for minute in minutes:
        traffic = query_station_traffic(index, stations, minute, radius_minutes)
        features.extend(_frame_features(traffic, minute, max_total, cfg, colormap))

    fmap = folium.Map(location=list(cfg.center), zoom_start=cfg.zoom_start, tiles=cfg.tiles)
    _add_bike_lanes(fmap, cfg)
    period = f"PT{cfg.slider_step_minutes * 60}S"
    TimestampedGeoJson(
        {"type": "FeatureCollection", "features": features},
        period=period,
        duration=period,
        add_last_point=False,
        transition_time=int(1000 / 15),
        loop=False,
        auto_play=False,
        max_speed=15,
        loop_button=True,
        date_options="hh:mm A",
        time_slider_drag_update=True,
    ).add_to(fmap)
    fmap.get_root().html.add_child(Element(_legend_html("Station traffic by time of day", colormap)))
    logger.info("Rendered time map with %d frames", len(minutes))
    return fmap
