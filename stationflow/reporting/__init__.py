"""Maps and charts for station traffic."""

from .maps import (
    build_traffic_map,
    build_traffic_timemap,
    flow_colormap,
    quantize_flow,
    radius_scale,
    traffic_tooltip,
)
from .plots import plot_top_stations, plot_traffic_profile

__all__ = [
    "build_traffic_map",
    "build_traffic_timemap",
    "flow_colormap",
    "quantize_flow",
    "radius_scale",
    "traffic_tooltip",
    "plot_top_stations",
    "plot_traffic_profile",
]
