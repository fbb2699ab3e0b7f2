"""Command-line interface for station traffic summaries, maps and charts."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Tuple

import typer

from stationflow import config as cfg
from stationflow.loaders import load_stations, load_trips
from stationflow.models import Station
from stationflow.reporting import (
    build_traffic_map,
    build_traffic_timemap,
    plot_top_stations,
    plot_traffic_profile,
)
from stationflow.traffic import (
    TimeBucketIndex,
    query_station_traffic,
    traffic_to_frame,
    unmatched_station_ids,
)
from stationflow.utils import ensure_directory, format_minutes, parse_time_filter, write_frame

logger = logging.getLogger(__name__)

app = typer.Typer(add_completion=False)

CONFIG_OPTION = typer.Option(None, "--config", help="Path to config JSON/YAML.")
TRIPS_OPTION = typer.Option(None, "--trips", help="Override trip CSV path or URL.")
STATIONS_OPTION = typer.Option(None, "--stations", help="Override station JSON path or URL.")
RADIUS_OPTION = typer.Option(None, "--radius", help="Override window half-width in minutes.")
LOG_LEVEL_OPTION = typer.Option(None, "--log-level", help="Override log level (DEBUG, INFO, WARNING, ERROR).")


@app.command()
def summary(
    config_path: Optional[Path] = CONFIG_OPTION,
    trips_source: Optional[str] = TRIPS_OPTION,
    stations_source: Optional[str] = STATIONS_OPTION,
    time: str = typer.Option("any", "--time", help="Minute of day, HH:MM, or 'any' / -1 for no filter."),
    radius: Optional[int] = RADIUS_OPTION,
    top: int = typer.Option(10, "--top", min=1, help="Number of busiest stations to print."),
    output_path: Optional[Path] = typer.Option(None, "--output", help="Write the full table to .parquet or .csv."),
    log_level: Optional[str] = LOG_LEVEL_OPTION,
) -> None:
    """Print the busiest stations for a time-of-day window."""

    settings, index, stations = _load_inputs(config_path, trips_source, stations_source, radius, log_level)
    time_filter = parse_time_filter(time)
    traffic = query_station_traffic(index, stations, time_filter, settings.window.radius_minutes)
    table = traffic_to_frame(traffic)
    busiest = table.sort_values("total_traffic", ascending=False, kind="stable").head(top)

    typer.echo(f"Station traffic for {format_minutes(time_filter)} ({len(index)} trips indexed):")
    for row in busiest.itertuples(index=False):
        typer.echo(
            f" - {row.name} [{row.short_name}]: {row.total_traffic} trips "
            f"({row.departures} departures, {row.arrivals} arrivals)"
        )
    if output_path is not None:
        write_frame(table, output_path)
        typer.echo(f"Traffic table saved to {output_path}")


@app.command("render-map")
def render_map(
    config_path: Optional[Path] = CONFIG_OPTION,
    trips_source: Optional[str] = TRIPS_OPTION,
    stations_source: Optional[str] = STATIONS_OPTION,
    time: str = typer.Option("any", "--time", help="Minute of day, HH:MM, or 'any' / -1 for no filter."),
    radius: Optional[int] = RADIUS_OPTION,
    output_path: Path = typer.Option(Path("reports/station_traffic_map.html"), "--output", help="Output HTML file."),
    log_level: Optional[str] = LOG_LEVEL_OPTION,
) -> None:
    """Render a station traffic map for one time-of-day window."""

    settings, index, stations = _load_inputs(config_path, trips_source, stations_source, radius, log_level)
    time_filter = parse_time_filter(time)
    fmap = build_traffic_map(index, stations, settings.map, time_filter, settings.window.radius_minutes)
    ensure_directory(output_path.parent)
    fmap.save(str(output_path))
    typer.echo(f"Station traffic map ({format_minutes(time_filter)}) saved to {output_path}")


@app.command("render-timemap")
def render_timemap(
    config_path: Optional[Path] = CONFIG_OPTION,
    trips_source: Optional[str] = TRIPS_OPTION,
    stations_source: Optional[str] = STATIONS_OPTION,
    radius: Optional[int] = RADIUS_OPTION,
    output_path: Path = typer.Option(Path("reports/station_traffic_timemap.html"), "--output", help="Output HTML file."),
    log_level: Optional[str] = LOG_LEVEL_OPTION,
) -> None:
    """Render a time-slider map of station traffic across the day."""

    settings, index, stations = _load_inputs(config_path, trips_source, stations_source, radius, log_level)
    fmap = build_traffic_timemap(index, stations, settings.map, settings.window.radius_minutes)
    ensure_directory(output_path.parent)
    fmap.save(str(output_path))
    typer.echo(f"Station traffic time map saved to {output_path}")


@app.command("plot-profile")
def plot_profile(
    config_path: Optional[Path] = CONFIG_OPTION,
    trips_source: Optional[str] = TRIPS_OPTION,
    stations_source: Optional[str] = STATIONS_OPTION,
    output_dir: Path = typer.Option(Path("reports"), "--output-dir", help="Directory for PNG charts."),
    top: int = typer.Option(15, "--top", min=1, help="Number of stations in the top-stations chart."),
    log_level: Optional[str] = LOG_LEVEL_OPTION,
) -> None:
    """Plot the hourly trip profile and the busiest stations over the whole day."""

    _, index, stations = _load_inputs(config_path, trips_source, stations_source, None, log_level)
    ensure_directory(output_dir)
    profile_path = output_dir / "traffic_profile.png"
    plot_traffic_profile(index, profile_path)
    typer.echo(f"Hourly profile saved to {profile_path}")
    table = traffic_to_frame(query_station_traffic(index, stations))
    top_path = output_dir / "top_stations.png"
    plot_top_stations(table, top_n=top, output_path=top_path)
    typer.echo(f"Top stations chart saved to {top_path}")


def _load_inputs(
    config_path: Optional[Path],
    trips_source: Optional[str],
    stations_source: Optional[str],
    radius: Optional[int],
    log_level: Optional[str],
) -> Tuple[cfg.TrafficMapConfig, TimeBucketIndex, List[Station]]:
    settings = cfg.load_config(config_path)
    updates = {}
    if trips_source is not None:
        updates["trips"] = trips_source
    if stations_source is not None:
        updates["stations"] = stations_source
    if updates:
        settings.data = settings.data.model_copy(update=updates)
    if radius is not None:
        settings.window = cfg.WindowConfig(radius_minutes=radius)
    logging.basicConfig(
        level=(log_level or settings.log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    typer.echo("Loading stations and trips...")
    stations = load_stations(settings.data.stations, settings.data)
    trips = load_trips(settings.data.trips, settings.data)
    index = TimeBucketIndex.build(trips)
    unmatched = unmatched_station_ids(index, stations)
    if unmatched:
        logger.warning("%d station ids in trips are missing from the station feed", len(unmatched))
    typer.echo(f"Indexed {len(index)} trips across {len(stations)} stations.")
    return settings, index, stations


def run_summary() -> None:
    """Entry point for `stationflow-summary`."""

    typer.run(summary)


def run_render_map() -> None:
    """Entry point for `stationflow-render-map`."""

    typer.run(render_map)


def run_render_timemap() -> None:
    """Entry point for `stationflow-render-timemap`."""

    typer.run(render_timemap)


def run_plot_profile() -> None:
    """Entry point for `stationflow-plot-profile`."""

    typer.run(plot_profile)


if __name__ == "__main__":
    app()
