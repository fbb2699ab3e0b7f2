import json
from pathlib import Path

import matplotlib

matplotlib.use("Agg")

import pandas as pd
from typer.testing import CliRunner

from stationflow.cli import app

runner = CliRunner()

TRIPS_CSV = """started_at,ended_at,start_station_id,end_station_id
2024-03-01 08:00:00,2024-03-01 08:10:00,A,B
2024-03-02 08:20:00,2024-03-02 08:35:00,A,C
2024-03-03 17:05:00,2024-03-03 17:25:00,B,A
2024-03-04 23:50:00,2024-03-05 00:10:00,C,Z
"""


def _write_inputs(tmp_path: Path) -> tuple:
    trips = tmp_path / "trips.csv"
    trips.write_text(TRIPS_CSV, encoding="utf-8")
    stations = tmp_path / "stations.json"
    payload = {
        "data": {
            "stations": [
                {"short_name": "A", "name": "Alpha", "lat": 42.36, "lon": -71.09},
                {"short_name": "B", "name": "Bravo", "lat": 42.37, "lon": -71.10},
                {"short_name": "C", "name": "Charlie", "lat": 42.35, "lon": -71.08},
            ]
        }
    }
    stations.write_text(json.dumps(payload), encoding="utf-8")
    return str(trips), str(stations)


def _write_config(tmp_path: Path, bike_lanes=None) -> str:
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"map": {"bike_lanes": bike_lanes}}), encoding="utf-8")
    return str(path)


def test_summary_with_time_filter(tmp_path: Path) -> None:
    trips, stations = _write_inputs(tmp_path)
    output = tmp_path / "out" / "traffic.csv"
    result = runner.invoke(
        app,
        ["summary", "--trips", trips, "--stations", stations, "--time", "08:00", "--output", str(output)],
    )
    assert result.exit_code == 0, result.output
    assert "Station traffic for 8:00 AM" in result.output
    assert "Alpha [A]: 2 trips (2 departures, 0 arrivals)" in result.output

    table = pd.read_csv(output)
    assert list(table["short_name"]) == ["A", "B", "C"]
    assert list(table["total_traffic"]) == [2, 1, 1]


def test_summary_rejects_bad_time(tmp_path: Path) -> None:
    trips, stations = _write_inputs(tmp_path)
    result = runner.invoke(app, ["summary", "--trips", trips, "--stations", stations, "--time", "1440"])
    assert result.exit_code != 0
    assert isinstance(result.exception, ValueError)


def test_render_map(tmp_path: Path) -> None:
    trips, stations = _write_inputs(tmp_path)
    output = tmp_path / "reports" / "map.html"
    result = runner.invoke(
        app,
        ["render-map", "--config", _write_config(tmp_path), "--trips", trips, "--stations", stations, "--time", "-1", "--output", str(output)],
    )
    assert result.exit_code == 0, result.output
    assert output.exists()


def test_render_timemap(tmp_path: Path) -> None:
    trips, stations = _write_inputs(tmp_path)
    output = tmp_path / "reports" / "timemap.html"
    result = runner.invoke(
        app,
        ["render-timemap", "--config", _write_config(tmp_path), "--trips", trips, "--stations", stations, "--radius", "30", "--output", str(output)],
    )
    assert result.exit_code == 0, result.output
    assert "1970-01-01T17:00:00" in output.read_text(encoding="utf-8")


def test_plot_profile(tmp_path: Path) -> None:
    trips, stations = _write_inputs(tmp_path)
    output_dir = tmp_path / "charts"
    result = runner.invoke(
        app,
        ["plot-profile", "--trips", trips, "--stations", stations, "--output-dir", str(output_dir)],
    )
    assert result.exit_code == 0, result.output
    assert (output_dir / "traffic_profile.png").exists()
    assert (output_dir / "top_stations.png").exists()


def test_render_map_with_bike_lane_overlay(tmp_path: Path) -> None:
    trips, stations = _write_inputs(tmp_path)
    lanes = tmp_path / "lanes.geojson"
    lanes.write_text(
        json.dumps(
            {
                "type": "FeatureCollection",
                "features": [
                    {
                        "type": "Feature",
                        "geometry": {"type": "LineString", "coordinates": [[-71.09, 42.36], [-71.08, 42.35]]},
                        "properties": {},
                    }
                ],
            }
        ),
        encoding="utf-8",
    )
    output = tmp_path / "map.html"
    result = runner.invoke(
        app,
        [
            "render-map",
            "--config",
            _write_config(tmp_path, str(lanes)),
            "--trips",
            trips,
            "--stations",
            stations,
            "--output",
            str(output),
        ],
    )
    assert result.exit_code == 0, result.output
    assert "#32D400" in output.read_text(encoding="utf-8")
