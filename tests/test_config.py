import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from stationflow import config


def test_default_config():
    cfg = config.load_config(None)
    assert cfg.window.radius_minutes == 60
    assert cfg.map.unfiltered_radius_range == (0.0, 25.0)
    assert cfg.map.filtered_radius_range == (3.0, 50.0)
    assert cfg.map.style.fill_opacity == pytest.approx(0.6)
    assert cfg.data.started_at_column == "started_at"
    assert cfg.map.tiles == "OpenStreetMap"
    assert cfg.map.bike_lanes == config.BOSTON_BIKE_LANES_URL
    assert cfg.map.bike_lane_color == "#32D400"


def test_load_json_config(tmp_path: Path):
    path = tmp_path / "settings.json"
    path.write_text(
        json.dumps({"window": {"radius_minutes": 30}, "data": {"trips": "trips.csv"}, "log_level": "DEBUG"}),
        encoding="utf-8",
    )
    cfg = config.load_config(path)
    assert cfg.window.radius_minutes == 30
    assert cfg.data.trips == "trips.csv"
    assert cfg.log_level == "DEBUG"


def test_load_yaml_config(tmp_path: Path):
    path = tmp_path / "settings.yaml"
    path.write_text("map:\n  slider_step_minutes: 15\n  style:\n    stroke_color: black\n", encoding="utf-8")
    cfg = config.load_config(path)
    assert cfg.map.slider_step_minutes == 15
    assert cfg.map.style.stroke_color == "black"


def test_radius_bounds_rejected():
    with pytest.raises(ValidationError):
        config.WindowConfig(radius_minutes=720)
    with pytest.raises(ValidationError):
        config.WindowConfig(radius_minutes=0)


def test_unordered_radius_range_rejected():
    with pytest.raises(ValidationError):
        config.MapConfig(filtered_radius_range=(10.0, 2.0))


def test_unsupported_config_format(tmp_path: Path):
    path = tmp_path / "settings.toml"
    path.write_text("", encoding="utf-8")
    with pytest.raises(ValueError):
        config.load_config(path)


def test_bike_lanes_can_be_disabled(tmp_path: Path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"map": {"bike_lanes": None, "bike_lane_weight": 3}}), encoding="utf-8")
    cfg = config.load_config(path)
    assert cfg.map.bike_lanes is None
    assert cfg.map.bike_lane_weight == 3.0


def test_bike_lane_opacity_bounds():
    with pytest.raises(ValidationError):
        config.MapConfig(bike_lane_opacity=1.5)
