"""Station information loader for GBFS-style JSON feeds."""
from __future__ import annotations

import json
import logging
from typing import List, Optional

import pandas as pd

from stationflow.config import DataSourceConfig
from stationflow.models import Station
from stationflow.utils import read_text
from stationflow.utils.io import Source

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ["short_name", "lat", "lon"]


def load_station_frame(source: Source, config: Optional[DataSourceConfig] = None) -> pd.DataFrame:
    """Load ``data.stations`` from a station information payload.

    Stations keep feed order. A missing or duplicated ``short_name`` and
    non-numeric coordinates are load errors.
    """

    cfg = config or DataSourceConfig()
    payload = json.loads(read_text(source, cfg.request_timeout, cfg.max_retries))
    try:
        records = payload["data"]["stations"]
    except (KeyError, TypeError) as err:
        raise KeyError("Station payload has no data.stations list.") from err
    df = pd.json_normalize(records)
    if df.empty:
        logger.warning("Station feed at %s lists no stations", source)
        return pd.DataFrame(columns=REQUIRED_FIELDS + ["name"])
    missing = set(REQUIRED_FIELDS) - set(df.columns)
    if missing:
        raise KeyError(f"Station records missing fields: {missing}")
    if "name" not in df.columns:
        df["name"] = None

    blank = df["short_name"].isna() | (df["short_name"].astype(str).str.strip() == "")
    if blank.any():
        raise ValueError(f"Missing short_name for {int(blank.sum())} stations.")
    df["short_name"] = df["short_name"].astype(str).str.strip()
    duplicated = df["short_name"].duplicated()
    if duplicated.any():
        raise ValueError(f"Duplicate station short_name values: {sorted(set(df.loc[duplicated, 'short_name']))}")
    df["lat"] = pd.to_numeric(df["lat"], errors="coerce")
    df["lon"] = pd.to_numeric(df["lon"], errors="coerce")
    bad_coords = df["lat"].isna() | df["lon"].isna()
    if bad_coords.any():
        raise ValueError(f"Unparseable coordinates for {int(bad_coords.sum())} stations.")
    logger.info("Loaded %d stations from %s", len(df), source)
    return df[REQUIRED_FIELDS + ["name"]].reset_index(drop=True)


def load_stations(source: Source, config: Optional[DataSourceConfig] = None) -> List[Station]:
    """Load stations as :class:`Station` records."""

    frame = load_station_frame(source, config)
    return [
        Station(
            short_name=row.short_name,
            lat=float(row.lat),
            lon=float(row.lon),
            name=row.name if isinstance(row.name, str) else None,
        )
        for row in frame.itertuples(index=False)
    ]
