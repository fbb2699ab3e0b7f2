"""Trip CSV ingestion with minute-of-day derivation."""
from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import List, Optional

import pandas as pd

from stationflow.config import DataSourceConfig
from stationflow.models import Trip
from stationflow.utils import is_url, minutes_since_midnight, read_text
from stationflow.utils.io import Source

logger = logging.getLogger(__name__)

UTC_OFFSET_PATTERN = r"(?:Z|[+-]\d{2}:?\d{2})$"


def load_trip_frame(source: Source, config: Optional[DataSourceConfig] = None) -> pd.DataFrame:
    """Read a trip CSV into a tidy frame with minute-of-day columns.

    Parameters
    ----------
    source:
        Local path or HTTP(S) URL of the CSV.
    config:
        Column names and HTTP controls; defaults apply when omitted.

    Returns
    -------
    pandas.DataFrame
        Columns (`start_station_id`, `end_station_id`, `started_at_minute`,
        `ended_at_minute`), one row per trip in file order.

    Raises
    ------
    KeyError
        If a required column is missing.
    ValueError
        If any timestamp fails to parse or any station identifier is missing.
    """

    cfg = config or DataSourceConfig()
    columns = {
        cfg.started_at_column: "started_at",
        cfg.ended_at_column: "ended_at",
        cfg.start_station_column: "start_station_id",
        cfg.end_station_column: "end_station_id",
    }
    if is_url(source):
        handle = io.StringIO(read_text(source, cfg.request_timeout, cfg.max_retries))
    elif Path(source).exists():
        handle = Path(source)
    else:
        raise FileNotFoundError(f"Source not found: {source}")
    raw = pd.read_csv(
        handle,
        dtype={cfg.start_station_column: str, cfg.end_station_column: str},
    )
    missing = set(columns) - set(raw.columns)
    if missing:
        raise KeyError(f"Trip data missing columns: {missing}")
    trips = raw[list(columns)].rename(columns=columns).copy()

    for original, column in columns.items():
        if column in {"started_at", "ended_at"}:
            # Minute-of-day uses the clock time as written, so UTC offsets are dropped.
            wall_clock = trips[column].astype(str).str.strip().str.replace(UTC_OFFSET_PATTERN, "", regex=True)
            parsed = pd.to_datetime(wall_clock, format=cfg.timestamp_format, errors="coerce")
            bad = int(parsed.isna().sum())
            if bad:
                raise ValueError(f"Timestamp parsing failed for {bad} rows in '{original}'.")
            trips[column] = parsed
        else:
            blank = trips[column].isna() | (trips[column].str.strip() == "")
            if blank.any():
                raise ValueError(f"Missing station identifier in {int(blank.sum())} rows of '{original}'.")
            trips[column] = trips[column].str.strip()

    result = pd.DataFrame(
        {
            "start_station_id": trips["start_station_id"],
            "end_station_id": trips["end_station_id"],
            "started_at_minute": minutes_since_midnight(trips["started_at"]),
            "ended_at_minute": minutes_since_midnight(trips["ended_at"]),
        }
    ).reset_index(drop=True)
    logger.info("Loaded %d trips from %s", len(result), source)
    return result


def load_trips(source: Source, config: Optional[DataSourceConfig] = None) -> List[Trip]:
    """Load trips as immutable :class:`Trip` records."""

    frame = load_trip_frame(source, config)
    return trips_from_frame(frame)


def trips_from_frame(frame: pd.DataFrame) -> List[Trip]:
    return [
        Trip(
            start_station_id=str(row.start_station_id),
            end_station_id=str(row.end_station_id),
            started_at_minute=int(row.started_at_minute),
            ended_at_minute=int(row.ended_at_minute),
        )
        for row in frame.itertuples(index=False)
    ]
