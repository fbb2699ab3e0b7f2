"""Filesystem and HTTP helpers for reading sources and writing artifacts."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Union

import pandas as pd
import requests

logger = logging.getLogger(__name__)

Source = Union[str, Path]


def ensure_directory(path: Path) -> Path:
    """Create a directory if it does not exist and return the path."""

    path.mkdir(parents=True, exist_ok=True)
    return path


def is_url(source: Source) -> bool:
    return isinstance(source, str) and source.startswith(("http://", "https://"))


def read_text(source: Source, request_timeout: float = 30.0, max_retries: int = 3) -> str:
    """Return the text behind a local path or an HTTP(S) URL."""

    if is_url(source):
        response = _request_with_retries(str(source), request_timeout, max_retries)
        return response.text
    path = Path(source)
    if not path.exists():
        raise FileNotFoundError(f"Source not found: {path}")
    return path.read_text(encoding="utf-8")


def write_frame(df: pd.DataFrame, path: Path) -> None:
    """Write a DataFrame as Parquet or CSV depending on the file suffix."""

    ensure_directory(path.parent)
    if path.suffix == ".parquet":
        df.to_parquet(path, index=False)
    elif path.suffix == ".csv":
        df.to_csv(path, index=False)
    else:
        raise ValueError(f"Unsupported output format: {path}")


def _request_with_retries(url: str, request_timeout: float, max_retries: int) -> requests.Response:
    for attempt in range(max_retries + 1):
        response = requests.get(url, timeout=request_timeout)
        if response.ok:
            return response
        logger.warning("GET %s failed with status %s (attempt %d)", url, response.status_code, attempt + 1)
        if attempt == max_retries:
            response.raise_for_status()
    raise RuntimeError("Unreachable code path in _request_with_retries")
