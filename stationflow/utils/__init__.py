"""Utility helpers for IO and minute-of-day handling."""

from .io import ensure_directory, is_url, read_text, write_frame
from .time import (
    MINUTES_PER_DAY,
    NO_FILTER,
    format_minutes,
    minutes_since_midnight,
    parse_time_filter,
    validate_time_filter,
)

__all__ = [
    "ensure_directory",
    "is_url",
    "read_text",
    "write_frame",
    "MINUTES_PER_DAY",
    "NO_FILTER",
    "format_minutes",
    "minutes_since_midnight",
    "parse_time_filter",
    "validate_time_filter",
]
