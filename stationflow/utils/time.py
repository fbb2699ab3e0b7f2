"""Minute-of-day helpers for bucketing and time filter parsing."""
from __future__ import annotations

from typing import Union

import pandas as pd

MINUTES_PER_DAY = 1440
NO_FILTER = -1


def minutes_since_midnight(timestamps: pd.Series) -> pd.Series:
    """Return ``hour * 60 + minute`` of each wall-clock timestamp."""

    if not pd.api.types.is_datetime64_any_dtype(timestamps):
        raise TypeError("Expected a datetime series.")
    return (timestamps.dt.hour * 60 + timestamps.dt.minute).astype(int)


def validate_time_filter(value: int) -> int:
    """Reject time filters outside ``[-1, 1439]``; ``-1`` means no filter."""

    if not NO_FILTER <= value < MINUTES_PER_DAY:
        raise ValueError(
            f"Time filter must be {NO_FILTER} (no filter) or a minute in [0, {MINUTES_PER_DAY - 1}], got {value}."
        )
    return value


def parse_time_filter(value: Union[str, int]) -> int:
    """Parse ``-1``, ``any``, an integer minute, or ``HH:MM`` into a time filter."""

    if isinstance(value, int):
        return validate_time_filter(value)
    text = value.strip().lower()
    if text in {"any", ""}:
        return NO_FILTER
    if ":" in text:
        hours, _, minutes = text.partition(":")
        try:
            hour, minute = int(hours), int(minutes)
        except ValueError as err:
            raise ValueError(f"Unparseable time of day: {value!r}") from err
        if not (0 <= hour < 24 and 0 <= minute < 60):
            raise ValueError(f"Time of day out of range: {value!r}")
        return hour * 60 + minute
    try:
        minute = int(text)
    except ValueError as err:
        raise ValueError(f"Unparseable time filter: {value!r}") from err
    return validate_time_filter(minute)


def format_minutes(minute: int) -> str:
    """Format a minute-of-day as an en-US short time, e.g. ``8:05 PM``."""

    if minute == NO_FILTER:
        return "Any time"
    validate_time_filter(minute)
    hour, mins = divmod(minute, 60)
    suffix = "AM" if hour < 12 else "PM"
    return f"{hour % 12 or 12}:{mins:02d} {suffix}"
