"""Circular time-of-day window selection over minute buckets."""
from __future__ import annotations

from itertools import chain
from typing import List, Sequence, Tuple

from stationflow.models import Trip
from stationflow.utils.time import MINUTES_PER_DAY, NO_FILTER, validate_time_filter

DEFAULT_RADIUS_MINUTES = 60


def window_bounds(center_minute: int, radius_minutes: int = DEFAULT_RADIUS_MINUTES) -> Tuple[int, int]:
    """Return ``(min_minute, max_minute)`` of the half-open window around ``center_minute``.

    ``min_minute > max_minute`` means the window wraps past midnight.
    """

    if not 0 <= center_minute < MINUTES_PER_DAY:
        raise ValueError(f"Center minute must be in [0, {MINUTES_PER_DAY - 1}], got {center_minute}.")
    if not 0 < radius_minutes < MINUTES_PER_DAY // 2:
        raise ValueError(f"Radius must be in [1, {MINUTES_PER_DAY // 2 - 1}] minutes, got {radius_minutes}.")
    min_minute = (center_minute - radius_minutes + MINUTES_PER_DAY) % MINUTES_PER_DAY
    max_minute = (center_minute + radius_minutes) % MINUTES_PER_DAY
    return min_minute, max_minute


def select_window(
    buckets: Sequence[Sequence[Trip]],
    center_minute: int,
    radius_minutes: int = DEFAULT_RADIUS_MINUTES,
) -> List[Trip]:
    """Flatten the buckets that fall inside the window around ``center_minute``.

    Parameters
    ----------
    buckets:
        1440 per-minute buckets, e.g. ``TimeBucketIndex.departure_buckets``.
    center_minute:
        Minute of day, or ``-1`` to return every trip in bucket order.
    radius_minutes:
        Half-width of the window. Slots ``[center - radius, center + radius)``
        are selected, wrapping around midnight.
    """

    if len(buckets) != MINUTES_PER_DAY:
        raise ValueError(f"Expected {MINUTES_PER_DAY} buckets, got {len(buckets)}.")
    validate_time_filter(center_minute)
    if center_minute == NO_FILTER:
        return list(chain.from_iterable(buckets))
    min_minute, max_minute = window_bounds(center_minute, radius_minutes)
    if min_minute > max_minute:
        selected = chain(buckets[min_minute:], buckets[:max_minute])
    else:
        selected = buckets[min_minute:max_minute]
    return list(chain.from_iterable(selected))
