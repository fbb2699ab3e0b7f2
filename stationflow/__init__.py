"""Time-of-day traffic aggregation and maps for bike-share stations."""

__version__ = "0.1.0"
