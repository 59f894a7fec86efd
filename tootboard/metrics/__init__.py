"""Engagement metrics: day-bucketed aggregation and chart rendering."""

from .aggregator import (
    ACCEPTED_RANGES,
    Aggregator,
    DailyMetric,
    Window,
    compute_series,
    format_total,
    parse_timestamp,
)
from .bars import allocate

__all__ = [
    "ACCEPTED_RANGES",
    "Aggregator",
    "DailyMetric",
    "Window",
    "allocate",
    "compute_series",
    "format_total",
    "parse_timestamp",
]
