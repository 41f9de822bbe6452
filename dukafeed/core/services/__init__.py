"""Services module - planning, batching and streaming."""

from dukafeed.core.services.batch import BatchOrchestrator, BatchStats, UnitOutcome
from dukafeed.core.services.feed import DataFeed
from dukafeed.core.services.filters import apply_filters, filter_flats, scale_volume, shift_time, trim_range
from dukafeed.core.services.planner import FALLBACK_RANGES, PeriodPlanner

__all__ = [
    "BatchOrchestrator",
    "BatchStats",
    "UnitOutcome",
    "DataFeed",
    "PeriodPlanner",
    "FALLBACK_RANGES",
    "apply_filters",
    "filter_flats",
    "scale_volume",
    "shift_time",
    "trim_range",
]
