"""Data models module."""

from dukafeed.core.models.fetch import FetchResult, FetchUnit
from dukafeed.core.models.market import (
    DataKind,
    Granularity,
    PriceSide,
    PriceType,
    TimeRange,
    VolumeUnits,
    WeeklyOpen,
)
from dukafeed.core.models.records import Bar, Record, Tick

__all__ = [
    "Tick",
    "Bar",
    "Record",
    "FetchUnit",
    "FetchResult",
    "DataKind",
    "Granularity",
    "PriceSide",
    "PriceType",
    "TimeRange",
    "VolumeUnits",
    "WeeklyOpen",
]
