"""Client module - main client interface."""

from dukafeed.core.client.client import DukaClient, FeedStream, Resampler
from dukafeed.core.client.timeframe import (
    FetchStrategy,
    Timeframe,
    TimeframeUnit,
    determine_source_and_strategy,
    parse_timeframe,
)

__all__ = [
    "DukaClient",
    "FeedStream",
    "Resampler",
    "FetchStrategy",
    "Timeframe",
    "TimeframeUnit",
    "determine_source_and_strategy",
    "parse_timeframe",
]
