"""dukafeed 核心模块"""

from dukafeed.core.client.client import DukaClient, FeedStream
from dukafeed.core.config.options import StreamOptions, build_options
from dukafeed.core.config.settings import ConfigManager, FeedDefaults
from dukafeed.core.models import Bar, FetchUnit, Granularity, PriceType, Tick

__all__ = [
    "DukaClient",
    "FeedStream",
    "StreamOptions",
    "build_options",
    "ConfigManager",
    "FeedDefaults",
    "Bar",
    "Tick",
    "FetchUnit",
    "Granularity",
    "PriceType",
]
