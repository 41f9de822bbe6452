"""Configuration management module."""

from dukafeed.core.config.options import StreamOptions, build_options, extract_date_range
from dukafeed.core.config.settings import (
    ConfigManager,
    FeedDefaults,
    get_default_config,
    load_config_from_env,
)

__all__ = [
    "ConfigManager",
    "FeedDefaults",
    "StreamOptions",
    "build_options",
    "extract_date_range",
    "get_default_config",
    "load_config_from_env",
]
