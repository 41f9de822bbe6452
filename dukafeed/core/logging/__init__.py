"""Logging utilities for monitoring and debugging."""

from dukafeed.core.logging.config import LogConfig
from dukafeed.core.logging.logger import (
    StructuredLogger,
    configure_logging,
    log_context,
    logger,
)

__all__ = [
    "LogConfig",
    "StructuredLogger",
    "configure_logging",
    "log_context",
    "logger",
]
