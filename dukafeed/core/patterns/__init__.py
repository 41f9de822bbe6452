"""Resilience patterns module."""

from dukafeed.core.patterns.retry import (
    ResponseVerdict,
    RetryDelay,
    RetryPolicy,
    exponential_backoff,
)

__all__ = [
    "ResponseVerdict",
    "RetryDelay",
    "RetryPolicy",
    "exponential_backoff",
]
