"""Exception handling module."""

from dukafeed.core.exceptions.base import (
    CacheError,
    DecompressError,
    DukaFeedError,
    FetchError,
    HttpStatusError,
    InvalidFormatError,
    InvalidOptionError,
    InvalidTimeframeError,
    TransportError,
    UnitFetchError,
    UnitTimeoutError,
    UnknownInstrumentError,
)
from dukafeed.core.exceptions.codes import ErrorCode

__all__ = [
    "DukaFeedError",
    "UnknownInstrumentError",
    "InvalidTimeframeError",
    "InvalidOptionError",
    "FetchError",
    "HttpStatusError",
    "TransportError",
    "DecompressError",
    "InvalidFormatError",
    "CacheError",
    "UnitFetchError",
    "UnitTimeoutError",
    "ErrorCode",
]
