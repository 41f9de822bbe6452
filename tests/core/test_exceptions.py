"""
Tests for core exception classes.

This module checks the structured error information carried by each
dukafeed exception.
"""

from datetime import datetime, timezone

import pytest

from dukafeed.core.exceptions import (
    CacheError,
    DecompressError,
    DukaFeedError,
    ErrorCode,
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
from dukafeed.core.models import DataKind, FetchUnit

UNIT = FetchUnit(DataKind.TICK, "EURUSD", datetime(2019, 1, 4, 10, tzinfo=timezone.utc))
PATH = "EURUSD/2019/00/04/10h_ticks.bi5"


class TestDukaFeedError:
    """Test base DukaFeedError class."""

    def test_defaults(self):
        exc = DukaFeedError("Test error")

        assert exc.message == "Test error"
        assert exc.error_code == ErrorCode.GENERAL_ERROR.value
        assert exc.details == {}
        assert str(exc) == "Test error"

    def test_string_error_code(self):
        assert DukaFeedError("x", "CUSTOM").error_code == "CUSTOM"

    def test_to_payload(self):
        exc = DukaFeedError("Broken", ErrorCode.CACHE_ERROR, {"key": "a"})
        assert exc.to_payload() == {"code": "CACHE_ERROR", "message": "Broken", "details": {"key": "a"}}


class TestInputErrors:
    """Test validation errors."""

    def test_unknown_instrument(self):
        exc = UnknownInstrumentError("ABC/XYZ")

        assert exc.instrument == "ABC/XYZ"
        assert exc.error_code == ErrorCode.UNKNOWN_INSTRUMENT.value
        assert exc.details["instrument"] == "ABC/XYZ"

    def test_invalid_timeframe(self):
        exc = InvalidTimeframeError("q7")

        assert exc.timeframe == "q7"
        assert "'q7'" in exc.message

    def test_invalid_option(self):
        exc = InvalidOptionError("bad", ErrorCode.INVALID_PRICE_TYPE, option="price_type", value="last")

        assert exc.error_code == ErrorCode.INVALID_PRICE_TYPE.value
        assert exc.details == {"option": "price_type", "value": "last"}


class TestFetchErrors:
    """Test network and payload errors."""

    def test_hierarchy(self):
        for error in (HttpStatusError(PATH, 500), TransportError(PATH, "timeout"), DecompressError(PATH, "corrupt")):
            assert isinstance(error, FetchError)
            assert error.path == PATH

    def test_http_status(self):
        exc = HttpStatusError(PATH, 503, attempts=4)

        assert exc.status_code == 503
        assert exc.attempts == 4
        assert exc.details == {"status_code": 503, "attempts": 4, "path": PATH}

    def test_transport_without_attempts(self):
        assert "attempts" not in TransportError(PATH, "refused").details

    def test_invalid_format(self):
        exc = InvalidFormatError("tick", 19, 20)

        assert exc.error_code == ErrorCode.INVALID_FORMAT.value
        assert (exc.kind, exc.length, exc.record_size) == ("tick", 19, 20)

    def test_cache_error(self):
        assert CacheError("disk full", key="abc").details == {"key": "abc"}


class TestUnitErrors:
    """Test per-unit failure wrappers."""

    def test_unit_fetch_error_takes_reason_code(self):
        reason = HttpStatusError(PATH, 500)
        exc = UnitFetchError(UNIT, reason)

        assert exc.unit is UNIT
        assert exc.reason is reason
        assert exc.error_code == ErrorCode.HTTP_ERROR.value
        assert exc.details["unit"] == UNIT.describe()

    def test_unit_fetch_error_foreign_reason(self):
        exc = UnitFetchError(UNIT, RuntimeError("boom"))
        assert exc.error_code == ErrorCode.UNIT_FETCH_FAILED.value

    def test_unit_timeout(self):
        exc = UnitTimeoutError(UNIT, 1.5)

        assert exc.timeout == 1.5
        assert exc.error_code == ErrorCode.UNIT_TIMEOUT.value
        assert UnitFetchError(UNIT, exc).error_code == ErrorCode.UNIT_TIMEOUT.value

    def test_raise_chain(self):
        reason = DecompressError(PATH, "corrupt")
        with pytest.raises(UnitFetchError) as exc_info:
            try:
                raise reason
            except DecompressError as error:
                raise UnitFetchError(UNIT, error) from error

        assert exc_info.value.__cause__ is reason
