"""Stream option validation.

``build_options`` merges user overrides onto ``FeedDefaults`` and returns an
immutable ``StreamOptions`` snapshot that is threaded read-only through the
whole fetch/decode pipeline. Every invalid value is rejected with a specific
``ErrorCode``.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from datetime import date, datetime, time, timedelta, timezone
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, ConfigDict

from dukafeed.core.config.settings import FeedDefaults, get_default_config
from dukafeed.core.data.instruments import InstrumentLookup, resolve_instrument
from dukafeed.core.data.periods import as_utc
from dukafeed.core.exceptions import ErrorCode, InvalidOptionError
from dukafeed.core.models import DataKind, Granularity, PriceType, VolumeUnits, WeeklyOpen
from dukafeed.core.patterns import RetryPolicy, exponential_backoff

UTC_ZONES = {"Etc/UTC", "UTC", "Etc/GMT", "GMT", "Z"}

_OFFSET_PATTERN = re.compile(r"^(?P<sign>[+-])?(?P<h>\d{1,2}):(?P<m>\d{2})(?::(?P<s>\d{2}))?$")

# keys accepted by build_options in addition to FeedDefaults fields
_EXTRA_KEYS = {"from_", "from", "to", "date_range", "granularity", "point_value", "retry_delay"}


class StreamOptions(BaseModel):
    """Immutable, fully validated configuration for one stream."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True, extra="forbid")

    instrument: str
    instrument_key: str
    point_value: float
    granularity: Granularity = Granularity.TICKS
    date_from: datetime
    date_to: datetime
    price_type: PriceType = PriceType.BID
    utc_offset: timedelta = timedelta(0)
    timezone: str = "Etc/UTC"
    volume_units: VolumeUnits = VolumeUnits.MILLIONS
    ignore_flats: bool = True
    batch_size: int = 10
    pause_between_batches_ms: int = 1000
    use_cache: bool = False
    cache_folder_path: str = ".dukascopy-cache"
    max_retries: int = 3
    retry_delay: int | Callable[[int], int] = exponential_backoff
    retry_on_empty: bool = False
    fail_after_retry_count: bool = True
    market_open: time = time(0, 0)
    weekly_open: WeeklyOpen = WeeklyOpen.MONDAY
    halt_on_error: bool = True
    unit_timeout: float = 60.0
    base_url: str

    @property
    def date_range(self) -> tuple[datetime, datetime]:
        return self.date_from, self.date_to

    @property
    def kind(self) -> DataKind:
        return DataKind.for_granularity(self.granularity)

    @property
    def is_mid_bars(self) -> bool:
        return self.price_type is PriceType.MID and self.granularity is not Granularity.TICKS

    @property
    def effective_batch_size(self) -> int:
        """Mid bars issue two requests per unit, so the batch is halved."""
        if self.is_mid_bars:
            return max(1, self.batch_size // 2)
        return self.batch_size

    @property
    def volume_multiplier(self) -> int:
        return self.volume_units.multiplier

    @property
    def is_utc(self) -> bool:
        return self.timezone in UTC_ZONES

    @property
    def has_time_adjustment(self) -> bool:
        return not self.is_utc or bool(self.utc_offset)

    @property
    def retry_policy(self) -> RetryPolicy:
        return RetryPolicy(
            max_retries=self.max_retries,
            retry_delay=self.retry_delay,
            retry_on_empty=self.retry_on_empty,
            fail_after_retry_count=self.fail_after_retry_count,
        )

    def with_granularity(self, granularity: Granularity) -> StreamOptions:
        return self.model_copy(update={"granularity": granularity})


def _positive_int(key: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise InvalidOptionError(
            f"Invalid {key}: {value!r}. Must be a positive integer",
            ErrorCode.INVALID_POSITIVE_INTEGER,
            option=key,
            value=value,
        )
    return value


def _non_negative_int(key: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise InvalidOptionError(
            f"Invalid {key}: {value!r}. Must be a non-negative integer",
            ErrorCode.INVALID_NON_NEGATIVE_INTEGER,
            option=key,
            value=value,
        )
    return value


def _boolean(key: str, value: Any) -> bool:
    if not isinstance(value, bool):
        raise InvalidOptionError(f"Invalid {key}: {value!r}. Must be a boolean", option=key, value=value)
    return value


def _retry_delay(value: Any) -> int | Callable[[int], int]:
    if callable(value):
        return value
    if isinstance(value, int) and not isinstance(value, bool) and value >= 0:
        return value
    raise InvalidOptionError(
        f"Invalid retry_delay: {value!r}. Must be a non-negative integer or a callable",
        ErrorCode.INVALID_RETRY_DELAY,
        option="retry_delay",
        value=value,
    )


def _clock_time(key: str, value: Any, error_code: ErrorCode) -> timedelta:
    """Parse ``time``/``timedelta``/``"[+-]HH:MM[:SS]"`` into a signed timedelta."""
    if isinstance(value, timedelta):
        return value
    if isinstance(value, time):
        return timedelta(hours=value.hour, minutes=value.minute, seconds=value.second)
    if isinstance(value, str):
        match = _OFFSET_PATTERN.match(value.strip())
        if match:
            hours, minutes = int(match["h"]), int(match["m"])
            seconds = int(match["s"] or 0)
            if hours < 24 and minutes < 60 and seconds < 60:
                delta = timedelta(hours=hours, minutes=minutes, seconds=seconds)
                return -delta if match["sign"] == "-" else delta
    raise InvalidOptionError(
        f"Invalid {key}: {value!r}. Use a time (e.g. '02:30:00')",
        error_code,
        option=key,
        value=value,
    )


def _market_open(value: Any) -> time:
    if isinstance(value, time):
        return value
    delta = _clock_time("market_open", value, ErrorCode.INVALID_MARKET_OPEN)
    if delta < timedelta(0) or delta >= timedelta(days=1):
        raise InvalidOptionError(
            f"Invalid market_open: {value!r}",
            ErrorCode.INVALID_MARKET_OPEN,
            option="market_open",
            value=value,
        )
    total = int(delta.total_seconds())
    return time(total // 3600, total % 3600 // 60, total % 60)


def _timezone(value: Any) -> str:
    if isinstance(value, str) and value in UTC_ZONES:
        return value
    try:
        ZoneInfo(value)
    except (ZoneInfoNotFoundError, ValueError, TypeError) as e:
        raise InvalidOptionError(
            f"Invalid timezone: {value!r}",
            ErrorCode.INVALID_TIMEZONE,
            option="timezone",
            value=value,
        ) from e
    return value


def _to_datetime(key: str, value: Any) -> datetime:
    if isinstance(value, datetime):
        return as_utc(value)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    if isinstance(value, str):
        try:
            return _to_datetime(key, datetime.fromisoformat(value))
        except ValueError:
            pass
    raise InvalidOptionError(f"Invalid {key}: {value!r}. Use a date or datetime", option=key, value=value)


def extract_date_range(opts: Mapping[str, Any]) -> tuple[datetime, datetime]:
    """Normalise ``from_``/``to`` or an inclusive ``date_range`` into a UTC ``[from, to)`` pair."""
    date_from = opts.get("from_", opts.get("from"))
    date_to = opts.get("to")
    date_range = opts.get("date_range")

    if date_range is not None:
        if date_from is not None or date_to is not None:
            raise InvalidOptionError(
                "Conflicting date options. Use from_/to OR date_range, not both",
                ErrorCode.CONFLICTING_DATE_OPTIONS,
            )
        try:
            first, last = date_range
        except (TypeError, ValueError) as e:
            raise InvalidOptionError(
                f"Invalid date_range: {date_range!r}. Use a (first, last) pair",
                option="date_range",
                value=date_range,
            ) from e
        if isinstance(first, datetime) and isinstance(last, datetime):
            return as_utc(first), as_utc(last)
        start = _to_datetime("date_range", first)
        # the last day is inclusive
        end = _to_datetime("date_range", last) + timedelta(days=1)
        return start, end

    if date_from is None and date_to is None:
        raise InvalidOptionError(
            "Missing date range. Provide from_ and to, or date_range",
            ErrorCode.MISSING_DATE_RANGE,
        )
    if date_from is None or date_to is None:
        raise InvalidOptionError(
            "Partial date range. Provide both from_ and to",
            ErrorCode.PARTIAL_DATE_RANGE,
        )
    return _to_datetime("from_", date_from), _to_datetime("to", date_to)


def build_options(
    instrument: str,
    *,
    lookup: InstrumentLookup | None = None,
    defaults: FeedDefaults | None = None,
    **overrides: Any,
) -> StreamOptions:
    """Validate ``overrides`` on top of ``defaults`` and return a frozen snapshot.

    The instrument is resolved first, so an unknown instrument fails before
    any other validation or I/O.
    """
    info = resolve_instrument(instrument, lookup)

    base = defaults or get_default_config()
    unknown = set(overrides) - FeedDefaults.field_names() - _EXTRA_KEYS
    if unknown:
        raise InvalidOptionError(
            f"Unknown options: {', '.join(sorted(unknown))}",
            ErrorCode.UNKNOWN_OPTION,
            details={"unknown": sorted(unknown)},
        )

    opts: dict[str, Any] = {**base.to_dict(), **overrides}
    date_from, date_to = extract_date_range(opts)

    point_value = opts.get("point_value")
    if point_value is None:
        point_value = info.point_value
    if isinstance(point_value, bool) or not isinstance(point_value, (int, float)) or point_value <= 0:
        raise InvalidOptionError(
            f"Invalid point_value: {point_value!r}. Must be a positive number",
            option="point_value",
            value=point_value,
        )

    unit_timeout = opts["unit_timeout"]
    if isinstance(unit_timeout, bool) or not isinstance(unit_timeout, (int, float)) or unit_timeout <= 0:
        raise InvalidOptionError(
            f"Invalid unit_timeout: {unit_timeout!r}. Must be a positive number",
            option="unit_timeout",
            value=unit_timeout,
        )

    return StreamOptions(
        instrument=info.instrument,
        instrument_key=info.remote_filename,
        point_value=point_value,
        granularity=Granularity.parse(
            opts.get("granularity", Granularity.TICKS), ErrorCode.INVALID_GRANULARITY, "granularity"
        ),
        date_from=date_from,
        date_to=date_to,
        price_type=PriceType.parse(opts["price_type"], ErrorCode.INVALID_PRICE_TYPE, "price_type"),
        utc_offset=_clock_time("utc_offset", opts["utc_offset"], ErrorCode.INVALID_UTC_OFFSET),
        timezone=_timezone(opts["timezone"]),
        volume_units=VolumeUnits.parse(opts["volume_units"], ErrorCode.INVALID_VOLUME_UNITS, "volume_units"),
        ignore_flats=_boolean("ignore_flats", opts["ignore_flats"]),
        batch_size=_positive_int("batch_size", opts["batch_size"]),
        pause_between_batches_ms=_non_negative_int("pause_between_batches_ms", opts["pause_between_batches_ms"]),
        use_cache=_boolean("use_cache", opts["use_cache"]),
        cache_folder_path=str(opts["cache_folder_path"]),
        max_retries=_non_negative_int("max_retries", opts["max_retries"]),
        retry_delay=_retry_delay(opts.get("retry_delay", exponential_backoff)),
        retry_on_empty=_boolean("retry_on_empty", opts["retry_on_empty"]),
        fail_after_retry_count=_boolean("fail_after_retry_count", opts["fail_after_retry_count"]),
        market_open=_market_open(opts["market_open"]),
        weekly_open=WeeklyOpen.parse(opts["weekly_open"], ErrorCode.INVALID_WEEKLY_OPEN, "weekly_open"),
        halt_on_error=_boolean("halt_on_error", opts["halt_on_error"]),
        unit_timeout=float(unit_timeout),
        base_url=str(opts["base_url"]),
    )
