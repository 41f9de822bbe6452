"""Record post-processing applied after decode.

Filters run in a fixed order: flat bars are dropped, volumes are scaled,
timestamps are shifted, and finally records are trimmed to the requested
``[from, to)`` bound. Each filter is a generator over an iterable of records.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

from dukafeed.core.config.options import StreamOptions
from dukafeed.core.models import Bar, Record


def filter_flats(records: Iterable[Record]) -> Iterator[Record]:
    """Drop zero-volume bars; ticks always pass."""
    for record in records:
        if isinstance(record, Bar) and record.is_flat:
            continue
        yield record


def scale_volume(records: Iterable[Record], factor: float) -> Iterator[Record]:
    if factor == 1:
        yield from records
        return
    for record in records:
        yield record.scale_volume(factor)


def shift_time(records: Iterable[Record], timezone: str | None, utc_offset: timedelta) -> Iterator[Record]:
    """Convert timestamps to ``timezone`` (None keeps UTC) and add ``utc_offset``."""
    zone = ZoneInfo(timezone) if timezone else None
    for record in records:
        value = record.time
        if zone is not None:
            value = value.astimezone(zone)
        yield record.with_time(value + utc_offset)


def trim_range(records: Iterable[Record], date_from: datetime, date_to: datetime) -> Iterator[Record]:
    for record in records:
        if date_from <= record.time < date_to:
            yield record


def apply_filters(records: Iterable[Record], options: StreamOptions) -> Iterator[Record]:
    """Compose the post-decode filters configured in ``options``."""
    stream: Iterable[Record] = records
    if options.ignore_flats:
        stream = filter_flats(stream)
    stream = scale_volume(stream, options.volume_multiplier)

    date_from, date_to = options.date_range
    if options.has_time_adjustment:
        zone = None if options.is_utc else options.timezone
        stream = shift_time(stream, zone, options.utc_offset)
        # bounds move with the same fixed offset, so the trim still selects source instants
        date_from += options.utc_offset
        date_to += options.utc_offset
    return trim_range(stream, date_from, date_to)
