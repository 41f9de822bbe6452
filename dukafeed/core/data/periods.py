"""时间周期工具.

远程档案按周期组织文件：

- ``year``  -> 年度日K线文件
- ``month`` -> 月度小时K线文件
- ``day``   -> 每日分钟K线文件
- ``hour``  -> 每小时 tick 文件

所有时间均为 UTC。
"""

from __future__ import annotations

from collections.abc import Iterator
from datetime import datetime, timedelta, timezone

from dukafeed.core.models import TimeRange


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """无时区的 datetime 视为 UTC，带时区的转换为 UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def period_start(time_range: TimeRange, value: datetime) -> datetime:
    """返回包含 ``value`` 的周期起点."""
    value = as_utc(value)
    if time_range is TimeRange.YEAR:
        return value.replace(month=1, day=1, hour=0, minute=0, second=0, microsecond=0)
    if time_range is TimeRange.MONTH:
        return value.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    if time_range is TimeRange.DAY:
        return value.replace(hour=0, minute=0, second=0, microsecond=0)
    return value.replace(minute=0, second=0, microsecond=0)


def next_period(time_range: TimeRange, start: datetime) -> datetime:
    """返回下一个周期的起点（``start`` 必须已对齐）."""
    if time_range is TimeRange.YEAR:
        return start.replace(year=start.year + 1)
    if time_range is TimeRange.MONTH:
        if start.month == 12:
            return start.replace(year=start.year + 1, month=1)
        return start.replace(month=start.month + 1)
    if time_range is TimeRange.DAY:
        return start + timedelta(days=1)
    return start + timedelta(hours=1)


def iter_periods(time_range: TimeRange, date_from: datetime, date_to: datetime) -> Iterator[datetime]:
    """惰性枚举起点 ``< date_to`` 的周期，从包含 ``date_from`` 的周期开始."""
    date_to = as_utc(date_to)
    current = period_start(time_range, date_from)
    while current < date_to:
        yield current
        current = next_period(time_range, current)


def is_current(time_range: TimeRange, value: datetime, now: datetime) -> bool:
    """``value`` 所在周期是否包含 ``now``（即周期尚未结束）.

    判断是分层的：``month`` 要求年、月都相同，``day`` 还要求日相同。
    """
    return period_start(time_range, value) == period_start(time_range, now)
