"""获取单元规划.

把一个 ``[from, to)`` 区间映射为有序的 ``FetchUnit`` 序列。K线请求按回退表
从最粗的文件周期开始；若某个周期包含当前时间（文件尚未生成），则在该周期与
请求区间的交集上改用下一个更细的周期。
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Sequence
from datetime import datetime, timedelta

from dukafeed.core.data.periods import as_utc, is_current, iter_periods, next_period, utc_now
from dukafeed.core.models import DataKind, FetchUnit, Granularity, PriceSide, TimeRange

# 请求粒度 -> 可用文件周期，由粗到细
FALLBACK_RANGES: dict[Granularity, tuple[TimeRange, ...]] = {
    Granularity.DAY: (TimeRange.YEAR, TimeRange.MONTH, TimeRange.DAY),
    Granularity.HOUR: (TimeRange.MONTH, TimeRange.DAY),
    Granularity.MINUTE: (TimeRange.DAY,),
    Granularity.TICKS: (TimeRange.HOUR,),
}


class PeriodPlanner:
    """按时钟与回退表生成获取单元.

    ``now`` 可注入，测试中用固定时钟代替系统时间。
    """

    def __init__(self, now: Callable[[], datetime] = utc_now):
        self._now = now

    def now(self) -> datetime:
        return as_utc(self._now())

    def closest_available_range(self, granularity: Granularity, value: datetime) -> TimeRange:
        """返回 ``value`` 处可用的最粗文件周期；全部为当前周期时取最细一级."""
        ranges = FALLBACK_RANGES[granularity]
        now = self.now()
        for time_range in ranges:
            if not is_current(time_range, value, now):
                return time_range
        return ranges[-1]

    def requires_fallback(self, granularity: Granularity, date_from: datetime, date_to: datetime) -> bool:
        """区间末端是否落在请求粒度自身文件的当前周期内.

        仅对存在更细回退级别的 ``hour``/``day`` 有意义。
        """
        ranges = FALLBACK_RANGES[granularity]
        if len(ranges) < 2:
            return False
        now = self.now()
        date_from = as_utc(date_from)
        effective_to = min(as_utc(date_to), now)
        if date_from >= effective_to:
            return False
        last_instant = effective_to - timedelta(microseconds=1)
        return is_current(ranges[0], last_instant, now)

    def plan(
        self,
        granularity: Granularity,
        date_from: datetime,
        date_to: datetime,
        instrument_key: str,
        price_side: PriceSide = PriceSide.BID,
    ) -> Iterator[FetchUnit]:
        """惰性生成覆盖 ``[date_from, date_to)`` 的获取单元.

        ``date_to`` 先被限制到当前时间，不会请求未来的文件。
        每个单元的周期起点都 ``< date_to``；边界之外的记录由调用方裁剪。
        """
        now = self.now()
        date_from = as_utc(date_from)
        date_to = min(as_utc(date_to), now)
        if date_from >= date_to:
            return
        yield from self._plan_ranges(FALLBACK_RANGES[granularity], date_from, date_to, now, instrument_key, price_side)

    def _plan_ranges(
        self,
        ranges: Sequence[TimeRange],
        date_from: datetime,
        date_to: datetime,
        now: datetime,
        instrument_key: str,
        price_side: PriceSide,
    ) -> Iterator[FetchUnit]:
        time_range, finer = ranges[0], ranges[1:]
        kind = DataKind.for_range(time_range)
        for start in iter_periods(time_range, date_from, date_to):
            if finer and is_current(time_range, start, now):
                end = next_period(time_range, start)
                yield from self._plan_ranges(
                    finer, max(start, date_from), min(end, date_to), now, instrument_key, price_side
                )
            else:
                yield FetchUnit(kind, instrument_key, start, price_side)
