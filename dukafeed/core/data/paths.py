"""远程资源路径解析.

路径规则（月份从0开始计数，一月为 ``00``）::

    tick:        {key}/{year}/{month-1:02}/{day:02}/{hour:02}h_ticks.bi5
    minute bar:  {key}/{year}/{month-1:02}/{day:02}/{PRICE}_candles_min_1.bi5
    hour bar:    {key}/{year}/{month-1:02}/{PRICE}_candles_hour_1.bi5
    day bar:     {key}/{year}/{PRICE}_candles_day_1.bi5
"""

from __future__ import annotations

from datetime import date, datetime, timedelta

from dukafeed.core.data.periods import as_utc, iter_periods, utc_now
from dukafeed.core.models import DataKind, FetchUnit, PriceSide

DEFAULT_BASE_URL = "https://datafeed.dukascopy.com/datafeed"


def _month(value: date) -> str:
    return f"{value.month - 1:02d}"


def resolve(instrument_key: str, kind: DataKind, anchor: date, price_side: PriceSide = PriceSide.BID) -> str:
    """返回远程资源的相对路径，不做任何 I/O."""
    year = anchor.year
    if kind is DataKind.TICK:
        hour = anchor.hour if isinstance(anchor, datetime) else 0
        return f"{instrument_key}/{year}/{_month(anchor)}/{anchor.day:02d}/{hour:02d}h_ticks.bi5"
    price = PriceSide.parse(price_side).token
    if kind is DataKind.MINUTE_BAR:
        return f"{instrument_key}/{year}/{_month(anchor)}/{anchor.day:02d}/{price}_candles_min_1.bi5"
    if kind is DataKind.HOUR_BAR:
        return f"{instrument_key}/{year}/{_month(anchor)}/{price}_candles_hour_1.bi5"
    return f"{instrument_key}/{year}/{price}_candles_day_1.bi5"


def resolve_unit(unit: FetchUnit) -> str:
    return resolve(unit.instrument_key, unit.kind, unit.anchor, unit.price_side)


def build_tick_path(instrument_key: str, day: date, hour: int) -> str:
    """单个小时 tick 文件路径."""
    if not 0 <= hour <= 23:
        raise ValueError(f"hour must be within 0..23, got {hour}")
    anchor = datetime(day.year, day.month, day.day, hour)
    return resolve(instrument_key, DataKind.TICK, anchor)


def build_bar_path(instrument_key: str, kind: DataKind, day: date, price_side: PriceSide = PriceSide.BID) -> str:
    """单个K线文件路径；``day`` 可以是文件覆盖周期内的任意一天."""
    if not kind.is_bar:
        raise ValueError(f"{kind!r} is not a bar kind")
    return resolve(instrument_key, kind, day, price_side)


def to_url(path: str, base_url: str = DEFAULT_BASE_URL) -> str:
    return f"{base_url.rstrip('/')}/{path}"


def generate_urls(
    instrument_key: str,
    kind: DataKind,
    date_from: datetime,
    date_to: datetime,
    price_side: PriceSide = PriceSide.BID,
    utc_offset: timedelta = timedelta(0),
    now: datetime | None = None,
    base_url: str = DEFAULT_BASE_URL,
) -> list[str]:
    """列出覆盖 ``[date_from, date_to)`` 的全部远程 URL（不做当前周期回退）.

    ``utc_offset`` 同时平移区间两端，``date_to`` 不超过当前时间。
    """
    start = as_utc(date_from) + utc_offset
    end = min(as_utc(date_to) + utc_offset, now or utc_now())
    return [
        to_url(resolve(instrument_key, kind, anchor, price_side), base_url)
        for anchor in iter_periods(kind.time_range, start, end)
    ]
