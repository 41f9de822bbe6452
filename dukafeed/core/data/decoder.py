"""bi5 二进制记录解码.

解压后的缓冲区由定长大端记录顺序组成：

- tick（20字节）: ``time_delta_ms:u32, ask:i32, bid:i32, ask_volume:f32, bid_volume:f32``
- bar（24字节）:  ``time_delta_s:i32, open:i32, close:i32, low:i32, high:i32, volume:f32``

tick 的时间偏移相对于锚定小时（毫秒），K线的时间偏移相对于文件周期起点（秒）。
价格字段为整数，除以品种点值得到小数价格。
"""

from __future__ import annotations

import struct
from collections.abc import Sequence
from datetime import date, datetime, timedelta, timezone

from dukafeed.core.data.periods import as_utc, period_start
from dukafeed.core.exceptions import InvalidFormatError
from dukafeed.core.logging import logger
from dukafeed.core.models import Bar, DataKind, Tick

TICK_STRUCT = struct.Struct(">Iiiff")
BAR_STRUCT = struct.Struct(">iiiiif")


def _anchor_datetime(anchor: date) -> datetime:
    if isinstance(anchor, datetime):
        return as_utc(anchor)
    return datetime(anchor.year, anchor.month, anchor.day, tzinfo=timezone.utc)


def _check_length(payload: bytes, record: struct.Struct, kind: DataKind) -> None:
    if len(payload) % record.size:
        raise InvalidFormatError(kind.value, len(payload), record.size)


def decode_ticks(payload: bytes, anchor: date, point_value: float) -> list[Tick]:
    """解码一个小时的 tick 文件."""
    _check_length(payload, TICK_STRUCT, DataKind.TICK)
    hour_start = period_start(DataKind.TICK.time_range, _anchor_datetime(anchor))
    return [
        Tick(
            time=hour_start + timedelta(milliseconds=delta_ms),
            ask=ask / point_value,
            bid=bid / point_value,
            ask_volume=ask_volume,
            bid_volume=bid_volume,
        )
        for delta_ms, ask, bid, ask_volume, bid_volume in TICK_STRUCT.iter_unpack(payload)
    ]


def decode_bars(payload: bytes, kind: DataKind, anchor: date, point_value: float) -> list[Bar]:
    """解码K线文件；``kind`` 决定时间偏移的基准（当日/当月/当年起点）."""
    if not kind.is_bar:
        raise ValueError(f"{kind!r} is not a bar kind")
    _check_length(payload, BAR_STRUCT, kind)
    start = period_start(kind.time_range, _anchor_datetime(anchor))
    return [
        Bar(
            time=start + timedelta(seconds=delta_s),
            open=open_ / point_value,
            high=high / point_value,
            low=low / point_value,
            close=close / point_value,
            volume=volume,
        )
        for delta_s, open_, close, low, high, volume in BAR_STRUCT.iter_unpack(payload)
    ]


def decode(payload: bytes, kind: DataKind, anchor: date, point_value: float) -> list[Tick] | list[Bar]:
    """按数据种类解码；空缓冲区返回空列表."""
    if kind is DataKind.TICK:
        return decode_ticks(payload, anchor, point_value)
    return decode_bars(payload, kind, anchor, point_value)


def merge_mid_bars(bid_bars: Sequence[Bar], ask_bars: Sequence[Bar]) -> list[Bar]:
    """合成中间价K线.

    OHLC 取买卖价均值，成交量为两者之和。两侧按时间戳对齐，
    只有一侧存在的K线被丢弃。
    """
    pairs = list(zip(bid_bars, ask_bars))
    if len(bid_bars) != len(ask_bars) or any(bid.time != ask.time for bid, ask in pairs):
        logger.warning(
            "bid/ask bars are misaligned, aligning by timestamp",
            bid_count=len(bid_bars),
            ask_count=len(ask_bars),
        )
        asks_by_time = {bar.time: bar for bar in ask_bars}
        pairs = [(bid, asks_by_time[bid.time]) for bid in bid_bars if bid.time in asks_by_time]

    return [
        Bar(
            time=bid.time,
            open=(bid.open + ask.open) / 2,
            high=(bid.high + ask.high) / 2,
            low=(bid.low + ask.low) / 2,
            close=(bid.close + ask.close) / 2,
            volume=bid.volume + ask.volume,
        )
        for bid, ask in pairs
    ]
