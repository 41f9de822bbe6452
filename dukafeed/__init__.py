"""dukafeed - 历史行情数据获取库

从按周期组织的远程 bi5 档案中获取 tick 与 K线数据，解压、解码后以
按时间排序的惰性序列输出。支持同步和异步迭代，内置重试、缓存与
当前周期回退。
"""

from collections.abc import AsyncIterator
from typing import Any

from dukafeed.core.client.client import DukaClient, FeedStream
from dukafeed.core.exceptions import (
    DukaFeedError,
    InvalidOptionError,
    InvalidTimeframeError,
    UnitFetchError,
    UnknownInstrumentError,
)
from dukafeed.core.models import Bar, Record, Tick

__version__ = "0.1.0"

# 创建全局客户端实例
_client: DukaClient | None = None


def get_client() -> DukaClient:
    """获取全局dukafeed客户端实例"""
    global _client
    if _client is None:
        _client = DukaClient()
    return _client


def stream(instrument: str, timeframe: Any = "ticks", **options: Any) -> FeedStream:
    """同步获取行情数据流

    Args:
        instrument: 交易品种 (EUR/USD, USD/JPY, XAU/USD, ...)
        timeframe: 时间框架 (ticks, t5, s30, m1, m5, h1, h4, D, W, M)
        **options: 流选项，如 from_/to、date_range、price_type、use_cache

    Returns:
        惰性可迭代的数据流

    Examples:
        >>> import dukafeed
        >>> from datetime import date
        >>> for bar in dukafeed.stream("EUR/USD", "m1", from_=date(2024, 1, 2), to=date(2024, 1, 3)):
        ...     print(bar)
    """
    return get_client().stream(instrument, timeframe, **options)


def stream_async(instrument: str, timeframe: Any = "ticks", **options: Any) -> AsyncIterator[Record]:
    """异步获取行情数据流

    Examples:
        >>> async for tick in dukafeed.stream_async("EUR/USD", "ticks", from_=..., to=...):
        ...     print(tick)
    """
    return get_client().stream_async(instrument, timeframe, **options)


__all__ = [
    "stream",
    "stream_async",
    "get_client",
    "DukaClient",
    "FeedStream",
    "Bar",
    "Tick",
    "Record",
    "DukaFeedError",
    "UnknownInstrumentError",
    "InvalidTimeframeError",
    "InvalidOptionError",
    "UnitFetchError",
    "__version__",
]
