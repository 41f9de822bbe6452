"""dukafeed主客户端 - 提供同步和异步接口"""

from __future__ import annotations

import asyncio
import contextvars
from collections.abc import AsyncIterator, Callable, Iterable, Iterator
from datetime import datetime
from pathlib import Path
from typing import Any

import httpx

from dukafeed.core.client.timeframe import FetchStrategy, Timeframe, determine_source_and_strategy, parse_timeframe
from dukafeed.core.config.options import StreamOptions, build_options
from dukafeed.core.config.settings import ConfigManager
from dukafeed.core.data.instruments import InstrumentLookup, default_registry
from dukafeed.core.data.periods import utc_now
from dukafeed.core.exceptions import DukaFeedError, ErrorCode
from dukafeed.core.models import Granularity, Record
from dukafeed.core.services.feed import DataFeed
from dukafeed.core.services.planner import PeriodPlanner

Resampler = Callable[[Iterable[Record], Timeframe, StreamOptions], Iterable[Record]]


async def _next_record(records: AsyncIterator[Record]) -> Record:
    return await records.__anext__()


class FeedStream:
    """一次 ``stream()`` 调用的结果：可同步迭代，也可异步迭代.

    同步迭代时每个数据流拥有独立的事件循环，循环内按需拉取批次；
    提前停止迭代会关闭底层生成器与 HTTP 客户端，不再启动新的批次。
    """

    def __init__(
        self,
        feed: DataFeed,
        timeframe: Timeframe,
        strategy: FetchStrategy,
        resampler: Resampler | None = None,
    ):
        self.feed = feed
        self.timeframe = timeframe
        self.strategy = strategy
        self.resampler = resampler

    @property
    def options(self) -> StreamOptions:
        return self.feed.options

    @property
    def source_granularity(self) -> Granularity:
        return self.feed.options.granularity

    @property
    def requires_resampling(self) -> bool:
        return self.strategy is FetchStrategy.RESAMPLE

    def __aiter__(self) -> AsyncIterator[Record]:
        return self.feed.astream()

    def _iter_source(self) -> Iterator[Record]:
        """在私有事件循环中逐条拉取异步数据流."""
        loop = asyncio.new_event_loop()
        # 所有步骤共享同一个上下文，日志上下文跨 yield 保持一致
        context = contextvars.copy_context()
        records = self.feed.astream()
        try:
            while True:
                try:
                    record = loop.run_until_complete(loop.create_task(_next_record(records), context=context))
                except StopAsyncIteration:
                    return
                yield record
        finally:
            try:
                loop.run_until_complete(loop.create_task(records.aclose(), context=context))
                loop.run_until_complete(loop.shutdown_asyncgens())
            finally:
                loop.close()

    def __iter__(self) -> Iterator[Record]:
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            # 没有运行中的事件循环，可以使用私有循环
            pass
        else:
            raise DukaFeedError(
                "Synchronous iteration cannot be used from within an async context. Use 'async for' instead.",
                ErrorCode.SYNC_IN_ASYNC_CONTEXT,
                {"suggestion": "Use 'async for record in stream' or dukafeed.stream_async(...) instead of 'for record in stream'"},
            )

        records = self._iter_source()
        if self.requires_resampling and self.resampler is not None:
            return iter(self.resampler(records, self.timeframe, self.options))
        return records


class DukaClient:
    """dukafeed主客户端"""

    def __init__(
        self,
        config: dict[str, Any] | None = None,
        *,
        lookup: InstrumentLookup | None = None,
        now: Callable[[], datetime] = utc_now,
        resampler: Resampler | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        config_path: Path | None = None,
    ) -> None:
        """初始化客户端

        Args:
            config: 覆盖默认值的配置字典（键同 ``FeedDefaults`` 字段）
            lookup: 品种查询函数，默认使用内置品种表
            now: 时钟，用于当前周期判断
            resampler: 可选的重采样协作者
            transport: 可选的 httpx 传输层
            config_path: 配置文件路径
        """
        # 配置文件 + 环境变量
        self.config_manager = ConfigManager(config_path)
        if config:
            self.config_manager.update(**config)

        self.lookup = lookup or default_registry
        self.planner = PeriodPlanner(now)
        self.resampler = resampler
        self.transport = transport

    def configure(self, **config: Any) -> None:
        """更新客户端默认配置"""
        self.config_manager.update(**config)

    def stream(self, instrument: str, timeframe: Any = "ticks", **options: Any) -> FeedStream:
        """同步API - 返回惰性数据流，构建时不发生任何网络请求

        Args:
            instrument: 交易品种，如 ``"EUR/USD"``
            timeframe: ``ticks``、``m1``、``m5``、``h1``、``D``、``W``、``M`` 等
            **options: 流选项（``from_``/``to`` 或 ``date_range``、``price_type`` 等）

        Returns:
            可迭代的 ``FeedStream``

        Raises:
            UnknownInstrumentError: 品种不存在
            InvalidTimeframeError: 时间框架不合法
            InvalidOptionError: 选项不合法
        """
        stream_options = build_options(
            instrument,
            lookup=self.lookup,
            defaults=self.config_manager.get_defaults(),
            **options,
        )
        parsed = parse_timeframe(timeframe)

        source, _ = determine_source_and_strategy(parsed)
        fallback = self.planner.requires_fallback(source, stream_options.date_from, stream_options.date_to)
        source, strategy = determine_source_and_strategy(parsed, fallback)

        feed = DataFeed(stream_options.with_granularity(source), self.planner, self.transport)
        return FeedStream(feed, parsed, strategy, self.resampler)

    def stream_async(self, instrument: str, timeframe: Any = "ticks", **options: Any) -> AsyncIterator[Record]:
        """异步API - 返回源粒度记录的异步迭代器"""
        return self.stream(instrument, timeframe, **options).__aiter__()
