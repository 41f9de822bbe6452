"""粒度级数据流服务.

``DataFeed`` 组合规划器、获取客户端、解码器与批量编排器，对一个
``StreamOptions`` 快照产出按时间排序的 tick 或K线记录。
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Iterator
from functools import partial

import httpx

from dukafeed.core.config.options import StreamOptions
from dukafeed.core.data.decoder import decode, decode_bars, merge_mid_bars
from dukafeed.core.http_adapter import FetchClient
from dukafeed.core.logging import log_context, logger
from dukafeed.core.models import FetchUnit, PriceSide, PriceType, Record
from dukafeed.core.services.batch import BatchOrchestrator, BatchStats
from dukafeed.core.services.filters import apply_filters
from dukafeed.core.services.planner import PeriodPlanner


class DataFeed:
    """单次数据流：规划 -> 批量获取解码 -> 过滤."""

    def __init__(
        self,
        options: StreamOptions,
        planner: PeriodPlanner | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """初始化数据流.

        Args:
            options: 已校验的流配置
            planner: 获取单元规划器，默认使用系统时钟
            transport: 可选的 httpx 传输层（测试中注入 ``MockTransport``）
        """
        self.options = options
        self.planner = planner or PeriodPlanner()
        self.transport = transport
        self.orchestrator = BatchOrchestrator.from_options(options)

    @property
    def stats(self) -> BatchStats:
        return self.orchestrator.stats

    @property
    def price_side(self) -> PriceSide:
        # mid 从 BID 单元出发，另行获取 ASK
        if self.options.price_type is PriceType.ASK:
            return PriceSide.ASK
        return PriceSide.BID

    @property
    def requires_fallback(self) -> bool:
        return self.planner.requires_fallback(self.options.granularity, self.options.date_from, self.options.date_to)

    def plan(self) -> Iterator[FetchUnit]:
        return self.planner.plan(
            self.options.granularity,
            self.options.date_from,
            self.options.date_to,
            self.options.instrument_key,
            self.price_side,
        )

    async def _payload(self, client: FetchClient, unit: FetchUnit) -> bytes:
        """取出 ``FetchResult`` 的字节；失败原因交给编排器按 halt/skip 策略处理."""
        result = await client.fetch_unit(unit)
        if not result.ok:
            raise result.error
        return result.payload

    async def fetch_records(self, client: FetchClient, unit: FetchUnit) -> list[Record]:
        """获取并解码一个单元，再应用过滤器."""
        point_value = self.options.point_value
        if self.options.is_mid_bars:
            bid_payload, ask_payload = await asyncio.gather(
                self._payload(client, unit.with_side(PriceSide.BID)),
                self._payload(client, unit.with_side(PriceSide.ASK)),
            )
            records: list[Record] = list(
                merge_mid_bars(
                    decode_bars(bid_payload, unit.kind, unit.anchor, point_value),
                    decode_bars(ask_payload, unit.kind, unit.anchor, point_value),
                )
            )
        else:
            payload = await self._payload(client, unit)
            records = list(decode(payload, unit.kind, unit.anchor, point_value))
        return list(apply_filters(records, self.options))

    async def astream(self) -> AsyncIterator[Record]:
        """异步惰性产出记录；HTTP 客户端随数据流关闭."""
        options = self.options
        with log_context(instrument=options.instrument, granularity=options.granularity.value):
            logger.debug(
                f"Streaming {options.instrument} {options.granularity.value} "
                f"from {options.date_from.isoformat()} to {options.date_to.isoformat()}"
            )
            async with FetchClient.from_options(options, self.transport) as client:
                records = self.orchestrator.stream(self.plan(), partial(self.fetch_records, client))
                try:
                    async for record in records:
                        yield record
                finally:
                    await records.aclose()

    def __aiter__(self) -> AsyncIterator[Record]:
        return self.astream()
