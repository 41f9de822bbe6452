"""批量获取编排.

把规划好的获取单元按固定大小分批，批内并发执行 fetch+decode，批间暂停，
按输入顺序输出记录。单元失败时按 ``halt_on_error`` 终止或记录后跳过。
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import AsyncIterator, Awaitable, Callable, Iterable, Sequence
from dataclasses import dataclass, field
from itertools import islice

from dukafeed.core.config.options import StreamOptions
from dukafeed.core.exceptions import UnitFetchError, UnitTimeoutError
from dukafeed.core.logging import logger
from dukafeed.core.models import FetchUnit, Record

UnitOperation = Callable[[FetchUnit], Awaitable[Sequence[Record]]]


@dataclass
class UnitOutcome:
    """单个获取单元解码、过滤后的结果；获取失败时 ``error`` 为 ``FetchResult`` 中的原因."""

    unit: FetchUnit
    records: Sequence[Record] = ()
    error: BaseException | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class BatchStats:
    """一次数据流的批处理统计."""

    batches: int = 0
    units: int = 0
    failures: int = 0
    records: int = 0
    total_time_seconds: float = 0.0
    errors: dict[str, str] = field(default_factory=dict)


class BatchOrchestrator:
    """有界并发的批量获取器."""

    def __init__(
        self,
        batch_size: int = 10,
        pause_between_batches_ms: int = 1000,
        unit_timeout: float = 60.0,
        halt_on_error: bool = True,
    ):
        """初始化编排器.

        Args:
            batch_size: 每批并发的单元数
            pause_between_batches_ms: 批与批之间的暂停（毫秒）
            unit_timeout: 单个单元的超时（秒），超时视为该单元失败，不在此层重试
            halt_on_error: 单元失败时是否终止整个数据流
        """
        if batch_size <= 0:
            raise ValueError("batch_size must be positive")
        if pause_between_batches_ms < 0:
            raise ValueError("pause_between_batches_ms cannot be negative")
        if unit_timeout <= 0:
            raise ValueError("unit_timeout must be positive")
        self.batch_size = batch_size
        self.pause_between_batches_ms = pause_between_batches_ms
        self.unit_timeout = unit_timeout
        self.halt_on_error = halt_on_error
        self.stats = BatchStats()

    @classmethod
    def from_options(cls, options: StreamOptions) -> BatchOrchestrator:
        return cls(
            batch_size=options.effective_batch_size,
            pause_between_batches_ms=options.pause_between_batches_ms,
            unit_timeout=options.unit_timeout,
            halt_on_error=options.halt_on_error,
        )

    async def _run_unit(self, unit: FetchUnit, operation: UnitOperation) -> UnitOutcome:
        try:
            records = await asyncio.wait_for(operation(unit), self.unit_timeout)
        except asyncio.TimeoutError:
            return UnitOutcome(unit, error=UnitTimeoutError(unit, self.unit_timeout))
        except Exception as e:
            return UnitOutcome(unit, error=e)
        return UnitOutcome(unit, records)

    async def run_batch(self, batch: Sequence[FetchUnit], operation: UnitOperation) -> list[UnitOutcome]:
        """并发执行一批单元，结果顺序与输入一致."""
        logger.debug(f"Launching batch of {len(batch)} units", batch=self.stats.batches, units=len(batch))
        started = time.perf_counter()
        outcomes = await asyncio.gather(*(self._run_unit(unit, operation) for unit in batch))
        elapsed = time.perf_counter() - started

        self.stats.batches += 1
        self.stats.units += len(batch)
        self.stats.total_time_seconds += elapsed
        logger.debug(f"Batch finished in {elapsed:.3f}s", batch=self.stats.batches - 1, units=len(batch))
        return list(outcomes)

    def _handle_failure(self, unit: FetchUnit, reason: BaseException) -> None:
        error = UnitFetchError(unit, reason)
        self.stats.failures += 1
        self.stats.errors[unit.describe()] = str(reason)
        if self.halt_on_error:
            raise error from reason
        logger.bind(error_code=error.error_code).error(f"{error.message}, skipping unit", unit=unit.describe())

    async def stream(self, plan: Iterable[FetchUnit], operation: UnitOperation) -> AsyncIterator[Record]:
        """按计划顺序惰性产出记录.

        计划只在需要填满下一批时才被消费；消费者停止拉取后不会再启动新的批次。
        暂停只发生在两批之间。
        """
        self.stats = BatchStats()
        units = iter(plan)
        first = True

        while True:
            batch = list(islice(units, self.batch_size))
            if not batch:
                return
            if not first and self.pause_between_batches_ms:
                await asyncio.sleep(self.pause_between_batches_ms / 1000)
            first = False

            for outcome in await self.run_batch(batch, operation):
                if outcome.error is not None:
                    self._handle_failure(outcome.unit, outcome.error)
                    continue
                self.stats.records += len(outcome.records)
                for record in outcome.records:
                    yield record
