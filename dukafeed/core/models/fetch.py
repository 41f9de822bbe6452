"""Fetch unit descriptors and outcomes."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime

from dukafeed.core.models.market import DataKind, PriceSide


@dataclass(frozen=True)
class FetchUnit:
    """一个远程文件的不可变描述.

    anchor 为该文件覆盖周期的起点（UTC）：tick 文件为整点小时，
    分钟K线为当日零点，小时K线为当月1日零点，日K线为当年1月1日零点。
    """

    kind: DataKind
    instrument_key: str
    anchor: datetime
    price_side: PriceSide = PriceSide.BID

    def with_side(self, price_side: PriceSide) -> FetchUnit:
        return replace(self, price_side=price_side)

    def describe(self) -> str:
        return f"{self.instrument_key}:{self.kind.value}@{self.anchor.isoformat()}:{self.price_side.value}"


@dataclass(frozen=True)
class FetchResult:
    """单个获取单元的结果：原始字节或失败原因."""

    unit: FetchUnit
    payload: bytes = b""
    error: BaseException | None = field(default=None, compare=False)

    @property
    def ok(self) -> bool:
        return self.error is None
