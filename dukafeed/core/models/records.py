"""Tick and bar record models."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime


@dataclass(frozen=True)
class Tick:
    """单个报价事件（毫秒精度，UTC）."""

    time: datetime
    ask: float
    bid: float
    ask_volume: float
    bid_volume: float

    def scale_volume(self, factor: float) -> Tick:
        return replace(self, ask_volume=self.ask_volume * factor, bid_volume=self.bid_volume * factor)

    def with_time(self, time: datetime) -> Tick:
        return replace(self, time=time)


@dataclass(frozen=True)
class Bar:
    """OHLCV K线."""

    time: datetime
    open: float
    high: float
    low: float
    close: float
    volume: float

    @property
    def is_flat(self) -> bool:
        """零成交量的K线（休市期间的占位数据）."""
        return not self.volume

    def scale_volume(self, factor: float) -> Bar:
        return replace(self, volume=self.volume * factor)

    def with_time(self, time: datetime) -> Bar:
        return replace(self, time=time)


Record = Tick | Bar
