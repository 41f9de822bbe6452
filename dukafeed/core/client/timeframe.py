"""时间框架解析与数据源选择."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any

from dukafeed.core.exceptions import InvalidTimeframeError
from dukafeed.core.models import Granularity

_TIMEFRAME_PATTERN = re.compile(r"^(?P<unit>[tsmhDWM])(?P<multiplier>\d*)$")

TICKS = "ticks"


class TimeframeUnit(str, Enum):
    """时间框架单位."""

    TICK = "t"
    SECOND = "s"
    MINUTE = "m"
    HOUR = "h"
    DAY = "D"
    WEEK = "W"
    MONTH = "M"


@dataclass(frozen=True)
class Timeframe:
    """解析后的时间框架；``unit`` 为 None 表示原始 tick."""

    unit: TimeframeUnit | None
    multiplier: int = 1

    @property
    def is_ticks(self) -> bool:
        return self.unit is None

    def __str__(self) -> str:
        if self.unit is None:
            return TICKS
        return f"{self.unit.value}{self.multiplier}"


class FetchStrategy(str, Enum):
    NO_RESAMPLE = "no_resample"
    RESAMPLE = "resample"


def parse_timeframe(value: Any) -> Timeframe:
    """解析 ``ticks``、``m5``、``h1``、``D``、``W`` 等时间框架.

    Raises:
        InvalidTimeframeError: 格式不合法或倍数为0
    """
    if isinstance(value, Timeframe):
        return value
    if not isinstance(value, str):
        raise InvalidTimeframeError(repr(value))
    if value == TICKS:
        return Timeframe(None)

    match = _TIMEFRAME_PATTERN.match(value)
    if not match:
        raise InvalidTimeframeError(value)
    multiplier = int(match["multiplier"] or 1)
    if multiplier <= 0:
        raise InvalidTimeframeError(value)
    return Timeframe(TimeframeUnit(match["unit"]), multiplier)


_BAR_SOURCES = {
    TimeframeUnit.MINUTE: Granularity.MINUTE,
    TimeframeUnit.HOUR: Granularity.HOUR,
    TimeframeUnit.DAY: Granularity.DAY,
}


def determine_source_and_strategy(timeframe: Timeframe, fallback_applies: bool = False) -> tuple[Granularity, FetchStrategy]:
    """选择要获取的源粒度，以及是否需要重采样到目标时间框架.

    ``fallback_applies`` 表示请求区间末端落在源粒度自身文件的当前周期内，
    此时 ``h1``/``D1`` 也会收到更细的数据，需要重采样。
    """
    if timeframe.is_ticks:
        return Granularity.TICKS, FetchStrategy.NO_RESAMPLE
    unit = timeframe.unit
    if unit in (TimeframeUnit.TICK, TimeframeUnit.SECOND):
        return Granularity.TICKS, FetchStrategy.RESAMPLE
    if unit in (TimeframeUnit.WEEK, TimeframeUnit.MONTH):
        return Granularity.DAY, FetchStrategy.RESAMPLE

    source = _BAR_SOURCES[unit]
    if timeframe.multiplier != 1:
        return source, FetchStrategy.RESAMPLE
    if source is not Granularity.MINUTE and fallback_applies:
        return source, FetchStrategy.RESAMPLE
    return source, FetchStrategy.NO_RESAMPLE
