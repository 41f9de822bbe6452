"""Market-related enums and types."""

from __future__ import annotations

from enum import Enum
from typing import Any, TypeVar

from dukafeed.core.exceptions import ErrorCode, InvalidOptionError

E = TypeVar("E", bound="_ParsableEnum")


class _ParsableEnum(str, Enum):
    """支持从字符串或枚举成员校验解析的枚举基类."""

    @classmethod
    def parse(cls: type[E], value: Any, error_code: ErrorCode = ErrorCode.INVALID_OPTION, option: str | None = None) -> E:
        """校验并返回枚举成员，无效值抛出 InvalidOptionError."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            normalized = value.strip().lower()
            for member in cls:
                if member.value == normalized:
                    return member
        allowed = ", ".join(member.value for member in cls)
        name = option or cls.__name__
        raise InvalidOptionError(
            f"Invalid {name}: {value!r}. Use one of: {allowed}",
            error_code,
            option=name,
            value=value,
        )


class PriceType(_ParsableEnum):
    """价格类型枚举."""

    BID = "bid"
    ASK = "ask"
    MID = "mid"


class PriceSide(_ParsableEnum):
    """远程文件可直接提供的价格方向（mid 需要合成）."""

    BID = "bid"
    ASK = "ask"

    @property
    def token(self) -> str:
        """文件名中的大写价格标记."""
        return self.value.upper()


class VolumeUnits(_ParsableEnum):
    """成交量单位枚举，源数据以百万为单位."""

    MILLIONS = "millions"
    THOUSANDS = "thousands"
    UNITS = "units"

    @property
    def multiplier(self) -> int:
        return _VOLUME_MULTIPLIERS[self]


_VOLUME_MULTIPLIERS = {
    VolumeUnits.MILLIONS: 1,
    VolumeUnits.THOUSANDS: 1_000,
    VolumeUnits.UNITS: 1_000_000,
}


class Granularity(_ParsableEnum):
    """数据粒度枚举."""

    TICKS = "ticks"
    MINUTE = "minute"
    HOUR = "hour"
    DAY = "day"


class WeeklyOpen(_ParsableEnum):
    """每周开盘日."""

    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"


class TimeRange(str, Enum):
    """远程文件的聚合周期."""

    YEAR = "year"
    MONTH = "month"
    DAY = "day"
    HOUR = "hour"


class DataKind(str, Enum):
    """远程文件的数据种类."""

    TICK = "tick"
    MINUTE_BAR = "minute_bar"
    HOUR_BAR = "hour_bar"
    DAY_BAR = "day_bar"

    @property
    def is_bar(self) -> bool:
        return self is not DataKind.TICK

    @property
    def time_range(self) -> TimeRange:
        """该种类文件覆盖的周期."""
        return _KIND_TO_RANGE[self]

    @property
    def granularity(self) -> Granularity:
        return _KIND_TO_GRANULARITY[self]

    @classmethod
    def for_range(cls, time_range: TimeRange) -> DataKind:
        """按文件周期返回对应的数据种类."""
        for kind, kind_range in _KIND_TO_RANGE.items():
            if kind_range is time_range:
                return kind
        raise ValueError(f"No data kind for range {time_range!r}")

    @classmethod
    def for_granularity(cls, granularity: Granularity) -> DataKind:
        for kind, kind_granularity in _KIND_TO_GRANULARITY.items():
            if kind_granularity is granularity:
                return kind
        raise ValueError(f"No data kind for granularity {granularity!r}")


_KIND_TO_RANGE = {
    DataKind.TICK: TimeRange.HOUR,
    DataKind.MINUTE_BAR: TimeRange.DAY,
    DataKind.HOUR_BAR: TimeRange.MONTH,
    DataKind.DAY_BAR: TimeRange.YEAR,
}

_KIND_TO_GRANULARITY = {
    DataKind.TICK: Granularity.TICKS,
    DataKind.MINUTE_BAR: Granularity.MINUTE,
    DataKind.HOUR_BAR: Granularity.HOUR,
    DataKind.DAY_BAR: Granularity.DAY,
}
