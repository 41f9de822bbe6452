"""交易品种元数据查询.

远程档案按品种的历史文件名（如 ``EURUSD``）组织目录，价格以整数存储，
需要除以品种的点值（point value）还原为小数价格。
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass

from dukafeed.core.exceptions import UnknownInstrumentError


@dataclass(frozen=True)
class InstrumentInfo:
    """品种查询结果."""

    instrument: str
    remote_filename: str
    point_value: int


InstrumentLookup = Callable[[str], InstrumentInfo | None]

_FOREX_MAJORS = (
    "EUR/USD",
    "GBP/USD",
    "AUD/USD",
    "NZD/USD",
    "USD/CAD",
    "USD/CHF",
    "EUR/GBP",
    "EUR/CHF",
    "EUR/AUD",
    "EUR/CAD",
    "GBP/CHF",
    "AUD/CAD",
    "AUD/NZD",
)

_FOREX_JPY = (
    "USD/JPY",
    "EUR/JPY",
    "GBP/JPY",
    "AUD/JPY",
    "CAD/JPY",
    "CHF/JPY",
    "NZD/JPY",
)

_OTHER = {
    "XAU/USD": 1_000,
    "XAG/USD": 1_000,
    "BTC/USD": 10,
    "ETH/USD": 10,
    "AAPL.US/USD": 1_000,
    "MSFT.US/USD": 1_000,
    "USA500.IDX/USD": 1_000,
    "DEU.IDX/EUR": 1_000,
    "BRENT.CMD/USD": 1_000,
}


def remote_filename_for(instrument: str) -> str:
    """``EUR/USD`` -> ``EURUSD``, ``AAPL.US/USD`` -> ``AAPLUSUSD``."""
    return instrument.replace("/", "").replace(".", "").upper()


def _default_table() -> dict[str, InstrumentInfo]:
    table: dict[str, int] = {}
    table.update({name: 100_000 for name in _FOREX_MAJORS})
    table.update({name: 1_000 for name in _FOREX_JPY})
    table.update(_OTHER)
    return {name: InstrumentInfo(name, remote_filename_for(name), pv) for name, pv in table.items()}


class InstrumentRegistry:
    """品种注册表，可作为 ``lookup`` 协作者注入."""

    def __init__(self, instruments: Iterable[InstrumentInfo] | None = None, include_defaults: bool = True) -> None:
        self._instruments: dict[str, InstrumentInfo] = _default_table() if include_defaults else {}
        for info in instruments or ():
            self.register(info)

    def register(self, info: InstrumentInfo) -> None:
        self._instruments[info.instrument.upper()] = info

    def lookup(self, instrument: str) -> InstrumentInfo | None:
        if not isinstance(instrument, str):
            return None
        return self._instruments.get(instrument.strip().upper())

    def require(self, instrument: str) -> InstrumentInfo:
        """查询品种，不存在时抛出 UnknownInstrumentError."""
        info = self.lookup(instrument)
        if info is None:
            raise UnknownInstrumentError(instrument)
        return info

    def __call__(self, instrument: str) -> InstrumentInfo | None:
        return self.lookup(instrument)

    def __contains__(self, instrument: object) -> bool:
        return isinstance(instrument, str) and self.lookup(instrument) is not None

    def __len__(self) -> int:
        return len(self._instruments)

    def names(self) -> list[str]:
        return sorted(info.instrument for info in self._instruments.values())

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, tuple[str, int]]) -> InstrumentRegistry:
        """从 ``{instrument: (remote_filename, point_value)}`` 构建仅含自定义品种的注册表."""
        return cls(
            (InstrumentInfo(name, filename, pv) for name, (filename, pv) in mapping.items()),
            include_defaults=False,
        )


default_registry = InstrumentRegistry()


def resolve_instrument(instrument: str, lookup: InstrumentLookup | None = None) -> InstrumentInfo:
    """通过查询协作者解析品种；未找到时在任何网络请求之前失败."""
    info = (lookup or default_registry.lookup)(instrument)
    if info is None:
        raise UnknownInstrumentError(instrument)
    return info
