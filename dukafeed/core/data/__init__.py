"""数据访问层：品种查询、路径解析、二进制解码与缓存."""

from dukafeed.core.data.decoder import decode, decode_bars, decode_ticks, merge_mid_bars
from dukafeed.core.data.instruments import (
    InstrumentInfo,
    InstrumentLookup,
    InstrumentRegistry,
    default_registry,
    resolve_instrument,
)
from dukafeed.core.data.paths import (
    DEFAULT_BASE_URL,
    build_bar_path,
    build_tick_path,
    generate_urls,
    resolve,
    resolve_unit,
)

__all__ = [
    "decode",
    "decode_bars",
    "decode_ticks",
    "merge_mid_bars",
    "InstrumentInfo",
    "InstrumentLookup",
    "InstrumentRegistry",
    "default_registry",
    "resolve_instrument",
    "DEFAULT_BASE_URL",
    "build_bar_path",
    "build_tick_path",
    "generate_urls",
    "resolve",
    "resolve_unit",
]
