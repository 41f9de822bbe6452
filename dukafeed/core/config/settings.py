"""配置管理模块 - 处理数据流的默认配置"""

from __future__ import annotations

import os
import tomllib
from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Any

from dukafeed.core.data.paths import DEFAULT_BASE_URL
from dukafeed.core.logging import logger


@dataclass(frozen=True)
class FeedDefaults:
    """数据流选项的默认值"""

    price_type: str = "bid"
    utc_offset: str = "00:00:00"
    timezone: str = "Etc/UTC"
    volume_units: str = "millions"
    ignore_flats: bool = True
    batch_size: int = 10
    pause_between_batches_ms: int = 1000
    use_cache: bool = False
    cache_folder_path: str = ".dukascopy-cache"
    max_retries: int = 3
    retry_on_empty: bool = False
    fail_after_retry_count: bool = True
    market_open: str = "00:00:00"
    weekly_open: str = "monday"
    halt_on_error: bool = True
    unit_timeout: float = 60.0
    base_url: str = DEFAULT_BASE_URL

    @classmethod
    def field_names(cls) -> set[str]:
        return {f.name for f in fields(cls)}

    @classmethod
    def from_dict(cls, config_dict: dict[str, Any]) -> FeedDefaults:
        """从字典创建配置，忽略未知字段"""
        known = cls.field_names()
        unknown = set(config_dict) - known
        if unknown:
            logger.warning("ignoring unknown feed settings", keys=sorted(unknown))
        return cls(**{k: v for k, v in config_dict.items() if k in known})

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    def merged(self, **updates: Any) -> FeedDefaults:
        return replace(self, **updates)


_BOOL_ENV = {
    "DUKAFEED_USE_CACHE": "use_cache",
    "DUKAFEED_IGNORE_FLATS": "ignore_flats",
    "DUKAFEED_HALT_ON_ERROR": "halt_on_error",
}
_INT_ENV = {
    "DUKAFEED_BATCH_SIZE": "batch_size",
    "DUKAFEED_PAUSE_BETWEEN_BATCHES_MS": "pause_between_batches_ms",
    "DUKAFEED_MAX_RETRIES": "max_retries",
}
_STR_ENV = {
    "DUKAFEED_CACHE_FOLDER_PATH": "cache_folder_path",
    "DUKAFEED_BASE_URL": "base_url",
    "DUKAFEED_PRICE_TYPE": "price_type",
    "DUKAFEED_VOLUME_UNITS": "volume_units",
    "DUKAFEED_TIMEZONE": "timezone",
}


def load_config_from_env() -> dict[str, Any]:
    """从环境变量加载配置"""
    config: dict[str, Any] = {}

    for env_name, key in _BOOL_ENV.items():
        value = os.getenv(env_name)
        if value is not None:
            config[key] = value.strip().lower() in {"1", "true", "yes", "on"}

    for env_name, key in _INT_ENV.items():
        value = os.getenv(env_name)
        if value is not None:
            config[key] = int(value)

    for env_name, key in _STR_ENV.items():
        value = os.getenv(env_name)
        if value:
            config[key] = value

    unit_timeout = os.getenv("DUKAFEED_UNIT_TIMEOUT")
    if unit_timeout is not None:
        config["unit_timeout"] = float(unit_timeout)

    return config


class ConfigManager:
    """配置管理器：TOML 文件 ``[feed]`` 表 + 环境变量覆盖"""

    def __init__(self, config_path: Path | None = None):
        """初始化配置管理器

        Args:
            config_path: 配置文件路径，如果为None则使用默认路径
        """
        self.config_path = config_path or Path(os.getenv("DUKAFEED_CONFIG", Path.home() / ".dukafeed" / "config.toml"))
        self.defaults = self._load_config()

    def _load_config(self) -> FeedDefaults:
        """加载配置"""
        file_config: dict[str, Any] = {}
        if self.config_path.exists():
            with open(self.config_path, "rb") as f:
                file_config = tomllib.load(f).get("feed", {})
        return FeedDefaults.from_dict({**file_config, **load_config_from_env()})

    def get_defaults(self) -> FeedDefaults:
        """获取当前默认配置"""
        return self.defaults

    def update(self, **updates: Any) -> None:
        """更新配置"""
        self.defaults = self.defaults.merged(**updates)


def get_default_config() -> FeedDefaults:
    """获取默认配置（内置默认值 + 配置文件 + 环境变量）"""
    return ConfigManager().get_defaults()
