"""缓存系统实现模块."""

from dukafeed.core.data.cache.base import ByteCache
from dukafeed.core.data.cache.file import FileCache
from dukafeed.core.data.cache.key import CACHE_KEY_DELIMITER, cache_key

__all__ = [
    "ByteCache",
    "FileCache",
    "CACHE_KEY_DELIMITER",
    "cache_key",
]
