"""标准化错误代码."""

from enum import Enum


class ErrorCode(str, Enum):
    """错误代码枚举."""

    GENERAL_ERROR = "GENERAL_ERROR"

    # 输入校验
    UNKNOWN_INSTRUMENT = "UNKNOWN_INSTRUMENT"
    INVALID_TIMEFRAME = "INVALID_TIMEFRAME"
    INVALID_GRANULARITY = "INVALID_GRANULARITY"
    INVALID_PRICE_TYPE = "INVALID_PRICE_TYPE"
    INVALID_VOLUME_UNITS = "INVALID_VOLUME_UNITS"
    INVALID_UTC_OFFSET = "INVALID_UTC_OFFSET"
    INVALID_TIMEZONE = "INVALID_TIMEZONE"
    INVALID_WEEKLY_OPEN = "INVALID_WEEKLY_OPEN"
    INVALID_MARKET_OPEN = "INVALID_MARKET_OPEN"
    INVALID_POSITIVE_INTEGER = "INVALID_POSITIVE_INTEGER"
    INVALID_NON_NEGATIVE_INTEGER = "INVALID_NON_NEGATIVE_INTEGER"
    INVALID_RETRY_DELAY = "INVALID_RETRY_DELAY"
    INVALID_OPTION = "INVALID_OPTION"
    UNKNOWN_OPTION = "UNKNOWN_OPTION"
    MISSING_DATE_RANGE = "MISSING_DATE_RANGE"
    PARTIAL_DATE_RANGE = "PARTIAL_DATE_RANGE"
    CONFLICTING_DATE_OPTIONS = "CONFLICTING_DATE_OPTIONS"

    # 网络与数据
    HTTP_ERROR = "HTTP_ERROR"
    TRANSPORT_ERROR = "TRANSPORT_ERROR"
    DECOMPRESS_ERROR = "DECOMPRESS_ERROR"
    INVALID_FORMAT = "INVALID_FORMAT"
    UNIT_FETCH_FAILED = "UNIT_FETCH_FAILED"
    UNIT_TIMEOUT = "UNIT_TIMEOUT"

    # 客户端
    SYNC_IN_ASYNC_CONTEXT = "SYNC_IN_ASYNC_CONTEXT"

    # 缓存
    CACHE_ERROR = "CACHE_ERROR"
