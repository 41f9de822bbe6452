"""dukafeed核心异常类."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from dukafeed.core.exceptions.codes import ErrorCode

if TYPE_CHECKING:
    from dukafeed.core.models.fetch import FetchUnit


class DukaFeedError(Exception):
    """dukafeed基础异常类."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode | str = ErrorCode.GENERAL_ERROR,
        details: dict[str, Any] | None = None,
    ):
        """初始化异常.

        Args:
            message: 错误消息
            error_code: 错误代码
            details: 额外详情
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code.value if isinstance(error_code, ErrorCode) else error_code
        self.details = details or {}

    def to_payload(self) -> dict[str, Any]:
        """Return a serializable payload representing the error."""

        return {
            "code": self.error_code,
            "message": self.message,
            "details": dict(self.details),
        }


class UnknownInstrumentError(DukaFeedError):
    """未知交易品种异常."""

    def __init__(self, instrument: str, details: dict[str, Any] | None = None):
        super_details = details or {}
        super_details["instrument"] = instrument
        super().__init__(f"Unknown instrument: {instrument!r}", ErrorCode.UNKNOWN_INSTRUMENT, super_details)
        self.instrument = instrument


class InvalidTimeframeError(DukaFeedError):
    """无效时间框架异常."""

    def __init__(self, timeframe: Any, details: dict[str, Any] | None = None):
        super_details = details or {}
        super_details["timeframe"] = timeframe
        super().__init__(
            f"Invalid timeframe: {timeframe!r}. Use 'ticks' or a timeframe string (e.g. 'm5', 'h1', 'D')",
            ErrorCode.INVALID_TIMEFRAME,
            super_details,
        )
        self.timeframe = timeframe


class InvalidOptionError(DukaFeedError):
    """选项校验失败异常."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.INVALID_OPTION,
        option: str | None = None,
        value: Any = None,
        details: dict[str, Any] | None = None,
    ):
        super_details = details or {}
        if option is not None:
            super_details["option"] = option
            super_details["value"] = value
        super().__init__(message, error_code, super_details)
        self.option = option
        self.value = value


class FetchError(DukaFeedError):
    """远程资源获取异常."""

    def __init__(
        self,
        message: str,
        path: str,
        error_code: ErrorCode = ErrorCode.GENERAL_ERROR,
        details: dict[str, Any] | None = None,
    ):
        super_details = details or {}
        super_details["path"] = path
        super().__init__(message, error_code, super_details)
        self.path = path


class HttpStatusError(FetchError):
    """重试耗尽后的HTTP状态异常."""

    def __init__(self, path: str, status_code: int, attempts: int | None = None):
        details: dict[str, Any] = {"status_code": status_code}
        if attempts is not None:
            details["attempts"] = attempts
        super().__init__(f"HTTP {status_code} for {path}", path, ErrorCode.HTTP_ERROR, details)
        self.status_code = status_code
        self.attempts = attempts


class TransportError(FetchError):
    """网络传输层异常（超时、连接被拒绝等）."""

    def __init__(self, path: str, reason: str, attempts: int | None = None):
        details: dict[str, Any] = {"reason": reason}
        if attempts is not None:
            details["attempts"] = attempts
        super().__init__(f"Transport error for {path}: {reason}", path, ErrorCode.TRANSPORT_ERROR, details)
        self.reason = reason
        self.attempts = attempts


class DecompressError(FetchError):
    """响应体解压失败，说明数据已损坏."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"Failed to decompress {path}: {reason}", path, ErrorCode.DECOMPRESS_ERROR, {"reason": reason})
        self.reason = reason


class InvalidFormatError(DukaFeedError):
    """二进制记录格式错误."""

    def __init__(self, kind: str, length: int, record_size: int):
        super().__init__(
            f"Invalid {kind} buffer: {length} bytes is not a multiple of {record_size}",
            ErrorCode.INVALID_FORMAT,
            {"kind": kind, "length": length, "record_size": record_size},
        )
        self.kind = kind
        self.length = length
        self.record_size = record_size


class UnitTimeoutError(DukaFeedError):
    """单个获取单元超过 unit_timeout 未完成."""

    def __init__(self, unit: FetchUnit, timeout: float):
        super().__init__(
            f"Fetch for {unit.describe()} timed out after {timeout}s",
            ErrorCode.UNIT_TIMEOUT,
            {"unit": unit.describe(), "timeout": timeout},
        )
        self.unit = unit
        self.timeout = timeout


class UnitFetchError(DukaFeedError):
    """单个获取单元失败，在 halt_on_error 模式下终止整个数据流."""

    def __init__(self, unit: FetchUnit, reason: BaseException):
        error_code = reason.error_code if isinstance(reason, DukaFeedError) else ErrorCode.UNIT_FETCH_FAILED.value
        super().__init__(
            f"Fetch failed for {unit.describe()}: {reason!r}",
            error_code,
            {"unit": unit.describe(), "reason": str(reason)},
        )
        self.unit = unit
        self.reason = reason


class CacheError(DukaFeedError):
    """缓存读写异常."""

    def __init__(self, message: str, key: str | None = None, details: dict[str, Any] | None = None):
        super_details = details or {}
        if key:
            super_details["key"] = key
        super().__init__(message, ErrorCode.CACHE_ERROR, super_details)
        self.key = key
