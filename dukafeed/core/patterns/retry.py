"""重试策略：最大次数、延迟计划与空响应处理."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum

RetryDelay = int | Callable[[int], int]


def exponential_backoff(attempt: int) -> int:
    """默认指数退避：200ms, 400ms, 800ms, 1600ms..."""
    return int(200 * 2**attempt)


class ResponseVerdict(Enum):
    """单次响应的判定结果."""

    SUCCESS = "success"
    EMPTY = "empty"
    RETRY = "retry"


@dataclass(frozen=True)
class RetryPolicy:
    """重试配置.

    共尝试 ``max_retries + 1`` 次。``retry_delay`` 可以是固定毫秒数，
    也可以是以重试序号（从0开始）为参数、返回毫秒数的函数。
    """

    max_retries: int = 3
    retry_delay: RetryDelay = field(default=exponential_backoff)
    retry_on_empty: bool = False
    fail_after_retry_count: bool = True

    def __post_init__(self) -> None:
        if self.max_retries < 0:
            raise ValueError("max_retries must be non-negative")
        if isinstance(self.retry_delay, bool) or not (
            callable(self.retry_delay) or (isinstance(self.retry_delay, int) and self.retry_delay >= 0)
        ):
            raise ValueError("retry_delay must be a non-negative integer or a callable")

    @property
    def max_attempts(self) -> int:
        return self.max_retries + 1

    def delay_ms(self, retry_number: int) -> int:
        """第 ``retry_number`` 次重试前的等待毫秒数."""
        if callable(self.retry_delay):
            return max(0, int(self.retry_delay(retry_number)))
        return self.retry_delay

    def delay_seconds(self, retry_number: int) -> float:
        return self.delay_ms(retry_number) / 1000.0

    def classify(self, status_code: int, body: bytes) -> ResponseVerdict:
        """判定响应：200 且（非空或不要求重试空响应）为成功，404 视为空数据且不重试."""
        if status_code == 404:
            return ResponseVerdict.EMPTY
        if status_code == 200 and (body or not self.retry_on_empty):
            return ResponseVerdict.SUCCESS
        return ResponseVerdict.RETRY
