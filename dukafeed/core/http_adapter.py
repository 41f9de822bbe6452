"""
HTTP adapter for the remote bi5 archive.

This module provides the fetch client used by the streaming pipeline: one GET
per resolved resource path, a retry loop with configurable backoff, LZMA
decompression of the response body, and optional read-through/write-through
caching of the decompressed payload.
"""

from __future__ import annotations

import asyncio
import lzma
from dataclasses import dataclass, field
from typing import Any

import httpx

from dukafeed.core.config.options import StreamOptions
from dukafeed.core.data.cache import ByteCache, FileCache
from dukafeed.core.data.paths import DEFAULT_BASE_URL, resolve_unit
from dukafeed.core.exceptions import (
    CacheError,
    DecompressError,
    FetchError,
    HttpStatusError,
    TransportError,
)
from dukafeed.core.logging import logger
from dukafeed.core.models import FetchResult, FetchUnit
from dukafeed.core.patterns import ResponseVerdict, RetryPolicy


@dataclass
class HttpConfig:
    """Configuration for HTTP client behavior."""

    base_url: str = DEFAULT_BASE_URL
    timeout: float = 30.0
    user_agent: str = "dukafeed/0.1.0"
    headers: dict[str, str] = field(default_factory=dict)
    transport: httpx.AsyncBaseTransport | None = None

    def __post_init__(self):
        """Validate HTTP configuration."""
        if not self.base_url:
            raise ValueError("base_url cannot be empty")
        if self.timeout <= 0:
            raise ValueError("timeout must be positive")


def decompress(path: str, raw: bytes) -> bytes:
    """Decompress an LZMA body; an empty body is a valid zero-record payload."""
    if not raw:
        return b""
    try:
        return lzma.decompress(raw)
    except lzma.LZMAError as e:
        raise DecompressError(path, str(e)) from e


class FetchClient:
    """
    Fetch client with retry, decompression and optional disk cache.

    The client is scoped to one stream: it opens a single ``httpx.AsyncClient``
    on entry and closes it on exit. Instances hold no other mutable state,
    so concurrent ``fetch`` calls are safe.
    """

    def __init__(
        self,
        http_config: HttpConfig | None = None,
        retry_policy: RetryPolicy | None = None,
        cache: ByteCache | None = None,
    ):
        """Initialize fetch client with configuration."""
        self.http_config = http_config or HttpConfig()
        self.retry_policy = retry_policy or RetryPolicy()
        self.cache = cache
        self._client: httpx.AsyncClient | None = None

    @classmethod
    def from_options(cls, options: StreamOptions, transport: httpx.AsyncBaseTransport | None = None) -> FetchClient:
        """Build a client from a validated options snapshot."""
        cache = FileCache(options.cache_folder_path) if options.use_cache else None
        return cls(
            HttpConfig(base_url=options.base_url, transport=transport),
            options.retry_policy,
            cache,
        )

    async def __aenter__(self) -> FetchClient:
        """Async context manager entry."""
        await self._ensure_client()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit."""
        await self.close()

    async def _ensure_client(self) -> httpx.AsyncClient:
        """Ensure HTTP client is initialized."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.http_config.base_url,
                timeout=httpx.Timeout(self.http_config.timeout),
                headers={"User-Agent": self.http_config.user_agent, **self.http_config.headers},
                transport=self.http_config.transport,
            )
        return self._client

    async def close(self) -> None:
        """Close HTTP client and cleanup resources."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def _request_with_retry(self, path: str) -> bytes:
        """GET ``path`` until a successful response or the retries are exhausted.

        404 maps to an empty body and is never retried. Any other non-200
        status, an empty 200 when ``retry_on_empty`` is set, and transport
        failures are retried.
        """
        client = await self._ensure_client()
        policy = self.retry_policy
        last_status: int | None = None
        last_error: httpx.TransportError | None = None

        for attempt in range(policy.max_attempts):
            try:
                response = await client.get(path)
            except httpx.TransportError as e:
                last_error, last_status = e, None
                reason = f"{type(e).__name__}: {e}"
            else:
                body = response.content
                verdict = policy.classify(response.status_code, body)
                if verdict is ResponseVerdict.SUCCESS:
                    return body
                if verdict is ResponseVerdict.EMPTY:
                    return b""
                last_error, last_status = None, response.status_code
                reason = f"status {response.status_code}" + (" (empty body)" if not body else "")

            if attempt < policy.max_retries:
                delay = policy.delay_seconds(attempt)
                logger.warning(
                    f"Request for {path} failed with {reason}, retrying in {delay:.3f}s (attempt {attempt + 1})",
                    path=path,
                    attempt=attempt + 1,
                )
                await asyncio.sleep(delay)

        attempts = policy.max_attempts
        logger.warning(f"Retries exhausted for {path} after {attempts} attempts", path=path, attempts=attempts)

        if not policy.fail_after_retry_count:
            return b""
        if last_error is not None:
            raise TransportError(path, f"{type(last_error).__name__}: {last_error}", attempts) from last_error
        if last_status == 200:
            return b""
        raise HttpStatusError(path, last_status or 0, attempts)

    async def fetch(self, path: str) -> bytes:
        """Return the decompressed payload for ``path``.

        Raises:
            HttpStatusError: retries exhausted with ``fail_after_retry_count``
            TransportError: network failure on every attempt
            DecompressError: the body is not a valid LZMA container
        """
        if self.cache is not None:
            try:
                cached = await self.cache.get(path)
            except CacheError as e:
                logger.bind(error_code=e.error_code).warning(f"Cache read failed: {e.message}", path=path)
                cached = None
            if cached is not None:
                logger.debug("cache hit", path=path, size=len(cached))
                return cached

        raw = await self._request_with_retry(path)
        payload = decompress(path, raw)

        if self.cache is not None and payload:
            try:
                await self.cache.set(path, payload)
            except CacheError as e:
                logger.bind(error_code=e.error_code).warning(f"Cache write failed: {e.message}", path=path)

        return payload

    async def fetch_unit(self, unit: FetchUnit) -> FetchResult:
        """Fetch one unit and capture the outcome instead of raising."""
        path = resolve_unit(unit)
        try:
            payload = await self.fetch(path)
        except FetchError as e:
            return FetchResult(unit, error=e)
        return FetchResult(unit, payload)
