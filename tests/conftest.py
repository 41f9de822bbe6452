"""Pytest configuration for dukafeed test suite."""

from __future__ import annotations

import lzma
import struct
from collections.abc import Callable, Iterable
from datetime import datetime, timezone

import httpx
import pytest

from dukafeed.core.data.paths import DEFAULT_BASE_URL

TICK_FORMAT = struct.Struct(">Iiiff")
BAR_FORMAT = struct.Struct(">iiiiif")


def pytest_addoption(parser: pytest.Parser) -> None:
    """Register command-line options for controlling integration tests."""

    parser.addoption(
        "--dukafeed-run-integration",
        action="store_true",
        default=False,
        help="Run dukafeed integration tests that hit the live archive.",
    )


def pytest_configure(config: pytest.Config) -> None:
    """Register the integration marker for dukafeed tests."""

    config.addinivalue_line(
        "markers",
        "integration: marks dukafeed tests requiring network access",
    )


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Skip integration tests unless explicitly requested."""

    if config.getoption("--dukafeed-run-integration"):
        return

    skip_integration = pytest.mark.skip(
        reason="integration tests require --dukafeed-run-integration",
    )
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip_integration)


def pack_ticks(rows: Iterable[tuple[int, int, int, float, float]]) -> bytes:
    """``(time_ms, ask, bid, ask_volume, bid_volume)`` -> raw tick buffer."""
    return b"".join(TICK_FORMAT.pack(*row) for row in rows)


def pack_bars(rows: Iterable[tuple[int, int, int, int, int, float]]) -> bytes:
    """``(time_s, open, close, low, high, volume)`` -> raw bar buffer."""
    return b"".join(BAR_FORMAT.pack(*row) for row in rows)


def bi5(raw: bytes) -> bytes:
    """Compress ``raw`` the way the archive serves it."""
    return lzma.compress(raw, format=lzma.FORMAT_ALONE)


class FakeArchive:
    """In-memory stand-in for the remote archive behind ``httpx.MockTransport``.

    Each path maps to a list of responses consumed in order; the last one
    repeats. A response is a body (``bytes``, served with 200), a status code
    (``int``) or an exception raised from the transport. Unknown paths 404.
    """

    prefix = httpx.URL(DEFAULT_BASE_URL).path.rstrip("/") + "/"

    def __init__(self) -> None:
        self.routes: dict[str, list[bytes | int | Exception]] = {}
        self.requests: list[str] = []

    def add(self, path: str, *responses: bytes | int | Exception) -> FakeArchive:
        self.routes[path] = list(responses)
        return self

    def count(self, path: str) -> int:
        return self.requests.count(path)

    def handler(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path.removeprefix(self.prefix)
        self.requests.append(path)
        responses = self.routes.get(path)
        if not responses:
            return httpx.Response(404)
        item = responses.pop(0) if len(responses) > 1 else responses[0]
        if isinstance(item, Exception):
            raise item
        if isinstance(item, int):
            return httpx.Response(item)
        return httpx.Response(200, content=item)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def archive() -> FakeArchive:
    return FakeArchive()


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2024, 6, 15, 12, 30, tzinfo=timezone.utc)


@pytest.fixture
def clock(fixed_now: datetime) -> Callable[[], datetime]:
    return lambda: fixed_now


class Payloads:
    """bi5 payload builders exposed to tests as a fixture."""

    pack_ticks = staticmethod(pack_ticks)
    pack_bars = staticmethod(pack_bars)
    bi5 = staticmethod(bi5)

    @staticmethod
    def ticks(rows: Iterable[tuple[int, int, int, float, float]]) -> bytes:
        return bi5(pack_ticks(rows))

    @staticmethod
    def bars(rows: Iterable[tuple[int, int, int, int, int, float]]) -> bytes:
        return bi5(pack_bars(rows))


@pytest.fixture
def payloads() -> type[Payloads]:
    return Payloads
