"""Tests for structured logging with trace propagation."""

from __future__ import annotations

import asyncio
import io
import json

from dukafeed.core.logging import LogConfig, StructuredLogger, log_context


def _read_records(stream: io.StringIO) -> list[dict[str, object]]:
    stream.seek(0)
    lines = [line for line in stream.getvalue().splitlines() if line.strip()]
    return [json.loads(line) for line in lines]


def _logger(buffer: io.StringIO) -> StructuredLogger:
    return StructuredLogger(LogConfig(level="DEBUG", console_stream=buffer, console_output=True, file_output=False))


def test_structured_log_contains_trace_and_context() -> None:
    buffer = io.StringIO()
    logger = _logger(buffer)

    with logger.context(trace_id="trace-123", instrument="EUR/USD", error_code="HTTP_ERROR", granularity="hour"):
        logger.logger.info("unit fetched", path="EURUSD/2019/00/04/BID_candles_min_1.bi5")

    records = _read_records(buffer)
    assert len(records) == 1
    record = records[0]
    assert record["trace_id"] == "trace-123"
    assert record["instrument"] == "EUR/USD"
    assert record["error_code"] == "HTTP_ERROR"
    assert record["context"]["granularity"] == "hour"
    assert record["context"]["path"] == "EURUSD/2019/00/04/BID_candles_min_1.bi5"


def test_trace_id_propagates_within_context() -> None:
    buffer = io.StringIO()
    logger = _logger(buffer)

    with logger.context() as trace_id:
        logger.logger.info("first event")
        logger.logger.info("second event")

    logger.logger.info("outside context")

    records = _read_records(buffer)
    assert len(records) == 3
    assert records[0]["trace_id"] == records[1]["trace_id"]
    assert records[0]["trace_id"] == trace_id
    assert records[2]["trace_id"] != records[0]["trace_id"]


def test_trace_id_generated_when_missing() -> None:
    buffer = io.StringIO()
    logger = _logger(buffer)

    logger.logger.info("single message")

    records = _read_records(buffer)
    assert len(records) == 1
    trace_id = records[0]["trace_id"]
    assert isinstance(trace_id, str)
    assert len(trace_id) == 32
    assert all(character in "0123456789abcdef" for character in trace_id)


def test_context_survives_async_generator_closed_elsewhere() -> None:
    """在另一个任务中关闭异步生成器时上下文仍能恢复."""
    buffer = io.StringIO()
    logger = _logger(buffer)

    async def records():
        with log_context(instrument="USD/JPY"):
            logger.logger.info("inside stream")
            yield 1
            yield 2

    async def main() -> int:
        agen = records()
        first = await asyncio.create_task(agen.__anext__())
        await asyncio.create_task(agen.aclose())
        return first

    assert asyncio.run(main()) == 1

    records_logged = _read_records(buffer)
    assert records_logged[0]["instrument"] == "USD/JPY"


def test_file_output_appends_json_lines(tmp_path) -> None:
    """文件输出按行追加 JSON，目录不存在时自动创建."""
    path = tmp_path / "logs" / "dukafeed.jsonl"
    logger = StructuredLogger(
        LogConfig(level="INFO", console_output=False, file_output=True, file_path=str(path))
    )

    with logger.context(trace_id="trace-file", instrument="EUR/USD"):
        logger.logger.info("batch done", batch=1)
        logger.logger.debug("filtered out")
        logger.logger.warning("unit skipped", batch=2)

    records = [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines()]
    assert [record["message"] for record in records] == ["batch done", "unit skipped"]
    assert all(record["trace_id"] == "trace-file" for record in records)
    assert records[1]["level"] == "WARNING"
    assert records[1]["context"]["batch"] == 2
