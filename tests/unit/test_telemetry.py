"""Tests for logging setup, TelemetryConfig and the traced() decorator."""

import logging

import pytest

from url_monitor_cache.core.config import Settings
from url_monitor_cache.shared.telemetry.logging import get_logger, setup_logging
from url_monitor_cache.shared.telemetry.telemetry import (
    TelemetryConfig,
    get_telemetry,
    set_telemetry,
)
from url_monitor_cache.shared.telemetry.tracing import traced


def test_disabled_telemetry_returns_none() -> None:
    telemetry = TelemetryConfig("url-monitor", "1.0.0", enabled=False)
    assert telemetry.setup_telemetry() is None
    telemetry.instrument_redis()
    telemetry.shutdown()


def test_set_and_get_telemetry() -> None:
    telemetry = TelemetryConfig("url-monitor", "1.0.0", enabled=False)
    set_telemetry(telemetry)
    try:
        assert get_telemetry() is telemetry
    finally:
        set_telemetry(None)
    assert get_telemetry() is None


@pytest.mark.asyncio
async def test_traced_async_propagates_result_and_errors() -> None:
    @traced("test.op")
    async def op(fail: bool) -> str:
        if fail:
            raise RuntimeError("boom")
        return "ok"

    assert await op(fail=False) == "ok"
    with pytest.raises(RuntimeError, match="boom"):
        await op(fail=True)


def test_traced_sync() -> None:
    @traced()
    def add(a: int, b: int) -> int:
        return a + b

    assert add(1, 2) == 3


def test_setup_logging_applies_cache_log_level(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("CACHE_LOG_LEVEL", raising=False)
    cache_logger = logging.getLogger("url_monitor_cache")
    try:
        setup_logging(Settings(_env_file=None, cache_log_level="debug"))
        assert cache_logger.level == logging.DEBUG

        setup_logging(Settings(_env_file=None))
        assert cache_logger.level == logging.NOTSET
    finally:
        cache_logger.setLevel(logging.NOTSET)


def test_get_logger_nests_under_cache_logger() -> None:
    assert get_logger("scripts.invalidate_cache").name == (
        "url_monitor_cache.scripts.invalidate_cache"
    )
    assert get_logger("url_monitor_cache.core.lifespan").name == (
        "url_monitor_cache.core.lifespan"
    )
