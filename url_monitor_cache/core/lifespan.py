"""Cache lifespan: startup and shutdown.

Single place for startup/shutdown wiring (SRP): logging, telemetry (if
enabled), Redis connect, then disconnect and telemetry shutdown on exit.
Used by scripts and by host applications' own lifespan hooks.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from url_monitor_cache.core.config import Settings, get_settings
from url_monitor_cache.infrastructure.cache.namespaced_client import NamespacedClient
from url_monitor_cache.shared.telemetry.logging import setup_logging
from url_monitor_cache.shared.telemetry.telemetry import (
    TelemetryConfig,
    get_telemetry,
    set_telemetry,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def cache_lifespan(
    settings: Settings | None = None,
) -> AsyncIterator[NamespacedClient]:
    """Yield a connected NamespacedClient; disconnect on exit.

    Raises:
        StoreUnavailableException: If Redis cannot be reached at startup.
    """
    settings = settings or get_settings()
    setup_logging(settings)

    if settings.telemetry_enabled:
        telemetry = TelemetryConfig(
            service_name=settings.app_name,
            service_version=settings.app_version,
            enabled=True,
            environment=settings.telemetry_environment,
        )
        telemetry.setup_telemetry(
            exporter_type=settings.telemetry_exporter,
            otlp_endpoint=settings.telemetry_otlp_endpoint,
            sample_rate=settings.telemetry_sample_rate,
        )
        telemetry.instrument_redis()
        telemetry.instrument_logging()
        set_telemetry(telemetry)
        logger.info("Telemetry initialized")

    cache = NamespacedClient(settings=settings)
    try:
        await cache.connect()
        yield cache
    finally:
        await cache.disconnect()
        telemetry = get_telemetry()
        if telemetry is not None:
            telemetry.shutdown()
            set_telemetry(None)
