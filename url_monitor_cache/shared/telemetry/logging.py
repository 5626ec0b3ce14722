"""Logging configuration for the cache client.

The root level follows DEBUG; CACHE_LOG_LEVEL overrides the level of the
url_monitor_cache loggers only, so cache HIT/MISS/SET lines can be turned
on (or silenced) without touching the host application's logging.
"""

import logging
import sys

from url_monitor_cache.core.config import Settings, get_settings

CACHE_LOGGER_NAME = "url_monitor_cache"


def setup_logging(settings: Settings | None = None) -> None:
    """Configure process logging and the cache logger level.

    Args:
        settings: Optional settings (defaults to get_settings()).
    """
    settings = settings or get_settings()
    log_level = logging.DEBUG if settings.debug else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    cache_logger = logging.getLogger(CACHE_LOGGER_NAME)
    if settings.cache_log_level:
        cache_logger.setLevel(settings.cache_log_level)
    else:
        cache_logger.setLevel(logging.NOTSET)


def get_logger(name: str) -> logging.Logger:
    """Return a logger under the cache logger tree.

    Names outside url_monitor_cache (scripts, __main__) are nested under
    it so CACHE_LOG_LEVEL applies to them too.
    """
    if name != CACHE_LOGGER_NAME and not name.startswith(f"{CACHE_LOGGER_NAME}."):
        name = f"{CACHE_LOGGER_NAME}.{name}"
    return logging.getLogger(name)
