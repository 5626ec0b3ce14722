"""Cache client configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. Connection and TTL values are validated at load time.
"""

from functools import lru_cache

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from url_monitor_cache.core.constants import (
    DEFAULT_TTL_ALERT_STATE,
    DEFAULT_TTL_CACHE,
    DEFAULT_TTL_SESSION,
    DEFAULT_TTL_TENANT,
    KEY_PREFIX,
    KEY_SEP,
)

_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})


class Settings(BaseSettings):
    """Settings loaded from environment and .env.

    All settings have defaults suitable for a local Redis on port 6379.
    Persistence mode (AOF), the server-side password and the data
    directory are Redis server settings and are not configured here;
    redis_password only authenticates this client.
    """

    # App
    app_name: str = "url-monitor"
    app_version: str = "1.0.0"
    debug: bool = False
    # Level of the url_monitor_cache loggers (e.g. DEBUG for HIT/MISS lines)
    cache_log_level: str | None = None

    # Redis connection: redis_url wins over host/port/db/password when set
    redis_url: str | None = None
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_db: int = 0
    redis_password: SecretStr | None = None
    redis_max_connections: int = 10
    redis_socket_connect_timeout: float = 5.0

    # Key namespace
    redis_key_prefix: str = KEY_PREFIX

    # TTLs in seconds per category (schedule state never expires)
    cache_ttl_session: int = DEFAULT_TTL_SESSION
    cache_ttl_cache: int = DEFAULT_TTL_CACHE
    cache_ttl_alert_state: int = DEFAULT_TTL_ALERT_STATE
    cache_ttl_tenant: int = DEFAULT_TTL_TENANT

    # OpenTelemetry
    telemetry_enabled: bool = False
    telemetry_exporter: str = "console"
    telemetry_otlp_endpoint: str | None = None
    telemetry_sample_rate: float = 1.0
    telemetry_environment: str = "development"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @model_validator(mode="after")
    def validate_prefix_and_ttls(self) -> "Settings":
        """Validate key prefix and TTLs.

        - REDIS_KEY_PREFIX must be non-empty and free of the key separator.
        - Every CACHE_TTL_* must be a positive number of seconds.
        - CACHE_LOG_LEVEL, when set, must be a standard level name.
        """
        if not self.redis_key_prefix:
            raise ValueError("REDIS_KEY_PREFIX must be a non-empty string")
        if KEY_SEP in self.redis_key_prefix:
            raise ValueError(
                f"REDIS_KEY_PREFIX must not contain separator {KEY_SEP!r}, "
                f"got: {self.redis_key_prefix!r}"
            )
        for name in (
            "cache_ttl_session",
            "cache_ttl_cache",
            "cache_ttl_alert_state",
            "cache_ttl_tenant",
        ):
            if getattr(self, name) <= 0:
                raise ValueError(
                    f"{name.upper()} must be a positive number of seconds"
                )
        if not 0.0 <= self.telemetry_sample_rate <= 1.0:
            raise ValueError("TELEMETRY_SAMPLE_RATE must be between 0.0 and 1.0")
        if self.cache_log_level is not None:
            level = self.cache_log_level.upper()
            if level not in _LOG_LEVELS:
                raise ValueError(
                    f"CACHE_LOG_LEVEL must be one of {sorted(_LOG_LEVELS)}, "
                    f"got: {self.cache_log_level!r}"
                )
            self.cache_log_level = level
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached settings (single instance per process).

    Validation runs on first call, not at import time. In tests, call
    get_settings.cache_clear() before overriding env vars so the next
    get_settings() uses the new values.

    Returns:
        Loaded and validated Settings instance.
    """
    return Settings()
