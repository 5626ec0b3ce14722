"""Redis connection factory.

Builds a redis.asyncio client from settings. REDIS_URL takes precedence
over the individual host/port/db/password settings.
"""

import redis.asyncio as redis

from url_monitor_cache.core.config import Settings


def create_redis_client(settings: Settings) -> redis.Redis:
    """Return an unconnected Redis client (connections open lazily).

    Values are decoded to str; the client stores JSON text.
    """
    if settings.redis_url:
        return redis.from_url(
            settings.redis_url,
            encoding="utf-8",
            decode_responses=True,
            max_connections=settings.redis_max_connections,
            socket_connect_timeout=settings.redis_socket_connect_timeout,
            socket_keepalive=True,
            health_check_interval=30,
        )
    return redis.Redis(
        host=settings.redis_host,
        port=settings.redis_port,
        db=settings.redis_db,
        password=(
            settings.redis_password.get_secret_value()
            if settings.redis_password
            else None
        ),
        decode_responses=True,
        max_connections=settings.redis_max_connections,
        socket_connect_timeout=settings.redis_socket_connect_timeout,
        socket_keepalive=True,
    )
