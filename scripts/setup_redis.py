"""Initialise Redis for url-monitor: keyspace registry, memory policy, health key.

Usage:
    uv run python -m scripts.setup_redis
Reads REDIS_URL or REDIS_HOST/REDIS_PORT/REDIS_PASSWORD from env or .env.
Prints store statistics when done.
"""

import asyncio
import sys

from url_monitor_cache.core.lifespan import cache_lifespan
from url_monitor_cache.domain.exceptions import UrlMonitorCacheException
from url_monitor_cache.infrastructure.cache.keyspace import KeyspaceSetup


async def main() -> None:
    """Run keyspace setup against the configured Redis and print stats."""
    try:
        async with cache_lifespan() as cache:
            setup = KeyspaceSetup(cache)
            await setup.initialize()
            stats = await setup.stats()
    except UrlMonitorCacheException as e:
        print(f"Redis setup failed: {e.message}", file=sys.stderr)
        sys.exit(1)

    for name, value in stats.items():
        print(f"{name}: {value}")


if __name__ == "__main__":
    asyncio.run(main())
