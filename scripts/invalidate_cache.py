"""Invalidate url-monitor cache entries.

Usage:
    uv run python -m scripts.invalidate_cache <category> [pattern]
    uv run python -m scripts.invalidate_cache tenant <tenant_id>
pattern is a glob on the identifier (default '*'). For the tenant
category the second argument is the tenant id and every entry of that
tenant is removed.
"""

import asyncio
import sys

from url_monitor_cache.core.lifespan import cache_lifespan
from url_monitor_cache.domain.enums import Category
from url_monitor_cache.domain.exceptions import UrlMonitorCacheException
from url_monitor_cache.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


async def main() -> None:
    """Delete matching keys and print how many were removed."""
    if len(sys.argv) < 2:
        print(__doc__, file=sys.stderr)
        sys.exit(2)
    category = sys.argv[1]
    arg = sys.argv[2] if len(sys.argv) > 2 else None
    if category == Category.TENANT.value and arg is None:
        print("Tenant invalidation requires a tenant_id", file=sys.stderr)
        sys.exit(2)

    try:
        async with cache_lifespan() as cache:
            if category == Category.TENANT.value:
                deleted = await cache.invalidate_tenant(arg)
            else:
                deleted = await cache.invalidate(category, arg or "*")
    except UrlMonitorCacheException as e:
        logger.error("Invalidation failed (%s): %s", e.error_code, e.message)
        sys.exit(1)

    print(f"Done. Deleted {deleted} key(s)")


if __name__ == "__main__":
    asyncio.run(main())
