"""One-shot Redis initialisation for url-monitor, plus store statistics.

Registers the category keyspaces, applies the memory policy and writes a
health marker. Runs through NamespacedClient.run_command so store errors
map to the same domain exceptions as regular cache calls.
"""

import json
import logging
from datetime import datetime, timedelta, timezone
from typing import Any

import redis.asyncio as redis

from url_monitor_cache.core.constants import (
    DEFAULT_MAXMEMORY_BYTES,
    HEALTH_KEY_SUFFIX,
    HEALTH_KEY_TTL,
    KEYSPACE_REGISTRY_SUFFIX,
    MAXMEMORY_POLICY,
)
from url_monitor_cache.domain.exceptions import StoreOperationFailedException
from url_monitor_cache.infrastructure.cache import keys
from url_monitor_cache.infrastructure.cache.namespaced_client import NamespacedClient

logger = logging.getLogger(__name__)


class KeyspaceSetup:
    """Initialise a Redis instance for url-monitor and report its stats."""

    def __init__(self, client: NamespacedClient) -> None:
        self.client = client
        self.prefix = client.prefix

    async def initialize(self) -> None:
        """Register keyspaces, configure memory policy, write health marker."""
        await self.register_keyspaces()
        await self.configure_memory_policy()
        await self.write_health_marker()
        logger.info("Redis setup completed successfully")

    async def register_keyspaces(self) -> dict[str, str]:
        """Store category -> match pattern in the keyspace registry hash."""
        registry_key = keys.system_key(KEYSPACE_REGISTRY_SUFFIX, prefix=self.prefix)
        patterns = keys.keyspace_patterns(prefix=self.prefix)
        await self.client.run_command(
            "register_keyspaces",
            registry_key,
            lambda r: r.hset(registry_key, mapping=patterns),
        )
        logger.info("Redis key spaces configured: %s", sorted(patterns))
        return patterns

    async def configure_memory_policy(self) -> bool:
        """Set LRU eviction and a 256MB limit when none is configured.

        Managed Redis services often reject CONFIG; that is logged and
        reported as False rather than raised.
        """

        async def apply(r: redis.Redis) -> None:
            await r.config_set("maxmemory-policy", MAXMEMORY_POLICY)
            current = await r.config_get("maxmemory")
            if current.get("maxmemory") in (None, "", "0"):
                await r.config_set("maxmemory", DEFAULT_MAXMEMORY_BYTES)

        try:
            await self.client.run_command("configure_memory_policy", "CONFIG", apply)
        except StoreOperationFailedException as e:
            logger.warning("Could not configure Redis memory policy: %s", e)
            return False
        logger.info("Redis memory policy configured")
        return True

    async def write_health_marker(self) -> str:
        """Write {prefix}:health with init time and version (1 hour TTL)."""
        health_key = keys.system_key(HEALTH_KEY_SUFFIX, prefix=self.prefix)
        payload = json.dumps(
            {
                "initialized": datetime.now(timezone.utc).isoformat(),
                "version": self.client.settings.app_version,
            }
        )
        await self.client.run_command(
            "write_health_marker",
            health_key,
            lambda r: r.set(health_key, payload, ex=timedelta(seconds=HEALTH_KEY_TTL)),
        )
        return health_key

    async def stats(self) -> dict[str, Any]:
        """Return key count, memory, clients, keyspace hits/misses and hit ratio."""

        async def collect(r: redis.Redis) -> tuple[dict[str, Any], int]:
            return await r.info(), await r.dbsize()

        info, key_count = await self.client.run_command("stats", "INFO", collect)
        hits = int(info.get("keyspace_hits", 0))
        misses = int(info.get("keyspace_misses", 0))
        hit_ratio = hits / (hits + misses) if hits + misses > 0 else 0.0
        return {
            "key_count": key_count,
            "memory_usage": info.get("used_memory_human", "0B"),
            "connected_clients": int(info.get("connected_clients", 0)),
            "keyspace_hits": hits,
            "keyspace_misses": misses,
            "hit_ratio": round(hit_ratio, 2),
        }
