"""Tests for KeyspaceSetup (registry, memory policy, health marker, stats)."""

import json
from unittest.mock import AsyncMock

import pytest
import redis.asyncio as redis

from url_monitor_cache.core.config import Settings
from url_monitor_cache.domain.exceptions import StoreUnavailableException
from url_monitor_cache.infrastructure.cache.keyspace import KeyspaceSetup
from url_monitor_cache.infrastructure.cache.namespaced_client import NamespacedClient


@pytest.mark.asyncio
async def test_initialize_registers_keyspaces_policy_and_health(
    cache: NamespacedClient, fake_redis
) -> None:
    await KeyspaceSetup(cache).initialize()

    assert fake_redis.hashes["url-monitor:config:keyspaces"] == {
        "session": "url-monitor:session:*",
        "cache": "url-monitor:cache:*",
        "alert-state": "url-monitor:alert-state:*",
        "schedule": "url-monitor:schedule:*",
        "tenant": "url-monitor:tenant:*",
    }
    assert fake_redis.config["maxmemory-policy"] == "allkeys-lru"
    assert fake_redis.config["maxmemory"] == str(256 * 1024 * 1024)
    health = json.loads(await fake_redis.get("url-monitor:health"))
    assert health["version"] == "1.0.0"
    assert fake_redis.ttl_of("url-monitor:health") == 3600


@pytest.mark.asyncio
async def test_existing_maxmemory_is_kept(cache: NamespacedClient, fake_redis) -> None:
    fake_redis.config["maxmemory"] = "1073741824"
    assert await KeyspaceSetup(cache).configure_memory_policy() is True
    assert fake_redis.config["maxmemory"] == "1073741824"


@pytest.mark.asyncio
async def test_config_rejected_is_logged_not_raised(settings: Settings) -> None:
    store = AsyncMock()
    store.config_set.side_effect = redis.ResponseError("unknown command 'CONFIG'")
    client = NamespacedClient(store, settings=settings)

    assert await KeyspaceSetup(client).configure_memory_policy() is False


@pytest.mark.asyncio
async def test_config_connection_error_propagates(settings: Settings) -> None:
    store = AsyncMock()
    store.config_set.side_effect = redis.ConnectionError("down")
    client = NamespacedClient(store, settings=settings)

    with pytest.raises(StoreUnavailableException):
        await KeyspaceSetup(client).configure_memory_policy()


@pytest.mark.asyncio
async def test_stats(cache: NamespacedClient) -> None:
    await cache.set("cache", "a", 1)
    await cache.set("session", "b", 2)

    stats = await KeyspaceSetup(cache).stats()

    assert stats == {
        "key_count": 2,
        "memory_usage": "1.02M",
        "connected_clients": 3,
        "keyspace_hits": 30,
        "keyspace_misses": 10,
        "hit_ratio": 0.75,
    }


@pytest.mark.asyncio
async def test_stats_without_traffic_has_zero_hit_ratio(settings: Settings) -> None:
    store = AsyncMock()
    store.info.return_value = {}
    store.dbsize.return_value = 0
    client = NamespacedClient(store, settings=settings)

    stats = await KeyspaceSetup(client).stats()

    assert stats["hit_ratio"] == 0.0
    assert stats["memory_usage"] == "0B"
