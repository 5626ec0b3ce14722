"""Pytest configuration and fixtures for url_monitor_cache.

FakeRedis is an in-memory stand-in for the subset of redis.asyncio the
client uses, with a manual clock so expiry can be tested without sleeping.
"""

import fnmatch
import re
from datetime import timedelta
from typing import Any

import pytest

from url_monitor_cache.core.config import Settings, get_settings
from url_monitor_cache.infrastructure.cache.namespaced_client import NamespacedClient


def redis_glob_match(pattern: str, key: str) -> bool:
    """Match key against a Redis glob (*, ?, [...], [^...], backslash escapes)."""
    regex = []
    i = 0
    while i < len(pattern):
        c = pattern[i]
        if c == "\\" and i + 1 < len(pattern):
            regex.append(re.escape(pattern[i + 1]))
            i += 2
            continue
        if c == "*":
            regex.append(".*")
        elif c == "?":
            regex.append(".")
        elif c == "[":
            end = pattern.find("]", i + 1)
            if end == -1:
                regex.append(re.escape(c))
            else:
                body = pattern[i + 1:end]
                negate = body.startswith("^")
                if negate:
                    body = body[1:]
                regex.append(("[^" if negate else "[") + body.replace("\\", "\\\\") + "]")
                i = end + 1
                continue
        else:
            regex.append(re.escape(c))
        i += 1
    return re.fullmatch("".join(regex), key, re.DOTALL) is not None


class FakeRedis:
    """In-memory async Redis double (strings, one hash, SCAN, INFO, CONFIG)."""

    def __init__(self) -> None:
        self.now = 0.0
        self.data: dict[str, tuple[str, float | None]] = {}
        self.hashes: dict[str, dict[str, str]] = {}
        self.config: dict[str, str] = {"maxmemory": "0", "maxmemory-policy": "noeviction"}
        self.closed = False

    def advance(self, seconds: float) -> None:
        self.now += seconds

    def ttl_of(self, key: str) -> float | None:
        _, expires_at = self.data[key]
        return None if expires_at is None else expires_at - self.now

    def _live(self, key: str) -> str | None:
        entry = self.data.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if expires_at is not None and expires_at <= self.now:
            del self.data[key]
            return None
        return value

    async def ping(self) -> bool:
        return True

    async def aclose(self) -> None:
        self.closed = True

    async def get(self, key: str) -> str | None:
        return self._live(key)

    async def set(self, key: str, value: str, ex: timedelta | int | None = None) -> bool:
        if isinstance(ex, timedelta):
            ex = ex.total_seconds()
        self.data[key] = (value, None if ex is None else self.now + ex)
        return True

    async def delete(self, *keys: str) -> int:
        count = 0
        for key in keys:
            if self._live(key) is not None:
                del self.data[key]
                count += 1
        return count

    async def unlink(self, *keys: str) -> int:
        return await self.delete(*keys)

    async def exists(self, *keys: str) -> int:
        return sum(1 for key in keys if self._live(key) is not None)

    async def mget(self, keys: list[str]) -> list[str | None]:
        return [self._live(key) for key in keys]

    async def scan_iter(self, match: str = "*"):
        for key in list(self.data):
            if self._live(key) is not None and redis_glob_match(match, key):
                yield key

    async def hset(self, name: str, mapping: dict[str, str]) -> int:
        self.hashes.setdefault(name, {}).update(mapping)
        return len(mapping)

    async def config_set(self, name: str, value: Any) -> bool:
        self.config[name] = str(value)
        return True

    async def config_get(self, pattern: str) -> dict[str, str]:
        return {k: v for k, v in self.config.items() if fnmatch.fnmatchcase(k, pattern)}

    async def info(self) -> dict[str, Any]:
        return {
            "used_memory_human": "1.02M",
            "connected_clients": 3,
            "keyspace_hits": 30,
            "keyspace_misses": 10,
        }

    async def dbsize(self) -> int:
        return sum(1 for key in list(self.data) if self._live(key) is not None)


@pytest.fixture
def settings(monkeypatch: pytest.MonkeyPatch) -> Settings:
    """Default settings, isolated from the developer's .env and REDIS_* env."""
    for name in (
        "REDIS_URL", "REDIS_KEY_PREFIX", "CACHE_TTL_TENANT", "CACHE_LOG_LEVEL", "DEBUG",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    return Settings(_env_file=None)


@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture
def cache(fake_redis: FakeRedis, settings: Settings) -> NamespacedClient:
    """NamespacedClient bound to an in-memory FakeRedis."""
    return NamespacedClient(fake_redis, settings=settings)
