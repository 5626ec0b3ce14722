"""Namespace-scoped Redis cache client for url-monitor.

Wraps redis.asyncio and applies the key format from keys.py and the TTL
policy from ttl_policy.py on every call, so callers only pass a category
and an identifier. Values are stored as JSON text.

Store errors always surface to the caller: connection and timeout
failures raise StoreUnavailableException, anything else the store
reports raises StoreOperationFailedException. There is no retry.
"""

from __future__ import annotations

import hashlib
import json
import logging
from collections.abc import Awaitable, Callable
from functools import wraps
from typing import Any, TypeVar

import redis.asyncio as redis

from url_monitor_cache.core.config import Settings, get_settings
from url_monitor_cache.core.constants import INVALIDATE_CHUNK_SIZE
from url_monitor_cache.domain.enums import Category
from url_monitor_cache.domain.exceptions import (
    InvalidIdentifierException,
    StoreOperationFailedException,
    StoreUnavailableException,
)
from url_monitor_cache.domain.value_objects import NamespacedKey, coerce_category
from url_monitor_cache.infrastructure.cache import keys
from url_monitor_cache.infrastructure.cache.connection import create_redis_client
from url_monitor_cache.infrastructure.cache.ttl_policy import TTLPolicy
from url_monitor_cache.shared.telemetry.tracing import add_span_attributes, traced

logger = logging.getLogger(__name__)

T = TypeVar("T")


class NamespacedClient:
    """Async cache client bound to the url-monitor key namespaces.

    Holds no per-call state and is safe to share between coroutines;
    connection pooling is left to redis.asyncio. Call connect() at
    startup and disconnect() at shutdown, or pass an already connected
    client for testing or DI.
    """

    def __init__(
        self,
        redis_client: redis.Redis | None = None,
        *,
        settings: Settings | None = None,
        ttl_policy: TTLPolicy | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            redis_client: Optional Redis client; treated as connected.
            settings: Optional settings (defaults to get_settings()).
            ttl_policy: Optional TTL table (defaults to CACHE_TTL_* settings).
        """
        self.redis = redis_client
        self.settings = settings or get_settings()
        self.ttl_policy = ttl_policy or TTLPolicy.from_settings(self.settings)
        self.prefix = self.settings.redis_key_prefix
        self._connected = redis_client is not None

    async def connect(self) -> None:
        """Establish the Redis connection and verify it with PING.

        Raises:
            StoreUnavailableException: If Redis cannot be reached.
        """
        created = self.redis is None
        if self.redis is None:
            self.redis = create_redis_client(self.settings)
        try:
            await self.redis.ping()
        except redis.RedisError as e:
            self._connected = False
            logger.warning("Redis connection failed: %s", e)
            if created:
                await self.redis.aclose()
                self.redis = None
            raise StoreUnavailableException(
                f"Cannot connect to Redis: {e}"
            ) from e
        self._connected = True
        logger.info("Redis cache connected (prefix=%s)", self.prefix)

    async def disconnect(self) -> None:
        """Close the Redis connection pool."""
        if self.redis is not None:
            await self.redis.aclose()
            self.redis = None
            self._connected = False
            logger.info("Redis cache disconnected")

    def is_available(self) -> bool:
        """Return True if Redis is connected and usable."""
        return self._connected and self.redis is not None

    def key(
        self,
        category: Category | str,
        identifier: str,
        tenant_id: str | None = None,
    ) -> NamespacedKey:
        """Build the namespaced key under this client's prefix."""
        return keys.build(category, identifier, tenant_id=tenant_id, prefix=self.prefix)

    async def run_command(
        self,
        operation: str,
        target: str,
        command: Callable[[redis.Redis], Awaitable[T]],
    ) -> T:
        """Run command against Redis and map store errors to domain exceptions.

        Args:
            operation: Operation name for logs and errors.
            target: Key or pattern the command touches.
            command: Callable receiving the Redis client.

        Raises:
            StoreUnavailableException: Not connected, or connection/timeout error.
            StoreOperationFailedException: Any other Redis error.
        """
        if not self.is_available() or self.redis is None:
            raise StoreUnavailableException(
                f"Cache {operation} for {target}: Redis is not connected"
            )
        try:
            return await command(self.redis)
        except (redis.ConnectionError, redis.TimeoutError) as e:
            logger.warning("Cache %s unavailable for %s: %s", operation, target, e)
            raise StoreUnavailableException(
                f"Cache {operation} for {target}: {e}"
            ) from e
        except redis.RedisError as e:
            logger.exception("Cache %s error for %s", operation, target)
            raise StoreOperationFailedException(operation, target, str(e)) from e

    def _decode(self, operation: str, key: str, raw: str) -> Any:
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            raise StoreOperationFailedException(
                operation, key, "stored value is not valid JSON"
            ) from e

    @traced("cache.get")
    async def get(
        self,
        category: Category | str,
        identifier: str,
        tenant_id: str | None = None,
    ) -> Any | None:
        """Return cached value (JSON-deserialized) or None if missing.

        Args:
            category: Key namespace.
            identifier: Key identifier within the namespace.
            tenant_id: Tenant id (tenant category only).

        Returns:
            Cached value or None.
        """
        key = str(self.key(category, identifier, tenant_id))
        add_span_attributes(**{"cache.key": key})
        raw = await self.run_command("get", key, lambda r: r.get(key))
        if raw is None:
            logger.debug("Cache MISS: %s", key)
            return None
        logger.debug("Cache HIT: %s", key)
        return self._decode("get", key, raw)

    @traced("cache.set")
    async def set(
        self,
        category: Category | str,
        identifier: str,
        value: Any,
        tenant_id: str | None = None,
    ) -> None:
        """Store value under the category's TTL (no expiry for schedule state).

        Args:
            category: Key namespace; selects the TTL.
            identifier: Key identifier within the namespace.
            value: JSON-serializable value.
            tenant_id: Tenant id (tenant category only).

        Raises:
            TypeError: If value is not JSON-serializable.
        """
        nkey = self.key(category, identifier, tenant_id)
        key = str(nkey)
        ttl = self.ttl_policy.ttl_for(nkey.category)
        payload = json.dumps(value)
        add_span_attributes(**{"cache.key": key})
        if ttl is None:
            await self.run_command("set", key, lambda r: r.set(key, payload))
            logger.debug("Cache SET: %s (no expiry)", key)
        else:
            await self.run_command("set", key, lambda r: r.set(key, payload, ex=ttl))
            logger.debug("Cache SET: %s (TTL: %ss)", key, int(ttl.total_seconds()))

    @traced("cache.delete")
    async def delete(
        self,
        category: Category | str,
        identifier: str,
        tenant_id: str | None = None,
    ) -> bool:
        """Remove key. Returns True if a key was deleted."""
        key = str(self.key(category, identifier, tenant_id))
        removed = await self.run_command("delete", key, lambda r: r.delete(key))
        logger.debug("Cache DELETE: %s", key)
        return bool(removed)

    @traced("cache.exists")
    async def exists(
        self,
        category: Category | str,
        identifier: str,
        tenant_id: str | None = None,
    ) -> bool:
        """Return True if the key is present (and not expired)."""
        key = str(self.key(category, identifier, tenant_id))
        found = await self.run_command("exists", key, lambda r: r.exists(key))
        return found == 1

    async def _scan(
        self,
        operation: str,
        category: Category | str,
        tenant_id: str | None,
    ) -> tuple[str, list[str]]:
        """Return (literal namespace, sorted keys) of category (and tenant).

        The tenant category requires tenant_id.
        """
        if coerce_category(category) is Category.TENANT and tenant_id is None:
            raise InvalidIdentifierException(
                "Tenant cache listing requires a tenant_id", field="tenant_id"
            )
        namespace = keys.category_namespace(category, tenant_id, prefix=self.prefix)
        match = keys.category_pattern(category, tenant_id=tenant_id, prefix=self.prefix)

        async def scan(r: redis.Redis) -> list[str]:
            return [k async for k in r.scan_iter(match=match)]

        return namespace, sorted(await self.run_command(operation, match, scan))

    @traced("cache.list_identifiers")
    async def list_identifiers(
        self,
        category: Category | str,
        tenant_id: str | None = None,
    ) -> list[str]:
        """Return identifiers present in category, sorted, prefix stripped."""
        namespace, found = await self._scan("list_identifiers", category, tenant_id)
        return [k.removeprefix(namespace) for k in found]

    @traced("cache.get_all")
    async def get_all(
        self,
        category: Category | str,
        tenant_id: str | None = None,
    ) -> dict[str, Any]:
        """Return identifier -> value for every key in category.

        Used to restore scheduler state on startup. Keys that expire
        between SCAN and MGET are skipped.
        """
        namespace, found = await self._scan("get_all", category, tenant_id)
        if not found:
            return {}
        raw_values = await self.run_command(
            "get_all", namespace, lambda r: r.mget(found)
        )
        result: dict[str, Any] = {}
        for key, raw in zip(found, raw_values):
            if raw is not None:
                result[key.removeprefix(namespace)] = self._decode("get_all", key, raw)
        return result

    @traced("cache.invalidate")
    async def invalidate(
        self,
        category: Category | str,
        pattern: str = "*",
        tenant_id: str | None = None,
    ) -> int:
        """Delete keys in category whose identifier matches pattern.

        Uses SCAN + batched UNLINK so Redis is never blocked by KEYS.

        Args:
            category: Key namespace to clear.
            pattern: Glob on the identifier (default all).
            tenant_id: Restrict the tenant category to one tenant.

        Returns:
            Number of keys deleted.
        """
        match = keys.category_pattern(
            category, pattern, tenant_id=tenant_id, prefix=self.prefix
        )

        async def unlink_matching(r: redis.Redis) -> int:
            deleted = 0
            chunk: list[str] = []
            async for key in r.scan_iter(match=match):
                chunk.append(key)
                if len(chunk) >= INVALIDATE_CHUNK_SIZE:
                    deleted += int(await r.unlink(*chunk) or 0)
                    chunk = []
            if chunk:
                deleted += int(await r.unlink(*chunk) or 0)
            return deleted

        deleted = await self.run_command("invalidate", match, unlink_matching)
        if deleted > 0:
            logger.info("Cache INVALIDATE: %s (%s keys)", match, deleted)
        return deleted

    @traced("cache.invalidate_tenant")
    async def invalidate_tenant(self, tenant_id: str) -> int:
        """Delete every tenant cache entry of one tenant."""
        return await self.invalidate(Category.TENANT, tenant_id=tenant_id)


def _resolve_cache(
    args: tuple[Any, ...], kwargs: dict[str, Any]
) -> tuple[NamespacedClient | None, tuple[Any, ...], dict[str, Any]]:
    """Resolve NamespacedClient and args/kwargs for the wrapped function.

    Resolution order: keyword "cache", then args[0].cache, then args[0] if
    NamespacedClient.
    """
    if "cache" in kwargs and isinstance(kwargs.get("cache"), NamespacedClient):
        cache = kwargs["cache"]
        call_kwargs = {k: v for k, v in kwargs.items() if k != "cache"}
        return cache, args, call_kwargs
    if args:
        first = args[0]
        if isinstance(first, NamespacedClient):
            return first, args[1:], kwargs
        cache_attr = getattr(first, "cache", None)
        if isinstance(cache_attr, NamespacedClient):
            return cache_attr, args[1:], kwargs
    return None, args, kwargs


def default_identifier(
    name: str, args: tuple[Any, ...], kwargs: dict[str, Any]
) -> str:
    """Identifier for a cached call: function name plus a SHA-256 of its arguments.

    Arguments are hashed so values containing KEY_SEP (URLs) stay valid.
    """
    parts = [str(a) for a in args]
    parts.extend(f"{k}={v}" for k, v in sorted(kwargs.items()))
    digest = hashlib.sha256("\x1f".join(parts).encode()).hexdigest()
    return f"{name}.{digest}"


def cached(
    category: Category | str,
    identifier_builder: Callable[..., str] | None = None,
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Decorator to cache async function results in one category.

    The wrapped function must receive a NamespacedClient in one of these ways:
    - keyword argument "cache",
    - first argument has a .cache attribute that is a NamespacedClient,
    - or first argument is the NamespacedClient instance.

    Without a resolvable client the function is called uncached. Store
    errors propagate.

    Args:
        category: Key namespace for cached results; selects the TTL.
        identifier_builder: Optional callable(*args, **kwargs) -> identifier;
            else default_identifier().

    Returns:
        Decorator that caches the return value (None is never cached).

    Raises:
        ValueError: If category is the tenant category.
    """
    cat = coerce_category(category)
    if cat is Category.TENANT:
        raise ValueError("cached() does not support the tenant category (needs tenant_id)")

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            cache, func_args, call_kwargs = _resolve_cache(args, kwargs)
            if cache is None:
                return await func(*args, **kwargs)
            if identifier_builder:
                identifier = identifier_builder(*func_args, **call_kwargs)
            else:
                identifier = default_identifier(func.__name__, func_args, call_kwargs)
            cached_value = await cache.get(cat, identifier)
            if cached_value is not None:
                return cached_value
            result = await func(*args, **kwargs)
            if result is not None:
                await cache.set(cat, identifier, result)
            return result

        return wrapper

    return decorator
