"""Cache: namespaced Redis client, key builders, and TTL policy.

NamespacedClient applies the key format in keys.py and the TTL table in
ttl_policy.py to every call; connection settings come from core.config.
"""

from url_monitor_cache.infrastructure.cache.keys import (
    build,
    category_pattern,
    keyspace_patterns,
)
from url_monitor_cache.infrastructure.cache.keyspace import KeyspaceSetup
from url_monitor_cache.infrastructure.cache.namespaced_client import (
    NamespacedClient,
    cached,
)
from url_monitor_cache.infrastructure.cache.ttl_policy import (
    DEFAULT_TTL_POLICY,
    TTLPolicy,
    ttl_for,
)

__all__ = [
    "DEFAULT_TTL_POLICY",
    "KeyspaceSetup",
    "NamespacedClient",
    "TTLPolicy",
    "build",
    "cached",
    "category_pattern",
    "keyspace_patterns",
    "ttl_for",
]
