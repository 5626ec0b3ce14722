"""Core constants: key namespace prefix, delimiter, and default TTLs.

Single source of truth for the url-monitor key layout. Existing data in
Redis depends on these literals; do not change them casually.
"""

# Root prefix for every url-monitor key
KEY_PREFIX = "url-monitor"

# Delimiter for composite keys
KEY_SEP = ":"

# Default TTLs in seconds (schedule state has no expiry)
DEFAULT_TTL_SESSION = 24 * 60 * 60  # 24 hours
DEFAULT_TTL_CACHE = 30 * 60  # 30 minutes
DEFAULT_TTL_ALERT_STATE = 7 * 24 * 60 * 60  # 7 days
DEFAULT_TTL_TENANT = 30 * 60  # 30 minutes, same as cache

# Bookkeeping keys written by keyspace setup (outside the category namespaces)
KEYSPACE_REGISTRY_SUFFIX = "config:keyspaces"
HEALTH_KEY_SUFFIX = "health"
HEALTH_KEY_TTL = 60 * 60  # 1 hour

# Memory policy applied by keyspace setup
MAXMEMORY_POLICY = "allkeys-lru"
DEFAULT_MAXMEMORY_BYTES = 256 * 1024 * 1024  # 256MB

# Batch size for SCAN + UNLINK invalidation
INVALIDATE_CHUNK_SIZE = 500
