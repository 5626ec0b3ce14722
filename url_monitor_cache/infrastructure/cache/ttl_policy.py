"""TTL policy table: category -> expiry duration.

Schedule state is persisted without expiry; every other category expires.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import timedelta
from types import MappingProxyType
from typing import TYPE_CHECKING

from url_monitor_cache.core.constants import (
    DEFAULT_TTL_ALERT_STATE,
    DEFAULT_TTL_CACHE,
    DEFAULT_TTL_SESSION,
    DEFAULT_TTL_TENANT,
)
from url_monitor_cache.domain.enums import Category
from url_monitor_cache.domain.value_objects import coerce_category

if TYPE_CHECKING:
    from url_monitor_cache.core.config import Settings


class TTLPolicy:
    """Read-only mapping from Category to timedelta (or None for no expiry)."""

    def __init__(self, ttls: Mapping[Category, timedelta | None]) -> None:
        missing = [cat.value for cat in Category if cat not in ttls]
        if missing:
            raise ValueError(f"TTL policy missing categories: {missing}")
        self._ttls: Mapping[Category, timedelta | None] = MappingProxyType(dict(ttls))

    @classmethod
    def from_seconds(
        cls,
        session: int,
        cache: int,
        alert_state: int,
        tenant: int,
    ) -> TTLPolicy:
        """Build a policy from TTLs in seconds; schedule never expires."""
        return cls(
            {
                Category.SESSION: timedelta(seconds=session),
                Category.CACHE: timedelta(seconds=cache),
                Category.ALERT_STATE: timedelta(seconds=alert_state),
                Category.SCHEDULE: None,
                Category.TENANT: timedelta(seconds=tenant),
            }
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> TTLPolicy:
        """Build a policy from CACHE_TTL_* settings."""
        return cls.from_seconds(
            session=settings.cache_ttl_session,
            cache=settings.cache_ttl_cache,
            alert_state=settings.cache_ttl_alert_state,
            tenant=settings.cache_ttl_tenant,
        )

    def ttl_for(self, category: Category | str) -> timedelta | None:
        """Return the expiry for category, or None when it persists indefinitely.

        Raises:
            InvalidCategoryException: If category is not a known Category.
        """
        return self._ttls[coerce_category(category)]

    def as_dict(self) -> dict[str, int | None]:
        """Category value -> TTL seconds (None for no expiry)."""
        return {
            cat.value: int(ttl.total_seconds()) if ttl is not None else None
            for cat, ttl in self._ttls.items()
        }


DEFAULT_TTL_POLICY = TTLPolicy.from_seconds(
    session=DEFAULT_TTL_SESSION,
    cache=DEFAULT_TTL_CACHE,
    alert_state=DEFAULT_TTL_ALERT_STATE,
    tenant=DEFAULT_TTL_TENANT,
)


def ttl_for(category: Category | str) -> timedelta | None:
    """TTL for category under the default, process-wide policy."""
    return DEFAULT_TTL_POLICY.ttl_for(category)
