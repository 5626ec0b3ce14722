"""Tests for the TTL policy table."""

from datetime import timedelta

import pytest

from url_monitor_cache.core.config import Settings
from url_monitor_cache.domain.enums import Category
from url_monitor_cache.domain.exceptions import InvalidCategoryException
from url_monitor_cache.infrastructure.cache.ttl_policy import (
    DEFAULT_TTL_POLICY,
    TTLPolicy,
    ttl_for,
)


def test_default_ttls() -> None:
    assert ttl_for(Category.SESSION) == timedelta(hours=24)
    assert ttl_for(Category.CACHE) == timedelta(minutes=30)
    assert ttl_for(Category.ALERT_STATE) == timedelta(days=7)
    assert ttl_for(Category.TENANT) == timedelta(minutes=30)


def test_schedule_has_no_expiry() -> None:
    assert ttl_for("schedule") is None


def test_unknown_category_raises() -> None:
    with pytest.raises(InvalidCategoryException):
        DEFAULT_TTL_POLICY.ttl_for("bogus")


def test_as_dict_in_seconds() -> None:
    assert DEFAULT_TTL_POLICY.as_dict() == {
        "session": 86400,
        "cache": 1800,
        "alert-state": 604800,
        "schedule": None,
        "tenant": 1800,
    }


def test_from_settings_uses_configured_seconds() -> None:
    settings = Settings(_env_file=None, cache_ttl_cache=60, cache_ttl_tenant=120)
    policy = TTLPolicy.from_settings(settings)
    assert policy.ttl_for("cache") == timedelta(seconds=60)
    assert policy.ttl_for("tenant") == timedelta(seconds=120)
    assert policy.ttl_for("schedule") is None


def test_policy_requires_every_category() -> None:
    with pytest.raises(ValueError, match="missing categories"):
        TTLPolicy({Category.CACHE: timedelta(minutes=1)})


def test_policy_is_read_only() -> None:
    with pytest.raises(TypeError):
        DEFAULT_TTL_POLICY._ttls[Category.CACHE] = None  # type: ignore[index]
