"""Domain: key namespace categories, key value object, and exceptions."""

from url_monitor_cache.domain.enums import Category
from url_monitor_cache.domain.exceptions import (
    InvalidCategoryException,
    InvalidIdentifierException,
    StoreOperationFailedException,
    StoreUnavailableException,
    UrlMonitorCacheException,
)
from url_monitor_cache.domain.value_objects import NamespacedKey

__all__ = [
    "Category",
    "NamespacedKey",
    "UrlMonitorCacheException",
    "InvalidCategoryException",
    "InvalidIdentifierException",
    "StoreUnavailableException",
    "StoreOperationFailedException",
]
