"""Key builders. Single place for the url-monitor key format (DRY).

Key components (identifier, tenant_id, patterns) must not contain
KEY_SEP to avoid ambiguous or colliding keys. Literal components are
glob-escaped before they go into a SCAN match pattern; only the caller's
identifier pattern is a glob.
"""

import re

from url_monitor_cache.core.constants import KEY_PREFIX, KEY_SEP
from url_monitor_cache.domain.enums import Category
from url_monitor_cache.domain.exceptions import InvalidIdentifierException
from url_monitor_cache.domain.value_objects import (
    NamespacedKey,
    coerce_category,
    validate_key_component,
)

_GLOB_SPECIAL = re.compile(r"([\\*?\[\]])")


def escape_glob(value: str) -> str:
    """Backslash-escape Redis glob metacharacters (*, ?, [, ], \\)."""
    return _GLOB_SPECIAL.sub(r"\\\1", value)


def build(
    category: Category | str,
    identifier: str,
    tenant_id: str | None = None,
    prefix: str = KEY_PREFIX,
) -> NamespacedKey:
    """Build a namespaced key for category and identifier.

    Args:
        category: One of the Category values (enum member or string).
        identifier: Key identifier; non-empty, without KEY_SEP.
        tenant_id: Tenant id, required for (and only for) Category.TENANT.
        prefix: Root prefix (defaults to url-monitor).

    Returns:
        Validated NamespacedKey; str() gives the wire key.

    Raises:
        InvalidCategoryException: If category is not a known Category.
        InvalidIdentifierException: If identifier or tenant_id is invalid.
    """
    return NamespacedKey(
        category=coerce_category(category),
        identifier=identifier,
        tenant_id=tenant_id,
        prefix=prefix,
    )


def category_namespace(
    category: Category | str,
    tenant_id: str | None = None,
    prefix: str = KEY_PREFIX,
) -> str:
    """Literal key prefix shared by every key of one category (or one tenant).

    Ends with KEY_SEP. Tenant category without tenant_id stops at
    ``{prefix}:tenant:``.
    """
    cat = coerce_category(category)
    parts = [prefix, cat.value]
    if tenant_id is not None:
        if cat is not Category.TENANT:
            raise InvalidIdentifierException(
                f"tenant_id is only valid for the {Category.TENANT.value!r} category",
                field="tenant_id",
            )
        validate_key_component(tenant_id, "tenant_id")
        parts.append(tenant_id)
    return KEY_SEP.join(parts) + KEY_SEP


def category_pattern(
    category: Category | str,
    pattern: str = "*",
    tenant_id: str | None = None,
    prefix: str = KEY_PREFIX,
) -> str:
    """SCAN match pattern for keys in one category (or one tenant).

    Tenant category without tenant_id matches every tenant. pattern is a
    glob applied to the identifier only and must not contain KEY_SEP;
    prefix, category and tenant_id match literally.
    """
    validate_key_component(pattern, "pattern")
    namespace = escape_glob(category_namespace(category, tenant_id, prefix))
    if coerce_category(category) is Category.TENANT and tenant_id is None:
        namespace = f"{namespace}*{KEY_SEP}"
    return f"{namespace}{pattern}"


def keyspace_patterns(prefix: str = KEY_PREFIX) -> dict[str, str]:
    """Category value -> match pattern for every category (keyspace registry)."""
    return {
        cat.value: escape_glob(category_namespace(cat, prefix=prefix)) + "*"
        for cat in Category
    }


def system_key(suffix: str, prefix: str = KEY_PREFIX) -> str:
    """Bookkeeping key outside the category namespaces (e.g. health)."""
    return f"{prefix}{KEY_SEP}{suffix}"
