"""Domain value objects for the url-monitor key namespaces.

Value objects are immutable types that represent domain concepts with
self-validation. They have no identity, only value.
"""

from dataclasses import dataclass

from url_monitor_cache.core.constants import KEY_PREFIX, KEY_SEP
from url_monitor_cache.domain.enums import Category
from url_monitor_cache.domain.exceptions import (
    InvalidCategoryException,
    InvalidIdentifierException,
)


def coerce_category(category: Category | str) -> Category:
    """Return category as a Category member. Raises InvalidCategoryException."""
    if isinstance(category, Category):
        return category
    try:
        return Category(category)
    except ValueError as e:
        raise InvalidCategoryException(category) from e


def validate_key_component(value: str, name: str) -> None:
    """Raise InvalidIdentifierException if value is empty or contains KEY_SEP.

    Args:
        value: String component used in a key.
        name: Name of the component (for error message).
    """
    if not isinstance(value, str) or not value:
        raise InvalidIdentifierException(
            f"Key component {name!r} must be a non-empty string", field=name
        )
    if KEY_SEP in value:
        raise InvalidIdentifierException(
            f"Key component {name!r} must not contain separator {KEY_SEP!r}",
            field=name,
        )


@dataclass(frozen=True)
class NamespacedKey:
    """Value object for a url-monitor key.

    Serializes to ``{prefix}:{category}:{identifier}``. Tenant cache keys
    nest the identifier under the tenant id:
    ``{prefix}:tenant:{tenant_id}:{identifier}``. tenant_id is required for
    the tenant category and rejected for every other category.
    """

    category: Category
    identifier: str
    tenant_id: str | None = None
    prefix: str = KEY_PREFIX

    def __post_init__(self) -> None:
        object.__setattr__(self, "category", coerce_category(self.category))
        validate_key_component(self.prefix, "prefix")
        validate_key_component(self.identifier, "identifier")
        if self.category is Category.TENANT:
            if self.tenant_id is None:
                raise InvalidIdentifierException(
                    "Tenant cache keys require a tenant_id", field="tenant_id"
                )
            validate_key_component(self.tenant_id, "tenant_id")
        elif self.tenant_id is not None:
            raise InvalidIdentifierException(
                f"tenant_id is only valid for the {Category.TENANT.value!r} category",
                field="tenant_id",
            )

    @property
    def namespace(self) -> str:
        """Key prefix shared by every key in this category (and tenant)."""
        parts = [self.prefix, self.category.value]
        if self.tenant_id is not None:
            parts.append(self.tenant_id)
        return KEY_SEP.join(parts) + KEY_SEP

    def __str__(self) -> str:
        return f"{self.namespace}{self.identifier}"
