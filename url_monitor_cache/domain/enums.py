"""Domain enumerations for the url-monitor key namespaces."""

from enum import Enum


class _ValuesMixin:
    """Mixin that adds a values() classmethod to str Enums."""

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid values as strings."""
        return [member.value for member in cls]


class Category(_ValuesMixin, str, Enum):
    """Key namespace category. Closed set; the value is the key segment."""

    SESSION = "session"
    CACHE = "cache"
    ALERT_STATE = "alert-state"
    SCHEDULE = "schedule"
    TENANT = "tenant"
