"""Domain exceptions for the url-monitor cache client.

Key validation failures and store failures. None of them are recovered
inside the client; callers decide what a failed cache call means.
"""

from typing import Any


class UrlMonitorCacheException(Exception):
    """Base exception for all cache client errors.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. category, key).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)


class InvalidCategoryException(UrlMonitorCacheException):
    """Raised when a category is not one of the known key namespaces."""

    def __init__(self, category: object) -> None:
        """Initialize with the rejected category.

        Args:
            category: The value that is not a known Category.
        """
        super().__init__(
            f"Invalid category: {category!r}",
            "INVALID_CATEGORY",
            {"category": str(category)},
        )


class InvalidIdentifierException(UrlMonitorCacheException):
    """Raised when a key component is empty or contains the key separator."""

    def __init__(self, message: str, field: str = "identifier") -> None:
        super().__init__(message, "INVALID_IDENTIFIER", {"field": field})


class StoreUnavailableException(UrlMonitorCacheException):
    """Raised when the store connection cannot be established or is lost."""

    def __init__(self, message: str = "Cache store unavailable") -> None:
        super().__init__(message, "STORE_UNAVAILABLE")


class StoreOperationFailedException(UrlMonitorCacheException):
    """Raised when a store command fails for a reason other than connectivity.

    The underlying error is chained as __cause__.
    """

    def __init__(self, operation: str, key: str, reason: str) -> None:
        """Initialize with the failed operation, key, and reason.

        Args:
            operation: Client operation name (e.g. 'get', 'invalidate').
            key: Key or match pattern the operation targeted.
            reason: Short description of the underlying error.
        """
        super().__init__(
            f"Cache {operation} failed for {key}: {reason}",
            "STORE_OPERATION_FAILED",
            {"operation": operation, "key": key},
        )
