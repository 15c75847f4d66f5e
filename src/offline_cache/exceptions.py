"""Exception hierarchy for the offline cache.

All exceptions inherit from :class:`OfflineCacheError`, which carries a
machine-readable ``code`` and optional ``details`` and can render itself as
an :class:`ErrorResponse` for the HTTP host.

Subclass hierarchy::

    OfflineCacheError
    +-- TransportFailure    (network unreachable, timeout, DNS)
    +-- CacheStoreFailure   (store read/write error, quota exceeded)
    +-- InstallFailure      (seed set could not be fetched)
    +-- LifecycleError      (lifecycle event fired out of order)
"""

from typing import Any

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standard error response format."""

    code: str
    message: str
    details: dict[str, Any] = {}


class OfflineCacheError(Exception):
    """Base exception for offline cache errors."""

    code: str = "OFFLINE_CACHE_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        """Convert to error response."""
        return ErrorResponse(code=self.code, message=self.message, details=self.details)


class TransportFailure(OfflineCacheError):
    """Raised by fetchers when no response could be obtained from the network."""

    code = "TRANSPORT_FAILURE"


class CacheStoreFailure(OfflineCacheError):
    """Raised by cache stores when the backend fails to read or write."""

    code = "CACHE_STORE_FAILURE"


class InstallFailure(OfflineCacheError):
    """Raised when a new generation cannot be seeded."""

    code = "INSTALL_FAILURE"


class LifecycleError(OfflineCacheError):
    """Raised when lifecycle events arrive in an invalid order."""

    code = "LIFECYCLE_ERROR"
