"""Domain entities for internal representation.

These are plain dataclasses used by services, repositories and the HTTP
host. Snapshots and requests are frozen; the controlled scope is the one
mutable entity and is owned by the lifecycle manager.

Entities should have:
- No HTTP client or framework types
- No storage logic
- Pure domain logic only
"""

from .request import InterceptedRequest, RequestKey, normalize_url
from .response_snapshot import ResponseSnapshot, ResponseType
from .scope import ControlledScope

__all__ = [
    "ControlledScope",
    "InterceptedRequest",
    "RequestKey",
    "ResponseSnapshot",
    "ResponseType",
    "normalize_url",
]
