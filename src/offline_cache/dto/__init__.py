"""Data Transfer Objects for the host's API contracts.

These Pydantic models define the external contract of the status and
health endpoints. Proxied responses are not DTOs; they are rendered from
response snapshots.
"""

from .responses import CacheStatusResponse, HealthCheckResponse

__all__ = [
    "CacheStatusResponse",
    "HealthCheckResponse",
]
