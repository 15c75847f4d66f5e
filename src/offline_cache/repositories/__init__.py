"""Repository layer for data and network access.

This layer abstracts external dependencies (Redis, the network) behind
protocol-based interfaces. This enables:
- Easy swapping of implementations (memory → Redis, httpx → test doubles)
- Unit testing with fake implementations
- Clear separation of concerns

The repositories are protocol-based (structural typing), not inheritance-based.
Any class implementing the required methods will satisfy the protocol.
"""

from offline_cache.protocols import CacheStore, Fetcher

from .http_fetcher import HttpxFetcher
from .memory_repository import InMemoryCacheStore
from .redis_repository import RedisCacheStore

__all__ = [
    "CacheStore",
    "Fetcher",
    "HttpxFetcher",
    "InMemoryCacheStore",
    "RedisCacheStore",
]
