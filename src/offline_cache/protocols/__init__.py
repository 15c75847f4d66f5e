"""Protocol interfaces for swappable implementations.

This package contains protocol definitions using structural typing.
Protocols enable:
- Easy swapping of implementations (memory → Redis, httpx → test doubles)
- Unit testing with fake implementations
- Clear separation of concerns

Usage:
    ```python
    from offline_cache.protocols import CacheStore, Fetcher

    store: CacheStore = InMemoryCacheStore()
    fetcher: Fetcher = HttpxFetcher.create()
    ```
"""

from .cache_store import CacheStore
from .fetcher import Fetcher

__all__ = [
    "CacheStore",
    "Fetcher",
]
