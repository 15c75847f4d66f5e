"""Offline Cache - offline-capable response caching with versioned generations.

This package provides a layered architecture for intercepting outbound
requests and answering them from the network or from a cache:

Layers:
    - protocols: Interface contracts (CacheStore, Fetcher)
    - repositories: Store and network implementations
    - services: Lifecycle management and request strategies
    - handlers: HTTP proxy handlers
    - dto: Data transfer objects (API contracts)
    - entities: Domain models (internal)

Usage:
    ```python
    from offline_cache.services import OfflineCache

    cache = OfflineCache.create()
    await cache.start()            # install + activate
    response = await cache.handle(request)
    ```

For the HTTP host:
    ```python
    from offline_cache.api.app import app
    ```
"""

from offline_cache.config import get_settings, settings
from offline_cache.entities import InterceptedRequest, RequestKey, ResponseSnapshot, ResponseType
from offline_cache.exceptions import (
    CacheStoreFailure,
    InstallFailure,
    LifecycleError,
    OfflineCacheError,
    TransportFailure,
)
from offline_cache.handlers import ProxyHandler
from offline_cache.protocols import CacheStore, Fetcher
from offline_cache.repositories import HttpxFetcher, InMemoryCacheStore, RedisCacheStore
from offline_cache.services import LifecycleManager, OfflineCache, Route, select_route

__all__ = [
    # Configuration
    "settings",
    "get_settings",
    # Protocols (interfaces)
    "CacheStore",
    "Fetcher",
    # Services (business logic)
    "OfflineCache",
    "LifecycleManager",
    "Route",
    "select_route",
    # Handlers (HTTP)
    "ProxyHandler",
    # Repositories (data access)
    "InMemoryCacheStore",
    "RedisCacheStore",
    "HttpxFetcher",
    # Entities (domain models)
    "InterceptedRequest",
    "RequestKey",
    "ResponseSnapshot",
    "ResponseType",
    # Errors
    "OfflineCacheError",
    "TransportFailure",
    "CacheStoreFailure",
    "InstallFailure",
    "LifecycleError",
]
