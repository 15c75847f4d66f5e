"""Service layer for business logic.

This layer contains the lifecycle management and the request strategies.
Services depend on protocols (interfaces), not concrete implementations,
making them testable and flexible.

Architecture:
    Handler -> OfflineCache -> Strategy -> Repository
    (HTTP)  -> (Dispatch)   -> (Policy) -> (Store / Network)

Usage:
    ```python
    from offline_cache.services import OfflineCache

    # Using factory method (recommended)
    cache = OfflineCache.create()

    # Or manual creation
    lifecycle = LifecycleManager(store=store, fetcher=fetcher)
    cache = OfflineCache(lifecycle=lifecycle)
    ```
"""

from .api_strategy import OFFLINE_API_MESSAGE, ApiStrategy
from .asset_strategy import OFFLINE_DOCUMENT_TEXT, OFFLINE_RESOURCE_TEXT, AssetState, AssetStrategy
from .lifecycle import LifecycleManager, LifecycleState
from .offline_cache import OfflineCache
from .selector import Route, select_route

__all__ = [
    "ApiStrategy",
    "AssetState",
    "AssetStrategy",
    "LifecycleManager",
    "LifecycleState",
    "OfflineCache",
    "Route",
    "select_route",
    "OFFLINE_API_MESSAGE",
    "OFFLINE_DOCUMENT_TEXT",
    "OFFLINE_RESOURCE_TEXT",
]
