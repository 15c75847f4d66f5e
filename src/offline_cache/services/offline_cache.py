"""Request interception service.

This service is the entry point the hosting runtime calls for every
outbound request. It checks that the issuing client is in the controlled
scope, classifies the request and hands it to exactly one strategy.
"""

from offline_cache.config import Settings, settings
from offline_cache.entities import InterceptedRequest, ResponseSnapshot
from offline_cache.logging import get_logger
from offline_cache.protocols import CacheStore, Fetcher
from offline_cache.repositories import HttpxFetcher, InMemoryCacheStore, RedisCacheStore
from offline_cache.services.api_strategy import ApiStrategy
from offline_cache.services.asset_strategy import AssetStrategy
from offline_cache.services.lifecycle import LifecycleManager
from offline_cache.services.selector import Route, select_route


class OfflineCache:
    """Offline-capable response cache.

    This service depends on PROTOCOLS, not concrete implementations:
    - CacheStore: in-memory, Redis, ...
    - Fetcher: httpx, or any test double

    Example:
        ```python
        from offline_cache.services import OfflineCache

        # Create with defaults (backend and origin from settings)
        cache = OfflineCache.create()
        await cache.start()

        response = await cache.handle(request)
        if response is None:
            ...  # pass the request through untouched
        ```
    """

    def __init__(self, lifecycle: LifecycleManager, api_prefix: str | None = None) -> None:
        """Initialize the interception service.

        Args:
            lifecycle: Lifecycle manager owning the store, fetcher and active generation.
            api_prefix: Path prefix of API requests. Defaults to settings.
        """
        self._lifecycle = lifecycle
        self._api_prefix = api_prefix or settings.api_prefix
        self._api = ApiStrategy(lifecycle.fetcher)
        self._asset = AssetStrategy(lifecycle.fetcher, lifecycle.store, lifecycle)
        self._logger = get_logger("offline_cache.service")

    @classmethod
    def create(
        cls,
        store: CacheStore | None = None,
        fetcher: Fetcher | None = None,
        config: Settings | None = None,
    ) -> "OfflineCache":
        """Factory method to create OfflineCache with sensible defaults.

        Args:
            store: Cache storage backend. If None, built from ``config.cache_backend``.
            fetcher: Network fetcher. If None, an HttpxFetcher for ``config.origin``.
            config: Settings to use. If None, uses the global settings.

        Returns:
            Configured OfflineCache instance
        """
        config = config or settings
        if store is None:
            if config.cache_backend == "redis":
                store = RedisCacheStore.create(key_prefix=config.cache_key_prefix)
            else:
                store = InMemoryCacheStore.create()
        if fetcher is None:
            fetcher = HttpxFetcher.create(origin=config.origin, timeout=config.fetch_timeout)

        lifecycle = LifecycleManager(
            store=store,
            fetcher=fetcher,
            version=config.cache_version,
            seed_urls=config.seed_urls,
            origin=config.origin,
            seed_policy=config.seed_policy,
            root_document=config.root_document,
        )
        return cls(lifecycle=lifecycle, api_prefix=config.api_prefix)

    async def start(self) -> str:
        """Fire the install and activate lifecycle events.

        Returns:
            The active generation name

        Raises:
            InstallFailure: If the seed set could not be installed
        """
        return await self._lifecycle.start()

    async def handle(self, request: InterceptedRequest) -> ResponseSnapshot | None:
        """Answer an intercepted request.

        Args:
            request: The outbound request

        Returns:
            The response for the caller, or None if the request must be
            passed through untouched (bypass route or uncontrolled client)
        """
        if not self._lifecycle.controls(request.client_id):
            self._logger.debug("Uncontrolled client", client_id=request.client_id, url=request.url)
            return None

        route = select_route(request, self._api_prefix)
        if route is Route.BYPASS:
            self._logger.debug("Bypassing request", method=request.method, url=request.url)
            return None
        if route is Route.API:
            return await self._api.handle(request)
        return await self._asset.handle(request)

    async def drain(self) -> None:
        """Wait for pending background cache writes."""
        await self._asset.drain()

    async def close(self) -> None:
        """Flush pending writes and release network and store resources."""
        await self.drain()
        await self._lifecycle.fetcher.close()
        close_store = getattr(self._lifecycle.store, "close", None)
        if close_store is not None:
            await close_store()

    async def get_stats(self) -> dict:
        """Get cache statistics.

        Returns:
            Dictionary with lifecycle and store statistics
        """
        stats = await self._lifecycle.store.get_stats()
        stats["state"] = self._lifecycle.state.value
        stats["active_generation"] = self._lifecycle.active_generation
        stats["stale_generations"] = self._lifecycle.stale_generations
        stats["controlled_clients"] = len(self._lifecycle.scope.controlled)
        stats["pending_writes"] = self._asset.pending_writes
        return stats

    async def is_healthy(self) -> bool:
        """Check if the cache store is reachable."""
        return await self._lifecycle.store.health_check()

    @property
    def lifecycle(self) -> LifecycleManager:
        return self._lifecycle

    @property
    def api_prefix(self) -> str:
        return self._api_prefix
