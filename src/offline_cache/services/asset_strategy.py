"""Network-first strategy for static assets and documents.

State machine per request::

    RECEIVED -> NETWORK_ATTEMPT -> SUCCESS | FAILURE -> RETURNED

On success the network response is returned immediately; cacheable responses
are also written to the active generation by a background task. On failure
the fallback chain is:

1. the cached entry for the request key
2. for HTML requests, the cached root document
3. a synthetic plain-text response
"""

import asyncio
from enum import Enum

from offline_cache.entities import InterceptedRequest, RequestKey, ResponseSnapshot
from offline_cache.exceptions import CacheStoreFailure, TransportFailure
from offline_cache.logging import get_logger
from offline_cache.protocols import CacheStore, Fetcher
from offline_cache.services.lifecycle import LifecycleManager

OFFLINE_DOCUMENT_TEXT = "Network error. App is offline."
OFFLINE_RESOURCE_TEXT = "Resource unavailable offline."


class AssetState(str, Enum):
    RECEIVED = "received"
    NETWORK_ATTEMPT = "network_attempt"
    SUCCESS = "success"
    FAILURE = "failure"
    RETURNED = "returned"


class AssetStrategy:
    """Network-first with opportunistic caching and an offline fallback chain.

    Cache writes are fire-and-forget: they run as separate tasks, their
    failures are logged and swallowed, and they never delay the response.
    Writes to the same key land in the order the network responses
    completed, so the last response to arrive wins.
    """

    def __init__(self, fetcher: Fetcher, store: CacheStore, lifecycle: LifecycleManager) -> None:
        """Initialize the asset strategy.

        Args:
            fetcher: Network fetch primitive.
            store: Cache storage backend.
            lifecycle: Source of the active generation and root document key.
        """
        self._fetcher = fetcher
        self._store = store
        self._lifecycle = lifecycle
        self._pending: set[asyncio.Task] = set()
        self._logger = get_logger("offline_cache.asset_strategy")

    async def handle(self, request: InterceptedRequest) -> ResponseSnapshot:
        """Answer an asset request with exactly one response."""
        key = request.key
        self._transition(key, AssetState.RECEIVED)

        self._transition(key, AssetState.NETWORK_ATTEMPT)
        try:
            response = await self._fetcher.fetch(request)
        except TransportFailure:
            self._transition(key, AssetState.FAILURE)
            response = await self._fallback(request)
        else:
            self._transition(key, AssetState.SUCCESS)
            if response.is_cacheable:
                self._schedule_put(key, response)

        self._transition(key, AssetState.RETURNED)
        return response

    async def _fallback(self, request: InterceptedRequest) -> ResponseSnapshot:
        generation = self._lifecycle.active_generation

        cached = await self._match(generation, request.key)
        if cached is not None:
            self._logger.debug("Serving cached response", url=request.url, generation=generation)
            return cached

        if request.accepts_html:
            root = await self._match(generation, self._lifecycle.root_key)
            if root is not None:
                self._logger.debug("Serving cached root document", url=request.url)
                return root
            return ResponseSnapshot.text_response(OFFLINE_DOCUMENT_TEXT)

        return ResponseSnapshot.text_response(OFFLINE_RESOURCE_TEXT)

    async def _match(self, generation: str | None, key: RequestKey) -> ResponseSnapshot | None:
        """Cache lookup that treats store failures as misses."""
        if generation is None:
            return None
        try:
            return await self._store.match(generation, key)
        except CacheStoreFailure as e:
            self._logger.warning("Cache read failed", key=str(key), generation=generation, error=e.message)
            return None

    def _schedule_put(self, key: RequestKey, response: ResponseSnapshot) -> None:
        generation = self._lifecycle.active_generation
        if generation is None:
            return
        task = asyncio.create_task(self._put(generation, key, response))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _put(self, generation: str, key: RequestKey, response: ResponseSnapshot) -> None:
        try:
            await self._store.put(generation, key, response)
        except CacheStoreFailure as e:
            self._logger.error("Cache write failed", key=str(key), generation=generation, error=e.message)

    def _transition(self, key: RequestKey, state: AssetState) -> None:
        self._logger.debug("Asset request state", key=str(key), state=state.value)

    async def drain(self) -> None:
        """Wait for every scheduled cache write to finish."""
        while self._pending:
            await asyncio.wait(list(self._pending))

    @property
    def pending_writes(self) -> int:
        return len(self._pending)
