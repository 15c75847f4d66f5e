"""Lifecycle management for cache generations.

The lifecycle manager owns the identity of the active generation. It reacts
to the two lifecycle events of the hosting runtime:

- install: fetch the seed set and write it into a new generation
- activate: delete every other generation and take control of all
  connected clients
"""

import asyncio
from enum import Enum
from urllib.parse import urljoin

from offline_cache.config import settings
from offline_cache.entities import ControlledScope, InterceptedRequest, RequestKey, ResponseSnapshot
from offline_cache.exceptions import CacheStoreFailure, InstallFailure, LifecycleError, TransportFailure
from offline_cache.logging import get_logger
from offline_cache.protocols import CacheStore, Fetcher


class LifecycleState(str, Enum):
    """State of the most recent install/activate cycle."""

    PENDING = "pending"
    INSTALLING = "installing"
    INSTALLED = "installed"
    ACTIVATING = "activating"
    ACTIVATED = "activated"
    REDUNDANT = "redundant"


class LifecycleManager:
    """Installs and activates cache generations.

    A successful install leaves the new generation waiting; it is eligible
    for activation right away, without waiting for existing clients to go
    away. A failed install leaves the active generation, if any, in control.

    Example:
        ```python
        lifecycle = LifecycleManager.create(store=store, fetcher=fetcher)
        await lifecycle.install()
        await lifecycle.activate()
        lifecycle.active_generation  # "pricebetter-ai-v1"
        ```
    """

    def __init__(
        self,
        store: CacheStore,
        fetcher: Fetcher,
        version: str | None = None,
        seed_urls: tuple[str, ...] | list[str] | None = None,
        origin: str | None = None,
        seed_policy: str | None = None,
        root_document: str | None = None,
    ) -> None:
        """Initialize the lifecycle manager.

        Args:
            store: Cache storage backend (required).
            fetcher: Network fetch primitive (required).
            version: Name of the generation to install. Defaults to settings.
            seed_urls: Paths or URLs fetched at install time. Defaults to settings.
            origin: Origin the seed paths are resolved against. Defaults to settings.
            seed_policy: ``strict`` or ``best_effort``. Defaults to settings.
            root_document: Path of the navigation shell. Defaults to settings.
        """
        self._store = store
        self._fetcher = fetcher
        self._version = version or settings.cache_version
        self._seed_urls = tuple(seed_urls if seed_urls is not None else settings.seed_urls)
        self._origin = (origin or settings.origin).rstrip("/") + "/"
        self._seed_policy = seed_policy or settings.seed_policy
        self._root_document = root_document or settings.root_document
        self._state = LifecycleState.PENDING
        self._active: str | None = None
        self._waiting: str | None = None
        self._stale: list[str] = []
        self._scope = ControlledScope()
        self._logger = get_logger("offline_cache.lifecycle")

    @classmethod
    def create(
        cls,
        store: CacheStore,
        fetcher: Fetcher,
        version: str | None = None,
        seed_urls: tuple[str, ...] | list[str] | None = None,
    ) -> "LifecycleManager":
        """Factory method to create LifecycleManager with settings defaults."""
        return cls(store=store, fetcher=fetcher, version=version, seed_urls=seed_urls)

    def resolve(self, path: str) -> str:
        """Resolve a seed path against the origin (absolute URLs pass through)."""
        return urljoin(self._origin, path)

    @property
    def root_key(self) -> RequestKey:
        """Cache key of the navigation shell document."""
        return RequestKey.create("GET", self.resolve(self._root_document))

    async def install(self, version: str | None = None) -> str:
        """Fetch the seed set and store it in a new generation.

        Args:
            version: Generation name to install. Defaults to the configured version.

        Returns:
            The name of the installed (waiting) generation

        Raises:
            InstallFailure: If the seed set could not be fetched or stored
        """
        name = version or self._version
        self._state = LifecycleState.INSTALLING
        self._waiting = None

        requests = [InterceptedRequest(method="GET", url=self.resolve(path)) for path in self._seed_urls]
        results = await asyncio.gather(
            *(self._fetcher.fetch(request) for request in requests),
            return_exceptions=True,
        )

        seeds: list[tuple[RequestKey, ResponseSnapshot]] = []
        failed: dict[str, str] = {}
        for request, result in zip(requests, results):
            if isinstance(result, TransportFailure):
                failed[request.url] = result.message
            elif isinstance(result, BaseException):
                self._state = LifecycleState.REDUNDANT
                raise result
            elif not 200 <= result.status < 300:
                failed[request.url] = f"HTTP {result.status}"
            else:
                seeds.append((request.key, result))

        for url, reason in failed.items():
            self._logger.warning("Seed fetch failed", generation=name, url=url, reason=reason)

        if failed and (self._seed_policy == "strict" or not seeds):
            self._state = LifecycleState.REDUNDANT
            self._logger.error(
                "Install failed",
                generation=name,
                failed=len(failed),
                active=self._active,
            )
            raise InstallFailure(
                f"{len(failed)} of {len(requests)} seed resources could not be fetched",
                {"generation": name, "failed": failed},
            )

        cleared = False
        try:
            # A reinstall of an existing name starts from an empty generation
            cleared = await self._store.delete(name)
            if cleared:
                self._logger.info("Cleared generation for reinstall", generation=name)
            await self._store.open(name)
            self._logger.info("Cache opened", generation=name)
            for key, snapshot in seeds:
                await self._store.put(name, key, snapshot)
        except CacheStoreFailure as e:
            self._state = LifecycleState.REDUNDANT
            if cleared or name != self._active:
                await self._discard(name)
            raise InstallFailure(f"Could not store seed set: {e.message}", {"generation": name}) from e

        self._waiting = name
        self._state = LifecycleState.INSTALLED
        return name

    async def _discard(self, name: str) -> None:
        """Remove a half-written generation after a failed install.

        If the generation was the active one its previous contents are already
        gone, so the lifecycle drops back to having no active generation.
        """
        try:
            await self._store.delete(name)
        except CacheStoreFailure as e:
            self._logger.error("Failed to discard partial generation", generation=name, error=e.message)
        if name == self._active:
            self._logger.warning("Active generation lost during reinstall", generation=name)
            self._active = None
            self._scope.release()

    async def activate(self) -> list[str]:
        """Delete every stale generation and take control of all clients.

        Returns:
            Names of the deleted generations

        Generations whose deletion fails are logged and reported by
        :attr:`stale_generations` until the next activation.

        Raises:
            LifecycleError: If no installed generation is waiting
        """
        if self._state is not LifecycleState.INSTALLED or self._waiting is None:
            raise LifecycleError(
                f"Cannot activate from state {self._state.value}",
                {"state": self._state.value},
            )

        current = self._waiting
        self._state = LifecycleState.ACTIVATING

        stale = [name for name in await self._store.generations() if name != current]
        for name in stale:
            self._logger.info("Deleting old cache", generation=name)
        results = await asyncio.gather(
            *(self._store.delete(name) for name in stale),
            return_exceptions=True,
        )

        deleted = []
        undeleted = []
        for name, result in zip(stale, results):
            if isinstance(result, CacheStoreFailure):
                self._logger.error("Failed to delete old cache", generation=name, error=result.message)
                undeleted.append(name)
            elif isinstance(result, BaseException):
                raise result
            else:
                deleted.append(name)

        self._active = current
        self._waiting = None
        self._stale = undeleted
        self._state = LifecycleState.ACTIVATED
        self.claim()
        return deleted

    def claim(self) -> set[str]:
        """Route every connected client through the active generation.

        Returns:
            The clients that were not controlled before
        """
        if self._active is None:
            raise LifecycleError("No active generation to claim clients for")
        newly_controlled = self._scope.claim(self._active)
        self._logger.info("Clients claimed", generation=self._active, clients=len(newly_controlled))
        return newly_controlled

    async def start(self) -> str:
        """Run install followed by activate.

        Returns:
            The active generation name
        """
        await self.install()
        await self.activate()
        return self._active

    def connect(self, client_id: str) -> bool:
        """Register a client. Returns True if it is controlled."""
        return self._scope.connect(client_id)

    def disconnect(self, client_id: str) -> None:
        self._scope.disconnect(client_id)

    def controls(self, client_id: str | None) -> bool:
        """Whether requests from ``client_id`` are routed through the cache.

        Requests without a client identity are in scope once a generation is active.
        """
        if self._active is None:
            return False
        if client_id is None:
            return True
        return self._scope.is_controlled(client_id)

    @property
    def active_generation(self) -> str | None:
        return self._active

    @property
    def waiting_generation(self) -> str | None:
        return self._waiting

    @property
    def stale_generations(self) -> list[str]:
        """Old generations the last activation failed to delete."""
        return list(self._stale)

    @property
    def state(self) -> LifecycleState:
        return self._state

    @property
    def version(self) -> str:
        return self._version

    @property
    def origin(self) -> str:
        return self._origin.rstrip("/")

    @property
    def seed_urls(self) -> tuple[str, ...]:
        return self._seed_urls

    @property
    def scope(self) -> ControlledScope:
        return self._scope

    @property
    def store(self) -> CacheStore:
        """Get the underlying store (for testing)."""
        return self._store

    @property
    def fetcher(self) -> Fetcher:
        """Get the underlying fetcher (for testing)."""
        return self._fetcher
