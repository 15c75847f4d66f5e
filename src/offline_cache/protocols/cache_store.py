"""Cache storage protocol.

Defines the interface for any backend that can hold named, versioned
collections (generations) of request→response snapshots.

Implementations can include:
- In-process dictionaries (default)
- Redis hashes
- Any other key-value store that can delete a whole collection at once
"""

from typing import Protocol, runtime_checkable

from offline_cache.entities import RequestKey, ResponseSnapshot


@runtime_checkable
class CacheStore(Protocol):
    """Protocol for cache storage backends.

    Any type that implements these methods satisfies the protocol, no
    explicit inheritance needed. Backend errors are raised as
    :class:`~offline_cache.exceptions.CacheStoreFailure`.

    Example:
        ```python
        from offline_cache.protocols import CacheStore

        store: CacheStore = InMemoryCacheStore()
        store: CacheStore = RedisCacheStore.create()
        ```
    """

    async def open(self, name: str) -> None:
        """Create the named generation if it does not exist yet.

        Args:
            name: Generation (version) name
        """
        ...

    async def match(self, name: str, key: RequestKey) -> ResponseSnapshot | None:
        """Look up an entry in a generation.

        Args:
            name: Generation name
            key: Normalized request key

        Returns:
            The stored snapshot, or None on a miss (including a missing generation)
        """
        ...

    async def put(self, name: str, key: RequestKey, response: ResponseSnapshot) -> None:
        """Store a snapshot, overwriting any entry with the same key.

        Args:
            name: Generation name (created if missing)
            key: Normalized request key
            response: Snapshot to store
        """
        ...

    async def list_keys(self, name: str) -> list[RequestKey]:
        """List the keys stored in a generation.

        Args:
            name: Generation name

        Returns:
            Keys in the generation (empty if it does not exist)
        """
        ...

    async def generations(self) -> list[str]:
        """List the names of every generation in the store.

        Returns:
            Generation names
        """
        ...

    async def delete(self, name: str) -> bool:
        """Delete a generation with all of its entries.

        Args:
            name: Generation name

        Returns:
            True if the generation existed, False otherwise
        """
        ...

    async def health_check(self) -> bool:
        """Check if the store is accessible.

        Returns:
            True if healthy, False otherwise
        """
        ...

    async def get_stats(self) -> dict:
        """Get store statistics.

        Returns:
            Dictionary with stats (implementation-specific)
        """
        ...
