"""In-memory implementation of CacheStore.

Keeps every generation in a plain dict of dicts. This is the default backend
and the one used by the test suite; contents are lost when the process exits.
"""

from offline_cache.entities import RequestKey, ResponseSnapshot


class InMemoryCacheStore:
    """Dictionary-backed cache store.

    This class satisfies the CacheStore protocol through structural
    typing - no explicit inheritance needed.

    Writes never await between reading and updating the dict, so concurrent
    puts to the same key land in the order they are scheduled (last write
    wins).
    """

    def __init__(self) -> None:
        self._generations: dict[str, dict[RequestKey, ResponseSnapshot]] = {}
        self._put_count = 0

    @classmethod
    def create(cls) -> "InMemoryCacheStore":
        """Factory method mirroring the other backends."""
        return cls()

    async def open(self, name: str) -> None:
        self._generations.setdefault(name, {})

    async def match(self, name: str, key: RequestKey) -> ResponseSnapshot | None:
        generation = self._generations.get(name)
        if generation is None:
            return None
        return generation.get(key)

    async def put(self, name: str, key: RequestKey, response: ResponseSnapshot) -> None:
        self._generations.setdefault(name, {})[key] = response
        self._put_count += 1

    async def list_keys(self, name: str) -> list[RequestKey]:
        return list(self._generations.get(name, {}))

    async def generations(self) -> list[str]:
        return list(self._generations)

    async def delete(self, name: str) -> bool:
        return self._generations.pop(name, None) is not None

    async def health_check(self) -> bool:
        return True

    async def get_stats(self) -> dict:
        """Get store statistics.

        Returns:
            Dictionary with generation count, entry count and total puts
        """
        return {
            "backend": "memory",
            "generations": len(self._generations),
            "total_entries": sum(len(entries) for entries in self._generations.values()),
            "put_count": self._put_count,
        }

    @property
    def put_count(self) -> int:
        """Total number of puts since creation (for testing)."""
        return self._put_count
