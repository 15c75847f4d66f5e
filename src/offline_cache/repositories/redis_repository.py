"""Redis implementation of CacheStore.

Each generation is a Redis hash whose fields are request keys and whose
values are JSON-serialized response snapshots. A set holds the names of all
generations so that empty generations can exist and be enumerated.

Layout (with the default prefix)::

    offline_cache:generations            SET   {name, ...}
    offline_cache:generation:<name>      HASH  {"GET https://...": snapshot-json}
"""

import json

import redis
import redis.asyncio as aioredis

from offline_cache.config import get_redis_client, settings
from offline_cache.entities import RequestKey, ResponseSnapshot
from offline_cache.exceptions import CacheStoreFailure


def _decode(value: bytes | str) -> str:
    return value.decode() if isinstance(value, bytes) else value


class RedisCacheStore:
    """Redis implementation using one hash per generation.

    This class satisfies the CacheStore protocol through structural
    typing - no explicit inheritance needed.

    Deleting a generation removes its hash and its registry entry in one
    MULTI/EXEC transaction, so a generation is never partially deleted.
    """

    def __init__(
        self,
        redis_client: aioredis.Redis | None = None,
        key_prefix: str | None = None,
    ) -> None:
        """Initialize the Redis cache store.

        Args:
            redis_client: asyncio Redis client instance. If None, creates default.
            key_prefix: Prefix for every key written by this store.
        """
        self._client = redis_client or get_redis_client()
        self._prefix = key_prefix or settings.cache_key_prefix

    @classmethod
    def create(cls, key_prefix: str | None = None) -> "RedisCacheStore":
        """Factory method to create RedisCacheStore with defaults.

        Args:
            key_prefix: Key prefix. If None, uses settings.

        Returns:
            Configured RedisCacheStore
        """
        return cls(key_prefix=key_prefix)

    @property
    def _registry_key(self) -> str:
        return f"{self._prefix}:generations"

    def _generation_key(self, name: str) -> str:
        return f"{self._prefix}:generation:{name}"

    async def open(self, name: str) -> None:
        try:
            await self._client.sadd(self._registry_key, name)
        except redis.RedisError as e:
            raise CacheStoreFailure(f"Failed to open generation {name}: {e}", {"generation": name}) from e

    async def match(self, name: str, key: RequestKey) -> ResponseSnapshot | None:
        """Look up an entry in a generation.

        Args:
            name: Generation name
            key: Normalized request key

        Returns:
            The stored snapshot, or None on a miss

        Raises:
            CacheStoreFailure: On Redis errors or an undecodable entry
        """
        try:
            raw = await self._client.hget(self._generation_key(name), str(key))
        except redis.RedisError as e:
            raise CacheStoreFailure(f"Failed to read {key}: {e}", {"generation": name}) from e

        if raw is None:
            return None

        try:
            return ResponseSnapshot.from_dict(json.loads(raw))
        except (ValueError, KeyError, TypeError) as e:
            raise CacheStoreFailure(f"Corrupt cache entry for {key}: {e}", {"generation": name}) from e

    async def put(self, name: str, key: RequestKey, response: ResponseSnapshot) -> None:
        """Store a snapshot, overwriting any previous entry for the key.

        Raises:
            CacheStoreFailure: On Redis errors (including OOM / maxmemory)
        """
        payload = json.dumps(response.to_dict())
        try:
            async with self._client.pipeline(transaction=True) as pipe:
                pipe.sadd(self._registry_key, name)
                pipe.hset(self._generation_key(name), str(key), payload)
                await pipe.execute()
        except redis.RedisError as e:
            raise CacheStoreFailure(f"Failed to store {key}: {e}", {"generation": name}) from e

    async def list_keys(self, name: str) -> list[RequestKey]:
        try:
            fields = await self._client.hkeys(self._generation_key(name))
        except redis.RedisError as e:
            raise CacheStoreFailure(f"Failed to list keys of {name}: {e}", {"generation": name}) from e
        return [RequestKey.parse(_decode(field)) for field in fields]

    async def generations(self) -> list[str]:
        try:
            members = await self._client.smembers(self._registry_key)
        except redis.RedisError as e:
            raise CacheStoreFailure(f"Failed to list generations: {e}") from e
        return sorted(_decode(member) for member in members)

    async def delete(self, name: str) -> bool:
        """Delete a generation and all of its entries atomically.

        Returns:
            True if the generation existed, False otherwise
        """
        try:
            async with self._client.pipeline(transaction=True) as pipe:
                pipe.delete(self._generation_key(name))
                pipe.srem(self._registry_key, name)
                deleted, removed = await pipe.execute()
        except redis.RedisError as e:
            raise CacheStoreFailure(f"Failed to delete generation {name}: {e}", {"generation": name}) from e
        return bool(deleted) or bool(removed)

    async def health_check(self) -> bool:
        """Check if Redis is accessible.

        Returns:
            True if healthy, False otherwise
        """
        try:
            return bool(await self._client.ping())
        except redis.RedisError:
            return False

    async def get_stats(self) -> dict:
        """Get store statistics.

        Returns:
            Dictionary with stats
        """
        names = await self.generations()
        total = 0
        for name in names:
            try:
                total += await self._client.hlen(self._generation_key(name))
            except redis.RedisError as e:
                raise CacheStoreFailure(f"Failed to count entries of {name}: {e}") from e
        return {
            "backend": "redis",
            "key_prefix": self._prefix,
            "generations": len(names),
            "total_entries": total,
        }

    async def close(self) -> None:
        """Close the Redis connection pool."""
        await self._client.aclose()

    @property
    def client(self) -> aioredis.Redis:
        """Get the Redis client."""
        return self._client
