"""Tests for the Redis cache store against an in-process Redis double."""

import pytest
import redis

from offline_cache.entities import RequestKey, ResponseSnapshot
from offline_cache.exceptions import CacheStoreFailure
from offline_cache.repositories import RedisCacheStore


def _b(value) -> bytes:
    return value if isinstance(value, bytes) else str(value).encode()


class FakePipeline:
    """Queues commands and runs them on execute, like a MULTI/EXEC pipeline."""

    def __init__(self, client: "FakeAsyncRedis") -> None:
        self._client = client
        self._queued: list[tuple[str, tuple]] = []

    async def __aenter__(self) -> "FakePipeline":
        return self

    async def __aexit__(self, *exc_info) -> bool:
        return False

    def sadd(self, *args):
        self._queued.append(("sadd", args))
        return self

    def srem(self, *args):
        self._queued.append(("srem", args))
        return self

    def hset(self, *args):
        self._queued.append(("hset", args))
        return self

    def delete(self, *args):
        self._queued.append(("delete", args))
        return self

    async def execute(self) -> list:
        self._client.check()
        return [await getattr(self._client, name)(*args) for name, args in self._queued]


class FakeAsyncRedis:
    """Minimal asyncio Redis double returning bytes like ``decode_responses=False``."""

    def __init__(self) -> None:
        self.sets: dict[bytes, set[bytes]] = {}
        self.hashes: dict[bytes, dict[bytes, bytes]] = {}
        self.down = False
        self.closed = False

    def check(self) -> None:
        if self.down:
            raise redis.ConnectionError("Error 111 connecting to localhost:6379. Connection refused.")

    def pipeline(self, transaction: bool = True) -> FakePipeline:
        return FakePipeline(self)

    async def sadd(self, key, *members) -> int:
        self.check()
        target = self.sets.setdefault(_b(key), set())
        before = len(target)
        target.update(_b(m) for m in members)
        return len(target) - before

    async def srem(self, key, *members) -> int:
        self.check()
        target = self.sets.get(_b(key), set())
        removed = sum(1 for m in members if _b(m) in target)
        target.difference_update(_b(m) for m in members)
        return removed

    async def smembers(self, key) -> set[bytes]:
        self.check()
        return set(self.sets.get(_b(key), set()))

    async def hset(self, key, field, value) -> int:
        self.check()
        target = self.hashes.setdefault(_b(key), {})
        is_new = _b(field) not in target
        target[_b(field)] = _b(value)
        return int(is_new)

    async def hget(self, key, field) -> bytes | None:
        self.check()
        return self.hashes.get(_b(key), {}).get(_b(field))

    async def hkeys(self, key) -> list[bytes]:
        self.check()
        return list(self.hashes.get(_b(key), {}))

    async def hlen(self, key) -> int:
        self.check()
        return len(self.hashes.get(_b(key), {}))

    async def delete(self, *keys) -> int:
        self.check()
        return sum(1 for key in keys if self.hashes.pop(_b(key), None) is not None)

    async def ping(self) -> bool:
        self.check()
        return True

    async def aclose(self) -> None:
        self.closed = True


KEY = RequestKey.create("GET", "https://app.example.com/index.html")
SNAPSHOT = ResponseSnapshot(
    status=200,
    headers=(("Content-Type", "text/html"),),
    body=b"<html>index</html>",
    url="https://app.example.com/index.html",
)


@pytest.fixture
def fake_redis() -> FakeAsyncRedis:
    return FakeAsyncRedis()


@pytest.fixture
def redis_store(fake_redis) -> RedisCacheStore:
    return RedisCacheStore(redis_client=fake_redis, key_prefix="test")


@pytest.mark.asyncio
async def test_put_and_match(redis_store, fake_redis):
    await redis_store.put("v1", KEY, SNAPSHOT)

    assert await redis_store.match("v1", KEY) == SNAPSHOT
    assert b"GET https://app.example.com/index.html" in fake_redis.hashes[b"test:generation:v1"]


@pytest.mark.asyncio
async def test_match_miss(redis_store):
    await redis_store.open("v1")
    assert await redis_store.match("v1", KEY) is None
    assert await redis_store.match("unknown", KEY) is None


@pytest.mark.asyncio
async def test_open_registers_empty_generation(redis_store):
    await redis_store.open("v2")
    await redis_store.open("v1")
    assert await redis_store.generations() == ["v1", "v2"]
    assert await redis_store.list_keys("v2") == []


@pytest.mark.asyncio
async def test_list_keys_parses_request_keys(redis_store):
    other = RequestKey.create("GET", "https://app.example.com/a b.js")
    await redis_store.put("v1", KEY, SNAPSHOT)
    await redis_store.put("v1", other, SNAPSHOT)

    assert set(await redis_store.list_keys("v1")) == {KEY, other}


@pytest.mark.asyncio
async def test_delete_removes_generation_and_entries(redis_store, fake_redis):
    await redis_store.put("v1", KEY, SNAPSHOT)

    assert await redis_store.delete("v1") is True
    assert await redis_store.generations() == []
    assert b"test:generation:v1" not in fake_redis.hashes
    assert await redis_store.delete("v1") is False


@pytest.mark.asyncio
async def test_corrupt_entry_raises_store_failure(redis_store, fake_redis):
    await redis_store.open("v1")
    fake_redis.hashes[b"test:generation:v1"] = {str(KEY).encode(): b"not json"}

    with pytest.raises(CacheStoreFailure):
        await redis_store.match("v1", KEY)


@pytest.mark.asyncio
async def test_redis_errors_raise_store_failure(redis_store, fake_redis):
    fake_redis.down = True

    with pytest.raises(CacheStoreFailure):
        await redis_store.put("v1", KEY, SNAPSHOT)
    with pytest.raises(CacheStoreFailure):
        await redis_store.match("v1", KEY)
    with pytest.raises(CacheStoreFailure):
        await redis_store.generations()
    with pytest.raises(CacheStoreFailure):
        await redis_store.delete("v1")
    assert await redis_store.health_check() is False


@pytest.mark.asyncio
async def test_stats_and_close(redis_store, fake_redis):
    await redis_store.put("v1", KEY, SNAPSHOT)
    await redis_store.open("v2")

    stats = await redis_store.get_stats()

    assert stats == {"backend": "redis", "key_prefix": "test", "generations": 2, "total_entries": 1}
    assert await redis_store.health_check() is True
    await redis_store.close()
    assert fake_redis.closed
