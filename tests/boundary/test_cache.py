"""
Test suite for query cache key derivation and backends.

System role: Verification of Redis and no-op query caches
"""

import uuid
from unittest.mock import AsyncMock, MagicMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from docagents.boundary.cache.base import generate_cache_key
from docagents.boundary.cache.noop import NoOpQueryCache
from docagents.boundary.cache.redis_cache import RedisQueryCache, connect_query_cache
from docagents.configs.redis import RedisSettings
from docagents.core.exceptions import CacheError
from docagents.models.query import CachedQueryResult

DOC_A = uuid.UUID("00000000-0000-4000-8000-00000000000a")
DOC_B = uuid.UUID("00000000-0000-4000-8000-00000000000b")


class TestGenerateCacheKey:
    """Test suite for generate_cache_key."""

    def test_key_is_independent_of_document_order(self) -> None:
        assert generate_cache_key("q?", [DOC_A, DOC_B], 5) == generate_cache_key(
            "q?", [DOC_B, DOC_A], 5
        )

    @pytest.mark.parametrize(
        "question,doc_ids,top_k",
        [("other question", [DOC_A, DOC_B], 5), ("q?", [DOC_A], 5), ("q?", [DOC_A, DOC_B], 6)],
    )
    def test_any_change_changes_key(self, question, doc_ids, top_k) -> None:
        base = generate_cache_key("q?", [DOC_A, DOC_B], 5)

        assert generate_cache_key(question, doc_ids, top_k) != base

    def test_key_is_hex_sha256(self) -> None:
        key = generate_cache_key("q?", [DOC_A], 5)

        assert len(key) == 64
        int(key, 16)


class _AsyncIter:
    def __init__(self, items):
        self._items = list(items)

    def __aiter__(self):
        return self

    async def __anext__(self):
        if not self._items:
            raise StopAsyncIteration
        return self._items.pop(0)


@pytest.fixture
def redis_client() -> MagicMock:
    """Provide mocked asyncio Redis client."""
    client = MagicMock()
    client.get = AsyncMock(return_value=None)
    client.setex = AsyncMock()
    client.ping = AsyncMock()
    client.aclose = AsyncMock()
    return client


class TestRedisQueryCache:
    """Test suite for RedisQueryCache."""

    @pytest.mark.asyncio
    async def test_miss_returns_none(self, redis_client: MagicMock) -> None:
        cache = RedisQueryCache(redis_client)

        assert await cache.get_query_result("abc") is None
        redis_client.get.assert_awaited_once_with("query:abc")

    @pytest.mark.asyncio
    async def test_set_writes_prefixed_key_with_ttl(self, redis_client: MagicMock) -> None:
        cache = RedisQueryCache(redis_client)
        result = CachedQueryResult(answer="42", confidence=0.5, sources="[]")

        await cache.set_query_result("abc", result, 3600)

        key, ttl, value = redis_client.setex.await_args.args
        assert (key, ttl) == ("query:abc", 3600)
        assert CachedQueryResult.model_validate_json(value) == result

    @pytest.mark.asyncio
    async def test_hit_decodes_stored_value(self, redis_client: MagicMock) -> None:
        stored = CachedQueryResult(answer="42", confidence=0.9, sources="[]")
        redis_client.get.return_value = stored.model_dump_json()
        cache = RedisQueryCache(redis_client)

        assert await cache.get_query_result("abc") == stored

    @pytest.mark.asyncio
    async def test_undecodable_value_raises_cache_error(self, redis_client: MagicMock) -> None:
        redis_client.get.return_value = "{broken"
        cache = RedisQueryCache(redis_client)

        with pytest.raises(CacheError):
            await cache.get_query_result("abc")

    @pytest.mark.asyncio
    async def test_connection_error_raises_cache_error(self, redis_client: MagicMock) -> None:
        redis_client.get.side_effect = RedisConnectionError("down")
        cache = RedisQueryCache(redis_client)

        with pytest.raises(CacheError):
            await cache.get_query_result("abc")

    @pytest.mark.asyncio
    async def test_invalidate_deletes_every_query_key(self, redis_client: MagicMock) -> None:
        """Test invalidation is coarse: all query:* keys go, not only this document's."""
        redis_client.scan_iter = MagicMock(return_value=_AsyncIter(["query:1", "query:2"]))
        pipe = MagicMock()
        pipe.execute = AsyncMock(return_value=[1, 1])
        redis_client.pipeline.return_value.__aenter__ = AsyncMock(return_value=pipe)
        redis_client.pipeline.return_value.__aexit__ = AsyncMock(return_value=False)
        cache = RedisQueryCache(redis_client)

        await cache.invalidate_document(DOC_A)

        redis_client.scan_iter.assert_called_once_with(match="query:*", count=500)
        assert [c.args for c in pipe.delete.call_args_list] == [("query:1",), ("query:2",)]
        pipe.execute.assert_awaited_once()


class TestNoOpQueryCache:
    """Test suite for NoOpQueryCache."""

    @pytest.mark.asyncio
    async def test_always_misses_and_accepts_writes(self) -> None:
        cache = NoOpQueryCache()
        result = CachedQueryResult(answer="a", confidence=1.0)

        await cache.set_query_result("k", result, 10)
        await cache.invalidate_document(DOC_A)

        assert await cache.get_query_result("k") is None


class TestConnectQueryCache:
    """Test suite for connect_query_cache fallback."""

    @pytest.mark.asyncio
    async def test_disabled_cache_is_noop(self) -> None:
        cache = await connect_query_cache(RedisSettings(), enabled=False)

        assert isinstance(cache, NoOpQueryCache)

    @pytest.mark.asyncio
    async def test_unreachable_redis_falls_back_to_noop(
        self, redis_client: MagicMock, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        redis_client.ping.side_effect = RedisConnectionError("refused")
        monkeypatch.setattr(
            "docagents.boundary.cache.redis_cache.Redis.from_url",
            MagicMock(return_value=redis_client),
        )

        cache = await connect_query_cache(RedisSettings())

        assert isinstance(cache, NoOpQueryCache)
        redis_client.aclose.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_reachable_redis_gives_redis_cache(
        self, redis_client: MagicMock, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr(
            "docagents.boundary.cache.redis_cache.Redis.from_url",
            MagicMock(return_value=redis_client),
        )

        cache = await connect_query_cache(RedisSettings())

        assert isinstance(cache, RedisQueryCache)
