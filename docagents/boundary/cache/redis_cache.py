"""
Redis-backed query cache.

Answers are stored as JSON under query:<key> with SETEX. Invalidation is
coarse: there is no document-to-query index, so invalidating any document
deletes every query:* entry.

Dependencies: redis (asyncio client), pydantic
System role: Production query cache
"""

import logging
import uuid

from pydantic import ValidationError as PydanticValidationError
from redis.asyncio import Redis
from redis.exceptions import RedisError

from docagents.boundary.cache.base import QUERY_KEY_PREFIX
from docagents.boundary.cache.noop import NoOpQueryCache
from docagents.configs.redis import RedisSettings
from docagents.core.exceptions import CacheError
from docagents.models.query import CachedQueryResult

logger = logging.getLogger(__name__)

SCAN_BATCH = 500


class RedisQueryCache:
    """Query cache over a Redis client created with decode_responses=True."""

    def __init__(self, client: Redis) -> None:
        self._client = client

    async def get_query_result(self, key: str) -> CachedQueryResult | None:
        """
        Look up a cached answer.

        Raises:
            CacheError: Redis unavailable or stored value undecodable
        """
        try:
            raw = await self._client.get(QUERY_KEY_PREFIX + key)
        except RedisError as exc:
            raise CacheError("cache read failed", {"key": key, "error": str(exc)}) from exc

        if raw is None:
            return None
        try:
            return CachedQueryResult.model_validate_json(raw)
        except PydanticValidationError as exc:
            raise CacheError("cached value undecodable", {"key": key}) from exc

    async def set_query_result(
        self,
        key: str,
        result: CachedQueryResult,
        ttl_seconds: int,
    ) -> None:
        """
        Store an answer with a TTL.

        Raises:
            CacheError: Redis unavailable
        """
        try:
            await self._client.setex(
                QUERY_KEY_PREFIX + key,
                ttl_seconds,
                result.model_dump_json(),
            )
        except RedisError as exc:
            raise CacheError("cache write failed", {"key": key, "error": str(exc)}) from exc

    async def invalidate_document(self, document_id: uuid.UUID | str) -> None:
        """
        Delete every cached query answer.

        Raises:
            CacheError: Redis unavailable
        """
        deleted = 0
        try:
            keys = [
                key
                async for key in self._client.scan_iter(
                    match=f"{QUERY_KEY_PREFIX}*", count=SCAN_BATCH
                )
            ]
            if keys:
                async with self._client.pipeline(transaction=False) as pipe:
                    for key in keys:
                        pipe.delete(key)
                    results = await pipe.execute()
                deleted = sum(results)
        except RedisError as exc:
            raise CacheError(
                "cache invalidation failed",
                {"document_id": str(document_id), "error": str(exc)},
            ) from exc

        logger.info(
            f"{__name__}:invalidate_document - Cleared query cache",
            extra={"document_id": str(document_id), "deleted": deleted},
        )

    async def close(self) -> None:
        await self._client.aclose()


async def connect_query_cache(
    settings: RedisSettings,
    enabled: bool = True,
) -> RedisQueryCache | NoOpQueryCache:
    """
    Build the query cache, falling back to the no-op cache.

    Args:
        settings: Redis connection settings
        enabled: False forces the no-op cache

    Returns:
        RedisQueryCache if Redis answers a ping, otherwise NoOpQueryCache
    """
    if not enabled:
        logger.info(f"{__name__}:connect_query_cache - Query cache disabled")
        return NoOpQueryCache()

    client = Redis.from_url(
        settings.redis_url,
        decode_responses=True,
        socket_timeout=settings.socket_timeout,
        socket_connect_timeout=settings.socket_timeout,
    )
    try:
        await client.ping()
    except RedisError as exc:
        logger.warning(
            f"{__name__}:connect_query_cache - Redis unreachable, using no-op cache",
            extra={"error": str(exc)},
        )
        await client.aclose()
        return NoOpQueryCache()

    return RedisQueryCache(client)
