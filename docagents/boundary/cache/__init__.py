"""Query result cache backends."""

from docagents.boundary.cache.base import QueryCache, generate_cache_key
from docagents.boundary.cache.noop import NoOpQueryCache
from docagents.boundary.cache.redis_cache import RedisQueryCache, connect_query_cache

__all__ = [
    "NoOpQueryCache",
    "QueryCache",
    "RedisQueryCache",
    "connect_query_cache",
    "generate_cache_key",
]
