"""
Cache that never stores anything.

Dependencies: docagents.models
System role: Stand-in when Redis is disabled or unreachable
"""

import uuid

from docagents.models.query import CachedQueryResult


class NoOpQueryCache:
    """Always misses; every write succeeds."""

    async def get_query_result(self, key: str) -> CachedQueryResult | None:
        return None

    async def set_query_result(
        self,
        key: str,
        result: CachedQueryResult,
        ttl_seconds: int,
    ) -> None:
        return None

    async def invalidate_document(self, document_id: uuid.UUID | str) -> None:
        return None

    async def close(self) -> None:
        return None
