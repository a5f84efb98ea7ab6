"""
Query cache contract and key derivation.

Dependencies: hashlib (stdlib), docagents.models
System role: Read-through cache interface for the query path
"""

import hashlib
import uuid
from collections.abc import Iterable
from typing import Protocol

from docagents.models.query import CachedQueryResult

QUERY_KEY_PREFIX = "query:"


def generate_cache_key(
    question: str,
    document_ids: Iterable[uuid.UUID | str],
    top_k: int,
) -> str:
    """
    Derive the cache key for a query.

    Document ids are sorted so the key does not depend on request order.

    Returns:
        str: Hex SHA-256 digest of the canonical query string
    """
    sorted_ids = sorted(str(doc_id) for doc_id in document_ids)
    canonical = f"q:{question}|docs:{','.join(sorted_ids)}|k:{top_k}"
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


class QueryCache(Protocol):
    """Cache of query answers keyed by generate_cache_key()."""

    async def get_query_result(self, key: str) -> CachedQueryResult | None:
        """Return the cached result, or None on a miss."""
        ...

    async def set_query_result(
        self,
        key: str,
        result: CachedQueryResult,
        ttl_seconds: int,
    ) -> None:
        """Store a result for ttl_seconds."""
        ...

    async def invalidate_document(self, document_id: uuid.UUID | str) -> None:
        """Drop cached answers that may involve the document."""
        ...

    async def close(self) -> None:
        ...
