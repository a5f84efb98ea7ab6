"""
Query service.

Read-through orchestration of a question over uploaded documents:
cache lookup, question embedding, top-K retrieval, grounded generation,
blended confidence and a best-effort cache write.

Dependencies: docagents.boundary.cache, docagents.boundary.llm, docagents.boundary.db
System role: Retrieval-augmented question answering
"""

import logging

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from docagents.boundary.cache.base import QueryCache, generate_cache_key
from docagents.boundary.db.store import DocumentStore
from docagents.boundary.llm.base import Embedder, Generator
from docagents.core.confidence import context_quality, truncate_preview
from docagents.core.exceptions import CacheError, SearchError
from docagents.models.document import SearchResult
from docagents.models.query import (
    CachedQueryResult,
    QueryRequest,
    QueryResponse,
    SourceItem,
)

logger = logging.getLogger(__name__)

_SOURCES_ADAPTER = TypeAdapter(list[SourceItem])


def build_context(results: list[SearchResult]) -> str:
    """Concatenate retrieved chunk texts, one per line, in rank order."""
    return "".join(result.chunk.text + "\n" for result in results)


class QueryService:
    """Answer questions against stored document chunks."""

    def __init__(
        self,
        store: DocumentStore,
        embedder: Embedder,
        generator: Generator,
        cache: QueryCache,
        cache_ttl_seconds: int = 3600,
        preview_chars: int = 150,
    ) -> None:
        self._store = store
        self._embedder = embedder
        self._generator = generator
        self._cache = cache
        self._cache_ttl_seconds = cache_ttl_seconds
        self._preview_chars = preview_chars

    async def query(self, request: QueryRequest) -> QueryResponse:
        """
        Answer a validated query.

        Args:
            request: Question, document ids and top_k

        Returns:
            QueryResponse: Answer, sources, confidence and cache flag

        Raises:
            EmbeddingError: Question could not be embedded
            SearchError: Vector search failed
            GenerationError: Answer generation failed
        """
        cache_key = generate_cache_key(request.question, request.document_ids, request.top_k)

        cached = await self._lookup_cache(cache_key)
        if cached is not None:
            return cached

        vector = await self._embedder.embed(request.question)
        try:
            results = await self._store.top_k(request.document_ids, vector, request.top_k)
        except SearchError:
            raise
        except Exception as e:
            raise SearchError("vector search failed", {"error": str(e)}) from e

        quality = context_quality([result.score for result in results])
        answer, confidence = await self._generator.answer(
            request.question,
            build_context(results),
            quality,
        )

        sources = [
            SourceItem(
                chunk_id=result.chunk.id,
                score=result.score,
                preview=truncate_preview(result.chunk.text, self._preview_chars),
            )
            for result in results
        ]
        response = QueryResponse(
            answer=answer,
            sources=sources,
            confidence=confidence,
            cached=False,
        )

        await self._store_cache(cache_key, response)
        logger.info(
            f"{__name__}:query - Answered query",
            extra={
                "documents": len(request.document_ids),
                "results": len(results),
                "confidence": confidence,
            },
        )
        return response

    async def _lookup_cache(self, cache_key: str) -> QueryResponse | None:
        try:
            cached = await self._cache.get_query_result(cache_key)
        except CacheError as e:
            logger.warning(
                f"{__name__}:_lookup_cache - Cache read failed, treating as miss",
                extra={"error": str(e)},
            )
            return None
        if cached is None:
            return None

        try:
            sources = _SOURCES_ADAPTER.validate_json(cached.sources)
        except PydanticValidationError as e:
            logger.warning(
                f"{__name__}:_lookup_cache - Cached sources undecodable, recomputing",
                extra={"error": str(e)},
            )
            return None

        logger.info(f"{__name__}:_lookup_cache - Cache hit")
        return QueryResponse(
            answer=cached.answer,
            sources=sources,
            confidence=cached.confidence,
            cached=True,
        )

    async def _store_cache(self, cache_key: str, response: QueryResponse) -> None:
        entry = CachedQueryResult(
            answer=response.answer,
            confidence=response.confidence,
            sources=_SOURCES_ADAPTER.dump_json(response.sources).decode("utf-8"),
        )
        try:
            await self._cache.set_query_result(cache_key, entry, self._cache_ttl_seconds)
        except CacheError as e:
            logger.warning(
                f"{__name__}:_store_cache - Cache write failed",
                extra={"error": str(e)},
            )
