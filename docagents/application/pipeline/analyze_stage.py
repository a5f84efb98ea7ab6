"""
Analyze stage handler.

Summarizes a chunked document, embeds every chunk in one batch and marks
the document ready. The summary is saved before embedding, so a failure
in between leaves a saved summary on a document still in processing;
the retried task overwrites it.

Dependencies: docagents.boundary.llm, docagents.boundary.db, docagents.boundary.cache
System role: Second stage of the document ingestion pipeline
"""

import logging

from docagents.boundary.cache.base import QueryCache
from docagents.boundary.db.store import DocumentStore
from docagents.boundary.llm.base import Embedder, Generator
from docagents.core.exceptions import CacheError, EmbeddingError, IllegalTransitionError
from docagents.models.document import DocumentStatus, Embedding, Summary
from docagents.models.task import AnalyzeTaskPayload, Task

logger = logging.getLogger(__name__)


def enrich_chunk_text(filename: str, text: str) -> str:
    """Prefix chunk text with its document name for embedding."""
    return f"Document: {filename}\n\n{text}"


class AnalyzeStage:
    """Handle analyze tasks."""

    def __init__(
        self,
        store: DocumentStore,
        embedder: Embedder,
        generator: Generator,
        cache: QueryCache,
        embedding_model: str,
    ) -> None:
        self._store = store
        self._embedder = embedder
        self._generator = generator
        self._cache = cache
        self._embedding_model = embedding_model

    async def handle(self, task: Task) -> None:
        """
        Summarize and embed a document, then mark it ready.

        Args:
            task: Analyze task

        Raises:
            InvalidTaskError: Payload malformed
            GenerationError: Summary request failed
            EmbeddingError: Embedding request failed or returned a bad batch
        """
        payload = task.decode_payload(AnalyzeTaskPayload)
        document_id = payload.document_id

        document = await self._store.get_document(document_id)
        if document.status != DocumentStatus.PROCESSING:
            logger.warning(
                f"{__name__}:handle - Skipping document not in processing state",
                extra={"document_id": str(document_id), "status": document.status.value},
            )
            return

        chunks = await self._store.list_chunks(document_id)
        if not chunks:
            logger.warning(
                f"{__name__}:handle - Document has no chunks, saving empty summary",
                extra={"document_id": str(document_id)},
            )
            await self._store.save_summary(document_id, Summary(document_id=document_id))
            await self._mark_ready(document_id)
            return

        summary, key_points = await self._generator.summarize(
            "\n".join(chunk.text for chunk in chunks)
        )
        await self._store.save_summary(
            document_id,
            Summary(document_id=document_id, summary=summary, key_points=key_points),
        )

        vectors = await self._embedder.embed_batch(
            [enrich_chunk_text(document.filename, chunk.text) for chunk in chunks]
        )
        if len(vectors) != len(chunks):
            raise EmbeddingError(
                "embedding count mismatch",
                {"expected": len(chunks), "received": len(vectors)},
            )

        await self._store.save_embeddings(
            [
                Embedding(chunk_id=chunk.id, vector=vector, model=self._embedding_model)
                for chunk, vector in zip(chunks, vectors)
            ]
        )
        logger.info(
            f"{__name__}:handle - Summary and embeddings saved",
            extra={"document_id": str(document_id), "chunks": len(chunks)},
        )

        await self._mark_ready(document_id)

    async def _mark_ready(self, document_id) -> None:
        try:
            await self._store.update_document_status(document_id, DocumentStatus.READY)
        except IllegalTransitionError as e:
            logger.warning(
                f"{__name__}:_mark_ready - Document left processing during analysis",
                extra={"document_id": str(document_id), "current": e.current},
            )
            return

        try:
            await self._cache.invalidate_document(document_id)
        except CacheError as e:
            logger.warning(
                f"{__name__}:_mark_ready - Cache invalidation failed",
                extra={"document_id": str(document_id), "error": str(e)},
            )
