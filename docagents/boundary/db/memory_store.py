"""
In-memory document store.

Same contract as PostgresStore, kept in dictionaries behind an asyncio
lock. Similarity is computed in Python. Used for local runs and tests.

Dependencies: docagents.core, docagents.models
System role: Development/test persistence layer
"""

import asyncio
import math
import uuid
from collections.abc import Sequence
from datetime import datetime, timezone

from docagents.core.exceptions import (
    DocumentNotFoundError,
    SearchError,
    SummaryNotFoundError,
)
from docagents.core.state_machine import INITIAL_STATUS, ensure_transition
from docagents.models.document import (
    Chunk,
    Document,
    DocumentStatus,
    Embedding,
    SearchResult,
    Summary,
)


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Cosine similarity of two vectors; 0.0 if either is all zeros."""
    if len(a) != len(b):
        raise SearchError("vector dimension mismatch", {"left": len(a), "right": len(b)})
    dot = sum(x * y for x, y in zip(a, b))
    norm = math.sqrt(sum(x * x for x in a)) * math.sqrt(sum(y * y for y in b))
    if norm == 0:
        return 0.0
    return dot / norm


class InMemoryStore:
    """Document store held in process memory."""

    def __init__(self) -> None:
        self._lock = asyncio.Lock()
        self.documents: dict[uuid.UUID, Document] = {}
        self.chunks: dict[uuid.UUID, list[Chunk]] = {}
        self.summaries: dict[uuid.UUID, Summary] = {}
        self.embeddings: dict[uuid.UUID, Embedding] = {}

    async def create_document(self, filename: str) -> Document:
        document = Document(
            id=uuid.uuid4(),
            filename=filename,
            status=INITIAL_STATUS,
            created_at=datetime.now(timezone.utc),
        )
        async with self._lock:
            self.documents[document.id] = document
        return document

    async def get_document(self, document_id: uuid.UUID) -> Document:
        async with self._lock:
            document = self.documents.get(document_id)
        if document is None:
            raise DocumentNotFoundError(str(document_id))
        return document

    async def update_document_status(
        self,
        document_id: uuid.UUID,
        status: DocumentStatus,
    ) -> Document:
        async with self._lock:
            document = self.documents.get(document_id)
            if document is None:
                raise DocumentNotFoundError(str(document_id))
            ensure_transition(str(document_id), document.status, status)
            document = document.model_copy(update={"status": status})
            self.documents[document_id] = document
        return document

    async def save_chunks(
        self,
        document_id: uuid.UUID,
        chunks: Sequence[Chunk],
    ) -> list[Chunk]:
        saved = [
            chunk.model_copy(update={"id": chunk.id or uuid.uuid4(), "document_id": document_id})
            for chunk in chunks
        ]
        async with self._lock:
            self.chunks.setdefault(document_id, []).extend(saved)
        return saved

    async def count_chunks(self, document_id: uuid.UUID) -> int:
        async with self._lock:
            return len(self.chunks.get(document_id, []))

    async def list_chunks(self, document_id: uuid.UUID) -> list[Chunk]:
        async with self._lock:
            chunks = list(self.chunks.get(document_id, []))
        # Stable sort keeps insertion order among duplicate indexes
        return sorted(chunks, key=lambda chunk: chunk.index)

    async def save_summary(self, document_id: uuid.UUID, summary: Summary) -> None:
        async with self._lock:
            self.summaries[document_id] = summary.model_copy(
                update={"document_id": document_id}
            )

    async def get_summary(self, document_id: uuid.UUID) -> Summary:
        async with self._lock:
            summary = self.summaries.get(document_id)
        if summary is None:
            raise SummaryNotFoundError(str(document_id))
        return summary

    async def save_embeddings(self, embeddings: Sequence[Embedding]) -> None:
        async with self._lock:
            for embedding in embeddings:
                self.embeddings[embedding.chunk_id] = embedding

    async def top_k(
        self,
        document_ids: Sequence[uuid.UUID],
        vector: Sequence[float],
        k: int,
    ) -> list[SearchResult]:
        if not document_ids or k <= 0:
            return []

        async with self._lock:
            candidates = [
                (chunk, self.embeddings[chunk.id], self.summaries.get(doc_id))
                for doc_id in set(document_ids)
                for chunk in self.chunks.get(doc_id, [])
                if chunk.id in self.embeddings
            ]

        results = [
            SearchResult(
                chunk=chunk,
                score=cosine_similarity(vector, embedding.vector),
                summary=summary.summary if summary else None,
            )
            for chunk, embedding, summary in candidates
        ]
        results.sort(key=lambda result: result.score, reverse=True)
        return results[:k]

    async def close(self) -> None:
        return None
