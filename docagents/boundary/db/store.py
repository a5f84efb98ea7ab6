"""
Document store contract.

Every store enforces the document lifecycle in update_document_status as
a compare-and-set: the row changes only if its current status may move to
the requested one.

Dependencies: docagents.models
System role: Persistence interface used by services and pipeline stages
"""

import uuid
from collections.abc import Sequence
from typing import Protocol

from docagents.models.document import (
    Chunk,
    Document,
    DocumentStatus,
    Embedding,
    SearchResult,
    Summary,
)


class DocumentStore(Protocol):
    """Persistence for documents, chunks, summaries and embeddings."""

    async def create_document(self, filename: str) -> Document:
        """Insert a document in the processing state."""
        ...

    async def get_document(self, document_id: uuid.UUID) -> Document:
        """Raises DocumentNotFoundError when missing."""
        ...

    async def update_document_status(
        self,
        document_id: uuid.UUID,
        status: DocumentStatus,
    ) -> Document:
        """
        Move a document to a new status.

        Raises:
            DocumentNotFoundError: No such document
            IllegalTransitionError: Current status cannot move to `status`
        """
        ...

    async def save_chunks(
        self,
        document_id: uuid.UUID,
        chunks: Sequence[Chunk],
    ) -> list[Chunk]:
        """Insert all chunks in one transaction; returns them with ids set."""
        ...

    async def count_chunks(self, document_id: uuid.UUID) -> int:
        ...

    async def list_chunks(self, document_id: uuid.UUID) -> list[Chunk]:
        """Chunks of a document ordered by index."""
        ...

    async def save_summary(self, document_id: uuid.UUID, summary: Summary) -> None:
        """Insert or replace the document summary."""
        ...

    async def get_summary(self, document_id: uuid.UUID) -> Summary:
        """Raises SummaryNotFoundError when missing."""
        ...

    async def save_embeddings(self, embeddings: Sequence[Embedding]) -> None:
        """Insert or replace embeddings in one transaction."""
        ...

    async def top_k(
        self,
        document_ids: Sequence[uuid.UUID],
        vector: Sequence[float],
        k: int,
    ) -> list[SearchResult]:
        """Chunks of the given documents most similar to `vector`, best first."""
        ...

    async def close(self) -> None:
        ...
