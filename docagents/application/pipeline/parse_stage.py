"""
Parse stage handler.

Splits the uploaded text into chunks, persists them in one transaction
and hands the document to the analyze stage.

Dependencies: docagents.core.chunker, docagents.boundary.queue, docagents.boundary.db
System role: First stage of the document ingestion pipeline
"""

import logging

from docagents.boundary.db.store import DocumentStore
from docagents.boundary.queue.base import TaskQueue, enqueue_with_retry
from docagents.core.chunker import chunk_text
from docagents.models.document import DocumentStatus
from docagents.models.task import AnalyzeTaskPayload, ParseTaskPayload, Task, TaskType

logger = logging.getLogger(__name__)


class ParseStage:
    """Handle parse tasks."""

    def __init__(
        self,
        store: DocumentStore,
        queue: TaskQueue,
        chunk_max_tokens: int = 400,
        chunk_overlap: int = 80,
        enqueue_attempts: int = 3,
        enqueue_base_seconds: float = 0.2,
    ) -> None:
        self._store = store
        self._queue = queue
        self._chunk_max_tokens = chunk_max_tokens
        self._chunk_overlap = chunk_overlap
        self._enqueue_attempts = enqueue_attempts
        self._enqueue_base_seconds = enqueue_base_seconds

    async def handle(self, task: Task) -> None:
        """
        Chunk a document and enqueue its analyze task.

        Args:
            task: Parse task

        Raises:
            InvalidTaskError: Payload malformed
            EnqueueError: Analyze task could not be published
        """
        payload = task.decode_payload(ParseTaskPayload)
        document_id = payload.document_id

        document = await self._store.get_document(document_id)
        if document.status != DocumentStatus.PROCESSING:
            logger.warning(
                f"{__name__}:handle - Skipping document not in processing state",
                extra={"document_id": str(document_id), "status": document.status.value},
            )
            return

        existing = await self._store.count_chunks(document_id)
        if existing:
            # Redelivered parse task: a second batch of chunks is stored
            # alongside the first; nothing deduplicates it.
            logger.warning(
                f"{__name__}:handle - Document already has chunks, storing duplicate batch",
                extra={
                    "document_id": str(document_id),
                    "existing_chunks": existing,
                    "task_id": str(task.id),
                    "attempts": task.attempts,
                },
            )

        chunks = chunk_text(
            payload.content,
            max_tokens=self._chunk_max_tokens,
            overlap=self._chunk_overlap,
        )
        saved = await self._store.save_chunks(document_id, chunks)
        logger.info(
            f"{__name__}:handle - Chunks saved",
            extra={"document_id": str(document_id), "chunks": len(saved)},
        )

        analyze_task = Task.for_payload(
            TaskType.ANALYZE,
            AnalyzeTaskPayload(
                document_id=document_id,
                chunk_ids=[chunk.id for chunk in saved],
            ),
        )
        await enqueue_with_retry(
            self._queue,
            analyze_task,
            attempts=self._enqueue_attempts,
            base=self._enqueue_base_seconds,
        )
