"""
Document service.

Accepts uploads, creates the document record and enqueues the parse task.
If the parse task cannot be published the document is marked failed,
since no stage will ever pick it up.

Dependencies: docagents.boundary.db, docagents.boundary.queue, docagents.boundary.extraction
System role: Upload trigger and document lookups
"""

import logging
import uuid

from docagents.boundary.db.store import DocumentStore
from docagents.boundary.extraction import TextExtractor, resolve_content_type
from docagents.boundary.queue.base import TaskQueue, enqueue_with_retry
from docagents.core.exceptions import EnqueueError, ValidationError
from docagents.models.document import (
    Document,
    DocumentStatus,
    Summary,
    UploadResult,
)
from docagents.models.task import ParseTaskPayload, Task, TaskType
from docagents.observability.log_utils import log_exception_with_context

logger = logging.getLogger(__name__)

DEFAULT_MAX_UPLOAD_SIZE = 10 * 1024 * 1024


class DocumentService:
    """Upload and lookup operations on documents."""

    def __init__(
        self,
        store: DocumentStore,
        queue: TaskQueue,
        extractor: TextExtractor | None = None,
        max_upload_size: int = DEFAULT_MAX_UPLOAD_SIZE,
        enqueue_attempts: int = 3,
        enqueue_base_seconds: float = 0.2,
    ) -> None:
        self._store = store
        self._queue = queue
        self._extractor = extractor or TextExtractor()
        self._max_upload_size = max_upload_size
        self._enqueue_attempts = enqueue_attempts
        self._enqueue_base_seconds = enqueue_base_seconds

    async def upload(
        self,
        filename: str,
        content: bytes,
        content_type: str | None = None,
    ) -> UploadResult:
        """
        Register an upload and start the pipeline.

        Args:
            filename: Original filename
            content: Raw upload bytes
            content_type: Declared MIME type, if any

        Returns:
            UploadResult: New document id and its processing status

        Raises:
            ValidationError: Missing filename, oversized or unsupported upload
            EnqueueError: Parse task could not be published; document marked failed
        """
        if not filename:
            raise ValidationError("filename required", field="file")
        if len(content) > self._max_upload_size:
            raise ValidationError(
                "file too large",
                field="file",
                details={"size": len(content), "max_size": self._max_upload_size},
            )
        resolved_type = resolve_content_type(filename, content_type)
        if resolved_type is None:
            raise ValidationError(
                "unsupported file type; only txt and pdf are accepted",
                field="file",
                details={"content_type": content_type or ""},
            )

        text = self._extractor.extract(content, resolved_type)
        document = await self._store.create_document(filename)

        task = Task.for_payload(
            TaskType.PARSE,
            ParseTaskPayload(document_id=document.id, filename=filename, content=text),
        )
        try:
            await enqueue_with_retry(
                self._queue,
                task,
                attempts=self._enqueue_attempts,
                base=self._enqueue_base_seconds,
            )
        except Exception as e:
            log_exception_with_context(
                logger,
                f"{__name__}:upload - Failed to enqueue parse task",
                e,
                document_id=str(document.id),
            )
            await self._mark_failed(document.id)
            raise EnqueueError(
                "failed to enqueue document; please retry",
                {"document_id": str(document.id)},
            ) from e

        logger.info(
            f"{__name__}:upload - Document accepted",
            extra={
                "document_id": str(document.id),
                "document_filename": filename,
                "size": len(content),
            },
        )
        return UploadResult(document_id=document.id, status=document.status)

    async def _mark_failed(self, document_id: uuid.UUID) -> None:
        try:
            await self._store.update_document_status(document_id, DocumentStatus.FAILED)
        except Exception as e:
            # Original enqueue error is the one reported to the caller
            log_exception_with_context(
                logger,
                f"{__name__}:_mark_failed - Failed to mark document failed",
                e,
                document_id=str(document_id),
            )

    async def get_document(self, document_id: uuid.UUID) -> Document:
        """Raises DocumentNotFoundError when missing."""
        return await self._store.get_document(document_id)

    async def get_summary(self, document_id: uuid.UUID) -> Summary:
        """Raises SummaryNotFoundError until the analyze stage saved one."""
        return await self._store.get_summary(document_id)
