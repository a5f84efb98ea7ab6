"""
Test suite for the document service.

System role: Verification of upload validation, enqueue and failure marking
"""

import uuid
from unittest.mock import AsyncMock

import pytest

from docagents.application.services.document_service import DocumentService
from docagents.boundary.db.memory_store import InMemoryStore
from docagents.boundary.queue.memory import InMemoryTaskQueue
from docagents.core.exceptions import (
    DocumentNotFoundError,
    EnqueueError,
    SummaryNotFoundError,
    ValidationError,
)
from docagents.models.document import DocumentStatus, Summary
from docagents.models.task import ParseTaskPayload, TaskType


@pytest.fixture
def service(store: InMemoryStore, queue: InMemoryTaskQueue) -> DocumentService:
    return DocumentService(store, queue, max_upload_size=1024, enqueue_base_seconds=0.001)


class TestUpload:
    """Test suite for DocumentService.upload."""

    @pytest.mark.asyncio
    async def test_upload_creates_document_and_enqueues_parse(
        self, service: DocumentService, store: InMemoryStore, queue: InMemoryTaskQueue
    ) -> None:
        result = await service.upload("notes.txt", b"hello world", "text/plain")

        assert result.status == DocumentStatus.PROCESSING
        assert (await store.get_document(result.document_id)).filename == "notes.txt"
        assert queue.pending(TaskType.PARSE) == 1
        payload = queue.published[0].decode_payload(ParseTaskPayload)
        assert payload == ParseTaskPayload(
            document_id=result.document_id, filename="notes.txt", content="hello world"
        )

    @pytest.mark.asyncio
    async def test_content_type_inferred_from_extension(
        self, service: DocumentService, queue: InMemoryTaskQueue
    ) -> None:
        await service.upload("notes.txt", b"text", None)

        assert queue.pending(TaskType.PARSE) == 1

    @pytest.mark.asyncio
    async def test_oversized_upload_rejected(self, service: DocumentService, store) -> None:
        with pytest.raises(ValidationError, match="file too large"):
            await service.upload("big.txt", b"x" * 1025, "text/plain")

        assert store.documents == {}

    @pytest.mark.asyncio
    async def test_unsupported_type_rejected(self, service: DocumentService) -> None:
        with pytest.raises(ValidationError) as exc_info:
            await service.upload("photo.png", b"\x89PNG", "image/png")

        assert exc_info.value.field == "file"

    @pytest.mark.asyncio
    async def test_declared_type_wins_over_extension(
        self, service: DocumentService, store: InMemoryStore
    ) -> None:
        with pytest.raises(ValidationError, match="unsupported file type"):
            await service.upload("notes.txt", b"text", "image/png")

        assert store.documents == {}

    @pytest.mark.asyncio
    async def test_missing_filename_rejected(self, service: DocumentService) -> None:
        with pytest.raises(ValidationError):
            await service.upload("", b"text", "text/plain")

    @pytest.mark.asyncio
    async def test_enqueue_failure_marks_document_failed(self, store: InMemoryStore) -> None:
        failing_queue = AsyncMock()
        failing_queue.enqueue.side_effect = EnqueueError("broker down")
        service = DocumentService(store, failing_queue, enqueue_base_seconds=0.001)

        with pytest.raises(EnqueueError) as exc_info:
            await service.upload("notes.txt", b"hello", "text/plain")

        assert exc_info.value.message == "failed to enqueue document; please retry"
        assert failing_queue.enqueue.await_count == 3
        (document,) = store.documents.values()
        assert document.status == DocumentStatus.FAILED


class TestLookups:
    """Test suite for document and summary lookups."""

    @pytest.mark.asyncio
    async def test_get_summary_returns_saved_summary(
        self, service: DocumentService, store: InMemoryStore
    ) -> None:
        document = await store.create_document("a.txt")
        await store.save_summary(document.id, Summary(summary="s", key_points=["k"]))

        summary = await service.get_summary(document.id)

        assert summary.summary == "s"

    @pytest.mark.asyncio
    async def test_get_summary_before_analysis_raises(self, service: DocumentService) -> None:
        with pytest.raises(SummaryNotFoundError):
            await service.get_summary(uuid.uuid4())

    @pytest.mark.asyncio
    async def test_get_document_missing_raises(self, service: DocumentService) -> None:
        with pytest.raises(DocumentNotFoundError):
            await service.get_document(uuid.uuid4())
