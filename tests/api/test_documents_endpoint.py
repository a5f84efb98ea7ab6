"""
Test suite for document API endpoints.

Tests upload, status and summary routes with FastAPI TestClient and a
mocked DocumentService.

System role: Verification of document HTTP API
"""

import uuid
from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from docagents.api.deps import get_document_service
from docagents.api.routers.documents import router
from docagents.core.exceptions import (
    DocumentNotFoundError,
    EnqueueError,
    SummaryNotFoundError,
    ValidationError,
)
from docagents.models.document import Document, DocumentStatus, Summary, UploadResult


@pytest.fixture
def document_service() -> AsyncMock:
    """Provide mocked document service."""
    return AsyncMock()


@pytest.fixture
def client(document_service: AsyncMock) -> TestClient:
    """Provide TestClient with the documents router and mocked service."""
    app = FastAPI()
    app.include_router(router, prefix="/api")
    app.dependency_overrides[get_document_service] = lambda: document_service
    return TestClient(app)


class TestUploadEndpoint:
    """Test suite for POST /api/documents/upload."""

    def test_upload_returns_202_with_document_id(
        self, client: TestClient, document_service: AsyncMock
    ) -> None:
        document_id = uuid.uuid4()
        document_service.upload.return_value = UploadResult(
            document_id=document_id, status=DocumentStatus.PROCESSING
        )

        response = client.post(
            "/api/documents/upload",
            files={"file": ("notes.txt", b"hello world", "text/plain")},
        )

        assert response.status_code == 202
        assert response.json() == {"document_id": str(document_id), "status": "processing"}
        document_service.upload.assert_awaited_once_with(
            filename="notes.txt", content=b"hello world", content_type="text/plain"
        )

    def test_validation_error_returns_400(
        self, client: TestClient, document_service: AsyncMock
    ) -> None:
        document_service.upload.side_effect = ValidationError("file too large", field="file")

        response = client.post(
            "/api/documents/upload",
            files={"file": ("big.txt", b"x", "text/plain")},
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "file too large"

    def test_enqueue_error_returns_500(
        self, client: TestClient, document_service: AsyncMock
    ) -> None:
        document_service.upload.side_effect = EnqueueError(
            "failed to enqueue document; please retry"
        )

        response = client.post(
            "/api/documents/upload",
            files={"file": ("notes.txt", b"x", "text/plain")},
        )

        assert response.status_code == 500
        assert response.json()["detail"] == "failed to enqueue document; please retry"

    def test_missing_file_returns_422(self, client: TestClient) -> None:
        response = client.post("/api/documents/upload")

        assert response.status_code == 422


class TestLookupEndpoints:
    """Test suite for GET document and summary routes."""

    def test_get_document_returns_status(
        self, client: TestClient, document_service: AsyncMock
    ) -> None:
        document_id = uuid.uuid4()
        document_service.get_document.return_value = Document(
            id=document_id,
            filename="a.txt",
            status=DocumentStatus.READY,
            created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
        )

        response = client.get(f"/api/documents/{document_id}")

        assert response.status_code == 200
        assert response.json()["status"] == "ready"

    def test_get_missing_document_returns_404(
        self, client: TestClient, document_service: AsyncMock
    ) -> None:
        document_id = uuid.uuid4()
        document_service.get_document.side_effect = DocumentNotFoundError(str(document_id))

        response = client.get(f"/api/documents/{document_id}")

        assert response.status_code == 404

    def test_get_summary_returns_summary_and_key_points(
        self, client: TestClient, document_service: AsyncMock
    ) -> None:
        document_id = uuid.uuid4()
        document_service.get_summary.return_value = Summary(
            document_id=document_id, summary="About caching.", key_points=["ttl", "keys"]
        )

        response = client.get(f"/api/documents/{document_id}/summary")

        assert response.status_code == 200
        assert response.json() == {
            "document_id": str(document_id),
            "summary": "About caching.",
            "key_points": ["ttl", "keys"],
        }

    def test_summary_not_ready_returns_404(
        self, client: TestClient, document_service: AsyncMock
    ) -> None:
        document_id = uuid.uuid4()
        document_service.get_summary.side_effect = SummaryNotFoundError(str(document_id))

        response = client.get(f"/api/documents/{document_id}/summary")

        assert response.status_code == 404
        assert response.json()["detail"] == "summary not ready"
