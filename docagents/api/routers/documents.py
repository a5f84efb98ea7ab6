"""
Document API endpoints.

Routes: POST /documents/upload, GET /documents/{id}, GET /documents/{id}/summary

Dependencies: fastapi, python-multipart, docagents.application.services
System role: Document HTTP API
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status

from docagents.api.deps import get_document_service
from docagents.application.services import DocumentService
from docagents.core.exceptions import (
    DocumentNotFoundError,
    EnqueueError,
    SummaryNotFoundError,
    ValidationError,
)
from docagents.models.document import DocumentResponse, SummaryResponse, UploadResult

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/documents", tags=["documents"])


@router.post(
    "/upload",
    response_model=UploadResult,
    status_code=status.HTTP_202_ACCEPTED,
)
async def upload_document(
    file: UploadFile = File(...),
    document_service: DocumentService = Depends(get_document_service),
) -> UploadResult:
    """
    Upload a txt or pdf document and start processing.

    Raises:
        HTTPException(400): Invalid, oversized or unsupported file
        HTTPException(500): Parse task could not be enqueued
    """
    content = await file.read()
    try:
        return await document_service.upload(
            filename=file.filename or "",
            content=content,
            content_type=file.content_type,
        )
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=e.message)
    except EnqueueError as e:
        raise HTTPException(status_code=500, detail=e.message)


@router.get("/{document_id}", response_model=DocumentResponse)
async def get_document(
    document_id: UUID,
    document_service: DocumentService = Depends(get_document_service),
) -> DocumentResponse:
    """
    Get document status.

    Raises:
        HTTPException(404): Document not found
    """
    try:
        document = await document_service.get_document(document_id)
    except DocumentNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    return DocumentResponse(**document.model_dump())


@router.get("/{document_id}/summary", response_model=SummaryResponse)
async def get_summary(
    document_id: UUID,
    document_service: DocumentService = Depends(get_document_service),
) -> SummaryResponse:
    """
    Get document summary and key points.

    Raises:
        HTTPException(404): Summary not ready
    """
    try:
        summary = await document_service.get_summary(document_id)
    except SummaryNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    return SummaryResponse(
        document_id=document_id,
        summary=summary.summary,
        key_points=summary.key_points,
    )
