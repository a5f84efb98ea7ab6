"""
Document domain models and schemas.

Records produced by the ingestion pipeline plus the upload and summary
response contracts.

Dependencies: pydantic
System role: Document, chunk, summary and embedding contracts
"""

import enum
import uuid
from datetime import datetime

from pydantic import BaseModel, Field


class DocumentStatus(str, enum.Enum):
    """
    Document processing lifecycle states.

    PROCESSING: Uploaded; parse and analyze stages still running
    READY: Summary and every chunk embedding persisted
    FAILED: Parse task could not be enqueued at upload
    """

    PROCESSING = "processing"
    READY = "ready"
    FAILED = "failed"


class Document(BaseModel):
    """Uploaded document."""

    id: uuid.UUID
    filename: str
    status: DocumentStatus
    created_at: datetime


class Chunk(BaseModel):
    """Contiguous token window of a document."""

    id: uuid.UUID | None = None
    document_id: uuid.UUID | None = None
    index: int = Field(ge=0, description="0-based position within the document")
    text: str
    token_count: int = Field(ge=0)


class Summary(BaseModel):
    """Document-level summary produced by the analyze stage."""

    document_id: uuid.UUID | None = None
    summary: str = ""
    key_points: list[str] = Field(default_factory=list)


class Embedding(BaseModel):
    """Vector for one chunk."""

    chunk_id: uuid.UUID
    vector: list[float]
    model: str


class SearchResult(BaseModel):
    """Top-K hit: a chunk, its cosine similarity, and the parent summary."""

    chunk: Chunk
    score: float
    summary: str | None = None


class DocumentResponse(BaseModel):
    """Response schema for document lookup."""

    id: uuid.UUID
    filename: str
    status: DocumentStatus
    created_at: datetime


class UploadResult(BaseModel):
    """Response schema for an accepted upload."""

    document_id: uuid.UUID
    status: DocumentStatus


class SummaryResponse(BaseModel):
    """Response schema for summary lookup."""

    document_id: uuid.UUID
    summary: str
    key_points: list[str]
