"""
Query domain models and schemas.

Dependencies: pydantic
System role: Query API contracts and cached result shape
"""

import uuid

from pydantic import BaseModel, Field, field_validator

MIN_TOP_K = 1
MAX_TOP_K = 20
DEFAULT_TOP_K = 5


class QueryRequest(BaseModel):
    """Request schema for a question over one or more documents."""

    question: str = Field(min_length=3, max_length=500)
    document_ids: list[uuid.UUID] = Field(min_length=1)
    top_k: int = Field(default=DEFAULT_TOP_K, ge=MIN_TOP_K, le=MAX_TOP_K)

    @field_validator("top_k", mode="before")
    @classmethod
    def default_unset_top_k(cls, value):
        """Treat a missing or zero top_k as the default."""
        if value is None or value == 0:
            return DEFAULT_TOP_K
        return value


class SourceItem(BaseModel):
    """Chunk that backed an answer."""

    chunk_id: uuid.UUID
    score: float
    preview: str


class QueryResponse(BaseModel):
    """Response schema for a query."""

    answer: str
    sources: list[SourceItem]
    confidence: float
    cached: bool = False


class CachedQueryResult(BaseModel):
    """
    Value stored in the query cache.

    Sources are kept as a serialized JSON string so a malformed entry can be
    detected on read without failing the whole cache lookup.
    """

    answer: str
    confidence: float
    sources: str = "[]"
