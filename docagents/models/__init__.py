"""Domain models shared across layers."""

from docagents.models.document import (
    Chunk,
    Document,
    DocumentResponse,
    DocumentStatus,
    Embedding,
    SearchResult,
    Summary,
    SummaryResponse,
    UploadResult,
)
from docagents.models.query import (
    CachedQueryResult,
    QueryRequest,
    QueryResponse,
    SourceItem,
)
from docagents.models.task import (
    AnalyzeTaskPayload,
    ParseTaskPayload,
    Task,
    TaskType,
)

__all__ = [
    "AnalyzeTaskPayload",
    "CachedQueryResult",
    "Chunk",
    "Document",
    "DocumentResponse",
    "DocumentStatus",
    "Embedding",
    "ParseTaskPayload",
    "QueryRequest",
    "QueryResponse",
    "SearchResult",
    "SourceItem",
    "Summary",
    "SummaryResponse",
    "Task",
    "TaskType",
    "UploadResult",
]
