"""Application services behind the HTTP API."""

from docagents.application.services.document_service import DocumentService
from docagents.application.services.query_service import QueryService

__all__ = ["DocumentService", "QueryService"]
