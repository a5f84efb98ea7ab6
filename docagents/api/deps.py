"""
FastAPI dependencies.

Services are built from the Deps container stored on app.state by the
lifespan handler; tests override these functions directly.

Dependencies: fastapi, docagents.dependencies
System role: Request-scoped service injection
"""

from fastapi import Request

from docagents.application.services import DocumentService, QueryService
from docagents.dependencies import Deps


def get_deps(request: Request) -> Deps:
    """Return the process-wide dependency container."""
    return request.app.state.deps


def get_document_service(request: Request) -> DocumentService:
    """Get document service instance."""
    return get_deps(request).document_service()


def get_query_service(request: Request) -> QueryService:
    """Get query service instance."""
    return get_deps(request).query_service()
