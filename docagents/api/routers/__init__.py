"""API routers."""

from .documents import router as documents_router
from .health import router as health_router
from .query import router as query_router

__all__ = ["documents_router", "health_router", "query_router"]
