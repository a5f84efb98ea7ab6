"""
FastAPI application with assembled routers.

Builds the dependency container on startup, stores it on app.state and
closes it on shutdown.

Dependencies: fastapi, uvicorn, python-dotenv, docagents.api.routers
System role: API entry point with router assembly and server launch
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI

from docagents.configs import Settings, load_settings
from docagents.dependencies import Deps, build_deps
from docagents.observability.logger import configure_logging

from .routers import documents_router, health_router, query_router

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None, deps: Deps | None = None) -> FastAPI:
    """
    Create and configure FastAPI application with routers.

    Args:
        settings: Settings used to build dependencies at startup
        deps: Prebuilt dependency container; not closed on shutdown

    Returns:
        FastAPI: Configured application instance
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if deps is not None:
            app.state.deps = deps
            yield
            return

        app.state.deps = await build_deps(settings or load_settings())
        logger.info(f"{__name__}:lifespan - Dependencies initialized")
        try:
            yield
        finally:
            await app.state.deps.aclose()
            logger.info(f"{__name__}:lifespan - Dependencies closed")

    app = FastAPI(
        title="Doc Agents API",
        description="Document ingestion and retrieval-augmented question answering",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.include_router(health_router)
    app.include_router(documents_router, prefix="/api")
    app.include_router(query_router, prefix="/api")

    return app


def main() -> None:
    """Run the API server."""
    load_dotenv()
    settings = load_settings()
    configure_logging(settings.log_level)
    uvicorn.run(
        create_app(settings),
        host=settings.api_host,
        port=settings.api_port,
    )


if __name__ == "__main__":
    main()
