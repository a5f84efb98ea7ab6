"""
Dependency container.

Every process (API, parser worker, analysis worker) builds one Deps from
settings at startup and passes it explicitly to the components it runs.
Providers are selected here: postgres or in-memory store, Redis Streams or
in-memory queue, Redis or no-op cache.

Dependencies: docagents.configs, docagents.boundary, docagents.application
System role: Composition root
"""

import logging
from dataclasses import dataclass

from redis.asyncio import Redis

from docagents.application.pipeline import AnalyzeStage, ParseStage
from docagents.application.services import DocumentService, QueryService
from docagents.boundary.cache import QueryCache, connect_query_cache
from docagents.boundary.db import DocumentStore, InMemoryStore, PostgresStore
from docagents.boundary.db.connection import (
    build_async_engine,
    build_session_factory,
    create_tables,
)
from docagents.boundary.llm import BedrockEmbedder, BedrockGenerator, Embedder, Generator
from docagents.boundary.queue import InMemoryTaskQueue, RedisStreamQueue, TaskQueue
from docagents.configs import Settings
from docagents.observability.log_utils import log_exception_with_context

logger = logging.getLogger(__name__)


@dataclass
class Deps:
    """Collaborators shared by the components of one process."""

    settings: Settings
    store: DocumentStore
    queue: TaskQueue
    cache: QueryCache
    embedder: Embedder
    generator: Generator

    def document_service(self) -> DocumentService:
        return DocumentService(
            store=self.store,
            queue=self.queue,
            max_upload_size=self.settings.pipeline.max_upload_size,
            enqueue_attempts=self.settings.queue.enqueue_attempts,
            enqueue_base_seconds=self.settings.queue.enqueue_base_seconds,
        )

    def query_service(self) -> QueryService:
        return QueryService(
            store=self.store,
            embedder=self.embedder,
            generator=self.generator,
            cache=self.cache,
            cache_ttl_seconds=self.settings.query.cache_ttl_seconds,
            preview_chars=self.settings.query.preview_chars,
        )

    def parse_stage(self) -> ParseStage:
        return ParseStage(
            store=self.store,
            queue=self.queue,
            chunk_max_tokens=self.settings.pipeline.chunk_max_tokens,
            chunk_overlap=self.settings.pipeline.chunk_overlap,
            enqueue_attempts=self.settings.queue.enqueue_attempts,
            enqueue_base_seconds=self.settings.queue.enqueue_base_seconds,
        )

    def analyze_stage(self) -> AnalyzeStage:
        return AnalyzeStage(
            store=self.store,
            embedder=self.embedder,
            generator=self.generator,
            cache=self.cache,
            embedding_model=self.settings.llm.embedding_model,
        )

    async def aclose(self) -> None:
        """Close queue, cache and store, logging individual failures."""
        for name, resource in (
            ("queue", self.queue),
            ("cache", self.cache),
            ("store", self.store),
        ):
            try:
                await resource.close()
            except Exception as e:
                log_exception_with_context(
                    logger,
                    f"{__name__}:aclose - Failed to close {name}",
                    e,
                    level=logging.WARNING,
                )


async def build_store(settings: Settings) -> DocumentStore:
    """Create the configured document store, creating tables for postgres."""
    if settings.store_provider == "memory":
        logger.info(f"{__name__}:build_store - Using in-memory store")
        return InMemoryStore()

    engine = build_async_engine(settings.database)
    await create_tables(engine)
    return PostgresStore(build_session_factory(engine), engine=engine)


def build_queue(settings: Settings) -> TaskQueue:
    """Create the configured task queue."""
    queue_settings = settings.queue
    if queue_settings.provider == "memory":
        logger.info(f"{__name__}:build_queue - Using in-memory queue")
        return InMemoryTaskQueue(
            retry_base_seconds=queue_settings.retry_base_seconds,
            concurrency=queue_settings.concurrency,
        )

    client = Redis.from_url(
        settings.redis.redis_url,
        decode_responses=True,
        socket_timeout=None,
        socket_connect_timeout=settings.redis.socket_timeout,
    )
    return RedisStreamQueue(
        client,
        retry_base_seconds=queue_settings.retry_base_seconds,
        concurrency=queue_settings.concurrency,
        block_ms=queue_settings.block_ms,
        claim_idle_ms=queue_settings.claim_idle_ms,
    )


async def build_deps(
    settings: Settings,
    *,
    store: DocumentStore | None = None,
    queue: TaskQueue | None = None,
    cache: QueryCache | None = None,
    embedder: Embedder | None = None,
    generator: Generator | None = None,
) -> Deps:
    """
    Build the dependency container.

    Keyword overrides replace the configured provider, mainly for tests.

    Args:
        settings: Application settings

    Returns:
        Deps: Fully wired container
    """
    deps = Deps(
        settings=settings,
        store=store or await build_store(settings),
        queue=queue or build_queue(settings),
        cache=cache or await connect_query_cache(
            settings.redis, enabled=settings.query.cache_enabled
        ),
        embedder=embedder or BedrockEmbedder(settings.llm),
        generator=generator or BedrockGenerator(settings.llm),
    )
    logger.info(
        f"{__name__}:build_deps - Dependencies ready",
        extra={
            "store": type(deps.store).__name__,
            "queue": type(deps.queue).__name__,
            "cache": type(deps.cache).__name__,
        },
    )
    return deps
