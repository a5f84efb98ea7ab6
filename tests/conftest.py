"""
Shared test fixtures and configuration for entire test suite.

Provides: in-memory store and queue, deterministic fake embedder and
generator, settings wired to the in-memory providers
Dependencies: pytest
System role: Test infrastructure and fixture management
"""

import hashlib
import math
from collections.abc import Sequence

import pytest

from docagents.boundary.cache.noop import NoOpQueryCache
from docagents.boundary.db.memory_store import InMemoryStore
from docagents.boundary.queue.memory import InMemoryTaskQueue
from docagents.configs import Settings
from docagents.configs.queue import QueueSettings
from docagents.configs.query import QuerySettings

VECTOR_DIM = 16


class FakeEmbedder:
    """Hashes each token into a bucket; identical texts give identical vectors."""

    def __init__(self) -> None:
        self.embed_calls: list[str] = []
        self.batch_calls: list[list[str]] = []

    @staticmethod
    def vectorize(text: str) -> list[float]:
        vector = [0.0] * VECTOR_DIM
        for token in text.lower().split():
            bucket = int(hashlib.md5(token.encode()).hexdigest(), 16) % VECTOR_DIM
            vector[bucket] += 1.0
        norm = math.sqrt(sum(v * v for v in vector)) or 1.0
        return [v / norm for v in vector]

    async def embed(self, text: str) -> list[float]:
        self.embed_calls.append(text)
        return self.vectorize(text)

    async def embed_batch(self, texts: Sequence[str]) -> list[list[float]]:
        self.batch_calls.append(list(texts))
        return [self.vectorize(text) for text in texts]


class FakeGenerator:
    """Returns canned summaries and answers, recording every call."""

    def __init__(self, generation_confidence: float = 1.0) -> None:
        self.generation_confidence = generation_confidence
        self.summarize_calls: list[str] = []
        self.answer_calls: list[tuple[str, str, float]] = []

    async def summarize(self, text: str) -> tuple[str, list[str]]:
        self.summarize_calls.append(text)
        return f"Summary of {len(text.split())} words", ["first point", "second point"]

    async def answer(
        self,
        question: str,
        context: str,
        context_quality: float,
    ) -> tuple[str, float]:
        self.answer_calls.append((question, context, context_quality))
        return f"Answer to: {question}", context_quality * self.generation_confidence


@pytest.fixture
def store() -> InMemoryStore:
    """Provide empty in-memory document store."""
    return InMemoryStore()


@pytest.fixture
def queue() -> InMemoryTaskQueue:
    """Provide in-memory queue with millisecond backoff."""
    return InMemoryTaskQueue(retry_base_seconds=0.001, poll_interval=0.01)


@pytest.fixture
def embedder() -> FakeEmbedder:
    return FakeEmbedder()


@pytest.fixture
def generator() -> FakeGenerator:
    return FakeGenerator()


@pytest.fixture
def cache() -> NoOpQueryCache:
    return NoOpQueryCache()


@pytest.fixture
def settings() -> Settings:
    """Provide settings using in-memory providers and fast retries."""
    return Settings(
        store_provider="memory",
        queue=QueueSettings(
            provider="memory",
            retry_base_seconds=0.001,
            enqueue_base_seconds=0.001,
        ),
        query=QuerySettings(cache_enabled=False),
    )
