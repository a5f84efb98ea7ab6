"""
Model provider contracts.

Dependencies: None
System role: Embedding and generation interfaces used by stages and queries
"""

from collections.abc import Sequence
from typing import Protocol


class Embedder(Protocol):
    """Turns text into fixed-dimension vectors."""

    async def embed(self, text: str) -> list[float]:
        ...

    async def embed_batch(self, texts: Sequence[str]) -> list[list[float]]:
        """One vector per input, in input order; EmbeddingError otherwise."""
        ...


class Generator(Protocol):
    """Chat model used for summaries and answers."""

    async def summarize(self, text: str) -> tuple[str, list[str]]:
        """Return (summary paragraph, key points)."""
        ...

    async def answer(
        self,
        question: str,
        context: str,
        context_quality: float,
    ) -> tuple[str, float]:
        """Return (answer, blended confidence)."""
        ...
