"""
Bedrock embedding adapter using Amazon Titan Embeddings v2.

Inputs are cleaned of control characters and runs of whitespace before
being sent; returned vectors are L2-normalized so cosine distance in
pgvector behaves like a dot product.

Dependencies: langchain_aws, docagents.configs
System role: Embedding generation adapter
"""

import logging
import math
import re
from collections.abc import Sequence

from langchain_aws import BedrockEmbeddings

from docagents.configs.llm import LLMSettings
from docagents.core.exceptions import EmbeddingError

logger = logging.getLogger(__name__)

_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0B-\x0C\x0E-\x1F\x7F]")
_WHITESPACE = re.compile(r"\s+")


def preprocess_text(text: str) -> str:
    """Strip control characters and collapse whitespace to single spaces."""
    text = _CONTROL_CHARS.sub("", text)
    return _WHITESPACE.sub(" ", text.strip())


def l2_normalize(vector: Sequence[float]) -> list[float]:
    """Scale a vector to unit length; zero vectors are returned unchanged."""
    magnitude = math.sqrt(sum(v * v for v in vector))
    if magnitude == 0:
        return list(vector)
    return [v / magnitude for v in vector]


class BedrockEmbedder:
    """Embedder backed by Bedrock embedding models."""

    def __init__(
        self,
        settings: LLMSettings,
        embeddings: BedrockEmbeddings | None = None,
    ) -> None:
        """
        Initialize the embeddings client.

        Args:
            settings: LLM settings (embedding model, region)
            embeddings: Preconfigured client, mainly for tests
        """
        self.model_name = settings.embedding_model
        # Credentials come from the environment or the instance IAM role
        self._embeddings = embeddings or BedrockEmbeddings(
            model_id=settings.embedding_model,
            region_name=settings.region,
            model_kwargs={"dimensions": settings.embedding_dimension},
        )

    async def embed(self, text: str) -> list[float]:
        """
        Embed a single text.

        Raises:
            EmbeddingError: Provider call failed
        """
        try:
            vector = await self._embeddings.aembed_query(preprocess_text(text))
        except Exception as e:
            raise EmbeddingError(
                "embedding request failed",
                {"model": self.model_name, "error": str(e)},
            ) from e
        return l2_normalize(vector)

    async def embed_batch(self, texts: Sequence[str]) -> list[list[float]]:
        """
        Embed texts in one call.

        Raises:
            EmbeddingError: Provider call failed or returned a different count
        """
        if not texts:
            return []

        try:
            vectors = await self._embeddings.aembed_documents(
                [preprocess_text(text) for text in texts]
            )
        except Exception as e:
            raise EmbeddingError(
                "batch embedding request failed",
                {"model": self.model_name, "count": len(texts), "error": str(e)},
            ) from e

        if len(vectors) != len(texts):
            raise EmbeddingError(
                "embedding count mismatch",
                {"expected": len(texts), "received": len(vectors)},
            )

        logger.debug(
            f"{__name__}:embed_batch - Embedded batch",
            extra={"count": len(texts), "model": self.model_name},
        )
        return [l2_normalize(vector) for vector in vectors]
