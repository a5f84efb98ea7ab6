"""Embedding and chat model adapters."""

from docagents.boundary.llm.base import Embedder, Generator
from docagents.boundary.llm.bedrock_embedder import BedrockEmbedder
from docagents.boundary.llm.bedrock_generator import BedrockGenerator

__all__ = ["BedrockEmbedder", "BedrockGenerator", "Embedder", "Generator"]
