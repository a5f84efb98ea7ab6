"""
LLM provider configuration settings.

Embeddings and chat completions are served by Amazon Bedrock.

Dependencies: pydantic, pydantic_settings
System role: Embedding and chat model configuration
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from docagents.configs.base import BaseSettings


class LLMSettings(BaseSettings):
    """Embedding and generation model configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="LLM_",
        case_sensitive=False,
        extra="ignore",
    )

    provider: Literal["bedrock"] = Field(default="bedrock", description="LLM provider")
    region: str = Field(default="us-east-1", description="AWS region for Bedrock")
    model: str = Field(
        default="global.anthropic.claude-haiku-4-5-20251001-v1:0",
        description="Bedrock chat model for summaries and answers",
    )
    embedding_model: str = Field(
        default="amazon.titan-embed-text-v2:0",
        description="Bedrock embedding model ID (stored alongside every vector)",
    )
    embedding_dimension: int = Field(default=1024, description="Embedding vector dimension")
    temperature: float = Field(default=0.2, description="Sampling temperature")
    max_tokens: int = Field(default=1024, description="Maximum tokens per completion")
