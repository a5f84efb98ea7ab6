"""
Ingestion pipeline configuration settings.

Dependencies: pydantic, pydantic_settings
System role: Upload limits and chunking parameters
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from docagents.configs.base import BaseSettings


class PipelineSettings(BaseSettings):
    """Upload and chunking configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="PIPELINE_",
        case_sensitive=False,
        extra="ignore",
    )

    chunk_max_tokens: int = Field(default=400, description="Tokens per chunk window")
    chunk_overlap: int = Field(default=80, description="Tokens shared by adjacent chunks")
    max_upload_size: int = Field(
        default=10 * 1024 * 1024,
        description="Maximum upload size in bytes",
    )
