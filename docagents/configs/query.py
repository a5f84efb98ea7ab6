"""
Query path configuration settings.

Dependencies: pydantic, pydantic_settings
System role: Query cache and response shaping configuration
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from docagents.configs.base import BaseSettings


class QuerySettings(BaseSettings):
    """Query orchestration configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="QUERY_",
        case_sensitive=False,
        extra="ignore",
    )

    cache_enabled: bool = Field(default=True, description="Use the Redis query cache")
    cache_ttl_seconds: int = Field(default=3600, description="Cached answer lifetime")
    preview_chars: int = Field(default=150, description="Source preview length")
