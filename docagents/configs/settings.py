"""
Unified application settings.

Aggregates all configuration modules into a single Settings class.

Dependencies: All config modules
System role: Central configuration aggregator for the application
"""

from typing import Literal

from pydantic import Field

from docagents.configs.base import BaseSettings
from docagents.configs.database import DatabaseSettings
from docagents.configs.llm import LLMSettings
from docagents.configs.pipeline import PipelineSettings
from docagents.configs.query import QuerySettings
from docagents.configs.queue import QueueSettings
from docagents.configs.redis import RedisSettings


class Settings(BaseSettings):
    """Unified application settings aggregating all config modules."""

    store_provider: Literal["postgres", "memory"] = Field(
        default="postgres",
        description="Document store backend",
    )
    api_host: str = Field(default="0.0.0.0", description="API bind host")
    api_port: int = Field(default=8080, description="API bind port")

    # Aggregated settings
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    redis: RedisSettings = Field(default_factory=RedisSettings)
    queue: QueueSettings = Field(default_factory=QueueSettings)
    llm: LLMSettings = Field(default_factory=LLMSettings)
    pipeline: PipelineSettings = Field(default_factory=PipelineSettings)
    query: QuerySettings = Field(default_factory=QuerySettings)


def load_settings() -> Settings:
    """
    Build application settings from the environment.

    Called once per process by entry points; the result is handed to
    build_deps() and passed explicitly from there on.

    Returns:
        Settings: Application settings instance
    """
    return Settings()
