"""
Task queue configuration settings.

Controls the queue transport, delivery concurrency, and the retry
parameters of both server-side redelivery and client-side publishing.

Dependencies: pydantic, pydantic_settings
System role: Task queue configuration
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from docagents.configs.base import BaseSettings


class QueueSettings(BaseSettings):
    """Task queue configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="QUEUE_",
        case_sensitive=False,
        extra="ignore",
    )

    provider: Literal["redis", "memory"] = Field(
        default="redis",
        description="Queue transport (redis streams or in-process memory)",
    )
    concurrency: int = Field(
        default=8,
        ge=1,
        description="Maximum deliveries handled concurrently per worker",
    )
    max_attempts: int = Field(
        default=5,
        ge=0,
        description="Default delivery attempts per task (0 means 5)",
    )
    retry_base_seconds: float = Field(
        default=1.0,
        gt=0,
        description="Base delay for redelivery backoff",
    )
    enqueue_attempts: int = Field(
        default=3,
        description="Publish attempts used by enqueue_with_retry",
    )
    enqueue_base_seconds: float = Field(
        default=0.2,
        gt=0,
        description="Base delay between publish attempts",
    )
    block_ms: int = Field(
        default=1000,
        description="XREADGROUP block timeout in milliseconds",
    )
    claim_idle_ms: int = Field(
        default=60_000,
        description="Idle time after which pending messages are reclaimed",
    )
