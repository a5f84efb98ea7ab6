"""
Redis configuration settings.

Shared by the Redis Streams task queue and the query result cache.

Dependencies: pydantic, pydantic_settings
System role: Redis connection configuration
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from docagents.configs.base import BaseSettings


class RedisSettings(BaseSettings):
    """Redis connection configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="REDIS_",
        case_sensitive=False,
        extra="ignore",
    )

    host: str = Field(default="localhost", description="Redis host")
    port: int = Field(default=6379, description="Redis port")
    db: int = Field(default=0, description="Redis logical database")
    password: str | None = Field(default=None, description="Redis password")
    socket_timeout: float = Field(default=5.0, description="Socket timeout in seconds")
    url: str | None = Field(
        default=None,
        description="Full redis:// URL; overrides the individual fields when set",
    )

    @property
    def redis_url(self) -> str:
        """Build the redis:// connection URL."""
        if self.url:
            return self.url
        auth = f":{self.password}@" if self.password else ""
        return f"redis://{auth}{self.host}:{self.port}/{self.db}"
