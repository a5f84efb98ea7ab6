"""Task queue transports and publishing helpers."""

from docagents.boundary.queue.base import (
    TaskHandler,
    TaskQueue,
    enqueue_with_retry,
    group_for,
    topic_for,
)
from docagents.boundary.queue.memory import InMemoryTaskQueue
from docagents.boundary.queue.redis_streams import RedisStreamQueue

__all__ = [
    "InMemoryTaskQueue",
    "RedisStreamQueue",
    "TaskHandler",
    "TaskQueue",
    "enqueue_with_retry",
    "group_for",
    "topic_for",
]
