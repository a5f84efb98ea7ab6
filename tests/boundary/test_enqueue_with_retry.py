"""
Test suite for client-side publish retry.

System role: Verification of enqueue_with_retry attempt and error semantics
"""

from unittest.mock import AsyncMock

import pytest

from docagents.boundary.queue.base import enqueue_with_retry
from docagents.core.exceptions import EnqueueError, InvalidTaskError
from docagents.models.task import Task, TaskType


def _queue_failing(times: int) -> AsyncMock:
    queue = AsyncMock()
    errors = [EnqueueError(f"broker down {i}") for i in range(times)]
    queue.enqueue.side_effect = [*errors, Task(type=TaskType.PARSE)]
    return queue


class TestEnqueueWithRetry:
    """Test suite for enqueue_with_retry."""

    @pytest.mark.asyncio
    async def test_returns_on_first_success(self) -> None:
        queue = _queue_failing(0)

        result = await enqueue_with_retry(queue, Task(type=TaskType.PARSE), attempts=3, base=0.001)

        assert result.type == TaskType.PARSE
        assert queue.enqueue.await_count == 1

    @pytest.mark.asyncio
    async def test_retries_until_success(self) -> None:
        queue = _queue_failing(2)

        await enqueue_with_retry(queue, Task(type=TaskType.PARSE), attempts=3, base=0.001)

        assert queue.enqueue.await_count == 3

    @pytest.mark.asyncio
    async def test_raises_last_error_after_all_attempts(self) -> None:
        queue = _queue_failing(3)

        with pytest.raises(EnqueueError, match="broker down 2"):
            await enqueue_with_retry(queue, Task(type=TaskType.PARSE), attempts=3, base=0.001)

        assert queue.enqueue.await_count == 3

    @pytest.mark.asyncio
    @pytest.mark.parametrize("attempts", [0, -1])
    async def test_non_positive_attempts_mean_one_call(self, attempts: int) -> None:
        queue = _queue_failing(1)

        with pytest.raises(EnqueueError):
            await enqueue_with_retry(queue, Task(type=TaskType.PARSE), attempts=attempts, base=0.001)

        assert queue.enqueue.await_count == 1

    @pytest.mark.asyncio
    async def test_validation_errors_are_not_retried(self) -> None:
        queue = AsyncMock()
        queue.enqueue.side_effect = InvalidTaskError("task type required", field="type")

        with pytest.raises(InvalidTaskError):
            await enqueue_with_retry(queue, Task(), attempts=3, base=0.001)

        assert queue.enqueue.await_count == 1
