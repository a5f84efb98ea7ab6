"""
Task queue abstraction.

At-least-once delivery with per-task retry. A handler error increments
the task's attempt counter and re-publishes it with a not_before delay of
exponential_backoff(attempts, retry_base); once the attempt budget is spent
the task is logged as permanently failed and dropped; a ValidationError
(malformed task) is dropped on its first failure. Transports only move
envelopes; retry bookkeeping lives here so every transport behaves the same.

Dependencies: tenacity, pydantic, docagents.core
System role: Inter-stage messaging contract
"""

import asyncio
import logging
import uuid
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from datetime import datetime, timedelta, timezone

from tenacity import AsyncRetrying, retry_if_not_exception_type, stop_after_attempt

from docagents.core.exceptions import (
    InvalidTaskError,
    PermanentTaskFailure,
    ValidationError,
)
from docagents.core.retry import exponential_backoff
from docagents.models.task import Task, TaskType
from docagents.observability.log_utils import (
    log_exception_with_context,
    log_with_context,
)

logger = logging.getLogger(__name__)

TaskHandler = Callable[[Task], Awaitable[None]]


def topic_for(task_type: TaskType | str) -> str:
    """Topic (stream) name for a task type."""
    return f"tasks.{TaskType(task_type).value}"


def group_for(task_type: TaskType | str) -> str:
    """Consumer group shared by all workers of a task type."""
    return f"workers-{TaskType(task_type).value}"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TaskQueue(ABC):
    """
    Base class for queue transports.

    Subclasses implement _publish() and worker(); enqueue() and the
    delivery/retry path are shared.
    """

    def __init__(
        self,
        retry_base_seconds: float = 1.0,
        concurrency: int = 8,
    ) -> None:
        """
        Initialize shared queue state.

        Args:
            retry_base_seconds: Base delay for redelivery backoff
            concurrency: Maximum handlers running at once per worker
        """
        self.retry_base_seconds = retry_base_seconds
        self.concurrency = max(concurrency, 1)

    async def enqueue(self, task: Task) -> Task:
        """
        Publish a task to the topic of its type.

        Args:
            task: Task to publish; an id is assigned when missing

        Returns:
            Task: The task as published

        Raises:
            InvalidTaskError: Task has no type
            EnqueueError: Transport rejected the publish
        """
        if task.type is None:
            raise InvalidTaskError("task type required", field="type")
        if task.id is None:
            task = task.model_copy(update={"id": uuid.uuid4()})

        await self._publish(topic_for(task.type), task)
        logger.debug(
            f"{__name__}:enqueue - Task published",
            extra={"task_id": str(task.id), "task_type": task.type.value},
        )
        return task

    @abstractmethod
    async def _publish(self, topic: str, task: Task) -> None:
        """Write one envelope to the transport."""

    @abstractmethod
    async def worker(
        self,
        task_type: TaskType,
        handler: TaskHandler,
        stop_event: asyncio.Event | None = None,
    ) -> None:
        """
        Consume tasks of one type as a competing consumer.

        Returns when stop_event is set. Cancelling the coroutine cancels
        in-flight deliveries and propagates the cancellation.
        """

    async def close(self) -> None:
        """Release transport resources."""

    async def _deliver(
        self,
        task: Task,
        handler: TaskHandler,
        semaphore: asyncio.Semaphore,
    ) -> bool:
        """
        Run one delivery: wait for not_before, call the handler, retry on error.

        Returns:
            bool: True once the delivery is settled (handled, re-published or
            dropped); False when a retry could not be re-published and the
            transport should keep the original message pending
        """
        if task.not_before is not None:
            delay = (task.not_before - utcnow()).total_seconds()
            if delay > 0:
                await asyncio.sleep(delay)

        try:
            async with semaphore:
                await handler(task)
        except Exception as exc:
            return await self._retry_task(task, exc)
        return True

    async def _retry_task(self, task: Task, error: Exception) -> bool:
        attempts = task.attempts + 1
        max_attempts = task.effective_max_attempts
        task_type = task.type.value if task.type else "unknown"

        # A malformed task fails the same way on every delivery
        if attempts >= max_attempts or isinstance(error, ValidationError):
            failure = PermanentTaskFailure(str(task.id), task_type, attempts, cause=error)
            log_exception_with_context(
                logger,
                f"{__name__}:_retry_task - {failure.message}",
                error,
                task_id=str(task.id),
                task_type=task_type,
                attempts=attempts,
            )
            return True

        delay = exponential_backoff(attempts, self.retry_base_seconds)
        retried = task.model_copy(
            update={
                "attempts": attempts,
                "max_attempts": max_attempts,
                "not_before": utcnow() + timedelta(seconds=delay),
            }
        )
        log_with_context(
            logger,
            logging.WARNING,
            f"{__name__}:_retry_task - Handler failed, scheduling retry",
            task_id=str(task.id),
            task_type=task_type,
            attempts=attempts,
            max_attempts=max_attempts,
            delay_seconds=delay,
            error=str(error),
        )
        try:
            await self._publish(topic_for(task.type), retried)
        except Exception as publish_exc:
            log_exception_with_context(
                logger,
                f"{__name__}:_retry_task - Failed to re-enqueue task",
                publish_exc,
                task_id=str(task.id),
                task_type=task_type,
            )
            return False
        return True


async def enqueue_with_retry(
    queue: TaskQueue,
    task: Task,
    attempts: int = 3,
    base: float = 0.2,
) -> Task:
    """
    Publish a task, retrying transient publish failures.

    Waits exponential_backoff(n, base) after the n-th failed call (n from 0).
    Validation errors are not retried.

    Args:
        queue: Target queue
        task: Task to publish
        attempts: Maximum publish calls; values <= 0 mean a single call
        base: Base delay in seconds

    Returns:
        Task: The task as published

    Raises:
        Exception: The error of the final attempt
    """
    attempts = max(attempts, 1)
    retrying = AsyncRetrying(
        retry=retry_if_not_exception_type(ValidationError),
        stop=stop_after_attempt(attempts),
        wait=lambda retry_state: exponential_backoff(retry_state.attempt_number - 1, base),
        before_sleep=lambda retry_state: logger.warning(
            f"{__name__}:enqueue_with_retry - Publish attempt "
            f"{retry_state.attempt_number}/{attempts} failed, retrying"
        ),
        reraise=True,
    )
    return await retrying(queue.enqueue, task)
