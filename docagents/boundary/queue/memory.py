"""
In-process task queue.

One asyncio.Queue per topic shared by every worker of that type, so
workers compete for tasks as they would on a real broker. Used for
local runs and tests; tasks do not survive the process.

Dependencies: asyncio (stdlib)
System role: Development/test queue transport
"""

import asyncio
import logging

from docagents.boundary.queue.base import TaskHandler, TaskQueue, topic_for
from docagents.models.task import Task, TaskType

logger = logging.getLogger(__name__)


class InMemoryTaskQueue(TaskQueue):
    """Task queue backed by asyncio queues."""

    def __init__(
        self,
        retry_base_seconds: float = 1.0,
        concurrency: int = 8,
        poll_interval: float = 0.05,
    ) -> None:
        super().__init__(retry_base_seconds=retry_base_seconds, concurrency=concurrency)
        self._topics: dict[str, asyncio.Queue[Task]] = {}
        self._poll_interval = poll_interval
        self.published: list[Task] = []

    def _topic(self, topic: str) -> asyncio.Queue[Task]:
        if topic not in self._topics:
            self._topics[topic] = asyncio.Queue()
        return self._topics[topic]

    async def _publish(self, topic: str, task: Task) -> None:
        self.published.append(task)
        await self._topic(topic).put(task.model_copy(deep=True))

    def pending(self, task_type: TaskType) -> int:
        """Number of tasks waiting on a topic."""
        return self._topic(topic_for(task_type)).qsize()

    async def worker(
        self,
        task_type: TaskType,
        handler: TaskHandler,
        stop_event: asyncio.Event | None = None,
    ) -> None:
        queue = self._topic(topic_for(task_type))
        stop_event = stop_event or asyncio.Event()
        semaphore = asyncio.Semaphore(self.concurrency)
        in_flight: set[asyncio.Task] = set()

        logger.info(
            f"{__name__}:worker - Worker started",
            extra={"task_type": TaskType(task_type).value},
        )
        try:
            while not stop_event.is_set():
                try:
                    task = await asyncio.wait_for(queue.get(), timeout=self._poll_interval)
                except asyncio.TimeoutError:
                    continue
                delivery = asyncio.create_task(self._deliver(task, handler, semaphore))
                in_flight.add(delivery)
                delivery.add_done_callback(in_flight.discard)
        finally:
            for delivery in in_flight:
                delivery.cancel()
            await asyncio.gather(*in_flight, return_exceptions=True)
            logger.info(
                f"{__name__}:worker - Worker stopped",
                extra={"task_type": TaskType(task_type).value},
            )
