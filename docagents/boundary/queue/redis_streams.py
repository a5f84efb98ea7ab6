"""
Redis Streams task queue.

Each task type maps to a stream (tasks.<type>) consumed through a consumer
group (workers-<type>), so every worker process of a stage competes for the
same messages. A message is acknowledged only after its delivery settles;
messages left pending by a crashed consumer are reclaimed with XAUTOCLAIM
once they have been idle for claim_idle_ms.

Dependencies: redis (asyncio client), pydantic
System role: Production queue transport
"""

import asyncio
import logging
import socket
import uuid

from pydantic import ValidationError as PydanticValidationError
from redis.asyncio import Redis
from redis.exceptions import RedisError, ResponseError

from docagents.boundary.queue.base import (
    TaskHandler,
    TaskQueue,
    group_for,
    topic_for,
)
from docagents.core.exceptions import EnqueueError
from docagents.models.task import Task, TaskType
from docagents.observability.log_utils import log_exception_with_context

logger = logging.getLogger(__name__)

TASK_FIELD = "task"


class RedisStreamQueue(TaskQueue):
    """Task queue over Redis Streams consumer groups."""

    def __init__(
        self,
        client: Redis,
        retry_base_seconds: float = 1.0,
        concurrency: int = 8,
        block_ms: int = 1000,
        claim_idle_ms: int = 60_000,
        consumer_name: str | None = None,
    ) -> None:
        """
        Initialize the queue.

        Args:
            client: Redis client created with decode_responses=True
            retry_base_seconds: Base delay for redelivery backoff
            concurrency: Maximum handlers running at once per worker
            block_ms: XREADGROUP block timeout
            claim_idle_ms: Idle time before a pending message is reclaimed
            consumer_name: Consumer name within the group; unique per process by default
        """
        super().__init__(retry_base_seconds=retry_base_seconds, concurrency=concurrency)
        self._client = client
        self._block_ms = block_ms
        self._claim_idle_ms = claim_idle_ms
        self._consumer = consumer_name or f"{socket.gethostname()}-{uuid.uuid4().hex[:8]}"

    async def _publish(self, topic: str, task: Task) -> None:
        try:
            await self._client.xadd(topic, {TASK_FIELD: task.model_dump_json()})
        except RedisError as exc:
            raise EnqueueError(
                "failed to publish task",
                {"topic": topic, "task_id": str(task.id), "error": str(exc)},
            ) from exc

    async def _ensure_group(self, topic: str, group: str) -> None:
        try:
            await self._client.xgroup_create(topic, group, id="0", mkstream=True)
        except ResponseError as exc:
            if "BUSYGROUP" not in str(exc):
                raise

    async def _claim_stale(
        self, topic: str, group: str, count: int
    ) -> list[tuple[str, dict]]:
        result = await self._client.xautoclaim(
            topic,
            group,
            self._consumer,
            min_idle_time=self._claim_idle_ms,
            start_id="0-0",
            count=count,
        )
        # [next_start_id, messages, deleted_ids]; deleted ids only on Redis 7+
        messages = result[1] if len(result) > 1 else []
        if messages:
            logger.info(
                f"{__name__}:_claim_stale - Reclaimed pending messages",
                extra={"topic": topic, "count": len(messages)},
            )
        return [(message_id, fields) for message_id, fields in messages if fields]

    async def _handle_message(
        self,
        topic: str,
        group: str,
        message_id: str,
        fields: dict,
        handler: TaskHandler,
        semaphore: asyncio.Semaphore,
    ) -> None:
        raw = fields.get(TASK_FIELD)
        try:
            task = Task.model_validate_json(raw or "")
        except PydanticValidationError as exc:
            log_exception_with_context(
                logger,
                f"{__name__}:_handle_message - Dropping undecodable message",
                exc,
                topic=topic,
                message_id=message_id,
            )
            await self._ack(topic, group, message_id)
            return

        settled = await self._deliver(task, handler, semaphore)
        if settled:
            await self._ack(topic, group, message_id)

    async def _ack(self, topic: str, group: str, message_id: str) -> None:
        try:
            await self._client.xack(topic, group, message_id)
        except RedisError as exc:
            # Message stays pending and is redelivered through XAUTOCLAIM
            log_exception_with_context(
                logger,
                f"{__name__}:_ack - Failed to acknowledge message",
                exc,
                topic=topic,
                message_id=message_id,
            )

    async def worker(
        self,
        task_type: TaskType,
        handler: TaskHandler,
        stop_event: asyncio.Event | None = None,
    ) -> None:
        topic = topic_for(task_type)
        group = group_for(task_type)
        stop_event = stop_event or asyncio.Event()
        semaphore = asyncio.Semaphore(self.concurrency)
        # Keyed by stream message id; reads never exceed the free capacity
        in_flight: dict[str, asyncio.Task] = {}
        loop = asyncio.get_running_loop()
        claim_interval = self._claim_idle_ms / 2000
        next_claim = loop.time()

        await self._ensure_group(topic, group)
        logger.info(
            f"{__name__}:worker - Worker started",
            extra={"topic": topic, "group": group, "consumer": self._consumer},
        )

        def spawn(message_id: str, fields: dict) -> None:
            if message_id in in_flight:
                # Reclaimed while this consumer is still handling it
                return
            delivery = asyncio.create_task(
                self._handle_message(topic, group, message_id, fields, handler, semaphore)
            )
            in_flight[message_id] = delivery
            delivery.add_done_callback(lambda _: in_flight.pop(message_id, None))

        try:
            while not stop_event.is_set():
                if len(in_flight) >= self.concurrency:
                    await asyncio.wait(
                        list(in_flight.values()),
                        timeout=self._block_ms / 1000,
                        return_when=asyncio.FIRST_COMPLETED,
                    )
                    continue

                try:
                    if loop.time() >= next_claim:
                        stale = await self._claim_stale(
                            topic, group, self.concurrency - len(in_flight)
                        )
                        for message_id, fields in stale:
                            spawn(message_id, fields)
                        next_claim = loop.time() + claim_interval

                    capacity = self.concurrency - len(in_flight)
                    if capacity <= 0:
                        continue
                    response = await self._client.xreadgroup(
                        group,
                        self._consumer,
                        {topic: ">"},
                        count=capacity,
                        block=self._block_ms,
                    )
                except RedisError as exc:
                    log_exception_with_context(
                        logger,
                        f"{__name__}:worker - Stream read failed, backing off",
                        exc,
                        topic=topic,
                    )
                    await asyncio.sleep(self.retry_base_seconds)
                    continue

                for _stream, messages in response or []:
                    for message_id, fields in messages:
                        spawn(message_id, fields)
        finally:
            # Unacknowledged messages stay pending and are reclaimed later
            deliveries = list(in_flight.values())
            for delivery in deliveries:
                delivery.cancel()
            await asyncio.gather(*deliveries, return_exceptions=True)
            logger.info(
                f"{__name__}:worker - Worker stopped",
                extra={"topic": topic, "consumer": self._consumer},
            )

    async def close(self) -> None:
        await self._client.aclose()
