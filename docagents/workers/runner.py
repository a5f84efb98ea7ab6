"""
Stage worker runner.

Shared process bootstrap for the parser and analysis workers: load
settings, build dependencies, consume one task type until SIGINT/SIGTERM.

Dependencies: asyncio, signal (stdlib), python-dotenv, docagents.dependencies
System role: Worker process lifecycle
"""

import asyncio
import logging
import signal
from collections.abc import Callable

from dotenv import load_dotenv

from docagents.boundary.queue.base import TaskHandler
from docagents.configs import load_settings
from docagents.dependencies import Deps, build_deps
from docagents.models.task import TaskType
from docagents.observability.logger import configure_logging

logger = logging.getLogger(__name__)


async def run_worker(
    deps: Deps,
    task_type: TaskType,
    handler: TaskHandler,
    stop_event: asyncio.Event,
) -> None:
    """Consume tasks of one type until stop_event is set."""
    logger.info(
        f"{__name__}:run_worker - Consuming tasks",
        extra={"task_type": task_type.value},
    )
    await deps.queue.worker(task_type, handler, stop_event=stop_event)


async def _serve(task_type: TaskType, handler_factory: Callable[[Deps], TaskHandler]) -> None:
    deps = await build_deps(load_settings())
    stop_event = asyncio.Event()

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, stop_event.set)

    try:
        await run_worker(deps, task_type, handler_factory(deps), stop_event)
    finally:
        await deps.aclose()
        logger.info(
            f"{__name__}:_serve - Worker shut down",
            extra={"task_type": task_type.value},
        )


def main_for(task_type: TaskType, handler_factory: Callable[[Deps], TaskHandler]) -> None:
    """Process entry point for a stage worker."""
    load_dotenv()
    configure_logging(load_settings().log_level)
    asyncio.run(_serve(task_type, handler_factory))
