"""Deadline guard that races an agent call against a timer."""
import asyncio
import logging
from typing import Awaitable, TypeVar

from interview_agent.core.exceptions import StageTimeoutError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _discard_late_result(task: "asyncio.Task") -> None:
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.debug(f"Discarded late failure of timed-out operation: {exc}")
    else:
        logger.debug("Discarded late result of timed-out operation")


async def with_timeout(operation: Awaitable[T], duration: float, label: str) -> T:
    """
    Race ``operation`` against a timer of ``duration`` seconds.

    Raises StageTimeoutError(label, duration) if the timer wins. The operation
    is abandoned, not stopped: a request already running in a worker thread
    finishes in the background and its outcome is dropped.
    """
    task = asyncio.ensure_future(operation)
    done, _ = await asyncio.wait({task}, timeout=duration)
    if task in done:
        return task.result()

    task.add_done_callback(_discard_late_result)
    task.cancel()
    logger.warning(f"{label} timed out after {duration:g}s")
    raise StageTimeoutError(label, duration)
