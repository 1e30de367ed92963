"""
Cancellable delayed tasks.

The interview flow waits a short moment before moving on to the next
question. That delay goes through a TaskScheduler so it can be cancelled
(pause, clear) and replaced in tests by a scheduler with virtual time.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Protocol

logger = logging.getLogger(__name__)

Callback = Callable[[], Awaitable[None]]


class ScheduledTask(Protocol):
    """Handle to a delayed callback."""

    @property
    def cancelled(self) -> bool: ...

    @property
    def done(self) -> bool: ...

    def cancel(self) -> None: ...


class TaskScheduler(Protocol):
    """Runs a coroutine callback after a delay."""

    def call_later(self, delay_seconds: float, callback: Callback) -> ScheduledTask: ...


class AsyncioScheduledTask:
    """ScheduledTask backed by an asyncio.Task."""

    def __init__(self, task: asyncio.Task):
        self._task = task

    @property
    def cancelled(self) -> bool:
        return self._task.cancelled()

    @property
    def done(self) -> bool:
        return self._task.done()

    def cancel(self) -> None:
        self._task.cancel()


class AsyncioScheduler:
    """Schedules callbacks on the running event loop."""

    def call_later(self, delay_seconds: float, callback: Callback) -> AsyncioScheduledTask:
        async def _run():
            await asyncio.sleep(delay_seconds)
            try:
                await callback()
            except Exception as e:
                logger.error(f"Scheduled task failed: {e}")

        return AsyncioScheduledTask(asyncio.get_running_loop().create_task(_run()))
