"""Cancellable lifetime scope for one active view."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Coroutine
from typing import Any

logger = logging.getLogger(__name__)


class LifetimeScope:
    """The duration for which a view and its background tasks may run.

    Tasks spawned here are cancelled together by ``cancel()``. Cancelling
    is idempotent and never waits on the tasks; ``aclose()`` cancels and
    then drains them.
    """

    def __init__(self, name: str = "") -> None:
        self.name = name
        self._cancelled = asyncio.Event()
        self._tasks: set[asyncio.Task] = set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def spawn(self, coro: Coroutine[Any, Any, Any], name: str | None = None) -> asyncio.Task:
        """Run ``coro`` as a task bound to this scope."""
        if self.cancelled:
            coro.close()
            raise RuntimeError(f"scope {self.name!r} is already cancelled")
        task = asyncio.get_running_loop().create_task(coro, name=name)
        self._tasks.add(task)
        task.add_done_callback(self._task_done)
        return task

    def _task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error(
                "Task %s in scope %r failed", task.get_name(), self.name, exc_info=exc
            )

    def cancel(self) -> None:
        if self._cancelled.is_set():
            return
        self._cancelled.set()
        for task in list(self._tasks):
            task.cancel()

    async def wait(self) -> None:
        """Suspend until the scope is cancelled."""
        await self._cancelled.wait()

    async def aclose(self) -> None:
        """Cancel the scope and wait for its tasks to finish."""
        self.cancel()
        pending = list(self._tasks)
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

    @property
    def active_tasks(self) -> int:
        return len(self._tasks)
