"""Periodic background refresh bound to a view's lifetime scope."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

from commander.errors import TransportError
from commander.scope import LifetimeScope

logger = logging.getLogger(__name__)

# Default polling intervals in seconds
LIST_REFRESH_INTERVAL = 4.0
DETAIL_REFRESH_INTERVAL = 2.0


class BackgroundRefresher:
    """Runs ``tick`` every ``interval`` seconds until the scope is cancelled.

    Ticks never overlap, so a slow fetch cannot land on top of a newer one.
    Manual triggers made while one is already waiting collapse into it.
    A tick that raises TransportError is abandoned and passed to
    ``on_error``; the next scheduled tick is the retry. Any other exception
    ends the refresher and is logged by the scope.
    """

    def __init__(
        self,
        scope: LifetimeScope,
        interval: float,
        tick: Callable[[], Awaitable[None]],
        on_error: Callable[[TransportError], None] | None = None,
        name: str = "refresher",
    ) -> None:
        self._scope = scope
        self._interval = interval
        self._tick = tick
        self._on_error = on_error
        self._name = name
        self._task: asyncio.Task | None = None
        self._tick_lock = asyncio.Lock()
        self._triggered = False

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self._task is not None:
            raise RuntimeError(f"{self._name} already started")
        self._task = self._scope.spawn(self._run(), name=self._name)

    def trigger(self) -> None:
        """Run one tick as soon as the current one, if any, finishes."""
        if self._scope.cancelled or self._triggered:
            return
        self._triggered = True
        self._scope.spawn(self._run_triggered(), name=f"{self._name}-manual")

    async def _run_triggered(self) -> None:
        async with self._tick_lock:
            self._triggered = False
            await self._tick_once()

    async def _run(self) -> None:
        while not self._scope.cancelled:
            try:
                await asyncio.wait_for(self._scope.wait(), timeout=self._interval)
            except asyncio.TimeoutError:
                pass
            if self._scope.cancelled:
                break
            async with self._tick_lock:
                if self._scope.cancelled:
                    break
                await self._tick_once()
        logger.debug("%s stopped", self._name)

    async def _tick_once(self) -> None:
        try:
            await self._tick()
        except TransportError as e:
            logger.warning("%s tick failed: %s", self._name, e)
            if self._on_error is not None and not self._scope.cancelled:
                self._on_error(e)
