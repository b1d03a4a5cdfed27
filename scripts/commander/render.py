"""Single-slot redraw signal shared by a view and its runner."""

from __future__ import annotations

import asyncio


class RenderCoordinator:
    """Coalesces redraw requests into at most one pending redraw.

    ``request_render`` never blocks: it marks a redraw pending, or does
    nothing if one already is. The runner consumes the signal and draws
    whatever state exists at that moment, so a burst of requests costs a
    single repaint.
    """

    def __init__(self) -> None:
        self._signal = asyncio.Event()
        self._loop: asyncio.AbstractEventLoop | None = None

    @property
    def pending(self) -> bool:
        return self._signal.is_set()

    def request_render(self) -> None:
        """Mark a redraw pending. Safe to call from worker threads."""
        loop = self._loop
        if loop is not None and not loop.is_closed():
            try:
                running = asyncio.get_running_loop()
            except RuntimeError:
                running = None
            if running is not loop:
                loop.call_soon_threadsafe(self._signal.set)
                return
        self._signal.set()

    def consume(self) -> bool:
        """Clear the pending flag, returning whether it was set."""
        was_pending = self._signal.is_set()
        self._signal.clear()
        return was_pending

    async def wait(self) -> None:
        """Suspend until a redraw is pending. Does not clear the flag."""
        self._loop = asyncio.get_running_loop()
        await self._signal.wait()
