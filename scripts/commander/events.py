"""Input events and the queue that carries them to the runner."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any

QUIT = "quit"
RESIZE = "resize"


@dataclass(frozen=True)
class InputEvent:
    """One input event: a key name or a reserved id, plus optional payload.

    Resize events carry ``(width, height)``.
    """

    id: str
    payload: Any = None


class EventQueue:
    """FIFO event source. ``get`` returns None once the queue is closed."""

    def __init__(self) -> None:
        self._queue: asyncio.Queue[InputEvent | None] = asyncio.Queue()
        self._closed = False

    def put(self, event: InputEvent) -> None:
        if self._closed:
            return
        self._queue.put_nowait(event)

    def close(self) -> None:
        if not self._closed:
            self._closed = True
            self._queue.put_nowait(None)

    async def get(self) -> InputEvent | None:
        event = await self._queue.get()
        if event is None:
            # keep the sentinel for later readers
            self._queue.put_nowait(None)
        return event
