"""Contract every view implements."""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from collections.abc import Callable

from commander.events import InputEvent
from commander.navigation import Navigator, ViewHandle
from commander.scope import LifetimeScope
from commander.views.widgets import Grid


class View(ABC):
    """A terminal-level view; the unit of navigation.

    Views may update in the background, so every read or write of a view's
    state or visual tree happens while holding its lock (``with view:``).
    The lock is never held across an ``await``.
    """

    def __init__(self, navigator: Navigator, parent: ViewHandle | None = None) -> None:
        self._lock = threading.Lock()
        self.navigator = navigator
        self.parent = parent
        self.handle = navigator.register(self)

    def lock(self) -> None:
        self._lock.acquire()

    def unlock(self) -> None:
        self._lock.release()

    def __enter__(self) -> "View":
        self.lock()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.unlock()

    @abstractmethod
    async def initialize(
        self, scope: LifetimeScope, request_render: Callable[[], None]
    ) -> Grid:
        """Set up the view and return the visual tree to render.

        Called once per activation. Background tasks go in ``scope`` and end
        with it. A view activated again returns the same tree.
        """

    @abstractmethod
    def handle_event(self, scope: LifetimeScope, event: InputEvent) -> View | None:
        """Handle a non-reserved input event.

        Return None to stay, another view to hand control to it, or raise
        TerminalSignal to end the application. Must not block on I/O.
        """
