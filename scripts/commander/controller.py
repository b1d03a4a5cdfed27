"""Top-level state machine: which view is active, and when to stop."""

from __future__ import annotations

import logging
from enum import Enum

from commander.navigation import Navigator
from commander.runner import EventSource, Renderer, run_view
from commander.scope import LifetimeScope
from commander.views.base import View

logger = logging.getLogger(__name__)


class ControllerState(str, Enum):
    NO_VIEW = "no_view"
    VIEW_ACTIVE = "view_active"
    TERMINATED = "terminated"


class ApplicationController:
    """Runs one view at a time, each inside a fresh lifetime scope.

    When a runner hands back the next view, the finished scope is cancelled
    (stopping its refresher) before the next runner starts. A terminal
    outcome, or the event source closing, moves to TERMINATED for good.
    """

    def __init__(
        self,
        first: View,
        events: EventSource,
        renderer: Renderer,
        navigator: Navigator | None = None,
    ) -> None:
        self._first = first
        self._events = events
        self._renderer = renderer
        self._navigator = navigator if navigator is not None else first.navigator
        self.state = ControllerState.NO_VIEW
        self.active: View | None = None
        self.scope: LifetimeScope | None = None
        self.transitions = 0

    async def run(self) -> None:
        if self.state is not ControllerState.NO_VIEW:
            raise RuntimeError(f"controller already {self.state.value}")

        view: View | None = self._first
        try:
            while view is not None:
                self._activate(view)
                try:
                    view = await run_view(self.scope, view, self._events, self._renderer)
                finally:
                    await self.scope.aclose()
                if view is not None:
                    self.transitions += 1
                    logger.debug("Transition to %s", type(view).__name__)
        finally:
            self.state = ControllerState.TERMINATED
            self.active = None
            logger.info("Controller terminated after %d transition(s)", self.transitions)

    def _activate(self, view: View) -> None:
        self._navigator.activate(view)
        self.active = view
        self.scope = LifetimeScope(name=type(view).__name__)
        self.state = ControllerState.VIEW_ACTIVE
