"""Session loop that drives one active view."""

from __future__ import annotations

import asyncio
import logging
from typing import Protocol

from commander.errors import InitializationError, TerminalSignal
from commander.events import QUIT, RESIZE, InputEvent
from commander.render import RenderCoordinator
from commander.scope import LifetimeScope
from commander.views.base import View
from commander.views.widgets import Grid

logger = logging.getLogger(__name__)


class Renderer(Protocol):
    """Draws visual trees to the terminal."""

    def draw(self, tree: Grid) -> None:
        ...

    def resize(self, tree: Grid, width: int, height: int) -> None:
        ...


class EventSource(Protocol):
    async def get(self) -> InputEvent | None:
        """Next event in arrival order, or None once the source is closed."""
        ...


async def run_view(
    scope: LifetimeScope,
    view: View,
    events: EventSource,
    renderer: Renderer,
) -> View | None:
    """Run a single view until it hands over control.

    Returns the next view, or None when the application should end. The
    view is locked around every draw. Events are handled as follows:
    - ``quit`` ends the application.
    - ``resize`` re-lays out the tree and redraws immediately.
    - Anything else goes to the view's ``handle_event``.
    Pending render requests are served once no event is ready.

    A scope cancelled mid-session also ends the loop with None, since its
    owner has abandoned the session. The controller only cancels a scope
    after its runner returns, so navigation never takes this path.
    """
    coordinator = RenderCoordinator()

    try:
        tree = await view.initialize(scope, coordinator.request_render)
    except InitializationError:
        raise
    except Exception as e:
        raise InitializationError(f"{type(view).__name__} failed to initialize: {e}") from e

    with view:
        coordinator.consume()
        renderer.draw(tree)

    next_event: asyncio.Future | None = None
    try:
        while True:
            if next_event is None:
                next_event = asyncio.ensure_future(events.get())
            render_wait = asyncio.ensure_future(coordinator.wait())
            cancel_wait = asyncio.ensure_future(scope.wait())
            try:
                await asyncio.wait(
                    {next_event, render_wait, cancel_wait},
                    return_when=asyncio.FIRST_COMPLETED,
                )
            finally:
                render_wait.cancel()
                cancel_wait.cancel()

            if next_event.done():
                event = next_event.result()
                next_event = None
                if event is None:
                    logger.info("Input closed")
                    return None
                if event.id == QUIT:
                    return None
                if event.id == RESIZE:
                    _resize(view, tree, renderer, event)
                    continue
                try:
                    next_view = view.handle_event(scope, event)
                except TerminalSignal:
                    return None
                if next_view is not None:
                    return next_view
                continue

            if coordinator.consume():
                with view:
                    renderer.draw(tree)
                continue

            if scope.cancelled:
                return None
    finally:
        if next_event is not None:
            next_event.cancel()


def _resize(view: View, tree: Grid, renderer: Renderer, event: InputEvent) -> None:
    if event.payload is None:
        width, height = tree.width, tree.height
    else:
        width, height = event.payload
    with view:
        renderer.resize(tree, width, height)
        renderer.draw(tree)
