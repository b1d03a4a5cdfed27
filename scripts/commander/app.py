"""
Linode Commander TUI Application.

Textual hosts the terminal: it turns keys and resizes into input events
for the controller, and draws whatever the active view hands the renderer.
"""

from __future__ import annotations

import logging

from textual import events
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import Header

from commander.config import Settings
from commander.controller import ApplicationController
from commander.errors import CommanderError
from commander.events import QUIT, RESIZE, EventQueue, InputEvent
from commander.navigation import Navigator
from commander.providers import ResourceProvider
from commander.views.canvas import Canvas
from commander.views.instance_list import InstancesView
from commander.views.widgets import Grid

logger = logging.getLogger(__name__)

QUIT_KEYS = ("q", "ctrl+c")


class TextualRenderer:
    """Renderer that shows tree snapshots on a Canvas widget."""

    def __init__(self, canvas: Canvas) -> None:
        self._canvas = canvas

    def draw(self, tree: Grid) -> None:
        # The runner holds the view lock here; copy before Textual reads it.
        self._canvas.show(tree.snapshot())

    def resize(self, tree: Grid, width: int, height: int) -> None:
        tree.set_rect(0, 0, width, height)


class CommanderApp(App):
    """Main Linode Commander application."""

    TITLE = "Linode Commander"

    CSS = """
    Screen {
        background: $surface;
    }
    """

    BINDINGS = [
        Binding("ctrl+c", "send_quit", "Quit", show=False, priority=True),
    ]

    def __init__(
        self,
        provider: ResourceProvider,
        settings: Settings | None = None,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self._provider = provider
        self._settings = settings or Settings(token="")
        self._events = EventQueue()
        self.controller: ApplicationController | None = None

    def compose(self) -> ComposeResult:
        yield Header()
        yield Canvas(id="canvas")

    def on_mount(self) -> None:
        """Called when app is mounted."""
        if self._settings.light_theme:
            self.theme = "textual-light"

        navigator = Navigator()
        first = InstancesView(
            self._provider,
            navigator,
            refresh_interval=self._settings.list_interval,
            detail_interval=self._settings.detail_interval,
        )
        self.controller = ApplicationController(
            first,
            self._events,
            TextualRenderer(self.query_one(Canvas)),
            navigator=navigator,
        )
        self.run_worker(self._run_controller(), name="controller", exclusive=True)

    async def _run_controller(self) -> None:
        try:
            await self.controller.run()
        except CommanderError as e:
            logger.error("Stopping: %s", e)
            self.exit(return_code=1, message=str(e))
            return
        except Exception:
            logger.exception("Controller crashed")
            raise
        self.exit()

    def on_key(self, event: events.Key) -> None:
        key = QUIT if event.key in QUIT_KEYS else event.key
        self._events.put(InputEvent(key))
        event.stop()

    def on_canvas_resized(self, message: Canvas.Resized) -> None:
        self._events.put(InputEvent(RESIZE, (message.width, message.height)))

    def action_send_quit(self) -> None:
        self._events.put(InputEvent(QUIT))

    def on_unmount(self) -> None:
        self._events.close()


def run(provider: ResourceProvider, settings: Settings) -> int:
    """Run the TUI application and return its exit code."""
    app = CommanderApp(provider, settings)
    app.run()
    return app.return_code or 0
