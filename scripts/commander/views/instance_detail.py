"""Instance detail view for drilling into one instance."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

from commander.errors import TransportError
from commander.events import InputEvent
from commander.navigation import Navigator, ViewHandle
from commander.providers import ResourceInstance, ResourceProvider, status_class
from commander.refresher import DETAIL_REFRESH_INTERVAL, BackgroundRefresher
from commander.scope import LifetimeScope
from commander.views.base import View
from commander.views.widgets import Grid, GridCol, GridRow, Paragraph, TablePanel

logger = logging.getLogger(__name__)

INSTRUCTIONS = "Available actions: (b)oot, (s)hutdown, (r)efresh, (l)ist"

BACK_KEYS = ("l", "escape", "backspace")
STATUS_ROW = 1


class InstanceDetailView(View):
    """Live details of a single instance, with boot and shutdown actions."""

    def __init__(
        self,
        provider: ResourceProvider,
        navigator: Navigator,
        instance: ResourceInstance,
        parent: ViewHandle | None = None,
        refresh_interval: float = DETAIL_REFRESH_INTERVAL,
    ) -> None:
        super().__init__(navigator, parent=parent)
        self._provider = provider
        self._refresh_interval = refresh_interval
        self._render: Callable[[], None] = lambda: None
        self._refresher: BackgroundRefresher | None = None

        self.instance = instance
        self.status = ""
        self.tree: Grid | None = None

    def _build_tree(self) -> Grid:
        self.table = TablePanel(title="Details")
        self.instructions = Paragraph(title="Instructions", text=INSTRUCTIONS)
        return Grid(
            rows=[
                GridRow(0.75, [GridCol(1.0, self.table)]),
                GridRow(0.25, [GridCol(1.0, self.instructions)]),
            ]
        )

    async def initialize(
        self, scope: LifetimeScope, request_render: Callable[[], None]
    ) -> Grid:
        with self:
            if self.tree is None:
                self.tree = self._build_tree()
            self._render_state()

        self._render = request_render
        self._refresher = BackgroundRefresher(
            scope,
            self._refresh_interval,
            lambda: self._refresh(scope),
            on_error=self._report_error,
            name=f"instance-{self.instance.id}-refresher",
        )
        self._refresher.start()
        return self.tree

    async def _refresh(self, scope: LifetimeScope) -> None:
        instance = await asyncio.to_thread(self._provider.get_instance, self.instance.id)
        if scope.cancelled:
            return
        with self:
            self.instance = instance
            self._render_state()
        self._render()

    def _render_state(self) -> None:
        """Regenerate table rows from the instance. Caller holds the lock."""
        i = self.instance
        self.table.rows = [
            ("Label", i.label),
            ("Status", i.status.value),
            ("Plan", i.type),
            ("IPv4", ", ".join(i.ipv4)),
            ("Location", i.region),
        ]
        self.table.row_classes = {STATUS_ROW: status_class(i.status)}
        text = INSTRUCTIONS
        if self.status:
            text += f"\n\n{self.status}"
        self.instructions.text = text

    def _set_status(self, message: str) -> None:
        with self:
            self.status = message
            self._render_state()
        self._render()

    def _report_error(self, error: TransportError) -> None:
        self._set_status(f"Refresh failed: {error}")

    def handle_event(self, scope: LifetimeScope, event: InputEvent) -> View | None:
        key = event.id
        if key in BACK_KEYS:
            parent = self.navigator.resolve(self.parent)
            if parent is None:
                logger.warning("No parent view for instance %s", self.instance.id)
                self._set_status("Nothing to go back to.")
            return parent
        if key == "b":
            self._start_action(scope, "Boot", "Booting", self._provider.boot_instance)
        elif key == "s":
            self._start_action(
                scope, "Shutdown", "Shutting down", self._provider.shutdown_instance
            )
        elif key == "r" and self._refresher is not None:
            self._refresher.trigger()
        return None

    def _start_action(
        self,
        scope: LifetimeScope,
        name: str,
        progress: str,
        call: Callable[[int], None],
    ) -> None:
        with self:
            instance_id = self.instance.id
            label = self.instance.label
        self._set_status(f"{progress} {label} now.")
        scope.spawn(
            self._run_action(scope, name, instance_id, call),
            name=f"{name.lower()}-{instance_id}",
        )

    async def _run_action(
        self,
        scope: LifetimeScope,
        name: str,
        instance_id: int,
        call: Callable[[int], None],
    ) -> None:
        try:
            await asyncio.to_thread(call, instance_id)
        except TransportError as e:
            logger.warning("%s of instance %s failed: %s", name, instance_id, e)
            if not scope.cancelled:
                self._set_status(f"{name} failed: {e}")
            return
        if scope.cancelled:
            return
        self._set_status(f"{name} requested; status updates every {self._refresh_interval:g}s.")
        if self._refresher is not None:
            self._refresher.trigger()
