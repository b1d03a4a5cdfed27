"""Instance list view: the fleet overview and entry point of the TUI."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime

from commander.errors import InitializationError, TransportError
from commander.events import InputEvent
from commander.navigation import Navigator
from commander.providers import (
    AccountSummary,
    Notification,
    ResourceInstance,
    ResourceProvider,
    status_class,
)
from commander.refresher import (
    DETAIL_REFRESH_INTERVAL,
    LIST_REFRESH_INTERVAL,
    BackgroundRefresher,
)
from commander.scope import LifetimeScope
from commander.views.base import View
from commander.views.instance_detail import InstanceDetailView
from commander.views.widgets import (
    Grid,
    GridCol,
    GridRow,
    ListPanel,
    Paragraph,
    TabPane,
)

logger = logging.getLogger(__name__)

TABS = ("Linodes", "NodeBalancers", "DNS Manager", "Account", "Support", "My Profile")

# Key -> ListPanel scroll method
SCROLL_KEYS = {
    "j": "scroll_down",
    "down": "scroll_down",
    "k": "scroll_up",
    "up": "scroll_up",
    "ctrl+d": "scroll_half_page_down",
    "ctrl+u": "scroll_half_page_up",
    "ctrl+f": "scroll_page_down",
    "ctrl+b": "scroll_page_up",
    "home": "scroll_top",
    "G": "scroll_bottom",
    "shift+g": "scroll_bottom",
    "end": "scroll_bottom",
}

SELECT_KEYS = ("enter",)
REFRESH_KEYS = ("r",)


def instance_row(instance: ResourceInstance) -> str:
    return f"{instance.label} ({instance.type}, {instance.status.value})"


class InstancesView(View):
    """List of instances with account notifications and owner details."""

    def __init__(
        self,
        provider: ResourceProvider,
        navigator: Navigator,
        refresh_interval: float = LIST_REFRESH_INTERVAL,
        detail_interval: float = DETAIL_REFRESH_INTERVAL,
    ) -> None:
        super().__init__(navigator)
        self._provider = provider
        self._refresh_interval = refresh_interval
        self._detail_interval = detail_interval
        self._render: Callable[[], None] = lambda: None
        self._refresher: BackgroundRefresher | None = None
        self._last_key = ""

        self.instances: list[ResourceInstance] = []
        self.notifications: list[Notification] = []
        self.account: AccountSummary | None = None
        self.tree: Grid | None = None

    def _build_tree(self) -> Grid:
        self.instances_panel = ListPanel(title="Linodes")
        self.notifications_panel = ListPanel(title="Notifications")
        self.account_panel = ListPanel(title="Account")
        self.status_panel = Paragraph(title="Status")
        self.tabs = TabPane(tabs=TABS)
        return Grid(
            rows=[
                GridRow(1.0 / 16, [GridCol(1.0, self.tabs)]),
                GridRow(
                    1.0 / 2,
                    [
                        GridCol(1.0 / 2, self.instances_panel),
                        GridCol(1.0 / 2, self.notifications_panel),
                    ],
                ),
                GridRow(
                    7.0 / 16,
                    [
                        GridCol(1.0 / 2, self.account_panel),
                        GridCol(1.0 / 2, self.status_panel),
                    ],
                ),
            ]
        )

    async def initialize(
        self, scope: LifetimeScope, request_render: Callable[[], None]
    ) -> Grid:
        with self:
            if self.tree is None:
                self.tree = self._build_tree()

        # First activation only; a view returned to keeps its state.
        if self.account is None:
            try:
                instances, notifications = await self._fetch()
                account = await asyncio.to_thread(self._provider.get_account)
            except TransportError as e:
                raise InitializationError(f"Could not load instances: {e}") from e

            with self:
                self._apply(instances, notifications)
                self._apply_account(account)

        self._render = request_render
        self._refresher = BackgroundRefresher(
            scope,
            self._refresh_interval,
            lambda: self._refresh(scope),
            on_error=self._report_error,
            name="instances-refresher",
        )
        self._refresher.start()
        return self.tree

    async def _fetch(self) -> tuple[list[ResourceInstance], list[Notification]]:
        instances = await asyncio.to_thread(self._provider.list_instances)
        notifications = await asyncio.to_thread(self._provider.list_notifications)
        return instances, notifications

    async def _refresh(self, scope: LifetimeScope) -> None:
        instances, notifications = await self._fetch()
        if scope.cancelled:
            return
        with self:
            self._apply(instances, notifications)
        self._render()

    def _apply(
        self, instances: list[ResourceInstance], notifications: list[Notification]
    ) -> None:
        """Replace entities and derived rows. Caller holds the lock."""
        self.instances = list(instances)
        self.notifications = list(notifications)
        self.instances_panel.set_rows(
            [instance_row(i) for i in self.instances],
            [status_class(i.status) for i in self.instances],
        )
        self.notifications_panel.set_rows([n.label for n in self.notifications])
        self.status_panel.text = f"Updated {datetime.now():%H:%M:%S}"

    def _apply_account(self, account: AccountSummary) -> None:
        self.account = account
        self.account_panel.set_rows(
            [
                f"Name: {account.name}",
                f"Email: {account.email}",
                "",
                "Use the arrow keys or j/k to scroll, enter for details.",
                "Thank you for using Linode Commander!",
            ]
        )

    def _report_error(self, error: TransportError) -> None:
        with self:
            self.status_panel.text = f"Refresh failed: {error}"
        self._render()

    def handle_event(self, scope: LifetimeScope, event: InputEvent) -> View | None:
        key = event.id
        try:
            with self:
                return self._handle_key(key)
        finally:
            self._last_key = "" if self._last_key == "g" else key
            self._render()

    def _handle_key(self, key: str) -> View | None:
        """Caller holds the lock."""
        if key in SCROLL_KEYS:
            getattr(self.instances_panel, SCROLL_KEYS[key])()
        elif key == "g" and self._last_key == "g":
            self.instances_panel.scroll_top()
        elif key in ("h", "left"):
            self.tabs.focus_left()
        elif key in ("l", "right"):
            self.tabs.focus_right()
        elif key in REFRESH_KEYS:
            if self._refresher is not None:
                self._refresher.trigger()
                self.status_panel.text = "Refreshing..."
        elif key in SELECT_KEYS:
            if not self.instances:
                return None
            instance = self.instances[self.instances_panel.selected]
            return InstanceDetailView(
                self._provider,
                self.navigator,
                instance,
                parent=self.handle,
                refresh_interval=self._detail_interval,
            )
        return None
