"""Textual widgets that draw snapshots of the visual tree."""

from __future__ import annotations

from rich.text import Text
from textual import events
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.message import Message
from textual.widget import Widget
from textual.widgets import Label, Static

from commander.views.widgets import (
    Grid,
    ListPanel,
    Panel,
    Paragraph,
    TablePanel,
    TabPane,
)

PANEL_CSS = """
    border: solid $primary;
    padding: 0 1;
"""

ROW_CSS = """
    .row-normal {
        color: $success;
    }

    .row-alert {
        color: $error;
        text-style: bold;
    }

    .row-warning {
        color: $warning;
        text-style: bold;
    }

    .row-muted {
        color: $text-muted;
    }
"""


class ListPanelView(Static):
    """Rows of a ListPanel, with the cursor row highlighted."""

    DEFAULT_CSS = (
        "ListPanelView {" + PANEL_CSS + "}\n"
        + ROW_CSS.replace(".row-", "ListPanelView .row-")
        + """
    ListPanelView .selected {
        background: $accent;
        color: $text;
    }
    """
    )

    def __init__(self, panel: ListPanel, **kwargs) -> None:
        super().__init__(**kwargs)
        self._panel = panel
        self.border_title = panel.title

    def compose(self) -> ComposeResult:
        panel = self._panel
        # keep the cursor on screen
        start = max(0, panel.selected - panel.page_size + 1)
        visible = panel.rows[start : start + panel.page_size]
        for offset, row in enumerate(visible):
            index = start + offset
            classes = []
            if index < len(panel.row_classes) and panel.row_classes[index]:
                classes.append(f"row-{panel.row_classes[index]}")
            if index == panel.selected:
                classes.append("selected")
            yield Label(Text(row), classes=" ".join(classes))


class TablePanelView(Static):
    """Key/value rows of a TablePanel."""

    DEFAULT_CSS = (
        "TablePanelView {" + PANEL_CSS + "}\n"
        + ROW_CSS.replace(".row-", "TablePanelView .row-")
    )

    def __init__(self, panel: TablePanel, **kwargs) -> None:
        super().__init__(**kwargs)
        self._panel = panel
        self.border_title = panel.title

    def compose(self) -> ComposeResult:
        panel = self._panel
        for index, (key, value) in enumerate(panel.rows):
            css_class = panel.row_classes.get(index)
            yield Label(
                Text(f"{key:<{panel.key_width}}{value}"),
                classes=f"row-{css_class}" if css_class else "",
            )


class ParagraphView(Static):
    DEFAULT_CSS = "ParagraphView {" + PANEL_CSS + "}"

    def __init__(self, panel: Paragraph, **kwargs) -> None:
        super().__init__(Text(panel.text), **kwargs)
        self.border_title = panel.title


class TabPaneView(Static):
    """Tab labels with the active tab highlighted."""

    DEFAULT_CSS = """
    TabPaneView {
        height: 3;
        border: solid $primary;
        layout: horizontal;
    }

    TabPaneView Label {
        padding: 0 1;
    }

    TabPaneView .tab-active {
        text-style: bold underline;
        color: $accent;
    }
    """

    def __init__(self, panel: TabPane, **kwargs) -> None:
        super().__init__(**kwargs)
        self._panel = panel

    def compose(self) -> ComposeResult:
        for index, name in enumerate(self._panel.tabs):
            yield Label(
                Text(name),
                classes="tab-active" if index == self._panel.active else "",
            )


PANEL_VIEWS = {
    ListPanel: ListPanelView,
    TablePanel: TablePanelView,
    Paragraph: ParagraphView,
    TabPane: TabPaneView,
}


def panel_view(panel: Panel) -> Widget:
    return PANEL_VIEWS[type(panel)](panel)


class Canvas(Vertical):
    """Shows the latest snapshot of a view's visual tree."""

    DEFAULT_CSS = """
    Canvas {
        height: 1fr;
    }

    Canvas .grid-row {
        height: auto;
    }
    """

    class Resized(Message):
        """The canvas region changed size."""

        def __init__(self, width: int, height: int) -> None:
            super().__init__()
            self.width = width
            self.height = height

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._snapshot: Grid | None = None

    def on_resize(self, event: events.Resize) -> None:
        # the canvas region, not the terminal: the header takes rows too
        self.post_message(self.Resized(event.size.width, event.size.height))

    def show(self, snapshot: Grid) -> None:
        self._snapshot = snapshot
        self.refresh(recompose=True)

    def compose(self) -> ComposeResult:
        if self._snapshot is None:
            return
        for row in self._snapshot.rows:
            line = Horizontal(classes="grid-row")
            line.styles.height = f"{row.ratio}fr"
            with line:
                for col in row.cols:
                    widget = panel_view(col.panel)
                    widget.styles.width = f"{col.ratio}fr"
                    widget.styles.height = "100%"
                    yield widget
