"""Tests for the Textual panel widgets."""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "scripts"))

from textual import events  # noqa: E402
from textual.geometry import Size  # noqa: E402

from commander.views.canvas import (  # noqa: E402
    Canvas,
    ListPanelView,
    ParagraphView,
    TablePanelView,
    TabPaneView,
    panel_view,
)
from commander.views.widgets import ListPanel, Paragraph, TablePanel, TabPane  # noqa: E402


class TestPanelView:
    """Tests for panel_view dispatch."""

    def test_each_panel_type_has_a_widget(self) -> None:
        assert isinstance(panel_view(ListPanel(title="L")), ListPanelView)
        assert isinstance(panel_view(TablePanel(title="T")), TablePanelView)
        assert isinstance(panel_view(Paragraph(title="P")), ParagraphView)
        assert isinstance(panel_view(TabPane(tabs=("a", "b"))), TabPaneView)

    def test_border_title_comes_from_panel(self) -> None:
        assert panel_view(ListPanel(title="Linodes")).border_title == "Linodes"


class TestListPanelView:
    """Tests for list rows and cursor styling."""

    def test_rows_carry_status_and_cursor_classes(self) -> None:
        panel = ListPanel(title="Linodes")
        panel.set_rows(["A", "B", "C"], ["normal", "alert", "warning"])
        panel.scroll_down()

        labels = list(ListPanelView(panel).compose())

        assert len(labels) == 3
        assert labels[0].has_class("row-normal")
        assert labels[1].has_class("row-alert")
        assert labels[1].has_class("selected")
        assert labels[2].has_class("row-warning")
        assert not labels[2].has_class("selected")

    def test_viewport_follows_cursor(self) -> None:
        panel = ListPanel(title="Linodes", page_size=3)
        panel.set_rows([f"row {i}" for i in range(10)])
        panel.scroll_bottom()

        labels = list(ListPanelView(panel).compose())

        assert len(labels) == 3
        assert labels[-1].has_class("selected")


class TestTablePanelView:
    """Tests for key/value rows."""

    def test_status_row_is_styled(self) -> None:
        panel = TablePanel(
            title="Details",
            rows=[("Label", "web-1"), ("Status", "offline")],
            row_classes={1: "alert"},
        )

        labels = list(TablePanelView(panel).compose())

        assert not labels[0].has_class("row-alert")
        assert labels[1].has_class("row-alert")


class TestTabPaneView:
    def test_active_tab_is_marked(self) -> None:
        tabs = TabPane(tabs=("Linodes", "DNS Manager"), active=1)

        labels = list(TabPaneView(tabs).compose())

        assert [label.has_class("tab-active") for label in labels] == [False, True]


class TestCanvas:
    def test_resize_reports_canvas_size(self) -> None:
        canvas = Canvas()
        posted = []
        canvas.post_message = posted.append

        canvas.on_resize(events.Resize(Size(100, 29), Size(100, 29)))

        assert len(posted) == 1
        assert isinstance(posted[0], Canvas.Resized)
        assert (posted[0].width, posted[0].height) == (100, 29)
