"""Visual tree for the TUI.

Views build one tree of these plain objects in ``initialize`` and mutate it
in place for the rest of their life. Renderers read a snapshot of it; they
never hold on to the live tree.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Union


@dataclass
class ListPanel:
    """Scrollable list with a selection cursor."""

    title: str = ""
    rows: list[str] = field(default_factory=list)
    row_classes: list[str] = field(default_factory=list)
    selected: int = 0
    page_size: int = 10

    def set_rows(self, rows: list[str], row_classes: list[str] | None = None) -> None:
        """Replace all rows, keeping the cursor in bounds."""
        self.rows = list(rows)
        self.row_classes = list(row_classes) if row_classes is not None else [""] * len(rows)
        self._clamp()

    def _clamp(self) -> None:
        if not self.rows:
            self.selected = 0
        else:
            self.selected = max(0, min(self.selected, len(self.rows) - 1))

    def scroll_amount(self, amount: int) -> None:
        self.selected += amount
        self._clamp()

    def scroll_down(self) -> None:
        self.scroll_amount(1)

    def scroll_up(self) -> None:
        self.scroll_amount(-1)

    def scroll_half_page_down(self) -> None:
        self.scroll_amount(max(1, self.page_size // 2))

    def scroll_half_page_up(self) -> None:
        self.scroll_amount(-max(1, self.page_size // 2))

    def scroll_page_down(self) -> None:
        self.scroll_amount(max(1, self.page_size))

    def scroll_page_up(self) -> None:
        self.scroll_amount(-max(1, self.page_size))

    def scroll_top(self) -> None:
        self.selected = 0

    def scroll_bottom(self) -> None:
        self.selected = max(0, len(self.rows) - 1)


@dataclass
class TablePanel:
    """Two-column key/value table with optional per-row styling."""

    title: str = ""
    rows: list[tuple[str, str]] = field(default_factory=list)
    row_classes: dict[int, str] = field(default_factory=dict)
    key_width: int = 15


@dataclass
class Paragraph:
    title: str = ""
    text: str = ""


@dataclass
class TabPane:
    """Row of tab labels with one active tab."""

    tabs: tuple[str, ...] = ()
    active: int = 0

    def focus_left(self) -> None:
        if self.active > 0:
            self.active -= 1

    def focus_right(self) -> None:
        if self.active < len(self.tabs) - 1:
            self.active += 1


Panel = Union[ListPanel, TablePanel, Paragraph, TabPane]


@dataclass
class GridCol:
    ratio: float
    panel: Panel


@dataclass
class GridRow:
    ratio: float
    cols: list[GridCol]


@dataclass
class Grid:
    """Rows of columns sized by ratio of the terminal area."""

    rows: list[GridRow] = field(default_factory=list)
    width: int = 80
    height: int = 24

    def set_rect(self, x1: int, y1: int, x2: int, y2: int) -> None:
        """Lay the grid out over a new area."""
        self.width = max(0, x2 - x1)
        self.height = max(0, y2 - y1)
        for row in self.rows:
            # two lines of border plus one title line
            inner = int(self.height * row.ratio) - 3
            for col in row.cols:
                if isinstance(col.panel, ListPanel):
                    col.panel.page_size = max(1, inner)

    def panels(self) -> list[Panel]:
        return [col.panel for row in self.rows for col in row.cols]

    def snapshot(self) -> "Grid":
        """Deep copy for renderers; take it while holding the view lock."""
        return copy.deepcopy(self)
