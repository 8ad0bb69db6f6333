"""Screen geometry: tab strip, column panes, and status row.

Pure arithmetic over terminal size; the renderer paints into these rects and
the application uses the same ``LayoutInfo`` for mouse hit-testing.
"""

from __future__ import annotations

from dataclasses import dataclass, field

TAB_STRIP_ROWS = 1
STATUS_ROWS = 1
PANE_TITLE_ROWS = 1
PANE_FOOTER_ROWS = 1


@dataclass(frozen=True)
class Rect:
    """Zero-based cell rectangle."""

    x: int
    y: int
    width: int
    height: int

    def contains(self, col: int, row: int) -> bool:
        return self.x <= col < self.x + self.width and self.y <= row < self.y + self.height


@dataclass(frozen=True)
class LayoutInfo:
    """Areas computed for the most recent frame."""

    width: int = 0
    height: int = 0
    tab_area: Rect = Rect(0, 0, 0, 0)
    browser_area: Rect = Rect(0, 0, 0, 0)
    status_area: Rect = Rect(0, 0, 0, 0)
    column_areas: tuple[Rect, ...] = ()
    tab_spans: tuple[tuple[int, int], ...] = field(default=())

    def column_at(self, col: int, row: int) -> int | None:
        """Return the pane index under ``(col, row)`` (preview pane included)."""
        if not self.browser_area.contains(col, row):
            return None
        for index, area in enumerate(self.column_areas):
            if area.contains(col, row):
                return index
        return None

    def tab_at(self, col: int, row: int) -> int | None:
        if not self.tab_area.contains(col, row):
            return None
        for index, (start, end) in enumerate(self.tab_spans):
            if start <= col < end:
                return index
        return None


def visible_entry_rows(area: Rect) -> int:
    """Rows available for listing entries inside one pane."""
    return max(0, area.height - PANE_TITLE_ROWS - PANE_FOOTER_ROWS)


def entry_row_at(area: Rect, row: int) -> int | None:
    """Map a screen row to a zero-based visible entry row inside ``area``."""
    relative = row - area.y - PANE_TITLE_ROWS
    if 0 <= relative < visible_entry_rows(area):
        return relative
    return None


def split_columns(browser_area: Rect, pane_count: int) -> tuple[Rect, ...]:
    """Split ``browser_area`` evenly into ``pane_count`` side-by-side panes.

    Integer remainder columns go to the rightmost pane.
    """
    if pane_count <= 0 or browser_area.width <= 0:
        return ()
    base = browser_area.width // pane_count
    remainder = browser_area.width - base * pane_count
    areas: list[Rect] = []
    x = browser_area.x
    for index in range(pane_count):
        width = base + (remainder if index == pane_count - 1 else 0)
        areas.append(Rect(x, browser_area.y, width, browser_area.height))
        x += width
    return tuple(areas)


def compute_layout(
    width: int,
    height: int,
    pane_count: int,
    tab_spans: tuple[tuple[int, int], ...] = (),
) -> LayoutInfo:
    """Compute frame areas for a ``width`` x ``height`` terminal."""
    width = max(1, width)
    height = max(1, height)
    tab_area = Rect(0, 0, width, min(TAB_STRIP_ROWS, height))
    browser_height = max(0, height - TAB_STRIP_ROWS - STATUS_ROWS)
    browser_area = Rect(0, TAB_STRIP_ROWS, width, browser_height)
    status_area = Rect(0, max(0, height - STATUS_ROWS), width, min(STATUS_ROWS, height))
    return LayoutInfo(
        width=width,
        height=height,
        tab_area=tab_area,
        browser_area=browser_area,
        status_area=status_area,
        column_areas=split_columns(browser_area, pane_count),
        tab_spans=tab_spans,
    )


__all__ = [
    "TAB_STRIP_ROWS",
    "STATUS_ROWS",
    "PANE_TITLE_ROWS",
    "PANE_FOOTER_ROWS",
    "Rect",
    "LayoutInfo",
    "visible_entry_rows",
    "entry_row_at",
    "split_columns",
    "compute_layout",
]
