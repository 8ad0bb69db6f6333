"""Frame composition for the Miller-columns view.

Builds a full list of ANSI lines from ``App`` state together with the
``LayoutInfo`` that mouse hit-testing uses for the same frame. Rendering
never mutates browser state; column offsets are clamped only for display.
"""

from __future__ import annotations

import os
import stat
from datetime import datetime
from typing import TYPE_CHECKING

from ..file_model import DirectoryEntry, FileDetails, icon_for_entry
from ..navigation import DirColumn
from ..settings import Settings
from .ansi import RESET, display_width, fit_ansi_line, truncate_text
from .layout import LayoutInfo, Rect, compute_layout, visible_entry_rows
from .preview import file_preview_lines
from .settings_panel import settings_panel_lines

if TYPE_CHECKING:
    from ..runtime.app import App

PANE_SEPARATOR = "│"
TAB_SEPARATOR = "│"
FOOTER_DATE_FORMAT = "%Y-%m-%d %H:%M"
HELP_HINT = "│ ? Settings"

_TITLE_ACTIVE_SGR = "\033[1;38;5;45m"
_TITLE_SGR = "\033[1;38;5;250m"
_DIRECTORY_SGR = "\033[1;38;5;81m"
_SYMLINK_SGR = "\033[38;5;213m"
_EXECUTABLE_SGR = "\033[38;5;114m"
_DIM_SGR = "\033[2m"
_REVERSE_SGR = "\033[7m"
_HEADER_SGR = "\033[1;38;5;81m"
_ERROR_BADGE_SGR = "\033[1;38;5;203m"


def selected_with_ansi(text: str) -> str:
    """Apply reverse-video selection without discarding existing ANSI colors."""
    if not text:
        return text
    return _REVERSE_SGR + text.replace(RESET, "\033[0;7m") + RESET


def dimmed_selection(text: str) -> str:
    """Selection style for columns that do not have focus."""
    if not text:
        return text
    return "\033[2;7m" + text.replace(RESET, "\033[0;2;7m") + RESET


def build_status_line(left_text: str, width: int, right_text: str = HELP_HINT) -> str:
    usable = max(1, width - 1)
    right_width = display_width(right_text)
    if usable <= right_width:
        return right_text[-usable:]
    left = truncate_text(left_text, max(0, usable - right_width - 1))
    gap = " " * (usable - display_width(left) - right_width)
    return f"{left}{gap}{right_text}"


def build_tab_strip(names: list[str], active_index: int, width: int, no_color: bool = False) -> tuple[str, tuple[tuple[int, int], ...]]:
    """Render tab labels left to right and return their column spans."""
    parts: list[str] = []
    spans: list[tuple[int, int]] = []
    col = 0
    for index, name in enumerate(names):
        label = f" {index + 1}:{name} "
        label_width = display_width(label)
        if col + label_width > width:
            break
        spans.append((col, col + label_width))
        if index == active_index:
            parts.append(selected_with_ansi(label) if not no_color else f"[{label.strip()}]".center(label_width))
        else:
            parts.append(label)
        col += label_width
        if col < width:
            parts.append(TAB_SEPARATOR)
            col += 1
    return fit_ansi_line("".join(parts), width), tuple(spans)


def _entry_text(entry: DirectoryEntry, settings: Settings, no_color: bool) -> str:
    icon = icon_for_entry(entry, settings)
    name = entry.name + ("/" if entry.is_dir and not icon else "")
    text = f"{icon} {name}" if icon else name
    if no_color:
        return text
    if entry.is_dir:
        return f"{_DIRECTORY_SGR}{text}{RESET}"
    if entry.is_symlink:
        return f"{_SYMLINK_SGR}{text}{RESET}"
    if entry.is_executable:
        return f"{_EXECUTABLE_SGR}{text}{RESET}"
    return text


def column_footer(column: DirColumn) -> str:
    """``permissions modified (N items)`` for the column's own directory."""
    count = f"({len(column.entries)} items)"
    try:
        st = os.stat(column.path)
    except OSError:
        return f"?????????? {count}"
    modified = datetime.fromtimestamp(st.st_mtime).strftime(FOOTER_DATE_FORMAT)
    return f"{stat.filemode(st.st_mode)} {modified} {count}"


def render_column_pane(
    column: DirColumn,
    area: Rect,
    settings: Settings,
    *,
    is_active: bool,
    is_preview: bool,
    no_color: bool = False,
) -> list[str]:
    """Lines for one directory pane, each exactly ``area.width`` columns wide."""
    rows = visible_entry_rows(area)
    title_sgr = "" if no_color else (_TITLE_ACTIVE_SGR if is_active else _TITLE_SGR)
    title = truncate_text(column.name, max(0, area.width - 1))
    lines = [fit_ansi_line(f"{title_sgr}{title}{RESET if title_sgr else ''}", area.width)]

    offset = column.visible_offset(rows, follow_selection=is_preview)
    for row in range(rows):
        index = offset + row
        if index >= len(column.entries):
            lines.append(" " * area.width)
            continue
        text = fit_ansi_line(_entry_text(column.entries[index], settings, no_color), area.width)
        if index == column.selected:
            text = selected_with_ansi(text) if is_active else dimmed_selection(text)
        lines.append(text)

    footer = column_footer(column)
    lines.append(fit_ansi_line(footer if no_color else f"{_DIM_SGR}{footer}{RESET}", area.width))
    return lines[: area.height]


def render_file_pane(details: FileDetails, area: Rect, *, no_color: bool = False, style: str = "monokai") -> list[str]:
    title_sgr = "" if no_color else _TITLE_SGR
    lines = [fit_ansi_line(f"{title_sgr}{truncate_text(details.name, area.width)}{RESET if title_sgr else ''}", area.width)]
    for text in file_preview_lines(details, no_color=no_color, style=style):
        if len(lines) >= area.height:
            break
        lines.append(fit_ansi_line(text, area.width))
    while len(lines) < area.height:
        lines.append(" " * area.width)
    return lines


def _with_separator(lines: list[str], area: Rect, is_last: bool) -> list[str]:
    if is_last or area.width <= 1:
        return lines
    return [fit_ansi_line(line, area.width - 1) + PANE_SEPARATOR for line in lines]


def error_log_panel_lines(app: App, no_color: bool = False) -> list[str]:
    error_log = app.error_log
    header = f"LOG ({len(error_log.entries)} entries)  Up/Down select  Enter expand  Ctrl+C clear  Esc close"
    lines = [header if no_color else f"{_HEADER_SGR}{header}{RESET}"]
    if not error_log.entries:
        lines.append("  (no entries)")
        return lines
    for index, entry in enumerate(error_log.entries):
        marker = "▶ " if index == error_log.selected_index else "  "
        text = marker + entry.format_for_display().splitlines()[0]
        if index == error_log.selected_index and not no_color:
            text = selected_with_ansi(text)
        lines.append(text)
        if error_log.is_entry_expanded(index):
            lines.extend(f"      {line}" for line in entry.message.splitlines())
    return lines


def _overlay_rows(panel: list[str], available: int, focus: int | None = None) -> list[str]:
    """Fit a panel into ``available`` rows, keeping the header and ``focus`` row visible."""
    if available <= 0:
        return []
    if len(panel) <= available:
        return panel
    header, body = panel[0], panel[1:]
    visible = available - 1
    start = 0
    if focus is not None and focus >= visible:
        start = focus - visible + 1
    return [header] + body[start : start + visible]


def _status_left(app: App) -> str:
    browser = app.browser
    left = str(browser.current_path)
    if browser.search_string:
        left += f"  search: {browser.search_string}"
    return left


def _status_right(app: App, no_color: bool) -> str:
    unread = app.error_log.unread_count
    if not unread:
        return HELP_HINT
    badge = f"{unread} new log"
    if not no_color and app.error_log.has_errors():
        badge = f"{_ERROR_BADGE_SGR}{badge}{RESET}"
    return f"{badge} (Ctrl+E) {HELP_HINT}"


def render_screen(
    app: App,
    width: int,
    height: int,
    *,
    no_color: bool = False,
    style: str = "monokai",
) -> tuple[list[str], LayoutInfo]:
    """Compose one frame and the layout it was drawn with."""
    browser = app.browser
    settings = app.settings
    manager = app.tab_manager

    tab_line, tab_spans = build_tab_strip([tab.name for tab in manager.tabs], manager.active_index, max(1, width), no_color)
    pane_count = len(browser.columns) + (1 if browser.preview is not None else 0)
    layout = compute_layout(width, height, pane_count, tab_spans)
    area_width = layout.width

    panes: list[list[str]] = []
    last_index = len(layout.column_areas) - 1
    for index, area in enumerate(layout.column_areas):
        if index < len(browser.columns):
            column = browser.columns[index]
            lines = render_column_pane(
                column,
                area,
                settings,
                is_active=index == len(browser.columns) - 1,
                is_preview=False,
                no_color=no_color,
            )
        elif isinstance(browser.preview, DirColumn):
            lines = render_column_pane(browser.preview, area, settings, is_active=False, is_preview=True, no_color=no_color)
        else:
            lines = render_file_pane(browser.preview, area, no_color=no_color, style=style)
        panes.append(_with_separator(lines, area, index == last_index))

    body_height = layout.browser_area.height
    body: list[str] = []
    for row in range(body_height):
        body.append("".join(pane[row] if row < len(pane) else "" for pane in panes))
    if not panes:
        body = [" " * area_width for _ in range(body_height)]

    overlay: list[str] = []
    if app.error_log.is_visible:
        panel = error_log_panel_lines(app, no_color)
        overlay = _overlay_rows(panel, max(0, body_height // 2), app.error_log.selected_index)
    elif app.settings_panel.is_open:
        panel, focus = settings_panel_lines(app.settings_panel, app.settings, app.registry, no_color)
        overlay = _overlay_rows(panel, body_height, None if focus is None else focus - 1)
    if overlay:
        start = body_height - len(overlay)
        for offset, text in enumerate(overlay):
            body[start + offset] = fit_ansi_line(text, area_width)

    status = build_status_line(_status_left(app), area_width, _status_right(app, no_color))
    frame = [tab_line] + body + [fit_ansi_line(status, area_width)]
    return frame[: layout.height], layout


__all__ = [
    "PANE_SEPARATOR",
    "selected_with_ansi",
    "build_status_line",
    "build_tab_strip",
    "column_footer",
    "render_column_pane",
    "render_file_pane",
    "settings_panel_lines",
    "error_log_panel_lines",
    "render_screen",
]
