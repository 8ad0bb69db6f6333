"""Application controller: routes key/mouse tokens into tab and browser operations.

Hard failures raised by navigation commands are logged here and never
propagate to the event loop.
"""

from __future__ import annotations

import logging
from pathlib import Path

from ..error_log import ErrorLog, ErrorLogHandler
from ..errors import BrowseError
from ..input.commands import Command, CommandAction, CommandRegistry
from ..navigation import Browser, DirColumn, ScrollDirection, TabManager
from ..render.layout import LayoutInfo, entry_row_at, visible_entry_rows
from ..settings import Settings
from .settings_panel import SettingsPanel

logger = logging.getLogger(__name__)

PACKAGE_LOGGER_NAME = "millerbrowse"

_SELECTION_ACTIONS = frozenset(
    {
        CommandAction.NAVIGATE_UP,
        CommandAction.NAVIGATE_DOWN,
        CommandAction.NAVIGATE_LEFT,
        CommandAction.NAVIGATE_RIGHT,
        CommandAction.JUMP_TO_FIRST,
        CommandAction.JUMP_TO_LAST,
        CommandAction.JUMP_UP_BY_10,
        CommandAction.JUMP_DOWN_BY_10,
        CommandAction.SEARCH_CHAR,
        CommandAction.NEXT_TAB,
        CommandAction.PREV_TAB,
        CommandAction.NEW_TAB,
        CommandAction.CLOSE_TAB,
    }
)


def parse_mouse_col_row(mouse_key: str) -> tuple[int | None, int | None]:
    """Parse ``MOUSE_*:col:row`` key tokens into integer coordinates."""
    parts = mouse_key.split(":")
    if len(parts) < 3:
        return None, None
    try:
        return int(parts[1]), int(parts[2])
    except ValueError:
        return None, None


class App:
    """Top-level interactive state shared by the event loop and the renderer."""

    def __init__(
        self,
        start_path: Path,
        settings: Settings,
        *,
        error_log: ErrorLog | None = None,
        registry: CommandRegistry | None = None,
        **browser_options,
    ) -> None:
        self.settings = settings
        self.error_log = error_log if error_log is not None else ErrorLog()
        self.registry = registry if registry is not None else CommandRegistry()
        self.tab_manager = TabManager(start_path, settings, **browser_options)
        self.layout_info = LayoutInfo()
        self.settings_panel = SettingsPanel()
        self.should_quit = False
        self._log_handler: ErrorLogHandler | None = None

    @property
    def browser(self) -> Browser:
        return self.tab_manager.active_tab.browser

    def attach_log_handler(self) -> ErrorLogHandler:
        """Route ``millerbrowse.*`` log records into the in-app error log."""
        if self._log_handler is None:
            self._log_handler = ErrorLogHandler(self.error_log)
            package_logger = logging.getLogger(PACKAGE_LOGGER_NAME)
            package_logger.addHandler(self._log_handler)
            if package_logger.level == logging.NOTSET or package_logger.level > logging.INFO:
                package_logger.setLevel(logging.INFO)
        return self._log_handler

    def detach_log_handler(self) -> None:
        if self._log_handler is not None:
            logging.getLogger(PACKAGE_LOGGER_NAME).removeHandler(self._log_handler)
            self._log_handler = None

    def set_layout_info(self, layout_info: LayoutInfo) -> None:
        self.layout_info = layout_info

    def handle_key(self, key: str) -> None:
        """Dispatch one decoded key token."""
        if not key:
            return
        if self.settings_panel.is_open:
            if self.settings_panel.handle_key(key, self.settings):
                self.tab_manager.reload_all_tabs(self.settings)
            return
        if key.startswith("MOUSE"):
            self.handle_mouse(key)
            return
        if self.error_log.is_visible and self._handle_error_log_key(key):
            return
        command = self.registry.find_command(key)
        if command is None:
            return
        self.execute_command(command, key)

    def _handle_error_log_key(self, key: str) -> bool:
        if key in {"ESC", "q"}:
            self.error_log.hide()
        elif key == "UP":
            self.error_log.select_previous()
        elif key == "DOWN":
            self.error_log.select_next()
        elif key == "HOME":
            self.error_log.select_first()
        elif key == "END":
            self.error_log.select_last()
        elif key == "CTRL_C":
            self.error_log.clear()
        elif key == "ENTER":
            self.error_log.toggle_selected_expanded()
        else:
            return False
        return True

    def execute_command(self, command: Command, key: str) -> None:
        action = command.action
        browser = self.browser
        settings = self.settings

        if action is CommandAction.QUIT:
            self.should_quit = True
        elif action is CommandAction.SHOW_SETTINGS:
            self.settings_panel.open()
        elif action is CommandAction.SHOW_ERROR_LOG:
            self.error_log.toggle_visibility()
        elif action is CommandAction.NEW_TAB:
            try:
                self.tab_manager.create_tab(settings)
            except BrowseError as exc:
                logger.error("Failed to open tab: %s", exc, extra={"context": "Tabs"})
        elif action is CommandAction.CLOSE_TAB:
            if not self.tab_manager.close_current_tab():
                logger.warning("Cannot close the last tab", extra={"context": "Tabs"})
        elif action is CommandAction.NEXT_TAB:
            self.tab_manager.next_tab()
        elif action is CommandAction.PREV_TAB:
            self.tab_manager.prev_tab()
        elif action is CommandAction.CLEAR_SEARCH:
            browser.clear_search()
        elif action is CommandAction.NAVIGATE_UP:
            browser.select_previous()
            browser.update_preview(settings)
        elif action is CommandAction.NAVIGATE_DOWN:
            browser.select_next()
            browser.update_preview(settings)
        elif action is CommandAction.NAVIGATE_LEFT:
            try:
                browser.navigate_left(settings)
            except BrowseError as exc:
                logger.error("Cannot open parent directory: %s", exc, extra={"context": "Navigation"})
            self.tab_manager.update_active_tab_name()
        elif action is CommandAction.NAVIGATE_RIGHT:
            try:
                browser.navigate_right(settings)
            except BrowseError as exc:
                logger.error("Cannot open directory: %s", exc, extra={"context": "Navigation"})
            self.tab_manager.update_active_tab_name()
        elif action is CommandAction.SET_ANCHOR:
            browser.set_anchor()
        elif action is CommandAction.JUMP_TO_FIRST:
            browser.jump_to_first()
            browser.update_preview(settings)
        elif action is CommandAction.JUMP_TO_LAST:
            browser.jump_to_last()
            browser.update_preview(settings)
        elif action is CommandAction.JUMP_UP_BY_10:
            browser.jump_up_by_10()
            browser.update_preview(settings)
        elif action is CommandAction.JUMP_DOWN_BY_10:
            browser.jump_down_by_10()
            browser.update_preview(settings)
        elif action is CommandAction.TOGGLE_HIDDEN:
            settings.show_hidden_files = not settings.show_hidden_files
            self.tab_manager.reload_all_tabs(settings)
        elif action is CommandAction.TOGGLE_ICONS:
            settings.show_icons = not settings.show_icons
        elif action is CommandAction.SEARCH_CHAR:
            browser.handle_search_char(key)
            browser.update_preview(settings)

        if action in _SELECTION_ACTIONS:
            self.reveal_selection()

    def _pane_rows(self, index: int) -> int | None:
        areas = self.layout_info.column_areas
        if index >= len(areas):
            return None
        return visible_entry_rows(areas[index])

    def reveal_selection(self) -> None:
        """Scroll the active column so its selection sits inside the last known pane."""
        browser = self.browser
        rows = self._pane_rows(len(browser.columns) - 1)
        if not rows:
            return
        column = browser.active_column
        if column.selected is None:
            column.offset = 0
            return
        if column.selected < column.offset:
            column.offset = column.selected
        elif column.selected >= column.offset + rows:
            column.offset = column.selected - rows + 1

    def handle_mouse(self, key: str) -> None:
        """Handle wheel scrolling over any column and left clicks on rows or tabs."""
        col, row = parse_mouse_col_row(key)
        if col is None or row is None:
            return
        # Terminal coordinates are 1-based.
        col -= 1
        row -= 1

        if key.startswith("MOUSE_WHEEL_"):
            direction = ScrollDirection.BACKWARD if key.startswith("MOUSE_WHEEL_UP") else ScrollDirection.FORWARD
            self._scroll_column_at(col, row, direction)
        elif key.startswith("MOUSE_LEFT_DOWN"):
            tab_index = self.layout_info.tab_at(col, row)
            if tab_index is not None and tab_index < self.tab_manager.tab_count:
                self.tab_manager.active_index = tab_index
                return
            self._click_column_at(col, row)

    def _scroll_column_at(self, col: int, row: int, direction: ScrollDirection) -> None:
        index = self.layout_info.column_at(col, row)
        browser = self.browser
        if index is None or index >= len(browser.columns):
            return
        rows = self._pane_rows(index) or 0
        browser.columns[index].scroll(direction, rows)

    def _click_column_at(self, col: int, row: int) -> None:
        index = self.layout_info.column_at(col, row)
        if index is None:
            return
        area = self.layout_info.column_areas[index]
        clicked_row = entry_row_at(area, row)
        if clicked_row is None:
            return

        browser = self.browser
        rows = visible_entry_rows(area)
        entering_preview = index == len(browser.columns)
        if index > len(browser.columns) or (entering_preview and not isinstance(browser.preview, DirColumn)):
            return
        # The preview pane is drawn scrolled to its selection; keep that view once it is entered.
        preview_offset = browser.preview.visible_offset(rows, follow_selection=True) if entering_preview else 0

        try:
            activated = browser.activate_column(index, self.settings)
        except BrowseError as exc:
            logger.error("Failed to activate column: %s", exc, extra={"context": "Mouse Event"})
            self.tab_manager.update_active_tab_name()
            return
        self.tab_manager.update_active_tab_name()
        if not activated:
            return

        target = browser.active_column
        if entering_preview:
            target.offset = preview_offset
        item_index = target.visible_offset(rows) + clicked_row
        if item_index < len(target.entries):
            target.select(item_index)
        browser.update_preview(self.settings)


__all__ = ["App", "PACKAGE_LOGGER_NAME", "parse_mouse_col_row"]
