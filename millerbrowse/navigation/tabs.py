"""Tabs: independent browsing sessions over one shared settings value."""

from __future__ import annotations

import logging
from pathlib import Path

from ..settings import Settings
from .browser import Browser

logger = logging.getLogger(__name__)


class Tab:
    """One ``Browser`` plus its cached tab-strip label."""

    def __init__(self, path: Path, settings: Settings, **browser_options) -> None:
        self.browser = Browser(path, settings, **browser_options)
        self.root_path = self.browser.current_path
        self.name = ""
        self.update_name()

    def update_name(self) -> None:
        """Recompute the label from the active column's directory name."""
        self.name = self.browser.active_column.name


class TabManager:
    """Ordered tabs with an active index; never fewer than one tab."""

    def __init__(self, initial_path: Path, settings: Settings, **browser_options) -> None:
        self._browser_options = browser_options
        self.tabs: list[Tab] = [Tab(initial_path, settings, **browser_options)]
        self.active_index = 0

    @property
    def active_tab(self) -> Tab:
        return self.tabs[self.active_index]

    @property
    def tab_count(self) -> int:
        return len(self.tabs)

    def create_tab(self, settings: Settings) -> Tab:
        """Open a tab at the active tab's current directory and activate it.

        Raises when that directory can no longer be listed; the tab list is
        unchanged in that case.
        """
        tab = Tab(self.active_tab.browser.current_path, settings, **self._browser_options)
        self.tabs.append(tab)
        self.active_index = len(self.tabs) - 1
        return tab

    def close_current_tab(self) -> bool:
        """Close the active tab unless it is the last one."""
        if len(self.tabs) <= 1:
            return False
        del self.tabs[self.active_index]
        if self.active_index >= len(self.tabs):
            self.active_index = len(self.tabs) - 1
        return True

    def next_tab(self) -> None:
        if len(self.tabs) > 1:
            self.active_index = (self.active_index + 1) % len(self.tabs)

    def prev_tab(self) -> None:
        if len(self.tabs) > 1:
            self.active_index = (self.active_index - 1) % len(self.tabs)

    def update_active_tab_name(self) -> None:
        self.active_tab.update_name()

    def reload_all_tabs(self, settings: Settings) -> None:
        """Reload every tab's columns and preview; one tab failing never stops the sweep."""
        for tab in self.tabs:
            tab.browser.reload_all_columns(settings)
            tab.update_name()
        logger.info("Reloaded %d tab(s)", len(self.tabs), extra={"context": "Settings"})


__all__ = ["Tab", "TabManager"]
