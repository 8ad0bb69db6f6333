"""Column/preview navigation state machine.

A ``Browser`` owns a non-empty stack of ``DirColumn`` values where each
column is the directory selected in the column to its left. Transitions come
in two kinds:

- hard-failing: ``navigate_left`` (ascend branch) raises ``NotReadable`` and
  leaves the browser untouched; ``SecurityRejected`` always propagates.
- best-effort: everything else catches ``NotReadable`` at the point of use and
  reports "no visible change" (``False`` / ``None``).
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from pathlib import Path

from ..errors import BrowseError, NotReadable, SecurityRejected
from ..file_model import FileDetails
from ..settings import MAX_COLUMNS_DISPLAY, SEARCH_TIMEOUT_SECONDS, Settings
from .column import DirColumn

logger = logging.getLogger(__name__)

Preview = DirColumn | FileDetails

JUMP_STEP = 10


class Browser:
    """Navigation state for one tab."""

    def __init__(
        self,
        initial_dir: Path,
        settings: Settings,
        *,
        max_columns: int = MAX_COLUMNS_DISPLAY,
        search_timeout: float = SEARCH_TIMEOUT_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Open ``initial_dir`` as the single anchor column.

        Raises ``SecurityRejected`` / ``NotReadable`` when it cannot be listed.
        """
        self.columns: list[DirColumn] = [DirColumn.create(initial_dir, 0, settings)]
        self.preview: Preview | None = None
        self.selection_cache: dict[Path, int] = {}
        self.search_string = ""
        self.last_input_time: float | None = None
        self.max_columns = max(1, max_columns)
        self.search_timeout = search_timeout
        self._clock = clock
        self.update_preview(settings)

    @property
    def active_column(self) -> DirColumn:
        return self.columns[-1]

    @property
    def current_path(self) -> Path:
        return self.active_column.path

    def _cache_active_selection(self) -> None:
        column = self.active_column
        if column.selected is not None:
            self.selection_cache[column.path] = column.selected

    def _cached_selection(self, path: Path) -> int:
        return self.selection_cache.get(path, 0)

    def navigate_right(self, settings: Settings) -> bool:
        """Enter the selected directory, pushing a new column.

        Returns ``True`` when a column was pushed. An unreadable target leaves
        the stack unchanged; a rejected target also re-raises
        ``SecurityRejected`` after the preview is refreshed.
        """
        entry = self.active_column.selected_entry()
        if entry is None or not entry.is_dir:
            return False

        self._cache_active_selection()
        target = entry.path
        try:
            new_column = DirColumn.create(target, self._cached_selection(target), settings)
        except SecurityRejected:
            self.update_preview(settings)
            raise
        except NotReadable as exc:
            logger.info("Cannot enter directory: %s", exc, extra={"context": "Navigation"})
            self.update_preview(settings)
            return False

        if len(self.columns) >= self.max_columns:
            del self.columns[0]
        self.columns.append(new_column)
        self.update_preview(settings)
        return True

    def navigate_left(self, settings: Settings) -> None:
        """Leave the active directory.

        With several columns the rightmost one is popped without I/O. With a
        single column the parent directory replaces it, selecting the
        departing directory. If the parent cannot be read, ``NotReadable`` or
        ``SecurityRejected`` propagates and nothing (columns, selection cache,
        preview) is modified.
        """
        if len(self.columns) > 1:
            self._cache_active_selection()
            self.columns.pop()
            self.update_preview(settings)
            return

        current = self.active_column
        parent_path = current.path.parent
        if parent_path == current.path:
            return

        parent_column = DirColumn.create(parent_path, 0, settings)
        departing_index = parent_column.index_of(current.path.name)
        parent_column.select(departing_index if departing_index is not None else 0)

        self._cache_active_selection()
        self.columns = [parent_column]
        self.update_preview(settings)

    def activate_column(self, index: int, settings: Settings) -> bool:
        """Make column ``index`` active by composing single-step transitions.

        ``index == len(columns)`` enters the previewed directory. Smaller
        indices pop columns one at a time, at most once per stacked column;
        the first failure propagates. Returns ``False`` for out-of-range
        indices or when entering the previewed directory did not push.
        """
        if index < 0 or index > len(self.columns):
            return False
        if index == len(self.columns):
            return self.navigate_right(settings)

        for _step in range(len(self.columns) - 1 - index):
            self.navigate_left(settings)
        return True

    def set_anchor(self) -> None:
        """Drop all ancestor columns, keeping the active column and its selection."""
        self.columns = [self.active_column]

    def handle_search_char(self, char: str) -> bool:
        """Extend the type-ahead buffer and select the first matching entry.

        The buffer resets when more than ``search_timeout`` seconds passed since
        the previous keystroke. Returns whether a match was selected.
        """
        now = self._clock()
        if self.last_input_time is None or now - self.last_input_time > self.search_timeout:
            self.search_string = ""
        self.search_string += char
        self.last_input_time = now

        needle = self.search_string.lower()
        column = self.active_column
        for index, entry in enumerate(column.entries):
            if entry.name.lower().startswith(needle):
                column.selected = index
                return True
        return False

    def clear_search(self) -> None:
        self.search_string = ""
        self.last_input_time = None

    def select_previous(self) -> None:
        self.active_column.select_previous()

    def select_next(self) -> None:
        self.active_column.select_next()

    def jump_to_first(self) -> None:
        column = self.active_column
        if column.entries:
            column.select(0)

    def jump_to_last(self) -> None:
        column = self.active_column
        if column.entries:
            column.select(len(column.entries) - 1)

    def jump_up_by_10(self) -> None:
        column = self.active_column
        if column.selected is not None:
            column.select(column.selected - JUMP_STEP)

    def jump_down_by_10(self) -> None:
        column = self.active_column
        if column.selected is not None:
            column.select(column.selected + JUMP_STEP)

    def update_preview(self, settings: Settings) -> None:
        """Recompute the preview for the active selection; failures yield ``None``."""
        entry = self.active_column.selected_entry()
        if entry is None:
            self.preview = None
            return
        try:
            if entry.is_dir:
                self.preview = DirColumn.create(entry.path, self._cached_selection(entry.path), settings)
            else:
                self.preview = FileDetails.from_path(entry.path, settings)
        except (BrowseError, OSError):
            self.preview = None

    def reload_all_columns(self, settings: Settings) -> None:
        """Reload every column best-effort, then refresh the preview."""
        for column in self.columns:
            try:
                column.reload(settings)
            except NotReadable as exc:
                logger.error("Failed to reload column: %s", exc, extra={"context": "Reload"})
        self.update_preview(settings)


__all__ = ["Browser", "Preview", "JUMP_STEP"]
