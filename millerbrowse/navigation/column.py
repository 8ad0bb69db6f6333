"""A single directory column: entries, selection, and scroll offset."""

from __future__ import annotations

import enum
import os
from dataclasses import dataclass, field
from pathlib import Path

from ..errors import SecurityRejected
from ..file_model import DirectoryEntry, is_safe_path, list_directory
from ..settings import Settings


class ScrollDirection(enum.Enum):
    BACKWARD = -1
    FORWARD = 1


def absolute_path(path: Path) -> Path:
    """Return an absolute, lexically normalized path without resolving symlinks."""
    return Path(os.path.abspath(path))


@dataclass
class DirColumn:
    """One directory listing in the column stack.

    ``selected`` is ``None`` exactly when ``entries`` is empty; otherwise it is
    a valid index. ``offset`` is the first visible row and moves independently
    of the selection for wheel scrolling.
    """

    path: Path
    entries: list[DirectoryEntry] = field(default_factory=list)
    selected: int | None = None
    offset: int = 0

    @classmethod
    def create(cls, path: Path, initial_selection: int, settings: Settings) -> DirColumn:
        """Read ``path`` into a new column selecting ``initial_selection`` (clamped).

        Raises ``SecurityRejected`` before touching the filesystem when the
        path fails the safety predicate, and ``NotReadable`` when listing fails.
        """
        path = absolute_path(path)
        if not is_safe_path(path):
            raise SecurityRejected(path)
        entries = list_directory(path, settings)
        column = cls(path=path, entries=entries)
        column.select(initial_selection)
        return column

    @property
    def name(self) -> str:
        """Directory display name; the filesystem root is shown as its full path."""
        return self.path.name or str(self.path)

    def selected_entry(self) -> DirectoryEntry | None:
        if self.selected is None:
            return None
        return self.entries[self.selected]

    def select(self, index: int) -> None:
        """Select ``index`` clamped into range, or nothing when empty."""
        if not self.entries:
            self.selected = None
            return
        self.selected = max(0, min(index, len(self.entries) - 1))

    def index_of(self, name: str) -> int | None:
        for index, entry in enumerate(self.entries):
            if entry.name == name:
                return index
        return None

    def reload(self, settings: Settings) -> None:
        """Re-list in place, clamping an out-of-range selection.

        On failure the column is left untouched and ``NotReadable`` propagates.
        """
        entries = list_directory(self.path, settings)
        self.entries = entries
        if not entries:
            self.selected = None
        elif self.selected is None:
            self.selected = 0
        elif self.selected >= len(entries):
            self.selected = len(entries) - 1
        self.offset = max(0, min(self.offset, len(entries) - 1))

    def select_previous(self) -> None:
        if not self.entries:
            return
        if self.selected is None or self.selected == 0:
            self.selected = len(self.entries) - 1
        else:
            self.selected -= 1

    def select_next(self) -> None:
        if not self.entries:
            return
        if self.selected is None or self.selected >= len(self.entries) - 1:
            self.selected = 0
        else:
            self.selected += 1

    def visible_offset(self, rows: int, *, follow_selection: bool = False) -> int:
        """First row shown in a pane of ``rows`` entry rows.

        The stored offset is clamped so the pane is never scrolled past the
        last entry; ``follow_selection`` additionally scrolls the selection
        into view. The column itself is not modified.
        """
        if rows <= 0 or not self.entries:
            return 0
        offset = max(0, min(self.offset, len(self.entries) - rows))
        if follow_selection and self.selected is not None:
            if self.selected < offset:
                offset = self.selected
            elif self.selected >= offset + rows:
                offset = self.selected - rows + 1
        return offset

    def scroll(self, direction: ScrollDirection, view_height: int) -> None:
        """Move the scroll offset one row without changing the selection."""
        max_offset = max(0, len(self.entries) - max(0, view_height))
        self.offset = max(0, min(max_offset, self.offset + direction.value))


__all__ = ["DirColumn", "ScrollDirection", "absolute_path"]
