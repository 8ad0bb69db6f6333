"""In-memory error log shown in the UI, fed by the ``logging`` module.

``ErrorLogHandler`` is attached to the ``millerbrowse`` logger by the
application so every warning/error raised anywhere in the package also shows
up in the log panel. Records may carry ``extra={"context": ...}``.
"""

from __future__ import annotations

import enum
import logging
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime

MAX_ERROR_ENTRIES = 1000


class ErrorSeverity(enum.Enum):
    INFO = "INFO"
    WARNING = "WARN"
    ERROR = "ERROR"

    @property
    def display_prefix(self) -> str:
        return _SEVERITY_PREFIXES[self]

    @property
    def display_name(self) -> str:
        return self.value

    @classmethod
    def from_level(cls, levelno: int) -> ErrorSeverity:
        if levelno >= logging.ERROR:
            return cls.ERROR
        if levelno >= logging.WARNING:
            return cls.WARNING
        return cls.INFO


_SEVERITY_PREFIXES = {
    ErrorSeverity.INFO: "ℹ️",
    ErrorSeverity.WARNING: "⚠️",
    ErrorSeverity.ERROR: "❌",
}


@dataclass(frozen=True)
class ErrorEntry:
    message: str
    severity: ErrorSeverity
    context: str | None = None
    timestamp: datetime = field(default_factory=datetime.now)

    def format_for_display(self) -> str:
        context = f" [{self.context}]" if self.context else ""
        return (
            f"{self.severity.display_prefix} {self.timestamp:%H:%M:%S} "
            f"{self.severity.display_name}{context}: {self.message}"
        )


class ErrorLog:
    """Bounded list of entries with unread count, selection, and expansion state."""

    def __init__(self, max_entries: int = MAX_ERROR_ENTRIES) -> None:
        self.entries: deque[ErrorEntry] = deque(maxlen=max(1, max_entries))
        self.unread_count = 0
        self.selected_index = 0
        self.is_visible = False
        self.expanded: set[int] = set()

    def add_entry(self, entry: ErrorEntry) -> None:
        if len(self.entries) == self.entries.maxlen:
            # Indices shift left when the oldest entry falls off.
            self.expanded = {index - 1 for index in self.expanded if index > 0}
            self.selected_index = max(0, self.selected_index - 1)
        self.entries.append(entry)
        self.unread_count += 1

    def error(self, message: str, context: str | None = None) -> None:
        self.add_entry(ErrorEntry(message, ErrorSeverity.ERROR, context))

    def warning(self, message: str, context: str | None = None) -> None:
        self.add_entry(ErrorEntry(message, ErrorSeverity.WARNING, context))

    def info(self, message: str, context: str | None = None) -> None:
        self.add_entry(ErrorEntry(message, ErrorSeverity.INFO, context))

    def has_errors(self) -> bool:
        return any(entry.severity is ErrorSeverity.ERROR for entry in self.entries)

    def toggle_visibility(self) -> None:
        """Show/hide the panel; showing marks everything read and selects the newest entry."""
        self.is_visible = not self.is_visible
        if self.is_visible:
            self.unread_count = 0
            if self.entries:
                self.selected_index = len(self.entries) - 1

    def hide(self) -> None:
        self.is_visible = False

    def select_previous(self) -> None:
        if self.entries and self.selected_index > 0:
            self.selected_index -= 1

    def select_next(self) -> None:
        if self.entries and self.selected_index < len(self.entries) - 1:
            self.selected_index += 1

    def select_first(self) -> None:
        if self.entries:
            self.selected_index = 0

    def select_last(self) -> None:
        if self.entries:
            self.selected_index = len(self.entries) - 1

    def toggle_selected_expanded(self) -> None:
        if not self.entries:
            return
        if self.selected_index in self.expanded:
            self.expanded.discard(self.selected_index)
        else:
            self.expanded.add(self.selected_index)

    def is_entry_expanded(self, index: int) -> bool:
        return index in self.expanded

    def clear(self) -> None:
        self.entries.clear()
        self.unread_count = 0
        self.selected_index = 0
        self.expanded.clear()


class ErrorLogHandler(logging.Handler):
    """``logging`` handler that appends formatted records to an ``ErrorLog``."""

    def __init__(self, error_log: ErrorLog, level: int = logging.INFO) -> None:
        super().__init__(level)
        self.error_log = error_log

    def emit(self, record: logging.LogRecord) -> None:
        try:
            message = record.getMessage()
        except Exception:
            self.handleError(record)
            return
        context = getattr(record, "context", None)
        self.error_log.add_entry(
            ErrorEntry(
                message=message,
                severity=ErrorSeverity.from_level(record.levelno),
                context=context if isinstance(context, str) else None,
                timestamp=datetime.fromtimestamp(record.created),
            )
        )


__all__ = [
    "MAX_ERROR_ENTRIES",
    "ErrorSeverity",
    "ErrorEntry",
    "ErrorLog",
    "ErrorLogHandler",
]
