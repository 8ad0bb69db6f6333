"""File-preview pane text: metadata block plus highlighted content."""

from __future__ import annotations

import re
from pathlib import Path

from pygments import highlight
from pygments.formatters import Terminal256Formatter
from pygments.lexers import get_lexer_for_filename
from pygments.util import ClassNotFound

from ..file_model import BINARY_PREVIEW_MARKER, NOT_REGULAR_FILE_MARKER, UNREADABLE_MARKER, FileDetails
from .ansi import format_file_size

_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]")
_MARKERS = frozenset({BINARY_PREVIEW_MARKER, NOT_REGULAR_FILE_MARKER, UNREADABLE_MARKER})
_FORMATTERS: dict[str, Terminal256Formatter] = {}

DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
BOLD = "\033[1m"
DIM = "\033[2m"
RESET = "\033[0m"


def sanitize_terminal_text(source: str) -> str:
    """Escape terminal control bytes to avoid side effects (bell, cursor moves, etc.)."""
    if _CONTROL_RE.search(source) is None:
        return source

    out: list[str] = []
    for ch in source:
        code = ord(ch)
        if ch in {"\n", "\r", "\t"}:
            out.append(ch)
            continue
        # C0 controls + DEL + C1 controls.
        if code < 32 or code == 127 or 0x80 <= code <= 0x9F:
            out.append(f"\\x{code:02x}")
            continue
        out.append(ch)
    return "".join(out)


def _formatter_for_style(style: str) -> Terminal256Formatter:
    """Return a cached 256-color formatter, falling back to the default style."""
    formatter = _FORMATTERS.get(style)
    if formatter is not None:
        return formatter
    try:
        formatter = Terminal256Formatter(style=style)
    except ClassNotFound:
        formatter = Terminal256Formatter()
    _FORMATTERS[style] = formatter
    return formatter


def highlight_content(source: str, path: Path, style: str = "monokai") -> str:
    """Syntax-highlight ``source`` for ``path``; unknown file types stay plain."""
    try:
        lexer = get_lexer_for_filename(path.name, source)
    except ClassNotFound:
        return source
    rendered = highlight(source, lexer, _formatter_for_style(style))
    if source.endswith("\n") or not rendered.endswith("\n"):
        return rendered
    return rendered[:-1]


def file_preview_lines(details: FileDetails, *, no_color: bool = False, style: str = "monokai") -> list[str]:
    """Build the lines shown in the preview pane for one file."""
    bold = "" if no_color else BOLD
    reset = "" if no_color else RESET

    def field(label: str, value: str) -> str:
        return f"{bold}{label}{reset} {value}"

    lines = [
        field("Size:", format_file_size(details.size)),
        field("Permissions:", details.permissions),
    ]
    if details.created is not None:
        lines.append(field("Created:", details.created.strftime(DATE_FORMAT)))
    if details.modified is not None:
        lines.append(field("Modified:", details.modified.strftime(DATE_FORMAT)))
    if details.symlink_target is not None:
        lines.append(field("Symlink ->", str(details.symlink_target)))
    lines.append(field("MIME Type:", details.mime_type or "unknown"))

    content = details.content_preview
    if not content:
        return lines

    lines.append("")
    lines.append(f"{'' if no_color else DIM}── Preview ──{reset}")
    content = sanitize_terminal_text(content)
    if not no_color and content not in _MARKERS:
        content = highlight_content(content, details.path, style)
    lines.extend(content.splitlines())
    return lines


__all__ = [
    "DATE_FORMAT",
    "sanitize_terminal_text",
    "highlight_content",
    "file_preview_lines",
]
