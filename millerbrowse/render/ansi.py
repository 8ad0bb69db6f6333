"""ANSI-aware text measurement and line shaping utilities.

Provides clipping and padding that preserve escape sequences, so pane cells
stay aligned when color codes and wide characters are present.
"""

from __future__ import annotations

import re
import unicodedata

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]")
TAB_STOP = 8
RESET = "\033[0m"
ELLIPSIS = "..."

_SIZE_UNITS = ("B", "KB", "MB", "GB", "TB", "PB", "EB", "ZB")


def char_display_width(ch: str, col: int) -> int:
    """Return terminal column width for one character at visual column ``col``.

    Tabs expand to the next 8-column stop, combining marks and variation
    selectors consume no columns, and East Asian wide/fullwidth characters
    consume two.
    """
    if ch == "\t":
        return TAB_STOP - (col % TAB_STOP)
    if unicodedata.combining(ch) or "\ufe00" <= ch <= "\ufe0f":
        return 0
    if unicodedata.east_asian_width(ch) in {"W", "F"}:
        return 2
    return 1


def display_width(text: str) -> int:
    """Return the rendered width of ``text`` ignoring ANSI escape sequences."""
    col = 0
    i = 0
    n = len(text)
    while i < n:
        if text[i] == "\x1b":
            match = ANSI_ESCAPE_RE.match(text, i)
            if match:
                i = match.end()
                continue
        col += char_display_width(text[i], col)
        i += 1
    return col


def clip_ansi_line(text: str, max_cols: int) -> str:
    """Trim a styled line to at most ``max_cols`` display columns.

    ANSI escape sequences are preserved verbatim and do not count toward width.
    Tabs are expanded into spaces so clipping aligns with rendered terminal cells.
    """
    if max_cols <= 0 or not text:
        return ""

    out: list[str] = []
    col = 0
    i = 0
    n = len(text)
    while i < n and col < max_cols:
        if text[i] == "\x1b":
            match = ANSI_ESCAPE_RE.match(text, i)
            if match:
                out.append(match.group(0))
                i = match.end()
                continue
        ch = text[i]
        w = char_display_width(ch, col)
        if ch == "\t":
            if col + w > max_cols:
                break
            out.append(" " * w)
            col += w
            i += 1
            continue
        if col + w > max_cols:
            break
        out.append(ch)
        col += w
        i += 1

    return "".join(out)


def fit_ansi_line(text: str, width: int) -> str:
    """Clip ``text`` to ``width`` columns and pad with spaces to exactly ``width``.

    A reset is appended whenever the text carried escape sequences so styling
    never bleeds into the neighbouring pane.
    """
    if width <= 0:
        return ""
    clipped = clip_ansi_line(text, width)
    padding = " " * max(0, width - display_width(clipped))
    if "\x1b" in clipped:
        return f"{clipped}{RESET}{padding}"
    return f"{clipped}{padding}"


def truncate_text(text: str, max_width: int) -> str:
    """Shorten plain ``text`` to ``max_width`` columns with a trailing ellipsis."""
    if display_width(text) <= max_width:
        return text
    if max_width <= len(ELLIPSIS):
        return ELLIPSIS[: max(0, max_width)]
    return clip_ansi_line(text, max_width - len(ELLIPSIS)) + ELLIPSIS


def format_file_size(size: int) -> str:
    """Format a byte count with binary units (``1536`` -> ``"1.5 KB"``)."""
    value = float(size)
    unit_index = 0
    while value >= 1024.0 and unit_index < len(_SIZE_UNITS) - 1:
        value /= 1024.0
        unit_index += 1
    if unit_index == 0:
        return f"{int(value)} {_SIZE_UNITS[0]}"
    return f"{value:.1f} {_SIZE_UNITS[unit_index]}"


__all__ = [
    "ANSI_ESCAPE_RE",
    "TAB_STOP",
    "RESET",
    "char_display_width",
    "display_width",
    "clip_ansi_line",
    "fit_ansi_line",
    "truncate_text",
    "format_file_size",
]
