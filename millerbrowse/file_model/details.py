"""File-detail collection for the preview pane.

Gathers stat metadata, a MIME guess, and a bounded text preview whose
availability is governed by the settings rule table.
"""

from __future__ import annotations

import mimetypes
import os
import stat
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from ..errors import NotReadable, VanishedEntry
from ..settings import MAX_PREVIEW_BYTES, Settings

BINARY_PREVIEW_MARKER = "[Binary file - cannot preview]"
NOT_REGULAR_FILE_MARKER = "[Not a regular file]"
UNREADABLE_MARKER = "[Could not read file]"

_EXTENSION_MIME_TYPES: dict[str, str] = {
    "txt": "text/plain",
    "log": "text/plain",
    "md": "text/markdown",
    "markdown": "text/markdown",
    "html": "text/html",
    "htm": "text/html",
    "xml": "application/xml",
    "css": "text/css",
    "csv": "text/csv",
    "rs": "text/x-rust",
    "js": "application/javascript",
    "mjs": "application/javascript",
    "ts": "application/typescript",
    "mts": "application/typescript",
    "py": "text/x-python",
    "pyw": "text/x-python",
    "java": "text/x-java",
    "c": "text/x-c",
    "cc": "text/x-c",
    "cpp": "text/x-c",
    "h": "text/x-c",
    "hpp": "text/x-c",
    "go": "text/x-go",
    "rb": "text/x-ruby",
    "php": "text/x-php",
    "swift": "text/x-swift",
    "kt": "text/x-kotlin",
    "kts": "text/x-kotlin",
    "cs": "text/x-csharp",
    "pl": "text/x-perl",
    "lua": "text/x-lua",
    "sql": "text/x-sql",
    "toml": "application/toml",
    "json": "application/json",
    "yaml": "application/x-yaml",
    "yml": "application/x-yaml",
    "sh": "application/x-sh",
    "bash": "application/x-sh",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "png": "image/png",
    "gif": "image/gif",
    "svg": "image/svg+xml",
    "zip": "application/zip",
    "gz": "application/gzip",
    "tar": "application/x-tar",
}


def guess_mime_type(path: Path) -> str | None:
    """Guess a MIME type from the file extension.

    The built-in table wins so results do not depend on the host's
    ``mimetypes`` database; unknown extensions fall back to ``mimetypes``.
    """
    extension = path.suffix[1:].lower()
    if extension in _EXTENSION_MIME_TYPES:
        return _EXTENSION_MIME_TYPES[extension]
    guessed, _encoding = mimetypes.guess_type(path.name)
    return guessed


def _timestamp(value: float | None) -> datetime | None:
    if value is None:
        return None
    try:
        return datetime.fromtimestamp(value)
    except (OverflowError, OSError, ValueError):
        return None


def decode_preview(data: bytes, total_size: int) -> str:
    """Decode preview bytes, marking truncation and refusing binary content.

    ``data`` holds at most ``MAX_PREVIEW_BYTES + 1`` bytes; a longer file keeps
    the first ``MAX_PREVIEW_BYTES`` and gets an explicit truncation marker.
    A multi-byte character split by the byte limit is dropped rather than
    treated as binary.
    """
    truncated = len(data) > MAX_PREVIEW_BYTES
    head = data[:MAX_PREVIEW_BYTES]
    try:
        text = head.decode("utf-8")
    except UnicodeDecodeError as exc:
        if not truncated or exc.reason != "unexpected end of data":
            return BINARY_PREVIEW_MARKER
        try:
            text = head[: exc.start].decode("utf-8")
        except UnicodeDecodeError:
            return BINARY_PREVIEW_MARKER
    if truncated:
        size = max(total_size, len(data))
        text += f"\n[... truncated: showing first {MAX_PREVIEW_BYTES} of {size} bytes]"
    return text


def read_file_preview(path: Path, mime_type: str | None, settings: Settings, total_size: int) -> str:
    """Return preview text for a regular file, or ``""`` when preview is disabled."""
    if not settings.can_preview(mime_type):
        return ""
    try:
        with path.open("rb") as handle:
            data = handle.read(MAX_PREVIEW_BYTES + 1)
    except OSError:
        return UNREADABLE_MARKER
    return decode_preview(data, total_size)


@dataclass(frozen=True)
class FileDetails:
    """Metadata and bounded content preview for one non-directory entry."""

    path: Path
    size: int
    permissions: str
    created: datetime | None = None
    modified: datetime | None = None
    symlink_target: Path | None = None
    mime_type: str | None = None
    content_preview: str = ""

    @property
    def name(self) -> str:
        return self.path.name

    @classmethod
    def from_path(cls, path: Path, settings: Settings) -> FileDetails:
        """Collect details for ``path``.

        Raises ``VanishedEntry`` when the entry disappeared since listing and
        ``NotReadable`` when it cannot be stat'ed. Content read failures never
        raise; they produce a marker string instead.
        """
        try:
            link_stat = os.lstat(path)
        except FileNotFoundError as exc:
            raise VanishedEntry(path) from exc
        except OSError as exc:
            raise NotReadable(path, exc.strerror or "Cannot stat file") from exc

        symlink_target: Path | None = None
        target_stat = link_stat
        if stat.S_ISLNK(link_stat.st_mode):
            try:
                symlink_target = Path(os.readlink(path))
            except OSError:
                symlink_target = None
            try:
                target_stat = os.stat(path)
            except OSError:
                target_stat = link_stat

        is_regular = stat.S_ISREG(target_stat.st_mode)
        mime_type = guess_mime_type(path) if is_regular else None
        size = int(target_stat.st_size)
        if is_regular:
            content_preview = read_file_preview(path, mime_type, settings, size)
        else:
            content_preview = NOT_REGULAR_FILE_MARKER

        return cls(
            path=path,
            size=size,
            permissions=stat.filemode(link_stat.st_mode),
            created=_timestamp(getattr(target_stat, "st_birthtime", None)),
            modified=_timestamp(target_stat.st_mtime),
            symlink_target=symlink_target,
            mime_type=mime_type,
            content_preview=content_preview,
        )


__all__ = [
    "BINARY_PREVIEW_MARKER",
    "NOT_REGULAR_FILE_MARKER",
    "UNREADABLE_MARKER",
    "FileDetails",
    "decode_preview",
    "guess_mime_type",
    "read_file_preview",
]
