"""Filesystem scanning into sorted, filtered directory listings."""

from __future__ import annotations

import logging
import os
import stat
from pathlib import Path

from ..errors import NotReadable, VanishedEntry
from ..settings import MAX_DIRECTORY_ENTRIES, Settings
from .types import DirectoryEntry

logger = logging.getLogger(__name__)


def _entry_from_scandir(child: os.DirEntry) -> DirectoryEntry:
    """Build one entry from a scandir record, tolerating stat failures."""
    try:
        is_dir = child.is_dir()
    except OSError:
        is_dir = False
    try:
        is_symlink = child.is_symlink()
    except OSError:
        is_symlink = False

    file_size: int | None = None
    mtime_ns: int | None = None
    is_executable = False
    try:
        child_stat = child.stat(follow_symlinks=False)
        mtime_ns = int(child_stat.st_mtime_ns)
        if not is_dir:
            file_size = int(child_stat.st_size)
            is_executable = stat.S_ISREG(child_stat.st_mode) and bool(child_stat.st_mode & 0o111)
    except OSError:
        pass

    return DirectoryEntry(
        name=child.name,
        path=Path(child.path),
        is_dir=is_dir,
        is_symlink=is_symlink,
        is_executable=is_executable,
        file_size=file_size,
        mtime_ns=mtime_ns,
    )


def list_directory(directory: Path, settings: Settings) -> list[DirectoryEntry]:
    """List visible children of ``directory`` sorted directories-first.

    Hidden names are skipped unless ``settings.show_hidden_files`` is set.
    Names sort by code point within the directory and non-directory groups.
    Listings longer than ``MAX_DIRECTORY_ENTRIES`` are truncated with a warning.
    Raises ``NotReadable`` (``VanishedEntry`` when the directory is gone).
    """
    entries: list[DirectoryEntry] = []
    try:
        with os.scandir(directory) as scanned:
            for child in scanned:
                if not settings.show_hidden_files and child.name.startswith("."):
                    continue
                entries.append(_entry_from_scandir(child))
    except FileNotFoundError as exc:
        raise VanishedEntry(directory) from exc
    except OSError as exc:
        raise NotReadable(directory, exc.strerror or "Cannot read directory") from exc

    entries.sort(key=lambda entry: (not entry.is_dir, entry.name))

    total = len(entries)
    if total > MAX_DIRECTORY_ENTRIES:
        logger.warning(
            "Directory listing truncated to %d of %d entries: %s",
            MAX_DIRECTORY_ENTRIES,
            total,
            directory,
            extra={"context": "Directory Listing"},
        )
        del entries[MAX_DIRECTORY_ENTRIES:]
    return entries


__all__ = ["list_directory"]
