"""Domain datatypes for directory listings."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class DirectoryEntry:
    """One visible directory child plus the metadata needed to sort and label it."""

    name: str
    path: Path
    is_dir: bool
    is_symlink: bool = False
    is_executable: bool = False
    file_size: int | None = None
    mtime_ns: int | None = None

    @property
    def is_hidden(self) -> bool:
        return self.name.startswith(".")


__all__ = ["DirectoryEntry"]
