"""Failure taxonomy shared by the listing, preview, and navigation layers.

Hard-failing operations raise these; best-effort operations catch them at the
point of use and report "no visible change" instead.
"""

from __future__ import annotations

from pathlib import Path


class BrowseError(Exception):
    """Base class for filesystem-facing browser failures."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"{reason}: {path}")
        self.path = path
        self.reason = reason


class SecurityRejected(BrowseError):
    """Path failed the safety predicate and must not be opened."""

    def __init__(self, path: Path) -> None:
        super().__init__(path, "Path not allowed for security reasons")


class NotReadable(BrowseError):
    """Directory or file could not be listed or read."""


class VanishedEntry(NotReadable):
    """Entry existed when listed but was gone by the time it was accessed."""

    def __init__(self, path: Path) -> None:
        super().__init__(path, "Entry no longer exists")


__all__ = [
    "BrowseError",
    "SecurityRejected",
    "NotReadable",
    "VanishedEntry",
]
