"""Path safety predicate applied before any directory is opened."""

from __future__ import annotations

from pathlib import Path

from ..settings import MAX_PATH_COMPONENTS

SENSITIVE_SUBSTRINGS: tuple[str, ...] = ("ssh", "key", "secret")


def is_safe_path(path: Path) -> bool:
    """Return whether ``path`` may be listed.

    Rejects paths deeper than ``MAX_PATH_COMPONENTS`` and any dot-prefixed
    component whose name mentions SSH material, keys, or secrets.
    """
    parts = Path(path).parts
    if len(parts) > MAX_PATH_COMPONENTS:
        return False
    for part in parts:
        if not part.startswith("."):
            continue
        lowered = part.lower()
        if any(marker in lowered for marker in SENSITIVE_SUBSTRINGS):
            return False
    return True


__all__ = ["SENSITIVE_SUBSTRINGS", "is_safe_path"]
