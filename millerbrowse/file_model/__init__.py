"""Filesystem collaborators used by the navigation core.

This package contains non-UI primitives:
- directory entry datatypes
- the path safety predicate
- sorted/filtered directory listing with a size cap
- file-detail collection with bounded content preview
- icon lookup from the settings rule table
"""

from __future__ import annotations

from .types import DirectoryEntry
from .safety import SENSITIVE_SUBSTRINGS, is_safe_path
from .listing import list_directory
from .details import (
    BINARY_PREVIEW_MARKER,
    NOT_REGULAR_FILE_MARKER,
    UNREADABLE_MARKER,
    FileDetails,
    decode_preview,
    guess_mime_type,
    read_file_preview,
)
from .icons import icon_for_entry

__all__ = [
    "DirectoryEntry",
    "SENSITIVE_SUBSTRINGS",
    "is_safe_path",
    "list_directory",
    "BINARY_PREVIEW_MARKER",
    "NOT_REGULAR_FILE_MARKER",
    "UNREADABLE_MARKER",
    "FileDetails",
    "decode_preview",
    "guess_mime_type",
    "read_file_preview",
    "icon_for_entry",
]
