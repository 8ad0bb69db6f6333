"""Icon lookup for listing rows, driven by the settings rule table."""

from __future__ import annotations

from ..settings import (
    DEFAULT_ICON,
    DIRECTORY_ICON,
    EXECUTABLE_ICON,
    SYMLINK_ICON,
    SYMLINK_RULE_KEY,
    Settings,
)
from .details import guess_mime_type
from .types import DirectoryEntry


def icon_for_entry(entry: DirectoryEntry, settings: Settings) -> str:
    """Return the icon for ``entry`` or ``""`` when icons are disabled."""
    if not settings.show_icons:
        return ""
    if entry.is_dir:
        return DIRECTORY_ICON
    if entry.is_symlink:
        rule = settings.rule_for(SYMLINK_RULE_KEY)
        return rule.icon if rule is not None else SYMLINK_ICON
    if entry.is_executable:
        return EXECUTABLE_ICON
    rule = settings.rule_for(guess_mime_type(entry.path))
    if rule is not None:
        return rule.icon
    return DEFAULT_ICON


__all__ = ["icon_for_entry"]
