"""Settings overlay: display toggles, the file type rule table, and key bindings.

The panel consumes every key while open. ``SettingsPanel.handle_key`` returns
``True`` when a change affects directory listings or previews, so the caller
can reload all tabs.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass

from ..settings import DEFAULT_ICON, FileTypeRule, Settings

logger = logging.getLogger(__name__)

DISPLAY_OPTIONS: tuple[tuple[str, str], ...] = (
    ("show_hidden_files", "Show hidden files"),
    ("show_icons", "Show icons"),
)
EDITOR_FIELD_COUNT = 3
MIME_TYPE_FIELD = 0
ICON_FIELD = 1
PREVIEW_FIELD = 2

_CLOSE_KEYS = frozenset({"ESC", "?"})


class SettingsSection(enum.Enum):
    DISPLAY = "Display"
    FILE_TYPES = "File Types"
    KEYBINDINGS = "Keybindings"

    def next(self) -> SettingsSection:
        members = list(SettingsSection)
        return members[(members.index(self) + 1) % len(members)]

    def prev(self) -> SettingsSection:
        members = list(SettingsSection)
        return members[(members.index(self) - 1) % len(members)]


class PanelFocus(enum.Enum):
    SECTIONS = "sections"
    CONTENT = "content"
    EDITOR = "editor"


@dataclass
class FileTypeEditor:
    """Add/edit form for one rule. ``editing`` holds the key being replaced."""

    mime_type: str = ""
    icon: str = ""
    preview: bool = False
    focused_field: int = MIME_TYPE_FIELD
    editing: str | None = None

    @property
    def title(self) -> str:
        return "Edit File Type" if self.editing is not None else "Add File Type"


def _is_text_input(key: str) -> bool:
    return len(key) == 1 and key.isprintable()


class SettingsPanel:
    """Open/closed state plus section, focus, and row selections."""

    def __init__(self) -> None:
        self.is_open = False
        self._reset()

    def _reset(self) -> None:
        self.section = SettingsSection.DISPLAY
        self.focus = PanelFocus.SECTIONS
        self.display_selection = 0
        self.file_type_selection = 0
        self.editor: FileTypeEditor | None = None

    def open(self) -> None:
        """Open on the first section with nothing selected or being edited."""
        self._reset()
        self.is_open = True

    def close(self) -> None:
        self.is_open = False
        self.editor = None

    def handle_key(self, key: str, settings: Settings) -> bool:
        """Apply one key token; returns whether listings need a reload."""
        if not self.is_open:
            return False
        if self.focus is PanelFocus.EDITOR:
            return self._handle_editor_key(key, settings)
        if key in _CLOSE_KEYS:
            self.close()
            return False
        if self.focus is PanelFocus.SECTIONS:
            self._handle_sections_key(key)
            return False
        if key == "LEFT":
            self.focus = PanelFocus.SECTIONS
            return False
        if self.section is SettingsSection.DISPLAY:
            return self._handle_display_key(key, settings)
        if self.section is SettingsSection.FILE_TYPES:
            return self._handle_file_types_key(key, settings)
        return False

    def _handle_sections_key(self, key: str) -> None:
        if key == "UP":
            self.section = self.section.prev()
        elif key == "DOWN":
            self.section = self.section.next()
        elif key in {"RIGHT", "TAB", "ENTER"}:
            self.focus = PanelFocus.CONTENT

    def _handle_display_key(self, key: str, settings: Settings) -> bool:
        if key == "UP":
            self.display_selection = max(0, self.display_selection - 1)
        elif key == "DOWN":
            self.display_selection = min(len(DISPLAY_OPTIONS) - 1, self.display_selection + 1)
        elif key in {" ", "ENTER"}:
            name, label = DISPLAY_OPTIONS[self.display_selection]
            value = not getattr(settings, name)
            setattr(settings, name, value)
            logger.info("%s: %s", label, "on" if value else "off", extra={"context": "Settings"})
            return name == "show_hidden_files"
        return False

    def _handle_file_types_key(self, key: str, settings: Settings) -> bool:
        keys = settings.mime_type_rules.keys()
        if key == "UP":
            self.file_type_selection = max(0, self.file_type_selection - 1)
        elif key == "DOWN":
            self.file_type_selection = max(0, min(len(keys) - 1, self.file_type_selection + 1))
        elif key in {"a", "A"}:
            self.editor = FileTypeEditor()
            self.focus = PanelFocus.EDITOR
        elif key in {"e", "E", "ENTER"} and keys:
            rule_key = keys[self.file_type_selection]
            rule = settings.mime_type_rules.get(rule_key)
            if rule is not None:
                self.editor = FileTypeEditor(rule_key, rule.icon, rule.preview, editing=rule_key)
                self.focus = PanelFocus.EDITOR
        elif key in {"d", "D"} and keys:
            rule_key = keys[self.file_type_selection]
            settings.mime_type_rules.remove(rule_key)
            self.file_type_selection = max(0, min(self.file_type_selection, len(keys) - 2))
            logger.info("Removed file type rule %s", rule_key, extra={"context": "Settings"})
            return True
        return False

    def _handle_editor_key(self, key: str, settings: Settings) -> bool:
        editor = self.editor
        if editor is None:
            self.focus = PanelFocus.CONTENT
            return False
        if key == "ESC":
            self._close_editor()
        elif key == "TAB":
            editor.focused_field = (editor.focused_field + 1) % EDITOR_FIELD_COUNT
        elif key == "SHIFT_TAB":
            editor.focused_field = (editor.focused_field - 1) % EDITOR_FIELD_COUNT
        elif key == "ENTER":
            return self._save_editor(settings)
        elif key == " " and editor.focused_field == PREVIEW_FIELD:
            editor.preview = not editor.preview
        elif key == "BACKSPACE":
            if editor.focused_field == MIME_TYPE_FIELD:
                editor.mime_type = editor.mime_type[:-1]
            elif editor.focused_field == ICON_FIELD:
                editor.icon = editor.icon[:-1]
        elif _is_text_input(key):
            if editor.focused_field == MIME_TYPE_FIELD:
                editor.mime_type += key
            elif editor.focused_field == ICON_FIELD:
                editor.icon += key
        return False

    def _close_editor(self) -> None:
        self.editor = None
        self.focus = PanelFocus.CONTENT

    def _save_editor(self, settings: Settings) -> bool:
        """Store the edited rule; an empty MIME type discards the form."""
        editor = self.editor
        self._close_editor()
        if editor is None:
            return False
        rule_key = editor.mime_type.strip()
        if not rule_key:
            return False
        rules = settings.mime_type_rules
        if editor.editing is not None and editor.editing != rule_key:
            rules.remove(editor.editing)
        rules.set_rule(rule_key, FileTypeRule(icon=editor.icon.strip() or DEFAULT_ICON, preview=editor.preview))
        self.file_type_selection = rules.keys().index(rule_key)
        logger.info("Saved file type rule %s", rule_key, extra={"context": "Settings"})
        return True


__all__ = [
    "DISPLAY_OPTIONS",
    "FileTypeEditor",
    "PanelFocus",
    "SettingsPanel",
    "SettingsSection",
]
