"""Text rows for the settings overlay."""

from __future__ import annotations

from ..input.commands import CommandRegistry
from ..runtime.settings_panel import DISPLAY_OPTIONS, FileTypeEditor, PanelFocus, SettingsPanel, SettingsSection
from ..settings import Settings
from .ansi import RESET, display_width, truncate_text

MIME_COLUMN_WIDTH = 24
ICON_COLUMN_WIDTH = 6
KEY_COLUMN_WIDTH = 16
SELECTED_MARKER = "▶ "
UNSELECTED_MARKER = "  "

_HEADER_SGR = "\033[1;38;5;81m"
_KEY_SGR = "\033[38;5;229m"
_REVERSE_SGR = "\033[7m"


def _row(text: str, selected: bool, no_color: bool) -> str:
    marker = SELECTED_MARKER if selected else UNSELECTED_MARKER
    if selected and not no_color:
        return f"{_REVERSE_SGR}{marker}{text}{RESET}"
    return marker + text


def _check(value: bool) -> str:
    return "✓" if value else " "


def _section_strip(panel: SettingsPanel, no_color: bool) -> str:
    labels = []
    for section in SettingsSection:
        label = section.value
        if section is panel.section:
            if no_color:
                label = f"[{label}]"
            else:
                label = f"{_REVERSE_SGR} {label} {RESET}"
        labels.append(label)
    marker = SELECTED_MARKER if panel.focus is PanelFocus.SECTIONS else UNSELECTED_MARKER
    return marker + "  ".join(labels)


def _display_rows(panel: SettingsPanel, settings: Settings, no_color: bool) -> tuple[list[str], int | None]:
    rows: list[str] = []
    focus = None
    for index, (name, label) in enumerate(DISPLAY_OPTIONS):
        selected = panel.focus is PanelFocus.CONTENT and index == panel.display_selection
        if selected:
            focus = len(rows)
        rows.append(_row(f"[{_check(getattr(settings, name))}] {label}", selected, no_color))
    rows.append("")
    rows.append("  Space/Enter toggle")
    return rows, focus


def _file_type_rows(panel: SettingsPanel, settings: Settings, no_color: bool) -> tuple[list[str], int | None]:
    rules = settings.mime_type_rules
    rows = [f"  {'MIME Type':<{MIME_COLUMN_WIDTH}} {'Icon':<{ICON_COLUMN_WIDTH}} Preview"]
    focus = None
    for index, key in enumerate(rules.keys()):
        rule = rules.get(key)
        if rule is None:
            continue
        selected = panel.focus is not PanelFocus.SECTIONS and index == panel.file_type_selection
        if selected:
            focus = len(rows)
        icon_cell = rule.icon + " " * max(0, ICON_COLUMN_WIDTH - display_width(rule.icon))
        name = truncate_text(key, MIME_COLUMN_WIDTH)
        rows.append(_row(f"{name:<{MIME_COLUMN_WIDTH}} {icon_cell} {'✓' if rule.preview else '✗'}", selected, no_color))
    rows.append("")
    rows.append("  [A]dd  [D]elete  [E]dit")
    return rows, focus


def _keybinding_rows(registry: CommandRegistry, no_color: bool) -> list[str]:
    key_sgr = "" if no_color else _KEY_SGR
    reset = "" if no_color else RESET
    rows = [f"  {'Key':<{KEY_COLUMN_WIDTH}} Description"]
    for keys, description in registry.display_commands():
        rows.append(f"  {key_sgr}{keys:<{KEY_COLUMN_WIDTH}}{reset} {description}")
    return rows


def editor_rows(editor: FileTypeEditor, no_color: bool = False) -> list[str]:
    """The add/edit form; the focused field carries the selection marker and a cursor."""
    fields = (
        f"MIME Type: {editor.mime_type}",
        f"Icon: {editor.icon}",
        f"[{_check(editor.preview)}] Preview",
    )
    rows = [f"── {editor.title} ──"]
    for index, text in enumerate(fields):
        focused = index == editor.focused_field
        if focused and index < len(fields) - 1:
            text += "_"
        rows.append(_row(text, focused, no_color))
    rows.append("  Tab next field  Space toggle preview  Enter save  Esc cancel")
    return rows


def settings_panel_lines(
    panel: SettingsPanel,
    settings: Settings,
    registry: CommandRegistry,
    no_color: bool = False,
) -> tuple[list[str], int | None]:
    """Overlay rows plus the index of the focused row (``None`` when nothing is focused)."""
    header = "SETTINGS  Up/Down move  Right/Tab enter  Left back  Esc/? close"
    lines = [header if no_color else f"{_HEADER_SGR}{header}{RESET}", _section_strip(panel, no_color), ""]
    focus = 1 if panel.focus is PanelFocus.SECTIONS else None

    if panel.section is SettingsSection.DISPLAY:
        rows, row_focus = _display_rows(panel, settings, no_color)
    elif panel.section is SettingsSection.FILE_TYPES:
        rows, row_focus = _file_type_rows(panel, settings, no_color)
    else:
        rows, row_focus = _keybinding_rows(registry, no_color), None
    if row_focus is not None:
        focus = len(lines) + row_focus
    lines.extend(rows)

    if panel.editor is not None:
        lines.append("")
        lines.extend(editor_rows(panel.editor, no_color))
        focus = len(lines) - 1
    return lines, focus


__all__ = ["editor_rows", "settings_panel_lines"]
