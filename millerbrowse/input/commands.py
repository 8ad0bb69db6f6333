"""Key-token to command mapping plus help-panel display rows."""

from __future__ import annotations

import enum
import string
from collections.abc import Callable
from dataclasses import dataclass

SEARCH_CHARACTERS = frozenset(string.ascii_lowercase + string.digits + "-_")


class CommandAction(enum.Enum):
    QUIT = "quit"
    SHOW_SETTINGS = "show_settings"
    SHOW_ERROR_LOG = "show_error_log"
    CLEAR_SEARCH = "clear_search"
    NAVIGATE_UP = "navigate_up"
    NAVIGATE_DOWN = "navigate_down"
    NAVIGATE_LEFT = "navigate_left"
    NAVIGATE_RIGHT = "navigate_right"
    JUMP_TO_FIRST = "jump_to_first"
    JUMP_TO_LAST = "jump_to_last"
    JUMP_UP_BY_10 = "jump_up_by_10"
    JUMP_DOWN_BY_10 = "jump_down_by_10"
    SET_ANCHOR = "set_anchor"
    NEW_TAB = "new_tab"
    CLOSE_TAB = "close_tab"
    NEXT_TAB = "next_tab"
    PREV_TAB = "prev_tab"
    TOGGLE_HIDDEN = "toggle_hidden"
    TOGGLE_ICONS = "toggle_icons"
    SEARCH_CHAR = "search_char"


_GROUPED_ACTIONS = frozenset(
    {
        CommandAction.NAVIGATE_UP,
        CommandAction.NAVIGATE_DOWN,
        CommandAction.NAVIGATE_LEFT,
        CommandAction.NAVIGATE_RIGHT,
        CommandAction.JUMP_TO_FIRST,
        CommandAction.JUMP_TO_LAST,
        CommandAction.JUMP_UP_BY_10,
        CommandAction.JUMP_DOWN_BY_10,
    }
)

_GROUPED_ROWS: tuple[tuple[str, str], ...] = (
    ("Up/Down", "Navigate list"),
    ("Left/Right", "Navigate directories"),
    ("Home/End", "Jump to first/last item"),
    ("PgUp/PgDn", "Jump by 10 items"),
)

_TOKEN_LABELS: dict[str, str] = {
    "UP": "Up",
    "DOWN": "Down",
    "LEFT": "Left",
    "RIGHT": "Right",
    "HOME": "Home",
    "END": "End",
    "PAGE_UP": "PgUp",
    "PAGE_DOWN": "PgDn",
    "ESC": "Esc",
    "TAB": "Tab",
    "SHIFT_TAB": "Shift+Tab",
}


def key_label(token: str) -> str:
    """Human-readable label for a key token (``CTRL_T`` -> ``Ctrl+T``)."""
    if token in _TOKEN_LABELS:
        return _TOKEN_LABELS[token]
    if token.startswith("CTRL_"):
        return f"Ctrl+{token[5:]}"
    return token


@dataclass(frozen=True)
class Command:
    """One bound command: exact key tokens or a token predicate."""

    action: CommandAction
    description: str
    keys: tuple[str, ...] = ()
    matcher: Callable[[str], bool] | None = None
    label: str | None = None

    def matches(self, key: str) -> bool:
        if key in self.keys:
            return True
        return self.matcher is not None and self.matcher(key)

    def display_text(self) -> str:
        if self.label is not None:
            return self.label
        return "/".join(key_label(key) for key in self.keys)


def is_search_char(key: str) -> bool:
    return len(key) == 1 and key in SEARCH_CHARACTERS


def default_commands() -> list[Command]:
    return [
        Command(CommandAction.QUIT, "Quit the application", keys=("CTRL_C", "CTRL_Q")),
        Command(CommandAction.SHOW_ERROR_LOG, "Show/hide error log", keys=("CTRL_E",)),
        Command(CommandAction.SHOW_SETTINGS, "Show/hide settings panel", keys=("?",)),
        Command(CommandAction.CLEAR_SEARCH, "Clear search string", keys=("ESC",)),
        Command(CommandAction.NAVIGATE_UP, "Navigate up", keys=("UP",)),
        Command(CommandAction.NAVIGATE_DOWN, "Navigate down", keys=("DOWN",)),
        Command(CommandAction.NAVIGATE_LEFT, "Navigate to parent directory", keys=("LEFT",)),
        Command(CommandAction.NAVIGATE_RIGHT, "Navigate to selected directory", keys=("RIGHT", "ENTER")),
        Command(CommandAction.JUMP_TO_FIRST, "Jump to first item", keys=("HOME",)),
        Command(CommandAction.JUMP_TO_LAST, "Jump to last item", keys=("END",)),
        Command(CommandAction.JUMP_UP_BY_10, "Jump up by 10 items", keys=("PAGE_UP",)),
        Command(CommandAction.JUMP_DOWN_BY_10, "Jump down by 10 items", keys=("PAGE_DOWN",)),
        Command(CommandAction.SET_ANCHOR, "Set current directory as anchor", keys=(".",)),
        Command(CommandAction.NEW_TAB, "Open a new tab here", keys=("CTRL_T",)),
        Command(CommandAction.CLOSE_TAB, "Close current tab", keys=("CTRL_W",)),
        Command(CommandAction.NEXT_TAB, "Next tab", keys=("TAB",)),
        Command(CommandAction.PREV_TAB, "Previous tab", keys=("SHIFT_TAB",)),
        Command(CommandAction.TOGGLE_HIDDEN, "Show/hide hidden files", keys=("CTRL_A",)),
        Command(CommandAction.TOGGLE_ICONS, "Show/hide icons", keys=("CTRL_N",)),
        Command(CommandAction.SEARCH_CHAR, "Quick search by typing", matcher=is_search_char, label="a-z 0-9"),
    ]


class CommandRegistry:
    """Ordered command table; the first matching command wins."""

    def __init__(self, commands: list[Command] | None = None) -> None:
        self.commands: list[Command] = list(commands) if commands is not None else default_commands()

    def register(self, command: Command) -> CommandRegistry:
        """Add ``command`` ahead of existing bindings and return ``self``."""
        self.commands.insert(0, command)
        return self

    def find_command(self, key: str) -> Command | None:
        for command in self.commands:
            if command.matches(key):
                return command
        return None

    def display_commands(self) -> list[tuple[str, str]]:
        """Help rows: navigation keys grouped first, then every other command."""
        rows = list(_GROUPED_ROWS)
        for command in self.commands:
            if command.action in _GROUPED_ACTIONS:
                continue
            rows.append((command.display_text(), command.description))
        return rows


__all__ = [
    "SEARCH_CHARACTERS",
    "CommandAction",
    "Command",
    "CommandRegistry",
    "default_commands",
    "is_search_char",
    "key_label",
]
