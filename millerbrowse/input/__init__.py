"""Input-layer public API: raw key decoding and the command table."""

from .reader import ESC_SEQUENCE_TIMEOUT_MS, _PENDING_BYTES, read_key
from .commands import (
    SEARCH_CHARACTERS,
    Command,
    CommandAction,
    CommandRegistry,
    default_commands,
    is_search_char,
    key_label,
)

__all__ = [
    "read_key",
    "_PENDING_BYTES",
    "ESC_SEQUENCE_TIMEOUT_MS",
    "SEARCH_CHARACTERS",
    "Command",
    "CommandAction",
    "CommandRegistry",
    "default_commands",
    "is_search_char",
    "key_label",
]
