"""Navigation core: directory columns, the browser state machine, and tabs.

No UI concerns live here; renderers read ``Browser`` / ``TabManager`` state.
"""

from __future__ import annotations

from .column import DirColumn, ScrollDirection, absolute_path
from .browser import JUMP_STEP, Browser, Preview
from .tabs import Tab, TabManager

__all__ = [
    "DirColumn",
    "ScrollDirection",
    "absolute_path",
    "Browser",
    "Preview",
    "JUMP_STEP",
    "Tab",
    "TabManager",
]
