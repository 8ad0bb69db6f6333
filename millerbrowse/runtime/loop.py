"""Interactive session bootstrap and event loop.

Each iteration renders a frame when state is dirty, records the layout for
mouse hit-testing, then blocks on one decoded key and dispatches it.
"""

from __future__ import annotations

import logging
import shutil
import sys
from pathlib import Path

from ..input import read_key
from ..render import render_screen
from ..settings import MAX_COLUMNS_DISPLAY, SEARCH_TIMEOUT_SECONDS
from .app import App
from .config import load_settings, save_settings
from .terminal import TerminalController

logger = logging.getLogger(__name__)

KEY_POLL_TIMEOUT_MS = 120


def run_main_loop(app: App, terminal: TerminalController, stdin_fd: int, *, no_color: bool, style: str) -> None:
    """Drive ``app`` until it requests quit."""
    dirty = True
    last_size: tuple[int, int] | None = None
    with terminal.raw_mode():
        while not app.should_quit:
            term = shutil.get_terminal_size((80, 24))
            size = (term.columns, term.lines)
            if size != last_size:
                last_size = size
                dirty = True
            if dirty:
                lines, layout_info = render_screen(app, term.columns, term.lines, no_color=no_color, style=style)
                app.set_layout_info(layout_info)
                terminal.write_frame(lines)
                dirty = False

            try:
                key = read_key(stdin_fd, timeout_ms=KEY_POLL_TIMEOUT_MS)
            except KeyboardInterrupt:
                continue
            if key == "":
                continue
            app.handle_key(key)
            dirty = True


def run_browser(start_path: Path, *, show_hidden: bool = False, no_color: bool = False, style: str = "monokai") -> None:
    """Open the interactive browser at ``start_path`` and persist settings on exit."""
    settings = load_settings()
    hidden_forced = show_hidden and not settings.show_hidden_files
    if hidden_forced:
        settings.show_hidden_files = True

    app = App(
        start_path,
        settings,
        max_columns=MAX_COLUMNS_DISPLAY,
        search_timeout=SEARCH_TIMEOUT_SECONDS,
    )
    app.attach_log_handler()
    logger.info("Started browsing %s", app.browser.current_path, extra={"context": "Startup"})

    stdin_fd = sys.stdin.fileno()
    terminal = TerminalController(stdin_fd, sys.stdout.fileno())
    try:
        run_main_loop(app, terminal, stdin_fd, no_color=no_color, style=style)
    finally:
        app.detach_log_handler()
        if hidden_forced and settings.show_hidden_files:
            # --show-hidden applies to this session only.
            settings.show_hidden_files = False
        save_settings(settings)


__all__ = ["KEY_POLL_TIMEOUT_MS", "run_main_loop", "run_browser"]
