"""Raw-mode terminal session used by the event loop."""

from __future__ import annotations

import contextlib
import os
import termios
import tty

# Alternate screen, hidden cursor, SGR mouse with button-drag tracking.
ENTER_TUI_SEQUENCE = b"\x1b[?1049h\x1b[?25l\x1b[?1000h\x1b[?1002h\x1b[?1006h"
EXIT_TUI_SEQUENCE = b"\x1b[?1000l\x1b[?1002l\x1b[?1006l\x1b[?25h\x1b[?1049l"
CURSOR_HOME = "\x1b[H"


class TerminalController:
    """Owns the tty state of one browsing session and paints frames."""

    def __init__(self, stdin_fd: int, stdout_fd: int) -> None:
        self.stdin_fd = stdin_fd
        self.stdout_fd = stdout_fd
        self._saved_tty_state = termios.tcgetattr(stdin_fd)

    @contextlib.contextmanager
    def raw_mode(self):
        """Run the body in raw alternate-screen mode; the tty is restored on any exit."""
        tty.setraw(self.stdin_fd, termios.TCSAFLUSH)
        try:
            os.write(self.stdout_fd, ENTER_TUI_SEQUENCE)
            yield
        finally:
            os.write(self.stdout_fd, EXIT_TUI_SEQUENCE)
            termios.tcsetattr(self.stdin_fd, termios.TCSAFLUSH, self._saved_tty_state)

    def write_frame(self, lines: list[str]) -> None:
        payload = CURSOR_HOME + "\r\n".join(lines)
        os.write(self.stdout_fd, payload.encode("utf-8", errors="replace"))


__all__ = ["TerminalController", "ENTER_TUI_SEQUENCE", "EXIT_TUI_SEQUENCE"]
