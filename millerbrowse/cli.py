"""Command-line front door for millerbrowse.

Parses CLI options, resolves the start directory, and either prints a single
rendered frame or launches the interactive browser.
"""

from __future__ import annotations

import argparse
import logging
import shutil
import sys
from pathlib import Path

from .errors import BrowseError
from .runtime import run_browser
from .runtime.app import PACKAGE_LOGGER_NAME, App
from .runtime.config import load_settings
from .render import render_screen

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def _positive_int(value: str) -> int:
    """argparse type for positive integer values."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("value must be >= 1")
    return parsed


def _default_render_size() -> tuple[int, int]:
    """Resolve default frame size from current terminal size."""
    term = shutil.get_terminal_size((80, 24))
    return max(1, term.columns), max(1, term.lines)


def configure_file_logging(log_file: Path) -> logging.Handler:
    """Mirror package log records into ``log_file``."""
    handler = logging.FileHandler(log_file, encoding="utf-8")
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    package_logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    package_logger.addHandler(handler)
    package_logger.setLevel(logging.INFO)
    return handler


def render_frame(path: Path, *, show_hidden: bool, no_color: bool, style: str, width: int, height: int) -> str:
    """Render one browser frame for ``path`` using the interactive code paths."""
    settings = load_settings()
    if show_hidden:
        settings.show_hidden_files = True
    app = App(path, settings)
    lines, _layout = render_screen(app, width, height, no_color=no_color, style=style)
    out: list[str] = []
    for line in lines:
        out.append(line)
        if "\033" in line:
            out.append("\033[0m")
        out.append("\n")
    return "".join(out)


def main(default_path: Path | None = None) -> None:
    """Parse CLI arguments and launch millerbrowse on a directory.

    ``default_path`` is primarily for tests; when omitted the current working
    directory is used.
    """
    parser = argparse.ArgumentParser(description="Browse directories in Miller columns.")
    parser.add_argument("path", nargs="?", default=None, help="Directory to open. Defaults to current directory.")
    parser.add_argument("--show-hidden", action="store_true", help="Show dot-files on startup.")
    parser.add_argument("--no-color", action="store_true", help="Disable color output.")
    parser.add_argument("--style", default="monokai", help="Pygments style name for file previews.")
    parser.add_argument("--render", action="store_true", help="Print a single frame and exit.")
    parser.add_argument("--max-cols", type=_positive_int, default=None, help="Frame width for --render.")
    parser.add_argument("--max-rows", type=_positive_int, default=None, help="Frame height for --render.")
    parser.add_argument("--log-file", type=Path, default=None, help="Also write log records to this file.")
    args = parser.parse_args()

    if default_path is None:
        default_path = Path.cwd()
    path = Path(args.path or default_path)
    if not path.exists():
        raise SystemExit(f"Path not found: {path}")
    if not path.is_dir():
        raise SystemExit(f"Not a directory: {path}")

    if args.log_file is not None:
        configure_file_logging(args.log_file)

    try:
        if args.render:
            default_cols, default_rows = _default_render_size()
            sys.stdout.write(
                render_frame(
                    path,
                    show_hidden=args.show_hidden,
                    no_color=args.no_color,
                    style=args.style,
                    width=args.max_cols or default_cols,
                    height=args.max_rows or default_rows,
                )
            )
            return
        run_browser(path, show_hidden=args.show_hidden, no_color=args.no_color, style=args.style)
    except BrowseError as exc:
        raise SystemExit(str(exc)) from exc


if __name__ == "__main__":
    main()
