"""Tests for the file-preview pane text."""

from __future__ import annotations

import unittest
from datetime import datetime
from pathlib import Path

from millerbrowse.file_model import BINARY_PREVIEW_MARKER, FileDetails
from millerbrowse.render.preview import file_preview_lines, highlight_content, sanitize_terminal_text


def _details(**overrides) -> FileDetails:
    values = dict(
        path=Path("/tmp/example.py"),
        size=1536,
        permissions="-rw-r--r--",
        created=None,
        modified=datetime(2024, 5, 6, 7, 8, 9),
        symlink_target=None,
        mime_type="text/x-python",
        content_preview="print('hi')\n",
    )
    values.update(overrides)
    return FileDetails(**values)


class FilePreviewLinesTests(unittest.TestCase):
    def test_metadata_block_without_color(self) -> None:
        lines = file_preview_lines(_details(), no_color=True)

        self.assertEqual(lines[0], "Size: 1.5 KB")
        self.assertEqual(lines[1], "Permissions: -rw-r--r--")
        self.assertEqual(lines[2], "Modified: 2024-05-06 07:08:09")
        self.assertEqual(lines[3], "MIME Type: text/x-python")
        self.assertEqual(lines[-1], "print('hi')")

    def test_symlink_and_unknown_mime(self) -> None:
        lines = file_preview_lines(
            _details(symlink_target=Path("/opt/real.py"), mime_type=None, content_preview=""),
            no_color=True,
        )

        self.assertIn("Symlink -> /opt/real.py", lines)
        self.assertEqual(lines[-1], "MIME Type: unknown")

    def test_content_is_highlighted_when_color_enabled(self) -> None:
        lines = file_preview_lines(_details(), style="monokai")

        self.assertIn("\033[", lines[-1])
        self.assertIn("print", lines[-1])

    def test_markers_are_not_highlighted(self) -> None:
        lines = file_preview_lines(_details(content_preview=BINARY_PREVIEW_MARKER))

        self.assertEqual(lines[-1], BINARY_PREVIEW_MARKER)

    def test_control_bytes_are_escaped(self) -> None:
        lines = file_preview_lines(_details(path=Path("/tmp/raw.txt"), content_preview="bell\x07here"), no_color=True)

        self.assertEqual(lines[-1], "bell\\x07here")


class HighlightTests(unittest.TestCase):
    def test_unknown_file_type_stays_plain(self) -> None:
        self.assertEqual(highlight_content("plain words", Path("notes.unknownext")), "plain words")

    def test_unknown_style_falls_back(self) -> None:
        rendered = highlight_content("x = 1\n", Path("a.py"), style="no-such-style")

        self.assertIn("x", rendered)
        self.assertTrue(rendered.endswith("\n"))

    def test_sanitize_keeps_layout_whitespace(self) -> None:
        self.assertEqual(sanitize_terminal_text("a\tb\nc\x1b[2J"), "a\tb\nc\\x1b[2J")


if __name__ == "__main__":
    unittest.main()
