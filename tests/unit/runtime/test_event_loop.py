"""Tests for the interactive event loop and session bootstrap."""

from __future__ import annotations

import contextlib
import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from millerbrowse.runtime import loop
from millerbrowse.runtime.app import App
from millerbrowse.settings import Settings


class FakeTerminal:
    def __init__(self) -> None:
        self.frames: list[list[str]] = []
        self.raw_mode_entered = 0

    @contextlib.contextmanager
    def raw_mode(self):
        self.raw_mode_entered += 1
        yield

    def write_frame(self, lines: list[str]) -> None:
        self.frames.append(lines)


class RunMainLoopTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name).resolve()
        (self.root / "alpha").mkdir()
        (self.root / "beta").mkdir()

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_loop_renders_dispatches_and_quits(self) -> None:
        app = App(self.root, Settings())
        terminal = FakeTerminal()
        keys = iter(["DOWN", "", "RIGHT", "CTRL_C"])
        size = os.terminal_size((80, 24))

        with mock.patch("millerbrowse.runtime.loop.read_key", side_effect=lambda fd, timeout_ms: next(keys)), mock.patch(
            "millerbrowse.runtime.loop.shutil.get_terminal_size", return_value=size
        ):
            loop.run_main_loop(app, terminal, 0, no_color=True, style="monokai")

        self.assertTrue(app.should_quit)
        self.assertEqual(terminal.raw_mode_entered, 1)
        self.assertEqual(app.browser.current_path, self.root / "beta")
        # Initial frame plus one per dispatched key before quitting; idle polls do not redraw.
        self.assertEqual(len(terminal.frames), 3)
        self.assertEqual(len(terminal.frames[0]), 24)
        self.assertEqual(len(app.layout_info.column_areas), 2)

    def test_interrupt_while_reading_is_ignored(self) -> None:
        app = App(self.root, Settings())
        terminal = FakeTerminal()
        results = iter([KeyboardInterrupt(), "CTRL_Q"])

        def fake_read_key(fd, timeout_ms):
            result = next(results)
            if isinstance(result, BaseException):
                raise result
            return result

        with mock.patch("millerbrowse.runtime.loop.read_key", side_effect=fake_read_key), mock.patch(
            "millerbrowse.runtime.loop.shutil.get_terminal_size", return_value=os.terminal_size((80, 24))
        ):
            loop.run_main_loop(app, terminal, 0, no_color=True, style="monokai")

        self.assertTrue(app.should_quit)


class RunBrowserTests(unittest.TestCase):
    def run_session(self, settings: Settings, **options) -> tuple[mock.Mock, mock.Mock, list[bool]]:
        seen_hidden: list[bool] = []

        def fake_loop(app, terminal, stdin_fd, **kwargs):
            seen_hidden.append(app.settings.show_hidden_files)

        with tempfile.TemporaryDirectory() as tmp:
            self.root = Path(tmp).resolve()
            with mock.patch("millerbrowse.runtime.loop.load_settings", return_value=settings), mock.patch(
                "millerbrowse.runtime.loop.save_settings"
            ) as save_settings, mock.patch("millerbrowse.runtime.loop.TerminalController"), mock.patch(
                "millerbrowse.runtime.loop.sys"
            ), mock.patch("millerbrowse.runtime.loop.run_main_loop", side_effect=fake_loop) as run_main_loop:
                loop.run_browser(self.root, **options)
        return save_settings, run_main_loop, seen_hidden

    def test_settings_are_loaded_and_saved_around_the_session(self) -> None:
        settings = Settings()

        save_settings, run_main_loop, _seen = self.run_session(settings, no_color=True, style="friendly")

        save_settings.assert_called_once_with(settings)
        app = run_main_loop.call_args.args[0]
        self.assertIs(app.settings, settings)
        self.assertEqual(app.browser.current_path, self.root)
        self.assertEqual(run_main_loop.call_args.kwargs, {"no_color": True, "style": "friendly"})
        self.assertTrue(any("Started browsing" in entry.message for entry in app.error_log.entries))

    def test_show_hidden_flag_is_not_persisted(self) -> None:
        settings = Settings()

        save_settings, _loop, seen_hidden = self.run_session(settings, show_hidden=True)

        self.assertEqual(seen_hidden, [True])
        self.assertFalse(settings.show_hidden_files)
        save_settings.assert_called_once_with(settings)

    def test_show_hidden_flag_keeps_saved_preference(self) -> None:
        settings = Settings(show_hidden_files=True)

        _save, _loop, seen_hidden = self.run_session(settings, show_hidden=True)

        self.assertEqual(seen_hidden, [True])
        self.assertTrue(settings.show_hidden_files)

    def test_settings_are_saved_even_when_loop_fails(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            with mock.patch("millerbrowse.runtime.loop.load_settings", return_value=Settings()), mock.patch(
                "millerbrowse.runtime.loop.save_settings"
            ) as save_settings, mock.patch("millerbrowse.runtime.loop.TerminalController"), mock.patch(
                "millerbrowse.runtime.loop.sys"
            ), mock.patch("millerbrowse.runtime.loop.run_main_loop", side_effect=RuntimeError("boom")):
                with self.assertRaises(RuntimeError):
                    loop.run_browser(root)

        save_settings.assert_called_once()


if __name__ == "__main__":
    unittest.main()
