"""Tests for the Miller-column browser state machine.

Covers column push/pop, the selection cache, rollback on failed ascends,
type-ahead search timing, and preview derivation.
"""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path
from unittest import mock

from millerbrowse.errors import NotReadable, SecurityRejected
from millerbrowse.file_model import FileDetails
from millerbrowse.navigation import Browser, DirColumn
from millerbrowse.navigation import column as column_module
from millerbrowse.settings import Settings


class FakeClock:
    def __init__(self) -> None:
        self.now = 100.0

    def __call__(self) -> float:
        return self.now


def assert_browser_invariants(test: unittest.TestCase, browser: Browser) -> None:
    test.assertTrue(browser.columns)
    for parent, child in zip(browser.columns, browser.columns[1:]):
        test.assertEqual(child.path.parent, parent.path)
    columns = list(browser.columns)
    if isinstance(browser.preview, DirColumn):
        columns.append(browser.preview)
    for column in columns:
        if column.entries:
            test.assertIsNotNone(column.selected)
            test.assertTrue(0 <= column.selected < len(column.entries))
        else:
            test.assertIsNone(column.selected)


def _fail_listing_for(target: Path, reason: str = "Permission denied"):
    real_list_directory = column_module.list_directory

    def fake(path, settings):
        if path == target:
            raise NotReadable(path, reason)
        return real_list_directory(path, settings)

    return mock.patch("millerbrowse.navigation.column.list_directory", side_effect=fake)


class BrowserTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.base = Path(self._tmp.name).resolve()
        self.root = self.base / "tree"
        self.root.mkdir()
        (self.root / "a.txt").write_text("alpha text\n", encoding="utf-8")
        (self.root / "b").mkdir()
        (self.root / "c.txt").write_text("gamma\n", encoding="utf-8")
        for name in ("one", "three", "two"):
            (self.root / "b" / name).mkdir()
        (self.root / "b" / "notes.txt").write_text("notes\n", encoding="utf-8")
        (self.root / "b" / "two" / "deep").mkdir()
        self.settings = Settings()

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def make_browser(self, path: Path | None = None, **options) -> Browser:
        return Browser(path or self.root, self.settings, **options)


class BrowserOpenTests(BrowserTestCase):
    def test_opening_selects_first_entry_and_previews_it(self) -> None:
        browser = self.make_browser()

        column = browser.active_column
        self.assertEqual([entry.name for entry in column.entries], ["b", "a.txt", "c.txt"])
        self.assertEqual(column.selected, 0)
        self.assertIsInstance(browser.preview, DirColumn)
        self.assertEqual(browser.preview.path, self.root / "b")
        self.assertEqual([entry.name for entry in browser.preview.entries], ["one", "three", "two", "notes.txt"])
        assert_browser_invariants(self, browser)

    def test_opening_unreadable_directory_raises(self) -> None:
        with self.assertRaises(NotReadable):
            self.make_browser(self.root / "missing")

    def test_update_preview_is_idempotent(self) -> None:
        browser = self.make_browser()

        browser.update_preview(self.settings)
        first = browser.preview
        browser.update_preview(self.settings)

        self.assertEqual(browser.preview, first)

    def test_file_selection_previews_details(self) -> None:
        browser = self.make_browser()
        browser.select_next()
        browser.update_preview(self.settings)

        self.assertIsInstance(browser.preview, FileDetails)
        self.assertEqual(browser.preview.path, self.root / "a.txt")
        self.assertEqual(browser.preview.content_preview, "alpha text\n")

    def test_preview_failure_yields_no_preview(self) -> None:
        browser = self.make_browser()
        (self.root / "b" / "notes.txt").unlink()
        for name in ("one", "three"):
            (self.root / "b" / name).rmdir()
        (self.root / "b" / "two" / "deep").rmdir()
        (self.root / "b" / "two").rmdir()
        (self.root / "b").rmdir()

        browser.update_preview(self.settings)

        self.assertIsNone(browser.preview)

    def test_empty_directory_has_no_preview(self) -> None:
        browser = self.make_browser(self.root / "b" / "one")

        self.assertIsNone(browser.active_column.selected)
        self.assertIsNone(browser.preview)


class NavigateRightTests(BrowserTestCase):
    def test_enters_selected_directory(self) -> None:
        browser = self.make_browser()

        self.assertTrue(browser.navigate_right(self.settings))

        self.assertEqual([column.path for column in browser.columns], [self.root, self.root / "b"])
        self.assertEqual(browser.current_path, self.root / "b")
        self.assertEqual(browser.selection_cache[self.root], 0)
        self.assertEqual(browser.preview.path, self.root / "b" / "one")
        assert_browser_invariants(self, browser)

    def test_file_selection_is_a_noop(self) -> None:
        browser = self.make_browser()
        browser.select_next()
        browser.update_preview(self.settings)

        self.assertFalse(browser.navigate_right(self.settings))
        self.assertEqual(len(browser.columns), 1)

    def test_unreadable_directory_leaves_stack_unchanged(self) -> None:
        browser = self.make_browser()

        with _fail_listing_for(self.root / "b"):
            with self.assertLogs("millerbrowse.navigation.browser", level="INFO") as captured:
                entered = browser.navigate_right(self.settings)

        self.assertFalse(entered)
        self.assertEqual([column.path for column in browser.columns], [self.root])
        self.assertIsNone(browser.preview)
        self.assertIn("Permission denied", captured.output[0])

    def test_unsafe_directory_raises_after_refreshing_preview(self) -> None:
        (self.root / ".ssh").mkdir()
        settings = Settings(show_hidden_files=True)
        browser = Browser(self.root, settings)
        self.assertEqual(browser.active_column.selected_entry().name, ".ssh")

        with self.assertRaises(SecurityRejected):
            browser.navigate_right(settings)

        self.assertEqual([column.path for column in browser.columns], [self.root])
        self.assertIsNone(browser.preview)

    def test_column_count_is_capped_by_dropping_ancestors(self) -> None:
        browser = self.make_browser(max_columns=2)
        browser.navigate_right(self.settings)
        browser.jump_to_last()
        browser.select_previous()
        browser.update_preview(self.settings)
        self.assertEqual(browser.active_column.selected_entry().name, "two")

        self.assertTrue(browser.navigate_right(self.settings))

        self.assertEqual([column.path for column in browser.columns], [self.root / "b", self.root / "b" / "two"])
        assert_browser_invariants(self, browser)

    def test_selection_cache_restores_previous_position(self) -> None:
        browser = self.make_browser()
        browser.navigate_right(self.settings)
        browser.select_next()
        browser.select_next()
        browser.update_preview(self.settings)

        browser.navigate_left(self.settings)
        self.assertEqual(browser.preview.selected, 2)
        browser.navigate_right(self.settings)

        self.assertEqual(browser.active_column.selected, 2)
        self.assertEqual(browser.active_column.selected_entry().name, "two")


class NavigateLeftTests(BrowserTestCase):
    def test_pops_rightmost_column_without_reading(self) -> None:
        browser = self.make_browser()
        browser.navigate_right(self.settings)

        with mock.patch("millerbrowse.navigation.column.list_directory") as listing:
            listing.return_value = []
            browser.navigate_left(self.settings)

        self.assertEqual([column.path for column in browser.columns], [self.root])
        self.assertEqual(browser.selection_cache[self.root / "b"], 0)
        for call in listing.call_args_list:
            self.assertNotEqual(call.args[0], self.root)

    def test_single_column_ascends_and_selects_departed_directory(self) -> None:
        browser = self.make_browser(self.root / "b")
        browser.select_next()

        browser.navigate_left(self.settings)

        self.assertEqual([column.path for column in browser.columns], [self.root])
        self.assertEqual(browser.active_column.selected_entry().name, "b")
        self.assertEqual(browser.selection_cache[self.root / "b"], 1)
        self.assertEqual(browser.preview.path, self.root / "b")
        self.assertEqual(browser.preview.selected, 1)
        assert_browser_invariants(self, browser)

    def test_failed_ascend_rolls_back_completely(self) -> None:
        browser = self.make_browser(self.root / "b")
        browser.select_next()
        browser.update_preview(self.settings)
        browser.selection_cache[self.base / "elsewhere"] = 3
        columns_before = browser.columns
        snapshot = [(column.path, list(column.entries), column.selected, column.offset) for column in browser.columns]
        cache_before = dict(browser.selection_cache)
        preview_before = browser.preview

        with _fail_listing_for(self.root):
            with self.assertRaises(NotReadable) as ctx:
                browser.navigate_left(self.settings)

        self.assertEqual(ctx.exception.reason, "Permission denied")
        self.assertIs(browser.columns, columns_before)
        self.assertEqual(
            [(column.path, list(column.entries), column.selected, column.offset) for column in browser.columns],
            snapshot,
        )
        self.assertEqual(browser.selection_cache, cache_before)
        self.assertIs(browser.preview, preview_before)

    def test_filesystem_root_is_a_noop(self) -> None:
        browser = Browser(Path("/"), self.settings)
        columns_before = list(browser.columns)

        browser.navigate_left(self.settings)

        self.assertEqual(browser.columns, columns_before)
        self.assertEqual(browser.current_path, Path("/"))


class ActivateColumnTests(BrowserTestCase):
    def _three_deep(self) -> Browser:
        browser = self.make_browser()
        browser.navigate_right(self.settings)
        browser.jump_to_last()
        browser.select_previous()
        browser.update_preview(self.settings)
        browser.navigate_right(self.settings)
        self.assertEqual(len(browser.columns), 3)
        return browser

    def test_activating_an_ancestor_pops_to_it(self) -> None:
        browser = self._three_deep()

        self.assertTrue(browser.activate_column(0, self.settings))

        self.assertEqual([column.path for column in browser.columns], [self.root])
        self.assertEqual(browser.preview.path, self.root / "b")

    def test_activating_the_preview_enters_it(self) -> None:
        browser = self._three_deep()

        self.assertTrue(browser.activate_column(3, self.settings))

        self.assertEqual(browser.current_path, self.root / "b" / "two" / "deep")
        assert_browser_invariants(self, browser)

    def test_activating_the_active_column_changes_nothing(self) -> None:
        browser = self._three_deep()

        self.assertTrue(browser.activate_column(2, self.settings))

        self.assertEqual(len(browser.columns), 3)

    def test_out_of_range_index_is_rejected(self) -> None:
        browser = self._three_deep()

        self.assertFalse(browser.activate_column(4, self.settings))
        self.assertFalse(browser.activate_column(-1, self.settings))
        self.assertEqual(len(browser.columns), 3)


class SetAnchorTests(BrowserTestCase):
    def test_set_anchor_keeps_only_the_active_column(self) -> None:
        browser = self.make_browser()
        browser.navigate_right(self.settings)
        browser.select_next()
        browser.update_preview(self.settings)
        active = browser.active_column
        preview = browser.preview

        browser.set_anchor()

        self.assertEqual(browser.columns, [active])
        self.assertEqual(browser.active_column.selected, 1)
        self.assertIs(browser.preview, preview)

        browser.navigate_left(self.settings)
        self.assertEqual(browser.current_path, self.root)


class SearchTests(BrowserTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.search_root = self.base / "search"
        self.search_root.mkdir()
        for name in ("apple", "Banana", "berry", "cherry"):
            (self.search_root / name).write_text("", encoding="utf-8")
        self.clock = FakeClock()
        self.browser = self.make_browser(self.search_root, search_timeout=1.0, clock=self.clock)

    def test_search_is_case_insensitive_prefix_match(self) -> None:
        self.assertTrue(self.browser.handle_search_char("b"))
        self.assertEqual(self.browser.active_column.selected_entry().name, "Banana")

        self.clock.now += 0.5
        self.assertTrue(self.browser.handle_search_char("e"))
        self.assertEqual(self.browser.search_string, "be")
        self.assertEqual(self.browser.active_column.selected_entry().name, "berry")

    def test_pause_longer_than_timeout_starts_a_new_search(self) -> None:
        self.browser.handle_search_char("a")
        self.clock.now += 1.5

        self.assertTrue(self.browser.handle_search_char("c"))

        self.assertEqual(self.browser.search_string, "c")
        self.assertEqual(self.browser.active_column.selected_entry().name, "cherry")

    def test_no_match_keeps_selection(self) -> None:
        self.browser.handle_search_char("c")
        self.clock.now += 0.2

        self.assertFalse(self.browser.handle_search_char("z"))

        self.assertEqual(self.browser.search_string, "cz")
        self.assertEqual(self.browser.active_column.selected_entry().name, "cherry")

    def test_clear_search_resets_buffer(self) -> None:
        self.browser.handle_search_char("b")
        self.browser.clear_search()
        self.clock.now += 0.1

        self.browser.handle_search_char("a")

        self.assertEqual(self.browser.search_string, "a")
        self.assertEqual(self.browser.active_column.selected_entry().name, "apple")


class JumpTests(BrowserTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.jump_root = self.base / "jump"
        self.jump_root.mkdir()
        for index in range(5):
            (self.jump_root / f"file{index}").write_text("", encoding="utf-8")

    def test_jumps_clamp_to_bounds(self) -> None:
        browser = self.make_browser(self.jump_root)

        browser.jump_down_by_10()
        self.assertEqual(browser.active_column.selected, 4)
        browser.jump_up_by_10()
        self.assertEqual(browser.active_column.selected, 0)
        browser.jump_to_last()
        self.assertEqual(browser.active_column.selected, 4)
        browser.jump_to_first()
        self.assertEqual(browser.active_column.selected, 0)

    def test_jumps_on_empty_column_do_nothing(self) -> None:
        browser = self.make_browser(self.root / "b" / "one")

        browser.jump_down_by_10()
        browser.jump_to_last()

        self.assertIsNone(browser.active_column.selected)


class ReloadTests(BrowserTestCase):
    def test_showing_hidden_files_adds_exactly_the_dotfiles(self) -> None:
        (self.root / ".env").write_text("", encoding="utf-8")
        (self.root / ".config").mkdir()
        (self.root / "b" / ".hidden").write_text("", encoding="utf-8")
        browser = self.make_browser()
        browser.navigate_right(self.settings)
        counts_before = [len(column.entries) for column in browser.columns]

        settings = Settings(show_hidden_files=True)
        browser.reload_all_columns(settings)

        self.assertEqual([len(column.entries) for column in browser.columns], [counts_before[0] + 2, counts_before[1] + 1])
        assert_browser_invariants(self, browser)

    def test_vanished_column_is_logged_and_skipped(self) -> None:
        browser = self.make_browser(self.root / "b" / "one")

        (self.root / "b" / "one").rmdir()
        with self.assertLogs("millerbrowse.navigation.browser", level="ERROR") as captured:
            browser.reload_all_columns(self.settings)

        self.assertIn("Entry no longer exists", captured.output[0])
        self.assertEqual(browser.current_path, self.root / "b" / "one")


if __name__ == "__main__":
    unittest.main()
