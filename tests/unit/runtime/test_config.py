"""Tests for settings persistence.

Validates the JSON round trip, legacy-path fallback, and defensive loading
of malformed files.
"""

from __future__ import annotations

import json
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from millerbrowse.runtime import config
from millerbrowse.settings import FileTypeRule, Settings


class ConfigBehaviorTests(unittest.TestCase):
    def test_settings_round_trip(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "nested" / "settings.json"
            settings = Settings(show_hidden_files=True, show_icons=False)
            settings.mime_type_rules.primary["font"] = FileTypeRule(icon="F", preview=False)
            with mock.patch("millerbrowse.runtime.config.CONFIG_PATH", config_path):
                config.save_settings(settings)
                loaded = config.load_settings()

            self.assertTrue(config_path.exists())
        self.assertEqual(loaded, settings)

    def test_missing_file_yields_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "settings.json"
            with mock.patch("millerbrowse.runtime.config.CONFIG_PATH", config_path):
                self.assertEqual(config.load_config(), {})
                self.assertEqual(config.load_settings(), Settings())

    def test_malformed_file_logs_and_yields_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "settings.json"
            config_path.write_text("{not json", encoding="utf-8")
            with mock.patch("millerbrowse.runtime.config.CONFIG_PATH", config_path):
                with self.assertLogs("millerbrowse.runtime.config", level="WARNING"):
                    loaded = config.load_settings()

        self.assertEqual(loaded, Settings())

    def test_non_object_json_is_ignored(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "settings.json"
            config_path.write_text("[1, 2, 3]", encoding="utf-8")
            with mock.patch("millerbrowse.runtime.config.CONFIG_PATH", config_path):
                self.assertEqual(config.load_config(), {})

    def test_save_keeps_unrelated_keys_and_drops_legacy_rules_key(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "settings.json"
            config_path.write_text(json.dumps({"theme": "dark", "mime_types": {}}), encoding="utf-8")
            with mock.patch("millerbrowse.runtime.config.CONFIG_PATH", config_path):
                config.save_settings(Settings())
            saved = json.loads(config_path.read_text(encoding="utf-8"))

        self.assertEqual(saved["theme"], "dark")
        self.assertNotIn("mime_types", saved)
        self.assertIn("mime_type_rules", saved)
        self.assertFalse(saved["show_hidden_files"])

    def test_load_config_falls_back_to_legacy_path_when_default_missing(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            default_path = Path(tmp) / "config" / "settings.json"
            legacy_path = Path(tmp) / ".browse"
            legacy_path.write_text(json.dumps({"show_hidden_files": True}), encoding="utf-8")
            with mock.patch("millerbrowse.runtime.config.DEFAULT_CONFIG_PATH", default_path), mock.patch(
                "millerbrowse.runtime.config.CONFIG_PATH", default_path
            ), mock.patch("millerbrowse.runtime.config.LEGACY_CONFIG_PATH", legacy_path):
                loaded = config.load_settings()

        self.assertTrue(loaded.show_hidden_files)

    def test_save_failure_is_logged_not_raised(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            blocker = Path(tmp) / "blocker"
            blocker.write_text("", encoding="utf-8")
            config_path = blocker / "settings.json"
            with mock.patch("millerbrowse.runtime.config.CONFIG_PATH", config_path):
                with self.assertLogs("millerbrowse.runtime.config", level="WARNING") as captured:
                    config.save_config({"show_icons": True})

        self.assertIn("Failed to save settings", captured.output[0])


if __name__ == "__main__":
    unittest.main()
