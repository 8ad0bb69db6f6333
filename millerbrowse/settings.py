"""User-facing settings value plus browser-wide limits.

``Settings`` is passed explicitly into every listing/preview operation; the
navigation core never reads global configuration state.
"""

from __future__ import annotations

from dataclasses import dataclass, field

SEARCH_TIMEOUT_SECONDS = 1.0
MAX_COLUMNS_DISPLAY = 4
MAX_DIRECTORY_ENTRIES = 10_000
MAX_PREVIEW_BYTES = 4096
MAX_PATH_COMPONENTS = 50

DEFAULT_ICON = "📄"
DIRECTORY_ICON = "📁"
EXECUTABLE_ICON = "🚀"
SYMLINK_ICON = "🔗"
SYMLINK_RULE_KEY = "symlink"


@dataclass(frozen=True)
class FileTypeRule:
    """Icon and preview policy for one MIME primary type or exact subtype."""

    icon: str = DEFAULT_ICON
    preview: bool = False


def _default_primary_rules() -> dict[str, FileTypeRule]:
    return {
        "text": FileTypeRule(icon="📄", preview=True),
        "image": FileTypeRule(icon="🖼️", preview=False),
        "video": FileTypeRule(icon="🎬", preview=False),
        "audio": FileTypeRule(icon="🎵", preview=False),
        "application": FileTypeRule(icon="📦", preview=False),
    }


def _default_subtype_rules() -> dict[str, FileTypeRule]:
    return {
        "text/markdown": FileTypeRule(icon="📝", preview=True),
        "text/x-rust": FileTypeRule(icon="🦀", preview=True),
        "text/x-python": FileTypeRule(icon="🐍", preview=True),
        "application/toml": FileTypeRule(icon="🦀", preview=True),
        "application/json": FileTypeRule(icon="📦", preview=True),
        "application/x-sh": FileTypeRule(icon="🚀", preview=True),
        SYMLINK_RULE_KEY: FileTypeRule(icon=SYMLINK_ICON, preview=False),
    }


@dataclass
class MimeTypeRules:
    """Rule tables keyed by MIME primary type and by exact ``type/subtype``."""

    primary: dict[str, FileTypeRule] = field(default_factory=_default_primary_rules)
    subtypes: dict[str, FileTypeRule] = field(default_factory=_default_subtype_rules)

    def rule_for(self, mime_type: str) -> FileTypeRule | None:
        """Return the exact-subtype rule, else the primary-type rule, else ``None``."""
        rule = self.subtypes.get(mime_type)
        if rule is not None:
            return rule
        primary, _sep, _rest = mime_type.partition("/")
        return self.primary.get(primary)

    def keys(self) -> list[str]:
        """All rule keys from both tables, sorted."""
        return sorted(set(self.primary) | set(self.subtypes))

    def get(self, key: str) -> FileTypeRule | None:
        rule = self.primary.get(key)
        return rule if rule is not None else self.subtypes.get(key)

    def set_rule(self, key: str, rule: FileTypeRule) -> None:
        """Store ``rule`` under ``key``; ``type/subtype`` keys go to the subtype table."""
        self.remove(key)
        table = self.subtypes if "/" in key else self.primary
        table[key] = rule

    def remove(self, key: str) -> bool:
        removed = self.primary.pop(key, None) is not None
        return (self.subtypes.pop(key, None) is not None) or removed


@dataclass
class Settings:
    """Mutable settings toggled at runtime and persisted across sessions."""

    show_hidden_files: bool = False
    show_icons: bool = True
    mime_type_rules: MimeTypeRules = field(default_factory=MimeTypeRules)

    def rule_for(self, mime_type: str | None) -> FileTypeRule | None:
        if not mime_type:
            return None
        return self.mime_type_rules.rule_for(mime_type)

    def can_preview(self, mime_type: str | None) -> bool:
        """Return whether content preview is enabled for ``mime_type``."""
        rule = self.rule_for(mime_type)
        return rule is not None and rule.preview

    def to_dict(self) -> dict[str, object]:
        """Serialize into the JSON shape stored in the settings file."""

        def rules(table: dict[str, FileTypeRule]) -> dict[str, dict[str, object]]:
            return {key: {"icon": rule.icon, "preview": rule.preview} for key, rule in sorted(table.items())}

        return {
            "show_hidden_files": self.show_hidden_files,
            "show_icons": self.show_icons,
            "mime_type_rules": {
                "primary": rules(self.mime_type_rules.primary),
                "subtypes": rules(self.mime_type_rules.subtypes),
            },
        }

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> Settings:
        """Build settings from decoded JSON, falling back per field on bad input.

        Booleans must be real JSON booleans. Rule tables that are missing or
        malformed keep the built-in defaults; individual malformed rules are
        dropped and empty icons are replaced with the default icon.
        """
        defaults = cls()
        show_hidden = data.get("show_hidden_files")
        show_icons = data.get("show_icons")
        raw_rules = data.get("mime_type_rules", data.get("mime_types"))

        mime_type_rules = defaults.mime_type_rules
        if isinstance(raw_rules, dict):
            primary = _parse_rule_table(raw_rules.get("primary"))
            subtypes = _parse_rule_table(raw_rules.get("subtypes"))
            mime_type_rules = MimeTypeRules(
                primary=primary if primary is not None else _default_primary_rules(),
                subtypes=subtypes if subtypes is not None else _default_subtype_rules(),
            )

        return cls(
            show_hidden_files=show_hidden if isinstance(show_hidden, bool) else defaults.show_hidden_files,
            show_icons=show_icons if isinstance(show_icons, bool) else defaults.show_icons,
            mime_type_rules=mime_type_rules,
        )


def _parse_rule_table(value: object) -> dict[str, FileTypeRule] | None:
    if not isinstance(value, dict):
        return None
    table: dict[str, FileTypeRule] = {}
    for key, raw_rule in value.items():
        if not isinstance(key, str) or not key or not isinstance(raw_rule, dict):
            continue
        icon = raw_rule.get("icon")
        preview = raw_rule.get("preview")
        table[key] = FileTypeRule(
            icon=icon if isinstance(icon, str) and icon else DEFAULT_ICON,
            preview=preview if isinstance(preview, bool) else False,
        )
    return table


__all__ = [
    "SEARCH_TIMEOUT_SECONDS",
    "MAX_COLUMNS_DISPLAY",
    "MAX_DIRECTORY_ENTRIES",
    "MAX_PREVIEW_BYTES",
    "MAX_PATH_COMPONENTS",
    "DEFAULT_ICON",
    "DIRECTORY_ICON",
    "EXECUTABLE_ICON",
    "SYMLINK_ICON",
    "SYMLINK_RULE_KEY",
    "FileTypeRule",
    "MimeTypeRules",
    "Settings",
]
