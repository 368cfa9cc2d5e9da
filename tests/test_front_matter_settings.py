"""Tests for the compact settings line and legacy front matter keys."""

from pathlib import Path

import pytest
import yaml

from headnum.front_matter import read_front_matter
from headnum.front_matter_settings import (
    get_front_matter_settings_or_alternative,
    parse_compact_front_matter_settings,
    parse_compact_settings_line,
    save_settings_to_front_matter,
    settings_to_compact_front_matter_value,
)
from headnum.numbering.tokens import NumberingStyle
from headnum.settings import DEFAULT_SETTINGS, HeadingNumberingConfig, with_overrides

ALTERNATIVE = HeadingNumberingConfig(
    auto=True,
    first_level=2,
    max_level=4,
    style_level_1=NumberingStyle.roman_upper,
    style_level_other=NumberingStyle.alpha_lower,
    prepend_value="Part",
    separator=":",
)


class TestSerialize:
    def test_off(self) -> None:
        config = with_overrides(DEFAULT_SETTINGS, {"off": True, "auto": True})
        assert settings_to_compact_front_matter_value(config) == "off"

    def test_defaults(self) -> None:
        assert settings_to_compact_front_matter_value(DEFAULT_SETTINGS) == (
            "first-level 1, max 6, 1.1"
        )

    def test_all_segments_in_order(self) -> None:
        config = HeadingNumberingConfig(
            auto=True,
            first_level=2,
            max_level=4,
            contents="^toc",
            skip_headings="^skip",
            start_at="C",
            skip_top_level=True,
            style_level_1=NumberingStyle.alpha_upper,
            style_level_other=NumberingStyle.decimal,
            separator=":",
        )
        assert settings_to_compact_front_matter_value(config) == (
            "auto, first-level 2, max 4, contents ^toc, skip ^skip, start-at C, _.A.1:"
        )

    def test_prepend_value_is_not_written(self) -> None:
        config = with_overrides(DEFAULT_SETTINGS, {"prepend_value": "Chapter"})
        assert "Chapter" not in settings_to_compact_front_matter_value(config)


class TestParseCompactLine:
    def test_full_line(self) -> None:
        config = parse_compact_settings_line(
            "auto, first-level 2, max 4, contents ^toc, skip ^skip, start-at C, _.A.1:"
        )
        assert config.auto is True
        assert config.first_level == 2
        assert config.max_level == 4
        assert config.contents == "^toc"
        assert config.skip_headings == "^skip"
        assert config.start_at == "C"
        assert config.skip_top_level is True
        assert config.style_level_1 == NumberingStyle.alpha_upper
        assert config.style_level_other == NumberingStyle.decimal
        assert config.separator == ":"

    def test_any_order_and_whitespace(self) -> None:
        config = parse_compact_settings_line("  I.1 ,max 3,   auto  ")
        assert config.auto is True
        assert config.max_level == 3
        assert config.style_level_1 == NumberingStyle.roman_upper

    def test_off(self) -> None:
        assert parse_compact_settings_line("off").off is True

    def test_unmentioned_fields_are_defaults(self) -> None:
        config = parse_compact_settings_line("max 2")
        assert config == with_overrides(DEFAULT_SETTINGS, {"max_level": 2})

    @pytest.mark.parametrize("line", ["max 9", "max 0", "max x", "first-level -1", "max"])
    def test_invalid_levels_are_ignored(self, line: str) -> None:
        config = parse_compact_settings_line(line)
        assert config.max_level == 6
        assert config.first_level == 1

    def test_empty_block_ids_are_ignored(self) -> None:
        config = parse_compact_settings_line("contents, skip , contents ")
        assert config.contents == ""
        assert config.skip_headings == ""
        assert config == DEFAULT_SETTINGS

    def test_prepend_value_is_read(self) -> None:
        assert parse_compact_settings_line("prependValue Chapter").prepend_value == "Chapter"

    def test_unknown_parts_are_ignored(self) -> None:
        assert parse_compact_settings_line("bogus, another one, ,") == DEFAULT_SETTINGS

    def test_malformed_style_keeps_defaults(self) -> None:
        config = parse_compact_settings_line("1.1:, X.Y")
        assert config.separator == ":"
        assert config.style_level_1 == NumberingStyle.decimal

    def test_start_at_needs_a_value(self) -> None:
        assert parse_compact_settings_line("start-at").start_at == ""
        assert parse_compact_settings_line("start-at IV").start_at == "IV"

    def test_round_trip(self) -> None:
        config = HeadingNumberingConfig(
            auto=True,
            first_level=3,
            max_level=5,
            contents="^contents",
            skip_headings="^skip-me",
            start_at="iv",
            skip_top_level=True,
            style_level_1=NumberingStyle.roman_lower,
            style_level_other=NumberingStyle.alpha_upper,
            separator=" —",
        )
        parsed = parse_compact_settings_line(settings_to_compact_front_matter_value(config))
        assert parsed == config

    def test_round_trip_drops_prepend_value(self) -> None:
        config = with_overrides(DEFAULT_SETTINGS, {"prepend_value": "Chapter"})
        parsed = parse_compact_settings_line(settings_to_compact_front_matter_value(config))
        assert parsed.prepend_value == ""
        assert parsed == DEFAULT_SETTINGS


class TestParseCompactFrontMatter:
    def test_absent(self) -> None:
        assert parse_compact_front_matter_settings({"title": "x"}) is None

    def test_empty_value_is_absent(self) -> None:
        assert parse_compact_front_matter_settings({"number headings": None}) is None
        assert parse_compact_front_matter_settings({"number headings": ""}) is None

    def test_yaml_scalars(self) -> None:
        """YAML reads a bare `off` as False and a bare `1.1` as a float."""
        metadata = yaml.safe_load("number headings: off\n")
        config = parse_compact_front_matter_settings(metadata)
        assert config is not None and config.off is True

        metadata = yaml.safe_load("number headings: 1.1\n")
        config = parse_compact_front_matter_settings(metadata)
        assert config == DEFAULT_SETTINGS


class TestGetSettingsOrAlternative:
    def test_no_front_matter(self) -> None:
        assert get_front_matter_settings_or_alternative(None, ALTERNATIVE) is ALTERNATIVE

    def test_compact_starts_from_defaults(self) -> None:
        config = get_front_matter_settings_or_alternative({"number headings": "max 3"}, ALTERNATIVE)
        assert config == with_overrides(DEFAULT_SETTINGS, {"max_level": 3})

    def test_compact_wins_over_legacy(self) -> None:
        metadata = {"number headings": "max 3", "number-headings-max-level": 2}
        assert get_front_matter_settings_or_alternative(metadata, ALTERNATIVE).max_level == 3

    def test_no_settings_keeps_alternative(self) -> None:
        assert get_front_matter_settings_or_alternative({"title": "x"}, ALTERNATIVE) == ALTERNATIVE

    def test_single_legacy_key(self) -> None:
        config = get_front_matter_settings_or_alternative(
            {"number-headings-max-level": 2}, ALTERNATIVE
        )
        assert config == with_overrides(ALTERNATIVE, {"max_level": 2})

    def test_all_legacy_keys(self) -> None:
        metadata = {
            "number-headings-skip-top-level": True,
            "number-headings-max-level": 3,
            "number-headings-style-level-1": "A",
            "number-headings-style-level-other": 1,
            "number-headings-auto": False,
            "number-headings-prependValue": "Chapter",
        }
        config = get_front_matter_settings_or_alternative(metadata, ALTERNATIVE)
        assert config.skip_top_level is True
        assert config.max_level == 3
        assert config.style_level_1 == NumberingStyle.alpha_upper
        assert config.style_level_other == NumberingStyle.decimal
        assert config.auto is False
        assert config.prepend_value == "Chapter"
        # Not covered by legacy keys
        assert config.first_level == ALTERNATIVE.first_level
        assert config.separator == ALTERNATIVE.separator

    def test_older_aliases(self) -> None:
        metadata = {"header-numbering-max-level": 2, "header-numbering-style-level-1": "i"}
        config = get_front_matter_settings_or_alternative(metadata, ALTERNATIVE)
        assert config.max_level == 2
        assert config.style_level_1 == NumberingStyle.roman_lower

    def test_newer_key_wins_over_alias(self) -> None:
        metadata = {"number-headings-max-level": 5, "header-numbering-max-level": 2}
        assert get_front_matter_settings_or_alternative(metadata, ALTERNATIVE).max_level == 5

    def test_invalid_legacy_values_keep_alternative(self) -> None:
        metadata = {
            "number-headings-skip-top-level": "yes",
            "number-headings-max-level": 10,
            "number-headings-style-level-1": "Q",
            "number-headings-auto": "true",
            "number-headings-prependValue": 12,
        }
        assert get_front_matter_settings_or_alternative(metadata, ALTERNATIVE) == ALTERNATIVE


class TestSaveSettings:
    def test_save_creates_front_matter(self, tmp_path: Path) -> None:
        path = tmp_path / "doc.md"
        path.write_text("# Title\n")
        config = with_overrides(DEFAULT_SETTINGS, {"auto": True, "separator": ":"})

        save_settings_to_front_matter(path, config)

        text = path.read_text()
        assert text.startswith("---\n")
        assert text.endswith("---\n# Title\n")
        metadata = read_front_matter(text)
        assert metadata == {"number headings": "auto, first-level 1, max 6, 1.1:"}

    def test_save_replaces_existing_entry(self, tmp_path: Path) -> None:
        path = tmp_path / "doc.md"
        path.write_text("---\ntitle: Notes\nnumber headings: max 2, 1.1\ntags: [a]\n---\nBody\n")

        save_settings_to_front_matter(path, with_overrides(DEFAULT_SETTINGS, {"off": True}))

        assert path.read_text() == (
            "---\ntitle: Notes\nnumber headings: 'off'\ntags: [a]\n---\nBody\n"
        )
        config = get_front_matter_settings_or_alternative(
            read_front_matter(path.read_text()), DEFAULT_SETTINGS
        )
        assert config.off is True
