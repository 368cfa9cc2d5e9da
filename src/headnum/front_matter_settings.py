"""
Reading and writing heading numbering settings in document front matter.

Settings are stored in a single compact entry:

    number headings: auto, first-level 2, max 4, contents ^toc, start-at C, _.A.1:

Segments are separated by commas and may appear in any order when read. The last
segment in the written form is the style format `[_.]<style level 1>.<style other
levels><separator>`. Writing always emits segments in a fixed order and never
emits `prependValue`, which can only be set by editing the line by hand.

Documents written before the compact entry existed use discrete keys such as
`number-headings-max-level` (or the older `header-numbering-max-level`). These are
read as a fallback when the compact entry is absent, and are never written.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any

from strif import atomic_output_file

from headnum.front_matter import update_front_matter_entry
from headnum.numbering.tokens import NumberingStyle
from headnum.settings import (
    DEFAULT_SETTINGS,
    HeadingNumberingConfig,
    is_valid_block_id_setting,
    is_valid_first_or_max_level,
    is_valid_flag,
    is_valid_numbering_style_string,
    is_valid_numbering_value_string,
    parse_style_format_part,
    style_format_part,
    with_overrides,
)

logger = logging.getLogger(__name__)

COMPACT_SETTINGS_KEY = "number headings"

OFF_PART_KEY = "off"
AUTO_PART_KEY = "auto"
FIRST_LEVEL_PART_KEY = "first-level"
MAX_LEVEL_PART_KEY = "max"
START_AT_PART_KEY = "start-at"
PREPEND_PART_KEY = "prependValue"
CONTENTS_PART_KEY = "contents"
SKIP_PART_KEY = "skip"

# Legacy discrete keys, each with its older alias
LEGACY_PREFIXES = ("number-headings-", "header-numbering-")
LEGACY_SKIP_TOP_LEVEL = "skip-top-level"
LEGACY_MAX_LEVEL = "max-level"
LEGACY_STYLE_LEVEL_1 = "style-level-1"
LEGACY_STYLE_LEVEL_OTHER = "style-level-other"
LEGACY_AUTO = "auto"
LEGACY_PREPEND = "prependValue"


# === Compact Line Parsing ===

Overrides = dict[str, Any]
PartMatcher = Callable[[str], bool]
PartHandler = Callable[[str, Overrides], None]


def _exact(key: str) -> PartMatcher:
    return lambda part: part == key


def _keyed(key: str) -> PartMatcher:
    """Match `key` alone or `key <value>`."""
    return lambda part: part == key or part.startswith(key + " ")


def _remainder(part: str, key: str) -> str:
    return part[len(key) + 1 :]


def _parse_int(text: str) -> int | None:
    try:
        return int(text.strip())
    except ValueError:
        return None


def _handle_off(_part: str, overrides: Overrides) -> None:
    overrides["off"] = True


def _handle_auto(_part: str, overrides: Overrides) -> None:
    overrides["auto"] = True


def _level_handler(key: str, field_name: str) -> PartHandler:
    def handle(part: str, overrides: Overrides) -> None:
        n = _parse_int(_remainder(part, key))
        if is_valid_first_or_max_level(n):
            overrides[field_name] = n
        else:
            logger.debug("Ignoring invalid level in %r", part)

    return handle


def _handle_start_at(part: str, overrides: Overrides) -> None:
    value = _remainder(part, START_AT_PART_KEY)
    if is_valid_numbering_value_string(value):
        overrides["start_at"] = value


def _handle_prepend(part: str, overrides: Overrides) -> None:
    overrides["prepend_value"] = _remainder(part, PREPEND_PART_KEY)


def _block_id_handler(key: str, field_name: str) -> PartHandler:
    def handle(part: str, overrides: Overrides) -> None:
        # A bare key with no block id is treated as not set
        block_id = _remainder(part, key)
        if is_valid_block_id_setting(block_id):
            overrides[field_name] = block_id

    return handle


def _handle_style_format(part: str, overrides: Overrides) -> None:
    overrides.update(parse_style_format_part(part))


# Checked in order for each segment; the first match wins. Anything unmatched is
# read as the style format.
COMPACT_PART_RULES: list[tuple[PartMatcher, PartHandler]] = [
    (_exact(OFF_PART_KEY), _handle_off),
    (_exact(AUTO_PART_KEY), _handle_auto),
    (_keyed(FIRST_LEVEL_PART_KEY), _level_handler(FIRST_LEVEL_PART_KEY, "first_level")),
    (_keyed(MAX_LEVEL_PART_KEY), _level_handler(MAX_LEVEL_PART_KEY, "max_level")),
    (_keyed(START_AT_PART_KEY), _handle_start_at),
    (_keyed(PREPEND_PART_KEY), _handle_prepend),
    (_keyed(CONTENTS_PART_KEY), _block_id_handler(CONTENTS_PART_KEY, "contents")),
    (_keyed(SKIP_PART_KEY), _block_id_handler(SKIP_PART_KEY, "skip_headings")),
]


def _entry_to_string(entry: Any) -> str | None:
    """
    Convert a front matter value back to the text the user wrote. YAML 1.1 reads a
    bare `off` as False and a bare `1.1` as a float.
    """
    if entry is None or entry == "":
        return None
    if isinstance(entry, bool):
        logger.debug("Reading boolean compact settings entry %r as text", entry)
        return OFF_PART_KEY if entry is False else "on"
    return str(entry)


def parse_compact_settings_line(line: str) -> HeadingNumberingConfig:
    """
    Parse a compact settings line. Always starts from the default settings, so any
    setting not mentioned in the line has its default value.
    """
    overrides: Overrides = {}
    for raw_part in line.split(","):
        part = raw_part.strip()
        if not part:
            continue
        for matches, handle in COMPACT_PART_RULES:
            if matches(part):
                handle(part, overrides)
                break
        else:
            _handle_style_format(part, overrides)
    return with_overrides(DEFAULT_SETTINGS, overrides)


def parse_compact_front_matter_settings(
    metadata: Mapping[str, Any],
) -> HeadingNumberingConfig | None:
    """Read the compact settings entry, or return None if the document has none."""
    line = _entry_to_string(metadata.get(COMPACT_SETTINGS_KEY))
    if line is None:
        return None
    return parse_compact_settings_line(line)


# === Legacy Keys ===


def _legacy_entry(metadata: Mapping[str, Any], name: str) -> Any:
    for prefix in LEGACY_PREFIXES:
        value = metadata.get(prefix + name)
        if value is not None:
            return value
    return None


def _legacy_settings(
    metadata: Mapping[str, Any], alternative: HeadingNumberingConfig
) -> HeadingNumberingConfig:
    """Merge any valid legacy keys over `alternative`."""
    overrides: Overrides = {}

    skip_top_level = _legacy_entry(metadata, LEGACY_SKIP_TOP_LEVEL)
    if is_valid_flag(skip_top_level):
        overrides["skip_top_level"] = skip_top_level

    max_level = _legacy_entry(metadata, LEGACY_MAX_LEVEL)
    if is_valid_first_or_max_level(max_level):
        overrides["max_level"] = max_level

    style_level_1 = str(_legacy_entry(metadata, LEGACY_STYLE_LEVEL_1))
    if is_valid_numbering_style_string(style_level_1):
        overrides["style_level_1"] = NumberingStyle(style_level_1)

    style_level_other = str(_legacy_entry(metadata, LEGACY_STYLE_LEVEL_OTHER))
    if is_valid_numbering_style_string(style_level_other):
        overrides["style_level_other"] = NumberingStyle(style_level_other)

    auto = _legacy_entry(metadata, LEGACY_AUTO)
    if is_valid_flag(auto):
        overrides["auto"] = auto

    prepend = _legacy_entry(metadata, LEGACY_PREPEND)
    if isinstance(prepend, str):
        overrides["prepend_value"] = prepend

    if overrides:
        logger.debug("Using legacy front matter settings: %s", sorted(overrides))
    return with_overrides(alternative, overrides)


def get_front_matter_settings_or_alternative(
    metadata: Mapping[str, Any] | None,
    alternative: HeadingNumberingConfig,
) -> HeadingNumberingConfig:
    """
    Resolve a document's settings from its front matter.

    - No front matter: `alternative`.
    - A compact `number headings` entry: that entry, over the default settings.
    - Otherwise: valid legacy keys merged over `alternative`.

    Never raises for malformed values; they are ignored.
    """
    if metadata is None:
        return alternative

    compact = parse_compact_front_matter_settings(metadata)
    if compact is not None:
        return compact

    return _legacy_settings(metadata, alternative)


# === Writing ===


def settings_to_compact_front_matter_value(config: HeadingNumberingConfig) -> str:
    """
    Serialize settings as a compact line. Round-trips through
    `parse_compact_settings_line()` for every setting except `prepend_value`.
    """
    if config.off:
        return OFF_PART_KEY

    parts: list[str] = []
    if config.auto:
        parts.append(AUTO_PART_KEY)
    parts.append(f"{FIRST_LEVEL_PART_KEY} {config.first_level}")
    parts.append(f"{MAX_LEVEL_PART_KEY} {config.max_level}")
    if config.contents:
        parts.append(f"{CONTENTS_PART_KEY} {config.contents}")
    if config.skip_headings:
        parts.append(f"{SKIP_PART_KEY} {config.skip_headings}")
    if config.start_at:
        parts.append(f"{START_AT_PART_KEY} {config.start_at}")
    parts.append(style_format_part(config))
    return ", ".join(parts)


def update_settings_in_text(text: str, config: HeadingNumberingConfig) -> str:
    """Return the document text with its compact settings entry set to `config`."""
    return update_front_matter_entry(
        text, COMPACT_SETTINGS_KEY, settings_to_compact_front_matter_value(config)
    )


def save_settings_to_front_matter(path: Path, config: HeadingNumberingConfig) -> None:
    """Write `config` into the front matter of the file at `path`, atomically."""
    text = path.read_text(encoding="utf-8")
    new_text = update_settings_in_text(text, config)
    with atomic_output_file(path) as temp_path:
        Path(temp_path).write_text(new_text, encoding="utf-8")
    logger.info("Saved heading numbering settings to %s", path)
