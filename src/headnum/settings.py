"""
Heading numbering settings: the configuration value object, its defaults, the
validity predicates used when reading settings from documents, and the parser for
the style-format segment (e.g. "_.I.A:") of the compact settings line.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields, replace
from typing import Any

from headnum.numbering.tokens import NumberingStyle

logger = logging.getLogger(__name__)

MIN_LEVEL = 1
MAX_LEVEL = 6

# Two-character forms come first so " :" is not read as ":" plus a trailing space.
VALID_SEPARATORS = (" :", " .", " -", " —", " )", ":", ".", "-", "—", ")")

SKIP_TOP_LEVEL_MARKER = "_"


@dataclass(frozen=True)
class HeadingNumberingConfig:
    """
    Per-document heading numbering configuration.

    Instances are immutable. Use `with_overrides()` to derive a changed copy.
    """

    off: bool = False
    auto: bool = False
    first_level: int = 1
    max_level: int = 6
    style_level_1: NumberingStyle = NumberingStyle.decimal
    style_level_other: NumberingStyle = NumberingStyle.decimal
    # Value of the first level-1 heading, e.g. "3", "C" or "IV"; empty for the default.
    start_at: str = ""
    # Literal text placed before every label.
    prepend_value: str = ""
    # Block id (e.g. "^toc") of the heading that holds the table of contents.
    contents: str = ""
    # Block id of headings that are left unnumbered.
    skip_headings: str = ""
    skip_top_level: bool = False
    # Appended after the last token of each label, e.g. ":" in "1.2: Title".
    separator: str = ""

    def summary(self) -> str:
        """Human-readable multi-line description, used when offering to save settings."""
        lines = [
            f"Off: {self.off}",
            f"Automatic: {self.auto}",
            f"First level: {self.first_level}",
            f"Max level: {self.max_level}",
            f"Skip top level: {self.skip_top_level}",
            f"Style level 1: {self.style_level_1.value}",
            f"Style other levels: {self.style_level_other.value}",
            f"Separator: {self.separator!r}",
        ]
        if self.start_at:
            lines.append(f"Start at: {self.start_at}")
        if self.prepend_value:
            lines.append(f"Prepend: {self.prepend_value!r}")
        if self.contents:
            lines.append(f"Contents heading: {self.contents}")
        if self.skip_headings:
            lines.append(f"Skip headings: {self.skip_headings}")
        return "\n".join(lines)


DEFAULT_SETTINGS = HeadingNumberingConfig()

_FIELD_NAMES = {f.name for f in fields(HeadingNumberingConfig)}


def with_overrides(
    base: HeadingNumberingConfig, overrides: dict[str, Any] | None = None
) -> HeadingNumberingConfig:
    """
    Return a copy of `base` with the sparse `overrides` applied. Style values may
    be given as style letters. Unknown keys raise `ValueError`.
    """
    if not overrides:
        return base
    unknown = set(overrides) - _FIELD_NAMES
    if unknown:
        raise ValueError(f"Unknown settings: {', '.join(sorted(unknown))}")
    values = dict(overrides)
    for key in ("style_level_1", "style_level_other"):
        if key in values:
            values[key] = NumberingStyle(values[key])
    return replace(base, **values)


# === Validity Predicates ===


def is_valid_flag(x: object) -> bool:
    return isinstance(x, bool)


def is_valid_first_or_max_level(x: object) -> bool:
    """A heading level: an integer (not a bool) from 1 to 6."""
    return isinstance(x, int) and not isinstance(x, bool) and MIN_LEVEL <= x <= MAX_LEVEL


def is_valid_numbering_style_string(x: object) -> bool:
    return isinstance(x, str) and x in {s.value for s in NumberingStyle}


def is_valid_numbering_value_string(x: object) -> bool:
    """A start-at value: non-empty and without commas, since commas split the compact line."""
    return isinstance(x, str) and x != "" and "," not in x


def is_valid_block_id_setting(x: object) -> bool:
    """A block id such as "^toc": non-empty, with no commas or whitespace."""
    return isinstance(x, str) and x != "" and "," not in x and not any(c.isspace() for c in x)


def is_valid_separator(x: object) -> bool:
    return isinstance(x, str) and (x == "" or x in VALID_SEPARATORS)


# === Style Format Part ===


def parse_style_format_part(part: str) -> dict[str, Any]:
    """
    Parse the style-format segment of the compact settings line.

    The segment looks like `[_.]<style level 1>.<style other levels>[separator]`,
    for example "1.1", "_.A.1:" or "I.a —". Returns the settings overrides it
    describes, or an empty dict if the segment is malformed.

    Examples:
        "1.1" -> style_level_1="1", style_level_other="1", separator="", skip_top_level=False
        "_.I.A:" -> style_level_1="I", style_level_other="A", separator=":", skip_top_level=True
        "nonsense" -> {}
    """
    separator = ""
    without_separator = part
    for candidate in VALID_SEPARATORS:
        if part.endswith(candidate):
            separator = candidate
            without_separator = part[: -len(candidate)]
            break

    descriptors = without_separator.split(".")
    skip_top_level = len(descriptors) > 1 and descriptors[0] == SKIP_TOP_LEVEL_MARKER
    if skip_top_level:
        descriptors = descriptors[1:]

    if len(descriptors) != 2 or not all(is_valid_numbering_style_string(d) for d in descriptors):
        logger.debug("Ignoring malformed style format part: %r", part)
        return {}

    return {
        "style_level_1": NumberingStyle(descriptors[0]),
        "style_level_other": NumberingStyle(descriptors[1]),
        "skip_top_level": skip_top_level,
        "separator": separator,
    }


def style_format_part(config: HeadingNumberingConfig) -> str:
    """Inverse of `parse_style_format_part()`."""
    skip = f"{SKIP_TOP_LEVEL_MARKER}." if config.skip_top_level else ""
    return f"{skip}{config.style_level_1.value}.{config.style_level_other.value}{config.separator}"
