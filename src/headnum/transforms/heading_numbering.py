"""
Heading numbering transform for Markdown documents.

This transform prefixes each heading with a hierarchical label such as "1.2",
"A.1" or "IV.b", built from one counter per heading level, and replaces any label
a heading already has so the transform can be re-run after headings are added,
removed or moved.

NUMBERED LEVELS
---------------
- Levels below `first_level` are not numbered. Meeting one resets all counters,
  so numbering restarts under each such heading
- With `skip_top_level`, level 1 is treated the same way
- Levels deeper than `max_level` are counted but shown without a label; any label
  they already have is removed
- Headings ending with the `skip` or `contents` block id are left unchanged and do
  not advance the counters

STYLES
------
The first numbered level uses `style_level_1` and starts at `start_at` when that
value is valid in the style. Deeper levels use `style_level_other` and always start
at their first value.

EXAMPLE
-------
With settings `first-level 1, max 6, I.A:`:

    # Intro              ->  # I: Intro
    ## Background        ->  ## I.A: Background
    ## Goals             ->  ## I.B: Goals
    # Design             ->  # II: Design
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from headnum.numbering.tokens import (
    NumberingStyle,
    NumberingToken,
    first_token,
    make_numbering_string,
    next_token,
    start_at_or_zeroth_in_style,
)
from headnum.settings import VALID_SEPARATORS, HeadingNumberingConfig
from headnum.transforms.headings import Heading, find_headings, has_block_id

logger = logging.getLogger(__name__)


@dataclass
class NumberingResult:
    """Result of a numbering pass: the new text and how many heading lines changed."""

    text: str
    changed_count: int = 0

    @property
    def changed(self) -> bool:
        return self.changed_count > 0


# === Label Detection ===

_STYLE_COMPONENTS: dict[NumberingStyle, str] = {
    NumberingStyle.decimal: r"-?\d+",
    NumberingStyle.alpha_upper: r"[A-Z]+",
    NumberingStyle.alpha_lower: r"[a-z]+",
    NumberingStyle.roman_upper: r"[IVXLCDM]+|0",
    NumberingStyle.roman_lower: r"[ivxlcdm]+|0",
}

# Labels left over from other styles. A bare number always counts as a label; roman
# numerals and single letters only with a dot or separator, so titles like
# "I Robot" or "CD Player" keep their first word.
_OTHER_STYLE_COMPONENTS = [r"\d+", r"[IVXLCDM]+", r"[ivxlcdm]+", r"[A-Za-z]"]


def label_pattern(config: HeadingNumberingConfig) -> re.Pattern[str]:
    """
    Pattern matching an existing label (with the prepend value, if any) at the start
    of heading text, including the whitespace that follows it.
    """
    styles = (config.style_level_1, config.style_level_other)
    own = "(?:" + "|".join(_STYLE_COMPONENTS[s] for s in styles) + ")"
    any_style = "(?:" + "|".join([own, *_OTHER_STYLE_COMPONENTS]) + ")"
    sep = "(?:" + "|".join(re.escape(s) for s in VALID_SEPARATORS) + ")"
    label = "|".join(
        [
            rf"{own}(?:\.{own})*{sep}?",
            rf"\d+{sep}?",
            rf"{any_style}(?:\.{any_style})+{sep}?",
            rf"{any_style}{sep}",
        ]
    )
    prepend = rf"(?:{re.escape(config.prepend_value.strip())}\s*)?" if config.prepend_value else ""
    return re.compile(rf"^{prepend}(?:{label})(?:\s+|$)")


def strip_label(text: str, config: HeadingNumberingConfig) -> str:
    """Remove an existing label from heading text, if it has one."""
    return label_pattern(config).sub("", text, count=1)


# === Counters ===


class HeadingNumberer:
    """
    Tracks the counter stack while walking headings in document order.

    The stack holds one token per level from the first numbered level down to the
    previous heading's level, outermost first.
    """

    def __init__(self, config: HeadingNumberingConfig):
        self.config = config
        self.stack: list[NumberingToken] = []
        self.previous_level = 1
        self.reset()

    @property
    def base_level(self) -> int:
        if self.config.first_level > 1:
            return self.config.first_level
        if self.config.skip_top_level:
            return 2
        return 1

    def reset(self) -> None:
        self.stack = [start_at_or_zeroth_in_style(self.config.start_at, self.config.style_level_1)]
        self.previous_level = self.base_level

    def is_ignored_level(self, level: int) -> bool:
        return level < self.config.first_level or (self.config.skip_top_level and level == 1)

    def is_skipped(self, heading: Heading) -> bool:
        return has_block_id(heading.text, self.config.skip_headings) or has_block_id(
            heading.text, self.config.contents
        )

    def advance(self, level: int) -> list[NumberingToken]:
        """Move the counters to a heading at `level` and return the stack for its label."""
        if level == self.previous_level:
            self.stack[-1] = next_token(self.stack[-1])
        elif level < self.previous_level:
            del self.stack[len(self.stack) - (self.previous_level - level) :]
            if self.stack:
                self.stack[-1] = next_token(self.stack[-1])
        else:
            for _ in range(self.previous_level, level):
                self.stack.append(first_token(self.config.style_level_other))
        self.previous_level = level
        return list(self.stack)

    def label(self, stack: list[NumberingToken]) -> str:
        """Label text to put before the heading title, e.g. "Chapter 1.2:"."""
        label = make_numbering_string(stack, self.config.separator).lstrip(" ")
        if self.config.prepend_value:
            return f"{self.config.prepend_value.rstrip()} {label}"
        return label


# === Transforms ===


def _apply_to_headings(text: str, config: HeadingNumberingConfig, remove: bool) -> NumberingResult:
    lines = text.splitlines(keepends=True)
    numberer = HeadingNumberer(config)
    changed = 0

    for heading in find_headings(lines):
        if numberer.is_ignored_level(heading.level):
            numberer.reset()
            continue
        if numberer.is_skipped(heading):
            continue

        stack = numberer.advance(heading.level)
        title = strip_label(heading.text, config)
        if remove or heading.level > config.max_level:
            new_text = title
        else:
            new_text = f"{numberer.label(stack)} {title}".rstrip()

        new_line = heading.render(new_text)
        if new_line != lines[heading.index]:
            lines[heading.index] = new_line
            changed += 1

    return NumberingResult(text="".join(lines), changed_count=changed)


def number_headings(text: str, config: HeadingNumberingConfig) -> NumberingResult:
    """
    Number the headings of a Markdown document.

    Returns the document unchanged when numbering is off for it.
    """
    if config.off:
        logger.debug("Heading numbering is off for this document")
        return NumberingResult(text=text)
    return _apply_to_headings(text, config, remove=False)


def remove_heading_numbering(text: str, config: HeadingNumberingConfig) -> NumberingResult:
    """Remove labels from every heading `number_headings()` would number."""
    return _apply_to_headings(text, config, remove=True)
