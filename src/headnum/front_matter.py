"""
YAML front matter access for Markdown documents.

A front matter block starts on the first line of the document with `---` and ends
with the next `---` (or `...`) line. Reading parses it with PyYAML; updating
rewrites a single top-level entry in place, leaving every other line of the block
byte-for-byte unchanged.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any

import yaml

logger = logging.getLogger(__name__)

FRONT_MATTER_START = "---"
FRONT_MATTER_ENDS = ("---", "...")


class FrontMatterError(ValueError):
    """Raised when a document's front matter block is not a valid YAML mapping."""


@dataclass
class FrontMatterBlock:
    """
    Location of a front matter block within a document's lines.

    `start` is the index of the opening `---` line and `end` the index of the
    closing line, so the YAML content is `lines[start + 1 : end]`.
    """

    lines: list[str]
    start: int
    end: int

    @property
    def content(self) -> str:
        return "".join(self.lines[self.start + 1 : self.end])

    @property
    def body_start(self) -> int:
        return self.end + 1


def find_front_matter(lines: list[str]) -> FrontMatterBlock | None:
    """Find the front matter block in a document split with `keepends=True`."""
    if not lines or lines[0].rstrip() != FRONT_MATTER_START:
        return None
    for i in range(1, len(lines)):
        if lines[i].rstrip() in FRONT_MATTER_ENDS:
            return FrontMatterBlock(lines=lines, start=0, end=i)
    return None


def read_front_matter(text: str) -> dict[str, Any] | None:
    """
    Parse the front matter of a document.

    Returns:
        The front matter mapping, an empty dict for an empty block, or None if the
        document has no front matter block.

    Raises:
        FrontMatterError: If the block is not valid YAML or is not a mapping.
    """
    block = find_front_matter(text.splitlines(keepends=True))
    if block is None:
        return None
    try:
        data = yaml.safe_load(block.content)
    except yaml.YAMLError as e:
        raise FrontMatterError(f"Invalid YAML front matter: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise FrontMatterError(f"Front matter must be a mapping, got {type(data).__name__}")
    return data


def _format_entry(key: str, value: Any) -> str:
    return yaml.safe_dump(
        {key: value}, default_flow_style=False, allow_unicode=True, sort_keys=False, width=1_000_000
    )


def _entry_key_pattern(key: str) -> re.Pattern[str]:
    escaped = re.escape(key)
    return re.compile(rf"^(?:{escaped}|'{escaped}'|\"{escaped}\")\s*:")


def update_front_matter_entry(text: str, key: str, value: Any) -> str:
    """
    Set a top-level front matter entry, creating the block if the document has none.

    An existing entry, including any indented continuation lines, is replaced where
    it stands. A new entry is appended at the end of the block.
    """
    lines = text.splitlines(keepends=True)
    entry = _format_entry(key, value)
    block = find_front_matter(lines)

    if block is None:
        logger.debug("Adding front matter block for entry %r", key)
        return f"{FRONT_MATTER_START}\n{entry}{FRONT_MATTER_START}\n" + text

    pattern = _entry_key_pattern(key)
    for i in range(block.start + 1, block.end):
        if pattern.match(lines[i]):
            j = i + 1
            while j < block.end and lines[j][:1] in (" ", "\t"):
                j += 1
            return "".join(lines[:i]) + entry + "".join(lines[j:])

    return "".join(lines[: block.end]) + entry + "".join(lines[block.end :])
