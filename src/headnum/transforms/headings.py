"""
Line-level discovery of ATX headings in a Markdown document.

Headings are found by scanning lines, so a transform can rewrite a heading line
without touching anything else in the document. Lines inside fenced code blocks
and inside the front matter block are never headings.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from headnum.front_matter import find_front_matter

# Up to three spaces of indentation, 1-6 hashes, then whitespace or end of line
_ATX_HEADING = re.compile(r"^( {0,3})(#{1,6})(?:[ \t]+(.*?))?(?:[ \t]+#+)?[ \t]*$")
_FENCE_OPEN = re.compile(r"^ {0,3}(`{3,}|~{3,})")


@dataclass
class Heading:
    """An ATX heading line. `text` excludes the hashes and the line ending."""

    index: int
    level: int
    text: str
    indent: str = ""
    newline: str = "\n"

    def render(self, text: str) -> str:
        """The full line for this heading with new text."""
        marks = self.indent + "#" * self.level
        return f"{marks} {text}{self.newline}" if text else f"{marks}{self.newline}"


def _split_newline(line: str) -> tuple[str, str]:
    stripped = line.rstrip("\r\n")
    return stripped, line[len(stripped) :]


def find_headings(lines: list[str]) -> list[Heading]:
    """
    Find the ATX headings in a document split with `keepends=True`, in document order.
    """
    block = find_front_matter(lines)
    start = block.body_start if block else 0

    headings: list[Heading] = []
    fence: str | None = None
    for i in range(start, len(lines)):
        content, newline = _split_newline(lines[i])

        if fence is not None:
            stripped = content.strip()
            if stripped.startswith(fence) and set(stripped) == {fence[0]}:
                fence = None
            continue
        fence_match = _FENCE_OPEN.match(content)
        if fence_match:
            fence = fence_match.group(1)
            continue

        match = _ATX_HEADING.match(content)
        if match:
            headings.append(
                Heading(
                    index=i,
                    level=len(match.group(2)),
                    text=match.group(3) or "",
                    indent=match.group(1),
                    newline=newline,
                )
            )
    return headings


def has_block_id(text: str, block_id: str) -> bool:
    """Whether heading text ends with the block id, e.g. "Contents ^toc" for "^toc" or "toc"."""
    if not block_id:
        return False
    marker = block_id if block_id.startswith("^") else "^" + block_id
    return text.rstrip().endswith(marker)
