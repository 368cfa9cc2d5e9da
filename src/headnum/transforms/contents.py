"""
Table of contents generation under a marked "contents" heading.

When settings name a contents block id (e.g. `contents ^toc`), the heading ending
with that id gets a nested list of links to every numbered heading directly below
it. An existing list in that position is replaced, so regenerating is idempotent.

Link targets use GitHub-compatible slugs of the heading text, labels included.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

import marko
from marko import block, inline

from headnum.settings import HeadingNumberingConfig
from headnum.transforms.headings import Heading, find_headings, has_block_id

_LIST_ITEM = re.compile(r"^\s*(?:[-*+]|\d+[.)])\s")
_BLOCK_ID_SUFFIX = re.compile(r"\s*\^[\w-]+\s*$")
_SLUG_DROPPED = re.compile(r"[^\w\- ]")
_HYPHEN_RUN = re.compile(r"-{2,}")

INDENT = "  "


def heading_to_slug(text: str) -> str:
    """Anchor slug the way GitHub derives it from heading text."""
    slug = _SLUG_DROPPED.sub("", text.lower()).replace(" ", "-")
    return _HYPHEN_RUN.sub("-", slug).strip("-")


@dataclass
class GithubSlugger:
    """
    Hands out unique slugs for one document. A repeated slug gets the next free
    "-N" suffix, skipping suffixes already taken by other headings.
    """

    used: set[str] = field(default_factory=set)

    def slug(self, text: str) -> str:
        base = heading_to_slug(text)
        candidate = base
        n = 0
        while candidate in self.used:
            n += 1
            candidate = f"{base}-{n}"
        self.used.add(candidate)
        return candidate


def heading_plain_text(text: str) -> str:
    """
    Plain text of a heading's Markdown source, without emphasis, code or link markup
    and without a trailing block id.
    """
    text = _BLOCK_ID_SUFFIX.sub("", text)
    doc = marko.parse("# " + text)
    text_parts: list[str] = []

    def collect_text(element: object) -> None:
        if isinstance(element, inline.RawText):
            assert isinstance(element.children, str)
            text_parts.append(element.children)
        else:
            children = getattr(element, "children", None)
            if isinstance(children, list):
                for child in children:  # pyright: ignore[reportUnknownVariableType]
                    collect_text(child)  # pyright: ignore[reportUnknownArgumentType]
            elif isinstance(children, str):
                text_parts.append(children)

    for child in doc.children:
        if isinstance(child, block.Heading):
            collect_text(child)
    return "".join(text_parts).strip()


def _is_listed(heading: Heading, config: HeadingNumberingConfig) -> bool:
    if heading.level < config.first_level or heading.level > config.max_level:
        return False
    if config.skip_top_level and heading.level == 1:
        return False
    return not (
        has_block_id(heading.text, config.contents)
        or has_block_id(heading.text, config.skip_headings)
    )


def make_contents_lines(headings: list[Heading], config: HeadingNumberingConfig) -> list[str]:
    """List lines linking to the headings, indented by level relative to the shallowest."""
    slugger = GithubSlugger()
    entries: list[tuple[int, str, str]] = []
    for heading in headings:
        title = heading_plain_text(heading.text)
        # Every heading takes a slug so duplicate suffixes match GitHub's
        slug = slugger.slug(title)
        if _is_listed(heading, config):
            entries.append((heading.level, title, slug))

    if not entries:
        return []
    top = min(level for level, _, _ in entries)
    return [f"{INDENT * (level - top)}- [{title}](#{slug})\n" for level, title, slug in entries]


def update_table_of_contents(text: str, config: HeadingNumberingConfig) -> str:
    """
    Write the table of contents below the contents heading. Returns the text
    unchanged if no contents block id is set or no heading carries it.
    """
    if not config.contents or config.off:
        return text

    lines = text.splitlines(keepends=True)
    headings = find_headings(lines)
    contents_heading = next((h for h in headings if has_block_id(h.text, config.contents)), None)
    if contents_heading is None:
        return text

    toc = make_contents_lines(headings, config)
    i = contents_heading.index + 1
    if not lines[i - 1].endswith("\n"):
        lines[i - 1] += "\n"

    j = i
    while j < len(lines) and not lines[j].strip():
        j += 1
    if j < len(lines) and _LIST_ITEM.match(lines[j]):
        # Replace the existing list, including indented continuation lines
        k = j
        while k < len(lines) and (
            _LIST_ITEM.match(lines[k]) or (lines[k][:1] in (" ", "\t") and lines[k].strip())
        ):
            k += 1
        return "".join(lines[:j] + toc + lines[k:])

    trailing = ["\n"] if i < len(lines) and lines[i].strip() else []
    return "".join(lines[:i] + ["\n"] + toc + trailing + lines[i:])
