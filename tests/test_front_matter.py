"""Tests for front matter reading and in-place entry updates."""

import pytest

from headnum.front_matter import (
    FrontMatterError,
    find_front_matter,
    read_front_matter,
    update_front_matter_entry,
)


def test_read_front_matter() -> None:
    text = "---\ntitle: Notes\nnumber headings: auto, 1.1\n---\n# Heading\n"
    assert read_front_matter(text) == {"title": "Notes", "number headings": "auto, 1.1"}


def test_read_without_front_matter() -> None:
    assert read_front_matter("# Heading\n") is None
    assert read_front_matter("") is None


def test_read_empty_front_matter() -> None:
    assert read_front_matter("---\n---\nBody\n") == {}


def test_unclosed_block_is_not_front_matter() -> None:
    assert read_front_matter("---\ntitle: x\n") is None


def test_dots_close_block() -> None:
    assert read_front_matter("---\ntitle: x\n...\nBody\n") == {"title": "x"}


def test_invalid_yaml() -> None:
    with pytest.raises(FrontMatterError, match="Invalid YAML"):
        read_front_matter("---\ntitle: [unclosed\n---\n")


def test_non_mapping() -> None:
    with pytest.raises(FrontMatterError, match="must be a mapping"):
        read_front_matter("---\n- a\n- b\n---\n")


def test_front_matter_error_is_value_error() -> None:
    assert issubclass(FrontMatterError, ValueError)


def test_find_front_matter_content() -> None:
    block = find_front_matter("---\na: 1\nb: 2\n---\n".splitlines(keepends=True))
    assert block is not None
    assert block.content == "a: 1\nb: 2\n"
    assert block.body_start == 4


def test_update_adds_block() -> None:
    assert update_front_matter_entry("Body\n", "key", "value") == "---\nkey: value\n---\nBody\n"


def test_update_appends_entry() -> None:
    text = "---\ntitle: x\n---\nBody\n"
    assert update_front_matter_entry(text, "key", "v") == "---\ntitle: x\nkey: v\n---\nBody\n"


def test_update_appends_to_empty_block() -> None:
    assert update_front_matter_entry("---\n---\n", "key", "v") == "---\nkey: v\n---\n"


def test_update_replaces_entry_and_continuation_lines() -> None:
    text = "---\nkey: >\n  folded\n  text\nother: 1\n---\n"
    assert update_front_matter_entry(text, "key", "v") == "---\nkey: v\nother: 1\n---\n"


def test_update_matches_quoted_key() -> None:
    text = '---\n"number headings": max 2\n---\n'
    result = update_front_matter_entry(text, "number headings", "max 3")
    assert result == "---\nnumber headings: max 3\n---\n"


def test_update_quotes_values_when_needed() -> None:
    result = update_front_matter_entry("", "number headings", "auto, 1.1:")
    assert read_front_matter(result) == {"number headings": "auto, 1.1:"}


def test_update_does_not_match_prefix_key() -> None:
    text = "---\nkeys: 1\n---\n"
    assert update_front_matter_entry(text, "key", 2) == "---\nkeys: 1\nkey: 2\n---\n"
