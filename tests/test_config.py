"""Tests for config file loading and tool defaults."""

from __future__ import annotations

from pathlib import Path

import pytest

from headnum.config import HeadnumConfig, find_config_file, load_config, tool_defaults
from headnum.numbering.tokens import NumberingStyle
from headnum.settings import DEFAULT_SETTINGS


def test_find_config_headnum_toml(tmp_path: Path) -> None:
    config_file = tmp_path / "headnum.toml"
    config_file.write_text("max-level = 3\n")
    result = find_config_file(tmp_path)
    assert result == config_file


def test_find_config_dot_headnum_toml_takes_precedence(tmp_path: Path) -> None:
    (tmp_path / "headnum.toml").write_text("max-level = 3\n")
    dot_config = tmp_path / ".headnum.toml"
    dot_config.write_text("max-level = 4\n")
    result = find_config_file(tmp_path)
    assert result == dot_config


def test_find_config_pyproject_toml(tmp_path: Path) -> None:
    config_file = tmp_path / "pyproject.toml"
    config_file.write_text("[tool.headnum]\nmax-level = 3\n")
    result = find_config_file(tmp_path)
    assert result == config_file


def test_find_config_pyproject_without_section_skipped(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_text("[tool.ruff]\nline-length = 100\n")
    result = find_config_file(tmp_path)
    assert result is None


def test_find_config_walks_up(tmp_path: Path) -> None:
    config_file = tmp_path / "headnum.toml"
    config_file.write_text("max-level = 3\n")
    subdir = tmp_path / "sub" / "deep"
    subdir.mkdir(parents=True)
    result = find_config_file(subdir)
    assert result == config_file


def test_find_config_none_when_missing(tmp_path: Path) -> None:
    result = find_config_file(tmp_path)
    assert result is None


def test_load_config_headnum_toml(tmp_path: Path) -> None:
    config_file = tmp_path / "headnum.toml"
    config_file.write_text(
        "first-level = 2\n"
        "max-level = 4\n"
        'style-level-1 = "I"\n'
        'style-level-other = "a"\n'
        "skip-top-level = true\n"
        'separator = ":"\n'
        'start-at = "III"\n'
        'prepend-value = "Part"\n'
        "auto = true\n"
        'contents = "^toc"\n'
        'skip = "^skip"\n'
    )
    config = load_config(config_file)
    assert config == HeadnumConfig(
        first_level=2,
        max_level=4,
        style_level_1="I",
        style_level_other="a",
        skip_top_level=True,
        separator=":",
        start_at="III",
        prepend_value="Part",
        auto=True,
        contents="^toc",
        skip_headings="^skip",
    )


def test_load_config_pyproject_toml(tmp_path: Path) -> None:
    config_file = tmp_path / "pyproject.toml"
    config_file.write_text('[tool.headnum]\nmax-level = 2\nseparator = ")"\n')
    config = load_config(config_file)
    assert config.max_level == 2
    assert config.separator == ")"


def test_load_config_numbering_section(tmp_path: Path) -> None:
    config_file = tmp_path / "headnum.toml"
    config_file.write_text('[numbering]\nstyle-level-1 = "A"\n')
    config = load_config(config_file)
    assert config.style_level_1 == "A"


def test_load_config_partial(tmp_path: Path) -> None:
    config_file = tmp_path / "headnum.toml"
    config_file.write_text("max-level = 5\n")
    config = load_config(config_file)
    assert config.max_level == 5
    # Everything else should be None (not set)
    assert config.first_level is None
    assert config.to_overrides() == {"max_level": 5}


def test_load_config_ignores_unknown_keys(tmp_path: Path) -> None:
    config_file = tmp_path / "headnum.toml"
    config_file.write_text("width = 88\nmax-level = 5\n")
    assert load_config(config_file) == HeadnumConfig(max_level=5)


@pytest.mark.parametrize(
    "line",
    [
        "max-level = 9",
        'first-level = "2"',
        'style-level-1 = "B"',
        "auto = 1",
        'separator = "::"',
        'contents = "^a b"',
        'start-at = ""',
    ],
)
def test_load_config_invalid_value(tmp_path: Path, line: str) -> None:
    config_file = tmp_path / "headnum.toml"
    config_file.write_text(line + "\n")
    with pytest.raises(ValueError, match="Invalid value for"):
        load_config(config_file)


def test_load_config_malformed_toml(tmp_path: Path) -> None:
    config_file = tmp_path / "headnum.toml"
    config_file.write_text("this is not valid toml [[[")
    with pytest.raises(ValueError):
        load_config(config_file)


def test_tool_defaults() -> None:
    assert tool_defaults(None) is DEFAULT_SETTINGS
    defaults = tool_defaults(HeadnumConfig(style_level_1="i", max_level=3))
    assert defaults.style_level_1 == NumberingStyle.roman_lower
    assert defaults.max_level == 3
    assert defaults.first_level == 1


def test_find_config_skips_pyproject_without_section_for_parent(tmp_path: Path) -> None:
    config_file = tmp_path / "headnum.toml"
    config_file.write_text("max-level = 3\n")
    project = tmp_path / "project"
    project.mkdir()
    (project / "pyproject.toml").write_text("[tool.ruff]\nline-length = 100\n")
    assert find_config_file(project) == config_file


def test_find_config_nearest_directory_wins(tmp_path: Path) -> None:
    (tmp_path / ".headnum.toml").write_text("max-level = 3\n")
    project = tmp_path / "project"
    project.mkdir()
    config_file = project / "pyproject.toml"
    config_file.write_text("[tool.headnum]\nmax-level = 2\n")
    assert find_config_file(project) == config_file
