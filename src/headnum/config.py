"""
TOML-based config file loading for headnum.

Searches for `.headnum.toml`, `headnum.toml`, or `pyproject.toml [tool.headnum]`
walking up from the current directory. The config file sets the tool's default
numbering settings, which apply to documents without settings of their own.
Precedence: explicit CLI flags > document front matter > config file > built-in
defaults.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, cast

from headnum.settings import (
    DEFAULT_SETTINGS,
    HeadingNumberingConfig,
    is_valid_block_id_setting,
    is_valid_first_or_max_level,
    is_valid_flag,
    is_valid_numbering_style_string,
    is_valid_numbering_value_string,
    is_valid_separator,
    with_overrides,
)

if sys.version_info >= (3, 11):
    import tomllib  # pyright: ignore[reportUnreachable]
else:
    import tomli as tomllib  # type: ignore[no-redef]  # pyright: ignore[reportUnreachable]


@dataclass
class HeadnumConfig:
    """
    Parsed config from a TOML file. Fields are `None` when not set in the config,
    so only configured values override the built-in defaults.
    """

    first_level: int | None = None
    max_level: int | None = None
    style_level_1: str | None = None
    style_level_other: str | None = None
    skip_top_level: bool | None = None
    separator: str | None = None
    start_at: str | None = None
    prepend_value: str | None = None
    auto: bool | None = None
    contents: str | None = None
    skip_headings: str | None = None

    def to_overrides(self) -> dict[str, Any]:
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }


# Config file search order (first match wins within each directory level)
_CONFIG_FILENAMES = [".headnum.toml", "headnum.toml", "pyproject.toml"]

# Mapping from TOML kebab-case keys to Python snake_case field names
_KEBAB_TO_SNAKE: dict[str, str] = {
    "first-level": "first_level",
    "max-level": "max_level",
    "style-level-1": "style_level_1",
    "style-level-other": "style_level_other",
    "skip-top-level": "skip_top_level",
    "start-at": "start_at",
    "prepend-value": "prepend_value",
    "skip": "skip_headings",
}

_VALIDATORS = {
    "first_level": is_valid_first_or_max_level,
    "max_level": is_valid_first_or_max_level,
    "style_level_1": is_valid_numbering_style_string,
    "style_level_other": is_valid_numbering_style_string,
    "skip_top_level": is_valid_flag,
    "separator": is_valid_separator,
    "start_at": is_valid_numbering_value_string,
    "prepend_value": lambda x: isinstance(x, str),
    "auto": is_valid_flag,
    "contents": is_valid_block_id_setting,
    "skip_headings": is_valid_block_id_setting,
}

_VALID_FIELDS = {f.name for f in fields(HeadnumConfig)}


def _is_config_file(path: Path) -> bool:
    """A standalone config file counts if present; `pyproject.toml` only with `[tool.headnum]`."""
    if not path.is_file():
        return False
    if path.name != "pyproject.toml":
        return True
    try:
        return "headnum" in tomllib.loads(path.read_text()).get("tool", {})
    except (tomllib.TOMLDecodeError, OSError):
        return False


def find_config_file(start_dir: Path) -> Path | None:
    """
    Nearest config file in `start_dir` or one of its parents, or `None`. Within a
    directory `.headnum.toml` wins over `headnum.toml`, which wins over
    `pyproject.toml`.
    """
    start = start_dir.resolve()
    for directory in (start, *start.parents):
        found = next(
            (directory / name for name in _CONFIG_FILENAMES if _is_config_file(directory / name)),
            None,
        )
        if found is not None:
            return found
    return None


def load_config(config_path: Path) -> HeadnumConfig:
    """
    Load a `HeadnumConfig` from a TOML file. Supports both standalone
    `headnum.toml` / `.headnum.toml` and `pyproject.toml` (extracts
    `[tool.headnum]`). TOML kebab-case keys are mapped to Python snake_case.

    Raises:
        ValueError: If a configured value is invalid.
    """
    data = tomllib.loads(config_path.read_text())

    if config_path.name == "pyproject.toml":
        data = data.get("tool", {}).get("headnum", {})

    return _parse_config_data(data)


def _parse_config_data(data: dict[str, Any]) -> HeadnumConfig:
    """Parse a flat or sectioned TOML dict into HeadnumConfig."""
    # Flatten sections: a [numbering] table merges into the top level
    flat: dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, dict):
            for sub_key, sub_value in cast(dict[str, Any], value).items():
                flat[sub_key] = sub_value
        else:
            flat[key] = value

    mapped: dict[str, Any] = {}
    for key, value in flat.items():
        snake_key = _KEBAB_TO_SNAKE.get(key, key.replace("-", "_"))
        if snake_key not in _VALID_FIELDS:
            continue
        if not _VALIDATORS[snake_key](value):
            raise ValueError(f"Invalid value for `{key}` in config: {value!r}")
        mapped[snake_key] = value

    return HeadnumConfig(**mapped)


def tool_defaults(config: HeadnumConfig | None) -> HeadingNumberingConfig:
    """Built-in default settings with the config file's values applied."""
    if config is None:
        return DEFAULT_SETTINGS
    return with_overrides(DEFAULT_SETTINGS, config.to_overrides())
