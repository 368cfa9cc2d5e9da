#!/usr/bin/env python3
"""
headnum: Hierarchical heading numbering for Markdown

Common usage:
  headnum --inplace README.md
  headnum --inplace --style-level-1 I --style-level-other A --separator : notes.md
  headnum --remove --inplace README.md
  headnum --only-auto --inplace docs/*.md

Settings come from the document's `number headings` front matter entry when it
has one, otherwise from the config file (.headnum.toml, headnum.toml or
pyproject.toml [tool.headnum]); explicit flags override both.
"""

from __future__ import annotations

import argparse
import importlib.metadata
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from headnum.config import find_config_file, load_config, tool_defaults
from headnum.numbering.tokens import NumberingStyle
from headnum.numbering_api import number_file
from headnum.saving import AlwaysSave, NeverSave, SettingsSaver, TerminalPrompt
from headnum.settings import (
    VALID_SEPARATORS,
    is_valid_block_id_setting,
    is_valid_first_or_max_level,
    is_valid_numbering_value_string,
)


@dataclass
class Options:
    """Command-line options for the headnum tool."""

    files: list[str]
    output: str
    inplace: bool
    remove: bool
    only_auto: bool
    save_settings: str
    verbose: bool
    version: bool
    # Settings given explicitly on the command line
    overrides: dict[str, Any]


# argparse dest name -> settings field name, for flags that override settings
_SETTING_FLAGS: dict[str, str] = {
    "first_level": "first_level",
    "max_level": "max_level",
    "style_level_1": "style_level_1",
    "style_level_other": "style_level_other",
    "skip_top_level": "skip_top_level",
    "separator": "separator",
    "start_at": "start_at",
    "prepend": "prepend_value",
    "contents": "contents",
    "skip": "skip_headings",
    "auto": "auto",
}


def _level(value: str) -> int:
    try:
        n = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an integer: {value!r}") from None
    if not is_valid_first_or_max_level(n):
        raise argparse.ArgumentTypeError(f"heading level must be from 1 to 6: {n}")
    return n


def _block_id(value: str) -> str:
    if not is_valid_block_id_setting(value):
        raise argparse.ArgumentTypeError(f"invalid block id: {value!r}")
    return value


def _start_at(value: str) -> str:
    if not is_valid_numbering_value_string(value):
        raise argparse.ArgumentTypeError(f"start value must be non-empty without commas: {value!r}")
    return value


def _parse_args(args: list[str] | None = None) -> Options:
    """Parse command-line arguments."""
    # Use the module's docstring as the description
    module_doc = __doc__ or ""
    doc_parts = module_doc.split("\n\n")
    description = doc_parts[0]
    epilog = "\n\n".join(doc_parts[1:])

    styles = [s.value for s in NumberingStyle]

    parser = argparse.ArgumentParser(
        description=description,
        epilog=epilog,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "files",
        nargs="*",
        type=str,
        default=[],
        help="Markdown files to process (use '-' for stdin)",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=str,
        default="-",
        help="Output file (use '-' for stdout)",
    )
    parser.add_argument(
        "-i", "--inplace", action="store_true", help="Edit the files in place (ignores --output)"
    )
    parser.add_argument(
        "--remove", action="store_true", help="Remove heading numbering instead of adding it"
    )
    parser.add_argument(
        "--only-auto",
        action="store_true",
        dest="only_auto",
        help="Only process documents whose settings enable automatic numbering",
    )
    parser.add_argument(
        "--save-settings",
        choices=["ask", "yes", "no"],
        default="no",
        dest="save_settings",
        help="Store the settings used in each document's front matter (default: %(default)s)",
    )
    # Settings
    parser.add_argument(
        "--first-level", type=_level, default=None, help="First heading level to number (1-6)"
    )
    parser.add_argument(
        "--max-level", type=_level, default=None, help="Deepest heading level to number (1-6)"
    )
    parser.add_argument(
        "--style-level-1",
        choices=styles,
        default=None,
        help="Numbering style of the first numbered level: 1, A, a, I or i",
    )
    parser.add_argument(
        "--style-level-other",
        choices=styles,
        default=None,
        help="Numbering style of the other levels: 1, A, a, I or i",
    )
    parser.add_argument(
        "--skip-top-level",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Leave level 1 headings unnumbered",
    )
    parser.add_argument(
        "--separator",
        choices=["", *VALID_SEPARATORS],
        default=None,
        help="Text after the last number of each label, e.g. ':' or ')'",
    )
    parser.add_argument(
        "--start-at", type=_start_at, default=None, help="Value of the first top-level label"
    )
    parser.add_argument(
        "--prepend", type=str, default=None, help="Literal text placed before every label"
    )
    parser.add_argument(
        "--contents",
        type=_block_id,
        default=None,
        metavar="BLOCK_ID",
        help="Block id (e.g. ^toc) of the heading to write a table of contents under",
    )
    parser.add_argument(
        "--skip",
        type=_block_id,
        default=None,
        metavar="BLOCK_ID",
        help="Block id (e.g. ^skip) of headings to leave unnumbered",
    )
    parser.add_argument(
        "--auto",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Mark the settings as enabling automatic numbering",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log details to stderr")
    parser.add_argument(
        "--version",
        action="store_true",
        help="Show version information and exit",
    )
    opts = parser.parse_args(args)

    overrides = {
        field_name: getattr(opts, dest_name)
        for dest_name, field_name in _SETTING_FLAGS.items()
        if getattr(opts, dest_name) is not None
    }

    return Options(
        files=opts.files,
        output=opts.output,
        inplace=opts.inplace,
        remove=opts.remove,
        only_auto=opts.only_auto,
        save_settings=opts.save_settings,
        verbose=opts.verbose,
        version=opts.version,
        overrides=overrides,
    )


def _make_saver(choice: str) -> SettingsSaver:
    if choice == "yes":
        return AlwaysSave()
    if choice == "ask":
        return TerminalPrompt()
    return NeverSave()


def main(args: list[str] | None = None) -> int:
    """
    Main entry point for the headnum CLI.

    Args:
        args: Command-line arguments (uses sys.argv if None)

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    options = _parse_args(args)

    if options.version:
        try:
            version = importlib.metadata.version("headnum")
            print(f"v{version}")
        except importlib.metadata.PackageNotFoundError:
            print("unknown (package not installed)")
        return 0

    logging.basicConfig(
        level=logging.DEBUG if options.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    if not options.files:
        print(
            "Error: No input specified. Provide Markdown files, or '-' for stdin."
            " Use --help for more options.",
            file=sys.stderr,
        )
        return 1
    if len(options.files) > 1 and not options.inplace:
        print("Error: Multiple files require --inplace", file=sys.stderr)
        return 1

    try:
        config_path = find_config_file(Path.cwd())
        defaults = tool_defaults(load_config(config_path) if config_path else None)

        saver = _make_saver(options.save_settings)
        for path in options.files:
            result = number_file(
                path,
                output=options.output,
                inplace=options.inplace,
                defaults=defaults,
                overrides=options.overrides,
                remove=options.remove,
                only_auto=options.only_auto,
                saver=saver,
            )
            if options.inplace:
                status = "skipped" if result.skipped else f"{result.changed_count} headings changed"
                print(f"{path}: {status}", file=sys.stderr)
    except ValueError as e:
        # Invalid config values, malformed front matter, or --inplace with stdin
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        # Catch other potential file or processing errors.
        print(f"Error: {e}", file=sys.stderr)
        return 2

    return 0


if __name__ == "__main__":
    sys.exit(main())
