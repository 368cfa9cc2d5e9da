"""
Numbering headings in text and files.

This is the layer the CLI calls: it resolves each document's settings (explicit
overrides > document front matter > tool defaults), runs the numbering transform
and table of contents update, writes the result, and offers to save the settings
back into the document.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from strif import atomic_output_file

from headnum.front_matter import read_front_matter
from headnum.front_matter_settings import (
    COMPACT_SETTINGS_KEY,
    get_front_matter_settings_or_alternative,
    save_settings_to_front_matter,
    settings_to_compact_front_matter_value,
    update_settings_in_text,
)
from headnum.saving import NeverSave, SettingsSaver
from headnum.settings import DEFAULT_SETTINGS, HeadingNumberingConfig, with_overrides
from headnum.transforms.contents import update_table_of_contents
from headnum.transforms.heading_numbering import number_headings, remove_heading_numbering

logger = logging.getLogger(__name__)


@dataclass
class ProcessResult:
    """Outcome of processing one document."""

    text: str
    config: HeadingNumberingConfig
    changed_count: int = 0
    skipped: bool = False
    saved_settings: bool = False


def resolve_settings(
    text: str,
    defaults: HeadingNumberingConfig = DEFAULT_SETTINGS,
    overrides: dict[str, Any] | None = None,
) -> HeadingNumberingConfig:
    """Settings for a document: its front matter over `defaults`, then `overrides`."""
    metadata = read_front_matter(text)
    config = get_front_matter_settings_or_alternative(metadata, defaults)
    return with_overrides(config, overrides)


def process_text(
    text: str,
    defaults: HeadingNumberingConfig = DEFAULT_SETTINGS,
    overrides: dict[str, Any] | None = None,
    remove: bool = False,
    only_auto: bool = False,
) -> ProcessResult:
    """
    Number (or un-number) the headings of a document and refresh its table of contents.

    With `only_auto`, documents whose settings do not enable automatic numbering
    are returned unchanged and marked as skipped.
    """
    config = resolve_settings(text, defaults, overrides)

    if only_auto and not config.auto:
        logger.info("Skipping document without automatic numbering")
        return ProcessResult(text=text, config=config, skipped=True)

    if remove:
        result = remove_heading_numbering(text, config)
        return ProcessResult(text=result.text, config=config, changed_count=result.changed_count)

    result = number_headings(text, config)
    new_text = update_table_of_contents(result.text, config)
    return ProcessResult(text=new_text, config=config, changed_count=result.changed_count)


def settings_summary(source: str, result: ProcessResult) -> str:
    """Message shown when offering to save settings, ending with the compact line."""
    value = settings_to_compact_front_matter_value(result.config)
    return (
        f"Successfully numbered headings in {source} ({result.changed_count} changed).\n"
        f"\n{result.config.summary()}\n\n"
        f"    {COMPACT_SETTINGS_KEY}: {value}"
    )


def _write_output(text: str, output: str) -> None:
    if output == "-":
        sys.stdout.write(text)
    else:
        with atomic_output_file(output, make_parents=True) as temp_path:
            Path(temp_path).write_text(text, encoding="utf-8")


def number_file(
    path: str,
    output: str = "-",
    inplace: bool = False,
    defaults: HeadingNumberingConfig = DEFAULT_SETTINGS,
    overrides: dict[str, Any] | None = None,
    remove: bool = False,
    only_auto: bool = False,
    saver: SettingsSaver | None = None,
) -> ProcessResult:
    """
    Process one file (or stdin, for "-") and write the result to `output`, or back to
    the file with `inplace`.

    After numbering, `saver` is offered the settings; if it accepts, they are stored
    in the written document's front matter.

    Raises:
        ValueError: If `inplace` is used with stdin.
    """
    if path == "-":
        if inplace:
            raise ValueError("Cannot use --inplace with stdin")
        text = sys.stdin.read()
    else:
        text = Path(path).read_text(encoding="utf-8")

    result = process_text(text, defaults, overrides, remove=remove, only_auto=only_auto)
    if result.skipped:
        if not inplace:
            _write_output(text, output)
        return result

    saver = saver or NeverSave()
    save = not remove and not result.config.off
    save = save and saver.offer_to_save(settings_summary(path, result))

    if inplace:
        _write_output(result.text, path)
        if save:
            save_settings_to_front_matter(Path(path), result.config)
    else:
        out_text = update_settings_in_text(result.text, result.config) if save else result.text
        _write_output(out_text, output)

    result.saved_settings = save
    return result
