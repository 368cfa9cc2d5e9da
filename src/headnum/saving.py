"""
Confirmation before persisting settings into a document.

After a numbering pass the tool offers to store the settings it used in the
document's front matter. Whatever asks the question implements `SettingsSaver`:
a terminal prompt for interactive use, or a fixed answer for scripts and tests.
"""

from __future__ import annotations

import sys
from collections.abc import Callable
from typing import Protocol, TextIO


class SettingsSaver(Protocol):
    def offer_to_save(self, summary: str) -> bool:
        """Show `summary` and return True if the settings should be saved."""
        ...


class AlwaysSave:
    def offer_to_save(self, summary: str) -> bool:
        return True


class NeverSave:
    def offer_to_save(self, summary: str) -> bool:
        return False


class TerminalPrompt:
    """
    Ask on the terminal. The question goes to `output` (stderr by default) so it
    does not mix with a document written to stdout.
    """

    def __init__(
        self,
        input_fn: Callable[[str], str] = input,
        output: TextIO | None = None,
    ):
        self.input_fn = input_fn
        self.output = output

    def offer_to_save(self, summary: str) -> bool:
        output = self.output or sys.stderr
        print(summary, file=output)
        print("Save these settings in the document's front matter? [y/N] ", end="", file=output)
        output.flush()
        try:
            answer = self.input_fn("")
        except EOFError:
            return False
        return answer.strip().lower() in ("y", "yes")
