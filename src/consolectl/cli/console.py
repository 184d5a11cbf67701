"""Output channels for the CLI.

Command output (tables, JSON, YAML, confirmation lines) is written to
stdout by :func:`emit` so it can be piped.  Everything addressed to the
person at the terminal (errors, hints, spinners, interactive tables)
goes to stderr through :data:`console`.

Rich is imported on first use only.  ``--help``, ``--version`` and the
local-only commands keep working without it; the stderr channel then
falls back to plain text with Rich markup tags removed.
"""

from __future__ import annotations

import re
import sys
from typing import Any

from consolectl.exceptions import EnvironmentError

_MARKUP_TAG = re.compile(r"\[/?[a-z][a-z ]*\]")


def get_rich_console() -> Any:
    """Return a Rich ``Console`` bound to stderr.

    Raises
    ------
    EnvironmentError
        If Rich is not installed.
    """
    try:
        from rich.console import Console
    except ModuleNotFoundError as exc:
        raise EnvironmentError(
            "rich is not installed. Install with: pip install rich",
        ) from exc
    return Console(stderr=True)


def strip_markup(text: str) -> str:
    """Remove ``[bold red]``-style tags for plain-text rendering."""
    return _MARKUP_TAG.sub("", text)


class StderrConsole:
    """Print to stderr with Rich when it is importable, plain text otherwise."""

    def print(self, *objects: object, soft_wrap: bool = False) -> None:
        """Render *objects*; ``soft_wrap`` keeps long lines on one line."""
        try:
            rich_console = get_rich_console()
        except EnvironmentError:
            plain = (strip_markup(o) if isinstance(o, str) else o for o in objects)
            print(*plain, file=sys.stderr)
            return
        rich_console.print(*objects, soft_wrap=soft_wrap)


console = StderrConsole()


def emit(text: str) -> None:
    """Write command output to stdout verbatim, without markup processing."""
    sys.stdout.write(text if text.endswith("\n") else f"{text}\n")
