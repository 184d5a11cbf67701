"""Interactive entity selection for the ``select`` commands.

This module is responsible for:

* Rendering a Rich table of the candidate orgs, projects or workspaces.
* Prompting the user to pick one via questionary arrow keys.
* Returning the chosen record.

All display-related logic lives here: no business logic, no network
calls, no config writes.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, TypeVar

from consolectl.cli.console import console
from consolectl.core.models import Organization, Project, Workspace
from consolectl.exceptions import EnvironmentError, SelectionNotFoundError

R = TypeVar("R", Organization, Project, Workspace)


def _import_questionary() -> Any:
    """Import questionary lazily for interactive selection."""
    try:
        import questionary
    except ModuleNotFoundError as exc:
        raise EnvironmentError(
            "questionary is not installed. Install with: pip install questionary",
        ) from exc
    return questionary


def _import_rich_table() -> type[Any]:
    """Import rich table lazily for candidate rendering."""
    try:
        from rich.table import Table
    except ModuleNotFoundError as exc:
        raise EnvironmentError(
            "rich is not installed. Install with: pip install rich",
        ) from exc
    return Table


# ---------------------------------------------------------------------------
# Presentation helpers (pure transforms, no I/O)
# ---------------------------------------------------------------------------

def _build_choice_label(index: int, record: Organization | Project | Workspace) -> str:
    """Build the single-line label shown in the questionary selector.

    Format: ``"  1.  Stage        (7012)"``
    """
    return f"  {index + 1}.  {record.name:<24} ({record.id})"


def _display_table(title: str, records: Sequence[Organization | Project | Workspace]) -> None:
    table_class = _import_rich_table()

    table = table_class(
        title=title,
        show_header=True,
        header_style="bold magenta",
        border_style="dim",
    )
    table.add_column("#", justify="right", style="dim", width=4)
    table.add_column("ID", justify="left")
    table.add_column("Name", justify="left", min_width=12)

    for i, record in enumerate(records, start=1):
        table.add_row(str(i), record.id, record.name)

    console.print()
    console.print(table)
    console.print()


# ---------------------------------------------------------------------------
# Public prompt function
# ---------------------------------------------------------------------------

def prompt_selection(label: str, records: Sequence[R]) -> R:
    """Display *records* and prompt the user to pick one.

    Parameters
    ----------
    label:
        Entity label used in the table title and prompt, e.g. ``"Project"``.
    records:
        Candidates, already scoped to the selected parent.

    Returns
    -------
    The chosen record.

    Raises
    ------
    SelectionNotFoundError
        If there is nothing to choose from, or the user cancels the
        prompt (Esc / None return).
    """
    if not records:
        raise SelectionNotFoundError(f"No {label}s available to select.")

    questionary = _import_questionary()

    _display_table(f"Available {label}s", records)

    choices = [
        questionary.Choice(title=_build_choice_label(i, record), value=i)
        for i, record in enumerate(records)
    ]

    selected: int | None = questionary.select(
        f"Select {label}:",
        choices=choices,
        use_arrow_keys=True,
        use_shortcuts=False,
    ).ask()  # Returns None on Ctrl+C / Esc

    if selected is None:
        raise SelectionNotFoundError(
            f"No {label} selected.",
            hint=f"Use arrow keys to pick a {label.lower()}, then press Enter.",
        )

    return records[selected]
