"""Rendering of selections and entity lists as plain text, JSON or YAML.

Every function returns a string; printing is left to the CLI layer.

JSON and YAML render the same cleaned structure: ``None``-valued keys are
dropped recursively before serialisation, so both formats parse back to
equal objects.
"""

from __future__ import annotations

import enum
import json
from collections.abc import Sequence
from typing import Any

from consolectl.core.models import Organization, Project, Selection, SelectionLevel, Workspace
from consolectl.exceptions import EnvironmentError

Record = Organization | Project | Workspace


class OutputFormat(enum.Enum):
    PLAIN = "plain"
    JSON = "json"
    YAML = "yml"


# Plain-text columns per entity: (header, attribute).
ORG_COLUMNS: tuple[tuple[str, str], ...] = (("ID", "id"), ("Code", "code"), ("Name", "name"))
PROJECT_COLUMNS: tuple[tuple[str, str], ...] = (("ID", "id"), ("Name", "name"), ("Title", "title"))
WORKSPACE_COLUMNS: tuple[tuple[str, str], ...] = (("ID", "id"), ("Name", "name"))


def _import_yaml() -> Any:
    """Import PyYAML lazily so plain/JSON output never needs it."""
    try:
        import yaml
    except ModuleNotFoundError as exc:
        raise EnvironmentError(
            "PyYAML is not installed. Install with: pip install PyYAML",
        ) from exc
    return yaml


# ---------------------------------------------------------------------------
# Structured serialisation
# ---------------------------------------------------------------------------

def clean(data: Any) -> Any:
    """Recursively drop ``None``-valued keys from mappings."""
    if isinstance(data, dict):
        return {key: clean(value) for key, value in data.items() if value is not None}
    if isinstance(data, (list, tuple)):
        return [clean(item) for item in data]
    return data


def to_json(data: Any) -> str:
    return json.dumps(clean(data))


def to_yaml(data: Any) -> str:
    yaml = _import_yaml()
    return yaml.safe_dump(clean(data), default_flow_style=False, sort_keys=False)


def _structured(data: Any, fmt: OutputFormat) -> str:
    if fmt is OutputFormat.JSON:
        return to_json(data)
    return to_yaml(data)


# ---------------------------------------------------------------------------
# Selection
# ---------------------------------------------------------------------------

def render_selection(selection: Selection, fmt: OutputFormat = OutputFormat.PLAIN) -> str:
    """Render the current selection.

    Plain text is three numbered lines with a ``<no X selected>``
    placeholder for each unset level.
    """
    names = selection.names()
    if fmt is not OutputFormat.PLAIN:
        return _structured(names, fmt)

    lines = ["You are currently in:"]
    for number, level in enumerate(SelectionLevel, start=1):
        title = "Org" if level is SelectionLevel.ORG else level.label
        value = names[level.config_key] or f"<no {level.config_key} selected>"
        lines.append(f"{number}. {title}: {value}")
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Entity lists
# ---------------------------------------------------------------------------

def _cell(record: Record, attribute: str) -> str:
    value = getattr(record, attribute, None)
    return "" if value is None else str(value)


def render_records(
    records: Sequence[Record],
    fmt: OutputFormat = OutputFormat.PLAIN,
    *,
    columns: Sequence[tuple[str, str]] = (("ID", "id"), ("Name", "name")),
    selected_id: str | None = None,
) -> str:
    """Render a list of entities.

    Plain text has a header row then one line per record; the record
    whose id equals *selected_id* is marked with ``*``.
    """
    if fmt is not OutputFormat.PLAIN:
        return _structured([record.to_dict() for record in records], fmt)

    rows = [[_cell(record, attribute) for _, attribute in columns] for record in records]
    widths = [
        max([len(header), *(len(row[index]) for row in rows)])
        for index, (header, _) in enumerate(columns)
    ]

    def _line(marker: str, cells: Sequence[str]) -> str:
        body = "  ".join(cell.ljust(width) for cell, width in zip(cells, widths))
        return f"{marker} {body}".rstrip()

    lines = [_line(" ", [header for header, _ in columns])]
    for record, row in zip(records, rows):
        marker = "*" if selected_id is not None and record.id == selected_id else " "
        lines.append(_line(marker, row))
    return "\n".join(lines)
