"""Command handlers for the ``consolectl`` CLI.

Each handler receives the parsed :class:`argparse.Namespace` and the
loaded :class:`~consolectl.settings.ConsoleSettings`, wires the infra
adapters into the core services, and returns an exit code.  Errors are
raised, never printed: :func:`consolectl.cli.app.cli` is the only error
boundary.

Selecting a level clears every level below it, and a project or
workspace can only be selected from the children of the currently
selected parent.
"""

from __future__ import annotations

import argparse
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from typing import Any, TypeVar

from loguru import logger

from consolectl.cli import exit_codes
from consolectl.cli.console import emit
from consolectl.core.download_service import WorkspaceDownloadService
from consolectl.core.filters import find_by_id_or_name
from consolectl.core.models import Organization, Project, SelectionLevel, Workspace
from consolectl.core.presenter import (
    ORG_COLUMNS,
    PROJECT_COLUMNS,
    WORKSPACE_COLUMNS,
    render_records,
    render_selection,
)
from consolectl.core.protocols import ConfigStore, RemoteDirectory
from consolectl.core.selection import SelectionStateMachine
from consolectl.exceptions import SelectionNotFoundError
from consolectl.settings import ConsoleSettings

ORG, PROJECT, WORKSPACE = SelectionLevel.ORG, SelectionLevel.PROJECT, SelectionLevel.WORKSPACE
R = TypeVar("R", Organization, Project, Workspace)


# ---------------------------------------------------------------------------
# Adapter factories (patched in tests)
# ---------------------------------------------------------------------------

def open_store(settings: ConsoleSettings) -> ConfigStore:
    from consolectl.infra.config_store import JsonConfigStore

    return JsonConfigStore(settings.config_file)


@contextmanager
def open_directory(settings: ConsoleSettings, store: ConfigStore) -> Iterator[RemoteDirectory]:
    """Yield an authenticated console directory, closed on exit."""
    from consolectl.infra.auth import resolve_access_token, resolve_env
    from consolectl.infra.console_client import HttpConsoleDirectory

    env = resolve_env(settings, store)
    token = resolve_access_token(settings, store)
    with HttpConsoleDirectory(
        token,
        settings.resolve_api_key(env),
        settings.resolve_base_url(env),
        timeout=settings.timeout,
    ) as directory:
        yield directory


def _spinner(description: str) -> Any:
    from consolectl.cli.progress import RichSpinner

    return RichSpinner(description)


def _pick(label: str, records: Sequence[R], identifier: str | None) -> R:
    """Resolve *identifier* among *records*, or prompt when it is omitted."""
    if identifier is None:
        from consolectl.cli.prompt import prompt_selection

        return prompt_selection(label, records)

    record = find_by_id_or_name(records, identifier)
    if record is None:
        raise SelectionNotFoundError(
            f"{label} {identifier} not found",
            hint=f"Run the {label.lower()} list command to see what is available.",
        )
    return record


# ---------------------------------------------------------------------------
# where
# ---------------------------------------------------------------------------

def handle_where(args: argparse.Namespace, settings: ConsoleSettings) -> int:
    """Print the current Org / Project / Workspace selection."""
    machine = SelectionStateMachine(open_store(settings))
    emit(render_selection(machine.get_current_selection(), args.output))
    return exit_codes.SUCCESS


# ---------------------------------------------------------------------------
# org
# ---------------------------------------------------------------------------

def handle_org_list(args: argparse.Namespace, settings: ConsoleSettings) -> int:
    store = open_store(settings)
    current = SelectionStateMachine(store).get_current_selection()
    with open_directory(settings, store) as directory:
        with _spinner("Retrieving Organizations"):
            orgs = SelectionStateMachine(store, directory).list_orgs()

    emit(render_records(
        orgs,
        args.output,
        columns=ORG_COLUMNS,
        selected_id=current.org.id if current.org else None,
    ))
    return exit_codes.SUCCESS


def handle_org_select(args: argparse.Namespace, settings: ConsoleSettings) -> int:
    store = open_store(settings)
    with open_directory(settings, store) as directory:
        machine = SelectionStateMachine(store, directory)
        with _spinner("Retrieving Organizations"):
            orgs = machine.list_orgs(args.org_code)

    if args.org_code is not None and not orgs:
        raise SelectionNotFoundError(
            f"Organization {args.org_code} not found",
            hint="Only enterprise organizations can be selected.",
        )
    org = orgs[0] if args.org_code is not None else _pick(ORG.label, orgs, None)

    machine.clear_level(PROJECT)
    machine.select_org(org)
    logger.debug("Selected org {}", org.code)
    emit(f"Org selected {org.name}")
    return exit_codes.SUCCESS


# ---------------------------------------------------------------------------
# project
# ---------------------------------------------------------------------------

def handle_project_list(args: argparse.Namespace, settings: ConsoleSettings) -> int:
    store = open_store(settings)
    selection = SelectionStateMachine(store).require(ORG)
    with open_directory(settings, store) as directory:
        with _spinner(f"Retrieving Projects for Org {selection.org.name}"):
            projects = SelectionStateMachine(store, directory).list_projects(selection.org.id)

    emit(render_records(
        projects,
        args.output,
        columns=PROJECT_COLUMNS,
        selected_id=selection.project.id if selection.project else None,
    ))
    return exit_codes.SUCCESS


def handle_project_select(args: argparse.Namespace, settings: ConsoleSettings) -> int:
    store = open_store(settings)
    selection = SelectionStateMachine(store).require(ORG)
    with open_directory(settings, store) as directory:
        machine = SelectionStateMachine(store, directory)
        with _spinner(f"Retrieving Projects for Org {selection.org.name}"):
            projects = machine.list_projects(selection.org.id)

    project = _pick(PROJECT.label, projects, args.project)
    machine.clear_level(WORKSPACE)
    machine.select_project(project)
    emit(f"Project selected {project.name}")
    return exit_codes.SUCCESS


# ---------------------------------------------------------------------------
# workspace
# ---------------------------------------------------------------------------

def handle_workspace_list(args: argparse.Namespace, settings: ConsoleSettings) -> int:
    store = open_store(settings)
    selection = SelectionStateMachine(store).require(ORG, PROJECT)
    with open_directory(settings, store) as directory:
        with _spinner(f"Retrieving Workspaces for Project {selection.project.name}"):
            workspaces = SelectionStateMachine(store, directory).list_workspaces(
                selection.org.id,
                selection.project.id,
            )

    emit(render_records(
        workspaces,
        args.output,
        columns=WORKSPACE_COLUMNS,
        selected_id=selection.workspace.id if selection.workspace else None,
    ))
    return exit_codes.SUCCESS


def handle_workspace_select(args: argparse.Namespace, settings: ConsoleSettings) -> int:
    store = open_store(settings)
    selection = SelectionStateMachine(store).require(ORG, PROJECT)
    with open_directory(settings, store) as directory:
        machine = SelectionStateMachine(store, directory)
        with _spinner(f"Retrieving Workspaces for Project {selection.project.name}"):
            workspaces = machine.list_workspaces(selection.org.id, selection.project.id)

    workspace = _pick(WORKSPACE.label, workspaces, args.workspace)
    machine.select_workspace(workspace)
    emit(f"Workspace selected {workspace.name}")
    return exit_codes.SUCCESS


def handle_workspace_download(args: argparse.Namespace, settings: ConsoleSettings) -> int:
    """Download the selected workspace's configuration bundle."""
    from consolectl.infra.bundle_writer import FileBundleSink

    store = open_store(settings)
    selection = SelectionStateMachine(store).require(ORG, PROJECT, WORKSPACE)
    with open_directory(settings, store) as directory:
        service = WorkspaceDownloadService(directory, FileBundleSink())
        with _spinner(f"Downloading configuration for Workspace {selection.workspace.name}"):
            path = service.download(selection, args.destination)

    emit(f"Downloaded Workspace configuration to {path}")
    return exit_codes.SUCCESS


# ---------------------------------------------------------------------------
# clear
# ---------------------------------------------------------------------------

def handle_clear(args: argparse.Namespace, settings: ConsoleSettings) -> int:
    """Clear one level (and everything below it) or the whole selection."""
    machine = SelectionStateMachine(open_store(settings))
    if args.level is None:
        machine.clear_all()
        emit("Cleared Org, Project and Workspace selection")
        return exit_codes.SUCCESS

    machine.clear_level(args.level)
    cleared = [level.label for level in (args.level, *args.level.deeper())]
    emit(f"Cleared {', '.join(cleared)} selection")
    return exit_codes.SUCCESS
