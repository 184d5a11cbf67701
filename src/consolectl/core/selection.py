"""Selection state machine — the Org → Project → Workspace chain.

All reads and writes of the persisted selection go through
:class:`SelectionStateMachine`.  It depends on a
:class:`~consolectl.core.protocols.ConfigStore` and, for list
operations, a :class:`~consolectl.core.protocols.RemoteDirectory`, both
injected at construction time.

Guarantees
----------
* Clearing a level always clears every deeper level, so a project is
  never stored without an org, nor a workspace without a project.
* Select operations write exactly what they are given.  Checking that a
  project belongs to the selected org is the command layer's job.
* Only :class:`~consolectl.exceptions.ConsoleCliError` subclasses escape.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar

from loguru import logger

from consolectl.core.filters import select_orgs
from consolectl.core.models import (
    Err,
    Organization,
    Project,
    Selection,
    SelectionLevel,
    Workspace,
)
from consolectl.core.protocols import ConfigStore, RemoteDirectory
from consolectl.exceptions import (
    ConsoleCliError,
    IncompleteSelectionError,
    RemoteFetchError,
)

CONFIG_ROOT: str = "console"
"""Namespace under which every selection key is stored."""

R = TypeVar("R", Organization, Project, Workspace)


def config_key(level: SelectionLevel) -> str:
    """Return the full dot-delimited store key for *level*."""
    return f"{CONFIG_ROOT}.{level.config_key}"


class SelectionStateMachine:
    """Reads, narrows, writes and clears the persisted selection.

    Parameters
    ----------
    store:
        Any object satisfying the :class:`ConfigStore` protocol.
    directory:
        Optional :class:`RemoteDirectory`.  Only the ``list_*`` methods
        need it; local-only commands may omit it.
    """

    def __init__(
        self,
        store: ConfigStore,
        directory: RemoteDirectory | None = None,
    ) -> None:
        self._store: ConfigStore = store
        self._directory: RemoteDirectory | None = directory

    # ------------------------------------------------------------------
    # Remote listing
    # ------------------------------------------------------------------

    def list_orgs(self, filter_code: str | None = None) -> list[Organization]:
        """List selectable organizations.

        Only enterprise orgs are returned, narrowed to *filter_code* when
        given, and reduced to ``{id, code, name}``.

        Raises
        ------
        RemoteFetchError
            If the directory reports a failure or returns a malformed body.
        """
        orgs = self._fetch_records(
            "list_organizations",
            "Orgs",
            lambda directory: directory.list_organizations(),
            Organization,
        )
        return select_orgs(orgs, filter_code)

    def list_projects(self, org_id: str) -> list[Project]:
        """List every project of *org_id*."""
        return self._fetch_records(
            "list_projects",
            "Projects",
            lambda directory: directory.list_projects(org_id),
            Project,
        )

    def list_workspaces(self, org_id: str, project_id: str) -> list[Workspace]:
        """List every workspace of *project_id*."""
        return self._fetch_records(
            "list_workspaces",
            "Workspaces",
            lambda directory: directory.list_workspaces(org_id, project_id),
            Workspace,
        )

    # ------------------------------------------------------------------
    # Reading the selection
    # ------------------------------------------------------------------

    def get_current_selection(self) -> Selection:
        """Read the three levels independently; any may be ``None``."""
        return Selection(
            org=self._read(SelectionLevel.ORG, Organization),
            project=self._read(SelectionLevel.PROJECT, Project),
            workspace=self._read(SelectionLevel.WORKSPACE, Workspace),
        )

    def require(self, *levels: SelectionLevel) -> Selection:
        """Return the current selection, failing if any of *levels* is unset.

        Every missing level is reported, not just the first.

        Raises
        ------
        IncompleteSelectionError
            Listing each missing level in hierarchy order.
        """
        selection = self.get_current_selection()
        missing = selection.missing(*levels)
        if missing:
            raise IncompleteSelectionError([level.label for level in missing])
        return selection

    # ------------------------------------------------------------------
    # Writing the selection
    # ------------------------------------------------------------------

    def select_org(self, org: Organization) -> None:
        self._write(SelectionLevel.ORG, org.to_dict())

    def select_project(self, project: Project) -> None:
        self._write(SelectionLevel.PROJECT, project.to_dict())

    def select_workspace(self, workspace: Workspace) -> None:
        self._write(SelectionLevel.WORKSPACE, workspace.to_dict())

    def clear_level(self, level: SelectionLevel) -> None:
        """Delete *level* and every level below it."""
        for target in (level, *level.deeper()):
            logger.debug("Clearing {}", config_key(target))
            self._store.delete(config_key(target))

    def clear_all(self) -> None:
        """Delete the whole selection namespace in one operation."""
        logger.debug("Clearing {}", CONFIG_ROOT)
        self._store.delete(CONFIG_ROOT)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _write(self, level: SelectionLevel, value: dict[str, Any]) -> None:
        logger.debug("Setting {} to {}", config_key(level), value.get("id"))
        self._store.set(config_key(level), value)

    def _read(self, level: SelectionLevel, model: type[R]) -> R | None:
        raw = self._store.get(config_key(level))
        if not isinstance(raw, dict):
            return None
        return model.from_dict(raw)

    def _fetch_records(
        self,
        operation: str,
        entity: str,
        call: Callable[[RemoteDirectory], Any],
        model: type[R],
    ) -> list[R]:
        """Run one directory call, unwrap its envelope and parse the records.

        A body that is not a list of mappings is a failed fetch, never an
        empty or partial result.
        """
        if self._directory is None:
            raise ConsoleCliError(f"Cannot retrieve {entity} without a console connection.")

        logger.debug("Retrieving {}", entity)
        envelope = call(self._directory)
        if isinstance(envelope, Err):
            logger.debug("{} failed: {}", operation, envelope.message)
            raise RemoteFetchError(operation, f"Error retrieving {entity}")

        body = envelope.body
        if not isinstance(body, list) or not all(isinstance(entry, dict) for entry in body):
            logger.debug("{} returned a malformed body: {!r}", operation, body)
            raise RemoteFetchError(operation, f"Error retrieving {entity}")
        return [model.from_dict(entry) for entry in body]
