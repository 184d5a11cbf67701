"""Core download service — materialises a workspace bundle on disk.

This service delegates fetching to a
:class:`~consolectl.core.protocols.RemoteDirectory` and writing to a
:class:`~consolectl.core.protocols.BundleSink`, both injected at
construction time.  It is responsible for:

* Checking that the selection is complete, reporting every gap at once.
* Unwrapping the directory envelope.
* Deriving the bundle filename.
* Ensuring only :class:`~consolectl.exceptions.ConsoleCliError`
  subclasses escape.
"""

from __future__ import annotations

import json
from pathlib import Path

from loguru import logger

from consolectl.core.models import Err, Organization, Project, Selection, Workspace
from consolectl.core.protocols import BundleSink, RemoteDirectory
from consolectl.exceptions import (
    ConsoleCliError,
    IncompleteSelectionError,
    RemoteFetchError,
)


class WorkspaceDownloadService:
    """Stateless service that downloads the selected workspace's bundle.

    Parameters
    ----------
    directory:
        Any object satisfying the :class:`RemoteDirectory` protocol.
    sink:
        Any object satisfying the :class:`BundleSink` protocol.
    """

    def __init__(self, directory: RemoteDirectory, sink: BundleSink) -> None:
        self._directory: RemoteDirectory = directory
        self._sink: BundleSink = sink

    # ------------------------------------------------------------------
    # Filename construction (pure)
    # ------------------------------------------------------------------

    @staticmethod
    def _require_complete(selection: Selection) -> tuple[Organization, Project, Workspace]:
        """Return the three selected entities or report every unset level."""
        if selection.org and selection.project and selection.workspace:
            return selection.org, selection.project, selection.workspace
        raise IncompleteSelectionError([level.label for level in selection.missing()])

    @classmethod
    def default_filename(cls, selection: Selection) -> str:
        """Return ``{orgId}-{projectName}-{workspaceName}.json``."""
        org, project, workspace = cls._require_complete(selection)
        return f"{org.id}-{project.name}-{workspace.name}.json"

    @classmethod
    def resolve_path(cls, selection: Selection, destination: str | Path | None = None) -> Path:
        """Join *destination*, always treated as a directory, with the default filename."""
        filename = cls.default_filename(selection)
        if destination:
            return Path(destination) / filename
        return Path(filename)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def download(self, selection: Selection, destination: str | Path | None = None) -> Path:
        """Fetch and write the bundle of the selected workspace.

        Parameters
        ----------
        selection:
            The current selection; all three levels must be set.
        destination:
            Optional directory to write into.  Defaults to the current
            working directory.

        Returns
        -------
        Path
            The path the bundle was written to.

        Raises
        ------
        IncompleteSelectionError
            Listing every unset level.
        RemoteFetchError
            If the directory fails to return the bundle.  Nothing is written.
        FilesystemError
            If the bundle cannot be written.
        """
        org, project, workspace = self._require_complete(selection)

        logger.debug("Trying to fetch workspace configuration for {}", workspace.id)
        try:
            envelope = self._directory.download_workspace_bundle(org.id, project.id, workspace.id)
        except ConsoleCliError:
            raise
        except Exception as exc:
            raise RemoteFetchError(
                "download_workspace_bundle",
                f"Unexpected error retrieving Workspace configuration: {exc}",
            ) from exc

        if isinstance(envelope, Err):
            logger.debug("download_workspace_bundle failed: {}", envelope.message)
            raise RemoteFetchError(
                "download_workspace_bundle",
                "Error retrieving Workspace configuration",
            )

        path = self.resolve_path(selection, destination)
        written = self._sink.write(path, json.dumps(envelope.body, indent=2))
        logger.debug("Wrote workspace configuration to {}", written)
        return written
