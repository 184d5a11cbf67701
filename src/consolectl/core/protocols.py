"""Protocols (interfaces) consumed by the core layer.

These define the contracts that infrastructure adapters must satisfy.
Core code depends ONLY on these protocols, never on concrete
implementations.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Protocol

from consolectl.core.models import Envelope


class ConfigStore(Protocol):
    """Contract for the persisted key/value configuration.

    Keys are dot-delimited strings (``"console.org"``) addressing nested
    mappings.  Values must be JSON-serialisable.
    """

    def get(self, key: str) -> Any:
        """Return the value stored at *key*, or ``None`` when absent."""
        ...  # pragma: no cover

    def set(self, key: str, value: Any) -> None:
        """Store *value* at *key*, creating intermediate mappings."""
        ...  # pragma: no cover

    def delete(self, key: str) -> None:
        """Remove *key* and everything below it.  Missing keys are ignored."""
        ...  # pragma: no cover


class RemoteDirectory(Protocol):
    """Contract for the console service.

    Every call is a single idempotent read returning an
    :data:`~consolectl.core.models.Envelope`.  Implementations must never
    raise for service-side failures; they return
    :class:`~consolectl.core.models.Err` instead.
    """

    def list_organizations(self) -> Envelope[list[dict[str, Any]]]:
        ...  # pragma: no cover

    def list_projects(self, org_id: str) -> Envelope[list[dict[str, Any]]]:
        ...  # pragma: no cover

    def list_workspaces(
        self,
        org_id: str,
        project_id: str,
    ) -> Envelope[list[dict[str, Any]]]:
        ...  # pragma: no cover

    def download_workspace_bundle(
        self,
        org_id: str,
        project_id: str,
        workspace_id: str,
    ) -> Envelope[Any]:
        """Fetch the exported configuration of one workspace as decoded JSON."""
        ...  # pragma: no cover


class BundleSink(Protocol):
    """Contract for the byte sink that receives downloaded bundles."""

    def write(self, path: Path, content: str) -> Path:
        """Write *content* to *path*, overwriting, and return the final path.

        Raises
        ------
        FilesystemError
            When the write fails for any reason.
        """
        ...  # pragma: no cover
