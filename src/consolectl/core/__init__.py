"""Core / service layer — selection logic and data shaping.

Rules
-----
* No ``print()`` calls.
* No network access; filesystem writes go through an injected sink.
* No imports from ``cli`` or ``infra``.
* Functions are typed and deterministic given their collaborators.
"""

from consolectl.core.download_service import WorkspaceDownloadService
from consolectl.core.models import (
    Envelope,
    Err,
    Ok,
    Organization,
    Project,
    Selection,
    SelectionLevel,
    Workspace,
)
from consolectl.core.presenter import OutputFormat
from consolectl.core.protocols import BundleSink, ConfigStore, RemoteDirectory
from consolectl.core.selection import SelectionStateMachine

__all__: list[str] = [
    "BundleSink",
    "ConfigStore",
    "Envelope",
    "Err",
    "Ok",
    "Organization",
    "OutputFormat",
    "Project",
    "RemoteDirectory",
    "Selection",
    "SelectionLevel",
    "SelectionStateMachine",
    "Workspace",
    "WorkspaceDownloadService",
]
