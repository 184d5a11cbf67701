"""Infrastructure layer — external system integration.

This layer wraps all interaction with the console service, the local
config file and the filesystem.  Every raw third-party exception must be
caught here and re-raised as a :class:`~consolectl.exceptions.ConsoleCliError`
subclass, or folded into an :class:`~consolectl.core.models.Err` envelope.

Rules
-----
* No imports from ``cli``.
* No user-facing output (no ``print()``, no Rich rendering).
* Must expose clean, typed interfaces consumed by the core layer.
"""

from consolectl.infra.auth import resolve_access_token, resolve_env
from consolectl.infra.bundle_writer import FileBundleSink
from consolectl.infra.config_store import JsonConfigStore
from consolectl.infra.console_client import HttpConsoleDirectory

__all__: list[str] = [
    "FileBundleSink",
    "HttpConsoleDirectory",
    "JsonConfigStore",
    "resolve_access_token",
    "resolve_env",
]
