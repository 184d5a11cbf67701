"""Custom exception hierarchy for consolectl.

All exceptions that cross layer boundaries must inherit from
:class:`ConsoleCliError`.  Raw third-party exceptions (e.g. from httpx)
must NEVER propagate beyond the infrastructure layer; they must be
caught and re-raised as a typed subclass defined here.

Hierarchy
---------
ConsoleCliError
├── RemoteFetchError
├── IncompleteSelectionError
├── SelectionNotFoundError
├── FilesystemError
├── ConfigError
├── AuthenticationError
└── EnvironmentError
"""

from __future__ import annotations

from collections.abc import Sequence


class ConsoleCliError(Exception):
    """Base exception for all consolectl errors.

    Every user-visible error condition must map to a subclass of this
    exception so that the CLI error boundary can render a clean
    single-line message without leaking internal stack traces.
    """

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint: str | None = hint
        """Optional actionable guidance shown below the error message."""


# --- Remote directory -------------------------------------------------------

class RemoteFetchError(ConsoleCliError):
    """Raised when the console service answers with a failure envelope."""

    def __init__(
        self,
        operation: str,
        message: str,
        *,
        hint: str | None = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.operation: str = operation
        """Name of the directory call that failed (e.g. ``list_projects``)."""


# --- Selection ---------------------------------------------------------------

class IncompleteSelectionError(ConsoleCliError):
    """Raised when one or more required selection levels are unset.

    The message lists every missing level, comma-joined, in hierarchy
    order.
    """

    def __init__(self, missing: Sequence[str], *, hint: str | None = None) -> None:
        self.missing: tuple[str, ...] = tuple(missing)
        super().__init__(
            ",".join(f"No {label} selected" for label in self.missing),
            hint=hint,
        )


class SelectionNotFoundError(ConsoleCliError):
    """Raised when a requested org/project/workspace is not available."""


# --- Local state ---------------------------------------------------------------

class FilesystemError(ConsoleCliError):
    """Raised when writing a downloaded bundle to disk fails."""


class ConfigError(ConsoleCliError):
    """Raised when the local configuration file cannot be read or written."""


class AuthenticationError(ConsoleCliError):
    """Raised when no access token is available for the console service."""


# --- Environment / tooling -------------------------------------------------

class EnvironmentError(ConsoleCliError):
    """Raised when a required runtime dependency is not available."""
