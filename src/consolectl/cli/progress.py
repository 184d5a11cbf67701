"""Activity spinner shown on stderr while a console request is in flight.

The spinner is transient: Rich erases it when it stops, so stdout and
the final stderr output carry no trace of it.
"""

from __future__ import annotations

from typing import Any

from consolectl.cli.console import get_rich_console
from consolectl.exceptions import EnvironmentError


class RichSpinner:
    """Rich ``Status`` spinner labelled with the action in progress.

    Usage::

        with RichSpinner("Retrieving Projects for Org Acme"):
            projects = machine.list_projects(org.id)
    """

    def __init__(self, description: str) -> None:
        try:
            from rich.status import Status
        except ModuleNotFoundError as exc:
            raise EnvironmentError(
                "rich is not installed. Install with: pip install rich",
            ) from exc

        self._status: Any = Status(
            f"[bold blue]{description}",
            console=get_rich_console(),
            spinner="dots",
        )
        self._started: bool = False

    def __enter__(self) -> RichSpinner:
        self.start()
        return self

    def __exit__(self, *_args: object) -> None:
        self.stop()

    def start(self) -> None:
        if not self._started:
            self._status.start()
            self._started = True

    def stop(self) -> None:
        """Erase the spinner; calling it twice is harmless."""
        if self._started:
            self._status.stop()
            self._started = False
