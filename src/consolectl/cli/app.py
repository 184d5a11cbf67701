"""CLI application entry point and command routing for consolectl.

This module is the **sole error boundary** for the entire application.
It catches :class:`~consolectl.exceptions.ConsoleCliError`,
``KeyboardInterrupt``, and any unexpected ``Exception``, rendering a
single-line message on stderr and returning well-defined exit codes.

Architecture notes
------------------
* No business logic lives here; command handlers in
  :mod:`consolectl.cli.commands` delegate to the core services.
* Command output goes to stdout; status, prompts and errors go to
  stderr through the Rich console.
* This module is the only place that translates between the domain world
  and the OS process exit code.
"""

from __future__ import annotations

import argparse
import sys

from consolectl.cli import commands, exit_codes
from consolectl.cli.console import console
from consolectl.core.models import SelectionLevel
from consolectl.core.presenter import OutputFormat
from consolectl.exceptions import ConfigError, ConsoleCliError
from consolectl.settings import ConsoleSettings
from consolectl.version import __version__


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------

def _add_output_flags(parser: argparse.ArgumentParser) -> None:
    """Add the mutually exclusive ``--json`` / ``--yml`` output flags."""
    group = parser.add_mutually_exclusive_group()
    group.add_argument(
        "-j",
        "--json",
        dest="output",
        action="store_const",
        const=OutputFormat.JSON,
        help="Output json",
    )
    group.add_argument(
        "-y",
        "--yml",
        "--yaml",
        dest="output",
        action="store_const",
        const=OutputFormat.YAML,
        help="Output yml",
    )
    parser.set_defaults(output=OutputFormat.PLAIN)


def _build_parser() -> argparse.ArgumentParser:
    """Construct the command tree.

    * ``consolectl where``
    * ``consolectl org list|select``
    * ``consolectl project list|select``
    * ``consolectl workspace list|select|download``
    * ``consolectl clear``
    """
    parser = argparse.ArgumentParser(
        prog="consolectl",
        description="Browse and select console Orgs, Projects and Workspaces.",
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Print debug logging to stderr.",
    )
    subparsers = parser.add_subparsers(dest="command", metavar="<command>")

    where = subparsers.add_parser(
        "where",
        aliases=["status"],
        help="Show the currently selected Org, Project and Workspace.",
    )
    _add_output_flags(where)
    where.set_defaults(handler=commands.handle_where)

    # -- org -------------------------------------------------------------------
    org = subparsers.add_parser("org", help="Manage Organizations.")
    org_sub = org.add_subparsers(dest="subcommand", metavar="<subcommand>")
    org.set_defaults(group_parser=org)

    org_list = org_sub.add_parser("list", aliases=["ls"], help="List your Organizations.")
    _add_output_flags(org_list)
    org_list.set_defaults(handler=commands.handle_org_list)

    org_select = org_sub.add_parser("select", aliases=["sel"], help="Select an Organization.")
    org_select.add_argument("org_code", nargs="?", help="Organization code to select.")
    org_select.set_defaults(handler=commands.handle_org_select)

    # -- project ---------------------------------------------------------------
    project = subparsers.add_parser("project", help="Manage Projects.")
    project_sub = project.add_subparsers(dest="subcommand", metavar="<subcommand>")
    project.set_defaults(group_parser=project)

    project_list = project_sub.add_parser(
        "list",
        aliases=["ls"],
        help="List the Projects of the selected Organization.",
    )
    _add_output_flags(project_list)
    project_list.set_defaults(handler=commands.handle_project_list)

    project_select = project_sub.add_parser("select", aliases=["sel"], help="Select a Project.")
    project_select.add_argument("project", nargs="?", help="Project id or name.")
    project_select.set_defaults(handler=commands.handle_project_select)

    # -- workspace -------------------------------------------------------------
    workspace = subparsers.add_parser("workspace", aliases=["ws"], help="Manage Workspaces.")
    workspace_sub = workspace.add_subparsers(dest="subcommand", metavar="<subcommand>")
    workspace.set_defaults(group_parser=workspace)

    workspace_list = workspace_sub.add_parser(
        "list",
        aliases=["ls"],
        help="List the Workspaces of the selected Project.",
    )
    _add_output_flags(workspace_list)
    workspace_list.set_defaults(handler=commands.handle_workspace_list)

    workspace_select = workspace_sub.add_parser(
        "select",
        aliases=["sel"],
        help="Select a Workspace.",
    )
    workspace_select.add_argument("workspace", nargs="?", help="Workspace id or name.")
    workspace_select.set_defaults(handler=commands.handle_workspace_select)

    workspace_download = workspace_sub.add_parser(
        "download",
        aliases=["dl"],
        help="Download the configuration for the selected Workspace.",
    )
    workspace_download.add_argument(
        "destination",
        nargs="?",
        default=None,
        help="Directory where the workspace configuration file will be saved.",
    )
    workspace_download.set_defaults(handler=commands.handle_workspace_download)

    # -- clear -----------------------------------------------------------------
    clear = subparsers.add_parser(
        "clear",
        help="Clear the selection; one level clears every level below it.",
    )
    levels = clear.add_mutually_exclusive_group()
    for level in SelectionLevel:
        levels.add_argument(
            f"--{level.config_key}",
            dest="level",
            action="store_const",
            const=level,
            help=f"Clear the {level.label} selection and everything below it.",
        )
    clear.set_defaults(level=None, handler=commands.handle_clear)

    return parser


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------

def _load_settings() -> ConsoleSettings:
    from pydantic import ValidationError

    from consolectl.settings import get_settings

    try:
        return get_settings()
    except ValidationError as exc:
        raise ConfigError(
            f"Invalid CONSOLECTL_* environment: {exc.errors()[0]['msg']}",
        ) from exc


def main(argv: list[str] | None = None) -> int:
    """Run the consolectl CLI.

    Parameters
    ----------
    argv:
        Explicit argument list.  When ``None`` (default), ``sys.argv[1:]``
        is used.  Accepting *argv* enables deterministic testing without
        monkeypatching.

    Returns
    -------
    int
        OS process exit code.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    handler = getattr(args, "handler", None)
    if handler is None:
        # A bare group such as ``consolectl org`` shows that group's help.
        getattr(args, "group_parser", parser).print_help()
        return exit_codes.SUCCESS

    from consolectl.log import setup_logging

    settings = _load_settings()
    setup_logging("DEBUG" if args.verbose else settings.log_level)
    return handler(args, settings)


# ---------------------------------------------------------------------------
# Script-level error boundary
# ---------------------------------------------------------------------------

def cli() -> None:
    """Top-level error boundary invoked by the console-script entry point.

    This function wraps :func:`main` and guarantees the process never
    exits with a raw stack trace during normal usage.
    """
    try:
        code = main()
        sys.exit(code)
    except ConsoleCliError as exc:
        message = f"[bold red]Error:[/bold red] {exc}"
        if exc.hint:
            message += f" [yellow]Hint:[/yellow] {exc.hint}"
        console.print(message, soft_wrap=True)
        sys.exit(exit_codes.GENERAL_ERROR)
    except KeyboardInterrupt:
        console.print("\n[yellow]Aborted by user.[/yellow]")
        sys.exit(exit_codes.KEYBOARD_INTERRUPT)
    except Exception as exc:  # noqa: BLE001
        console.print(
            "[bold red]Unexpected error.[/bold red] "
            f"{type(exc).__name__}: {exc}. Please report this issue.",
            soft_wrap=True,
        )
        sys.exit(exit_codes.UNEXPECTED_ERROR)
