"""CLI integration tests (mocked end-to-end).

The console directory is replaced by a mock yielded from
``commands.open_directory``; the config store is the real JSON store,
pointed at a temporary file by the autouse settings fixture.
"""

from __future__ import annotations

import json
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock, patch

import pytest
import yaml

from consolectl import __version__
from consolectl.cli import commands, exit_codes
from consolectl.cli.app import cli, main
from consolectl.core.models import Err, Ok, Organization, Project, Workspace
from consolectl.exceptions import (
    IncompleteSelectionError,
    RemoteFetchError,
    SelectionNotFoundError,
)
from consolectl.infra.config_store import JsonConfigStore

ORGS: list[dict[str, Any]] = [
    {"id": "1", "code": "CODE1", "name": "ORG1", "type": "entp"},
    {"id": "2", "code": "CODE2", "name": "ORG2", "type": "developer"},
]
PROJECTS: list[dict[str, Any]] = [
    {"id": "p1", "name": "myproject", "title": "My Project"},
    {"id": "p2", "name": "other"},
]
WORKSPACES: list[dict[str, Any]] = [
    {"id": 1, "name": "WRKSPC1", "enabled": 1},
    {"id": 2, "name": "WRKSPC2", "enabled": 1},
]


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def directory(monkeypatch: pytest.MonkeyPatch) -> MagicMock:
    """Install a mock console directory for every command."""
    fake = MagicMock()
    fake.list_organizations.return_value = Ok(ORGS)
    fake.list_projects.return_value = Ok(PROJECTS)
    fake.list_workspaces.return_value = Ok(WORKSPACES)
    fake.download_workspace_bundle.return_value = Ok({"project": {"id": "p1"}})

    @contextmanager
    def _open(settings: object, store: object) -> Iterator[MagicMock]:
        yield fake

    monkeypatch.setattr(commands, "open_directory", _open)
    monkeypatch.setattr(commands, "_spinner", lambda description: MagicMock())
    return fake


@pytest.fixture
def store(config_file: Path) -> JsonConfigStore:
    return JsonConfigStore(config_file)


def _preselect(store: JsonConfigStore, *, project: bool = True, workspace: bool = False) -> None:
    store.set("console.org", Organization(id="1", code="CODE1", name="ORG1").to_dict())
    if project:
        store.set("console.project", Project(id="p1", name="myproject").to_dict())
    if workspace:
        store.set("console.workspace", Workspace(id="1", name="WRKSPC1").to_dict())


def _stored(config_file: Path, key: str) -> Any:
    return JsonConfigStore(config_file).get(key)


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------

class TestParser:
    def test_no_args_prints_help(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main([]) == exit_codes.SUCCESS
        assert "usage: consolectl" in capsys.readouterr().out

    def test_bare_group_prints_group_help(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["ws"]) == exit_codes.SUCCESS
        assert "download" in capsys.readouterr().out

    def test_json_and_yml_are_exclusive(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["workspace", "list", "--json", "--yml"])
        assert exc_info.value.code == exit_codes.USAGE_ERROR

    @pytest.mark.parametrize(
        "argv",
        [
            ["where", "--help"],
            ["org", "list", "--help"],
            ["project", "select", "--help"],
            ["ws", "dl", "--help"],
            ["clear", "--help"],
        ],
    )
    def test_help_on_every_command(self, argv: list[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(argv)
        assert exc_info.value.code == 0


# ---------------------------------------------------------------------------
# where
# ---------------------------------------------------------------------------

class TestWhere:
    def test_nothing_selected(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["where"]) == exit_codes.SUCCESS
        out = capsys.readouterr().out
        assert "1. Org: <no org selected>" in out
        assert "3. Workspace: <no workspace selected>" in out

    def test_json(self, store: JsonConfigStore, capsys: pytest.CaptureFixture[str]) -> None:
        _preselect(store)
        main(["status", "--json"])
        assert json.loads(capsys.readouterr().out) == {"org": "ORG1", "project": "myproject"}

    def test_yaml(self, store: JsonConfigStore, capsys: pytest.CaptureFixture[str]) -> None:
        _preselect(store)
        main(["where", "--yml"])
        assert yaml.safe_load(capsys.readouterr().out) == {"org": "ORG1", "project": "myproject"}


# ---------------------------------------------------------------------------
# org
# ---------------------------------------------------------------------------

class TestOrg:
    def test_list(self, directory: MagicMock, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["org", "list"]) == exit_codes.SUCCESS
        out = capsys.readouterr().out
        assert "ORG1" in out
        assert "ORG2" not in out

    def test_list_failure(self, directory: MagicMock) -> None:
        directory.list_organizations.return_value = Err("500")
        with pytest.raises(RemoteFetchError, match="Error retrieving Orgs"):
            main(["org", "list"])

    def test_select_by_code(
        self,
        directory: MagicMock,
        store: JsonConfigStore,
        config_file: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        _preselect(store, workspace=True)
        assert main(["org", "select", "CODE1"]) == exit_codes.SUCCESS
        assert "Org selected ORG1" in capsys.readouterr().out
        assert _stored(config_file, "console.org") == {"id": "1", "code": "CODE1", "name": "ORG1"}
        assert _stored(config_file, "console.project") is None
        assert _stored(config_file, "console.workspace") is None

    def test_select_unknown_code(self, directory: MagicMock) -> None:
        with pytest.raises(SelectionNotFoundError):
            main(["org", "select", "CODE2"])

    def test_select_with_malformed_body_is_fetch_error(
        self,
        directory: MagicMock,
        config_file: Path,
    ) -> None:
        directory.list_organizations.return_value = Ok({"error": "unexpected"})
        with pytest.raises(RemoteFetchError, match="Error retrieving Orgs"):
            main(["org", "select", "CODE1"])
        assert _stored(config_file, "console.org") is None

    def test_select_interactive(self, directory: MagicMock, config_file: Path) -> None:
        chosen = Organization(id="1", code="CODE1", name="ORG1")
        with patch("consolectl.cli.prompt.prompt_selection", return_value=chosen) as prompt:
            assert main(["org", "select"]) == exit_codes.SUCCESS
        assert prompt.call_args.args[0] == "Organization"
        assert _stored(config_file, "console.org.code") == "CODE1"


# ---------------------------------------------------------------------------
# project
# ---------------------------------------------------------------------------

class TestProject:
    def test_list_requires_org(self, directory: MagicMock) -> None:
        with pytest.raises(IncompleteSelectionError, match="No Organization selected"):
            main(["project", "list"])
        directory.list_projects.assert_not_called()

    def test_list(
        self,
        directory: MagicMock,
        store: JsonConfigStore,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        _preselect(store, project=False)
        main(["project", "ls"])
        directory.list_projects.assert_called_once_with("1")
        out = capsys.readouterr().out
        assert "myproject" in out and "other" in out

    def test_select_by_name_clears_workspace(
        self,
        directory: MagicMock,
        store: JsonConfigStore,
        config_file: Path,
    ) -> None:
        _preselect(store, workspace=True)
        assert main(["project", "select", "other"]) == exit_codes.SUCCESS
        assert _stored(config_file, "console.project.id") == "p2"
        assert _stored(config_file, "console.workspace") is None
        assert _stored(config_file, "console.org.id") == "1"

    def test_select_project_of_another_org(
        self,
        directory: MagicMock,
        store: JsonConfigStore,
    ) -> None:
        _preselect(store, project=False)
        with pytest.raises(SelectionNotFoundError, match="Project p9 not found"):
            main(["project", "select", "p9"])


# ---------------------------------------------------------------------------
# workspace
# ---------------------------------------------------------------------------

class TestWorkspace:
    def test_list_plain(
        self,
        directory: MagicMock,
        store: JsonConfigStore,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        _preselect(store)
        assert main(["workspace", "list"]) == exit_codes.SUCCESS
        lines = capsys.readouterr().out.splitlines()
        assert [line for line in lines if "WRKSPC1" in line] != []
        assert [line for line in lines if "WRKSPC2" in line] != []
        assert not any("WRKSPC1" in line and "WRKSPC2" in line for line in lines)

    def test_list_json(
        self,
        directory: MagicMock,
        store: JsonConfigStore,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        _preselect(store)
        main(["ws", "ls", "--json"])
        parsed = json.loads(capsys.readouterr().out)
        assert len(parsed) == 2
        assert [entry["id"] for entry in parsed] == ["1", "2"]

    def test_list_yaml(
        self,
        directory: MagicMock,
        store: JsonConfigStore,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        _preselect(store)
        main(["workspace", "list", "--yml"])
        out = capsys.readouterr().out
        assert "name: WRKSPC1" in out
        assert "name: WRKSPC2" in out

    def test_list_requires_project(self, directory: MagicMock, store: JsonConfigStore) -> None:
        _preselect(store, project=False)
        with pytest.raises(IncompleteSelectionError) as exc_info:
            main(["workspace", "list"])
        assert str(exc_info.value) == "No Project selected"

    def test_list_failure(self, directory: MagicMock, store: JsonConfigStore) -> None:
        _preselect(store)
        directory.list_workspaces.return_value = Err("boom")
        with pytest.raises(RemoteFetchError, match="Error retrieving Workspaces"):
            main(["workspace", "list"])

    def test_select(self, directory: MagicMock, store: JsonConfigStore, config_file: Path) -> None:
        _preselect(store)
        assert main(["ws", "sel", "WRKSPC2"]) == exit_codes.SUCCESS
        assert _stored(config_file, "console.workspace") == {
            "id": "2",
            "name": "WRKSPC2",
            "enabled": True,
            "title": None,
            "description": None,
        }


# ---------------------------------------------------------------------------
# download
# ---------------------------------------------------------------------------

class TestDownloadCommand:
    def test_nothing_selected(self, directory: MagicMock) -> None:
        with pytest.raises(IncompleteSelectionError) as exc_info:
            main(["workspace", "download"])
        assert str(exc_info.value) == (
            "No Organization selected,No Project selected,No Workspace selected"
        )
        directory.download_workspace_bundle.assert_not_called()

    def test_only_org_missing(self, directory: MagicMock, store: JsonConfigStore) -> None:
        store.set("console.project", {"id": "p1", "name": "myproject"})
        store.set("console.workspace", {"id": "1", "name": "WRKSPC1"})
        with pytest.raises(IncompleteSelectionError) as exc_info:
            main(["workspace", "download"])
        assert str(exc_info.value) == "No Organization selected"

    def test_downloads_into_destination(
        self,
        directory: MagicMock,
        store: JsonConfigStore,
        tmp_path: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        _preselect(store, workspace=True)
        assert main(["ws", "dl", str(tmp_path)]) == exit_codes.SUCCESS

        expected = tmp_path / "1-myproject-WRKSPC1.json"
        assert json.loads(expected.read_text(encoding="utf-8")) == {"project": {"id": "p1"}}
        assert f"Downloaded Workspace configuration to {expected}" in capsys.readouterr().out
        directory.download_workspace_bundle.assert_called_once_with("1", "p1", "1")

    def test_failure_writes_nothing(
        self,
        directory: MagicMock,
        store: JsonConfigStore,
        tmp_path: Path,
    ) -> None:
        _preselect(store, workspace=True)
        directory.download_workspace_bundle.return_value = Err("500")
        dest = tmp_path / "out"
        dest.mkdir()
        with pytest.raises(RemoteFetchError, match="Error retrieving Workspace"):
            main(["workspace", "download", str(dest)])
        assert list(dest.iterdir()) == []


# ---------------------------------------------------------------------------
# clear
# ---------------------------------------------------------------------------

class TestClear:
    def test_clear_everything(self, store: JsonConfigStore, config_file: Path) -> None:
        _preselect(store, workspace=True)
        assert main(["clear"]) == exit_codes.SUCCESS
        assert _stored(config_file, "console") is None

    def test_clear_keeps_token_and_env(self, store: JsonConfigStore, config_file: Path) -> None:
        store.set("auth.token", "tok")
        store.set("cli.env", "stage")
        _preselect(store, workspace=True)

        assert main(["clear"]) == exit_codes.SUCCESS
        assert _stored(config_file, "console") is None
        assert _stored(config_file, "auth.token") == "tok"
        assert _stored(config_file, "cli.env") == "stage"

    def test_clear_project_cascades(self, store: JsonConfigStore, config_file: Path) -> None:
        _preselect(store, workspace=True)
        main(["clear", "--project"])
        assert _stored(config_file, "console.org.id") == "1"
        assert _stored(config_file, "console.project") is None
        assert _stored(config_file, "console.workspace") is None

    def test_levels_are_exclusive(self) -> None:
        with pytest.raises(SystemExit):
            main(["clear", "--org", "--workspace"])


# ---------------------------------------------------------------------------
# Error boundary
# ---------------------------------------------------------------------------

class TestErrorBoundary:
    def test_known_error_exits_one(
        self,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        monkeypatch.setattr("sys.argv", ["consolectl", "workspace", "download"])
        with pytest.raises(SystemExit) as exc_info:
            cli()
        assert exc_info.value.code == exit_codes.GENERAL_ERROR
        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err.strip() == (
            "Error: No Organization selected,No Project selected,No Workspace selected"
        )

    def test_missing_token(
        self,
        store: JsonConfigStore,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        monkeypatch.setattr("sys.argv", ["consolectl", "org", "list"])
        with pytest.raises(SystemExit) as exc_info:
            cli()
        assert exc_info.value.code == exit_codes.GENERAL_ERROR
        err = capsys.readouterr().err.strip()
        assert "\n" not in err
        assert err.startswith("Error: No access token available.")
        assert "Hint: Set CONSOLECTL_ACCESS_TOKEN" in err

    def test_success_exits_zero(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("sys.argv", ["consolectl", "where"])
        with pytest.raises(SystemExit) as exc_info:
            cli()
        assert exc_info.value.code == exit_codes.SUCCESS

    def test_unexpected_error(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("sys.argv", ["consolectl", "where"])
        monkeypatch.setattr(commands, "open_store", MagicMock(side_effect=RuntimeError("x")))
        with pytest.raises(SystemExit) as exc_info:
            cli()
        assert exc_info.value.code == exit_codes.UNEXPECTED_ERROR


# ---------------------------------------------------------------------------
# Entry points
# ---------------------------------------------------------------------------

class TestEntryPoints:
    def test_version_names_the_program(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])
        assert exc_info.value.code == exit_codes.SUCCESS
        assert capsys.readouterr().out.strip() == f"consolectl {__version__}"

    def test_unknown_command_is_usage_error(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["frobnicate"])
        assert exc_info.value.code == exit_codes.USAGE_ERROR

    def test_module_entry_uses_error_boundary(self) -> None:
        from consolectl import __main__ as module_entry

        assert module_entry.cli is cli

    def test_routes_to_the_command_handler(
        self,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.setattr(commands, "handle_clear", lambda args, settings: 7)
        assert main(["clear", "--workspace"]) == 7
