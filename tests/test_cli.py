"""Tests for the Typer CLI with in-memory providers."""

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from sprout import __version__
from sprout.application.session import Outcome, SessionState
from sprout.domain.workspace import Workspace, WorkspaceStatus
from sprout.infrastructure.memory import InMemoryTicketProvider, InMemoryWorkspaceProvider
from sprout.interfaces.cli import app, common
from sprout.interfaces.cli.commands import interactive

from .conftest import scenario_tickets

runner = CliRunner()


@pytest.fixture
def home(tmp_path: Path, monkeypatch) -> Path:
    monkeypatch.setenv("SPROUT_HOME", str(tmp_path / "home"))
    return tmp_path / "home"


@pytest.fixture
def provider(home, monkeypatch) -> InMemoryWorkspaceProvider:
    workspaces = InMemoryWorkspaceProvider(root=Path("/work/.worktrees"))
    monkeypatch.setattr(common, "get_workspace_provider", lambda config, cwd=None: workspaces)
    return workspaces


@pytest.fixture
def ran(monkeypatch) -> list:
    """Commands passed to ``run_in_workspace``; each exits with status 3."""
    calls = []

    def fake_run(path, args):
        calls.append((path, list(args)))
        return 3

    monkeypatch.setattr(common, "run_in_workspace", fake_run)
    return calls


def write_config(home: Path, data: dict) -> None:
    home.mkdir(parents=True, exist_ok=True)
    (home / "config.json").write_text(json.dumps(data), encoding="utf-8")


def test_version():
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert f"sprout version {__version__}" in result.output


def test_create_prints_path_without_command(provider, ran):
    result = runner.invoke(app, ["create", "Feature X"])
    assert result.exit_code == 0, result.output
    assert "/work/.worktrees/feature-x" in result.output
    assert "feature-x" in provider.workspaces
    assert ran == []


def test_create_runs_command_and_forwards_exit_code(provider, ran):
    result = runner.invoke(app, ["create", "feat", "make", "-j4", "test"])
    assert result.exit_code == 3
    assert ran == [(Path("/work/.worktrees/feat"), ["make", "-j4", "test"])]


def test_create_uses_default_command(home, provider, ran):
    write_config(home, {"defaultCommand": "code ."})
    result = runner.invoke(app, ["create", "feat"])
    assert result.exit_code == 3
    assert ran[0][1] == ["code", "."]


def test_create_failure_exit_code(provider):
    result = runner.invoke(app, ["create", "!!!"])
    assert result.exit_code == 2
    assert "branch name cannot be empty" in result.output


def test_invalid_config_exits_with_validation_code(home, provider):
    write_config(home, {"colour": "blue"})
    result = runner.invoke(app, ["list"])
    assert result.exit_code == 2
    assert "Error:" in result.output


def test_list_empty(provider):
    result = runner.invoke(app, ["list"])
    assert result.exit_code == 0
    assert "No worktrees found" in result.output


def test_list_shows_worktrees(provider):
    provider.create_workspace("feature-x")
    result = runner.invoke(app, ["list"])
    assert result.exit_code == 0
    assert "BRANCH" in result.output
    assert "feature-x" in result.output
    assert "active" in result.output


def test_prune_named_worktree(provider):
    provider.create_workspace("old")
    result = runner.invoke(app, ["prune", "old"])
    assert result.exit_code == 0
    assert "Removed worktree old" in result.output
    assert provider.workspaces == {}


def test_prune_missing_worktree(provider):
    result = runner.invoke(app, ["prune", "nope"])
    assert result.exit_code == 3
    assert "worktree not found: nope" in result.output


def test_prune_merged(provider):
    provider.create_workspace("kept")
    provider.workspaces["done"] = Workspace(
        path=Path("/work/.worktrees/done"), branch="done", status=WorkspaceStatus.MERGED
    )
    result = runner.invoke(app, ["prune"])
    assert result.exit_code == 0
    assert "Removed worktree done" in result.output
    assert list(provider.workspaces) == ["kept"]

    result = runner.invoke(app, ["prune"])
    assert "No merged worktrees to remove" in result.output


def test_doctor_without_linear(home):
    result = runner.invoke(app, ["doctor"])
    assert result.exit_code == 0
    assert "not found, using defaults" in result.output
    assert "Linear: not configured" in result.output


def test_doctor_with_linear(home, monkeypatch):
    write_config(home, {"linearApiKey": "lin_api_1234567890abcdef"})
    tickets = InMemoryTicketProvider(scenario_tickets())
    monkeypatch.setattr(common, "get_ticket_provider", lambda config: tickets)
    result = runner.invoke(app, ["doctor"])
    assert result.exit_code == 0, result.output
    assert "lin_api_...cdef" in result.output
    assert "Linear: connected as Test User (test@example.com)" in result.output
    assert "Assigned open tickets: 3" in result.output


# ---------------------------------------------------------------------------
# Interactive mode, with the app replaced by a canned final state
# ---------------------------------------------------------------------------


def fake_app(state: SessionState | None):
    class FakeApp:
        def __init__(self, machine):
            self.machine = machine

        def run(self):
            return state

    return FakeApp


@pytest.fixture
def interactive_env(home, provider, ran, monkeypatch):
    monkeypatch.setattr(common, "get_ticket_provider", lambda config: None)

    def use(state):
        monkeypatch.setattr(interactive, "SproutApp", fake_app(state))

    return use


def test_interactive_cancelled(interactive_env):
    interactive_env(SessionState(exit_requested=True, cancelled=True))
    assert runner.invoke(app, []).exit_code == 1


def test_interactive_failure(interactive_env):
    interactive_env(SessionState(outcome=Outcome(success=False, message="Error: boom")))
    assert runner.invoke(app, []).exit_code == 1


def test_interactive_branch_only(interactive_env, ran):
    interactive_env(SessionState(outcome=Outcome(True, "Branch created: x", branch="x")))
    assert runner.invoke(app, []).exit_code == 0
    assert ran == []


def test_interactive_worktree_prints_path(interactive_env, ran):
    path = Path("/work/.worktrees/x")
    interactive_env(SessionState(outcome=Outcome(True, "Worktree created", branch="x", path=path)))
    result = runner.invoke(app, [])
    assert result.exit_code == 0
    assert str(path) in result.output
    assert ran == []


def test_interactive_worktree_runs_default_command(home, interactive_env, ran):
    write_config(home, {"defaultCommand": "claude"})
    path = Path("/work/.worktrees/x")
    interactive_env(SessionState(outcome=Outcome(True, "Worktree created", branch="x", path=path)))
    result = runner.invoke(app, [])
    assert result.exit_code == 3
    assert ran == [(path, ["claude"])]


def test_doctor_shows_worktree_bases(home):
    write_config(
        home,
        {"worktreeBasePath": "~/trees/$REPO_NAME", "worktreeBasePaths": {"mono": "/w/$BRANCH_NAME"}},
    )
    result = runner.invoke(app, ["doctor"])
    assert result.exit_code == 0, result.output
    assert "Worktree base:    ~/trees/$REPO_NAME" in result.output
    assert "  mono: /w/$BRANCH_NAME" in result.output
