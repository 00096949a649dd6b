"""Worktree CLI commands: create, list and prune."""

from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from sprout.domain.shared import Err
from sprout.domain.workspace import WorkspaceStatus
from sprout.interfaces.cli import common

STATUS_STYLES = {
    WorkspaceStatus.ACTIVE: "yellow",
    WorkspaceStatus.MERGED: "green",
    WorkspaceStatus.CLOSED: "red",
    WorkspaceStatus.UNKNOWN: "dim",
}


def create(
    branch: str = typer.Argument(..., help="Branch name for the new worktree"),
    command: Optional[list[str]] = typer.Argument(
        None, help="Command to run inside the worktree (defaults to defaultCommand)"
    ),
) -> None:
    """Create a worktree (or reuse an existing one) and run a command in it.

    With no command and no defaultCommand configured, the worktree path is
    printed on stdout so that `cd "$(sprout create my-branch)"` works.
    """
    config = common.load_config_or_exit()
    provider = common.get_workspace_provider(config)

    result = provider.create_workspace(branch)
    if isinstance(result, Err):
        raise common.fail(result.error)
    path = result.value
    typer.echo(f"Worktree ready at: {path}", err=True)

    args = list(command or []) or config.command_args
    if not args:
        typer.echo(str(path))
        return
    raise typer.Exit(common.run_in_workspace(path, args))


def list_worktrees(
    include_main: bool = typer.Option(
        False, "--include-main", "-a", help="Also show the main checkout"
    ),
) -> None:
    """List worktrees with their branch status."""
    config = common.load_config_or_exit()
    provider = common.get_workspace_provider(config)

    result = provider.list_workspaces(include_main=include_main)
    if isinstance(result, Err):
        raise common.fail(result.error)
    if not result.value:
        typer.echo("No worktrees found")
        return

    table = Table(box=None, header_style="bold", pad_edge=False)
    table.add_column("BRANCH")
    table.add_column("STATUS")
    table.add_column("COMMIT", style="dim")
    for workspace in result.value:
        table.add_row(
            workspace.branch or "(detached)",
            f"[{STATUS_STYLES[workspace.status]}]{workspace.status.value}[/]",
            workspace.short_commit,
        )
    Console().print(table)


def prune(
    branch: Optional[str] = typer.Argument(
        None, help="Worktree branch to remove; omit to remove every merged worktree"
    ),
) -> None:
    """Remove a worktree and its branch, or all merged worktrees."""
    config = common.load_config_or_exit()
    provider = common.get_workspace_provider(config)

    if branch:
        result = provider.prune_workspace(branch)
        if isinstance(result, Err):
            raise common.fail(result.error)
        common.print_success(f"Removed worktree {branch}")
        return

    pruned = provider.prune_all_merged()
    if isinstance(pruned, Err):
        raise common.fail(pruned.error)
    if not pruned.value:
        typer.echo("No merged worktrees to remove")
        return
    for name in pruned.value:
        common.print_success(f"Removed worktree {name}")
