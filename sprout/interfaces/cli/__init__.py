"""CLI interface for sprout using Typer.

Usage:
    sprout                          # Pick a branch or ticket interactively
    sprout create <branch> [cmd]    # Create a worktree and run cmd in it
    sprout list                     # Show worktrees and their PR status
    sprout prune [branch]           # Remove one or all merged worktrees
    sprout doctor                   # Check configuration

The CLI is structured as:
- app: Main Typer application
- commands/: Command implementations
- common.py: Shared utilities for CLI commands
- main.py: Entry point that runs the app
"""

from typing import Optional

import typer

from sprout import __version__
from sprout.interfaces.cli.commands import doctor, interactive, worktree

app = typer.Typer(
    name="sprout",
    help="Git worktrees from your tickets",
    add_completion=False,
    invoke_without_command=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"sprout version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """sprout - create git worktrees for branches and Linear tickets.

    Run without a command to choose a branch name or an assigned ticket
    interactively.
    """
    if ctx.invoked_subcommand is None:
        interactive.interactive()


# =============================================================================
# Commands
# =============================================================================

app.command(
    "create",
    context_settings={"allow_extra_args": True, "ignore_unknown_options": True},
)(worktree.create)
app.command("list")(worktree.list_worktrees)
app.command("prune")(worktree.prune)
app.command("doctor")(doctor.doctor)


@app.command("help")
def help_command(ctx: typer.Context) -> None:
    """Show this help message."""
    parent = ctx.parent
    typer.echo((parent or ctx).get_help())


__all__ = ["app"]
