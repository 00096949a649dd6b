"""Interactive mode: pick a branch or ticket, then start working in it."""

import logging

import typer

from sprout.application.session import SessionMachine
from sprout.interfaces.cli import common
from sprout.tui import SproutApp

logger = logging.getLogger(__name__)


def interactive() -> None:
    """Run the full-screen picker and then the default command.

    Exits with the default command's exit code after a worktree was created,
    0 after creating only a branch, and 1 when the session was cancelled or
    the creation failed.
    """
    config = common.load_config_or_exit(interactive=True)
    workspaces = common.get_workspace_provider(config)
    tickets = common.get_ticket_provider(config)

    app = SproutApp(SessionMachine(workspaces, tickets))
    state = app.run()
    close = getattr(tickets, "close", None)
    if close is not None:
        close()

    if state is None or state.cancelled or state.outcome is None:
        raise typer.Exit(1)
    outcome = state.outcome
    if not outcome.success:
        raise typer.Exit(1)
    if outcome.path is None:
        return

    args = config.command_args
    if not args:
        typer.echo(str(outcome.path))
        return
    logger.info(f"Starting default command in {outcome.path}")
    raise typer.Exit(common.run_in_workspace(outcome.path, args))
