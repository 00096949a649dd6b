"""Configuration diagnostics."""

import typer

from sprout.config import get_config_path
from sprout.domain.shared import Err
from sprout.interfaces.cli import common


def doctor() -> None:
    """Show the configuration and check the ticket tracker connection."""
    config = common.load_config_or_exit()
    path = get_config_path()

    common.print_header("sprout configuration")
    typer.echo(f"Config file:      {path} ({'found' if path.exists() else 'not found, using defaults'})")
    typer.echo(f"Default command:  {config.default_command or '(not set)'}")
    typer.echo(f"Linear API key:   {config.masked_api_key or '(not set)'}")
    typer.echo(f"Log level:        {config.log_level}")
    typer.echo(f"Log output:       {config.log_output}")
    typer.echo(f"Worktree base:    {config.worktree_base_path or '(next to the repository)'}")
    for repo, base in sorted(config.worktree_base_paths.items()):
        typer.echo(f"  {repo}: {base}")

    typer.echo("")
    typer.echo("Sparse checkout:")
    if not config.sparse_checkout:
        typer.echo("  (none)")
    for repo, directories in sorted(config.sparse_checkout.items()):
        typer.echo(f"  {repo}: {', '.join(directories)}")

    typer.echo("")
    tickets = common.get_ticket_provider(config)
    if tickets is None:
        typer.echo("Linear: not configured (set linearApiKey to enable ticket selection)")
        return

    user = tickets.get_current_user()
    if isinstance(user, Err):
        common.print_error(f"Linear connection failed: {user.error}")
        raise typer.Exit(user.error.exit_code)
    name = user.value.display_name or user.value.name
    common.print_success(f"Linear: connected as {name} ({user.value.email})")

    assigned = tickets.get_assigned_tickets()
    if isinstance(assigned, Err):
        common.print_warning(f"could not fetch assigned tickets: {assigned.error}")
        return
    typer.echo(f"Assigned open tickets: {len(assigned.value)}")
