"""Shared utilities for sprout CLI commands.

- Formatted output helpers (error, success, info, warning)
- Config loading and provider construction, exiting with the right code
- Running a command inside a worktree
"""

import logging
import subprocess
from pathlib import Path

import typer

from sprout.application.ports import TicketProvider
from sprout.config import SproutConfig, load_config
from sprout.domain.shared import Err, SproutError
from sprout.infrastructure.git import GitWorkspaceProvider
from sprout.infrastructure.linear import LinearClient
from sprout.log_setup import configure_logging

logger = logging.getLogger(__name__)

COMMAND_NOT_FOUND = 127


def print_error(msg: str) -> None:
    """Print a formatted error message to stderr."""
    typer.echo(typer.style(f"Error: {msg}", fg=typer.colors.RED), err=True)


def print_success(msg: str) -> None:
    typer.echo(typer.style(msg, fg=typer.colors.GREEN))


def print_info(msg: str) -> None:
    typer.echo(typer.style(msg, fg=typer.colors.BLUE))


def print_warning(msg: str) -> None:
    typer.echo(typer.style(f"Warning: {msg}", fg=typer.colors.YELLOW), err=True)


def print_header(title: str, width: int = 40) -> None:
    """Print a title underlined with '='."""
    typer.echo(title)
    typer.echo("=" * min(width, max(len(title), 1)))


def fail(error: SproutError) -> typer.Exit:
    """Report ``error`` and build the matching ``typer.Exit``.

    Usage:
        raise fail(result.error)
    """
    print_error(str(error))
    logger.debug(f"{error!r} details={error.details}")
    return typer.Exit(error.exit_code)


def load_config_or_exit(interactive: bool = False) -> SproutConfig:
    """Load the config and configure logging from it.

    Raises:
        typer.Exit: With the validation or configuration exit code.
    """
    result = load_config()
    if isinstance(result, Err):
        raise fail(result.error)
    config = result.value
    configure_logging(config.log_level, config.log_output, interactive=interactive)
    return config


def get_workspace_provider(config: SproutConfig, cwd: Path | None = None) -> GitWorkspaceProvider:
    """Worktree provider for the repository around ``cwd``.

    Raises:
        typer.Exit: When not inside a git repository.
    """
    result = GitWorkspaceProvider.discover(
        cwd or Path.cwd(),
        config.sparse_checkout,
        worktree_base=config.worktree_base_path,
        worktree_bases=config.worktree_base_paths,
    )
    if isinstance(result, Err):
        raise fail(result.error)
    return result.value


def get_ticket_provider(config: SproutConfig) -> TicketProvider | None:
    """Linear client when an API key is configured, else None."""
    if not config.has_linear:
        return None
    return LinearClient(config.linear_api_key)


def run_in_workspace(path: Path, args: list[str]) -> int:
    """Run ``args`` inside ``path`` with the terminal attached.

    Returns:
        The command's exit code, or 127 when it could not be started.
    """
    logger.info(f"Running {' '.join(args)} in {path}")
    try:
        return subprocess.run(args, cwd=str(path)).returncode
    except FileNotFoundError:
        print_error(f"command not found: {args[0]}")
        return COMMAND_NOT_FOUND
    except OSError as e:
        print_error(f"could not run {args[0]}: {e}")
        return 1


__all__ = [
    "COMMAND_NOT_FOUND",
    "fail",
    "get_ticket_provider",
    "get_workspace_provider",
    "load_config_or_exit",
    "print_error",
    "print_header",
    "print_info",
    "print_success",
    "print_warning",
    "run_in_workspace",
]
