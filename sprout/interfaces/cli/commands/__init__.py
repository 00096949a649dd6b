"""CLI commands for sprout.

Each module provides plain command functions that the main Typer app
registers:

- interactive: the full-screen picker (no subcommand)
- worktree: create, list, prune
- doctor: configuration diagnostics
"""

from sprout.interfaces.cli.commands import doctor, interactive, worktree

__all__ = ["doctor", "interactive", "worktree"]
