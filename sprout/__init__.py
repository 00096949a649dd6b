"""sprout - git worktrees from your tickets."""

__version__ = "0.3.0"
