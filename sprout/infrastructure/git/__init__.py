"""Git infrastructure for sprout.

Provides the worktree provider and the git command runner it is built on.
"""

from sprout.infrastructure.git.operations import GitOperations, Repository, repo_name_from_url
from sprout.infrastructure.git.status import BranchStatusChecker, parse_pr_state
from sprout.infrastructure.git.workspaces import GitWorkspaceProvider, parse_worktree_list

__all__ = [
    "BranchStatusChecker",
    "GitOperations",
    "GitWorkspaceProvider",
    "Repository",
    "parse_pr_state",
    "parse_worktree_list",
    "repo_name_from_url",
]
