"""Workspace domain: worktree records and branch sanitising."""

from sprout.domain.workspace.models import (
    MAX_BRANCH_LENGTH,
    Workspace,
    WorkspaceStatus,
    sanitize_branch_name,
)

__all__ = [
    "MAX_BRANCH_LENGTH",
    "Workspace",
    "WorkspaceStatus",
    "sanitize_branch_name",
]
