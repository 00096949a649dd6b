"""Workspace (git worktree) domain models."""

import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

MAX_BRANCH_LENGTH = 100
MAIN_BRANCHES = frozenset({"main", "master"})


class WorkspaceStatus(str, Enum):
    """Lifecycle of the branch behind a workspace."""

    ACTIVE = "active"
    MERGED = "merged"
    CLOSED = "closed"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class Workspace:
    """A checked-out worktree.

    Attributes:
        path: Directory of the worktree.
        branch: Short branch name, empty for a detached HEAD.
        commit: Full commit hash of HEAD.
        status: Branch status as reported by git or the PR host.
    """

    path: Path
    branch: str
    commit: str = ""
    status: WorkspaceStatus = WorkspaceStatus.UNKNOWN

    @property
    def is_main_branch(self) -> bool:
        return not self.branch or self.branch in MAIN_BRANCHES

    @property
    def short_commit(self) -> str:
        return self.commit[:8]


_SEPARATORS = re.compile(r"[\s_]+")
_DISALLOWED = re.compile(r"[^a-z0-9\-./]")
_REPEATED_HYPHENS = re.compile(r"-{2,}")


def sanitize_branch_name(name: str) -> str:
    """Make free text safe to use as a git branch and directory name.

    Unlike ticket slugs, ``/`` and ``.`` survive so that names such as
    ``feature/login`` keep their namespace.

    Returns:
        The sanitized name; empty when nothing usable remains.
    """
    branch = _SEPARATORS.sub("-", name.strip().lower())
    branch = _DISALLOWED.sub("", branch)
    branch = _REPEATED_HYPHENS.sub("-", branch)
    branch = branch.strip("-.").lstrip("/")
    if len(branch) > MAX_BRANCH_LENGTH:
        branch = branch[:MAX_BRANCH_LENGTH].rstrip("-.")
    return branch
