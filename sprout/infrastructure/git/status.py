"""Branch status for listed worktrees.

A cheap git check runs first: a branch that was pushed, no longer exists on
``origin`` and is an ancestor of the main branch has been merged. When that is
inconclusive the GitHub CLI is asked for the branch's pull request.
"""

import json
import logging
import subprocess

from sprout.domain.shared import Ok
from sprout.domain.workspace import WorkspaceStatus
from sprout.domain.workspace.models import MAIN_BRANCHES

from .operations import GitOperations, Repository

logger = logging.getLogger(__name__)

_PR_STATES = {
    "OPEN": WorkspaceStatus.ACTIVE,
    "MERGED": WorkspaceStatus.MERGED,
    "CLOSED": WorkspaceStatus.CLOSED,
}


def parse_pr_state(output: str) -> WorkspaceStatus:
    """Map ``gh pr list --json state`` output to a workspace status.

    No pull request means the branch is still being worked on.
    """
    try:
        prs = json.loads(output or "[]")
    except json.JSONDecodeError:
        logger.debug(f"Unparseable gh output: {output!r}")
        return WorkspaceStatus.UNKNOWN
    if not prs:
        return WorkspaceStatus.ACTIVE
    return _PR_STATES.get(str(prs[0].get("state", "")).upper(), WorkspaceStatus.UNKNOWN)


class BranchStatusChecker:
    """Determines whether a worktree's branch is active, merged or closed."""

    def __init__(self, repo: Repository, git: GitOperations, gh: str = "gh", timeout: int = 15) -> None:
        self._repo = repo
        self._git = git
        self._gh = gh
        self._timeout = timeout

    def status(self, branch: str) -> WorkspaceStatus:
        if not branch or branch in MAIN_BRANCHES:
            return WorkspaceStatus.ACTIVE
        status = self._status_from_git(branch)
        if status is not WorkspaceStatus.UNKNOWN:
            return status
        return self._status_from_github(branch)

    def _status_from_git(self, branch: str) -> WorkspaceStatus:
        path = self._repo.path
        if self._git.succeeds(["rev-parse", "--verify", f"origin/{branch}"], path):
            return WorkspaceStatus.UNKNOWN
        pushed = self._git.run(
            ["reflog", f"--grep-reflog=origin/{branch}", "--all", "--oneline"], path
        )
        was_pushed = isinstance(pushed, Ok) and bool(pushed.value.strip())
        if was_pushed and self._git.succeeds(
            ["merge-base", "--is-ancestor", branch, self._repo.main_branch], path
        ):
            return WorkspaceStatus.MERGED
        return WorkspaceStatus.UNKNOWN

    def _status_from_github(self, branch: str) -> WorkspaceStatus:
        if not self._repo.is_github:
            return WorkspaceStatus.UNKNOWN
        try:
            completed = subprocess.run(
                [self._gh, "pr", "list", "--head", branch, "--state", "all",
                 "--json", "state", "--limit", "1"],
                cwd=str(self._repo.path),
                capture_output=True,
                text=True,
                timeout=self._timeout,
            )
        except (subprocess.TimeoutExpired, OSError) as e:
            logger.debug(f"gh pr list failed for {branch}: {e}")
            return WorkspaceStatus.UNKNOWN
        if completed.returncode != 0:
            logger.debug(f"gh pr list failed for {branch}: {completed.stderr.strip()}")
            return WorkspaceStatus.UNKNOWN
        return parse_pr_state(completed.stdout)
