"""Git command runner and repository discovery.

Wraps ``git`` invocations with timeouts and Result-based error handling so the
worktree provider and the status checker never see a raw subprocess failure.
"""

import logging
import os
import re
import subprocess
from dataclasses import dataclass
from pathlib import Path

from sprout.domain.shared import Err, Ok, Result, SproutError

logger = logging.getLogger(__name__)


_VARIABLE = re.compile(r"\$\{(\w+)\}|\$(\w+)")
BRANCH_VARIABLES = ("$BRANCH_NAME", "${BRANCH_NAME}")


def expand_worktree_base(template: str, repo_name: str, repo_root: Path, branch: str) -> str:
    """Expand ``$REPO_BASEPATH``, ``$REPO_NAME`` and ``$BRANCH_NAME`` in ``template``.

    Any other ``$VAR`` or ``${VAR}`` comes from the environment and expands to
    an empty string when unset.
    """
    values = {
        "REPO_BASEPATH": str(repo_root.parent),
        "REPO_NAME": repo_name,
        "BRANCH_NAME": branch,
    }

    def replace(match: re.Match[str]) -> str:
        key = match.group(1) or match.group(2)
        return values.get(key, os.environ.get(key, ""))

    return _VARIABLE.sub(replace, template)


@dataclass(frozen=True)
class Repository:
    """The repository sprout was started in.

    Attributes:
        path: Top-level directory of the main checkout.
        name: Display name, from the origin URL or the directory name.
        main_branch: Branch new worktrees start from.
        remote_url: URL of ``origin``, empty when there is none.
        worktree_base: Optional base directory template from the config. When
            it mentions ``$BRANCH_NAME`` it names the worktree itself;
            otherwise the branch is appended.
    """

    path: Path
    name: str
    main_branch: str = "main"
    remote_url: str = ""
    worktree_base: str = ""

    @property
    def worktrees_dir(self) -> Path:
        """Worktrees live next to the repository, not inside it."""
        return self.path.parent / ".worktrees"

    def worktree_path(self, branch: str) -> Path:
        template = self.worktree_base.strip()
        if not template:
            return self.worktrees_dir / branch
        expanded = Path(
            os.path.normpath(expand_worktree_base(template, self.name, self.path, branch))
        ).expanduser()
        if any(variable in template for variable in BRANCH_VARIABLES):
            return expanded
        return expanded / branch

    @property
    def is_github(self) -> bool:
        return "github.com" in self.remote_url


def repo_name_from_url(url: str) -> str:
    """Repository name from an https or scp-style git URL.

    >>> repo_name_from_url("git@github.com:acme/sprout.git")
    'sprout'
    """
    url = url.strip().rstrip("/")
    if not url:
        return ""
    tail = url.rsplit("/", 1)[-1]
    if ":" in tail:
        tail = tail.rsplit(":", 1)[-1]
    return tail.removesuffix(".git")


class GitOperations:
    """Runs git commands with a timeout.

    Example:
        git = GitOperations()
        result = git.discover(Path.cwd())
        if isinstance(result, Ok):
            print(result.value.main_branch)
    """

    def __init__(self, timeout: int = 60, executable: str = "git") -> None:
        """Initialize git operations.

        Args:
            timeout: Timeout in seconds for each git command.
            executable: Git binary to invoke.
        """
        self._timeout = timeout
        self._executable = executable

    def run(self, args: list[str], cwd: Path) -> Result[str, SproutError]:
        """Run ``git <args>`` in ``cwd``.

        Returns:
            Ok(stdout) on exit status 0, otherwise Err with the combined
            output attached as the ``output`` detail.
        """
        command = [self._executable, *args]
        logger.debug(f"Running {' '.join(command)} in {cwd}")
        try:
            completed = subprocess.run(
                command,
                cwd=str(cwd),
                capture_output=True,
                text=True,
                timeout=self._timeout,
            )
        except subprocess.TimeoutExpired as e:
            return Err(SproutError.external("git", f"{args[0]} timed out", cause=e))
        except OSError as e:
            return Err(SproutError.external("git", f"could not run {self._executable}", cause=e))

        if completed.returncode != 0:
            output = (completed.stdout + completed.stderr).strip()
            error = SproutError.external("git", f"{' '.join(args[:2])} failed")
            return Err(error.with_detail("output", output).with_detail("args", args))
        return Ok(completed.stdout)

    def succeeds(self, args: list[str], cwd: Path) -> bool:
        """True when ``git <args>`` exits with status 0."""
        return isinstance(self.run(args, cwd), Ok)

    def discover(self, cwd: Path) -> Result[Repository, SproutError]:
        """Describe the repository containing ``cwd``."""
        root = self.run(["rev-parse", "--show-toplevel"], cwd)
        if isinstance(root, Err):
            return Err(SproutError.not_found("git repository", str(cwd)))
        path = Path(root.value.strip())

        remote = self.run(["remote", "get-url", "origin"], path)
        remote_url = remote.value.strip() if isinstance(remote, Ok) else ""
        name = repo_name_from_url(remote_url) or path.name

        return Ok(
            Repository(
                path=path,
                name=name,
                main_branch=self.main_branch(path),
                remote_url=remote_url,
            )
        )

    def main_branch(self, path: Path) -> str:
        """Branch that ``origin/HEAD`` points at, else ``main`` or ``master``."""
        head = self.run(["symbolic-ref", "refs/remotes/origin/HEAD"], path)
        if isinstance(head, Ok) and head.value.strip():
            return head.value.strip().rsplit("/", 1)[-1]
        for ref, branch in (
            ("refs/heads/main", "main"),
            ("refs/heads/master", "master"),
            ("refs/remotes/origin/main", "origin/main"),
            ("refs/remotes/origin/master", "origin/master"),
        ):
            if self.succeeds(["show-ref", "--verify", "--quiet", ref], path):
                return branch
        logger.warning(f"No main branch found in {path}, assuming 'main'")
        return "main"

    def is_worktree(self, path: Path) -> bool:
        """True when ``path`` is a checked out git working tree."""
        if not (path / ".git").exists():
            return False
        result = self.run(["rev-parse", "--is-inside-work-tree"], path)
        return isinstance(result, Ok) and result.value.strip() == "true"
