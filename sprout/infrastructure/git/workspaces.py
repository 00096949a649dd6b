"""Git worktree provider.

Worktrees are created under ``<repo parent>/.worktrees/<branch>``, or under
the configured base directory, branching from the repository's main branch.
When the configuration lists sparse checkout directories for the repository,
only those are checked out.
"""

import logging
import shutil
from dataclasses import replace
from pathlib import Path

from sprout.domain.shared import Err, Ok, Result, SproutError
from sprout.domain.workspace import Workspace, WorkspaceStatus, sanitize_branch_name

from .operations import GitOperations, Repository
from .status import BranchStatusChecker

logger = logging.getLogger(__name__)


def parse_worktree_list(output: str) -> list[Workspace]:
    """Parse ``git worktree list --porcelain``.

    Records are separated by blank lines; ``branch`` lines carry a full ref
    and are shortened to the branch name. Detached worktrees keep an empty
    branch.
    """
    workspaces: list[Workspace] = []
    fields: dict[str, str] = {}

    def flush() -> None:
        if fields.get("worktree"):
            workspaces.append(
                Workspace(
                    path=Path(fields["worktree"]),
                    branch=fields.get("branch", "").removeprefix("refs/heads/"),
                    commit=fields.get("HEAD", ""),
                )
            )
        fields.clear()

    for line in output.splitlines():
        if not line.strip():
            flush()
            continue
        key, _, value = line.partition(" ")
        if value:
            fields[key] = value
    flush()
    return workspaces


class GitWorkspaceProvider:
    """Creates, lists and removes worktrees of one repository.

    Example:
        provider = GitWorkspaceProvider.discover(Path.cwd())
        if isinstance(provider, Ok):
            result = provider.value.create_workspace("spr-123-login")
    """

    def __init__(
        self,
        repo: Repository,
        git: GitOperations | None = None,
        sparse_directories: list[str] | None = None,
        status: BranchStatusChecker | None = None,
    ) -> None:
        self.repo = repo
        self._git = git or GitOperations()
        self._sparse = list(sparse_directories or [])
        self._status = status or BranchStatusChecker(repo, self._git)

    @classmethod
    def discover(
        cls,
        cwd: Path,
        sparse_checkout: dict[str, list[str]] | None = None,
        git: GitOperations | None = None,
        worktree_base: str = "",
        worktree_bases: dict[str, str] | None = None,
    ) -> Result["GitWorkspaceProvider", SproutError]:
        """Build a provider for the repository containing ``cwd``.

        Args:
            cwd: Any directory inside the repository.
            sparse_checkout: Repository path to sparse directories mapping
                from the configuration.
            git: Command runner to use.
            worktree_base: Base directory template for every repository.
            worktree_bases: Older per-repository templates, keyed by
                repository name or path. Used when ``worktree_base`` is empty.
        """
        git = git or GitOperations()
        found = git.discover(cwd)
        if isinstance(found, Err):
            return found
        repo = found.value
        bases = worktree_bases or {}
        template = (
            worktree_base.strip()
            or bases.get(repo.name, "").strip()
            or bases.get(str(repo.path), "").strip()
        )
        if template:
            repo = replace(repo, worktree_base=template)
        directories = (sparse_checkout or {}).get(str(repo.path), [])
        return Ok(cls(repo, git, directories))

    def repository_name(self) -> str | None:
        return self.repo.name

    # =========================================================================
    # Creation
    # =========================================================================

    def create_workspace(self, branch: str) -> Result[Path, SproutError]:
        name = sanitize_branch_name(branch)
        if not name:
            return Err(
                SproutError.validation(
                    "branch name results in empty string after sanitization",
                    original_name=branch,
                )
            )
        path = self.repo.worktree_path(name)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            return Err(SproutError.internal("failed to create .worktrees directory", cause=e))

        if path.exists():
            if self._git.is_worktree(path):
                logger.info(f"Reusing existing worktree at {path}")
                return Ok(path)
            return Err(
                SproutError.conflict(
                    f"directory exists but is not a valid worktree: {path}", path=str(path)
                )
            )

        if self._sparse:
            return self._create_sparse(path, name)
        return self._add_worktree(path, name, checkout=True)

    def _add_worktree(self, path: Path, branch: str, checkout: bool) -> Result[Path, SproutError]:
        args = ["worktree", "add"]
        if not checkout:
            args.append("--no-checkout")
        if self._branch_exists(branch):
            # Check out the existing branch instead of creating it again.
            args += [str(path), branch]
        else:
            args += [str(path), "-b", branch, self.repo.main_branch]
        result = self._git.run(args, self.repo.path)
        if isinstance(result, Err):
            output = result.error.details.get("output", "")
            if "already" in output:
                return Err(
                    SproutError.conflict(
                        f"cannot create worktree for {branch}: {output.splitlines()[-1]}",
                        branch=branch,
                        path=str(path),
                    )
                )
            error = result.error
            error.message = "failed to create worktree"
            return Err(error.with_detail("path", str(path)).with_detail("branch", branch))
        if not path.is_dir():
            return Err(
                SproutError.internal(f"git reported success but {path} was not created")
            )
        logger.info(f"Created worktree {branch} at {path}")
        return Ok(path)

    def _branch_exists(self, branch: str) -> bool:
        return self._git.succeeds(
            ["show-ref", "--verify", "--quiet", f"refs/heads/{branch}"], self.repo.path
        )

    def _create_sparse(self, path: Path, branch: str) -> Result[Path, SproutError]:
        added = self._add_worktree(path, branch, checkout=False)
        if isinstance(added, Err):
            return added
        for args in (
            ["sparse-checkout", "init", "--cone"],
            ["sparse-checkout", "set", *self._sparse],
            ["checkout"],
        ):
            step = self._git.run(args, path)
            if isinstance(step, Err):
                logger.warning(
                    f"Sparse checkout failed ({step.error}), falling back to full checkout"
                )
                return self._checkout_all(path)
        logger.info(f"Created sparse worktree with {', '.join(self._sparse)}")
        return Ok(path)

    def _checkout_all(self, path: Path) -> Result[Path, SproutError]:
        self._git.run(["sparse-checkout", "disable"], path)
        result = self._git.run(["checkout"], path)
        if isinstance(result, Err):
            return Err(SproutError.external("git", "failed to checkout", cause=result.error))
        return Ok(path)

    def create_branch(self, branch: str) -> Result[str, SproutError]:
        name = sanitize_branch_name(branch)
        if not name:
            return Err(SproutError.validation("branch name cannot be empty", original_name=branch))
        result = self._git.run(["branch", name, self.repo.main_branch], self.repo.path)
        if isinstance(result, Err):
            if "already exists" in result.error.details.get("output", ""):
                return Err(SproutError.conflict(f"branch {name} already exists", branch=name))
            return result
        logger.info(f"Created branch {name}")
        return Ok(name)

    # =========================================================================
    # Listing and pruning
    # =========================================================================

    def list_workspaces(self, include_main: bool = False) -> Result[list[Workspace], SproutError]:
        result = self._git.run(["worktree", "list", "--porcelain"], self.repo.path)
        if isinstance(result, Err):
            return result
        workspaces = []
        for workspace in parse_worktree_list(result.value):
            if workspace.is_main_branch and not include_main:
                continue
            workspaces.append(
                Workspace(
                    path=workspace.path,
                    branch=workspace.branch,
                    commit=workspace.commit,
                    status=self._status.status(workspace.branch),
                )
            )
        return Ok(workspaces)

    def prune_workspace(self, branch: str) -> Result[None, SproutError]:
        listed = self.list_workspaces()
        if isinstance(listed, Err):
            return listed
        for workspace in listed.value:
            if workspace.branch == branch:
                return self._remove(workspace)
        return Err(SproutError.not_found("worktree", branch))

    def prune_all_merged(self) -> Result[list[str], SproutError]:
        listed = self.list_workspaces()
        if isinstance(listed, Err):
            return listed
        removed: list[str] = []
        failures: list[str] = []
        for workspace in listed.value:
            if workspace.status is not WorkspaceStatus.MERGED:
                continue
            if isinstance(self._remove(workspace), Err):
                failures.append(workspace.branch)
            else:
                removed.append(workspace.branch)
        if failures:
            return Err(
                SproutError.internal(
                    f"some worktrees could not be deleted: {', '.join(failures)}"
                ).with_detail("removed", removed)
            )
        return Ok(removed)

    def _remove(self, workspace: Workspace) -> Result[None, SproutError]:
        removed = self._git.run(
            ["worktree", "remove", str(workspace.path), "--force"], self.repo.path
        )
        if isinstance(removed, Err):
            logger.warning(f"git worktree remove failed, cleaning up manually: {removed.error}")
        try:
            shutil.rmtree(workspace.path, ignore_errors=False)
        except FileNotFoundError:
            pass
        except OSError as e:
            return Err(SproutError.internal("failed to remove worktree directory", cause=e))
        self._git.run(["worktree", "prune"], self.repo.path)
        deleted = self._git.run(["branch", "-D", workspace.branch], self.repo.path)
        if isinstance(deleted, Err):
            logger.warning(f"Failed to delete branch {workspace.branch}: {deleted.error}")
        return Ok(None)
