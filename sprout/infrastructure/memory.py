"""In-memory providers.

Used by the test suite and handy for trying the interactive session without a
repository or a tracker account. Failures can be injected per operation.
"""

import itertools
from pathlib import Path

from sprout.domain.shared import Err, Ok, Result, SproutError
from sprout.domain.ticket import TicketNode, User
from sprout.domain.workspace import Workspace, WorkspaceStatus, sanitize_branch_name


class InMemoryWorkspaceProvider:
    """Worktrees recorded in a dict instead of on disk.

    Attributes:
        root: Directory the fake worktrees appear under.
        fail_with: Error returned by every create call when set.
    """

    def __init__(self, root: Path = Path("/tmp/.worktrees"), repo_name: str | None = "repo") -> None:
        self.root = root
        self.repo_name = repo_name
        self.workspaces: dict[str, Workspace] = {}
        self.branches: list[str] = []
        self.fail_with: SproutError | None = None
        self._commits = itertools.count(1)

    def create_workspace(self, branch: str) -> Result[Path, SproutError]:
        if self.fail_with is not None:
            return Err(self.fail_with)
        name = sanitize_branch_name(branch)
        if not name:
            return Err(SproutError.validation("branch name cannot be empty"))
        existing = self.workspaces.get(name)
        if existing is not None:
            return Ok(existing.path)
        path = self.root / name
        self.workspaces[name] = Workspace(
            path=path,
            branch=name,
            commit=f"{next(self._commits):040x}",
            status=WorkspaceStatus.ACTIVE,
        )
        return Ok(path)

    def create_branch(self, branch: str) -> Result[str, SproutError]:
        if self.fail_with is not None:
            return Err(self.fail_with)
        name = sanitize_branch_name(branch)
        if not name:
            return Err(SproutError.validation("branch name cannot be empty"))
        if name in self.branches:
            return Err(SproutError.conflict(f"branch {name} already exists", branch=name))
        self.branches.append(name)
        return Ok(name)

    def list_workspaces(self, include_main: bool = False) -> Result[list[Workspace], SproutError]:
        return Ok(
            [w for w in self.workspaces.values() if include_main or not w.is_main_branch]
        )

    def prune_workspace(self, branch: str) -> Result[None, SproutError]:
        if self.workspaces.pop(branch, None) is None:
            return Err(SproutError.not_found("worktree", branch))
        return Ok(None)

    def prune_all_merged(self) -> Result[list[str], SproutError]:
        merged = [b for b, w in self.workspaces.items() if w.status is WorkspaceStatus.MERGED]
        for branch in merged:
            del self.workspaces[branch]
        return Ok(merged)

    def repository_name(self) -> str | None:
        return self.repo_name


class InMemoryTicketProvider:
    """Tickets held as a forest of ``TicketNode``.

    ``get_assigned_tickets`` and ``get_children`` hand out copies without
    grandchildren, like a real tracker that only reports ``has_children``.
    """

    def __init__(self, tickets: list[TicketNode] | None = None, user: User | None = None) -> None:
        self.tickets = list(tickets or [])
        self.user = user or User(id="user-1", name="Test User", email="test@example.com")
        self.fail_tickets: SproutError | None = None
        self.fail_children: SproutError | None = None
        self.fail_subtask: SproutError | None = None
        self.children_calls: list[str] = []
        self._ids = itertools.count(1)

    def _find(self, ticket_id: str) -> TicketNode | None:
        stack = list(self.tickets)
        while stack:
            node = stack.pop()
            if node.id == ticket_id:
                return node
            stack.extend(node.children)
        return None

    @staticmethod
    def _shallow(node: TicketNode) -> TicketNode:
        return node.model_copy(
            update={"children": [], "has_children": node.has_children or bool(node.children)}
        )

    def get_assigned_tickets(self) -> Result[list[TicketNode], SproutError]:
        if self.fail_tickets is not None:
            return Err(self.fail_tickets)
        return Ok([self._shallow(t) for t in self.tickets])

    def get_children(self, ticket_id: str) -> Result[list[TicketNode], SproutError]:
        self.children_calls.append(ticket_id)
        if self.fail_children is not None:
            return Err(self.fail_children)
        node = self._find(ticket_id)
        if node is None:
            return Err(SproutError.not_found("ticket", ticket_id))
        return Ok([self._shallow(c) for c in node.children])

    def create_subtask(self, parent_id: str, title: str) -> Result[TicketNode, SproutError]:
        if self.fail_subtask is not None:
            return Err(self.fail_subtask)
        parent = self._find(parent_id)
        if parent is None:
            return Err(SproutError.not_found("ticket", parent_id))
        number = next(self._ids)
        prefix = parent.identifier.split("-")[0] or "NEW"
        child = TicketNode(
            id=f"{parent_id}-sub-{number}",
            identifier=f"{prefix}-{900 + number}",
            title=title,
            assignee=self.user,
        )
        parent.children.append(child)
        parent.has_children = True
        return Ok(child.model_copy())

    def get_current_user(self) -> Result[User, SproutError]:
        return Ok(self.user)

    def test_connection(self) -> Result[None, SproutError]:
        if self.fail_tickets is not None:
            return Err(self.fail_tickets)
        return Ok(None)
