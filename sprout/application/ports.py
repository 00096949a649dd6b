"""Provider ports used by the session engine and the CLI.

Concrete providers live in ``sprout.infrastructure``: git and Linear for real
use, in-memory fakes for tests. Every operation returns a ``Result`` and is
safe to call from a worker thread.
"""

from pathlib import Path
from typing import Protocol

from sprout.domain.shared import Result, SproutError
from sprout.domain.ticket import TicketNode, User
from sprout.domain.workspace import Workspace


class WorkspaceProvider(Protocol):
    def create_workspace(self, branch: str) -> Result[Path, SproutError]:
        ...

    def create_branch(self, branch: str) -> Result[str, SproutError]:
        ...

    def list_workspaces(self, include_main: bool = False) -> Result[list[Workspace], SproutError]:
        ...

    def prune_workspace(self, branch: str) -> Result[None, SproutError]:
        ...

    def prune_all_merged(self) -> Result[list[str], SproutError]:
        ...

    def repository_name(self) -> str | None:
        ...


class TicketProvider(Protocol):
    def get_assigned_tickets(self) -> Result[list[TicketNode], SproutError]:
        ...

    def get_children(self, ticket_id: str) -> Result[list[TicketNode], SproutError]:
        ...

    def create_subtask(self, parent_id: str, title: str) -> Result[TicketNode, SproutError]:
        ...

    def get_current_user(self) -> Result[User, SproutError]:
        ...

    def test_connection(self) -> Result[None, SproutError]:
        ...
