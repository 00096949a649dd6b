"""Deferred work requested by the session machine.

A command closes over a provider and its arguments, never over session state.
It runs on a worker thread and always yields exactly one event: provider
errors and unexpected exceptions become the matching failure event.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass

from sprout.application.ports import TicketProvider, WorkspaceProvider
from sprout.domain.shared import Err, error_message

from .messages import (
    BranchCreated,
    ChildrenFailed,
    ChildrenLoaded,
    SessionEvent,
    SubtaskCreated,
    SubtaskFailed,
    TicketsFailed,
    TicketsLoaded,
    WorkspaceCreated,
    WorkspaceFailed,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Command:
    """A named unit of background work.

    Attributes:
        name: Short label used in logs and tests.
        run: Performs the work and returns the completion event.
        on_error: Builds the failure event from an unexpected exception.
    """

    name: str
    run: Callable[[], SessionEvent]
    on_error: Callable[[str], SessionEvent]

    def execute(self) -> SessionEvent:
        """Run the command, converting any exception into its failure event."""
        try:
            return self.run()
        except Exception as exc:
            logger.exception(f"Command {self.name} raised")
            return self.on_error(error_message(exc))


def load_tickets(provider: TicketProvider) -> Command:
    def run() -> SessionEvent:
        result = provider.get_assigned_tickets()
        if isinstance(result, Err):
            return TicketsFailed(error=str(result.error))
        return TicketsLoaded(tickets=result.value)

    return Command("load_tickets", run, lambda error: TicketsFailed(error=error))


def fetch_children(provider: TicketProvider, parent_id: str) -> Command:
    def run() -> SessionEvent:
        result = provider.get_children(parent_id)
        if isinstance(result, Err):
            return ChildrenFailed(parent_id=parent_id, error=str(result.error))
        return ChildrenLoaded(parent_id=parent_id, children=result.value)

    return Command(
        "fetch_children",
        run,
        lambda error: ChildrenFailed(parent_id=parent_id, error=error),
    )


def create_subtask(provider: TicketProvider, parent_id: str, title: str) -> Command:
    def run() -> SessionEvent:
        result = provider.create_subtask(parent_id, title)
        if isinstance(result, Err):
            return SubtaskFailed(parent_id=parent_id, error=str(result.error))
        return SubtaskCreated(parent_id=parent_id, ticket=result.value)

    return Command(
        "create_subtask",
        run,
        lambda error: SubtaskFailed(parent_id=parent_id, error=error),
    )


def create_workspace(provider: WorkspaceProvider, branch: str) -> Command:
    def run() -> SessionEvent:
        result = provider.create_workspace(branch)
        if isinstance(result, Err):
            return WorkspaceFailed(branch=branch, error=str(result.error))
        return WorkspaceCreated(branch=branch, path=result.value)

    return Command(
        "create_workspace",
        run,
        lambda error: WorkspaceFailed(branch=branch, error=error),
    )


def create_branch(provider: WorkspaceProvider, branch: str) -> Command:
    def run() -> SessionEvent:
        result = provider.create_branch(branch)
        if isinstance(result, Err):
            return WorkspaceFailed(branch=branch, error=str(result.error))
        return BranchCreated(branch=result.value)

    return Command(
        "create_branch",
        run,
        lambda error: WorkspaceFailed(branch=branch, error=error),
    )
