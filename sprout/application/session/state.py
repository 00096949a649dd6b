"""State of one interactive session.

The state is created when interactive mode starts, mutated only by the
session machine on the event-loop thread, and discarded on exit.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from sprout.domain.ticket import TicketNode, TicketTree


class Mode(str, Enum):
    """Which input the session is currently accepting."""

    INPUT = "input"
    ISSUE_SELECTION = "issue_selection"
    SEARCH = "search"
    SUBTASK_INPUT = "subtask_input"
    LOADING = "loading"
    RESULT = "result"


class CreationMode(str, Enum):
    """What Enter creates: a worktree, or only the branch."""

    WORKTREE = "worktree"
    BRANCH = "branch"

    def toggled(self) -> "CreationMode":
        return CreationMode.BRANCH if self is CreationMode.WORKTREE else CreationMode.WORKTREE

    @property
    def label(self) -> str:
        return f"[{self.value} <tab>]"


@dataclass(frozen=True)
class Outcome:
    """What the session produced, shown in result mode.

    Attributes:
        success: Whether the final operation succeeded.
        message: Text shown to the user.
        branch: Branch that was requested.
        path: Worktree directory, for a successful worktree creation.
    """

    success: bool
    message: str
    branch: str = ""
    path: Path | None = None


@dataclass
class SessionState:
    """Everything the renderer needs, and nothing the commands touch.

    ``selected_id`` is None while the free-text input is focused; otherwise it
    names a ticket or a placeholder (see ``placeholder_id``). Storing ids keeps
    the selection valid across tree mutations.
    """

    mode: Mode = Mode.INPUT
    tree: TicketTree = field(default_factory=TicketTree)
    filtered_roots: list[TicketNode] = field(default_factory=list)
    selected_id: str | None = None

    custom_input_text: str = ""
    search_query: str = ""
    subtask_input_text: str = ""
    subtask_parent_id: str | None = None

    tickets_enabled: bool = True
    loading_tickets: bool = False
    creating_workspace: bool = False
    creating_subtask: bool = False
    fetching_children: str | None = None
    pending_branch: str = ""

    tickets_error: str | None = None
    notice: str | None = None
    creation_mode: CreationMode = CreationMode.WORKTREE
    outcome: Outcome | None = None
    repo_name: str | None = None

    width: int = 80
    height: int = 24
    exit_requested: bool = False
    cancelled: bool = False

    @property
    def selected(self) -> TicketNode | None:
        """The selected ticket or placeholder, if it is still in the tree."""
        if self.selected_id is None:
            return None
        return self.tree.resolve(self.selected_id)

    @property
    def is_busy(self) -> bool:
        return self.creating_workspace or self.creating_subtask or self.fetching_children is not None

    @property
    def loading_message(self) -> str:
        if self.creating_subtask:
            return "Creating subtask..."
        if self.creating_workspace:
            if self.creation_mode is CreationMode.BRANCH:
                return "Creating branch..."
            return "Creating worktree..."
        if self.fetching_children is not None:
            return "Loading subtasks..."
        if self.loading_tickets:
            return "Loading tickets..."
        return ""
