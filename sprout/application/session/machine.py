"""The interactive session's mode machine.

``SessionMachine.update`` takes one event, mutates the session state and
returns the commands the event loop should run. It never blocks and never
talks to a provider directly; providers are only captured inside commands.

Mode transitions:

    INPUT / ISSUE_SELECTION --enter--> LOADING --done--> RESULT --any key--> exit
    INPUT / ISSUE_SELECTION --"/"--> SEARCH --escape--> INPUT
    ISSUE_SELECTION --right on unfetched ticket--> LOADING --done--> ISSUE_SELECTION
    ISSUE_SELECTION --right on placeholder--> SUBTASK_INPUT
    SUBTASK_INPUT --enter--> LOADING --done--> ISSUE_SELECTION (or RESULT on failure)
    SUBTASK_INPUT --escape--> ISSUE_SELECTION
"""

import logging

from sprout.application.ports import TicketProvider, WorkspaceProvider
from sprout.domain.ticket import (
    TicketNode,
    derive_branch_name,
    filter_roots,
    first_visible,
    last_visible,
    next_visible,
    prev_visible,
)

from . import commands
from .commands import Command
from .messages import (
    BranchCreated,
    ChildrenFailed,
    ChildrenLoaded,
    KeyPressed,
    Resized,
    SessionEvent,
    SubtaskCreated,
    SubtaskFailed,
    TicketsFailed,
    TicketsLoaded,
    WorkspaceCreated,
    WorkspaceFailed,
)
from .state import CreationMode, Mode, Outcome, SessionState

logger = logging.getLogger(__name__)

EXIT_KEYS = frozenset({"escape", "ctrl+c"})


class SessionMachine:
    """Applies events to a ``SessionState``.

    Args:
        workspaces: Provider used for worktree and branch creation.
        tickets: Ticket provider, or None when no tracker is configured.
        state: Initial state; a fresh one is created when omitted.
    """

    def __init__(
        self,
        workspaces: WorkspaceProvider,
        tickets: TicketProvider | None = None,
        state: SessionState | None = None,
    ) -> None:
        self.workspaces = workspaces
        self.tickets = tickets
        self.state = state or SessionState()
        self.state.tickets_enabled = tickets is not None

    def start(self) -> list[Command]:
        """Commands to run when the session opens."""
        self.state.repo_name = self.workspaces.repository_name()
        if self.tickets is None:
            return []
        self.state.loading_tickets = True
        return [commands.load_tickets(self.tickets)]

    def update(self, event: SessionEvent) -> list[Command]:
        """Apply one event and return the commands it triggers."""
        if isinstance(event, KeyPressed):
            return self._on_key(event)
        if isinstance(event, Resized):
            self.state.width = event.width
            self.state.height = event.height
            return []
        self._on_completion(event)
        return []

    # =========================================================================
    # Key handling
    # =========================================================================

    def _on_key(self, event: KeyPressed) -> list[Command]:
        state = self.state
        if state.mode is Mode.RESULT:
            state.exit_requested = True
            return []
        state.notice = None
        if state.mode is Mode.LOADING:
            if event.key in EXIT_KEYS:
                self._cancel()
            return []
        if state.mode is Mode.SEARCH:
            return self._on_search_key(event)
        if state.mode is Mode.SUBTASK_INPUT:
            return self._on_subtask_key(event)
        if event.key in EXIT_KEYS:
            self._cancel()
            return []
        if event.key == "tab":
            state.creation_mode = state.creation_mode.toggled()
            return []
        if state.mode is Mode.ISSUE_SELECTION:
            return self._on_selection_key(event)
        return self._on_input_key(event)

    def _on_input_key(self, event: KeyPressed) -> list[Command]:
        state = self.state
        if event.key == "enter":
            branch = state.custom_input_text.strip()
            return self._create(branch) if branch else []
        if event.key == "down":
            self._select(first_visible(state.tree))
        elif event.key == "up":
            self._select(last_visible(state.tree))
        elif event.key == "backspace":
            state.custom_input_text = state.custom_input_text[:-1]
        elif event.is_printable:
            if event.character == "/" and not state.custom_input_text:
                self._enter_search()
            else:
                state.custom_input_text += event.character
        return []

    def _on_selection_key(self, event: KeyPressed) -> list[Command]:
        state = self.state
        current = state.selected
        if current is None:
            # The selected ticket vanished, e.g. its parent collapsed elsewhere.
            self._select(None)
            return self._on_input_key(event)

        if event.key == "down":
            self._select(next_visible(state.tree, current))
        elif event.key == "up":
            self._select(prev_visible(state.tree, current))
        elif event.key == "right":
            return self._expand(current.id)
        elif event.key == "left":
            self._collapse_or_ascend(current.id)
        elif event.key == "enter":
            if not current.is_add_child_placeholder:
                return self._create(derive_branch_name(current))
        elif event.key == "backspace":
            self._select(None)
            state.custom_input_text = state.custom_input_text[:-1]
        elif event.is_printable:
            if event.character == "/":
                self._enter_search()
            else:
                self._select(None)
                state.custom_input_text += event.character
        return []

    def _on_search_key(self, event: KeyPressed) -> list[Command]:
        state = self.state
        if event.key in EXIT_KEYS:
            state.search_query = ""
            state.filtered_roots = list(state.tree.roots)
            state.selected_id = None
            state.mode = Mode.INPUT
            return []
        if event.key == "tab":
            state.creation_mode = state.creation_mode.toggled()
            return []
        if event.key == "enter":
            current = state.selected
            if current is not None and not current.is_add_child_placeholder:
                return self._create(derive_branch_name(current))
            return []

        ids = [node.id for node in state.filtered_roots]
        index = ids.index(state.selected_id) if state.selected_id in ids else None
        if event.key == "down":
            if ids:
                state.selected_id = ids[0] if index is None else ids[min(index + 1, len(ids) - 1)]
        elif event.key == "up":
            if index is not None:
                state.selected_id = ids[index - 1] if index > 0 else None
        elif event.key == "backspace":
            self._set_query(state.search_query[:-1])
        elif event.is_printable:
            self._set_query(state.search_query + event.character)
        return []

    def _on_subtask_key(self, event: KeyPressed) -> list[Command]:
        state = self.state
        parent = state.tree.find(state.subtask_parent_id or "")
        if event.key in EXIT_KEYS:
            self._close_subtask_entry()
            state.mode = Mode.ISSUE_SELECTION
            return []
        if event.key == "enter":
            title = state.subtask_input_text.strip()
            if not title or parent is None or self.tickets is None:
                return []
            state.mode = Mode.LOADING
            state.creating_subtask = True
            return [commands.create_subtask(self.tickets, parent.id, title)]
        if event.key == "backspace":
            state.subtask_input_text = state.subtask_input_text[:-1]
        elif event.is_printable:
            state.subtask_input_text += event.character
        if parent is not None:
            parent.subtask_entry_text = state.subtask_input_text
        return []

    # =========================================================================
    # Transitions
    # =========================================================================

    def _select(self, node_or_none: TicketNode | None) -> None:
        state = self.state
        if node_or_none is None:
            state.selected_id = None
            state.mode = Mode.INPUT
        else:
            state.selected_id = node_or_none.id
            state.mode = Mode.ISSUE_SELECTION

    def _cancel(self) -> None:
        self.state.cancelled = True
        self.state.exit_requested = True

    def _enter_search(self) -> None:
        state = self.state
        state.mode = Mode.SEARCH
        state.selected_id = None
        state.search_query = ""
        state.filtered_roots = filter_roots(state.tree, "")

    def _set_query(self, query: str) -> None:
        state = self.state
        state.search_query = query
        state.filtered_roots = filter_roots(state.tree, query)
        if state.selected_id not in {node.id for node in state.filtered_roots}:
            state.selected_id = None

    def _create(self, branch: str) -> list[Command]:
        state = self.state
        state.mode = Mode.LOADING
        state.creating_workspace = True
        state.pending_branch = branch
        logger.info(f"Creating {state.creation_mode.value} for {branch}")
        if state.creation_mode is CreationMode.BRANCH:
            return [commands.create_branch(self.workspaces, branch)]
        return [commands.create_workspace(self.workspaces, branch)]

    def _expand(self, node_id: str) -> list[Command]:
        state = self.state
        current = state.tree.resolve(node_id)
        if current is None:
            return []
        if current.is_add_child_placeholder:
            if self.tickets is None or current.parent_id is None:
                return []
            state.mode = Mode.SUBTASK_INPUT
            state.subtask_parent_id = current.parent_id
            state.subtask_input_text = ""
            owner = state.tree.find(current.parent_id)
            if owner is not None:
                owner.showing_subtask_entry = True
                owner.subtask_entry_text = ""
            return []
        if current.expanded:
            return []
        if current.children_fetched or self.tickets is None:
            state.tree.set_expanded(current.id, True)
            return []
        state.mode = Mode.LOADING
        state.fetching_children = current.id
        return [commands.fetch_children(self.tickets, current.id)]

    def _collapse_or_ascend(self, node_id: str) -> None:
        state = self.state
        current = state.tree.resolve(node_id)
        if current is None:
            return
        if current.is_add_child_placeholder:
            self._collapse(current.parent_id or "")
        elif current.expanded:
            self._collapse(current.id)
        elif current.parent_id is not None:
            state.selected_id = current.parent_id

    def _collapse(self, node_id: str) -> None:
        state = self.state
        selected = state.selected_id
        if state.tree.set_expanded(node_id, False) is None:
            return
        if selected is not None and (
            selected == node_id or state.tree.is_descendant(selected, node_id)
        ):
            state.selected_id = node_id

    def _close_subtask_entry(self) -> None:
        state = self.state
        owner = state.tree.find(state.subtask_parent_id or "")
        if owner is not None:
            owner.showing_subtask_entry = False
            owner.subtask_entry_text = ""
        state.subtask_input_text = ""
        state.subtask_parent_id = None

    # =========================================================================
    # Command completions
    # =========================================================================

    def _on_completion(self, event: SessionEvent) -> None:
        state = self.state
        if isinstance(event, TicketsLoaded):
            state.loading_tickets = False
            state.tickets_error = None
            state.tree.set_roots(event.tickets)
            state.filtered_roots = filter_roots(state.tree, state.search_query)
            logger.debug(f"Loaded {len(event.tickets)} tickets")
        elif isinstance(event, TicketsFailed):
            state.loading_tickets = False
            state.tickets_error = event.error
            logger.warning(f"Failed to load tickets: {event.error}")
        elif isinstance(event, ChildrenLoaded):
            # Applied even if the user has moved on; there is no cancellation.
            if state.fetching_children == event.parent_id:
                state.fetching_children = None
            state.tree.attach_children(event.parent_id, event.children)
            self._leave_loading()
        elif isinstance(event, ChildrenFailed):
            if state.fetching_children == event.parent_id:
                state.fetching_children = None
            state.notice = f"Failed to load subtasks: {event.error}"
            logger.warning(state.notice)
            self._leave_loading()
        elif isinstance(event, SubtaskCreated):
            self._on_subtask_created(event)
        elif isinstance(event, SubtaskFailed):
            state.creating_subtask = False
            self._close_subtask_entry()
            self._finish(Outcome(False, f"Failed to create subtask: {event.error}"))
        elif isinstance(event, WorkspaceCreated):
            state.creating_workspace = False
            self._finish(
                Outcome(True, f"Worktree created at: {event.path}", event.branch, event.path)
            )
        elif isinstance(event, BranchCreated):
            state.creating_workspace = False
            self._finish(Outcome(True, f"Branch created: {event.branch}", event.branch))
        elif isinstance(event, WorkspaceFailed):
            state.creating_workspace = False
            self._finish(Outcome(False, f"Error: {event.error}", event.branch))
        else:
            logger.debug(f"Ignoring unknown event {event!r}")

    def _on_subtask_created(self, event: SubtaskCreated) -> None:
        state = self.state
        state.creating_subtask = False
        self._close_subtask_entry()
        parent = state.tree.append_child(event.parent_id, event.ticket)
        if parent is None:
            self._select(None)
            return
        state.tree.set_expanded(parent.id, True)
        state.filtered_roots = filter_roots(state.tree, state.search_query)
        state.selected_id = event.ticket.id
        state.mode = Mode.ISSUE_SELECTION

    def _leave_loading(self) -> None:
        state = self.state
        if state.mode is not Mode.LOADING or state.is_busy:
            return
        if state.selected is None:
            self._select(None)
        else:
            state.mode = Mode.ISSUE_SELECTION

    def _finish(self, outcome: Outcome) -> None:
        state = self.state
        state.outcome = outcome
        state.mode = Mode.RESULT
        if outcome.success:
            logger.info(outcome.message)
        else:
            logger.error(outcome.message)
