"""Tests for the session mode machine, with commands run synchronously."""

from pathlib import Path

from sprout.application.session import (
    ChildrenLoaded,
    CreationMode,
    KeyPressed,
    Mode,
    Resized,
    SessionMachine,
    WorkspaceFailed,
)
from sprout.application.session import commands as command_factories
from sprout.domain.shared import SproutError
from sprout.domain.ticket import placeholder_id
from sprout.infrastructure.memory import InMemoryTicketProvider, InMemoryWorkspaceProvider

from .conftest import make_ticket, press, settle, type_text


def test_start_loads_tickets_and_stays_in_input(machine: SessionMachine):
    state = machine.state
    assert state.mode is Mode.INPUT
    assert not state.loading_tickets
    assert [n.id for n in state.tree.roots] == ["a", "b", "c"]
    assert state.repo_name == "sprout"


def test_start_without_ticket_provider(workspaces):
    m = SessionMachine(workspaces, None)
    assert m.start() == []
    assert not m.state.tickets_enabled


def test_ticket_load_failure_is_shown_inline(workspaces, tickets: InMemoryTicketProvider):
    tickets.fail_tickets = SproutError.external("linear", "unauthorized")
    m = SessionMachine(workspaces, tickets)
    settle(m, m.start())
    assert m.state.tickets_error == "linear: unauthorized"
    assert m.state.mode is Mode.INPUT


def test_navigation_scenario(machine: SessionMachine, tickets: InMemoryTicketProvider):
    state = machine.state
    press(machine, "down")
    assert state.selected_id == "a"
    press(machine, "down")
    assert state.selected_id == "b"

    commands = machine.update(KeyPressed("right"))
    assert state.mode is Mode.LOADING
    assert state.fetching_children == "b"
    assert [c.name for c in commands] == ["fetch_children"]
    settle(machine, commands)
    assert state.mode is Mode.ISSUE_SELECTION
    assert state.tree.find("b").expanded
    assert tickets.children_calls == ["b"]

    visited = []
    for _ in range(5):
        press(machine, "down")
        visited.append(state.selected_id)
    assert visited == ["b1", "b2", placeholder_id("b"), "c", None]
    assert state.mode is Mode.INPUT


def test_up_from_input_goes_to_last_visible_item(machine: SessionMachine):
    press(machine, "up")
    assert machine.state.selected_id == "c"
    press(machine, "right", "down", "up")
    assert machine.state.selected_id == "c"
    press(machine, "down")
    assert machine.state.selected_id == placeholder_id("c")
    press(machine, "up", "up", "up", "up")
    assert machine.state.selected_id is None
    press(machine, "up")
    assert machine.state.selected_id == placeholder_id("c")


def test_right_on_fetched_node_expands_without_fetch(machine, tickets):
    press(machine, "down", "down", "right", "left")
    assert not machine.state.tree.find("b").expanded
    press(machine, "right")
    assert machine.state.tree.find("b").expanded
    assert machine.state.mode is Mode.ISSUE_SELECTION
    assert tickets.children_calls == ["b"]


def test_child_fetch_failure_leaves_tree_untouched(machine, tickets):
    tickets.fail_children = SproutError.external("linear", "timeout")
    press(machine, "down", "down", "right")
    state = machine.state
    assert state.mode is Mode.ISSUE_SELECTION
    assert not state.tree.find("b").expanded
    assert state.notice == "Failed to load subtasks: linear: timeout"
    press(machine, "down")
    assert state.notice is None


def test_stale_children_are_applied_after_navigating_away(machine: SessionMachine):
    press(machine, "down")
    machine.update(ChildrenLoaded(parent_id="b", children=[make_ticket("late")]))
    node = machine.state.tree.find("b")
    assert node.expanded
    assert [c.id for c in node.children] == ["late"]
    assert machine.state.mode is Mode.ISSUE_SELECTION
    assert machine.state.selected_id == "a"


def test_collapsing_ancestor_of_selection_selects_it(machine: SessionMachine):
    press(machine, "down", "down", "right", "down", "down", "down")
    assert machine.state.selected_id == placeholder_id("b")
    press(machine, "left")
    assert machine.state.selected_id == "b"
    assert not machine.state.tree.find("b").expanded


def test_left_on_child_moves_to_parent(machine: SessionMachine):
    press(machine, "down", "down", "right", "down", "down", "left")
    assert machine.state.selected_id == "b"
    assert machine.state.tree.find("b").expanded


def test_enter_with_custom_text_creates_worktree(machine, workspaces):
    type_text(machine, "Feature X")
    assert machine.state.custom_input_text == "Feature X"
    press(machine, "enter")
    outcome = machine.state.outcome
    assert machine.state.mode is Mode.RESULT
    assert outcome.success
    assert outcome.path == Path("/work/.worktrees/feature-x")
    assert outcome.message == "Worktree created at: /work/.worktrees/feature-x"
    assert "feature-x" in workspaces.workspaces


def test_enter_on_ticket_uses_derived_branch(machine, workspaces):
    press(machine, "down", "enter")
    assert machine.state.outcome.branch == "spr-1-fix-login-redirect"
    assert "spr-1-fix-login-redirect" in workspaces.workspaces


def test_enter_on_empty_input_or_placeholder_does_nothing(machine):
    assert machine.update(KeyPressed("enter")) == []
    assert machine.state.mode is Mode.INPUT
    press(machine, "up", "right", "down")
    assert machine.state.selected_id == placeholder_id("c")
    assert machine.update(KeyPressed("enter")) == []
    assert machine.state.mode is Mode.ISSUE_SELECTION


def test_tab_switches_to_branch_only(machine, workspaces):
    press(machine, "tab")
    assert machine.state.creation_mode is CreationMode.BRANCH
    type_text(machine, "hotfix")
    commands = machine.update(KeyPressed("enter"))
    assert [c.name for c in commands] == ["create_branch"]
    assert machine.state.loading_message == "Creating branch..."
    settle(machine, commands)
    assert machine.state.outcome.message == "Branch created: hotfix"
    assert machine.state.outcome.path is None
    assert workspaces.branches == ["hotfix"]


def test_creation_failure_then_any_key_exits(machine, workspaces):
    workspaces.fail_with = SproutError.conflict("directory exists but is not a valid worktree")
    type_text(machine, "x")
    press(machine, "enter")
    state = machine.state
    assert state.mode is Mode.RESULT
    assert not state.outcome.success
    assert "directory exists" in state.outcome.message
    press(machine, "j")
    assert state.exit_requested
    assert not state.cancelled


def test_escape_cancels_from_input_and_selection(workspaces, tickets):
    for keys in (["escape"], ["down", "ctrl+c"]):
        m = SessionMachine(workspaces, tickets)
        settle(m, m.start())
        press(m, *keys)
        assert m.state.exit_requested
        assert m.state.cancelled


def test_escape_while_loading_exits(machine):
    type_text(machine, "x")
    machine.update(KeyPressed("enter"))
    assert machine.state.mode is Mode.LOADING
    machine.update(KeyPressed("down"))
    assert not machine.state.exit_requested
    machine.update(KeyPressed("escape"))
    assert machine.state.exit_requested


def test_typing_from_selection_returns_to_input(machine):
    press(machine, "down", "x")
    assert machine.state.mode is Mode.INPUT
    assert machine.state.selected_id is None
    assert machine.state.custom_input_text == "x"


def test_search_filters_and_escape_restores(machine):
    state = machine.state
    press(machine, "/")
    assert state.mode is Mode.SEARCH
    type_text(machine, "xyz")
    assert state.filtered_roots == []
    press(machine, "backspace", "backspace", "backspace")
    assert [n.id for n in state.filtered_roots] == ["a", "b", "c"]
    type_text(machine, "dark")
    assert [n.id for n in state.filtered_roots] == ["c"]
    press(machine, "escape")
    assert state.mode is Mode.INPUT
    assert state.search_query == ""
    assert [n.id for n in state.filtered_roots] == ["a", "b", "c"]
    assert not state.exit_requested


def test_slash_with_text_is_typed(machine):
    type_text(machine, "feat/x")
    assert machine.state.mode is Mode.INPUT
    assert machine.state.custom_input_text == "feat/x"


def test_search_navigation_is_flat_and_bounded(machine):
    state = machine.state
    press(machine, "down", "/")
    assert state.selected_id is None
    press(machine, "down", "down", "down", "down", "down")
    assert state.selected_id == "c"
    press(machine, "up", "up", "up")
    assert state.selected_id is None
    press(machine, "down", "enter")
    assert state.outcome.branch == "spr-1-fix-login-redirect"


def test_search_selection_reset_when_filtered_out(machine):
    press(machine, "/", "down")
    assert machine.state.selected_id == "a"
    type_text(machine, "dark")
    assert machine.state.selected_id is None


def test_ctrl_c_in_search_acts_like_escape(machine):
    press(machine, "/", "ctrl+c")
    assert machine.state.mode is Mode.INPUT
    assert not machine.state.exit_requested


def test_subtask_creation_selects_new_child(machine, tickets):
    state = machine.state
    press(machine, "up", "right", "down")
    assert state.selected_id == placeholder_id("c")
    press(machine, "right")
    assert state.mode is Mode.SUBTASK_INPUT
    assert state.tree.find("c").showing_subtask_entry
    type_text(machine, "Write docs")
    assert state.tree.find("c").subtask_entry_text == "Write docs"

    commands = machine.update(KeyPressed("enter"))
    assert state.mode is Mode.LOADING
    assert state.loading_message == "Creating subtask..."
    settle(machine, commands)

    parent = state.tree.find("c")
    assert state.mode is Mode.ISSUE_SELECTION
    assert parent.expanded
    assert [child.title for child in parent.children] == ["Write docs"]
    assert state.selected_id == parent.children[0].id
    assert parent.children[0].depth == 1
    assert not parent.showing_subtask_entry
    assert state.subtask_input_text == ""


def test_subtask_escape_discards_draft(machine):
    press(machine, "up", "right", "down", "right")
    type_text(machine, "draft")
    press(machine, "escape")
    state = machine.state
    assert state.mode is Mode.ISSUE_SELECTION
    assert state.subtask_input_text == ""
    assert not state.tree.find("c").showing_subtask_entry
    assert not state.exit_requested


def test_subtask_empty_title_is_ignored(machine):
    press(machine, "up", "right", "down", "right")
    type_text(machine, "   ")
    assert machine.update(KeyPressed("enter")) == []
    assert machine.state.mode is Mode.SUBTASK_INPUT


def test_subtask_failure_shows_result(machine, tickets):
    tickets.fail_subtask = SproutError.external("linear", "forbidden")
    press(machine, "up", "right", "down", "right")
    type_text(machine, "Nope")
    press(machine, "enter")
    assert machine.state.mode is Mode.RESULT
    assert machine.state.outcome.message == "Failed to create subtask: linear: forbidden"


def test_left_on_placeholder_collapses_owner(machine):
    press(machine, "up", "right", "down", "left")
    assert machine.state.selected_id == "c"
    assert not machine.state.tree.find("c").expanded


def test_resize_updates_dimensions_in_any_mode(machine):
    machine.update(Resized(width=120, height=40))
    assert (machine.state.width, machine.state.height) == (120, 40)


def test_command_exceptions_become_failure_events():
    class Exploding(InMemoryWorkspaceProvider):
        def create_workspace(self, branch):
            raise RuntimeError("disk on fire")

    event = command_factories.create_workspace(Exploding(), "x").execute()
    assert isinstance(event, WorkspaceFailed)
    assert event.error == "disk on fire"
