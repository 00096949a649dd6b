"""Tests for the frame renderer."""

import io

from rich.console import Console

from sprout.application.session import Mode, Outcome, SessionMachine
from sprout.tui.frame import INPUT_PLACEHOLDER, render_frame, status_style

from .conftest import make_ticket, press, type_text


def plain(renderable, width: int = 80) -> str:
    console = Console(file=io.StringIO(), width=width, color_system=None)
    console.print(renderable)
    return console.file.getvalue()


def test_input_prompt_with_repo_and_mode_label(machine: SessionMachine):
    text = plain(render_frame(machine.state))
    first = text.splitlines()[0]
    assert first.startswith("> sprout/")
    assert INPUT_PLACEHOLDER in first
    assert first.rstrip().endswith("[worktree <tab>]")
    assert "SPR-2 Billing export" in text


def test_tab_changes_mode_label(machine: SessionMachine):
    press(machine, "tab")
    assert "[branch <tab>]" in plain(render_frame(machine.state))


def test_expanded_tree_shows_children_and_placeholder(machine: SessionMachine):
    press(machine, "down", "down", "right")
    lines = plain(render_frame(machine.state)).splitlines()
    assert any("▼ SPR-2" in line for line in lines)
    child = next(line for line in lines if "SPR-3 CSV writer" in line)
    assert child.startswith("  ")
    assert any("+ Add subtask" in line for line in lines)


def test_search_shows_no_matches(machine: SessionMachine):
    press(machine, "/")
    type_text(machine, "zzz")
    text = plain(render_frame(machine.state))
    assert text.startswith("/ zzz")
    assert "No matching tickets" in text


def test_ticket_states(workspaces):
    machine = SessionMachine(workspaces, None)
    machine.state.tickets_enabled = True
    machine.state.loading_tickets = True
    assert "Loading tickets..." in plain(render_frame(machine.state))
    machine.state.loading_tickets = False
    machine.state.tickets_error = "linear: unauthorized"
    assert "Failed to load tickets: linear: unauthorized" in plain(render_frame(machine.state))
    machine.state.tickets_error = None
    assert "No assigned tickets found" in plain(render_frame(machine.state))


def test_result_screen(machine: SessionMachine):
    machine.state.mode = Mode.RESULT
    machine.state.outcome = Outcome(False, "Error: boom")
    text = plain(render_frame(machine.state))
    assert text.splitlines()[0] == "Error: boom"
    assert "Press any key to exit." in text


def test_status_colours():
    assert status_style(make_ticket("x", state_name="In Review", state_type="started")) == "magenta"
    assert status_style(make_ticket("x", state_name="Doing", state_type="started")) == "yellow"
    assert status_style(make_ticket("x", state_name="Done", state_type="completed")) == "green"
