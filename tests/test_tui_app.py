"""Pilot tests for the Textual front end."""

from __future__ import annotations

import threading
import time

import pytest

from sprout.application.session import Mode, SessionMachine
from sprout.infrastructure.memory import InMemoryTicketProvider, InMemoryWorkspaceProvider
from sprout.tui import SproutApp
from sprout.tui.widgets import LoadingIndicator

from .conftest import scenario_tickets


class GatedTickets(InMemoryTicketProvider):
    def __init__(self):
        super().__init__(scenario_tickets())
        self.release = threading.Event()

    def get_children(self, ticket_id):
        assert self.release.wait(timeout=5)
        return super().get_children(ticket_id)


async def settle(pilot, app: SproutApp, timeout: float = 5.0) -> None:
    """Wait until background commands finish and their events are applied."""
    deadline = time.monotonic() + timeout
    while not app.loop.idle:
        if time.monotonic() > deadline:
            raise TimeoutError("session did not settle")
        await pilot.pause(0.02)
    app.pump()
    await pilot.pause()


def make_app(tickets=None) -> tuple[SproutApp, InMemoryWorkspaceProvider]:
    workspaces = InMemoryWorkspaceProvider(repo_name="sprout")
    return SproutApp(SessionMachine(workspaces, tickets)), workspaces


@pytest.mark.asyncio
async def test_type_name_and_create_worktree():
    app, workspaces = make_app()
    async with app.run_test() as pilot:
        await pilot.press("f", "o", "o", "enter")
        await settle(pilot, app)
        assert app.state.mode is Mode.RESULT
        assert app.state.outcome.success
        await pilot.press("q")
        await pilot.pause()
    assert "foo" in workspaces.workspaces
    assert app.return_value is not None
    assert app.return_value.outcome.path == workspaces.workspaces["foo"].path
    assert not app.return_value.cancelled


@pytest.mark.asyncio
async def test_escape_cancels():
    app, _ = make_app(InMemoryTicketProvider(scenario_tickets()))
    async with app.run_test() as pilot:
        await settle(pilot, app)
        await pilot.press("escape")
        await pilot.pause()
    assert app.return_value.cancelled
    assert app.return_value.outcome is None


@pytest.mark.asyncio
async def test_ticket_selection_and_expansion():
    tickets = GatedTickets()
    app, workspaces = make_app(tickets)
    async with app.run_test() as pilot:
        await settle(pilot, app)
        assert len(app.state.tree.roots) == 3

        await pilot.press("down", "down", "right")
        indicator = app.query_one("#loading", LoadingIndicator)
        assert app.state.mode is Mode.LOADING
        assert indicator.message == "Loading subtasks..."

        tickets.release.set()
        await settle(pilot, app)
        assert app.state.mode is Mode.ISSUE_SELECTION
        assert not indicator.is_spinning

        await pilot.press("down", "enter")
        await settle(pilot, app)
        assert app.state.outcome.branch == "spr-3-csv-writer"
        await pilot.press("enter")
        await pilot.pause()
    assert "spr-3-csv-writer" in workspaces.workspaces


@pytest.mark.asyncio
async def test_slash_enters_search():
    app, _ = make_app(InMemoryTicketProvider(scenario_tickets()))
    async with app.run_test() as pilot:
        await settle(pilot, app)
        await pilot.press("slash", "d", "a", "r", "k")
        assert app.state.mode is Mode.SEARCH
        assert [n.id for n in app.state.filtered_roots] == ["c"]
        await pilot.press("escape")
        assert app.state.mode is Mode.INPUT
        assert not app.state.exit_requested
        await pilot.press("escape")
        await pilot.pause()
    assert app.return_value.cancelled
