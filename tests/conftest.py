"""Shared factories and fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from sprout.application.session import Command, KeyPressed, SessionMachine
from sprout.domain.ticket import TicketNode, TicketState, TicketTree
from sprout.infrastructure.memory import InMemoryTicketProvider, InMemoryWorkspaceProvider
from sprout.log_setup import configure_logging

# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------


def make_ticket(
    id: str,
    identifier: str | None = None,
    title: str | None = None,
    children: list[TicketNode] | None = None,
    has_children: bool | None = None,
    state_name: str = "Todo",
    state_type: str = "unstarted",
) -> TicketNode:
    children = children or []
    return TicketNode(
        id=id,
        identifier=identifier or f"SPR-{id.upper()}",
        title=title or f"Ticket {id}",
        children=children,
        has_children=bool(children) if has_children is None else has_children,
        state=TicketState(name=state_name, type=state_type),
    )


def scenario_tickets() -> list[TicketNode]:
    """Roots A, B (children B1, B2) and C."""
    return [
        make_ticket("a", "SPR-1", "Fix login redirect"),
        make_ticket(
            "b",
            "SPR-2",
            "Billing export",
            children=[
                make_ticket("b1", "SPR-3", "CSV writer"),
                make_ticket("b2", "SPR-4", "Upload to bucket"),
            ],
        ),
        make_ticket("c", "SPR-5", "Dark mode"),
    ]


def press(machine: SessionMachine, *keys: str) -> None:
    """Feed keys to ``machine``, running any commands synchronously.

    Single characters are typed; anything longer is a named key.
    """
    for key in keys:
        if len(key) == 1:
            event = KeyPressed("char", key)
        else:
            event = KeyPressed(key)
        settle(machine, machine.update(event))


def type_text(machine: SessionMachine, text: str) -> None:
    for ch in text:
        settle(machine, machine.update(KeyPressed("char", ch)))


def settle(machine: SessionMachine, commands: list[Command]) -> None:
    """Run commands in order, feeding their events back, until none remain."""
    pending = list(commands)
    while pending:
        command = pending.pop(0)
        pending.extend(machine.update(command.execute()))


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def workspaces() -> InMemoryWorkspaceProvider:
    return InMemoryWorkspaceProvider(root=Path("/work/.worktrees"), repo_name="sprout")


@pytest.fixture
def tickets() -> InMemoryTicketProvider:
    return InMemoryTicketProvider(scenario_tickets())


@pytest.fixture
def machine(workspaces: InMemoryWorkspaceProvider, tickets: InMemoryTicketProvider) -> SessionMachine:
    """A started machine with the scenario tickets loaded."""
    m = SessionMachine(workspaces, tickets)
    settle(m, m.start())
    return m


@pytest.fixture
def tree() -> TicketTree:
    """Scenario tree with B's children already fetched but collapsed."""
    return TicketTree(scenario_tickets())


@pytest.fixture(autouse=True)
def quiet_logging():
    """Commands install a console handler; drop it so no test writes to a closed stream."""
    yield
    configure_logging("warn", "stderr", interactive=True)
