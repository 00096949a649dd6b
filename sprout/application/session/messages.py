"""Events consumed by the session machine.

Terminal input (key presses, resizes) and command completions share one
queue and one base class. Every command produces exactly one completion
event, either a success or the matching ``...Failed`` event.

Example usage:
    >>> loop.post(KeyPressed("down"))
    >>> loop.post(KeyPressed("char", "a"))
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path
from uuid import UUID, uuid4

from sprout.domain.ticket import TicketNode


@dataclass(frozen=True, kw_only=True)
class SessionEvent:
    """Base class for everything that enters the event loop.

    Attributes:
        event_id: Unique identifier for this event instance.
        occurred_at: UTC timestamp when the event was created.
    """

    event_id: UUID = field(default_factory=uuid4)
    occurred_at: datetime = field(default_factory=lambda: datetime.now(UTC))


# =============================================================================
# Terminal input
# =============================================================================


@dataclass(frozen=True)
class KeyPressed(SessionEvent):
    """A key press.

    ``key`` is a named key ("up", "enter", "ctrl+c", ...) or ``"char"`` for a
    printable character carried in ``character``.
    """

    key: str
    character: str = ""

    @property
    def is_printable(self) -> bool:
        return self.key == "char" and bool(self.character)


@dataclass(frozen=True)
class Resized(SessionEvent):
    width: int
    height: int


# =============================================================================
# Command completions
# =============================================================================


@dataclass(frozen=True)
class TicketsLoaded(SessionEvent):
    tickets: list[TicketNode]


@dataclass(frozen=True)
class TicketsFailed(SessionEvent):
    error: str


@dataclass(frozen=True)
class ChildrenLoaded(SessionEvent):
    parent_id: str
    children: list[TicketNode]


@dataclass(frozen=True)
class ChildrenFailed(SessionEvent):
    parent_id: str
    error: str


@dataclass(frozen=True)
class SubtaskCreated(SessionEvent):
    parent_id: str
    ticket: TicketNode


@dataclass(frozen=True)
class SubtaskFailed(SessionEvent):
    parent_id: str
    error: str


@dataclass(frozen=True)
class WorkspaceCreated(SessionEvent):
    branch: str
    path: Path


@dataclass(frozen=True)
class BranchCreated(SessionEvent):
    branch: str


@dataclass(frozen=True)
class WorkspaceFailed(SessionEvent):
    branch: str
    error: str
