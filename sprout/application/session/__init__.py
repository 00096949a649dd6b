"""Interactive session engine.

A single-threaded, message-driven state machine:

- state: modes, input buffers, selection and loading flags
- messages: key, resize and command-completion events
- commands: background work that yields exactly one event
- machine: applies one event at a time and returns commands
- dispatcher: the FIFO event loop and its worker pool
"""

from sprout.application.session.commands import Command
from sprout.application.session.dispatcher import EventLoop
from sprout.application.session.machine import SessionMachine
from sprout.application.session.messages import (
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
from sprout.application.session.state import CreationMode, Mode, Outcome, SessionState

__all__ = [
    # Engine
    "EventLoop",
    "SessionMachine",
    "Command",
    # State
    "CreationMode",
    "Mode",
    "Outcome",
    "SessionState",
    # Events
    "SessionEvent",
    "KeyPressed",
    "Resized",
    "TicketsLoaded",
    "TicketsFailed",
    "ChildrenLoaded",
    "ChildrenFailed",
    "SubtaskCreated",
    "SubtaskFailed",
    "WorkspaceCreated",
    "BranchCreated",
    "WorkspaceFailed",
]
