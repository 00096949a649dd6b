"""Textual front end for the interactive session.

The app owns no session logic. Key presses and resizes are posted to the
``EventLoop``; the loop is pumped right away and on a short timer so that
background command completions show up without input.
"""

from textual import events
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import Static

from sprout.application.session import (
    EventLoop,
    KeyPressed,
    Mode,
    Resized,
    SessionMachine,
    SessionState,
)
from sprout.tui.frame import render_frame
from sprout.tui.widgets import LoadingIndicator

# Named keys the session understands. Bound with priority so Textual's own
# focus and quit bindings never see them.
SESSION_KEYS = ("up", "down", "left", "right", "enter", "escape", "tab", "backspace", "ctrl+c")


class SproutApp(App[SessionState]):
    """Full-screen picker for a branch name or a ticket.

    ``run()`` returns the final ``SessionState``; its ``outcome`` says what
    was created.
    """

    CSS = """
    Screen {
        background: $surface;
        padding: 0 1;
    }

    #frame {
        height: auto;
    }

    #loading {
        margin-top: 1;
    }
    """

    BINDINGS = [
        Binding(key, f"session_key('{key}')", show=False, priority=True) for key in SESSION_KEYS
    ]

    def __init__(self, machine: SessionMachine, poll_interval: float = 0.05) -> None:
        super().__init__()
        self.loop = EventLoop(machine)
        self._poll_interval = poll_interval
        self._exiting = False

    @property
    def state(self) -> SessionState:
        return self.loop.state

    def compose(self) -> ComposeResult:
        yield Static(id="frame")
        yield LoadingIndicator(id="loading")

    def on_mount(self) -> None:
        self.loop.start()
        self.set_interval(self._poll_interval, self.pump)
        self.pump()

    def on_unmount(self) -> None:
        self.loop.shutdown()

    def on_resize(self, event: events.Resize) -> None:
        self.loop.post(Resized(width=event.size.width, height=event.size.height))
        self.pump()

    def action_session_key(self, key: str) -> None:
        self.loop.post(KeyPressed(key))
        self.pump()

    def on_key(self, event: events.Key) -> None:
        if event.is_printable and event.character:
            event.stop()
            event.prevent_default()
            self.loop.post(KeyPressed("char", event.character))
            self.pump()

    def pump(self) -> None:
        """Apply queued events and redraw."""
        if self._exiting:
            return
        self.loop.drain()
        self.refresh_view()
        if self.state.exit_requested:
            self._exiting = True
            self.exit(self.state)

    def refresh_view(self) -> None:
        state = self.state
        self.query_one("#frame", Static).update(render_frame(state))
        indicator = self.query_one("#loading", LoadingIndicator)
        message = state.loading_message
        if message and (state.mode is Mode.LOADING or state.loading_tickets):
            indicator.show(message)
        else:
            indicator.hide()
