"""Spinner with a label, shown while the session is loading.

Uses Rich's Spinner renderable, refreshed from a Textual interval timer.
"""

from typing import Optional

from rich.spinner import Spinner as RichSpinner
from rich.text import Text
from textual.timer import Timer
from textual.widgets import Static


class LoadingIndicator(Static):
    """Animated spinner followed by a message, blank when idle."""

    DEFAULT_CSS = """
    LoadingIndicator {
        height: 1;
        width: 100%;
    }
    """

    def __init__(
        self,
        style: str = "dots",
        id: Optional[str] = None,
        classes: Optional[str] = None,
    ) -> None:
        self._spinner = RichSpinner(style, style="cyan")
        self._message = ""
        self._timer: Optional[Timer] = None
        super().__init__(id=id, classes=classes)

    def render(self) -> RichSpinner | str:
        if self._message:
            return self._spinner
        return ""

    def show(self, message: str) -> None:
        """Start spinning with ``message``; a new message just relabels."""
        if message == self._message:
            return
        self._spinner.update(text=Text(f" {message}", style="dim"))
        if not self._message:
            self._timer = self.set_interval(1 / 30, self.refresh)
        self._message = message
        self.refresh()

    def hide(self) -> None:
        if not self._message:
            return
        self._message = ""
        if self._timer:
            self._timer.stop()
            self._timer = None
        self.refresh()

    @property
    def message(self) -> str:
        return self._message

    @property
    def is_spinning(self) -> bool:
        return bool(self._message)
