"""Widgets for the sprout TUI."""

from sprout.tui.widgets.spinner import LoadingIndicator

__all__ = ["LoadingIndicator"]
