"""Terminal user interface for sprout's interactive mode."""

from sprout.tui.app import SproutApp
from sprout.tui.frame import render_frame

__all__ = ["SproutApp", "render_frame"]
