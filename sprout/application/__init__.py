"""Application layer for sprout.

ports - provider protocols for workspaces and tickets
session - the interactive session engine
"""

from sprout.application.ports import TicketProvider, WorkspaceProvider

__all__ = [
    "TicketProvider",
    "WorkspaceProvider",
]
