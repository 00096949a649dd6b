"""Ticket domain: the lazily loaded tree and the pure functions over it.

- models: ``TicketNode`` and the synthetic "add subtask" placeholder
- tree: ``TicketTree``, which owns the roots and applies mutations
- traversal: visible-order navigation
- search: fuzzy filtering of top-level tickets
- branch: branch names derived from tickets
"""

from sprout.domain.ticket.branch import INVALID_BRANCH, derive_branch_name, slugify
from sprout.domain.ticket.models import (
    PLACEHOLDER_TITLE,
    StatusCategory,
    TicketNode,
    TicketState,
    User,
    placeholder_for,
    placeholder_id,
    placeholder_owner_id,
)
from sprout.domain.ticket.search import filter_roots, fuzzy_match, normalize
from sprout.domain.ticket.traversal import (
    first_visible,
    last_visible,
    next_visible,
    prev_visible,
    visible_nodes,
)
from sprout.domain.ticket.tree import TicketTree

__all__ = [
    # Models
    "TicketNode",
    "TicketState",
    "StatusCategory",
    "User",
    "PLACEHOLDER_TITLE",
    "placeholder_for",
    "placeholder_id",
    "placeholder_owner_id",
    # Tree
    "TicketTree",
    # Traversal
    "first_visible",
    "last_visible",
    "next_visible",
    "prev_visible",
    "visible_nodes",
    # Search
    "filter_roots",
    "fuzzy_match",
    "normalize",
    # Branch names
    "INVALID_BRANCH",
    "derive_branch_name",
    "slugify",
]
