"""Mutable ticket tree for one interactive session.

All lookups are depth-first searches by id over the fetched tree. Trees hold
tens of tickets, so nothing is indexed.
"""

import logging
from collections.abc import Iterator

from .models import TicketNode, placeholder_for, placeholder_owner_id

logger = logging.getLogger(__name__)


def _stamp(node: TicketNode, depth: int, parent_id: str | None) -> None:
    """Set depth and parent link on ``node`` and its whole subtree."""
    node.depth = depth
    node.parent_id = parent_id
    for child in node.children:
        _stamp(child, depth + 1, node.id)


class TicketTree:
    """Owns the root tickets and applies every tree mutation.

    Example:
        tree = TicketTree()
        tree.set_roots(tickets)
        tree.attach_children("id-b", children)
        assert tree.find("id-b").expanded
    """

    def __init__(self, roots: list[TicketNode] | None = None) -> None:
        self.roots: list[TicketNode] = []
        if roots:
            self.set_roots(roots)

    # =========================================================================
    # Lookups
    # =========================================================================

    def walk(self) -> Iterator[TicketNode]:
        """Yield every fetched ticket in pre-order."""

        def visit(nodes: list[TicketNode]) -> Iterator[TicketNode]:
            for node in nodes:
                yield node
                yield from visit(node.children)

        yield from visit(self.roots)

    def find(self, node_id: str) -> TicketNode | None:
        """Find a real ticket by id."""
        for node in self.walk():
            if node.id == node_id:
                return node
        return None

    def resolve(self, node_id: str) -> TicketNode | None:
        """Find a ticket or a placeholder by id.

        A placeholder only resolves while its owner is expanded.
        """
        owner_id = placeholder_owner_id(node_id)
        if owner_id is None:
            return self.find(node_id)
        owner = self.find(owner_id)
        if owner is None or not owner.expanded:
            return None
        return placeholder_for(owner)

    def parent_of(self, node: TicketNode) -> TicketNode | None:
        if node.parent_id is None:
            return None
        return self.find(node.parent_id)

    def siblings_of(self, node: TicketNode) -> list[TicketNode]:
        """Real siblings of ``node`` including itself, in order."""
        parent = self.parent_of(node)
        return parent.children if parent is not None else self.roots

    def is_descendant(self, node_id: str, ancestor_id: str) -> bool:
        """True when ``node_id`` (ticket or placeholder) sits below ``ancestor_id``."""
        owner_id = placeholder_owner_id(node_id)
        if owner_id is not None:
            if owner_id == ancestor_id:
                return True
            node_id = owner_id
        node = self.find(node_id)
        while node is not None and node.parent_id is not None:
            if node.parent_id == ancestor_id:
                return True
            node = self.find(node.parent_id)
        return False

    def __len__(self) -> int:
        return sum(1 for _ in self.walk())

    # =========================================================================
    # Mutations
    # =========================================================================

    def set_roots(self, nodes: list[TicketNode]) -> None:
        """Replace the whole tree with ``nodes`` as depth-0 roots."""
        for node in nodes:
            _stamp(node, 0, None)
        self.roots = list(nodes)

    def attach_children(self, parent_id: str, children: list[TicketNode]) -> TicketNode | None:
        """Store fetched children under ``parent_id`` and expand it.

        Returns:
            The parent, or None when it is no longer in the tree.
        """
        parent = self.find(parent_id)
        if parent is None:
            logger.debug(f"Dropping children for unknown ticket {parent_id}")
            return None
        for child in children:
            _stamp(child, parent.depth + 1, parent.id)
        parent.children = list(children)
        parent.has_children = bool(children)
        parent.expanded = True
        return parent

    def append_child(self, parent_id: str, child: TicketNode) -> TicketNode | None:
        """Add ``child`` as the last real child of ``parent_id``.

        Returns:
            The parent, or None when it is no longer in the tree.
        """
        parent = self.find(parent_id)
        if parent is None:
            logger.debug(f"Dropping new subtask for unknown ticket {parent_id}")
            return None
        _stamp(child, parent.depth + 1, parent.id)
        parent.children.append(child)
        parent.has_children = True
        return parent

    def set_expanded(self, node_id: str, expanded: bool) -> TicketNode | None:
        node = self.find(node_id)
        if node is None:
            return None
        node.expanded = expanded
        if not expanded:
            node.showing_subtask_entry = False
            node.subtask_entry_text = ""
        return node
