"""Visible-order navigation over the ticket tree.

The visible order is a pre-order walk that descends only into expanded
tickets. Every expanded ticket is followed, after its last real child, by its
synthetic "add subtask" placeholder. ``None`` marks either end of the order;
callers treat it as the free-text input slot.

All functions in this module are pure: they read the tree and never mutate it.
"""

from .models import TicketNode, placeholder_for
from .tree import TicketTree

# =============================================================================
# Helpers
# =============================================================================


def _owner(tree: TicketTree, placeholder: TicketNode) -> TicketNode | None:
    return tree.find(placeholder.parent_id) if placeholder.parent_id else None


def _after_subtree(tree: TicketTree, node: TicketNode) -> TicketNode | None:
    """First visible item after ``node`` and everything below it."""
    siblings = tree.siblings_of(node)
    index = next((i for i, s in enumerate(siblings) if s.id == node.id), None)
    if index is not None and index + 1 < len(siblings):
        return siblings[index + 1]
    parent = tree.parent_of(node)
    if parent is None:
        return None
    return placeholder_for(parent)


# =============================================================================
# Boundaries
# =============================================================================


def first_visible(tree: TicketTree) -> TicketNode | None:
    """First item of the visible order."""
    return tree.roots[0] if tree.roots else None


def last_visible(tree: TicketTree, node: TicketNode | None = None) -> TicketNode | None:
    """Last visible item in ``node``'s subtree, or of the whole tree.

    An expanded ticket always ends with its placeholder.
    """
    if node is None:
        if not tree.roots:
            return None
        node = tree.roots[-1]
    if not node.is_add_child_placeholder and node.expanded:
        return placeholder_for(node)
    return node


# =============================================================================
# Stepping
# =============================================================================


def next_visible(tree: TicketTree, current: TicketNode) -> TicketNode | None:
    """Item after ``current`` in visible order, or None past the end.

    Args:
        tree: The tree ``current`` belongs to.
        current: A ticket or placeholder that is currently visible.

    Returns:
        The next ticket or placeholder, or None at the end of the tree.
    """
    if current.is_add_child_placeholder:
        owner = _owner(tree, current)
        return _after_subtree(tree, owner) if owner is not None else None
    if current.expanded:
        if current.children:
            return current.children[0]
        return placeholder_for(current)
    return _after_subtree(tree, current)


def prev_visible(tree: TicketTree, current: TicketNode) -> TicketNode | None:
    """Item before ``current`` in visible order, or None before the first root.

    The inverse of ``next_visible``: a placeholder steps back into the last
    visible item of its owner's last child, and a ticket steps back into the
    deepest visible item of its previous sibling. The first child of a ticket
    steps back to the ticket itself.

    Stepping back from a placeholder lands on the item just above it on
    screen, not on its owner, so ``next_visible(prev_visible(x)) == x`` holds
    for placeholders too. For an owner without children the two coincide.
    """
    if current.is_add_child_placeholder:
        owner = _owner(tree, current)
        if owner is None:
            return None
        if owner.children:
            return last_visible(tree, owner.children[-1])
        return owner
    siblings = tree.siblings_of(current)
    index = next((i for i, s in enumerate(siblings) if s.id == current.id), None)
    if index:
        return last_visible(tree, siblings[index - 1])
    return tree.parent_of(current)


def visible_nodes(tree: TicketTree) -> list[TicketNode]:
    """The full visible order, placeholders included."""
    result: list[TicketNode] = []

    def visit(nodes: list[TicketNode]) -> None:
        for node in nodes:
            result.append(node)
            if node.expanded:
                visit(node.children)
                result.append(placeholder_for(node))

    visit(tree.roots)
    return result
