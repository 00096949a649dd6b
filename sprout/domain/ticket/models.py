"""Ticket domain models.

Tickets form a lazily loaded tree. A node either has its children fetched
(``children`` populated) or merely advertises them (``has_children`` with an
empty ``children`` list); there is no partially fetched state.

Parents are referenced by id (``parent_id``) and resolved through the
``TicketTree``; children are owned by their parent.
"""

from enum import Enum

from pydantic import BaseModel, Field

PLACEHOLDER_SUFFIX = "::add-subtask"
PLACEHOLDER_TITLE = "+ Add subtask"


class StatusCategory(str, Enum):
    """Coarse grouping of a tracker's workflow states."""

    BACKLOG = "backlog"
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


_CATEGORY_BY_TYPE = {
    "triage": StatusCategory.BACKLOG,
    "backlog": StatusCategory.BACKLOG,
    "unstarted": StatusCategory.BACKLOG,
    "started": StatusCategory.ACTIVE,
    "completed": StatusCategory.COMPLETED,
    "canceled": StatusCategory.CANCELLED,
    "cancelled": StatusCategory.CANCELLED,
}


class TicketState(BaseModel):
    """Workflow state of a ticket, e.g. ``In Review`` of type ``started``."""

    name: str = ""
    type: str = ""

    @property
    def category(self) -> StatusCategory:
        return _CATEGORY_BY_TYPE.get(self.type.lower(), StatusCategory.BACKLOG)


class User(BaseModel):
    """A tracker user."""

    id: str
    name: str = ""
    display_name: str = ""
    email: str = ""


class TicketNode(BaseModel):
    """A ticket in the tree, or the synthetic "add subtask" entry.

    ``depth`` always equals the parent's depth plus one; the tree stamps it
    whenever nodes are attached. Fields excluded from serialisation are UI
    state that lives only for one interactive session.
    """

    id: str
    identifier: str = ""
    title: str = ""
    description: str = ""
    url: str = ""
    priority: int = 0
    state: TicketState = Field(default_factory=TicketState)
    assignee: User | None = None
    children: list["TicketNode"] = Field(default_factory=list)
    has_children: bool = False
    depth: int = 0
    parent_id: str | None = None

    expanded: bool = Field(default=False, exclude=True)
    is_add_child_placeholder: bool = Field(default=False, exclude=True)
    showing_subtask_entry: bool = Field(default=False, exclude=True)
    subtask_entry_text: str = Field(default="", exclude=True)

    @property
    def children_fetched(self) -> bool:
        """True once the real children are known (possibly none)."""
        return bool(self.children) or not self.has_children

    @property
    def is_expandable(self) -> bool:
        return not self.is_add_child_placeholder and (self.has_children or bool(self.children))

    @property
    def display_text(self) -> str:
        """Text used for fuzzy matching and list rendering."""
        if self.is_add_child_placeholder:
            return self.title
        return f"{self.identifier} {self.title}".strip()


def placeholder_id(owner_id: str) -> str:
    """Id of the synthetic entry trailing ``owner_id``'s children."""
    return f"{owner_id}{PLACEHOLDER_SUFFIX}"


def placeholder_owner_id(node_id: str) -> str | None:
    """Owner id encoded in a placeholder id, or None for a real ticket id."""
    if node_id.endswith(PLACEHOLDER_SUFFIX):
        return node_id[: -len(PLACEHOLDER_SUFFIX)]
    return None


def placeholder_for(owner: TicketNode) -> TicketNode:
    """Build the "add subtask" entry shown as the last child of ``owner``.

    Placeholders are synthesised on demand and never stored in the tree.
    """
    return TicketNode(
        id=placeholder_id(owner.id),
        title=PLACEHOLDER_TITLE,
        depth=owner.depth + 1,
        parent_id=owner.id,
        is_add_child_placeholder=True,
    )
