"""Branch names derived from tickets."""

import re

from .models import TicketNode

INVALID_BRANCH = "invalid-issue"
TITLE_LIMIT = 50

_SEPARATORS = re.compile(r"[\s_]+")
_DISALLOWED = re.compile(r"[^a-z0-9-]")
_REPEATED_HYPHENS = re.compile(r"-{2,}")


def slugify(text: str, limit: int | None = None) -> str:
    """Lowercase kebab-case restricted to ``[a-z0-9-]``.

    Args:
        text: Arbitrary text.
        limit: Optional maximum length; trailing hyphens left by the cut are
            trimmed again.

    Returns:
        The slug, possibly empty.
    """
    slug = _SEPARATORS.sub("-", text.lower())
    slug = _DISALLOWED.sub("", slug)
    slug = _REPEATED_HYPHENS.sub("-", slug).strip("-")
    if limit is not None:
        slug = slug[:limit].rstrip("-")
    return slug


def derive_branch_name(node: TicketNode | None) -> str:
    """Branch name for a ticket: ``<identifier>-<title>`` in kebab case.

    >>> derive_branch_name(TicketNode(id="1", identifier="SPR-123",
    ...                               title="Add user authentication"))
    'spr-123-add-user-authentication'
    """
    if node is None or node.is_add_child_placeholder:
        return INVALID_BRANCH
    identifier = slugify(node.identifier)
    if not identifier:
        return INVALID_BRANCH
    title = slugify(node.title, TITLE_LIMIT)
    if not title:
        return identifier
    return f"{identifier}-{title}"
