"""Fuzzy filtering of the ticket list.

Matching is a case-insensitive subsequence test on Unicode-folded text: every
character of the query must appear in the candidate, in order. The whole
fetched tree is searched, but only top-level tickets are surfaced.
"""

import unicodedata

from .models import TicketNode
from .tree import TicketTree


def normalize(text: str) -> str:
    """Fold accents and case so "Éclair" matches "ecl"."""
    decomposed = unicodedata.normalize("NFKD", text)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return stripped.casefold()


def fuzzy_match(query: str, candidate: str) -> bool:
    """True when ``query`` is a subsequence of ``candidate`` after folding."""
    remaining = iter(normalize(candidate))
    return all(ch in remaining for ch in normalize(query))


def candidate_text(node: TicketNode) -> str:
    return f"{node.identifier} {node.title}"


def filter_roots(tree: TicketTree, query: str) -> list[TicketNode]:
    """Roots whose own text matched ``query``.

    Every fetched ticket is tested, and the matched strings are collected;
    a root survives when its own string is among them. An empty query returns
    the roots unchanged.
    """
    if not query:
        return list(tree.roots)
    matched = {
        candidate_text(node) for node in tree.walk() if fuzzy_match(query, candidate_text(node))
    }
    return [root for root in tree.roots if candidate_text(root) in matched]
