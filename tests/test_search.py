"""Tests for the fuzzy filter."""

from sprout.domain.ticket import TicketTree, filter_roots, fuzzy_match

from .conftest import make_ticket


def test_subsequence_matching_is_case_and_accent_insensitive():
    assert fuzzy_match("blxp", "SPR-2 Billing export")
    assert fuzzy_match("CAFE", "Café menu")
    assert not fuzzy_match("xyz", "SPR-2 Billing export")
    assert not fuzzy_match("tropxe", "export")


def test_empty_query_returns_roots_unchanged(tree: TicketTree):
    result = filter_roots(tree, "")
    assert [n.id for n in result] == ["a", "b", "c"]
    assert result[0] is tree.roots[0]


def test_no_matches_gives_empty_view(tree: TicketTree):
    assert filter_roots(tree, "xyz") == []


def test_matches_by_identifier_or_title(tree: TicketTree):
    assert [n.id for n in filter_roots(tree, "spr-5")] == ["c"]
    assert [n.id for n in filter_roots(tree, "dark")] == ["c"]


def test_only_roots_surface_even_when_children_match():
    tree = TicketTree(
        [
            make_ticket("p", "SPR-1", "Parent epic", children=[make_ticket("k", "SPR-2", "Kubernetes")]),
            make_ticket("q", "SPR-3", "Kubernetes upgrade"),
        ]
    )
    result = filter_roots(tree, "kube")
    assert [n.id for n in result] == ["q"]
