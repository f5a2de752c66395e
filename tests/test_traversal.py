"""Tests for traversal.py — shared iterative DFS helpers and weak groups."""

from __future__ import annotations

import networkx as nx

from topology_layout.traversal import dfs_postorder, dfs_preorder, finish_order, weak_groups


def make_graph(*edges: tuple[str, str]) -> nx.DiGraph:
    """Build a DiGraph from a list of (src, tgt) string pairs."""
    g: nx.DiGraph = nx.DiGraph()
    for src, tgt in edges:
        g.add_edge(src, tgt)
    return g


class TestDfs:
    def test_postorder_matches_recursive_order(self):
        g = make_graph(("a", "b"), ("a", "c"), ("b", "d"))
        assert list(dfs_postorder("a", g.successors, set())) == ["d", "b", "c", "a"]

    def test_preorder_matches_recursive_order(self):
        g = make_graph(("a", "b"), ("a", "c"), ("b", "d"))
        assert list(dfs_preorder("a", g.successors, set())) == ["a", "b", "d", "c"]

    def test_shared_visited_set(self):
        g = make_graph(("a", "b"), ("c", "b"))
        visited: set[str] = set()
        assert list(dfs_postorder("a", g.successors, visited)) == ["b", "a"]
        assert list(dfs_postorder("c", g.successors, visited)) == ["c"]
        assert list(dfs_postorder("a", g.successors, visited)) == []

    def test_cycle_terminates(self):
        g = make_graph(("a", "b"), ("b", "c"), ("c", "a"))
        assert list(dfs_preorder("a", g.successors, set())) == ["a", "b", "c"]

    def test_deep_chain_does_not_recurse(self):
        edges = [(f"n{i}", f"n{i + 1}") for i in range(5000)]
        g = make_graph(*edges)
        order = list(dfs_postorder("n0", g.successors, set()))
        assert order[0] == "n5000"
        assert order[-1] == "n0"

    def test_finish_order_covers_all_nodes(self):
        g = make_graph(("a", "b"), ("c", "d"))
        assert finish_order(g.nodes, g.successors) == ["b", "a", "d", "c"]


class TestWeakGroups:
    def test_groups_follow_node_order(self):
        g = make_graph(("x", "y"), ("a", "b"), ("b", "y"))
        g.add_node("lonely")
        assert weak_groups(g) == [["x", "y", "a", "b"], ["lonely"]]

    def test_empty_graph(self):
        assert weak_groups(nx.DiGraph()) == []
