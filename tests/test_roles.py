"""Tests for roles.py — roots, leaves, service/client split, hub cluster."""

from __future__ import annotations

from topology_layout.graph import DeviceGraph, build_device_graph
from topology_layout.roles import (
    Role,
    classify_leaves,
    classify_roles,
    find_hub_cluster,
    find_leaves,
    find_roots,
)


def make_devices(adjacency: dict[str, list[str]]) -> DeviceGraph:
    """Build a DeviceGraph from an ordered {id: links} mapping."""
    return build_device_graph([{"id": node, "status": "up", "links": links} for node, links in adjacency.items()])


class TestRootsAndLeaves:
    def test_chain(self):
        graph = make_devices({"A": ["B"], "B": ["C"], "C": []})
        assert find_roots(graph) == ["A"]
        assert find_leaves(graph) == ["C"]

    def test_isolated_node_is_root_and_leaf(self):
        graph = make_devices({"solo": []})
        assert find_roots(graph) == ["solo"]
        assert find_leaves(graph) == ["solo"]

    def test_missing_device_is_never_a_leaf(self):
        graph = build_device_graph([{"id": "A", "links": ["X"]}])
        assert find_leaves(graph) == []
        roles = classify_roles(graph)
        assert roles.role_of("X") is Role.NORMAL

    def test_pure_cycle_has_no_roots_or_leaves(self):
        graph = make_devices({"A": ["B"], "B": ["A"]})
        assert find_roots(graph) == []
        assert find_leaves(graph) == []


class TestClassifyLeaves:
    def test_lone_child_is_client_leaf(self):
        graph = make_devices({"A": ["B"], "B": ["C"], "C": []})
        assert classify_leaves(graph, ["C"]) == ([], ["C"])

    def test_leaf_beside_non_leaf_sibling_is_service_leaf(self):
        graph = make_devices({"P": ["L", "M"], "L": [], "M": ["N"], "N": []})
        service, client = classify_leaves(graph, find_leaves(graph))
        assert service == ["L"]
        assert client == ["N"]

    def test_leaf_siblings_do_not_make_service_leaves(self):
        graph = make_devices({"P": ["L1", "L2"], "L1": [], "L2": []})
        assert classify_leaves(graph, find_leaves(graph)) == ([], ["L1", "L2"])

    def test_missing_sibling_counts_as_non_leaf(self):
        graph = build_device_graph([{"id": "P", "links": ["L", "X"]}, {"id": "L"}])
        service, client = classify_leaves(graph, find_leaves(graph))
        assert service == ["L"]
        assert client == []


class TestHubCluster:
    def test_seed_is_children_of_service_leaf_parents(self):
        graph = make_devices({"P": ["L", "M"], "L": [], "M": ["N"], "N": []})
        assert find_hub_cluster(graph, ["L"]) == ["L", "M"]

    def test_fixed_point_expansion(self):
        graph = make_devices(
            {
                "P": ["L", "M", "Q"],
                "L": [],
                "M": ["N"],
                "Q": ["X"],
                "X": ["M"],
                "N": [],
            }
        )
        assert find_hub_cluster(graph, ["L"]) == ["L", "M", "Q", "X"]

    def test_no_service_leaves_no_cluster(self):
        graph = make_devices({"A": ["B"], "B": []})
        assert find_hub_cluster(graph, []) == []


class TestRolePriority:
    def test_chain_roles(self):
        roles = classify_roles(make_devices({"A": ["B"], "B": ["C"], "C": []}))
        assert roles.role_of("A") is Role.ROOT
        assert roles.role_of("B") is Role.NORMAL
        assert roles.role_of("C") is Role.LEAF
        assert roles.client_leaves == ["C"]

    def test_hub_beats_leaf_and_root_beats_hub(self):
        graph = make_devices({"P": ["L", "M"], "L": [], "M": ["N"], "N": []})
        roles = classify_roles(graph)
        assert roles.hubs == ["L", "M"]
        assert roles.role_of("L") is Role.HUB
        assert roles.role_of("M") is Role.HUB
        assert roles.role_of("P") is Role.ROOT
        assert roles.role_of("N") is Role.LEAF

    def test_isolated_node_is_root(self):
        roles = classify_roles(make_devices({"solo": []}))
        assert roles.role_of("solo") is Role.ROOT
