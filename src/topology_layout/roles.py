"""Role classifier — roots, leaves and the hub cluster of the full graph."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from topology_layout.graph import DeviceGraph


class Role(str, Enum):
    ROOT = "root"
    HUB = "hub"
    LEAF = "leaf"
    NORMAL = "normal"


def find_roots(graph: DeviceGraph) -> list[str]:
    """Nodes with no incoming edge."""
    return [n for n, degree in graph.digraph.in_degree() if degree == 0]


def find_leaves(graph: DeviceGraph) -> list[str]:
    """Nodes with no outgoing edge, excluding placeholders.

    A placeholder for an undefined device never presents as a terminal leaf.
    """
    return [n for n, degree in graph.digraph.out_degree() if degree == 0 and not graph.is_placeholder(n)]


def classify_leaves(graph: DeviceGraph, leaves: list[str]) -> tuple[list[str], list[str]]:
    """Split ``leaves`` into (service_leaves, client_leaves).

    A leaf is a service leaf when one of its parents has another child that
    is not a leaf: a side output of infrastructure rather than a terminal
    consumer.
    """
    g = graph.digraph
    leaf_set = set(leaves)
    service: list[str] = []
    client: list[str] = []

    for leaf in leaves:
        is_service = any(
            sibling != leaf and sibling not in leaf_set
            for parent in g.predecessors(leaf)
            for sibling in g.successors(parent)
        )
        (service if is_service else client).append(leaf)

    return service, client


def find_hub_cluster(graph: DeviceGraph, service_leaves: list[str]) -> list[str]:
    """Tightly interconnected core around the service leaves.

    Seed with every child of every parent of a service leaf, then keep adding
    nodes that have both a parent and a child inside the set until nothing
    changes. Returned in graph node order.
    """
    g = graph.digraph
    cluster: set[str] = set()
    for leaf in service_leaves:
        for parent in g.predecessors(leaf):
            cluster.update(g.successors(parent))

    changed = bool(cluster)
    while changed:
        changed = False
        for node in g.nodes:
            if node in cluster:
                continue
            has_child_in = any(c in cluster for c in g.successors(node))
            has_parent_in = any(p in cluster for p in g.predecessors(node))
            if has_child_in and has_parent_in:
                cluster.add(node)
                changed = True

    return [n for n in g.nodes if n in cluster]


@dataclass
class RoleClassification:
    roots: list[str] = field(default_factory=list)
    leaves: list[str] = field(default_factory=list)
    service_leaves: list[str] = field(default_factory=list)
    client_leaves: list[str] = field(default_factory=list)
    hubs: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        self._roots = set(self.roots)
        self._hubs = set(self.hubs)
        self._leaves = set(self.leaves)

    def role_of(self, node_id: str) -> Role:
        """Root takes priority over hub, hub over leaf."""
        if node_id in self._roots:
            return Role.ROOT
        if node_id in self._hubs:
            return Role.HUB
        if node_id in self._leaves:
            return Role.LEAF
        return Role.NORMAL


def classify_roles(graph: DeviceGraph) -> RoleClassification:
    roots = find_roots(graph)
    leaves = find_leaves(graph)
    service, client = classify_leaves(graph, leaves)
    hubs = find_hub_cluster(graph, service)
    return RoleClassification(
        roots=roots,
        leaves=leaves,
        service_leaves=service,
        client_leaves=client,
        hubs=hubs,
    )
