"""Cycle contraction — strongly connected components of the device graph.

Phases:
  1. Hub back-edge pruning (optional): drop every hub → non-hub edge so a
     single high fan-out node cannot pull unrelated branches into one cycle.
  2. Kosaraju: DFS finish order over forward edges, then DFS over reverse
     edges in reverse finish order; each new root starts a component.

The pruned graph is only used for contraction and layering. Roles, lanes and
validation always look at the full graph.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import networkx as nx

from topology_layout.graph import DeviceGraph
from topology_layout.traversal import dfs_preorder, finish_order

logger = logging.getLogger(__name__)

HUB_OUT_DEGREE: int = 4  # out-degree at which a node counts as a fan-out hub


# ─── Hub Back-Edge Pruning ────────────────────────────────────────────────────


def find_fanout_hubs(graph: nx.DiGraph, threshold: int = HUB_OUT_DEGREE) -> set[str]:
    """Nodes whose out-degree is at least ``threshold``."""
    return {node for node, degree in graph.out_degree() if degree >= threshold}


def prune_hub_back_edges(
    graph: nx.DiGraph,
    threshold: int = HUB_OUT_DEGREE,
) -> tuple[nx.DiGraph, list[tuple[str, str]], set[str]]:
    """Copy ``graph`` without its hub → non-hub edges.

    Returns (pruned_graph, pruned_edges, hubs). Node order and the order of
    the surviving edges are preserved.
    """
    hubs = find_fanout_hubs(graph, threshold)
    pruned_edges = [(src, tgt) for src, tgt in graph.edges() if src in hubs and tgt not in hubs]

    pruned = graph.copy()
    pruned.remove_edges_from(pruned_edges)
    return pruned, pruned_edges, hubs


# ─── Kosaraju SCC ─────────────────────────────────────────────────────────────


def kosaraju_components(graph: nx.DiGraph) -> list[list[str]]:
    """Strongly connected components in Kosaraju discovery order.

    Members of each component are listed in reverse-graph DFS preorder.
    Output depends only on node and adjacency iteration order of ``graph``.
    """
    order = finish_order(graph.nodes, graph.successors)

    visited: set[str] = set()
    components: list[list[str]] = []
    for node in reversed(order):
        if node in visited:
            continue
        components.append(list(dfs_preorder(node, graph.predecessors, visited)))
    return components


# ─── Contraction Result ───────────────────────────────────────────────────────


@dataclass
class Contraction:
    """Components of the (optionally pruned) layout graph.

    Attributes:
        components: Component index → member ids (non-empty, ordered).
        component_index: Node id → component index.
        layout_graph: The graph SCCs were computed on (pruned or full).
        pruned_edges: Hub → non-hub edges removed before SCC detection.
        hubs: Fan-out hubs found by the pruning pass.
    """

    components: list[list[str]]
    component_index: dict[str, int]
    layout_graph: nx.DiGraph
    pruned_edges: list[tuple[str, str]] = field(default_factory=list)
    hubs: set[str] = field(default_factory=set)

    @property
    def count(self) -> int:
        return len(self.components)

    def members(self, node_id: str) -> list[str]:
        return self.components[self.component_index[node_id]]


def contract(graph: DeviceGraph, prune_hubs: bool = True, hub_threshold: int = HUB_OUT_DEGREE) -> Contraction:
    """Run (optional) hub pruning followed by Kosaraju on ``graph``."""
    if prune_hubs:
        layout_graph, pruned_edges, hubs = prune_hub_back_edges(graph.digraph, hub_threshold)
    else:
        layout_graph, pruned_edges, hubs = graph.digraph, [], set()

    components = kosaraju_components(layout_graph)
    component_index = {node: idx for idx, members in enumerate(components) for node in members}

    logger.debug(
        "contraction: %d components from %d nodes (%d hub edge(s) pruned)",
        len(components),
        len(component_index),
        len(pruned_edges),
    )

    return Contraction(
        components=components,
        component_index=component_index,
        layout_graph=layout_graph,
        pruned_edges=pruned_edges,
        hubs=hubs,
    )
