"""Layering — assign a column (rank) to every device.

Default strategy ("scc"):
  1. Condense the contracted components into a DAG.
  2. Longest-path depth per component (Kahn's algorithm).
  3. Weak-group balancing: shift every disconnected group of the DAG so its
     deepest component lands on the global maximum depth.
  4. Broadcast component depth (base) and depth + delta (final) to members.

Alternative strategy ("root-distance"): signed BFS distance from a root node,
downstream positive and upstream negative.

Both implement ``LayeringStrategy`` and are looked up by mode name through
``get_strategy``.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol

import networkx as nx

from topology_layout.contraction import Contraction
from topology_layout.errors import UnknownLayeringModeError
from topology_layout.graph import DeviceGraph
from topology_layout.options import LayoutOptions
from topology_layout.traversal import weak_groups

logger = logging.getLogger(__name__)


@dataclass
class ColumnAssignment:
    """Per-node columns produced by a layering strategy.

    Attributes:
        base: Node id → column before any group shift.
        final: Node id → column after group shifting.
        component_depth: Component index → longest-path depth (scc mode only).
        component_delta: Component index → weak-group shift (scc mode only).
    """

    base: dict[str, int]
    final: dict[str, int]
    component_depth: dict[int, int] = field(default_factory=dict)
    component_delta: dict[int, int] = field(default_factory=dict)

    @property
    def max_column(self) -> int:
        return max(self.final.values(), default=0)


class LayeringStrategy(Protocol):
    """Protocol that every layering strategy implements."""

    name: str

    def assign(self, graph: DeviceGraph, contraction: Contraction) -> ColumnAssignment:
        """Compute base and final columns for every node of ``graph``."""
        ...


# ─── Condensed DAG ────────────────────────────────────────────────────────────


def build_condensed_dag(contraction: Contraction) -> nx.DiGraph:
    """One node per component, one deduplicated edge per cross-component link.

    Node ``i`` of the result is ``contraction.components[i]``.
    """
    return nx.condensation(contraction.layout_graph, scc=[set(members) for members in contraction.components])


def longest_path_depths(dag: nx.DiGraph) -> dict[int, int]:
    """Longest path length from any source to each node (Kahn's algorithm).

    A node sits as far right as its longest dependency chain requires.
    """
    depth: dict[int, int] = {node: 0 for node in dag.nodes}
    remaining: dict[int, int] = dict(dag.in_degree())
    queue = deque(node for node in dag.nodes if remaining[node] == 0)

    while queue:
        node = queue.popleft()
        for nxt in dag.successors(node):
            if depth[node] + 1 > depth[nxt]:
                depth[nxt] = depth[node] + 1
            remaining[nxt] -= 1
            if remaining[nxt] == 0:
                queue.append(nxt)

    return depth


def weak_group_deltas(dag: nx.DiGraph, depth: dict[int, int]) -> dict[int, int]:
    """Shift per node so each weak group ends at the global maximum depth."""
    global_max = max(depth.values(), default=0)
    delta: dict[int, int] = {}
    for group in weak_groups(dag):
        shift = global_max - max(depth[node] for node in group)
        for node in group:
            delta[node] = shift
    return delta


# ─── Strategies ───────────────────────────────────────────────────────────────


class SccLongestPathLayering:
    """Longest-path depth over the component DAG, with weak-group balancing."""

    name = "scc"

    def __init__(self, balance: bool = True) -> None:
        self.balance = balance

    def assign(self, graph: DeviceGraph, contraction: Contraction) -> ColumnAssignment:
        dag = build_condensed_dag(contraction)
        depth = longest_path_depths(dag)
        delta = weak_group_deltas(dag, depth) if self.balance else {c: 0 for c in dag.nodes}

        base: dict[str, int] = {}
        final: dict[str, int] = {}
        for node in graph.digraph.nodes:
            comp = contraction.component_index[node]
            base[node] = depth[comp]
            final[node] = depth[comp] + delta[comp]

        logger.debug(
            "scc layering: %d components, depth 0..%d, %d cross-component edge(s)",
            dag.number_of_nodes(),
            max(depth.values(), default=0),
            dag.number_of_edges(),
        )
        return ColumnAssignment(base=base, final=final, component_depth=depth, component_delta=delta)


class RootDistanceLayering:
    """Signed BFS depth relative to one anchor node.

    Downstream nodes get their forward distance, upstream nodes the negated
    reverse distance; a node reachable both ways takes the shorter one (ties
    go upstream). Unreachable nodes sit at 0. Final columns are shifted so
    the leftmost column is 0.
    """

    name = "root-distance"

    def __init__(self, root_id: str | None = None) -> None:
        self.root_id = root_id

    def _anchor(self, graph: DeviceGraph) -> str | None:
        g = graph.digraph
        if self.root_id is not None and self.root_id in g:
            return self.root_id
        return next(iter(g.nodes), None)

    def assign(self, graph: DeviceGraph, contraction: Contraction) -> ColumnAssignment:
        g = graph.digraph
        anchor = self._anchor(graph)
        if anchor is None:
            return ColumnAssignment(base={}, final={})

        down = nx.single_source_shortest_path_length(g, anchor)
        up = nx.single_source_shortest_path_length(g.reverse(copy=False), anchor)

        base: dict[str, int] = {}
        for node in g.nodes:
            du, dd = up.get(node), down.get(node)
            if du is None and dd is None:
                base[node] = 0
            elif dd is None:
                base[node] = -du
            elif du is None:
                base[node] = dd
            else:
                base[node] = -du if du <= dd else dd

        offset = -min(base.values())
        final = {node: col + offset for node, col in base.items()}

        logger.debug("root-distance layering from %r: columns 0..%d", anchor, max(final.values()))
        return ColumnAssignment(base=base, final=final)


STRATEGIES: dict[str, Callable[[LayoutOptions], LayeringStrategy]] = {
    SccLongestPathLayering.name: lambda opts: SccLongestPathLayering(balance=opts.balance_weak_groups),
    RootDistanceLayering.name: lambda opts: RootDistanceLayering(root_id=opts.root_id),
}


def get_strategy(options: LayoutOptions) -> LayeringStrategy:
    """Instantiate the strategy registered under ``options.layering_mode``."""
    factory = STRATEGIES.get(options.layering_mode)
    if factory is None:
        raise UnknownLayeringModeError(
            f"unknown layering mode {options.layering_mode!r} (expected one of {', '.join(STRATEGIES)})"
        )
    return factory(options)
