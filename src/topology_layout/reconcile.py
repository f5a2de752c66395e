"""Missing-node reconciliation.

Placeholders for undefined devices are singleton components with no
dependency chain of their own, so their component depth says little about
where they belong. After layering, each one is moved next to its neighbours
in the contracted (hub-pruned) graph:

  parents only   → max(parent columns) + 1
  children only  → min(child columns) - 1
  both           → floor((max(parents) + min(children)) / 2)
  neither        → unchanged
"""

from __future__ import annotations

import logging

import networkx as nx

from topology_layout.graph import DeviceGraph

logger = logging.getLogger(__name__)


def reconciled_column(parent_cols: list[int], child_cols: list[int]) -> int | None:
    """Column for a placeholder given its neighbours' columns, or None to keep it."""
    if parent_cols and child_cols:
        return (max(parent_cols) + min(child_cols)) // 2
    if parent_cols:
        return max(parent_cols) + 1
    if child_cols:
        return min(child_cols) - 1
    return None


def reconcile_missing_nodes(
    graph: DeviceGraph, final: dict[str, int], layout_graph: nx.DiGraph | None = None
) -> dict[str, int]:
    """Return a copy of ``final`` with every placeholder re-placed.

    Neighbours are read from ``layout_graph``, the graph the columns were
    layered on (the full graph when omitted). Placeholders are processed in
    graph order and see columns already updated for earlier placeholders.
    """
    g = graph.digraph if layout_graph is None else layout_graph
    columns = dict(final)
    moved = 0

    for node in g.nodes:
        if not graph.is_placeholder(node):
            continue
        parent_cols = [columns[p] for p in g.predecessors(node)]
        child_cols = [columns[c] for c in g.successors(node)]
        col = reconciled_column(parent_cols, child_cols)
        if col is None:
            continue
        if col != columns[node]:
            moved += 1
        columns[node] = col

    if moved:
        logger.debug("reconciled %d missing device column(s)", moved)
    return columns
