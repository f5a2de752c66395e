"""Shared graph traversals.

Every stage walks graphs through these helpers instead of hand-rolled
recursive DFS, so traversal order is defined in exactly one place.
Traversals are iterative and follow the neighbour order returned by the
``neighbors`` callable, visiting nodes in the same order a recursive DFS
would.
"""

from __future__ import annotations

from collections.abc import Callable, Hashable, Iterable, Iterator
from typing import TypeVar

import networkx as nx

N = TypeVar("N", bound=Hashable)

Neighbors = Callable[[N], Iterable[N]]


def dfs_postorder(start: N, neighbors: Neighbors, visited: set[N]) -> Iterator[N]:
    """Yield nodes reachable from ``start`` in DFS finish order.

    ``visited`` is shared across calls and updated in place; nodes already
    in it are neither entered nor yielded.
    """
    if start in visited:
        return
    visited.add(start)
    stack: list[tuple[N, Iterator[N]]] = [(start, iter(neighbors(start)))]
    while stack:
        node, children = stack[-1]
        for child in children:
            if child not in visited:
                visited.add(child)
                stack.append((child, iter(neighbors(child))))
                break
        else:
            stack.pop()
            yield node


def dfs_preorder(start: N, neighbors: Neighbors, visited: set[N]) -> Iterator[N]:
    """Yield nodes reachable from ``start`` in DFS discovery order."""
    if start in visited:
        return
    visited.add(start)
    yield start
    stack: list[Iterator[N]] = [iter(neighbors(start))]
    while stack:
        for child in stack[-1]:
            if child not in visited:
                visited.add(child)
                yield child
                stack.append(iter(neighbors(child)))
                break
        else:
            stack.pop()


def finish_order(nodes: Iterable[N], neighbors: Neighbors) -> list[N]:
    """DFS finish order over every node, starting roots in ``nodes`` order."""
    visited: set[N] = set()
    order: list[N] = []
    for node in nodes:
        order.extend(dfs_postorder(node, neighbors, visited))
    return order


def weak_groups(graph: nx.DiGraph) -> list[list]:
    """Weakly connected node groups.

    Groups are ordered by their first node in ``graph`` iteration order and
    members keep that order too.
    """
    position = {node: i for i, node in enumerate(graph.nodes)}
    groups = [sorted(members, key=position.__getitem__) for members in nx.weakly_connected_components(graph)]
    groups.sort(key=lambda members: position[members[0]])
    return groups
