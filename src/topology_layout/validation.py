"""Graph validator — advisory structural diagnostics.

Runs on the declared devices only (links to undefined ids are ignored) and
never touches layout state.

Errors:
  - no roots (no starting point)
  - no leaves (no end point)
Warnings:
  - strongly connected component larger than ``LARGE_SCC_SIZE``
  - at least ``BIDIRECTIONAL_PAIR_LIMIT`` bidirectional pairs
  - more than ``HUB_LIKE_LIMIT`` nodes with in-degree >= ``HUB_LIKE_IN_DEGREE``
  - weak subcomponent with size in (``SMALL_FRAGMENT_SIZE``, ``DOMINANT_FRACTION`` * n)
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from topology_layout.contraction import kosaraju_components
from topology_layout.graph import DeviceGraph, build_device_graph
from topology_layout.traversal import weak_groups

LARGE_SCC_SIZE: int = 3
BIDIRECTIONAL_PAIR_LIMIT: int = 3
HUB_LIKE_IN_DEGREE: int = 2
HUB_LIKE_LIMIT: int = 6
SMALL_FRAGMENT_SIZE: int = 2
DOMINANT_FRACTION: float = 0.7


@dataclass
class ValidationResult:
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    def as_dict(self) -> dict[str, object]:
        return {"ok": self.ok, "errors": list(self.errors), "warnings": list(self.warnings)}


def count_bidirectional_pairs(graph: DeviceGraph) -> int:
    """Unordered pairs {a, b} with both a → b and b → a."""
    g = graph.digraph
    return sum(1 for a, b in g.edges() if g.has_edge(b, a)) // 2


def validate_device_graph(graph: DeviceGraph) -> ValidationResult:
    g = graph.digraph
    result = ValidationResult()

    roots = [n for n, degree in g.in_degree() if degree == 0]
    leaves = [n for n, degree in g.out_degree() if degree == 0]
    if not roots:
        result.errors.append("No roots detected. The graph has no starting point.")
    if not leaves:
        result.errors.append("No leaves detected. The graph has no end point.")

    large = [members for members in kosaraju_components(g) if len(members) > LARGE_SCC_SIZE]
    if large:
        result.warnings.append(
            f"Large strongly-connected cycles detected ({len(large)}). Layout may not be strictly left→right."
        )

    pairs = count_bidirectional_pairs(graph)
    if pairs >= BIDIRECTIONAL_PAIR_LIMIT:
        result.warnings.append(f"Graph contains many bidirectional edges ({pairs}). This may indicate a mesh.")

    hub_like = sum(1 for _, degree in g.in_degree() if degree >= HUB_LIKE_IN_DEGREE)
    if hub_like > HUB_LIKE_LIMIT:
        result.warnings.append(
            f"Graph has {hub_like} hub-like nodes (incoming ≥ {HUB_LIKE_IN_DEGREE}). This might not be a simple flow."
        )

    total = g.number_of_nodes()
    for members in weak_groups(g):
        size = len(members)
        if SMALL_FRAGMENT_SIZE < size < total * DOMINANT_FRACTION:
            result.warnings.append(
                f"Subcomponent of size {size} detected. It may not align cleanly with the main flow."
            )

    return result


def validate_graph(devices: Iterable[object]) -> ValidationResult:
    """Validate raw device records. Malformed input raises ``InvalidDeviceInputError``."""
    return validate_device_graph(build_device_graph(devices, synthesize_missing=False))
