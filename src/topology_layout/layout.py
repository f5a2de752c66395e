"""Layout module — column layout pipeline for device topologies.

Phases:
  1. Graph building (normalise records, synthesise missing devices)
  2. Cycle contraction (hub back-edge pruning + Kosaraju)
  3. Layering (pluggable strategy, SCC longest-path by default)
  4. Missing-node reconciliation
  5. Role classification (roots, hub cluster, leaves)
  6. Lane assignment, on request, per flow group

Every call recomputes from the current device set; nothing is cached
between calls.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from topology_layout.contraction import Contraction, contract
from topology_layout.graph import Device, DeviceGraph, build_device_graph
from topology_layout.lanes import LaneAssignment, compute_lanes
from topology_layout.layering import get_strategy
from topology_layout.options import LayoutOptions
from topology_layout.reconcile import reconcile_missing_nodes
from topology_layout.roles import Role, RoleClassification, classify_roles
from topology_layout.validation import ValidationResult, validate_device_graph

logger = logging.getLogger(__name__)


# ─── Layout Records ───────────────────────────────────────────────────────────


@dataclass
class LayoutRecord:
    """Placement of one device.

    ``base_column`` is the column assigned by the layering strategy (the
    component depth in scc mode); ``final_column`` adds the weak-group shift
    or is the reconciled column of a missing device.
    """

    node_id: str
    base_column: int
    final_column: int
    component_index: int
    role: Role


@dataclass
class Column:
    """A rendered column: its index and the devices in it, in device order."""

    index: int
    node_ids: list[str]


@dataclass
class LayoutResult:
    devices: list[Device]
    graph: DeviceGraph
    contraction: Contraction
    roles: RoleClassification
    records: dict[str, LayoutRecord]
    options: LayoutOptions = field(default_factory=LayoutOptions)

    @property
    def columns(self) -> list[Column]:
        """Devices grouped by final column, ascending."""
        by_col: dict[int, list[str]] = {}
        for device in self.devices:
            by_col.setdefault(self.records[device.id].final_column, []).append(device.id)
        return [Column(index=col, node_ids=by_col[col]) for col in sorted(by_col)]

    @property
    def components(self) -> list[list[str]]:
        return self.contraction.components

    @property
    def scc_count(self) -> int:
        return self.contraction.count

    @property
    def roots(self) -> set[str]:
        return set(self.roles.roots)

    @property
    def hubs(self) -> set[str]:
        return set(self.roles.hubs)

    @property
    def leaves(self) -> set[str]:
        return set(self.roles.leaves)

    @property
    def service_leaves(self) -> set[str]:
        return set(self.roles.service_leaves)

    @property
    def client_leaves(self) -> set[str]:
        return set(self.roles.client_leaves)

    def column_of(self, node_id: str) -> int:
        return self.records[node_id].final_column

    def final_columns(self) -> dict[str, int]:
        return {node_id: rec.final_column for node_id, rec in self.records.items()}

    def lanes(self, direction: str | None = None) -> LaneAssignment:
        """Per flow group lane maps, computed on the full (unpruned) graph."""
        return compute_lanes(self.graph, self.final_columns(), direction or self.options.lane_direction)


# ─── Full Layout Pipeline ─────────────────────────────────────────────────────


def _align_hub_cluster(final: dict[str, int], hubs: list[str]) -> None:
    """Pull every hub-cluster member into the cluster's rightmost column."""
    if not hubs:
        return
    target = max(final[h] for h in hubs)
    for h in hubs:
        final[h] = target


def layout_device_graph(graph: DeviceGraph, options: LayoutOptions | None = None) -> LayoutResult:
    """Run contraction, layering, reconciliation and role tagging on ``graph``."""
    opts = options or LayoutOptions()

    contraction = contract(graph, prune_hubs=opts.prune_hub_back_edges, hub_threshold=opts.hub_threshold)
    assignment = get_strategy(opts).assign(graph, contraction)

    final = assignment.final
    if opts.reconcile_missing:
        final = reconcile_missing_nodes(graph, final, contraction.layout_graph)

    roles = classify_roles(graph)
    if opts.align_hub_cluster:
        final = dict(final)
        _align_hub_cluster(final, roles.hubs)

    records = {
        node: LayoutRecord(
            node_id=node,
            base_column=assignment.base[node],
            final_column=final[node],
            component_index=contraction.component_index[node],
            role=roles.role_of(node),
        )
        for node in graph.digraph.nodes
    }

    logger.debug(
        "layout: %d devices, %d components, %d roots, %d hubs, %d leaves",
        len(records),
        contraction.count,
        len(roles.roots),
        len(roles.hubs),
        len(roles.leaves),
    )

    return LayoutResult(
        devices=graph.devices,
        graph=graph,
        contraction=contraction,
        roles=roles,
        records=records,
        options=opts,
    )


def assign_layout(devices: Iterable[object], options: LayoutOptions | None = None) -> LayoutResult:
    """Lay out raw device records.

    Raises ``InvalidDeviceInputError`` for malformed input before any stage
    runs; dangling links, self-loops and cycles are never errors.
    """
    return layout_device_graph(build_device_graph(devices), options)


class LayoutEngine:
    """Layout pipeline bound to one set of options."""

    def __init__(self, options: LayoutOptions | None = None) -> None:
        self.options = options or LayoutOptions()

    def layout(self, devices: Iterable[object]) -> LayoutResult:
        return assign_layout(devices, self.options)

    def validate(self, devices: Iterable[object]) -> ValidationResult:
        return validate_device_graph(build_device_graph(devices, synthesize_missing=False))
