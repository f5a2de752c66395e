"""Lane assignment — vertical slot of each device inside its flow group.

A flow group is a weakly connected set of devices. Within a group, columns
are visited in one direction (rightmost first by default) and every device
is given a lane:

  - first visited column: ids in sorted order get lanes 0, 1, 2, ...
  - later columns, per device in sorted order, from the lanes of its
    neighbours in already visited columns (children when going right to
    left, parents when going left to right):
        one lane      → that lane (keeps a pass-through link straight)
        two or more   → midpoint of the extremes, halves rounded up
        none          → smallest lane unused in this column
  - a taken lane is resolved by probing desired-1, desired+1, desired-2, ...
    (never below 0).

Lanes are final once set; a later column cannot move an earlier one.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field

from topology_layout.graph import DeviceGraph
from topology_layout.traversal import weak_groups

RIGHT_TO_LEFT = "right-to-left"
LEFT_TO_RIGHT = "left-to-right"


@dataclass
class FlowGroup:
    """One weakly connected region with its lane map."""

    index: int
    node_ids: list[str]
    lanes: dict[str, int] = field(default_factory=dict)

    @property
    def lane_count(self) -> int:
        return max(self.lanes.values(), default=-1) + 1


@dataclass
class LaneAssignment:
    groups: list[FlowGroup]
    direction: str = RIGHT_TO_LEFT

    def group_of(self, node_id: str) -> FlowGroup:
        for group in self.groups:
            if node_id in group.lanes:
                return group
        raise KeyError(node_id)

    def lane_of(self, node_id: str) -> int:
        return self.group_of(node_id).lanes[node_id]

    def as_dict(self) -> dict[int, dict[str, int]]:
        """Flow group index → {node id: lane}."""
        return {group.index: dict(group.lanes) for group in self.groups}


def build_flow_groups(graph: DeviceGraph) -> list[list[str]]:
    """Weakly connected device groups of the full graph, in graph order."""
    return weak_groups(graph.digraph)


def nearest_free_lane(desired: int, used: set[int]) -> int:
    """``desired`` if free, else the closest free lane, lower side first."""
    if desired not in used:
        return desired
    offset = 1
    while True:
        down = desired - offset
        if down >= 0 and down not in used:
            return down
        up = desired + offset
        if up not in used:
            return up
        offset += 1


def _desired_lane(neighbor_lanes: list[int], used: set[int]) -> int:
    if len(neighbor_lanes) == 1:
        return neighbor_lanes[0]
    if neighbor_lanes:
        return (min(neighbor_lanes) + max(neighbor_lanes) + 1) // 2
    lane = 0
    while lane in used:
        lane += 1
    return lane


def compute_lanes_for_group(
    group: list[str],
    graph: DeviceGraph,
    columns: Mapping[str, int],
    direction: str = RIGHT_TO_LEFT,
) -> dict[str, int]:
    """Assign lanes to the devices of one flow group."""
    g = graph.digraph
    members = set(group)
    neighbors = g.successors if direction == RIGHT_TO_LEFT else g.predecessors

    by_column: dict[int, list[str]] = {}
    for node in group:
        by_column.setdefault(columns[node], []).append(node)
    visit_order = sorted(by_column, reverse=direction == RIGHT_TO_LEFT)

    lanes: dict[str, int] = {}
    for position, col in enumerate(visit_order):
        col_nodes = sorted(by_column[col])
        used: set[int] = set()

        if position == 0:
            for lane, node in enumerate(col_nodes):
                lanes[node] = lane
            continue

        assigned_this_col: set[str] = set()
        for node in col_nodes:
            neighbor_lanes = [
                lanes[nb] for nb in neighbors(node) if nb in members and nb in lanes and nb not in assigned_this_col
            ]
            lane = nearest_free_lane(_desired_lane(neighbor_lanes, used), used)
            used.add(lane)
            lanes[node] = lane
            assigned_this_col.add(node)

    return lanes


def compute_lanes(
    graph: DeviceGraph,
    columns: Mapping[str, int],
    direction: str = RIGHT_TO_LEFT,
) -> LaneAssignment:
    """Lanes for every flow group of ``graph`` given final ``columns``."""
    groups = [
        FlowGroup(index=idx, node_ids=members, lanes=compute_lanes_for_group(members, graph, columns, direction))
        for idx, members in enumerate(build_flow_groups(graph))
    ]
    return LaneAssignment(groups=groups, direction=direction)
