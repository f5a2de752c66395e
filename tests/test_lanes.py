"""Tests for lanes.py — flow groups, lane assignment, collision resolution."""

from __future__ import annotations

import pytest

from topology_layout.graph import DeviceGraph, build_device_graph
from topology_layout.lanes import (
    LEFT_TO_RIGHT,
    RIGHT_TO_LEFT,
    build_flow_groups,
    compute_lanes,
    compute_lanes_for_group,
    nearest_free_lane,
)

# ─── Helpers ──────────────────────────────────────────────────────────────────


def make_devices(adjacency: dict[str, list[str]]) -> DeviceGraph:
    """Build a DeviceGraph from an ordered {id: links} mapping."""
    return build_device_graph([{"id": node, "status": "up", "links": links} for node, links in adjacency.items()])


def diamond() -> tuple[DeviceGraph, dict[str, int]]:
    graph = make_devices({"root": ["a", "b"], "a": ["c"], "b": ["c"], "c": []})
    return graph, {"root": 0, "a": 1, "b": 1, "c": 2}


# ─── Collision Resolution ─────────────────────────────────────────────────────


class TestNearestFreeLane:
    @pytest.mark.parametrize(
        "desired,used,expected",
        [
            (2, set(), 2),
            (2, {2}, 1),
            (2, {1, 2}, 3),
            (0, {0}, 1),
            (1, {0, 1, 2}, 3),
            (3, {1, 2, 3, 4}, 5),
        ],
    )
    def test_lower_side_first(self, desired, used, expected):
        assert nearest_free_lane(desired, used) == expected


# ─── Flow Groups ──────────────────────────────────────────────────────────────


class TestFlowGroups:
    def test_weakly_connected_groups(self):
        graph = make_devices({"a": ["b"], "b": [], "c": ["b"], "x": ["y"], "y": [], "solo": []})
        assert build_flow_groups(graph) == [["a", "b", "c"], ["x", "y"], ["solo"]]

    def test_placeholders_join_their_group(self):
        graph = build_device_graph([{"id": "a", "links": ["ghost"]}, {"id": "z"}])
        assert build_flow_groups(graph) == [["a", "ghost"], ["z"]]


# ─── Lane Assignment ──────────────────────────────────────────────────────────


class TestComputeLanesForGroup:
    def test_right_to_left_diamond(self):
        graph, columns = diamond()
        lanes = compute_lanes_for_group(["root", "a", "b", "c"], graph, columns, RIGHT_TO_LEFT)
        assert lanes == {"c": 0, "a": 0, "b": 1, "root": 1}

    def test_left_to_right_diamond(self):
        graph, columns = diamond()
        lanes = compute_lanes_for_group(["root", "a", "b", "c"], graph, columns, LEFT_TO_RIGHT)
        assert lanes == {"root": 0, "a": 0, "b": 1, "c": 1}

    def test_first_column_sorted(self):
        graph = make_devices({"hub": ["z", "m", "a"], "z": [], "m": [], "a": []})
        columns = {"hub": 0, "z": 1, "m": 1, "a": 1}
        lanes = compute_lanes_for_group(["hub", "z", "m", "a"], graph, columns)
        assert lanes["a"] == 0
        assert lanes["m"] == 1
        assert lanes["z"] == 2
        assert lanes["hub"] == 1

    def test_midpoint_rounds_half_up(self):
        graph = make_devices({"p": ["a", "b"], "a": [], "b": []})
        lanes = compute_lanes_for_group(["p", "a", "b"], graph, {"p": 0, "a": 1, "b": 1})
        assert lanes == {"a": 0, "b": 1, "p": 1}

    def test_no_processed_neighbours_take_smallest_free_lane(self):
        graph = make_devices({"z": ["x"], "x": ["y1", "y2"], "y1": [], "y2": []})
        columns = {"x": 2, "z": 1, "y1": 0, "y2": 0}
        lanes = compute_lanes_for_group(["z", "x", "y1", "y2"], graph, columns)
        assert lanes == {"x": 0, "z": 0, "y1": 0, "y2": 1}

    def test_single_child_keeps_link_straight(self):
        graph = make_devices({"a": ["b"], "b": ["c"], "c": []})
        lanes = compute_lanes_for_group(["a", "b", "c"], graph, {"a": 0, "b": 1, "c": 2})
        assert lanes == {"c": 0, "b": 0, "a": 0}

    def test_lanes_unique_per_column(self):
        graph = make_devices(
            {
                "r": ["a", "b", "c", "d"],
                "a": ["x"],
                "b": ["x"],
                "c": ["x", "y"],
                "d": ["y"],
                "x": [],
                "y": [],
            }
        )
        columns = {"r": 0, "a": 1, "b": 1, "c": 1, "d": 1, "x": 2, "y": 2}
        lanes = compute_lanes_for_group(list(columns), graph, columns)
        seen = {(columns[n], lane) for n, lane in lanes.items()}
        assert len(seen) == len(lanes)


class TestComputeLanes:
    def test_lanes_scoped_per_group(self):
        graph = make_devices({"a": ["b"], "b": [], "x": ["y"], "y": []})
        columns = {"a": 0, "b": 1, "x": 0, "y": 1}
        assignment = compute_lanes(graph, columns)
        assert assignment.as_dict() == {0: {"b": 0, "a": 0}, 1: {"y": 0, "x": 0}}
        assert assignment.lane_of("x") == 0
        assert assignment.group_of("y").index == 1
        assert assignment.groups[0].lane_count == 1

    def test_unknown_node(self):
        graph = make_devices({"a": []})
        with pytest.raises(KeyError):
            compute_lanes(graph, {"a": 0}).lane_of("nope")
