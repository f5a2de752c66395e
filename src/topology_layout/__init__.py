"""Column and lane layout engine for network topology diagrams."""

from topology_layout.contraction import Contraction, contract, kosaraju_components
from topology_layout.errors import (
    InvalidDeviceInputError,
    InvalidOptionError,
    TopologyLayoutError,
    UnknownLayeringModeError,
)
from topology_layout.graph import Device, DeviceGraph, DeviceStatus, build_device_graph, normalize_devices
from topology_layout.lane_gap import LaneMode, compute_lane_gap, get_preset_base_gap
from topology_layout.lanes import FlowGroup, LaneAssignment, compute_lanes
from topology_layout.layering import LayeringStrategy, RootDistanceLayering, SccLongestPathLayering
from topology_layout.layout import Column, LayoutEngine, LayoutRecord, LayoutResult, assign_layout
from topology_layout.options import LayoutOptions
from topology_layout.roles import Role, classify_roles
from topology_layout.validation import ValidationResult, validate_graph

__all__ = [
    "Column",
    "Contraction",
    "Device",
    "DeviceGraph",
    "DeviceStatus",
    "FlowGroup",
    "InvalidDeviceInputError",
    "InvalidOptionError",
    "LaneAssignment",
    "LaneMode",
    "LayeringStrategy",
    "LayoutEngine",
    "LayoutOptions",
    "LayoutRecord",
    "LayoutResult",
    "Role",
    "RootDistanceLayering",
    "SccLongestPathLayering",
    "TopologyLayoutError",
    "UnknownLayeringModeError",
    "ValidationResult",
    "assign_layout",
    "build_device_graph",
    "classify_roles",
    "compute_lane_gap",
    "compute_lanes",
    "contract",
    "get_preset_base_gap",
    "kosaraju_components",
    "normalize_devices",
    "validate_graph",
]
