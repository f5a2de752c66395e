"""Graph builder — turns raw device records into a normalised DiGraph.

Steps:
  1. Coerce each record (``Device`` or mapping) and reject malformed input.
  2. Merge duplicate ids (first status wins, links are an ordered union).
  3. Build forward/reverse adjacency on a ``networkx.DiGraph``, dropping
     self-loops and synthesising placeholder devices for dangling targets.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum

import networkx as nx

from topology_layout.errors import InvalidDeviceInputError

logger = logging.getLogger(__name__)


# ─── Device Records ───────────────────────────────────────────────────────────


class DeviceStatus(str, Enum):
    UP = "up"
    DOWN = "down"
    UNKNOWN = "unknown"
    MISSING = "missing"


@dataclass
class Device:
    """A device and its ordered outgoing links.

    ``synthetic`` is only set on placeholders created for link targets that
    were never defined in the input.
    """

    id: str
    status: DeviceStatus = DeviceStatus.UNKNOWN
    links: list[str] = field(default_factory=list)
    synthetic: bool = False

    @property
    def is_placeholder(self) -> bool:
        return self.synthetic or self.status is DeviceStatus.MISSING


def coerce_status(value: object, device_id: str) -> DeviceStatus:
    """Map a raw status value onto ``DeviceStatus``; unknown values become UNKNOWN."""
    if value is None:
        return DeviceStatus.UNKNOWN
    if isinstance(value, DeviceStatus):
        return value
    try:
        return DeviceStatus(str(value).lower())
    except ValueError:
        logger.warning("device %r has unrecognised status %r, using 'unknown'", device_id, value)
        return DeviceStatus.UNKNOWN


def coerce_device(record: object) -> Device:
    """Build a ``Device`` from a ``Device`` or a mapping with id/status/links keys."""
    if isinstance(record, Device):
        raw_id, raw_status, raw_links = record.id, record.status, record.links
        synthetic = record.synthetic
    elif isinstance(record, Mapping):
        if "id" not in record:
            raise InvalidDeviceInputError(f"device record has no 'id': {record!r}")
        raw_id = record["id"]
        raw_status = record.get("status")
        raw_links = record.get("links")
        synthetic = False
    else:
        raise InvalidDeviceInputError(f"device record must be a Device or a mapping, got {type(record).__name__}")

    if not isinstance(raw_id, str) or not raw_id:
        raise InvalidDeviceInputError(f"device id must be a non-empty string, got {raw_id!r}")

    if raw_links is None:
        links: list[str] = []
    elif isinstance(raw_links, (list, tuple)):
        links = list(raw_links)
    else:
        raise InvalidDeviceInputError(f"links of device {raw_id!r} must be a list, got {type(raw_links).__name__}")

    for target in links:
        if not isinstance(target, str) or not target:
            raise InvalidDeviceInputError(f"device {raw_id!r} has an invalid link target {target!r}")

    return Device(id=raw_id, status=coerce_status(raw_status, raw_id), links=links, synthetic=synthetic)


def normalize_devices(devices: Iterable[object]) -> list[Device]:
    """Coerce records and merge duplicate ids.

    The first definition of an id keeps its status and position; later
    definitions only contribute links not already present (ordered union).
    """
    if devices is None or isinstance(devices, (str, bytes, Mapping)):
        raise InvalidDeviceInputError("devices must be an iterable of device records")
    try:
        records = list(devices)
    except TypeError as exc:
        raise InvalidDeviceInputError("devices must be an iterable of device records") from exc

    merged: dict[str, Device] = {}
    for record in records:
        device = coerce_device(record)
        existing = merged.get(device.id)
        if existing is None:
            merged[device.id] = device
            continue
        seen = set(existing.links)
        for target in device.links:
            if target not in seen:
                existing.links.append(target)
                seen.add(target)
    return list(merged.values())


# ─── Device Graph ─────────────────────────────────────────────────────────────


@dataclass
class DeviceGraph:
    """Normalised devices plus their adjacency.

    ``digraph`` iterates nodes in device order (declared devices first, then
    placeholders in order of first reference) and successors in link order;
    every later stage relies on that for deterministic output.
    """

    devices: list[Device]
    digraph: nx.DiGraph

    @property
    def node_ids(self) -> list[str]:
        return list(self.digraph.nodes)

    def device(self, node_id: str) -> Device:
        return self.digraph.nodes[node_id]["data"]

    def is_placeholder(self, node_id: str) -> bool:
        return self.device(node_id).is_placeholder

    @property
    def successors(self) -> dict[str, list[str]]:
        """Forward adjacency: node id → children."""
        return {n: list(self.digraph.successors(n)) for n in self.digraph.nodes}

    @property
    def predecessors(self) -> dict[str, list[str]]:
        """Reverse adjacency: node id → parents."""
        return {n: list(self.digraph.predecessors(n)) for n in self.digraph.nodes}

    @property
    def out_degree(self) -> dict[str, int]:
        return dict(self.digraph.out_degree())

    @property
    def in_degree(self) -> dict[str, int]:
        return dict(self.digraph.in_degree())

    def __len__(self) -> int:
        return self.digraph.number_of_nodes()

    def __contains__(self, node_id: object) -> bool:
        return node_id in self.digraph


def build_device_graph(devices: Iterable[object], synthesize_missing: bool = True) -> DeviceGraph:
    """Normalise ``devices`` and build their adjacency.

    Never fails on graph shape: self-loops are dropped, and an edge to an
    undefined id either creates a placeholder (``synthesize_missing``) or is
    skipped.
    """
    normalized = normalize_devices(devices)
    known = {d.id for d in normalized}

    g: nx.DiGraph = nx.DiGraph()
    for device in normalized:
        g.add_node(device.id, data=device)

    placeholders: list[Device] = []
    dropped = 0
    for device in normalized:
        for target in device.links:
            if target == device.id:
                continue
            if target not in known:
                if not synthesize_missing:
                    dropped += 1
                    continue
                placeholder = Device(id=target, status=DeviceStatus.MISSING, links=[], synthetic=True)
                g.add_node(target, data=placeholder)
                placeholders.append(placeholder)
                known.add(target)
            g.add_edge(device.id, target)

    if placeholders:
        logger.debug("synthesised %d missing device(s): %s", len(placeholders), [p.id for p in placeholders])
    if dropped:
        logger.debug("dropped %d dangling link(s)", dropped)
    logger.debug("device graph: %d nodes, %d edges", g.number_of_nodes(), g.number_of_edges())

    return DeviceGraph(devices=normalized + placeholders, digraph=g)
