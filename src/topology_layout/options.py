"""Layout options shared by the pipeline stages."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass

from topology_layout.contraction import HUB_OUT_DEGREE
from topology_layout.errors import InvalidOptionError

LANE_DIRECTIONS: tuple[str, ...] = ("right-to-left", "left-to-right")


@dataclass(frozen=True)
class LayoutOptions:
    """Knobs for one ``assign_layout`` call.

    Attributes:
        layering_mode: Registered layering strategy name ("scc" or "root-distance").
        prune_hub_back_edges: Drop hub → non-hub edges before SCC detection.
        hub_threshold: Out-degree at which a node counts as a fan-out hub.
        balance_weak_groups: Shift each disconnected group so it ends at the
            global rightmost column ("scc" mode only).
        reconcile_missing: Re-place missing devices next to their neighbours.
        align_hub_cluster: Move every hub-cluster member to the cluster's
            rightmost final column.
        lane_direction: Column order used by lane assignment.
        root_id: Anchor node for "root-distance" mode; defaults to the first device.
    """

    layering_mode: str = "scc"
    prune_hub_back_edges: bool = True
    hub_threshold: int = HUB_OUT_DEGREE
    balance_weak_groups: bool = True
    reconcile_missing: bool = True
    align_hub_cluster: bool = False
    lane_direction: str = "right-to-left"
    root_id: str | None = None

    def __post_init__(self) -> None:
        if isinstance(self.hub_threshold, bool) or not isinstance(self.hub_threshold, int) or self.hub_threshold < 1:
            raise InvalidOptionError(f"hub_threshold must be a positive integer, got {self.hub_threshold!r}")
        if self.lane_direction not in LANE_DIRECTIONS:
            raise InvalidOptionError(
                f"lane_direction must be one of {', '.join(LANE_DIRECTIONS)}, got {self.lane_direction!r}"
            )

    def replace(self, **changes: object) -> LayoutOptions:
        return dataclasses.replace(self, **changes)
