"""Lane-gap sizing — pixel spacing between parallel routed connectors.

Called by the renderer with live geometry, after layout:

  fixed     → preset base gap
  flex      → 90% of span / (connections + 1)
  adaptive  → min(preset base gap, flex gap)

``flex`` and ``adaptive`` fall back to the preset base gap when there is at
most one connection or the span is not a positive finite number.
"""

from __future__ import annotations

import math
from enum import Enum


class LaneMode(str, Enum):
    FIXED = "fixed"
    FLEX = "flex"
    ADAPTIVE = "adaptive"


PRESET_GAPS: dict[str, int] = {"wide": 40, "medium": 28, "narrow": 18}
DEFAULT_PRESET_GAP: int = 28
FLEX_FILL_RATIO: float = 0.9


def get_preset_base_gap(preset: object) -> int:
    """Unscaled gap for a preset name; unknown presets get the medium gap."""
    return PRESET_GAPS.get(preset, DEFAULT_PRESET_GAP) if isinstance(preset, str) else DEFAULT_PRESET_GAP


def _usable_span(span: object) -> bool:
    return isinstance(span, (int, float)) and not isinstance(span, bool) and math.isfinite(span) and span > 0


def flex_gap(span: float, connection_count: int) -> float:
    return (span / (connection_count + 1)) * FLEX_FILL_RATIO


def compute_lane_gap(
    mode: LaneMode | str,
    preset: str,
    scale: float | None,
    connection_count: int,
    span: float,
) -> float:
    """Spacing in pixels between connector lanes.

    Unrecognised modes behave like ``adaptive``; a falsy ``scale`` counts as 1.
    """
    base_gap = get_preset_base_gap(preset) * (scale or 1)
    mode_name = mode.value if isinstance(mode, LaneMode) else mode

    if mode_name == LaneMode.FIXED.value:
        return base_gap

    if connection_count <= 1 or not _usable_span(span):
        return base_gap

    gap = flex_gap(span, connection_count)
    if mode_name == LaneMode.FLEX.value:
        return gap
    return min(base_gap, gap)
