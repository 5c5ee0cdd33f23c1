"""Bubble placement, sizing and coloring for the regional map.

Placement is table driven and lossy: a region that is neither in the
coordinate table nor carries lat/lon is left off the map. It still counts
towards the min/max used for scaling, and it is reported in
`BubbleLayout.unmapped` so callers can show how many regions are missing.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from core.aggregation import SegmentAggregate
from core.coordinates import REGION_COORDINATES, CoordinateTable, lookup_region, project_lat_lon

logger = logging.getLogger(__name__)

COLOR_SCHEMES: Dict[str, Tuple[str, ...]] = {
    "blue": ("#E0F2FE", "#BAE6FD", "#7DD3FC", "#38BDF8", "#0EA5E9", "#0284C7"),
    "green": ("#DCFCE7", "#BBF7D0", "#86EFAC", "#4ADE80", "#22C55E", "#16A34A"),
    "red": ("#FEE2E2", "#FECACA", "#FCA5A5", "#F87171", "#EF4444", "#DC2626"),
    "purple": ("#F3E8FF", "#E9D5FF", "#C4B5FD", "#A78BFA", "#8B5CF6", "#7C3AED"),
}
DEFAULT_SCHEME = "blue"
RADIUS_RANGE = (2.0, 8.0)
FLAT_RADIUS = 4.0
FLAT_INTENSITY = 0.5


@dataclass(frozen=True)
class BubbleInput:
    region: str
    value: float
    country: str = ""
    revenue: Optional[float] = None
    spend: Optional[float] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None


@dataclass(frozen=True)
class BubblePoint:
    region: str
    country: str
    value: float
    x: float
    y: float
    size: float
    intensity: float
    color_index: int
    color: str
    revenue: Optional[float] = None
    spend: Optional[float] = None
    projected: bool = False


@dataclass(frozen=True)
class BubbleLayout:
    points: List[BubblePoint] = field(default_factory=list)
    unmapped: List[str] = field(default_factory=list)
    min_value: float = 0.0
    max_value: float = 0.0
    total_value: float = 0.0

    @property
    def mapped_count(self) -> int:
        return len(self.points)

    @property
    def unmapped_count(self) -> int:
        return len(self.unmapped)


def color_ramp(scheme: str) -> Tuple[str, ...]:
    return COLOR_SCHEMES.get(scheme, COLOR_SCHEMES[DEFAULT_SCHEME])


def ramp_index(intensity: float, ramp_length: int) -> int:
    if ramp_length <= 0:
        raise ValueError("Color ramp must not be empty")
    index = math.floor(intensity * (ramp_length - 1))
    return max(0, min(index, ramp_length - 1))


def bubble_inputs(aggregates: Iterable[SegmentAggregate], value_field: str = "revenue") -> List[BubbleInput]:
    return [
        BubbleInput(
            region=str(agg.key),
            value=float(getattr(agg, value_field)),
            country=agg.country or "",
            revenue=agg.revenue,
            spend=agg.spend,
            latitude=agg.latitude,
            longitude=agg.longitude,
        )
        for agg in aggregates
    ]


def _place(item: BubbleInput, table: CoordinateTable) -> Optional[Tuple[float, float, str, bool]]:
    coords = lookup_region(table, item.region)
    if coords is not None:
        return float(coords.x), float(coords.y), item.country or coords.country, False
    if item.latitude is not None and item.longitude is not None:
        x, y = project_lat_lon(item.latitude, item.longitude)
        return x, y, item.country, True
    return None


def layout_bubbles(
    inputs: Sequence[BubbleInput],
    coordinate_table: CoordinateTable = REGION_COORDINATES,
    *,
    ramp: Sequence[str] = COLOR_SCHEMES[DEFAULT_SCHEME],
    radius_range: Tuple[float, float] = RADIUS_RANGE,
    flat_radius: float = FLAT_RADIUS,
) -> BubbleLayout:
    candidates = [item for item in inputs if item.value != 0]
    if not candidates:
        return BubbleLayout()

    values = [item.value for item in candidates]
    min_value, max_value = min(values), max(values)
    value_range = max_value - min_value
    lo, hi = radius_range

    points: List[BubblePoint] = []
    unmapped: List[str] = []
    for item in candidates:
        placed = _place(item, coordinate_table)
        if placed is None:
            unmapped.append(item.region)
            continue
        x, y, country, projected = placed

        if value_range > 0:
            intensity = (item.value - min_value) / value_range
            size = lo + (hi - lo) * intensity
        else:
            intensity = FLAT_INTENSITY
            size = flat_radius
        size = max(lo, min(size, hi))
        idx = ramp_index(intensity, len(ramp))
        points.append(
            BubblePoint(
                region=item.region,
                country=country,
                value=item.value,
                x=x,
                y=y,
                size=size,
                intensity=intensity,
                color_index=idx,
                color=ramp[idx],
                revenue=item.revenue,
                spend=item.spend,
                projected=projected,
            )
        )

    if unmapped:
        logger.warning("No coordinates for %d region(s): %s", len(unmapped), ", ".join(unmapped))

    return BubbleLayout(
        points=points,
        unmapped=unmapped,
        min_value=min_value,
        max_value=max_value,
        total_value=sum(p.value for p in points),
    )
