from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, List, Optional

import pandas as pd

from core.aggregation import SegmentAggregate, aggregate_regions, average_of, sort_by_revenue, total_of
from core.bubble_map import BubbleLayout, bubble_inputs, color_ramp, layout_bubbles
from core.coordinates import REGION_COORDINATES, CoordinateTable
from core.filters import DashboardFilters
from core.line_chart import LineLayout, layout_line
from core.rates import roas
from core.timeseries import reduce_weekly

LINE_MARGIN = 40.0


def _line_payload(layout: LineLayout) -> Dict[str, Any]:
    return {
        "points": [asdict(p) for p in layout.points],
        "path": layout.path_data,
        "adjusted_min": layout.adjusted_min,
        "adjusted_max": layout.adjusted_max,
        "axis_ticks": layout.axis_ticks(),
    }


def _bubble_payload(layout: BubbleLayout) -> Dict[str, Any]:
    return {
        "points": [asdict(p) for p in layout.points],
        "mapped_count": layout.mapped_count,
        "unmapped_count": layout.unmapped_count,
        "unmapped_regions": list(layout.unmapped),
        "min_value": layout.min_value,
        "max_value": layout.max_value,
        "total_value": layout.total_value,
    }


def _top_region(regions: List[SegmentAggregate]) -> Optional[Dict[str, Any]]:
    if not regions:
        return None
    top = regions[0]
    return {
        "region": str(top.key),
        "country": top.country,
        "revenue": top.revenue,
        "roas": top.roas,
        "conversions": top.conversions,
    }


def compute_regions(
    filters: DashboardFilters,
    ctx: Dict[str, Any],
    *,
    coordinate_table: CoordinateTable = REGION_COORDINATES,
) -> Dict[str, Any]:
    df: pd.DataFrame = ctx.get("regional_segments", pd.DataFrame())
    settings = filters.charts

    weekly = reduce_weekly(ctx.get("campaigns", []), settings.weeks)
    labels = [str(w) for w in weekly["week_start"].tolist()]
    plot_height = max(settings.line_height - 2 * LINE_MARGIN, 1.0)
    weekly_payload = {
        "weeks": weekly.to_dict(orient="records"),
        "spend": _line_payload(layout_line(weekly["spend"].tolist(), labels, plot_height=plot_height, top=LINE_MARGIN)),
        "revenue": _line_payload(layout_line(weekly["revenue"].tolist(), labels, plot_height=plot_height, top=LINE_MARGIN)),
    }

    if df.empty:
        return {
            "filters": asdict(filters),
            "kpis": {},
            "regions": [],
            "weekly": weekly_payload,
            "bubble_map": _bubble_payload(BubbleLayout()),
        }

    buckets = aggregate_regions(df)
    regions = sort_by_revenue(buckets)
    total_spend = total_of(regions, "spend")
    total_revenue = total_of(regions, "revenue")

    bubbles = layout_bubbles(
        bubble_inputs(buckets.values(), settings.bubble_metric),
        coordinate_table,
        ramp=color_ramp(settings.color_scheme),
    )

    return {
        "filters": asdict(filters),
        "kpis": {
            "region_count": len(regions),
            "total_impressions": total_of(regions, "impressions"),
            "total_clicks": total_of(regions, "clicks"),
            "total_spend": total_spend,
            "total_revenue": total_revenue,
            "average_roas": average_of(regions, "roas"),
            "overall_roas": roas(total_revenue, total_spend),
            "top_region": _top_region(regions),
        },
        "regions": [r.to_record() for r in regions[: filters.top_n]],
        "weekly": weekly_payload,
        "bubble_map": _bubble_payload(bubbles),
    }
