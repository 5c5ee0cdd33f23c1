from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict

import pandas as pd

from core.aggregation import aggregate_devices, sort_by_revenue, total_of
from core.charts import bar_chart
from core.filters import DashboardFilters
from core.models import device_family


def compute_devices(filters: DashboardFilters, ctx: Dict[str, Any]) -> Dict[str, Any]:
    df: pd.DataFrame = ctx.get("device_segments", pd.DataFrame())
    if df.empty:
        return {"filters": asdict(filters), "kpis": {}, "devices": [], "charts": {}}

    buckets = aggregate_devices(df)
    devices = sort_by_revenue(buckets)

    rows = []
    for agg in devices[: filters.top_n]:
        record = agg.to_record()
        record["family"] = device_family(str(agg.key)).value
        rows.append(record)

    # bar charts keep first-seen device order, the table is revenue-sorted
    clicks = [{"label": str(k), "value": b.clicks} for k, b in buckets.items()]
    revenue = [{"label": str(k), "value": b.revenue} for k, b in buckets.items()]

    return {
        "filters": asdict(filters),
        "kpis": {
            "device_count": len(devices),
            "total_spend": total_of(devices, "spend"),
            "total_revenue": total_of(devices, "revenue"),
            "total_clicks": total_of(devices, "clicks"),
        },
        "devices": rows,
        "charts": {
            "clicks": bar_chart(clicks, category_title="Device", value_title="Clicks"),
            "revenue": bar_chart(revenue, category_title="Device", value_title="Revenue", value_format="$~s"),
        },
    }
