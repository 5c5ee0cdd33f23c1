from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict

import pandas as pd

from core.aggregation import (
    SegmentAggregate,
    aggregate_age_groups,
    aggregate_age_groups_by_gender,
    aggregate_genders,
    aggregates_to_frame,
    sort_by_revenue,
)
from core.charts import bar_chart, label_value_records
from core.filters import DashboardFilters


def _gender_kpis(agg: SegmentAggregate) -> Dict[str, float]:
    return {
        "clicks": agg.clicks,
        "spend": agg.spend,
        "revenue": agg.revenue,
        "impressions": agg.impressions,
        "conversions": agg.conversions,
    }


def compute_demographics(filters: DashboardFilters, ctx: Dict[str, Any]) -> Dict[str, Any]:
    df: pd.DataFrame = ctx.get("demographic_segments", pd.DataFrame())
    if df.empty:
        return {"filters": asdict(filters), "genders": {}, "age_groups": {}, "age_group_totals": [], "charts": {}}

    genders = aggregate_genders(df)
    by_gender = aggregate_age_groups_by_gender(df)

    # chart order follows first appearance of each age group in the data
    age_totals = aggregates_to_frame(aggregate_age_groups(df).values())
    spend_records = label_value_records(age_totals, "age_group", "spend")
    revenue_records = label_value_records(age_totals, "age_group", "revenue")

    charts: Dict[str, Any] = {}
    spend_chart = bar_chart(spend_records, category_title="Age Group", value_title="Spend", value_format="$~s")
    revenue_chart = bar_chart(revenue_records, category_title="Age Group", value_title="Revenue", value_format="$~s")
    if spend_chart is not None:
        charts["age_group_spend"] = spend_chart
    if revenue_chart is not None:
        charts["age_group_revenue"] = revenue_chart

    return {
        "filters": asdict(filters),
        "genders": {gender: _gender_kpis(agg) for gender, agg in genders.items()},
        "age_groups": {
            gender: [b.to_record() for b in sort_by_revenue(groups)][: filters.top_n]
            for gender, groups in by_gender.items()
        },
        "age_group_totals": age_totals.to_dict(orient="records"),
        "age_group_spend": spend_records,
        "age_group_revenue": revenue_records,
        "charts": charts,
    }
