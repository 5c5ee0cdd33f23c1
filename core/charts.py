from __future__ import annotations

from typing import Any, Dict, List, Optional

import altair as alt
import pandas as pd


def to_vega_spec(chart: alt.Chart) -> Dict[str, Any]:
    """Convert an Altair chart into a Vega-Lite spec dict (JSON-serializable)."""
    return chart.to_dict()


def label_value_records(df: pd.DataFrame, label_col: str, value_col: str) -> List[Dict[str, Any]]:
    if df.empty or label_col not in df.columns or value_col not in df.columns:
        return []
    return [{"label": str(r[label_col]), "value": float(r[value_col])} for _, r in df.iterrows()]


def bar_chart(
    records: List[Dict[str, Any]],
    *,
    category_title: str,
    value_title: str,
    value_format: str = "~s",
) -> Optional[Dict[str, Any]]:
    """Bar chart over `{"label", "value"}` records, in the order given."""
    if not records:
        return None
    df = pd.DataFrame.from_records(records)
    order = df["label"].tolist()
    chart = (
        alt.Chart(df)
        .mark_bar()
        .encode(
            x=alt.X("label:N", title=category_title, sort=order),
            y=alt.Y("value:Q", title=value_title, axis=alt.Axis(format=value_format)),
            tooltip=[
                alt.Tooltip("label:N", title=category_title),
                alt.Tooltip("value:Q", title=value_title, format=value_format),
            ],
        )
    )
    return to_vega_spec(chart)
