from __future__ import annotations

from typing import Iterable

import pandas as pd

from core.models import Campaign

WEEKLY_COLUMNS = ["week_start", "spend", "revenue"]
DEFAULT_LAST_N = 12


def weekly_frame(campaigns: Iterable[Campaign]) -> pd.DataFrame:
    rows = [
        {"week_start": w.week_start, "spend": w.spend, "revenue": w.revenue}
        for c in campaigns
        for w in c.weekly_performance
    ]
    return pd.DataFrame.from_records(rows, columns=WEEKLY_COLUMNS)


def reduce_weekly(campaigns: Iterable[Campaign], last_n: int = DEFAULT_LAST_N) -> pd.DataFrame:
    """Sum spend/revenue per `week_start` across campaigns and keep the latest `last_n` weeks.

    Weeks are matched on the exact `week_start` string and ordered by the
    parsed date, oldest first. Unparseable dates sort first so they never
    displace a dated week from the window.
    """
    df = weekly_frame(campaigns)
    if df.empty or last_n <= 0:
        return pd.DataFrame(columns=WEEKLY_COLUMNS)

    weekly = df.groupby("week_start", sort=False)[["spend", "revenue"]].sum().reset_index()
    weekly["_parsed"] = pd.to_datetime(weekly["week_start"], errors="coerce", format="mixed")
    weekly = weekly.sort_values("_parsed", kind="mergesort", na_position="first")
    return weekly.drop(columns=["_parsed"]).tail(last_n).reset_index(drop=True)
