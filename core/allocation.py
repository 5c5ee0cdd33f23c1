"""Proportional projection of campaign totals onto segments.

Shares are used as declared. Segment shares of one campaign may sum to less
or more than 100, so allocated totals are not reconciled back to the campaign.
"""

from __future__ import annotations

from typing import TypeVar

import pandas as pd

Amount = TypeVar("Amount", float, pd.Series)


def allocate(campaign_total: Amount, percentage_share: Amount) -> Amount:
    """Return `campaign_total * share / 100` (scalars or aligned Series)."""
    return campaign_total * (percentage_share / 100)


def allocate_frame(df: pd.DataFrame, share_col: str) -> pd.DataFrame:
    """Add allocated `spend`/`revenue` columns from campaign totals and a share column."""
    out = df.copy()
    share = pd.to_numeric(out[share_col], errors="coerce").fillna(0.0)
    out["spend"] = allocate(out["campaign_spend"].astype(float), share)
    out["revenue"] = allocate(out["campaign_revenue"].astype(float), share)
    return out
