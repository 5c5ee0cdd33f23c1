"""Group campaign breakdown segments into rate-normalized buckets.

Aggregation runs in two stages over one pandas frame:

1. `_accumulate` sums the counters of every matching segment row into a
   bucket per key (first-seen key order is kept).
2. `_finalize` computes CTR, conversion rate and ROAS once per bucket and
   freezes the result into `SegmentAggregate` values.

Demographic and device rows get their spend/revenue by allocating the
campaign totals by the segment's share. Regional rows already carry absolute
spend/revenue and are summed as-is.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Hashable, Iterable, List, Optional, Sequence, Tuple, Union

import pandas as pd

from core.allocation import allocate_frame
from core.models import Campaign, Gender
from core.rates import percent_column, ratio_column

Key = Union[str, Tuple[str, ...]]
RowFilter = Callable[[pd.DataFrame], pd.Series]

COUNTER_COLUMNS = ["impressions", "clicks", "conversions", "spend", "revenue"]

DEMOGRAPHIC_COLUMNS = [
    "campaign_id",
    "gender",
    "age_group",
    "percentage_of_audience",
    "impressions",
    "clicks",
    "conversions",
    "campaign_spend",
    "campaign_revenue",
]
DEVICE_COLUMNS = [
    "campaign_id",
    "device",
    "percentage_of_traffic",
    "impressions",
    "clicks",
    "conversions",
    "campaign_spend",
    "campaign_revenue",
]
REGIONAL_COLUMNS = [
    "campaign_id",
    "region",
    "country",
    "latitude",
    "longitude",
    "spend",
    "revenue",
    "impressions",
    "clicks",
    "conversions",
]


@dataclass(frozen=True)
class SegmentAggregate:
    key: Key
    dimensions: Tuple[Tuple[str, str], ...]
    impressions: float = 0.0
    clicks: float = 0.0
    conversions: float = 0.0
    spend: float = 0.0
    revenue: float = 0.0
    ctr: float = 0.0
    conversion_rate: float = 0.0
    roas: float = 0.0
    traffic_share: Optional[float] = None
    country: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    @property
    def label(self) -> str:
        return " / ".join(value for _, value in self.dimensions)

    def to_record(self) -> Dict[str, object]:
        record: Dict[str, object] = dict(self.dimensions)
        record.update(
            {
                "impressions": self.impressions,
                "clicks": self.clicks,
                "conversions": self.conversions,
                "spend": self.spend,
                "revenue": self.revenue,
                "ctr": self.ctr,
                "conversion_rate": self.conversion_rate,
                "roas": self.roas,
            }
        )
        if self.traffic_share is not None:
            record["traffic_share"] = self.traffic_share
        if self.country is not None:
            record["country"] = self.country
        return record


# ---------------- Segment frames ----------------
def demographic_frame(campaigns: Iterable[Campaign]) -> pd.DataFrame:
    rows = [
        {
            "campaign_id": c.id,
            "gender": seg.gender,
            "age_group": seg.age_group,
            "percentage_of_audience": seg.percentage_of_audience,
            "impressions": seg.performance.impressions,
            "clicks": seg.performance.clicks,
            "conversions": seg.performance.conversions,
            "campaign_spend": c.spend,
            "campaign_revenue": c.revenue,
        }
        for c in campaigns
        for seg in c.demographic_breakdown
    ]
    df = pd.DataFrame.from_records(rows, columns=DEMOGRAPHIC_COLUMNS)
    return allocate_frame(df, "percentage_of_audience")


def device_frame(campaigns: Iterable[Campaign]) -> pd.DataFrame:
    rows = [
        {
            "campaign_id": c.id,
            "device": seg.device,
            "percentage_of_traffic": seg.percentage_of_traffic,
            "impressions": seg.impressions,
            "clicks": seg.clicks,
            "conversions": seg.conversions,
            "campaign_spend": c.spend,
            "campaign_revenue": c.revenue,
        }
        for c in campaigns
        for seg in c.device_performance
    ]
    df = pd.DataFrame.from_records(rows, columns=DEVICE_COLUMNS)
    return allocate_frame(df, "percentage_of_traffic")


def regional_frame(campaigns: Iterable[Campaign]) -> pd.DataFrame:
    rows = [
        {
            "campaign_id": c.id,
            "region": seg.region,
            "country": seg.country,
            "latitude": seg.latitude,
            "longitude": seg.longitude,
            "spend": seg.spend,
            "revenue": seg.revenue,
            "impressions": seg.impressions,
            "clicks": seg.clicks,
            "conversions": seg.conversions,
        }
        for c in campaigns
        for seg in c.regional_performance
    ]
    return pd.DataFrame.from_records(rows, columns=REGIONAL_COLUMNS)


# ---------------- Fold / finalize ----------------
def _accumulate(
    frame: pd.DataFrame,
    keys: Sequence[str],
    is_match: Optional[RowFilter] = None,
    *,
    extra_sums: Sequence[str] = (),
    extra_firsts: Sequence[str] = (),
) -> pd.DataFrame:
    if frame.empty:
        return pd.DataFrame()
    df = frame
    if is_match is not None:
        df = df[is_match(df).astype(bool)]
        if df.empty:
            return pd.DataFrame()

    named = {col: (col, "sum") for col in [*COUNTER_COLUMNS, *extra_sums]}
    named.update({col: (col, "first") for col in extra_firsts})
    return df.groupby(list(keys), sort=False, dropna=False).agg(**named)


def _finalize(totals: pd.DataFrame, keys: Sequence[str]) -> Dict[Key, SegmentAggregate]:
    if totals.empty:
        return {}
    totals = totals.assign(
        ctr=percent_column(totals["clicks"], totals["impressions"]),
        conversion_rate=percent_column(totals["conversions"], totals["clicks"]),
        roas=ratio_column(totals["revenue"], totals["spend"]),
    )

    out: Dict[Key, SegmentAggregate] = {}
    for raw_key, row in totals.iterrows():
        parts = raw_key if isinstance(raw_key, tuple) else (raw_key,)
        parts = tuple(str(p) for p in parts)
        key: Key = parts if len(keys) > 1 else parts[0]
        out[key] = SegmentAggregate(
            key=key,
            dimensions=tuple(zip(keys, parts)),
            impressions=float(row["impressions"]),
            clicks=float(row["clicks"]),
            conversions=float(row["conversions"]),
            spend=float(row["spend"]),
            revenue=float(row["revenue"]),
            ctr=float(row["ctr"]),
            conversion_rate=float(row["conversion_rate"]),
            roas=float(row["roas"]),
            traffic_share=_optional_float(row.get("traffic_share")),
            country=_optional_str(row.get("country")),
            latitude=_optional_float(row.get("latitude")),
            longitude=_optional_float(row.get("longitude")),
        )
    return out


def _optional_float(value: object) -> Optional[float]:
    if value is None or pd.isna(value):
        return None
    return float(value)


def _optional_str(value: object) -> Optional[str]:
    if value is None or pd.isna(value):
        return None
    return str(value)


def aggregate(
    frame: pd.DataFrame,
    keys: Union[str, Sequence[str]],
    is_match: Optional[RowFilter] = None,
    *,
    extra_sums: Sequence[str] = (),
    extra_firsts: Sequence[str] = (),
) -> Dict[Key, SegmentAggregate]:
    """Fold segment rows into buckets keyed by `keys`, then compute rates.

    `is_match` is an optional row predicate returning a boolean mask, e.g.
    ``lambda df: df["gender"] == "male"``. The returned dict keeps the order in
    which keys were first seen.
    """
    key_cols = [keys] if isinstance(keys, str) else list(keys)
    totals = _accumulate(frame, key_cols, is_match, extra_sums=extra_sums, extra_firsts=extra_firsts)
    return _finalize(totals, key_cols)


def empty_aggregate(key: str, dimension: str) -> SegmentAggregate:
    return SegmentAggregate(key=key, dimensions=((dimension, key),))


# ---------------- Breakdown-specific entry points ----------------
def gender_is(gender: Union[Gender, str]) -> RowFilter:
    value = gender.value if isinstance(gender, Gender) else str(gender).lower()
    return lambda df: df["gender"] == value


def aggregate_genders(frame: pd.DataFrame) -> Dict[str, SegmentAggregate]:
    """Totals for each known gender; a gender with no segments gets an all-zero bucket."""
    out: Dict[str, SegmentAggregate] = {}
    for gender in Gender:
        buckets = aggregate(frame, "gender", gender_is(gender))
        out[gender.value] = buckets.get(gender.value, empty_aggregate(gender.value, "gender"))
    return out


def aggregate_age_groups_by_gender(frame: pd.DataFrame) -> Dict[str, Dict[Key, SegmentAggregate]]:
    """One age-group map per known gender."""
    return {gender.value: aggregate(frame, "age_group", gender_is(gender)) for gender in Gender}


def aggregate_age_groups(frame: pd.DataFrame) -> Dict[Key, SegmentAggregate]:
    return aggregate(frame, "age_group")


def aggregate_devices(frame: pd.DataFrame) -> Dict[Key, SegmentAggregate]:
    # traffic_share is the summed percentage_of_traffic across campaigns
    shares = frame.rename(columns={"percentage_of_traffic": "traffic_share"})
    return aggregate(shares, "device", extra_sums=["traffic_share"])


def aggregate_regions(frame: pd.DataFrame) -> Dict[Key, SegmentAggregate]:
    return aggregate(frame, "region", extra_firsts=["country", "latitude", "longitude"])


# ---------------- Readers ----------------
def sort_by_revenue(buckets: Dict[Hashable, SegmentAggregate]) -> List[SegmentAggregate]:
    return sorted(buckets.values(), key=lambda b: b.revenue, reverse=True)


def aggregates_to_frame(buckets: Iterable[SegmentAggregate]) -> pd.DataFrame:
    return pd.DataFrame.from_records([b.to_record() for b in buckets])


def total_of(buckets: Iterable[SegmentAggregate], field: str) -> float:
    return float(sum(getattr(b, field) for b in buckets))


def average_of(buckets: Iterable[SegmentAggregate], field: str) -> float:
    values = [float(getattr(b, field)) for b in buckets]
    if not values:
        return 0.0
    return sum(values) / len(values)
