"""Campaign dataset model.

Raw JSON is coerced into frozen dataclasses here, once. Gender labels are
lower-cased at this point so the aggregation code never has to care about
case; device, age group and region labels are kept exactly as supplied.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, List, Optional, Tuple


class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"


class DeviceFamily(str, Enum):
    MOBILE = "mobile"
    TABLET = "tablet"
    DESKTOP = "desktop"


@dataclass(frozen=True)
class Performance:
    impressions: float = 0.0
    clicks: float = 0.0
    conversions: float = 0.0


@dataclass(frozen=True)
class DemographicSegment:
    gender: str
    age_group: str
    percentage_of_audience: float
    performance: Performance = field(default_factory=Performance)


@dataclass(frozen=True)
class DeviceSegment:
    device: str
    percentage_of_traffic: float
    impressions: float = 0.0
    clicks: float = 0.0
    conversions: float = 0.0


@dataclass(frozen=True)
class RegionalSegment:
    region: str
    country: str
    spend: float = 0.0
    revenue: float = 0.0
    impressions: float = 0.0
    clicks: float = 0.0
    conversions: float = 0.0
    latitude: Optional[float] = None
    longitude: Optional[float] = None


@dataclass(frozen=True)
class WeeklySegment:
    week_start: str
    spend: float = 0.0
    revenue: float = 0.0


@dataclass(frozen=True)
class Campaign:
    id: str
    name: str
    spend: float
    revenue: float
    impressions: float = 0.0
    clicks: float = 0.0
    conversions: float = 0.0
    demographic_breakdown: Tuple[DemographicSegment, ...] = ()
    device_performance: Tuple[DeviceSegment, ...] = ()
    regional_performance: Tuple[RegionalSegment, ...] = ()
    weekly_performance: Tuple[WeeklySegment, ...] = ()


@dataclass(frozen=True)
class MarketingDataset:
    campaigns: Tuple[Campaign, ...] = ()


def normalize_gender(value: object) -> str:
    return str(value or "").strip().lower()


def device_family(device: str) -> DeviceFamily:
    name = (device or "").lower()
    if "mobile" in name or "phone" in name:
        return DeviceFamily.MOBILE
    if "tablet" in name:
        return DeviceFamily.TABLET
    return DeviceFamily.DESKTOP


def _as_float(value: object, default: float = 0.0) -> float:
    if value is None:
        return default
    try:
        return float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return default


def _as_optional_float(value: object) -> Optional[float]:
    if value is None:
        return None
    try:
        return float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None


def _as_label(value: object) -> str:
    return "" if value is None else str(value)


def _records(values: Optional[Iterable[Any]]) -> List[dict]:
    return [v for v in (values or []) if isinstance(v, dict)]


def demographic_from_dict(raw: dict) -> DemographicSegment:
    perf = raw.get("performance") or {}
    return DemographicSegment(
        gender=normalize_gender(raw.get("gender")),
        age_group=_as_label(raw.get("age_group")),
        percentage_of_audience=_as_float(raw.get("percentage_of_audience")),
        performance=Performance(
            impressions=_as_float(perf.get("impressions")),
            clicks=_as_float(perf.get("clicks")),
            conversions=_as_float(perf.get("conversions")),
        ),
    )


def device_from_dict(raw: dict) -> DeviceSegment:
    return DeviceSegment(
        device=_as_label(raw.get("device")),
        percentage_of_traffic=_as_float(raw.get("percentage_of_traffic")),
        impressions=_as_float(raw.get("impressions")),
        clicks=_as_float(raw.get("clicks")),
        conversions=_as_float(raw.get("conversions")),
    )


def regional_from_dict(raw: dict) -> RegionalSegment:
    return RegionalSegment(
        region=_as_label(raw.get("region")),
        country=_as_label(raw.get("country")),
        spend=_as_float(raw.get("spend")),
        revenue=_as_float(raw.get("revenue")),
        impressions=_as_float(raw.get("impressions")),
        clicks=_as_float(raw.get("clicks")),
        conversions=_as_float(raw.get("conversions")),
        latitude=_as_optional_float(raw.get("latitude")),
        longitude=_as_optional_float(raw.get("longitude")),
    )


def weekly_from_dict(raw: dict) -> WeeklySegment:
    return WeeklySegment(
        week_start=_as_label(raw.get("week_start")),
        spend=_as_float(raw.get("spend")),
        revenue=_as_float(raw.get("revenue")),
    )


def campaign_from_dict(raw: dict) -> Campaign:
    campaign_id = _as_label(raw.get("id"))
    return Campaign(
        id=campaign_id,
        name=_as_label(raw.get("name")) or campaign_id,
        spend=_as_float(raw.get("spend")),
        revenue=_as_float(raw.get("revenue")),
        impressions=_as_float(raw.get("impressions")),
        clicks=_as_float(raw.get("clicks")),
        conversions=_as_float(raw.get("conversions")),
        demographic_breakdown=tuple(demographic_from_dict(r) for r in _records(raw.get("demographic_breakdown"))),
        device_performance=tuple(device_from_dict(r) for r in _records(raw.get("device_performance"))),
        regional_performance=tuple(regional_from_dict(r) for r in _records(raw.get("regional_performance"))),
        weekly_performance=tuple(weekly_from_dict(r) for r in _records(raw.get("weekly_performance"))),
    )


def dataset_from_dict(raw: dict) -> MarketingDataset:
    campaigns = raw.get("campaigns", [])
    if not isinstance(campaigns, list):
        raise ValueError("Dataset 'campaigns' must be a list")
    return MarketingDataset(campaigns=tuple(campaign_from_dict(c) for c in _records(campaigns)))
