from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from core.bubble_map import COLOR_SCHEMES, DEFAULT_SCHEME
from core.timeseries import DEFAULT_LAST_N


@dataclass(frozen=True)
class ChartSettings:
    weeks: int = DEFAULT_LAST_N
    color_scheme: str = DEFAULT_SCHEME
    bubble_metric: str = "revenue"
    line_height: float = 300.0


@dataclass(frozen=True)
class DashboardFilters:
    selected_campaigns: List[str] = field(default_factory=list)
    selected_devices: List[str] = field(default_factory=list)
    selected_regions: List[str] = field(default_factory=list)
    top_n: int = 50
    charts: ChartSettings = field(default_factory=ChartSettings)


BUBBLE_METRICS = ("revenue", "spend", "impressions", "clicks", "conversions")


def _as_str_list(values: Optional[Iterable[object]]) -> List[str]:
    if not values:
        return []
    return [str(v) for v in values if v is not None and str(v) != ""]


def _as_int(value: object, default: int, lo: int, hi: int) -> int:
    try:
        out = int(value)  # type: ignore[arg-type]
    except Exception:
        out = default
    return max(lo, min(hi, out))


def _as_float(value: object, default: float) -> float:
    try:
        return float(value)  # type: ignore[arg-type]
    except Exception:
        return default


def normalize_filters(raw: Optional[dict]) -> DashboardFilters:
    raw = raw or {}

    c = raw.get("charts") or {}
    scheme = str(c.get("color_scheme") or DEFAULT_SCHEME)
    if scheme not in COLOR_SCHEMES:
        scheme = DEFAULT_SCHEME
    metric = str(c.get("bubble_metric") or "revenue")
    if metric not in BUBBLE_METRICS:
        metric = "revenue"
    # line_height keeps the 40px top/bottom margins usable
    charts = ChartSettings(
        weeks=_as_int(c.get("weeks", DEFAULT_LAST_N), DEFAULT_LAST_N, 1, 520),
        color_scheme=scheme,
        bubble_metric=metric,
        line_height=max(100.0, _as_float(c.get("line_height", 300.0), 300.0)),
    )

    return DashboardFilters(
        selected_campaigns=_as_str_list(raw.get("selected_campaigns")),
        selected_devices=_as_str_list(raw.get("selected_devices")),
        selected_regions=_as_str_list(raw.get("selected_regions")),
        top_n=_as_int(raw.get("top_n", 50), 50, 1, 500),
        charts=charts,
    )
