from __future__ import annotations

import json
import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import pandas as pd

from core.aggregation import demographic_frame, device_frame, regional_frame
from core.filters import DashboardFilters, normalize_filters
from core.models import Campaign, MarketingDataset, dataset_from_dict

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).resolve().parents[1] / "data"
DEFAULT_DATA_FILE = DATA_DIR / "marketing_data.json"
DATA_FILE_ENV = "MARKETING_DATA_FILE"


def get_data_file() -> Path:
    override = os.environ.get(DATA_FILE_ENV, "").strip()
    return Path(override) if override else DEFAULT_DATA_FILE


def file_signature(path: Path) -> Tuple[str, float]:
    return (str(path), path.stat().st_mtime)


def load_dataset(path: Path) -> MarketingDataset:
    with open(path, "r", encoding="utf-8") as f:
        raw = json.load(f)
    if not isinstance(raw, dict):
        raise ValueError(f"Expected a JSON object in {path}")
    return dataset_from_dict(raw)


# ---------------- Public API ----------------
@lru_cache(maxsize=4)
def _load_dashboard_data_cached(file_sig: Tuple[str, float]) -> Dict[str, object]:
    path = Path(file_sig[0])
    dataset = load_dataset(path)
    logger.info("Loaded %d campaign(s) from %s", len(dataset.campaigns), path)
    return {"files": [path.name], "dataset": dataset}


def load_dashboard_data() -> Dict[str, object]:
    path = get_data_file()
    if not path.is_file():
        logger.warning("Marketing data file not found: %s", path)
        return {"files": [], "dataset": MarketingDataset()}
    return _load_dashboard_data_cached(file_signature(path))


def clear_cache() -> None:
    _load_dashboard_data_cached.cache_clear()


def distinct_values(df: pd.DataFrame, col: str) -> List[str]:
    if df.empty or col not in df.columns:
        return []
    return sorted(str(v) for v in df[col].dropna().unique().tolist())


def prepare_context(filters: dict | DashboardFilters, data_ctx: Dict[str, object]) -> Dict[str, object]:
    dataset: MarketingDataset = data_ctx.get("dataset") or MarketingDataset()  # type: ignore[assignment]
    filt = filters if isinstance(filters, DashboardFilters) else normalize_filters(filters)

    campaigns: List[Campaign] = list(dataset.campaigns)
    if filt.selected_campaigns:
        wanted = set(filt.selected_campaigns)
        campaigns = [c for c in campaigns if c.id in wanted or c.name in wanted]

    demographics = demographic_frame(campaigns)

    devices = device_frame(campaigns)
    if filt.selected_devices and not devices.empty:
        devices = devices[devices["device"].isin(filt.selected_devices)]

    regions = regional_frame(campaigns)
    if filt.selected_regions and not regions.empty:
        regions = regions[regions["region"].isin(filt.selected_regions)]

    return {
        "filters": filt,
        "campaigns": campaigns,
        "demographic_segments": demographics,
        "device_segments": devices,
        "regional_segments": regions,
    }


def campaign_options(data_ctx: Dict[str, object]) -> List[Dict[str, str]]:
    dataset: Optional[MarketingDataset] = data_ctx.get("dataset")  # type: ignore[assignment]
    if dataset is None:
        return []
    return [{"id": c.id, "name": c.name} for c in dataset.campaigns]
