from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field


class ChartSettingsModel(BaseModel):
    weeks: int = 12
    color_scheme: str = "blue"
    bubble_metric: str = "revenue"
    line_height: float = 300.0


class DashboardFiltersModel(BaseModel):
    selected_campaigns: List[str] = Field(default_factory=list)
    selected_devices: List[str] = Field(default_factory=list)
    selected_regions: List[str] = Field(default_factory=list)
    top_n: int = 50
    charts: ChartSettingsModel = Field(default_factory=ChartSettingsModel)


class CampaignOption(BaseModel):
    id: str
    name: str


class MetaCampaignsResponse(BaseModel):
    campaigns: List[CampaignOption]


class MetaListResponse(BaseModel):
    values: List[str]
