from __future__ import annotations

import pytest

from core.models import campaign_from_dict


def make_campaign(campaign_id: str, spend: float, revenue: float, **segments) -> dict:
    return {
        "id": campaign_id,
        "name": f"Campaign {campaign_id}",
        "spend": spend,
        "revenue": revenue,
        "demographic_breakdown": segments.get("demographic", []),
        "device_performance": segments.get("device", []),
        "regional_performance": segments.get("regional", []),
        "weekly_performance": segments.get("weekly", []),
    }


def demo(gender: str, age_group: str, share: float, impressions: float, clicks: float, conversions: float) -> dict:
    return {
        "gender": gender,
        "age_group": age_group,
        "percentage_of_audience": share,
        "performance": {"impressions": impressions, "clicks": clicks, "conversions": conversions},
    }


def device(name: str, share: float, impressions: float, clicks: float, conversions: float) -> dict:
    return {
        "device": name,
        "percentage_of_traffic": share,
        "impressions": impressions,
        "clicks": clicks,
        "conversions": conversions,
    }


def region(name: str, country: str, spend: float, revenue: float, impressions: float = 0, clicks: float = 0, conversions: float = 0) -> dict:
    return {
        "region": name,
        "country": country,
        "spend": spend,
        "revenue": revenue,
        "impressions": impressions,
        "clicks": clicks,
        "conversions": conversions,
    }


@pytest.fixture
def two_campaigns():
    """Campaign A and B sharing a male/25-34 segment with differently cased gender labels."""
    return [
        campaign_from_dict(
            make_campaign(
                "A",
                100,
                200,
                demographic=[demo("Male", "25-34", 50, 1000, 50, 5)],
                device=[device("Mobile", 60, 800, 40, 4), device("Desktop", 40, 200, 10, 1)],
                regional=[region("Dubai", "UAE", 60, 150, 700, 35, 3), region("Atlantis", "Nowhere", 40, 50, 300, 15, 2)],
                weekly=[{"week_start": "2024-01-08", "spend": 20, "revenue": 40}, {"week_start": "2024-01-01", "spend": 10, "revenue": 30}],
            )
        ),
        campaign_from_dict(
            make_campaign(
                "B",
                50,
                50,
                demographic=[demo("male", "25-34", 100, 500, 25, 1)],
                device=[device("Mobile", 100, 500, 25, 1)],
                regional=[region("Dubai", "UAE", 50, 50, 500, 25, 1)],
                weekly=[{"week_start": "2024-01-08", "spend": 5, "revenue": 10}],
            )
        ),
    ]
